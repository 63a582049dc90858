import pytest
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status

from apps.common.exceptions import (
    ValidationError,
    NotFoundError,
    ConflictError,
    PartialFailureError,
    TransportError,
    store_errors,
)
from apps.common.handlers import error_payload, status_for_error


class TestErrorMapping:
    """Tests for handlers.status_for_error and error_payload"""

    @pytest.mark.parametrize('error, expected', [
        (ValidationError('bad'), status.HTTP_400_BAD_REQUEST),
        (NotFoundError('gone'), status.HTTP_404_NOT_FOUND),
        (ConflictError('taken'), status.HTTP_409_CONFLICT),
        (TransportError('down'), status.HTTP_503_SERVICE_UNAVAILABLE),
    ])
    def test_status_for_error(self, error, expected):
        assert status_for_error(error) == expected

    def test_partial_failure_payload(self):
        error = PartialFailureError(
            'half done',
            completed_steps=['status_update'],
            failed_step='balance_refund',
            entity_id='abc',
        )

        assert status_for_error(error) == status.HTTP_207_MULTI_STATUS
        assert error_payload(error) == {
            'error': 'half done',
            'code': 'partial_failure',
            'completed_steps': ['status_update'],
            'failed_step': 'balance_refund',
            'id': 'abc',
        }

    def test_plain_payload(self):
        assert error_payload(NotFoundError('gone')) == {'error': 'gone', 'code': 'not_found'}


class TestStoreErrors:
    """Tests for exceptions.store_errors"""

    def test_translates_database_errors(self):
        @store_errors('load thing')
        def load():
            raise DatabaseError('connection reset')

        with pytest.raises(TransportError) as exc_info:
            load()

        assert 'load thing' in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, DatabaseError)

    def test_leaves_service_errors_alone(self):
        with pytest.raises(NotFoundError):
            with store_errors('load thing'):
                raise NotFoundError('gone')


@pytest.mark.django_db
class TestHealthCheck:
    """Tests for GET /api/health/"""

    def test_health_ok(self, client):
        response = client.get(reverse('health-check'))

        assert response.status_code == 200
        assert response.json() == {'status': 'ok'}
