import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserAccount


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def rewards_admin(db):
    """Create and return a staff operator."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Rewards Admin',
        is_staff=True,
    )


@pytest.fixture
def operator(db):
    """Create and return a signed-in operator without rewards access."""
    return User.objects.create_user(
        email='operator@example.com',
        password='TestPass123!',
        display_name='Operator',
    )


@pytest.fixture
def admin_client(api_client, rewards_admin):
    """Return API client authenticated as rewards admin."""
    refresh = RefreshToken.for_user(rewards_admin)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def operator_client(api_client, operator):
    """Return API client authenticated as a non-staff operator."""
    refresh = RefreshToken.for_user(operator)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def alice_account(db):
    return UserAccount.objects.create(user_id='u-alice', username='alice', amount=120)


@pytest.fixture
def bob_account(db):
    return UserAccount.objects.create(user_id='u-bob', username='bob', amount=None)
