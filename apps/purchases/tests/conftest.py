import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserAccount
from apps.purchases.models import RewardPurchase, PurchaseStatus


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def rewards_admin(db):
    """Create and return a staff operator."""
    return User.objects.create_user(
        email='purchases-admin@example.com',
        password='TestPass123!',
        is_staff=True,
    )


@pytest.fixture
def admin_client(api_client, rewards_admin):
    """Return API client authenticated as rewards admin."""
    refresh = RefreshToken.for_user(rewards_admin)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def operator_client(api_client, db):
    """Return API client authenticated as a non-staff operator."""
    operator = User.objects.create_user(email='viewer@example.com', password='TestPass123!')
    refresh = RefreshToken.for_user(operator)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def player_account(db):
    """Player with 100 points."""
    return UserAccount.objects.create(user_id='u-100', username='player', amount=100)


@pytest.fixture
def make_purchase(db):
    """Factory for purchases; pending by default."""
    def _make_purchase(**overrides):
        fields = {
            'user_id': 'u-100',
            'username': 'player',
            'reward_name': 'Latte',
            'category_name': 'Drinks',
            'price': 50,
            'status': PurchaseStatus.PENDING,
        }
        fields.update(overrides)
        return RewardPurchase.objects.create(**fields)
    return _make_purchase


@pytest.fixture
def pending_purchase(make_purchase):
    """Pending purchase of 50 points by player_account's user."""
    return make_purchase()
