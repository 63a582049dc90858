import io

import pytest
from PIL import Image
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.catalog.models import RewardCategory, RewardProduct


def make_png(name='reward.png', size=(4, 4)):
    """Return a small PNG upload."""
    buffer = io.BytesIO()
    Image.new('RGB', size, color=(164, 116, 73)).save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def rewards_admin(db):
    """Create and return a staff operator."""
    return User.objects.create_user(
        email='catalog-admin@example.com',
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
def png_image():
    return make_png()


@pytest.fixture
def drinks(db):
    return RewardCategory.objects.create(name='Drinks')


@pytest.fixture
def merch(db):
    return RewardCategory.objects.create(name='Merch')


@pytest.fixture
def espresso(drinks):
    """Product without an image in the Drinks category."""
    return RewardProduct.objects.create(name='Espresso', category_name=drinks.name, price=30)
