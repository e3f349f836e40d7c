import pytest
from django.core.cache import cache
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def clear_cache():
    """Rate tables are cached between calls; start every test cold."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """DRF API client."""
    return APIClient()


@pytest.fixture
def admin_user(django_user_model):
    return django_user_model.objects.create_user(
        username="admin",
        email="admin@example.com",
        password="secret",
        first_name="Store",
        last_name="Admin",
        is_staff=True,
    )


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated as a staff user."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client
