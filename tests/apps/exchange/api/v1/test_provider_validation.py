import pytest
from rest_framework import status

from apps.exchange.infrastructure.persistence.models import Provider, ProviderName


@pytest.mark.django_db(transaction=True)
class TestProviderPriorityValidation:
    """Tests for provider priority duplicate validation."""

    def setup_method(self):
        """Clean up before each test."""
        Provider.objects.all().delete()

    def test_create_provider_with_unique_priority_success(self, admin_client):
        response = admin_client.post("/api/v1/exchange/providers/", {
            "name": ProviderName.OPEN_ER_API,
            "priority": 1,
            "is_active": True
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert Provider.objects.filter(priority=1).exists()

    def test_create_provider_with_duplicate_priority_fails(self, admin_client):
        """Test creating provider with duplicate priority fails with clear error."""
        Provider.objects.create(name=ProviderName.OPEN_ER_API, priority=1, is_active=True)

        response = admin_client.post("/api/v1/exchange/providers/", {
            "name": ProviderName.CURRENCY_BEACON,
            "priority": 1,
            "is_active": True
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "priority" in response.data
        error_msg = str(response.data["priority"][0]).lower()
        assert "already exists" in error_msg or "already assigned" in error_msg

    def test_update_provider_priority_to_existing_fails(self, admin_client):
        Provider.objects.create(name=ProviderName.OPEN_ER_API, priority=1, is_active=True)
        provider2 = Provider.objects.create(name=ProviderName.CURRENCY_BEACON, priority=2, is_active=True)

        response = admin_client.put(f"/api/v1/exchange/providers/{provider2.id}/", {
            "name": ProviderName.CURRENCY_BEACON,
            "priority": 1,
            "is_active": True
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "priority" in response.data

    def test_update_provider_same_priority_succeeds(self, admin_client):
        """Test updating provider with same priority (no change) succeeds."""
        provider = Provider.objects.create(name=ProviderName.MOCK, priority=1, is_active=True)

        response = admin_client.put(f"/api/v1/exchange/providers/{provider.id}/", {
            "name": ProviderName.MOCK,
            "priority": 1,
            "is_active": False
        })

        assert response.status_code == status.HTTP_200_OK
        provider.refresh_from_db()
        assert provider.is_active is False

    def test_swap_priorities_between_providers(self, admin_client):
        """Test swapping priorities requires going through a free priority."""
        provider1 = Provider.objects.create(name=ProviderName.OPEN_ER_API, priority=1, is_active=True)
        provider2 = Provider.objects.create(name=ProviderName.MOCK, priority=2, is_active=True)

        response = admin_client.patch(f"/api/v1/exchange/providers/{provider1.id}/", {"priority": 2})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        for provider, priority in ((provider1, 999), (provider2, 1), (provider1, 2)):
            response = admin_client.patch(f"/api/v1/exchange/providers/{provider.id}/", {"priority": priority})
            assert response.status_code == status.HTTP_200_OK

        provider1.refresh_from_db()
        provider2.refresh_from_db()
        assert provider1.priority == 2
        assert provider2.priority == 1

    def test_anonymous_cannot_create_provider(self, api_client):
        response = api_client.post("/api/v1/exchange/providers/", {
            "name": ProviderName.MOCK,
            "priority": 1,
            "is_active": True
        })

        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)
        assert not Provider.objects.exists()
