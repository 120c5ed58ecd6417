"""Unit tests for service wiring."""

from unittest.mock import patch

from scaffold_ledger.config.settings import LedgerConfig
from scaffold_ledger.container import LedgerServices
from scaffold_ledger.store import Collections, InMemoryDocumentStore


class TestLedgerServices:
    """Test that every service shares one store."""

    def test_from_store_shares_store(self, store):
        services = LedgerServices.from_store(store)

        assert services.cost_aggregator.store is store
        assert services.revenue_aggregator.store is store
        assert services.transactions.store is store
        assert services.ledger.store is store
        assert services.transactions.recompute_handler is services.recompute_handler
        assert services.ledger.transactions is services.transactions

    def test_usage_counters(self, services):
        vendors = services.usage_counter(Collections.VENDORS)

        assert vendors.collection == Collections.VENDORS
        assert vendors.store is services.store

    def test_from_settings_memory_backend(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "memory")
        settings = LedgerConfig(_env_file=None)

        services = LedgerServices.from_settings(settings)

        assert isinstance(services.store, InMemoryDocumentStore)

    def test_from_settings_firestore_backend(self, monkeypatch, store):
        monkeypatch.setenv("STORE_BACKEND", "firestore")
        monkeypatch.setenv("FIRESTORE_PROJECT_ID", "test-project")
        settings = LedgerConfig(_env_file=None)

        with patch(
            "scaffold_ledger.container.create_store", return_value=store
        ) as create_store:
            services = LedgerServices.from_settings(settings)

        create_store.assert_called_once_with(settings)
        assert services.store is store
