"""Unit tests for CLI service construction."""

from unittest.mock import patch

import pytest

from scaffold_ledger.cli.error_handlers import ConfigurationError
from scaffold_ledger.cli.utils.context import build_services
from scaffold_ledger.store import FirestoreDocumentStore


class TestBuildServices:
    """Test the store backend check in build_services."""

    def test_memory_backend_refused(self, mock_env):
        """A CLI run on the in-memory store would always see an empty ledger."""
        with patch("scaffold_ledger.cli.utils.context.configure_logging") as configure:
            with pytest.raises(ConfigurationError) as exc_info:
                build_services()

        assert "STORE_BACKEND" in exc_info.value.message
        assert "STORE_BACKEND=firestore" in exc_info.value.recovery_hint
        configure.assert_not_called()

    def test_firestore_backend(self, mock_env, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "firestore")

        with patch("scaffold_ledger.cli.utils.context.configure_logging") as configure:
            services = build_services()

        configure.assert_called_once()
        assert isinstance(services.store, FirestoreDocumentStore)
        assert services.store.project_id == "test-project"
