"""Service construction shared by the CLI commands."""

from scaffold_ledger.cli.error_handlers import ConfigurationError
from scaffold_ledger.config.logging_config import LoggingConfig, configure_logging
from scaffold_ledger.config.settings import get_config
from scaffold_ledger.container import LedgerServices


def build_services() -> LedgerServices:
    """Load settings, configure logging and wire the ledger services.

    Raises:
        ConfigurationError: If ``STORE_BACKEND`` is ``memory``; an in-memory
            store starts empty on every CLI run.
    """
    settings = get_config()
    if settings.store_backend == "memory":
        raise ConfigurationError(
            "The CLI needs a persistent store, but STORE_BACKEND is 'memory'",
            recovery_hint="Set STORE_BACKEND=firestore and FIRESTORE_PROJECT_ID",
        )
    configure_logging(LoggingConfig.from_settings(settings))
    return LedgerServices.from_settings(settings)
