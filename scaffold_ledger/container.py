"""Wiring of the ledger services around one document store."""

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Any, Callable

from scaffold_ledger.aggregators.cost_aggregator import CostAggregator
from scaffold_ledger.aggregators.recompute_handler import RecomputeHandler
from scaffold_ledger.aggregators.revenue_aggregator import RevenueAggregator
from scaffold_ledger.aggregators.usage_counter import CATALOG_COLLECTIONS, UsageCounter
from scaffold_ledger.ledger.activity_ledger import ActivityLedger
from scaffold_ledger.services.transaction_service import TransactionService
from scaffold_ledger.store import DocumentStore, create_store

logger = logging.getLogger(__name__)


@dataclass
class LedgerServices:
    """Every service of the ledger core, sharing one store.

    Example:
        >>> services = LedgerServices.from_store(InMemoryDocumentStore())
        >>> services.cost_aggregator.recompute_all()
        {}
    """

    store: DocumentStore
    cost_aggregator: CostAggregator
    revenue_aggregator: RevenueAggregator
    recompute_handler: RecomputeHandler
    transactions: TransactionService
    ledger: ActivityLedger

    @classmethod
    def from_store(
        cls,
        store: DocumentStore,
        today: Callable[[], dt.date] = dt.date.today,
    ) -> "LedgerServices":
        cost_aggregator = CostAggregator(store)
        revenue_aggregator = RevenueAggregator(store)
        recompute_handler = RecomputeHandler(cost_aggregator, revenue_aggregator)
        counters = {
            collection: UsageCounter(store, collection)
            for collection in CATALOG_COLLECTIONS
        }
        transactions = TransactionService(store, recompute_handler, counters)
        return cls(
            store=store,
            cost_aggregator=cost_aggregator,
            revenue_aggregator=revenue_aggregator,
            recompute_handler=recompute_handler,
            transactions=transactions,
            ledger=ActivityLedger(store, transactions, today=today),
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "LedgerServices":
        """Build the services on the store selected by the settings."""
        return cls.from_store(create_store(settings))

    def usage_counter(self, collection: str) -> UsageCounter:
        return self.transactions.usage_counters[collection]
