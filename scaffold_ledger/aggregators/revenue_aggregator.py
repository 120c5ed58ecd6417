"""Revenue aggregator: received income per project.

Mirrors the cost aggregator over the incomes collection. Only incomes in
the ``received`` state count toward actualRevenue.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict

from scaffold_ledger.errors import NotFoundError
from scaffold_ledger.models.project import ProjectRevenueBreakdown
from scaffold_ledger.models.records import IncomeStatus
from scaffold_ledger.store.base import (
    SERVER_TIMESTAMP,
    Collections,
    DocumentStore,
    FieldFilter,
)
from scaffold_ledger.utils.logging_utils import log_calls
from scaffold_ledger.utils.money import round_to_cents, sum_to_cents, to_store_number

logger = logging.getLogger(__name__)


class RevenueAggregator:
    """Recomputes project revenue from the current store state."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def calculate_project_revenue(self, project_id: str) -> Decimal:
        """Rounded sum of received income amounts, without writing."""
        incomes = self.store.query(
            Collections.INCOMES,
            [
                FieldFilter("projectId", project_id),
                FieldFilter("status", IncomeStatus.RECEIVED.value),
            ],
        )
        return sum_to_cents(doc.get("amount") for doc in incomes)

    @log_calls
    def recompute_project_revenue(self, project_id: str) -> Decimal:
        """Recompute and store actualRevenue of one project.

        Args:
            project_id: Project document id

        Returns:
            The revenue written

        Raises:
            NotFoundError: If the project document does not exist
            StoreError: If the store fails
        """
        revenue = self.calculate_project_revenue(project_id)
        self.store.update(
            Collections.PROJECTS,
            project_id,
            {"actualRevenue": to_store_number(revenue), "updatedAt": SERVER_TIMESTAMP},
        )
        logger.info(f"Updated revenue for project {project_id}: {revenue}")
        return revenue

    def recompute_all(self) -> Dict[str, Decimal]:
        """Recompute the revenue of every project, one after another."""
        projects = self.store.query(Collections.PROJECTS)
        results = {
            project.id: self.recompute_project_revenue(project.id)
            for project in projects
        }
        logger.info(f"Recomputed revenue for {len(results)} projects")
        return results

    def revenue_breakdown(self, project_id: str) -> ProjectRevenueBreakdown:
        """Income totals of a project by status.

        Only an explicit status counts; incomes stored without one fall in
        no bucket.

        Raises:
            NotFoundError: If the project document does not exist
        """
        if self.store.get(Collections.PROJECTS, project_id) is None:
            raise NotFoundError(Collections.PROJECTS, project_id)

        incomes = self.store.query(
            Collections.INCOMES, [FieldFilter("projectId", project_id)]
        )
        by_status = defaultdict(list)
        for doc in incomes:
            by_status[doc.get("status")].append(doc.get("amount"))

        return ProjectRevenueBreakdown(
            project_id=project_id,
            received=sum_to_cents(by_status[IncomeStatus.RECEIVED.value]),
            pending=sum_to_cents(by_status[IncomeStatus.PENDING.value]),
            cancelled=sum_to_cents(by_status[IncomeStatus.CANCELLED.value]),
        )
