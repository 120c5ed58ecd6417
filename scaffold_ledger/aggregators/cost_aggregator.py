"""Cost aggregator: labor and approved-expense totals per project.

The derived cost fields on a project document are never adjusted
incrementally. Every recompute re-scans the project's assignments and
expenses and overwrites laborCost, reimbursementCost and actualCost in one
partial update, so running it any number of times converges on the same
values.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Tuple

from scaffold_ledger.errors import NotFoundError
from scaffold_ledger.models.project import Project, ProjectCostBreakdown
from scaffold_ledger.models.records import ExpenseStatus
from scaffold_ledger.store.base import (
    SERVER_TIMESTAMP,
    Collections,
    DocumentStore,
    FieldFilter,
)
from scaffold_ledger.utils.logging_utils import log_calls
from scaffold_ledger.utils.money import (
    ZERO,
    round_to_cents,
    sum_to_cents,
    to_store_number,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectCosts:
    """Cost fields written to a project document.

    Attributes:
        labor_cost: Rounded sum of assignment daily rates
        reimbursement_cost: Rounded sum of approved expense amounts
        actual_cost: Rounded labor_cost + reimbursement_cost
    """

    labor_cost: Decimal
    reimbursement_cost: Decimal
    actual_cost: Decimal

    def to_document(self) -> dict:
        return {
            "actualCost": to_store_number(self.actual_cost),
            "laborCost": to_store_number(self.labor_cost),
            "reimbursementCost": to_store_number(self.reimbursement_cost),
            "updatedAt": SERVER_TIMESTAMP,
        }


class CostAggregator:
    """Recomputes project cost from the current store state.

    Example:
        >>> aggregator = CostAggregator(store)
        >>> aggregator.recompute_project_cost("p-1").actual_cost
        Decimal('1230.50')
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def _cost_components(self, project_id: str) -> Tuple[Decimal, Decimal]:
        project_filter = [FieldFilter("projectId", project_id)]

        assignments = self.store.query(Collections.TASK_ASSIGNMENTS, project_filter)
        labor_cost = sum_to_cents(doc.get("dailyRate") for doc in assignments)

        expenses = self.store.query(
            Collections.EXPENSES,
            project_filter + [FieldFilter("status", ExpenseStatus.APPROVED.value)],
        )
        reimbursement_cost = sum_to_cents(doc.get("amount") for doc in expenses)

        logger.debug(
            f"Project {project_id}: {len(assignments)} assignments, "
            f"{len(expenses)} approved expenses"
        )
        return labor_cost, reimbursement_cost

    def calculate_project_cost(self, project_id: str) -> ProjectCosts:
        """Compute the cost fields without writing them."""
        labor_cost, reimbursement_cost = self._cost_components(project_id)
        return ProjectCosts(
            labor_cost=labor_cost,
            reimbursement_cost=reimbursement_cost,
            actual_cost=round_to_cents(labor_cost + reimbursement_cost),
        )

    @log_calls
    def recompute_project_cost(self, project_id: str) -> ProjectCosts:
        """Recompute and store the cost fields of one project.

        Args:
            project_id: Project document id

        Returns:
            The values written

        Raises:
            NotFoundError: If the project document does not exist
            StoreError: If the store fails
        """
        costs = self.calculate_project_cost(project_id)
        self.store.update(Collections.PROJECTS, project_id, costs.to_document())
        logger.info(
            f"Updated cost for project {project_id}: actual={costs.actual_cost} "
            f"(labor={costs.labor_cost}, reimbursement={costs.reimbursement_cost})"
        )
        return costs

    def recompute_all(self) -> Dict[str, ProjectCosts]:
        """Recompute the cost of every project, one after another."""
        projects = self.store.query(Collections.PROJECTS)
        results = {}
        for project in projects:
            results[project.id] = self.recompute_project_cost(project.id)
        logger.info(f"Recomputed cost for {len(results)} projects")
        return results

    def cost_breakdown(self, project_id: str) -> ProjectCostBreakdown:
        """Compare a project's current cost with its budget.

        Raises:
            NotFoundError: If the project document does not exist
        """
        document = self.store.get(Collections.PROJECTS, project_id)
        if document is None:
            raise NotFoundError(Collections.PROJECTS, project_id)
        project = Project.from_document(document.id, document.data)

        costs = self.calculate_project_cost(project_id)
        budget = project.budget
        percent_used = ZERO
        if budget > 0:
            percent_used = round_to_cents(costs.actual_cost / budget * 100)

        return ProjectCostBreakdown(
            project_id=project_id,
            labor_cost=costs.labor_cost,
            reimbursement_cost=costs.reimbursement_cost,
            total_cost=costs.actual_cost,
            budget=budget,
            remaining=round_to_cents(budget - costs.actual_cost),
            percent_used=percent_used,
        )
