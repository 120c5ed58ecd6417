"""Dirty-project signals and the handler that recomputes aggregates.

Every mutation that can change a project's money emits a
``ProjectFinancialsDirty`` signal instead of calling an aggregator inline.
The handler runs the matching aggregator. Because recomputes are full
re-scans, handling a signal twice is harmless, so failed signals are kept
and retried.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from scaffold_ledger.aggregators.cost_aggregator import CostAggregator
from scaffold_ledger.aggregators.revenue_aggregator import RevenueAggregator
from scaffold_ledger.errors import NotFoundError, StoreError
from scaffold_ledger.utils.logging_utils import LogContext

logger = logging.getLogger(__name__)


class Aggregate(str, Enum):
    """Derived project figures that can go stale."""

    COST = "cost"
    REVENUE = "revenue"


@dataclass(frozen=True)
class ProjectFinancialsDirty:
    """A project's cost or revenue no longer matches its records."""

    project_id: str
    aggregate: Aggregate

    def __post_init__(self):
        object.__setattr__(self, "aggregate", Aggregate(self.aggregate))


def dirty_signals(
    aggregate: Aggregate, *project_ids: Optional[str]
) -> List[ProjectFinancialsDirty]:
    """Signals for each distinct, non-empty project id, in order."""
    signals: List[ProjectFinancialsDirty] = []
    for project_id in project_ids:
        if not project_id:
            continue
        signal = ProjectFinancialsDirty(project_id, aggregate)
        if signal not in signals:
            signals.append(signal)
    return signals


class RecomputeHandler:
    """Consumes dirty signals by recomputing project aggregates.

    ``handle`` propagates failures to the caller. ``dispatch`` is used for
    side effects of a mutation that already succeeded: a missing project is
    logged and dropped, a store failure is logged and the signal is kept for
    ``retry_pending``.
    """

    def __init__(
        self,
        cost_aggregator: CostAggregator,
        revenue_aggregator: RevenueAggregator,
    ):
        self.cost_aggregator = cost_aggregator
        self.revenue_aggregator = revenue_aggregator
        self._pending: "OrderedDict[ProjectFinancialsDirty, None]" = OrderedDict()

    @property
    def pending(self) -> List[ProjectFinancialsDirty]:
        """Signals whose last recompute failed with a store error."""
        return list(self._pending)

    def handle(self, signal: ProjectFinancialsDirty) -> None:
        """Run the aggregator named by the signal.

        Raises:
            NotFoundError: If the project no longer exists
            StoreError: If the store fails
        """
        aggregate = Aggregate(signal.aggregate)
        with LogContext(project_id=signal.project_id, aggregate=aggregate.value):
            if aggregate == Aggregate.COST:
                self.cost_aggregator.recompute_project_cost(signal.project_id)
            else:
                self.revenue_aggregator.recompute_project_revenue(signal.project_id)

    def dispatch(
        self, signals: Iterable[ProjectFinancialsDirty]
    ) -> List[ProjectFinancialsDirty]:
        """Handle signals without letting recompute failures escape.

        Duplicate signals are handled once, in first-seen order.

        Returns:
            The signals that were recomputed successfully
        """
        handled: List[ProjectFinancialsDirty] = []
        for signal in OrderedDict.fromkeys(signals):
            try:
                self.handle(signal)
            except NotFoundError as e:
                logger.warning(
                    f"Skipping {signal.aggregate.value} recompute for missing project "
                    f"{signal.project_id}: {e}"
                )
                self._pending.pop(signal, None)
            except StoreError as e:
                logger.error(
                    f"{signal.aggregate.value} recompute failed for project "
                    f"{signal.project_id}, will retry: {e}"
                )
                self._pending[signal] = None
            else:
                self._pending.pop(signal, None)
                handled.append(signal)
        return handled

    def retry_pending(self) -> List[ProjectFinancialsDirty]:
        """Re-run every pending signal.

        Returns:
            Signals still pending afterwards
        """
        if self._pending:
            logger.info(f"Retrying {len(self._pending)} pending recomputes")
            self.dispatch(list(self._pending))
        return self.pending
