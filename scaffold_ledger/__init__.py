"""Scaffold ledger: project financials and unified activity feed.

Subpackages:
- store: document store contract with in-memory and Firestore backends
- aggregators: project cost/revenue recompute and catalog usage counters
- services: transaction mutations, retry handling and error classification
- ledger: merged, filterable, month-grouped activity feed
- cli: command-line entry point
"""

__version__ = "1.0.0"
