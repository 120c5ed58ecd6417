"""Unit tests for project and catalog models."""

import datetime as dt
from decimal import Decimal

from scaffold_ledger.models.catalog import CatalogItem
from scaffold_ledger.models.project import Project


class TestProject:
    """Test Project model."""

    def test_from_document_with_missing_figures(self):
        project = Project.from_document("p-1", {"name": "Garage", "budget": 5000})

        assert project.id == "p-1"
        assert project.budget == Decimal("5000")
        assert project.actual_cost == Decimal("0")
        assert project.actual_revenue == Decimal("0")

    def test_non_numeric_budget_reads_as_zero(self):
        project = Project.from_document("p-1", {"budget": "n/a"})
        assert project.budget == Decimal("0")

    def test_dates_truncated_to_day(self):
        project = Project.from_document(
            "p-1",
            {
                "startDate": dt.datetime(2024, 3, 1, 8, 0, tzinfo=dt.timezone.utc),
                "endDate": "2024-06-30T00:00:00Z",
            },
        )
        assert project.start_date == "2024-03-01"
        assert project.end_date == "2024-06-30"

    def test_unknown_fields_ignored(self):
        project = Project.from_document("p-1", {"name": "Garage", "ownerUid": "u-9"})
        assert project.name == "Garage"


class TestCatalogItem:
    """Test CatalogItem model."""

    def test_usage_count_defaults_to_zero(self):
        item = CatalogItem.from_document("v-1", {"name": "Acme"})
        assert item.usage_count == 0

    def test_garbage_counts_read_as_zero(self):
        assert CatalogItem(name="Acme", usage_count="lots").usage_count == 0
        assert CatalogItem(name="Acme", usage_count=-3).usage_count == 0

    def test_to_document(self):
        item = CatalogItem(name="Framing", category_id="c-1", usage_count=2)
        assert item.to_document() == {
            "name": "Framing",
            "categoryId": "c-1",
            "usageCount": 2,
        }
