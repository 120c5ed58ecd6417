"""Unit tests for catalog usage counters."""

import pytest

from scaffold_ledger.aggregators.usage_counter import UsageCounter
from scaffold_ledger.errors import ValidationError
from scaffold_ledger.store import Collections


@pytest.fixture
def vendors(store):
    return UsageCounter(store, Collections.VENDORS)


class TestUsageCounter:
    """Test usage count maintenance."""

    def test_rejects_other_collections(self, store):
        with pytest.raises(ValueError, match="Not a usage-counted collection"):
            UsageCounter(store, Collections.PROJECTS)

    def test_register_and_increment(self, vendors):
        item = vendors.register("  Home Depot ")

        assert item.name == "Home Depot"
        assert item.usage_count == 0
        assert vendors.increment("Home Depot") == 1
        assert vendors.increment("Home Depot") == 2
        assert vendors.find("Home Depot").usage_count == 2

    def test_decrement_floors_at_zero(self, vendors):
        vendors.register("Acme")

        assert vendors.increment("Acme") == 1
        assert vendors.decrement("Acme") == 0
        assert vendors.decrement("Acme") == 0

    def test_unknown_and_blank_names_are_no_ops(self, store, vendors):
        vendors.register("Acme")
        before = list(store.write_log)

        assert vendors.increment("Nobody") is None
        assert vendors.increment("  ") is None
        assert vendors.decrement(None) is None
        assert store.write_log == before

    def test_rename_moves_one_use(self, vendors):
        vendors.register("Acme")
        vendors.register("Lowe's")
        vendors.increment("Acme")

        vendors.apply_rename("Acme", "Lowe's")

        assert vendors.find("Acme").usage_count == 0
        assert vendors.find("Lowe's").usage_count == 1

    def test_rename_to_same_name_is_no_op(self, store, vendors):
        vendors.register("Acme")
        vendors.increment("Acme")
        before = list(store.write_log)

        vendors.apply_rename("Acme", "Acme")
        vendors.apply_rename(None, "")

        assert store.write_log == before

    def test_register_duplicate_case_insensitive(self, vendors):
        vendors.register("Acme")
        with pytest.raises(ValidationError, match="already exists"):
            vendors.register("ACME ")

    def test_register_blank(self, vendors):
        with pytest.raises(ValidationError, match="cannot be empty"):
            vendors.register("   ")

    def test_list_items_sorted_by_name(self, vendors):
        for name in ("Zeta", "Acme", "Lowe's"):
            vendors.register(name)

        names = [item.name for item in vendors.list_items()]
        assert names == ["Acme", "Lowe's", "Zeta"]

    def test_most_used(self, vendors):
        for name in ("Zeta", "Acme", "Lowe's", "Beta"):
            vendors.register(name)
        for name in ("Zeta", "Zeta", "Acme", "Beta"):
            vendors.increment(name)

        assert [item.name for item in vendors.most_used(limit=3)] == [
            "Zeta",
            "Acme",
            "Beta",
        ]

    def test_subcategory_keeps_category(self, store):
        counter = UsageCounter(store, Collections.EXPENSE_SUBCATEGORIES)

        item = counter.register("Lumber", category_id="materials")

        stored = store.get(Collections.EXPENSE_SUBCATEGORIES, item.id)
        assert stored.get("categoryId") == "materials"
        assert stored.get("usageCount") == 0
        assert stored.get("createdAt") is not None
