"""
Test suite for category routing and playbooks

Tests the routing rules, the playbook registry and the per-category content.
"""

import pytest

from conftest import make_incident
from mimbook.categories import (
    Category,
    CategoryPlaybook,
    PlaybookRegistry,
    get_playbook,
    registry,
    route_category,
)
from mimbook.categories.generic import GenericPlaybook
from mimbook.categories.security import SecurityPlaybook
from mimbook.models import AlertBox, DecisionTree, NumberedStep


class TestRouteCategory:
    """Test routing free-text categories"""

    @pytest.mark.parametrize("text", ["Database", "database outage", "DATABASE"])
    def test_database_variants_route_identically(self, text):
        assert route_category(text) is Category.DATABASE

    def test_same_playbook_for_variants(self):
        playbooks = {id(get_playbook(text)) for text in ["Database", "database outage", "DATABASE"]}
        assert len(playbooks) == 1

    def test_unknown_routes_to_generic(self):
        assert route_category("Unknown-Widget") is Category.GENERIC
        assert isinstance(get_playbook("Unknown-Widget"), GenericPlaybook)

    def test_empty_routes_to_generic(self):
        assert route_category("") is Category.GENERIC

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Network", Category.NETWORK),
            ("Application", Category.APPLICATION),
            ("Cloud/Infra", Category.CLOUD_INFRA),
            ("Infrastructure", Category.CLOUD_INFRA),
            ("Security", Category.SECURITY),
            ("Other", Category.GENERIC),
        ],
    )
    def test_canonical_categories(self, text, expected):
        assert route_category(text) is expected

    def test_priority_order(self):
        # Database is checked before network
        assert route_category("Database network link") is Category.DATABASE


class TestRegistry:
    """Test the playbook registry"""

    def test_every_category_registered(self):
        assert set(registry.categories()) == set(Category)

    def test_register_requires_category(self):
        class Nameless(CategoryPlaybook):
            def diagnosis_steps(self, incident):
                return []

        with pytest.raises(ValueError):
            PlaybookRegistry().register(Nameless)

    def test_missing_category_falls_back_to_generic(self):
        local = PlaybookRegistry()
        local.register(GenericPlaybook)
        assert isinstance(local.get(Category.NETWORK), GenericPlaybook)


class TestPlaybookContent:
    """Test diagnosis and containment content per category"""

    @pytest.mark.parametrize("category", list(Category))
    def test_steps_numbered_from_one(self, category):
        playbook = registry.get(category)
        incident = make_incident(category=category.value)

        for blocks in (playbook.diagnosis_steps(incident), playbook.containment_steps(incident)):
            numbers = [b.step_number for b in blocks if isinstance(b, NumberedStep)]
            assert numbers == list(range(1, len(numbers) + 1))
            assert numbers

    @pytest.mark.parametrize(
        "category",
        [Category.DATABASE, Category.NETWORK, Category.APPLICATION, Category.CLOUD_INFRA, Category.GENERIC],
    )
    def test_decision_tree_has_escalation_arm(self, category):
        blocks = registry.get(category).diagnosis_steps(make_incident())
        trees = [b for b in blocks if isinstance(b, DecisionTree)]

        assert len(trees) == 1
        assert "escalat" in trees[0].branches[-1].action.lower()

    def test_containment_steps_state_impact_and_rollback(self):
        for category in Category:
            for block in registry.get(category).containment_steps(make_incident()):
                if isinstance(block, NumberedStep):
                    assert "**Impact**" in block.text
                    assert "**Rollback**" in block.text

    def test_database_diagnosis_mentions_ci(self):
        blocks = registry.get(Category.DATABASE).diagnosis_steps(make_incident(affected_ci="db-77"))
        assert any("db-77" in b.text for b in blocks if isinstance(b, NumberedStep))


class TestSecurityPlaybook:
    """Test the security stop-and-escalate behaviour"""

    def test_critical_alert_after_all_steps(self):
        blocks = SecurityPlaybook().diagnosis_steps(make_incident(category="Security"))

        assert isinstance(blocks[-1], AlertBox)
        assert blocks[-1].alert_level == "critical"
        assert all(isinstance(b, NumberedStep) for b in blocks[:-1])

    def test_containment_is_generic(self):
        incident = make_incident(category="Security")
        security = registry.get(Category.SECURITY)

        assert not security.has_dedicated_containment
        assert security.containment_steps(incident) == GenericPlaybook().containment_steps(incident)

    def test_other_playbooks_have_dedicated_containment(self):
        for category in (Category.DATABASE, Category.NETWORK, Category.APPLICATION, Category.CLOUD_INFRA):
            assert registry.get(category).has_dedicated_containment
