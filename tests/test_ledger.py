"""
Test suite for action and escalation ledgers
"""

from conftest import make_stakeholder
from mimbook.ledger import ActionLedger, build_escalation_entries, format_id


class TestActionLedger:
    """Test sequential action ids"""

    def test_ids_are_sequential(self):
        ledger = ActionLedger()
        for n in range(12):
            ledger.add("Triage", f"Action {n}", "Alice", "Ops", "P1", "T+5")

        assert [item.id for item in ledger.items] == [f"ACT-{n:03d}" for n in range(1, 13)]
        assert len(ledger) == 12

    def test_add_returns_item(self):
        item = ActionLedger().add("Comms", "Send email", "Ben", "Comms", "P2", "T+10", notes="Template 1")

        assert item.id == "ACT-001"
        assert item.status == "Open"
        assert item.notes == "Template 1"

    def test_ledgers_are_independent(self):
        first, second = ActionLedger(), ActionLedger()
        first.add("Triage", "a", "x", "y", "P1", "T+1")
        first.add("Triage", "b", "x", "y", "P1", "T+1")

        assert second.add("Triage", "c", "x", "y", "P1", "T+1").id == "ACT-001"

    def test_items_is_a_copy(self):
        ledger = ActionLedger()
        ledger.add("Triage", "a", "x", "y", "P1", "T+1")
        ledger.items.clear()

        assert len(ledger) == 1

    def test_format_id_widens(self):
        assert format_id("ACT", 7) == "ACT-007"
        assert format_id("ACT", 1234) == "ACT-1234"


class TestEscalationEntries:
    """Test one escalation entry per stakeholder"""

    def test_one_entry_per_stakeholder_in_order(self):
        stakeholders = [
            make_stakeholder("A", "IC", 1, notify=True),
            make_stakeholder("B", "Lead", 2),
            make_stakeholder("C", "Exec", 3),
        ]
        entries = build_escalation_entries(stakeholders)

        assert [e.id for e in entries] == ["ESC-001", "ESC-002", "ESC-003"]
        assert [e.contact_name for e in entries] == ["A", "B", "C"]
        assert entries[0].method == "Phone + Slack + Email"
        assert entries[1].method == "Slack + Email"

    def test_empty_roster(self):
        assert build_escalation_entries([]) == []
