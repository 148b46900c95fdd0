"""
Test suite for the runbook section builders

Each builder is exercised against a SectionContext directly so that its
blocks and the actions it records can be checked in isolation.
"""

import pytest

from conftest import make_incident, make_stakeholder
from mimbook.categories import Category
from mimbook.emails import build_email_templates
from mimbook.models import (
    AlertBox,
    ChecklistItem,
    CommandBlock,
    EmailTemplateBlock,
    Heading,
    NumberedStep,
    StakeholderSlot,
    TableBlock,
)
from mimbook.roles import resolve_roles
from mimbook.sections import (
    SECTION_BUILDERS,
    SECTION_TITLES,
    SectionContext,
    communication,
    containment,
    diagnosis,
    escalation,
    handoff,
    resolution,
    summary,
    triage,
)


def make_context(incident, stakeholders, vendors=()):
    roles = resolve_roles(incident, stakeholders)
    return SectionContext(
        incident=incident,
        stakeholders=list(stakeholders),
        vendors=list(vendors),
        roles=roles,
        email_templates=build_email_templates(incident, stakeholders, roles),
    )


class TestSectionContext:
    """Test shared builder context"""

    def test_category_routed_once(self, incident, alice):
        ctx = make_context(incident, [alice])

        assert ctx.category is Category.DATABASE
        assert ctx.playbook.category is Category.DATABASE

    def test_each_context_has_its_own_ledger(self, incident, alice):
        first = make_context(incident, [alice])
        second = make_context(incident, [alice])

        assert first.ledger is not second.ledger

    def test_builders_in_runbook_order(self):
        assert len(SECTION_BUILDERS) == 8
        assert SECTION_TITLES[0] == "Incident Summary Banner"
        assert SECTION_TITLES[-1] == "Post-Incident Handoff"


class TestSummarySection:
    """Test section 1"""

    def test_key_value_table(self, incident, alice):
        section = summary.build(make_context(incident, [alice]))
        table = section.blocks_of(TableBlock)[0]
        values = dict(table.body)

        assert values["Incident Number"] == "INC0001"
        assert values["Environment"] == "Production (us-east-1)"
        assert values["Detected At"] == "2026-03-01 14:02:00 UTC"
        assert values["Change Related"] == "No"
        assert values["Related Incident"] == "None"

    def test_critical_alert_and_no_actions(self, incident, alice):
        ctx = make_context(incident, [alice])
        section = summary.build(ctx)

        assert section.blocks_of(AlertBox)[0].alert_level == "critical"
        assert len(ctx.ledger) == 0

    def test_description_optional(self, alice):
        ctx = make_context(make_incident(description=""), [alice])
        texts = [getattr(b, "text", "") for b in summary.build(ctx).blocks]

        assert "**Incident Description**" not in texts


class TestTriageSection:
    """Test section 2"""

    def test_six_steps_and_stakeholder_slot(self, incident, alice):
        ctx = make_context(incident, [alice])
        section = triage.build(ctx)

        steps = section.blocks_of(NumberedStep)
        assert [s.step_number for s in steps] == [1, 2, 3, 4, 5, 6]
        assert steps[0].title.startswith("**T+0")
        assert isinstance(section.blocks[-1], StakeholderSlot)
        assert section.blocks[-1].audience == "immediate"

    def test_ping_and_curl_are_commands(self, incident, alice):
        step = triage.build(make_context(incident, [alice])).blocks_of(NumberedStep)[0]
        commands = [line for is_command, line in step.segments() if is_command]

        assert commands == ["ping db-01", "curl -I https://db-01/health"]

    def test_multiline_impact_does_not_leave_indentation(self, alice):
        incident = make_incident(business_impact="Orders fail\nPayments fail")
        step = triage.build(make_context(incident, [alice])).blocks_of(NumberedStep)[3]
        lines = step.text.split("\n")

        assert lines[2] == "Create channel: #incinc0001"
        assert "Impact: Orders fail" in lines
        assert "Payments fail" in lines
        assert not any(line.startswith(" ") for line in lines)

    def test_triage_actions(self, incident, alice):
        ctx = make_context(incident, [alice])
        triage.build(ctx)

        assert len(ctx.ledger) == 4
        assert {item.phase for item in ctx.ledger.items} == {"Triage"}
        assert ctx.ledger.items[0].owner == "Alice"

    def test_owner_fallback_without_ic(self, incident):
        ctx = make_context(incident, [])
        triage.build(ctx)

        assert ctx.ledger.items[0].owner == "On-Call Engineer"
        assert ctx.ledger.items[0].team == "Operations"


class TestCommunicationSection:
    """Test section 3"""

    def test_embeds_six_templates(self, incident, tiered_stakeholders):
        section = communication.build(make_context(incident, tiered_stakeholders))
        assert len(section.blocks_of(EmailTemplateBlock)) == 6

    def test_role_map(self, incident, tiered_stakeholders):
        section = communication.build(make_context(incident, tiered_stakeholders))
        table = section.blocks_of(TableBlock)[0]

        assert table.header == ["Name", "Role", "Notify When", "Method", "Email"]
        assert table.body[0][2] == "Immediately (T+0)"
        assert table.body[2][2] == "T+60 or if escalated"

    def test_comms_actions_owned_by_comms_lead(self, incident, tiered_stakeholders):
        ctx = make_context(incident, tiered_stakeholders)
        communication.build(ctx)

        assert len(ctx.ledger) == 4
        assert all(item.owner == "Ben" for item in ctx.ledger.items)

    def test_slack_channel_and_invites(self, incident, tiered_stakeholders):
        steps = communication.build(make_context(incident, tiered_stakeholders)).blocks_of(NumberedStep)

        assert "#incinc0001" in steps[0].text
        assert "@ann" in steps[1].text

    def test_invite_placeholder_without_level_one(self, incident):
        ctx = make_context(incident, [make_stakeholder("Ben", "Communications Lead", 2)])
        steps = communication.build(ctx).blocks_of(NumberedStep)

        assert "[LEVEL 1 SLACK HANDLES]" in steps[1].text


class TestDiagnosisSection:
    """Test section 4"""

    def test_database_steps_follow_info_alert(self, incident, alice, bob):
        section = diagnosis.build(make_context(incident, [alice, bob]))

        assert section.blocks_of(AlertBox)[0].alert_level == "info"
        assert section.blocks_of(NumberedStep)[0].title == "**Check cluster/node health.**"
        assert isinstance(section.blocks[-1], CommandBlock)
        assert "We believe the root cause is" in section.blocks[-1].text

    def test_diagnosis_actions(self, incident, alice, bob):
        ctx = make_context(incident, [alice, bob])
        diagnosis.build(ctx)

        owners = [item.owner for item in ctx.ledger.items]
        assert owners == ["Bob", "Bob", "Bob", "Alice"]
        assert ctx.ledger.items[0].action == "Run initial Database health check on db-01"

    def test_security_alert_after_steps(self, alice):
        ctx = make_context(make_incident(category="Security"), [alice])
        blocks = diagnosis.build(ctx).blocks

        critical = [i for i, b in enumerate(blocks) if isinstance(b, AlertBox) and b.alert_level == "critical"]
        step_positions = [i for i, b in enumerate(blocks) if isinstance(b, NumberedStep)]
        assert len(critical) == 1
        assert critical[0] > max(step_positions)


class TestContainmentSection:
    """Test section 5"""

    def test_cab_warning_and_actions(self, incident, alice, bob):
        ctx = make_context(incident, [alice, bob])
        section = containment.build(ctx)

        assert section.blocks_of(AlertBox)[0].alert_level == "warning"
        assert [item.target_by for item in ctx.ledger.items] == ["T+20", "T+30", "T+35"]

    @pytest.mark.parametrize("category", ["Security", "Other", "Unknown-Widget"])
    def test_generic_containment(self, category, alice):
        generic = containment.build(make_context(make_incident(category="Other"), [alice]))
        section = containment.build(make_context(make_incident(category=category), [alice]))

        assert section.blocks_of(NumberedStep) == generic.blocks_of(NumberedStep)


class TestEscalationSection:
    """Test section 6"""

    def test_time_matrix(self, incident, tiered_stakeholders):
        section = escalation.build(make_context(incident, tiered_stakeholders))
        matrix = section.blocks_of(TableBlock)[0]

        assert [row[2] for row in matrix.body] == ["Ann", "Ben", "Cat", "All stakeholders + DRI team"]

    def test_fallback_labels(self, incident, alice):
        matrix = escalation.build(make_context(incident, [alice])).blocks_of(TableBlock)[0]

        assert matrix.body[1][2] == "Level 2 contacts"
        assert matrix.body[2][2] == "Executive team"

    def test_contact_levels(self, incident, tiered_stakeholders):
        contacts = escalation.build(make_context(incident, tiered_stakeholders)).blocks_of(TableBlock)[1]

        assert [row[2] for row in contacts.body] == [
            "Level 1 — Immediate",
            "Level 2 — T+30",
            "Level 3 — T+60+",
        ]

    def test_vendor_table_only_with_vendors(self, incident, alice, vendors):
        without = escalation.build(make_context(incident, [alice]))
        with_vendors = escalation.build(make_context(incident, [alice], vendors))

        assert len(without.blocks_of(TableBlock)) == 2
        assert len(with_vendors.blocks_of(TableBlock)) == 3
        assert with_vendors.blocks_of(TableBlock)[2].body[0][0] == "Oracle Support"

    def test_records_no_actions(self, incident, alice):
        ctx = make_context(incident, [alice])
        escalation.build(ctx)
        assert len(ctx.ledger) == 0


class TestResolutionSection:
    """Test section 7"""

    def test_checklist_and_downgrade_table(self, incident, alice):
        section = resolution.build(make_context(incident, [alice]))

        assert len(section.blocks_of(ChecklistItem)) == 8
        assert section.blocks_of(TableBlock)[0].header == ["Condition", "Action"]
        assert len(section.blocks_of(NumberedStep)) == 4

    def test_resolution_actions(self, incident, alice):
        ctx = make_context(incident, [alice])
        resolution.build(ctx)

        assert len(ctx.ledger) == 5
        assert {item.phase for item in ctx.ledger.items} == {"Resolution"}


class TestHandoffSection:
    """Test section 8"""

    def test_blocks(self, incident, alice):
        section = handoff.build(make_context(incident, [alice]))
        commands = section.blocks_of(CommandBlock)

        assert len(commands) == 2
        assert commands[0].text.startswith("RESOLUTION NOTES — INC0001")
        assert "Assigned To: Alice" in commands[1].text
        assert "Post-Incident Review (PIR) Ticket" in [h.text for h in section.blocks_of(Heading)]

    def test_pir_placeholders_without_ic(self, incident):
        section = handoff.build(make_context(incident, []))
        assert "Assigned To: [INCIDENT COMMANDER]" in section.blocks_of(CommandBlock)[1].text

    def test_handoff_actions(self, incident, alice, tiered_stakeholders):
        ctx = make_context(incident, tiered_stakeholders)
        handoff.build(ctx)

        assert [item.owner for item in ctx.ledger.items] == ["Ann", "Ann", "Ben"]
        assert ctx.ledger.items[1].target_by == "T+2 days"
