"""
Test suite for Markdown rendering
"""

from conftest import make_incident
from mimbook import generate, runbook_to_markdown
from mimbook.markdown import render_table
from mimbook.models import BulletList


class TestRunbookToMarkdown:
    """Test rendering a generated runbook"""

    def test_header(self, incident, alice):
        markdown = runbook_to_markdown(generate(incident, [alice]))
        lines = markdown.splitlines()

        assert lines[0] == "# Major Incident Runbook — INC0001"
        assert lines[1].startswith("> Generated: ")
        assert lines[1].endswith(" GMT")
        assert lines[2] == "> Incident Commander: Alice"

    def test_ic_tbd_without_roster(self, incident):
        assert "> Incident Commander: TBD" in runbook_to_markdown(generate(incident, []))

    def test_section_headings(self, incident, alice):
        markdown = runbook_to_markdown(generate(incident, [alice]))

        assert "## 1. Incident Summary Banner" in markdown
        assert "## 8. Post-Incident Handoff" in markdown
        assert markdown.count("\n---\n") >= 8

    def test_stakeholder_slot_resolved(self, incident, tiered_stakeholders):
        markdown = runbook_to_markdown(generate(incident, tiered_stakeholders))

        assert "| Name | Role | Slack | Phone |" in markdown
        assert "| Ann | Incident Commander | @ann | +1-555-0100 |" in markdown

    def test_alerts_and_checklists(self, incident, alice):
        markdown = runbook_to_markdown(generate(incident, [alice]))

        assert "> 🔴 **CRITICAL**:" in markdown
        assert "> 🟡 **WARNING**:" in markdown
        assert "> 🔵 **INFO**:" in markdown
        assert "- [ ] P99 latency has returned to normal range" in markdown

    def test_step_commands_fenced(self, incident, alice):
        markdown = runbook_to_markdown(generate(incident, [alice]))

        assert "**Step 1:** **T+0 — Confirm the alert is genuine.**" in markdown
        assert "```\nping db-01\ncurl -I https://db-01/health\n```" in markdown

    def test_email_templates(self, incident, tiered_stakeholders):
        markdown = runbook_to_markdown(generate(incident, tiered_stakeholders))

        assert "### 📧 Email Template: Initial Incident Notification" in markdown
        assert "**To**: ann@example.com" in markdown
        assert "**CC**: ben@example.com" in markdown

    def test_decision_tree(self, incident, alice):
        markdown = runbook_to_markdown(generate(incident, [alice]))
        assert "- If **Connection pool exhausted, DB nodes healthy** → " in markdown

    def test_action_tracker(self, incident, alice):
        runbook = generate(incident, [alice])

        with_tracker = runbook_to_markdown(runbook)
        without_tracker = runbook_to_markdown(runbook, include_tracker=False)

        assert "## Action Tracker" in with_tracker
        assert "| ACT-001 | Triage |" in with_tracker
        assert "## Action Tracker" not in without_tracker

    def test_vendor_table_rendered(self, alice, vendors):
        markdown = runbook_to_markdown(generate(make_incident(), [alice], vendors))
        assert "| Oracle Support | CSI-12345 |" in markdown

    def test_bullet_list(self, incident, alice):
        runbook = generate(incident, [alice])
        first = runbook.sections[0]
        bulleted = first.model_copy(
            update={"blocks": [*first.blocks, BulletList(items=["Orders failing", "Payments delayed"])]}
        )
        runbook = runbook.model_copy(update={"sections": [bulleted, *runbook.sections[1:]]})

        assert "- Orders failing\n- Payments delayed" in runbook_to_markdown(runbook)

    def test_fenced_command_indentation_kept(self, alice):
        markdown = runbook_to_markdown(generate(make_incident(category="Database"), [alice]))

        assert "\n  --application-name [APP_NAME] \\\n" in markdown
        assert "kubectl rollout status deployment/db-01 -n production\n\n# AWS CodeDeploy:" in markdown


class TestRenderTable:
    """Test Markdown table rendering"""

    def test_separator_row(self):
        assert render_table([["a", "b"], ["1", "2"]]) == ["| a | b |", "| --- | --- |", "| 1 | 2 |"]

    def test_empty(self):
        assert render_table([]) == []

    def test_escapes_pipes_and_newlines(self):
        lines = render_table([["h"], ["a|b\nc"]])
        assert lines[2] == "| a\\|b<br>c |"
