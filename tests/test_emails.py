"""
Test suite for email template building

Tests recipient rules per phase, rendering of subjects and bodies, and the
template manager.
"""

import pytest

from conftest import make_stakeholder
from mimbook.emails import EmailTemplateBuilder, build_email_templates, collect_addresses, partition_stakeholders
from mimbook.roles import resolve_roles
from mimbook.templating import TemplateManager, format_timestamp


def _build(incident, stakeholders):
    return build_email_templates(incident, stakeholders, resolve_roles(incident, stakeholders))


class TestRecipientRules:
    """Test who each phase notification goes to"""

    def test_initial_notification(self, incident, tiered_stakeholders):
        templates = _build(incident, tiered_stakeholders)

        assert templates[0].to == ["ann@example.com"]
        assert templates[0].cc == ["ben@example.com"]

    def test_war_room_matches_initial(self, incident, tiered_stakeholders):
        templates = _build(incident, tiered_stakeholders)

        assert templates[1].to == templates[0].to
        assert templates[1].cc == templates[0].cc

    def test_status_update(self, incident, tiered_stakeholders):
        templates = _build(incident, tiered_stakeholders)

        assert templates[2].to == ["ann@example.com", "ben@example.com"]
        assert templates[2].cc == ["cat@example.com"]

    def test_service_restored_goes_to_everyone(self, incident, tiered_stakeholders):
        templates = _build(incident, tiered_stakeholders)

        assert templates[4].to == ["ann@example.com", "ben@example.com", "cat@example.com"]
        assert templates[4].cc == []

    def test_mitigation_and_pir(self, incident, tiered_stakeholders):
        templates = _build(incident, tiered_stakeholders)

        for template in (templates[3], templates[5]):
            assert template.to == ["ann@example.com", "ben@example.com"]
            assert template.cc == ["cat@example.com"]

    def test_notify_immediately_level_two_is_deduplicated(self, incident):
        stakeholders = [
            make_stakeholder("Ann", "Incident Commander", 1),
            make_stakeholder("Ben", "Technical Lead", 2, notify=True),
        ]
        templates = _build(incident, stakeholders)

        assert templates[0].to == ["ann@example.com", "ben@example.com"]
        assert templates[2].to == ["ann@example.com", "ben@example.com"]

    def test_empty_roster(self, incident):
        templates = _build(incident, [])

        assert len(templates) == 6
        assert all(t.to == [] and t.cc == [] for t in templates)


class TestTemplateContent:
    """Test rendered subjects and bodies"""

    def test_six_phases_in_order(self, incident, tiered_stakeholders):
        phases = [t.phase for t in _build(incident, tiered_stakeholders)]

        assert phases == [
            "Initial Incident Notification",
            "War Room / Bridge Established",
            "30-Minute Status Update",
            "Mitigation In Progress",
            "Service Restored",
            "Incident Closed + PIR Invitation",
        ]

    def test_color_bands(self, incident, tiered_stakeholders):
        bands = [t.color_band for t in _build(incident, tiered_stakeholders)]
        assert bands == ["red", "red", "amber", "amber", "green", "navy"]

    def test_subject_includes_incident_number(self, incident, tiered_stakeholders):
        for template in _build(incident, tiered_stakeholders):
            assert incident.number in template.subject

    def test_body_uses_roles_and_bridge(self, incident, tiered_stakeholders):
        initial = _build(incident, tiered_stakeholders)[0]

        assert "Ann" in initial.body
        assert "https://zoom.example.com/j/123" in initial.body
        assert "#incinc0001" in initial.body
        assert "{{" not in initial.body

    def test_placeholders_without_roles(self, incident):
        initial = _build(incident, [])[0]

        assert "[INCIDENT COMMANDER]" in initial.body
        assert "[ZOOM_BRIDGE_URL]" in initial.body

    def test_detection_time_has_single_utc_suffix(self, incident, tiered_stakeholders):
        initial = _build(incident, tiered_stakeholders)[0]

        assert "2026-03-01 14:02:00 UTC" in initial.body
        assert "UTC UTC" not in initial.body

    def test_builder_reuses_template_manager(self, incident, tiered_stakeholders):
        manager = TemplateManager()
        builder = EmailTemplateBuilder(manager)

        assert builder.template_manager is manager
        assert len(builder.build(incident, tiered_stakeholders, resolve_roles(incident, tiered_stakeholders))) == 6


class TestGrouping:
    """Test stakeholder partitioning helpers"""

    def test_partition_and_collect(self, tiered_stakeholders):
        groups = partition_stakeholders(tiered_stakeholders)

        assert collect_addresses(groups, ["immediate", "level2"]) == ["ann@example.com", "ben@example.com"]
        assert collect_addresses(groups, []) == []


class TestTemplateManager:
    """Test Jinja2 template loading"""

    def test_meta_for_missing_template(self, tmp_path):
        assert TemplateManager(tmp_path).load_template_meta("emails/nope") == {}

    def test_render_string(self):
        assert TemplateManager().render_string("Hello {{ name }}", {"name": "Ann"}) == "Hello Ann"

    def test_templates_dir_override(self, tmp_path):
        template_dir = tmp_path / "emails" / "custom"
        template_dir.mkdir(parents=True)
        (template_dir / "template.jinja2").write_text("Incident {{ number }}\n", encoding="utf-8")

        assert TemplateManager(tmp_path).render_template("emails/custom", {"number": "INC1"}) == "Incident INC1"

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2026-03-01T14:02:00Z", "2026-03-01 14:02:00 UTC"),
            ("2026-03-01T16:02:00+02:00", "2026-03-01 14:02:00 UTC"),
            ("not a timestamp", "not a timestamp"),
        ],
    )
    def test_format_timestamp(self, value, expected):
        assert format_timestamp(value) == expected
