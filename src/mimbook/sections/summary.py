"""Section 1: incident summary banner."""

from ..models import AlertBox, ContentBlock, Paragraph, Section, TableBlock
from ..templating import format_timestamp
from .base import SectionContext

TITLE = "Incident Summary Banner"


def build(ctx: SectionContext) -> Section:
    incident = ctx.incident
    change_related = (
        "YES — investigate recent changes" if incident.change_related else "No"
    )

    blocks: list[ContentBlock] = [
        TableBlock(
            rows=[
                ["Field", "Value"],
                ["Incident Number", incident.number],
                ["Title", incident.title],
                ["Severity", incident.severity],
                ["Priority", incident.priority],
                ["State", incident.state],
                ["Affected Service", incident.affected_service],
                ["Affected CI / Resource", incident.affected_ci],
                ["Environment", incident.environment_label],
                ["Category", f"{incident.category} / {incident.subcategory}"],
                ["Assigned To", incident.assigned_to],
                ["Assignment Group", incident.assignment_group],
                ["Reported By", incident.caller_id],
                ["Opened At", format_timestamp(incident.opened_at)],
                ["Detected At", format_timestamp(incident.detection_time)],
                ["Change Related", change_related],
                ["Related Incident", incident.related_incident or "None"],
            ]
        ),
        Paragraph(text="**Business Impact**"),
        Paragraph(text=incident.business_impact),
        AlertBox(
            alert_level="critical",
            text=(
                f"⚠️  This is a Severity {incident.severity} incident. Every minute of "
                "delay costs revenue and customer trust. Follow this runbook from top "
                "to bottom without skipping steps."
            ),
        ),
    ]

    if incident.description:
        blocks.append(Paragraph(text="**Incident Description**"))
        blocks.append(Paragraph(text=incident.description))

    return Section(section_number=1, title=TITLE, blocks=blocks)
