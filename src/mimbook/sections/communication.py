"""Section 3: communication plan, stakeholder map and email templates."""

from ..models import (
    ContentBlock,
    EmailTemplateBlock,
    Heading,
    NumberedStep,
    Paragraph,
    Section,
    Stakeholder,
    TableBlock,
)
from ..roles import contact_or, name_or, team_or
from .base import SectionContext

TITLE = "Communication Plan"

NOTIFY_WHEN = {
    1: "Immediately (T+0)",
    2: "T+30 or if not resolved",
    3: "T+60 or if escalated",
}


def _role_map_row(stakeholder: Stakeholder) -> list[str]:
    return [
        stakeholder.name,
        stakeholder.role,
        NOTIFY_WHEN[stakeholder.escalation_level],
        stakeholder.notification_method,
        stakeholder.email,
    ]


def build(ctx: SectionContext) -> Section:
    incident = ctx.incident
    comms = ctx.roles.comms_lead
    owner = name_or(comms, "Comms Lead")
    team = team_or(comms, "Communications")

    ctx.ledger.add("Comms", "Send Initial Incident Notification email (Template 1)", owner, team, "P1", "T+5")
    ctx.ledger.add("Comms", "Post Slack message to incident channel", owner, team, "P1", "T+5")
    ctx.ledger.add("Comms", "Send War Room Established email (Template 2)", owner, team, "P1", "T+10")
    ctx.ledger.add("Comms", "Send T+30 Status Update email (Template 3)", owner, team, "P1", "T+30")

    level1_handles = " ".join(
        s.slack for s in ctx.stakeholders if s.escalation_level == 1
    )

    blocks: list[ContentBlock] = [
        Paragraph(
            text=f"**Communication Owner**: {owner} ({contact_or(comms, 'slack', 'assign a comms lead now')})"
        ),
        Paragraph(
            text="**Update Cadence**: Status updates every **30 minutes** until Sev1 is resolved, then final resolution email."
        ),
        Heading(level=2, text="Stakeholder Role Map"),
        TableBlock(
            rows=[["Name", "Role", "Notify When", "Method", "Email"]]
            + [_role_map_row(s) for s in ctx.stakeholders]
        ),
        Heading(level=2, text="Slack Communication Steps"),
        NumberedStep(
            step_number=1,
            text=(
                f"Create Slack channel: **{ctx.roles.slack_channel}** "
                f"(format: `/incident-channel {incident.number}` or create manually)"
            ),
        ),
        NumberedStep(
            step_number=2,
            text=f"Invite the following people to the channel:\n{level1_handles or '[LEVEL 1 SLACK HANDLES]'}",
        ),
        NumberedStep(
            step_number=3,
            text="Pin the Incident Summary message at the top of the channel so all joiners see it immediately.",
        ),
        NumberedStep(
            step_number=4,
            text="Post a status update in the channel every 30 minutes, even if there is nothing new to report. Silence breeds rumour.",
        ),
        Heading(level=2, text="Email Templates"),
        Paragraph(
            text=(
                f"{len(ctx.email_templates)} ready-to-send email templates are provided below — one "
                "for each phase of the incident. Copy-paste the template, fill in the bracketed "
                "placeholders [LIKE THIS], and send."
            )
        ),
    ]
    blocks.extend(EmailTemplateBlock(template=t) for t in ctx.email_templates)

    return Section(section_number=3, title=TITLE, blocks=blocks)
