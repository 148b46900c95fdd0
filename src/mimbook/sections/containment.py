"""Section 5: containment and mitigation, routed by incident category."""

from ..models import AlertBox, ContentBlock, Paragraph, Section
from ..roles import name_or, team_or
from .base import SectionContext

TITLE = "Containment & Mitigation Actions"

CAB_POLICY = (
    "CAB Emergency Approval: Some actions below (marked ⚠️ CAB) require Change Advisory "
    "Board emergency approval. To get fast approval: (1) Call the CAB emergency line at "
    "[CAB_PHONE], (2) State incident number and requested change, (3) Get verbal approval "
    "from the CAB chair, (4) Log the change in your ITSM tool immediately after."
)


def build(ctx: SectionContext) -> Section:
    tech = ctx.roles.technical_lead
    owner = name_or(tech, "Technical Lead")
    team = team_or(tech, "Engineering")

    ctx.ledger.add("Containment", "Execute primary containment action (per diagnosis findings)", owner, team, "P1", "T+20")
    ctx.ledger.add("Containment", "Validate containment effectiveness — monitor error rates", owner, team, "P1", "T+30")
    ctx.ledger.add("Containment", "Document all actions taken with exact timestamps in Slack", owner, team, "P2", "T+35")

    blocks: list[ContentBlock] = [
        Paragraph(
            text=(
                f"**Owner**: {owner}\n\n"
                f"**Rule**: Before executing any containment action, announce it in the "
                f"{ctx.roles.slack_channel} Slack channel:\n"
                '> "About to execute: [ACTION]. Expected impact: [IMPACT]. '
                'Rollback plan: [ROLLBACK]. Approvals: [NAMES]"\n\n'
                "For **irreversible or high-risk actions**, obtain verbal approval from the "
                f"Incident Commander ({ctx.roles.ic_name}) and document it in the Slack channel."
            )
        ),
        AlertBox(alert_level="warning", text=CAB_POLICY),
    ]
    # Categories without their own containment content (Security included)
    # inherit the generic steps from CategoryPlaybook
    blocks.extend(ctx.playbook.containment_steps(ctx.incident))

    return Section(section_number=5, title=TITLE, blocks=blocks)
