"""Section 4: diagnosis and investigation, routed by incident category."""

import logging

from ..models import AlertBox, CommandBlock, ContentBlock, Heading, Paragraph, Section
from ..roles import contact_or, name_or, team_or
from .base import SectionContext

logger = logging.getLogger(__name__)

TITLE = "Diagnosis & Investigation Steps"

HYPOTHESIS_LOG = """\
We believe the root cause is: [YOUR HYPOTHESIS]
Evidence supporting this: [LIST EVIDENCE]
Evidence against this: [CONTRADICTORY FINDINGS]
Confidence level: High / Medium / Low
Recommended next action: [SPECIFIC ACTION]"""


def build(ctx: SectionContext) -> Section:
    incident = ctx.incident
    tech = ctx.roles.technical_lead
    ic = ctx.roles.incident_commander
    tech_owner = name_or(tech, "Technical Lead")
    tech_team = team_or(tech, "Engineering")

    ctx.ledger.add("Diagnosis", f"Run initial {incident.category} health check on {incident.affected_ci}", tech_owner, tech_team, "P1", "T+10")
    ctx.ledger.add("Diagnosis", "Collect logs from affected CI and downstream services", tech_owner, tech_team, "P1", "T+15")
    ctx.ledger.add("Diagnosis", "Check recent change/deployment history (last 4 hours)", tech_owner, tech_team, "P1", "T+15")
    ctx.ledger.add("Diagnosis", "Document working hypothesis in Slack channel", name_or(ic, "IC"), team_or(ic, "Operations"), "P2", "T+20")

    logger.debug(f"{incident.number}: diagnosis routed to {ctx.category.value}")

    blocks: list[ContentBlock] = [
        Paragraph(
            text=(
                f"**Owner**: {tech_owner} ({contact_or(tech, 'slack', 'assign tech lead')})\n\n"
                "**Goal of this section**: Understand WHAT is broken and WHY, so you can take "
                "the right containment action. Work through steps in order. Document every "
                "finding in the Slack channel as you go."
            )
        ),
        AlertBox(
            alert_level="info",
            text=(
                "For every check below: state what you expected vs. what you found. 'Good' "
                "means the result matches expected baseline. 'Bad' means it deviates and "
                "needs investigation."
            ),
        ),
    ]
    blocks.extend(ctx.playbook.diagnosis_steps(incident))
    blocks.extend(
        [
            Heading(level=2, text="Root Cause Hypothesis Log"),
            Paragraph(
                text="Before moving to containment, post your working hypothesis in the Slack channel:"
            ),
            CommandBlock(text=HYPOTHESIS_LOG),
        ]
    )

    return Section(section_number=4, title=TITLE, blocks=blocks)
