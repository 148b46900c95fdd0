"""Section 7: resolution criteria, severity downgrade and closing the bridge."""

from ..models import ChecklistItem, ContentBlock, Heading, NumberedStep, Paragraph, Section, TableBlock
from ..roles import name_or, team_or
from .base import SectionContext

TITLE = "Resolution & Validation"

DOWNGRADE_CRITERIA = [
    ["Condition", "Action"],
    ["All health checks pass, no customer impact, stable for 10 min", "Downgrade to Sev2 and continue monitoring"],
    ["Partial restoration (some customers still affected)", "Downgrade to Sev2, keep bridge open, continue investigation"],
    ["Workaround in place (not fully resolved)", "Downgrade to Sev2, open follow-up task for permanent fix"],
]


def build(ctx: SectionContext) -> Section:
    incident = ctx.incident
    ic = ctx.roles.incident_commander
    owner = name_or(ic, "IC")
    team = team_or(ic, "Operations")

    ctx.ledger.add("Resolution", f"Validate {incident.affected_service} end-to-end health checks pass", owner, team, "P1", "T+0 post-fix")
    ctx.ledger.add("Resolution", "Confirm error rate and latency return to baseline", owner, team, "P1", "T+5 post-fix")
    ctx.ledger.add("Resolution", "Run synthetic monitor / smoke test", owner, team, "P1", "T+5 post-fix")
    ctx.ledger.add("Resolution", "Formally downgrade to Sev2 / close bridge once all checks pass", owner, team, "P2", "T+10 post-fix")
    ctx.ledger.add("Resolution", "Send Service Restored notification (Email Template 5)", owner, team, "P1", "T+5 post-fix")

    criteria = [
        f"Health endpoint returns 200 OK: `curl -I https://{incident.affected_ci}/health`",
        f"Synthetic monitor for '{incident.affected_service}' is GREEN (check your monitoring tool)",
        "Error rate has returned to pre-incident baseline (check APM dashboard)",
        "P99 latency has returned to normal range",
        "Customer-facing checkout / primary user flow is functioning end-to-end",
        "Alerting rules are no longer firing",
        "On-call engineer has monitored for 10 minutes with no re-trigger",
        "Business stakeholder (Customer Impact Lead) has confirmed no open customer complaints",
    ]

    blocks: list[ContentBlock] = [
        Paragraph(
            text=(
                f"**Owner**: {name_or(ic, 'Incident Commander')}\n\n"
                "Before declaring the incident resolved, ALL of the following criteria must "
                "be met. Do not close the incident if any item is failing or unclear."
            )
        ),
        Heading(level=2, text="Resolution Criteria Checklist"),
    ]
    blocks.extend(ChecklistItem(text=text) for text in criteria)
    blocks.extend(
        [
            Heading(level=2, text="Severity Downgrade Criteria"),
            TableBlock(rows=DOWNGRADE_CRITERIA),
            Heading(level=2, text="Closing the Bridge"),
            NumberedStep(
                step_number=1,
                text=(
                    'Announce on the bridge: "Service is restored. All health checks passing. '
                    'We are closing the bridge. Thank you everyone."'
                ),
            ),
            NumberedStep(
                step_number=2,
                text=(
                    f"Post in Slack channel {ctx.roles.slack_channel}:\n\n"
                    "```\n"
                    f"✅ INCIDENT RESOLVED: {incident.number}\n"
                    f"Service: {incident.affected_service}\n"
                    "Resolved At: [TIMESTAMP UTC]\n"
                    "Duration: [X hours Y minutes]\n"
                    "Root Cause (preliminary): [ROOT_CAUSE_HYPOTHESIS]\n"
                    "Action Taken: [SUMMARY_OF_FIX]\n"
                    "Next Steps: PIR to be scheduled within 5 business days\n"
                    "```"
                ),
            ),
            NumberedStep(
                step_number=3,
                text="Send the Service Restored email (Template 5 in Section 3).",
            ),
            NumberedStep(
                step_number=4,
                text=(
                    "Stand down all escalated stakeholders — send personal message or call "
                    "to confirm they know the incident is over."
                ),
            ),
        ]
    )

    return Section(section_number=7, title=TITLE, blocks=blocks)
