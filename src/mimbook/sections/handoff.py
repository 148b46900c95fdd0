"""Section 8: post-incident handoff, ticket update and PIR."""

from ..models import ChecklistItem, CommandBlock, ContentBlock, Heading, Paragraph, Section
from ..roles import name_or, team_or
from .base import SectionContext

TITLE = "Post-Incident Handoff"

DOCUMENTATION_CHECKLIST = [
    "Complete timeline of events documented (use Slack channel history + action tracker timeline)",
    "All containment actions documented with exact timestamps and who performed them",
    "Root cause hypothesis documented (even if unconfirmed — note confidence level)",
    "Customer impact quantified (number of users, duration, business cost)",
    "Any temporary workarounds noted with follow-up tasks created",
    "All follow-up tickets created and assigned with due dates",
]

CLOSURE_CHECKLIST = [
    'Set State to "Resolved"',
    "Set Close Code to appropriate category (e.g., 'Software', 'Infrastructure', 'User Error')",
    "Fill in Resolution Notes (use template above)",
    "Link PIR Problem ticket in the Related Problems field",
    "Attach this runbook and the action tracker to the ticket",
    "Send Template 6 (PIR Invitation email) to all stakeholders",
    "Archive the Slack incident channel (do NOT delete — retain for audit)",
]

RESOLUTION_NOTES = """\
RESOLUTION NOTES — {number}

Incident opened: [OPENED_TIMESTAMP]
Service restored: [RESOLVED_TIMESTAMP]
Total duration: [X hours Y minutes]

Root Cause (Preliminary):
[DESCRIBE THE ROOT CAUSE - be specific, not generic. Name the component, the failure and the trigger]

Containment Actions Taken:
1. [TIMESTAMP] [ACTION] — performed by [NAME]
2. [TIMESTAMP] [ACTION] — performed by [NAME]

Customer Impact:
- Duration of impact: [X hours Y minutes]
- Services affected: [LIST]
- Estimated users impacted: [NUMBER]

Follow-up Actions (link to tickets):
- [TICKET-XXX]: Root cause investigation
- [TICKET-XXX]: Monitoring/alerting improvements
- [TICKET-XXX]: Process improvements

PIR scheduled: [DATE] [TIME] with [ATTENDEES]"""

PIR_TICKET = """\
PIR TICKET — {number}

Title: PIR: {title}
Category: Problem Management
Priority: 2 - High
Assigned To: {assignee}

Description:
Post-Incident Review for {number} — {title}

Incident Summary:
- Severity: {severity}
- Affected Service: {service}
- Detected: [TIMESTAMP]
- Resolved: [TIMESTAMP]
- Duration: [X hours Y minutes]
- Impact: {impact}

Review Meeting:
- Date: [PIR_DATE] (within 5 business days)
- Duration: 60 minutes
- Attendees: {attendee}, [TECH_LEAD], [COMMS_LEAD], [AFFECTED_TEAM_LEADS]

Agenda:
1. Timeline walkthrough (15 min)
2. Root cause analysis (20 min)
3. What went well (10 min)
4. What to improve (10 min)
5. Action items (5 min)

Pre-reads:
- This runbook: [LINK]
- Incident timeline: [LINK]
- Monitoring dashboard screenshots: [LINK]"""


def build(ctx: SectionContext) -> Section:
    incident = ctx.incident
    ic = ctx.roles.incident_commander
    comms = ctx.roles.comms_lead

    ctx.ledger.add("Resolution", "Update incident ticket with timeline and resolution", name_or(ic, "IC"), team_or(ic, "Operations"), "P2", "T+30 post-fix")
    ctx.ledger.add("Resolution", "Create PIR ticket and schedule PIR meeting", name_or(ic, "IC"), team_or(ic, "Operations"), "P2", "T+2 days")
    ctx.ledger.add("Resolution", "Send PIR invitation email (Template 6)", name_or(comms, "Comms Lead"), team_or(comms, "Communications"), "P2", "T+1 day")

    pir_ticket = PIR_TICKET.format(
        number=incident.number,
        title=incident.title,
        assignee=name_or(ic, "[INCIDENT COMMANDER]"),
        severity=incident.severity,
        service=incident.affected_service,
        impact=incident.business_impact,
        attendee=name_or(ic, "[IC]"),
    )

    blocks: list[ContentBlock] = [
        Paragraph(
            text=(
                f"**Owner**: {name_or(ic, 'Incident Commander')}\n\n"
                f"Complete this section before closing {incident.number} in the ticketing "
                "system. A well-documented post-incident record prevents the same incident "
                "from happening again."
            )
        ),
        Heading(level=2, text="Documentation Before Closing"),
    ]
    blocks.extend(ChecklistItem(text=text) for text in DOCUMENTATION_CHECKLIST)
    blocks.extend(
        [
            Heading(level=2, text="Ticket Resolution Update"),
            Paragraph(
                text=(
                    f"Update ticket **{incident.number}** with the following information:\n\n"
                    "**Resolution Notes Template**:"
                )
            ),
            CommandBlock(text=RESOLUTION_NOTES.format(number=incident.number)),
            Heading(level=2, text="Post-Incident Review (PIR) Ticket"),
            Paragraph(
                text=(
                    "Raise a PIR ticket (Problem record) within 24 hours of resolution. "
                    "Use the template below:"
                )
            ),
            CommandBlock(text=pir_ticket),
            Heading(level=2, text="Ticket Closure Checklist"),
        ]
    )
    blocks.extend(ChecklistItem(text=text) for text in CLOSURE_CHECKLIST)

    return Section(section_number=8, title=TITLE, blocks=blocks)
