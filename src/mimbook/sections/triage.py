"""Section 2: immediate triage checklist for the first five minutes."""

from ..models import AlertBox, ContentBlock, NumberedStep, Section, StakeholderSlot, dedent_step
from ..roles import contact_or, name_or, team_or
from .base import SectionContext

TITLE = "Immediate Triage Checklist (First 5 Minutes)"


def _add_actions(ctx: SectionContext) -> None:
    ic = ctx.roles.incident_commander
    owner = name_or(ic, "On-Call Engineer")
    team = team_or(ic, "Operations")
    ci = ctx.incident.affected_ci

    ctx.ledger.add("Triage", f"Confirm alert is genuine — check {ci} directly", owner, team, "P1", "T+2")
    ctx.ledger.add("Triage", "Assess blast radius — identify all affected services and users", owner, team, "P1", "T+3")
    ctx.ledger.add("Triage", "Open Zoom bridge and Slack incident channel", owner, team, "P1", "T+5")
    ctx.ledger.add("Triage", "Page all immediate-notify stakeholders", owner, team, "P1", "T+5")


def _steps(ctx: SectionContext) -> list[str]:
    incident = ctx.incident
    roles = ctx.roles
    ic = roles.incident_commander
    ci = incident.affected_ci
    ic_intro = (
        f"{ic.name} is the Incident Commander."
        if ic
        else "We need to assign an Incident Commander now."
    )

    return [
        f"""
        **T+0 — Confirm the alert is genuine.**

        Check that {ci} is actually unreachable or degraded. Do NOT assume the monitoring tool is always right — false positives happen.

        ping {ci}
        curl -I https://{ci}/health

        If the CI responds normally → the alert may be a false positive. Acknowledge in monitoring and add a note to {incident.number} before standing down.
        """,
        f"""
        **T+1 — Check the monitoring dashboard.**

        Open the primary monitoring dashboard for '{incident.affected_service}'. Look for:
        • Red/critical alerts in the last 15 minutes
        • Any correlated alerts (DB + App + Network firing together suggests a larger blast radius)
        • Comparison to baseline from same time yesterday
        """,
        f"""
        **T+2 — Assess blast radius.**

        Answer these questions before joining the bridge:
        • How many users/customers are affected? (check active sessions, error rates)
        • What downstream services depend on '{ci}'?
        • Is this isolated to one region ({incident.region or "check all regions"}) or multi-region?
        • Are any other Sev1/Sev2 incidents currently open that could be related?
        """,
        f"""
        **T+3 — Open the incident Slack channel.**

        Create channel: {roles.slack_channel}

        Paste this message as the first post:

        ```
        🚨 INCIDENT OPEN: {incident.number}
        Severity: {incident.severity}
        Service: {incident.affected_service}
        CI: {ci}
        Impact: {incident.business_impact}
        Bridge: {roles.bridge_url}
        Runbook: [paste link to this document]
        IC: {roles.ic_name if ic else "[Incident Commander]"} ({contact_or(ic, "slack", "[slack handle]")})
        ```
        """,
        f"""
        **T+4 — Join the Zoom bridge call.**

        Bridge URL: {roles.bridge_url}
        Dial-in: {roles.bridge_phone}

        When you join, say:
        > "This is [YOUR NAME], I'm the on-call engineer. I'm declaring this a Sev1 for {incident.affected_service}. Incident number {incident.number}. {ic_intro} I'll begin triage while the team joins."

        Record the exact time you joined.
        """,
        """
        **T+5 — Page immediate-notify stakeholders.**

        The following people must be notified RIGHT NOW (use phone if Slack is unresponsive):
        """,
    ]


def build(ctx: SectionContext) -> Section:
    _add_actions(ctx)

    blocks: list[ContentBlock] = [
        AlertBox(
            alert_level="warning",
            text=(
                "Complete all steps in this section within 5 minutes of picking up the "
                "alert. Do not investigate root cause yet — your goal is to confirm, "
                "assess, and mobilise."
            ),
        )
    ]
    for number, text in enumerate(_steps(ctx), 1):
        blocks.append(
            NumberedStep(step_number=number, text=dedent_step(text))
        )

    # Filled with the immediate-notify contacts by the renderer
    blocks.append(StakeholderSlot(audience="immediate"))

    return Section(section_number=2, title=TITLE, blocks=blocks)
