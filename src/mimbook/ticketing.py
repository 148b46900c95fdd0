"""
Ticketing system record mapping

Translates ticket records (table-API style payloads whose fields are either
plain strings or {"display_value", "value"} objects) into Incident and
Stakeholder models, and builds the follow-up PIR ticket payload. Transport is
left to whatever implements TicketClient.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Protocol

from .models import Incident, Stakeholder

logger = logging.getLogger(__name__)

STATE_MAP = {
    "1": "New",
    "2": "In Progress",
    "3": "On Hold",
    "4": "Awaiting User Info",
    "5": "Awaiting Evidence",
    "6": "Resolved",
    "7": "Closed",
}

PRIORITY_MAP = {
    "1": "1 - Critical",
    "2": "2 - High",
    "3": "3 - Moderate",
    "4": "4 - Low",
    "5": "5 - Planning",
}

IMPACT_MAP = {
    "1": "High",
    "2": "Medium",
    "3": "Low",
}

MAX_GROUP_MEMBERS = 6

FILL_IN = "[FILL IN]"

# Domain for guessed addresses of members without an email on file
PLACEHOLDER_DOMAIN = "company.com"


class TicketClient(Protocol):
    """Operations an orchestration layer provides against the ticketing system"""

    def fetch_incident(self, number: str) -> Mapping[str, Any]: ...

    def fetch_group_members(self, group: str) -> Sequence[Mapping[str, Any]]: ...

    def update_ticket(self, ticket_id: str, work_notes: str) -> None: ...

    def create_followup_ticket(self, payload: Mapping[str, str]) -> str: ...


def field_text(value: Any) -> str:
    """Display text of a record field, which may be a string or a value object"""
    if not value:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return value.get("display_value") or value.get("value") or ""
    return str(value)


def _code(value: Any) -> str:
    if isinstance(value, Mapping):
        return str(value.get("value", ""))
    return str(value) if value is not None else ""


def incident_from_ticket_record(record: Mapping[str, Any]) -> Incident:
    """Map a ticket record to an Incident"""
    severity = _code(record.get("severity"))
    priority = _code(record.get("priority"))
    state = _code(record.get("state"))
    title = field_text(record.get("short_description"))
    impact = IMPACT_MAP.get(_code(record.get("impact")), "High")

    return Incident(
        number=field_text(record.get("number")),
        title=title,
        severity=PRIORITY_MAP.get(severity, f"{severity} - Unknown"),
        priority=PRIORITY_MAP.get(priority, f"{priority} - Unknown"),
        state=STATE_MAP.get(state, state),
        category=field_text(record.get("category")),
        subcategory=field_text(record.get("subcategory")),
        affected_service=field_text(record.get("business_service")) or "[Unknown Service]",
        affected_ci=field_text(record.get("cmdb_ci")) or "[Unknown CI]",
        environment="Production",
        business_impact=(
            field_text(record.get("business_impact")) or f"{impact} impact — {title}"
        ),
        opened_at=field_text(record.get("opened_at")),
        assigned_to=field_text(record.get("assigned_to")),
        assignment_group=field_text(record.get("assignment_group")),
        caller_id=field_text(record.get("caller_id")),
        short_description=title,
        description=field_text(record.get("description")),
    )


def _handle(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", ".", name.lower()).strip(".")


def _member_field(member: Mapping[str, Any], key: str) -> str:
    # Dot-walked fields arrive either nested or flattened as "user.email"
    user = member.get("user")
    if isinstance(user, Mapping) and key in user:
        return field_text(user[key])
    return field_text(member.get(f"user.{key}"))


def stakeholders_from_group_members(
    members: Sequence[Mapping[str, Any]], group: str
) -> list[Stakeholder]:
    """
    Build a provisional roster from an assignment group's members

    The first member becomes Incident Commander and the second Technical Lead;
    both are level 1 and paged immediately. Everyone else is a level 2 On-Call
    Engineer. At most MAX_GROUP_MEMBERS members are used.
    """
    if len(members) > MAX_GROUP_MEMBERS:
        logger.info(
            f"Group '{group}' has {len(members)} members; using the first {MAX_GROUP_MEMBERS}"
        )

    stakeholders = []
    for index, member in enumerate(members[:MAX_GROUP_MEMBERS]):
        name = field_text(member.get("user")) or f"Member {index + 1}"
        if index == 0:
            role = "Incident Commander"
        elif index == 1:
            role = "Technical Lead"
        else:
            role = "On-Call Engineer"
        handle = _handle(name) or f"member.{index + 1}"

        stakeholders.append(
            Stakeholder(
                name=name,
                role=role,
                title=_member_field(member, "title") or FILL_IN,
                team=group,
                email=_member_field(member, "email") or f"{handle}@{PLACEHOLDER_DOMAIN}",
                phone=_member_field(member, "phone") or FILL_IN,
                slack=f"@{handle}",
                escalation_level=1 if index < 2 else 2,
                notify_immediately=index < 2,
            )
        )
    return stakeholders


def pir_ticket_payload(
    incident: Incident, ic: Optional[Stakeholder] = None
) -> dict[str, str]:
    """Problem-record payload for the post-incident review"""
    return {
        "short_description": f"PIR: {incident.title}",
        "description": (
            f"Post-Incident Review for {incident.number} — {incident.title}\n\n"
            f"Severity: {incident.severity}\n"
            f"Affected Service: {incident.affected_service}\n"
            f"Impact: {incident.business_impact}"
        ),
        "problem_state": "1",
        "priority": "2",
        "impact": "1",
        "urgency": "2",
        "cause_notes": f"Related to incident: {incident.number}",
        "assigned_to": ic.name if ic else "",
        "assignment_group": incident.assignment_group,
    }


def runbook_work_note(incident: Incident, runbook_location: Optional[str] = None) -> str:
    """Work note announcing that a runbook was generated for the ticket"""
    note = f"Major incident runbook generated for {incident.number}."
    if runbook_location:
        note += f"\n\nRunbook: {runbook_location}"
    return note
