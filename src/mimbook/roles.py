"""
Role resolution from the stakeholder roster

Roles are free text, so resolution is a case-insensitive substring match and
the first matching stakeholder in roster order wins.
"""

import logging
import re
from collections.abc import Sequence
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .models import Incident, Stakeholder

logger = logging.getLogger(__name__)

INCIDENT_COMMANDER = "Incident Commander"
TECHNICAL_LEAD = "Technical Lead"
COMMUNICATIONS_LEAD = "Communications Lead"
CUSTOMER_IMPACT = "Customer Impact"
EXECUTIVE_SPONSOR = "Executive Sponsor"

REQUIRED_ROLES = (INCIDENT_COMMANDER, TECHNICAL_LEAD, COMMUNICATIONS_LEAD)

BRIDGE_URL_PLACEHOLDER = "[ZOOM_BRIDGE_URL]"
BRIDGE_PHONE_PLACEHOLDER = "[BRIDGE_DIAL_IN]"


class ResolvedRoles(BaseModel):
    """Named roles and bridge details derived from one roster"""

    model_config = ConfigDict(frozen=True)

    incident_commander: Optional[Stakeholder] = None
    technical_lead: Optional[Stakeholder] = None
    comms_lead: Optional[Stakeholder] = None
    customer_impact_lead: Optional[Stakeholder] = None
    executive_sponsor: Optional[Stakeholder] = None
    bridge_holder: Optional[Stakeholder] = None
    bridge_url: str = BRIDGE_URL_PLACEHOLDER
    bridge_phone: str = BRIDGE_PHONE_PLACEHOLDER
    slack_channel: str

    # Owner labels used when a role has nobody assigned

    @property
    def ic_name(self) -> str:
        return name_or(self.incident_commander, INCIDENT_COMMANDER)

    @property
    def tech_lead_name(self) -> str:
        return name_or(self.technical_lead, TECHNICAL_LEAD)

    @property
    def comms_name(self) -> str:
        return name_or(self.comms_lead, "Comms Lead")

    @property
    def sign_off(self) -> str:
        """Name used to sign outgoing emails"""
        for candidate in (self.comms_lead, self.incident_commander):
            if candidate is not None:
                return candidate.name
        return "Incident Response Team"


def find_by_role(
    stakeholders: Sequence[Stakeholder], role_keyword: str
) -> Optional[Stakeholder]:
    """Return the first stakeholder whose role contains the keyword"""
    keyword = role_keyword.lower()
    for stakeholder in stakeholders:
        if keyword in stakeholder.role.lower():
            return stakeholder
    return None


def slack_channel_for(incident_number: str) -> str:
    """Chat channel name, e.g. INC0078342 -> #incinc0078342"""
    return "#inc" + re.sub(r"[^a-z0-9]", "", incident_number.lower())


def name_or(stakeholder: Optional[Stakeholder], fallback: str) -> str:
    return stakeholder.name if stakeholder else fallback


def team_or(stakeholder: Optional[Stakeholder], fallback: str) -> str:
    return stakeholder.team if stakeholder else fallback


def contact_or(
    stakeholder: Optional[Stakeholder], attribute: str, placeholder: str
) -> str:
    """Contact field of a stakeholder, or a bracketed placeholder"""
    if stakeholder is None:
        return placeholder
    return getattr(stakeholder, attribute) or placeholder


def resolve_roles(
    incident: Incident, stakeholders: Sequence[Stakeholder]
) -> ResolvedRoles:
    """Resolve every named role for a generation pass; never raises"""
    ic = find_by_role(stakeholders, INCIDENT_COMMANDER)
    bridge_holder = next((s for s in stakeholders if s.bridge_url), ic)

    roles = ResolvedRoles(
        incident_commander=ic,
        technical_lead=find_by_role(stakeholders, TECHNICAL_LEAD),
        comms_lead=find_by_role(stakeholders, COMMUNICATIONS_LEAD),
        customer_impact_lead=find_by_role(stakeholders, CUSTOMER_IMPACT),
        executive_sponsor=find_by_role(stakeholders, EXECUTIVE_SPONSOR),
        bridge_holder=bridge_holder,
        bridge_url=contact_or(bridge_holder, "bridge_url", BRIDGE_URL_PLACEHOLDER),
        bridge_phone=contact_or(
            bridge_holder, "bridge_phone", BRIDGE_PHONE_PLACEHOLDER
        ),
        slack_channel=slack_channel_for(incident.number),
    )

    missing = [
        role
        for role, found in zip(
            REQUIRED_ROLES,
            (roles.incident_commander, roles.technical_lead, roles.comms_lead),
        )
        if found is None
    ]
    if missing:
        logger.info(f"No stakeholder for {', '.join(missing)}; using placeholders")
    return roles
