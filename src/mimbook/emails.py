"""
Email template builder

Produces the six phase notifications of a Sev1 incident. Recipient lists are
derived from stakeholder escalation levels; bodies and subjects come from the
Jinja2 templates under templates/emails/.
"""

import logging
from collections.abc import Sequence
from typing import Optional

from .models import EmailTemplate, Incident, Stakeholder
from .roles import ResolvedRoles
from .templating import TemplateManager

logger = logging.getLogger(__name__)

# Recipient groups
IMMEDIATE = "immediate"
LEVEL_2 = "level2"
LEVEL_3 = "level3"
ALL = "all"

# (template key, to-groups, cc-groups), in send order
EMAIL_PHASES: tuple[tuple[str, tuple[str, ...], tuple[str, ...]], ...] = (
    ("emails/initial_notification", (IMMEDIATE,), (LEVEL_2,)),
    ("emails/war_room", (IMMEDIATE,), (LEVEL_2,)),
    ("emails/status_update", (IMMEDIATE, LEVEL_2), (LEVEL_3,)),
    ("emails/mitigation", (IMMEDIATE, LEVEL_2), (LEVEL_3,)),
    ("emails/service_restored", (ALL,), ()),
    ("emails/closed_pir", (IMMEDIATE, LEVEL_2), (LEVEL_3,)),
)


def partition_stakeholders(
    stakeholders: Sequence[Stakeholder],
) -> dict[str, list[Stakeholder]]:
    """Split the roster into notification groups, preserving roster order"""
    return {
        IMMEDIATE: [s for s in stakeholders if s.is_immediate],
        LEVEL_2: [s for s in stakeholders if s.escalation_level == 2],
        LEVEL_3: [s for s in stakeholders if s.escalation_level == 3],
        ALL: list(stakeholders),
    }


def collect_addresses(
    groups: dict[str, list[Stakeholder]], names: Sequence[str]
) -> list[str]:
    """Union of the named groups' e-mail addresses, first occurrence wins"""
    addresses: list[str] = []
    for name in names:
        for stakeholder in groups[name]:
            if stakeholder.email not in addresses:
                addresses.append(stakeholder.email)
    return addresses


class EmailTemplateBuilder:
    """Renders the phase notifications for one incident"""

    def __init__(self, template_manager: Optional[TemplateManager] = None):
        self.template_manager = template_manager or TemplateManager()

    def _build_context(
        self,
        incident: Incident,
        roles: ResolvedRoles,
        groups: dict[str, list[Stakeholder]],
    ) -> dict:
        return {
            "incident": incident,
            "ic": roles.incident_commander,
            "tech_lead": roles.technical_lead,
            "comms_lead": roles.comms_lead,
            "bridge_url": roles.bridge_url,
            "bridge_phone": roles.bridge_phone,
            "slack_channel": roles.slack_channel,
            "level2_names": [s.name for s in groups[LEVEL_2]],
            "sign_off": roles.sign_off,
            "comms_sign_off": (
                roles.comms_lead.name if roles.comms_lead else "Incident Response Team"
            ),
        }

    def build(
        self,
        incident: Incident,
        stakeholders: Sequence[Stakeholder],
        roles: ResolvedRoles,
    ) -> list[EmailTemplate]:
        """Build all six templates in send order"""
        groups = partition_stakeholders(stakeholders)
        context = self._build_context(incident, roles, groups)

        templates = []
        for template_key, to_groups, cc_groups in EMAIL_PHASES:
            meta = self.template_manager.load_template_meta(template_key)
            templates.append(
                EmailTemplate(
                    phase=meta["phase"],
                    timing=meta["timing"],
                    to=collect_addresses(groups, to_groups),
                    cc=collect_addresses(groups, cc_groups),
                    subject=self.template_manager.render_string(
                        meta["subject"], context
                    ),
                    body=self.template_manager.render_template(template_key, context),
                    color_band=meta["color_band"],
                )
            )

        if not stakeholders:
            logger.warning(
                f"No stakeholders for {incident.number}; email templates have no recipients"
            )
        return templates


def build_email_templates(
    incident: Incident,
    stakeholders: Sequence[Stakeholder],
    roles: ResolvedRoles,
    template_manager: Optional[TemplateManager] = None,
) -> list[EmailTemplate]:
    """Convenience wrapper around EmailTemplateBuilder"""
    return EmailTemplateBuilder(template_manager).build(incident, stakeholders, roles)
