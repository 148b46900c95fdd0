"""
Runbook generator - core orchestration

Resolves roles, renders the email templates, runs the eight section builders
in order against one SectionContext and assembles the RunbookOutput.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Optional

from .config import MimbookConfig
from .emails import EmailTemplateBuilder
from .ledger import ActionLedger, build_escalation_entries
from .models import Incident, RunbookOutput, Section, Stakeholder, VendorEscalation
from .observability.tracer import set_attribute, trace_operation, trace_sync
from .roles import resolve_roles
from .sections import SECTION_MODULES, SectionContext
from .templating import TemplateManager

logger = logging.getLogger(__name__)


class RunbookGenerator:
    """Builds runbooks; holds only read-only template state between calls"""

    def __init__(self, config: Optional[MimbookConfig] = None):
        self.config = config or MimbookConfig()
        self.template_manager = TemplateManager(self.config.get_templates_dir())
        self.email_builder = EmailTemplateBuilder(self.template_manager)

    def _build_sections(self, ctx: SectionContext) -> list[Section]:
        sections = []
        for module in SECTION_MODULES:
            with trace_operation(
                "runbook.section", {"section.title": module.TITLE}
            ):
                section = module.build(ctx)
            logger.debug(
                f"Built section {section.section_number} '{section.title}' "
                f"with {len(section.blocks)} blocks"
            )
            sections.append(section)
        return sections

    @trace_sync("runbook.generate")
    def generate(
        self,
        incident: Incident,
        stakeholders: Sequence[Stakeholder],
        vendors: Sequence[VendorEscalation] = (),
    ) -> RunbookOutput:
        """
        Generate a complete runbook for one incident

        Args:
            incident: The incident to respond to
            stakeholders: Responder roster, in priority order
            vendors: Third-party support contacts

        Returns:
            RunbookOutput with eight sections, six email templates and the
            action and escalation ledgers
        """
        stakeholders = list(stakeholders)
        vendors = list(vendors)
        set_attribute("incident.number", incident.number)
        set_attribute("incident.category", incident.category)

        roles = resolve_roles(incident, stakeholders)
        email_templates = self.email_builder.build(incident, stakeholders, roles)

        ctx = SectionContext(
            incident=incident,
            stakeholders=stakeholders,
            vendors=vendors,
            roles=roles,
            email_templates=email_templates,
            ledger=ActionLedger(),
        )
        logger.info(
            f"Generating runbook for {incident.number} "
            f"(category: {ctx.category.value}, stakeholders: {len(stakeholders)})"
        )

        sections = self._build_sections(ctx)

        runbook = RunbookOutput(
            incident=incident,
            stakeholders=stakeholders,
            vendors=vendors,
            sections=sections,
            email_templates=email_templates,
            action_items=ctx.ledger.items,
            escalation_entries=build_escalation_entries(stakeholders),
            generated_at=datetime.now(timezone.utc),
            slack_channel=roles.slack_channel,
            bridge_url=roles.bridge_url,
            bridge_phone=roles.bridge_phone,
            incident_commander=roles.incident_commander,
            technical_lead=roles.technical_lead,
            comms_lead=roles.comms_lead,
        )

        set_attribute("runbook.action_items", len(runbook.action_items))
        logger.info(
            f"Runbook for {incident.number} ready: {len(runbook.sections)} sections, "
            f"{len(runbook.action_items)} action items"
        )
        return runbook


def generate(
    incident: Incident,
    stakeholders: Sequence[Stakeholder],
    vendors: Sequence[VendorEscalation] = (),
) -> RunbookOutput:
    """Main entry point for runbook generation"""
    return RunbookGenerator().generate(incident, stakeholders, vendors)
