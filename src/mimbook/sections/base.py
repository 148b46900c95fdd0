"""
Shared context for section builders

Every builder receives the same SectionContext; builders that decide work is
needed append to ctx.ledger while constructing their blocks.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Callable

from ..categories import Category, CategoryPlaybook, registry, route_category
from ..ledger import ActionLedger
from ..models import (
    EmailTemplate,
    Incident,
    Section,
    Stakeholder,
    VendorEscalation,
)
from ..roles import ResolvedRoles


@dataclass
class SectionContext:
    """Inputs and accumulators for one generation pass"""

    incident: Incident
    stakeholders: Sequence[Stakeholder]
    vendors: Sequence[VendorEscalation]
    roles: ResolvedRoles
    email_templates: Sequence[EmailTemplate]
    ledger: ActionLedger = field(default_factory=ActionLedger)
    category: Category = field(init=False)

    def __post_init__(self):
        self.category = route_category(self.incident.category)

    @property
    def playbook(self) -> CategoryPlaybook:
        return registry.get(self.category)


SectionBuilder = Callable[[SectionContext], Section]
