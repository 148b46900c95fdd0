"""
Category playbooks

Each incident category routes to a playbook providing diagnosis and
containment steps:
- Category / route_category: closed category set and the routing rules
- Registry: playbook lookup by category
- Built-in playbooks for the six supported categories
"""

# Import playbooks to trigger registration
from .application import ApplicationPlaybook
from .base import (
    CANONICAL_CATEGORIES,
    Category,
    CategoryPlaybook,
    PlaybookRegistry,
    get_playbook,
    register_playbook,
    registry,
    route_category,
)
from .cloud_infra import CloudInfraPlaybook
from .database import DatabasePlaybook
from .generic import GenericPlaybook
from .network import NetworkPlaybook
from .security import SecurityPlaybook

__all__ = [
    "CANONICAL_CATEGORIES",
    "Category",
    "CategoryPlaybook",
    "PlaybookRegistry",
    "get_playbook",
    "register_playbook",
    "registry",
    "route_category",
    "ApplicationPlaybook",
    "CloudInfraPlaybook",
    "DatabasePlaybook",
    "GenericPlaybook",
    "NetworkPlaybook",
    "SecurityPlaybook",
]
