"""
mimbook - Major incident runbook generator

Compiles an incident record and a responder roster into a prescriptive,
eight-section Major Incident Management runbook with role-addressed email
templates, an action-item ledger and an escalation log.
"""

__version__ = "0.1.0"

# Core API exports
from .config import MimbookConfig
from .generator import RunbookGenerator, generate
from .markdown import runbook_to_markdown
from .models import Incident, RunbookOutput, Stakeholder, VendorEscalation

__all__ = [
    "generate",
    "runbook_to_markdown",
    "RunbookGenerator",
    "MimbookConfig",
    "Incident",
    "Stakeholder",
    "VendorEscalation",
    "RunbookOutput",
    "__version__",
]
