"""
Runbook section builders

Each module exposes TITLE and build(ctx) -> Section. SECTION_BUILDERS lists
them in runbook order; the generator runs them in that order against a single
SectionContext so action ids follow section order.
"""

from . import (
    communication,
    containment,
    diagnosis,
    escalation,
    handoff,
    resolution,
    summary,
    triage,
)
from .base import SectionBuilder, SectionContext

SECTION_MODULES = (
    summary,
    triage,
    communication,
    diagnosis,
    containment,
    escalation,
    resolution,
    handoff,
)

SECTION_BUILDERS: tuple[SectionBuilder, ...] = tuple(
    module.build for module in SECTION_MODULES
)

SECTION_TITLES: tuple[str, ...] = tuple(module.TITLE for module in SECTION_MODULES)

__all__ = [
    "SECTION_BUILDERS",
    "SECTION_MODULES",
    "SECTION_TITLES",
    "SectionBuilder",
    "SectionContext",
]
