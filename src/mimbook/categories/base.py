"""
Category routing and playbook registry

Maps the free-text incident category onto a closed set of categories and
looks up the playbook that supplies diagnosis and containment steps for it.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from ..models import ContentBlock, Incident, NumberedStep, dedent_step

logger = logging.getLogger(__name__)


class Category(str, Enum):
    """Incident categories with dedicated playbooks"""

    DATABASE = "database"
    NETWORK = "network"
    APPLICATION = "application"
    CLOUD_INFRA = "cloud_infra"
    SECURITY = "security"
    GENERIC = "generic"


# Checked in order; the first rule with a matching keyword wins
ROUTING_RULES: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (Category.DATABASE, ("database",)),
    (Category.NETWORK, ("network",)),
    (Category.APPLICATION, ("application",)),
    (Category.CLOUD_INFRA, ("cloud", "infra")),
    (Category.SECURITY, ("security",)),
)

CANONICAL_CATEGORIES = (
    "Database",
    "Network",
    "Application",
    "Cloud/Infra",
    "Security",
    "Other",
)


def route_category(category: str) -> Category:
    """Route a category string; anything unrecognised is GENERIC"""
    text = (category or "").lower()
    for routed, keywords in ROUTING_RULES:
        if any(keyword in text for keyword in keywords):
            return routed
    return Category.GENERIC


def steps(*texts: str) -> list[NumberedStep]:
    """Numbered steps from dedented step texts, numbered from 1"""
    return [
        NumberedStep(step_number=number, text=dedent_step(text))
        for number, text in enumerate(texts, 1)
    ]


class CategoryPlaybook(ABC):
    """
    Diagnosis and containment content for one category

    Diagnosis steps each describe an exact check, what a good and a bad
    result look like, and which containment step a bad result points to.
    Containment steps each describe the remediation, its expected impact,
    how to roll it back, and whether CAB approval is needed.
    """

    category: Category

    @abstractmethod
    def diagnosis_steps(self, incident: Incident) -> list[ContentBlock]:
        """Ordered diagnosis blocks for the incident"""

    def containment_steps(self, incident: Incident) -> list[ContentBlock]:
        """Ordered containment blocks; generic containment unless overridden"""
        return registry.get(Category.GENERIC).containment_steps(incident)

    @property
    def has_dedicated_containment(self) -> bool:
        return type(self).containment_steps is not CategoryPlaybook.containment_steps


class PlaybookRegistry:
    """Registry of playbook instances keyed by category"""

    def __init__(self):
        self._playbooks: dict[Category, CategoryPlaybook] = {}

    def register(self, playbook_class: type) -> None:
        category = getattr(playbook_class, "category", None)
        if not isinstance(category, Category):
            raise ValueError(
                f"Playbook class {playbook_class.__name__} must declare a Category"
            )
        self._playbooks[category] = playbook_class()
        logger.debug(f"Registered playbook: {category.value}")

    def get(self, category: Category) -> CategoryPlaybook:
        playbook: Optional[CategoryPlaybook] = self._playbooks.get(category)
        if playbook is None:
            logger.warning(f"No playbook for {category.value}, using generic")
            playbook = self._playbooks[Category.GENERIC]
        return playbook

    def categories(self) -> list[Category]:
        return list(self._playbooks)


# Global registry instance
registry = PlaybookRegistry()


def register_playbook(playbook_class: type) -> type:
    """Decorator for registering playbook classes"""
    registry.register(playbook_class)
    return playbook_class


def get_playbook(category: str) -> CategoryPlaybook:
    """Playbook for a free-text category string"""
    return registry.get(route_category(category))
