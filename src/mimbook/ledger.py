"""
Action and escalation ledgers

An ActionLedger is created per generation pass and handed to every section
builder, so two runbooks generated side by side never share an id counter.
"""

import logging
from collections.abc import Sequence

from .models import (
    ActionItem,
    ActionPhase,
    ActionPriority,
    EscalationEntry,
    Stakeholder,
)

logger = logging.getLogger(__name__)


def format_id(prefix: str, number: int) -> str:
    """Ledger id such as ACT-007"""
    return f"{prefix}-{number:03d}"


class ActionLedger:
    """Insertion-ordered list of action items with sequential ids"""

    prefix = "ACT"

    def __init__(self):
        self._items: list[ActionItem] = []

    def add(
        self,
        phase: ActionPhase,
        action: str,
        owner: str,
        team: str,
        priority: ActionPriority,
        target_by: str,
        notes: str = "",
    ) -> ActionItem:
        """Append an action item and return it"""
        item = ActionItem(
            id=format_id(self.prefix, len(self._items) + 1),
            phase=phase,
            action=action,
            owner=owner,
            team=team,
            priority=priority,
            target_by=target_by,
            notes=notes,
        )
        self._items.append(item)
        logger.debug(f"{item.id} [{phase}] {action} -> {owner}")
        return item

    @property
    def items(self) -> list[ActionItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


def build_escalation_entries(
    stakeholders: Sequence[Stakeholder],
) -> list[EscalationEntry]:
    """One escalation entry per stakeholder, in roster order"""
    return [
        EscalationEntry(
            id=format_id("ESC", index),
            contact_name=stakeholder.name,
            role=stakeholder.role,
            method=stakeholder.notification_method,
        )
        for index, stakeholder in enumerate(stakeholders, 1)
    ]
