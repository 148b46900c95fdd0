"""
Core data models for mimbook

Defines the input records (Incident, Stakeholder, VendorEscalation), the typed
content blocks a runbook section is made of, and the RunbookOutput root
artifact, using Pydantic for validation and serialization.
"""

import re
from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from .exceptions import RunbookInvariantError

SECTION_COUNT = 8

ACTION_ID_PATTERN = re.compile(r"^ACT-(\d{3,})$")

# Line prefixes that mark a numbered-step line as a command to run
COMMAND_PREFIXES = (
    "```",
    "ssh",
    "curl",
    "#",
    "SELECT",
    "kubectl",
    "aws",
    "sudo",
    "psql",
    "mysqlsh",
    "srvctl",
    "crsctl",
    "grep",
    "tail",
    "top ",
    "df ",
    "free ",
    "iostat",
    "ping",
    "traceroute",
    "mtr ",
    "dig ",
    "nslookup",
    "netstat",
    "docker",
    "systemctl",
    "jmap",
    "launchdarkly",
    "index=",
)


class Incident(BaseModel):
    """Incident record as supplied by the ticketing system or YAML input"""

    model_config = ConfigDict(frozen=True)

    number: str
    title: str
    severity: str
    priority: str
    state: str
    category: str
    subcategory: str
    affected_service: str
    affected_ci: str
    environment: str
    region: Optional[str] = None
    business_impact: str
    opened_at: str
    detected_at: Optional[str] = None
    assigned_to: str
    assignment_group: str
    caller_id: str
    short_description: str
    description: str
    change_related: bool = False
    related_incident: str = ""
    resolution_notes: str = ""
    close_code: str = ""

    @field_validator("opened_at", "detected_at", mode="before")
    @classmethod
    def _timestamp_text(cls, value):
        # Unquoted YAML timestamps arrive as datetime objects
        if isinstance(value, datetime):
            return value.isoformat().replace("+00:00", "Z")
        return value

    @property
    def detection_time(self) -> str:
        """Detection timestamp, falling back to the open time"""
        return self.detected_at or self.opened_at

    @property
    def environment_label(self) -> str:
        if self.region:
            return f"{self.environment} ({self.region})"
        return self.environment


class Stakeholder(BaseModel):
    """One responder in the incident roster"""

    model_config = ConfigDict(frozen=True)

    name: str
    role: str
    title: str
    team: str
    email: EmailStr
    phone: str
    slack: str
    escalation_level: int = Field(ge=1, le=3)
    notify_immediately: bool = False
    bridge_url: Optional[str] = None
    bridge_phone: Optional[str] = None

    @property
    def is_immediate(self) -> bool:
        """Whether this contact is paged at T+0"""
        return self.notify_immediately or self.escalation_level == 1

    @property
    def notification_method(self) -> str:
        if self.notify_immediately:
            return "Phone + Slack + Email"
        return "Slack + Email"


class VendorEscalation(BaseModel):
    """Third-party support contact"""

    model_config = ConfigDict(frozen=True)

    vendor: str
    account_number: str
    support_url: str
    phone: str
    severity_mapping: str


class StakeholdersFile(BaseModel):
    """Root of the stakeholders YAML document"""

    stakeholders: list[Stakeholder]
    vendor_escalations: list[VendorEscalation] = Field(default_factory=list)


class IncidentFile(BaseModel):
    """Root of the incident YAML document"""

    incident: Incident


class EmailTemplate(BaseModel):
    """Ready-to-send notification for one incident phase"""

    model_config = ConfigDict(frozen=True)

    phase: str
    timing: str
    to: list[str] = Field(default_factory=list)
    cc: list[str] = Field(default_factory=list)
    subject: str
    body: str
    color_band: Literal["red", "amber", "teal", "green", "navy"]


# ============================================================
# Content blocks
# ============================================================


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True)


class Heading(_Block):
    type: Literal["heading"] = "heading"
    level: int = Field(default=2, ge=1, le=3)
    text: str


class Paragraph(_Block):
    type: Literal["paragraph"] = "paragraph"
    text: str


class ChecklistItem(_Block):
    type: Literal["checklist_item"] = "checklist_item"
    text: str
    checked: bool = False


class NumberedStep(_Block):
    type: Literal["numbered_step"] = "numbered_step"
    step_number: int = Field(ge=1)
    text: str

    @property
    def title(self) -> str:
        return self.text.split("\n", 1)[0]

    def segments(self) -> list[tuple[bool, str]]:
        """
        Split the step body into (is_command, line) pairs

        The first line is the step title and is not included. Bare code fences
        are dropped. Lines inside a fenced block are always command text and
        keep their indentation and blank lines; prose lines are stripped and
        blank prose lines dropped.
        """
        result: list[tuple[bool, str]] = []
        in_fence = False
        for raw_line in self.text.split("\n")[1:]:
            line = raw_line.strip()
            if line.startswith("```"):
                in_fence = not in_fence
                continue
            if in_fence:
                result.append((True, raw_line.rstrip()))
                continue
            if not line:
                continue
            result.append((is_command_line(line), line))
        return result


class CommandBlock(_Block):
    type: Literal["command"] = "command"
    text: str


class TableBlock(_Block):
    type: Literal["table"] = "table"
    rows: list[list[str]]

    @model_validator(mode="after")
    def _check_shape(self) -> "TableBlock":
        if not self.rows:
            return self
        width = len(self.rows[0])
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise RunbookInvariantError(
                    f"Table row {index} has {len(row)} cells, header has {width}"
                )
        return self

    @property
    def header(self) -> list[str]:
        return self.rows[0] if self.rows else []

    @property
    def body(self) -> list[list[str]]:
        return self.rows[1:]


class DecisionBranch(BaseModel):
    model_config = ConfigDict(frozen=True)

    condition: str
    action: str


class DecisionTree(_Block):
    type: Literal["decision_tree"] = "decision_tree"
    condition: str
    branches: list[DecisionBranch]


class AlertBox(_Block):
    type: Literal["alert_box"] = "alert_box"
    alert_level: Literal["info", "warning", "critical"]
    text: str


class EmailTemplateBlock(_Block):
    type: Literal["email_template"] = "email_template"
    template: EmailTemplate


class BulletList(_Block):
    type: Literal["bullet"] = "bullet"
    items: list[str]


class StakeholderSlot(_Block):
    """
    Table whose body rows are filled from the roster at render time

    Section builders do not know which contacts a renderer will want to show
    next to the triage steps, so they emit this typed hole instead of a table
    with placeholder names. Renderers call RunbookOutput.resolve_slot().
    """

    type: Literal["stakeholder_slot"] = "stakeholder_slot"
    header: list[str] = Field(
        default_factory=lambda: ["Name", "Role", "Slack", "Phone"]
    )
    audience: Literal["immediate", "all"] = "immediate"


ContentBlock = Annotated[
    Union[
        Heading,
        Paragraph,
        ChecklistItem,
        NumberedStep,
        CommandBlock,
        TableBlock,
        DecisionTree,
        AlertBox,
        EmailTemplateBlock,
        BulletList,
        StakeholderSlot,
    ],
    Field(discriminator="type"),
]


class Section(BaseModel):
    """One numbered runbook section"""

    model_config = ConfigDict(frozen=True)

    section_number: int = Field(ge=1, le=SECTION_COUNT)
    title: str
    blocks: list[ContentBlock] = Field(default_factory=list)

    def blocks_of(self, block_type: type) -> list:
        return [block for block in self.blocks if isinstance(block, block_type)]


# ============================================================
# Ledgers and output
# ============================================================

ActionPhase = Literal["Triage", "Comms", "Diagnosis", "Containment", "Resolution"]
ActionPriority = Literal["P1", "P2", "P3"]


class ActionItem(BaseModel):
    """Tracked task in the action ledger"""

    model_config = ConfigDict(frozen=True)

    id: str
    phase: ActionPhase
    action: str
    owner: str
    team: str
    priority: ActionPriority
    status: Literal["Open"] = "Open"
    target_by: str
    notes: str = ""


class EscalationEntry(BaseModel):
    """One row of the escalation log"""

    model_config = ConfigDict(frozen=True)

    id: str
    contact_name: str
    role: str
    method: str


class RunbookOutput(BaseModel):
    """Complete generated runbook, consumed read-only by renderers"""

    model_config = ConfigDict(frozen=True)

    incident: Incident
    stakeholders: list[Stakeholder]
    vendors: list[VendorEscalation]
    sections: list[Section]
    email_templates: list[EmailTemplate]
    action_items: list[ActionItem]
    escalation_entries: list[EscalationEntry]
    generated_at: datetime
    slack_channel: str
    bridge_url: str
    bridge_phone: str
    incident_commander: Optional[Stakeholder] = None
    technical_lead: Optional[Stakeholder] = None
    comms_lead: Optional[Stakeholder] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "RunbookOutput":
        numbers = [section.section_number for section in self.sections]
        if numbers != list(range(1, SECTION_COUNT + 1)):
            raise RunbookInvariantError(f"Sections out of order: {numbers}")

        for index, item in enumerate(self.action_items, 1):
            match = ACTION_ID_PATTERN.match(item.id)
            if not match or int(match.group(1)) != index:
                raise RunbookInvariantError(
                    f"Action id {item.id} at position {index} breaks the sequence"
                )

        if len(self.escalation_entries) != len(self.stakeholders):
            raise RunbookInvariantError(
                f"{len(self.escalation_entries)} escalation entries for "
                f"{len(self.stakeholders)} stakeholders"
            )
        return self

    def section(self, number: int) -> Section:
        return self.sections[number - 1]

    def resolve_slot(self, slot: StakeholderSlot) -> TableBlock:
        """Turn a stakeholder slot into a concrete table"""
        if slot.audience == "immediate":
            contacts = [s for s in self.stakeholders if s.is_immediate]
        else:
            contacts = list(self.stakeholders)
        rows = [list(slot.header)]
        rows.extend([s.name, s.role, s.slack, s.phone] for s in contacts)
        return TableBlock(rows=rows)


def is_command_line(line: str) -> bool:
    """Whether a numbered-step line should be shown as preformatted text"""
    return line.strip().startswith(COMMAND_PREFIXES)


def dedent_step(text: str) -> str:
    """
    Remove source indentation from an interpolated step literal

    The margin comes from the first non-blank line, so interpolated multi-line
    values whose continuation lines start at column 0 are left as they are
    while every template line still loses its indentation.
    """
    lines = text.split("\n")
    first = next((line for line in lines if line.strip()), "")
    width = len(first) - len(first.lstrip(" \t"))

    dedented = []
    for line in lines:
        leading = len(line) - len(line.lstrip(" \t"))
        dedented.append(line[min(leading, width):].rstrip())
    return "\n".join(dedented).strip()
