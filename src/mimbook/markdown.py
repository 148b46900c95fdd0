"""
Markdown rendering of a generated runbook

Operates purely on a RunbookOutput; every block type maps to a few lines of
Markdown. Stakeholder slots are resolved against the runbook's own roster.
"""

from typing import Callable

from .models import (
    ActionItem,
    AlertBox,
    BulletList,
    ChecklistItem,
    CommandBlock,
    DecisionTree,
    EmailTemplateBlock,
    Heading,
    NumberedStep,
    Paragraph,
    RunbookOutput,
    StakeholderSlot,
    TableBlock,
)

ALERT_ICONS = {"critical": "🔴", "warning": "🟡", "info": "🔵"}

GENERATED_AT_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"


def _escape_cell(cell: str) -> str:
    return cell.replace("|", "\\|").replace("\n", "<br>")


def render_table(rows: list[list[str]]) -> list[str]:
    if not rows:
        return []
    header, body = rows[0], rows[1:]
    lines = [
        "| " + " | ".join(_escape_cell(c) for c in header) + " |",
        "| " + " | ".join("---" for _ in header) + " |",
    ]
    lines.extend("| " + " | ".join(_escape_cell(c) for c in row) + " |" for row in body)
    return lines


def _fenced(text: str) -> list[str]:
    return ["```", text, "```"]


def _heading(block: Heading, rb: RunbookOutput) -> list[str]:
    # Level 1 sits below the "##" section heading
    return [f"{'#' * (block.level + 1)} {block.text}"]


def _paragraph(block: Paragraph, rb: RunbookOutput) -> list[str]:
    return [block.text]


def _numbered_step(block: NumberedStep, rb: RunbookOutput) -> list[str]:
    lines = [f"**Step {block.step_number}:** {block.title}"]
    command_run: list[str] = []
    for is_command, line in block.segments():
        if is_command:
            command_run.append(line)
            continue
        if command_run:
            lines.extend(["", *_fenced("\n".join(command_run))])
            command_run = []
        lines.extend(["", line])
    if command_run:
        lines.extend(["", *_fenced("\n".join(command_run))])
    return lines


def _checklist_item(block: ChecklistItem, rb: RunbookOutput) -> list[str]:
    mark = "x" if block.checked else " "
    return [f"- [{mark}] {block.text}"]


def _bullet(block: BulletList, rb: RunbookOutput) -> list[str]:
    return [f"- {item}" for item in block.items]


def _command(block: CommandBlock, rb: RunbookOutput) -> list[str]:
    return _fenced(block.text)


def _table(block: TableBlock, rb: RunbookOutput) -> list[str]:
    return render_table(block.rows)


def _decision_tree(block: DecisionTree, rb: RunbookOutput) -> list[str]:
    lines = [f"**{block.condition}**", ""]
    lines.extend(
        f"- If **{branch.condition}** → {branch.action}" for branch in block.branches
    )
    return lines


def _alert_box(block: AlertBox, rb: RunbookOutput) -> list[str]:
    icon = ALERT_ICONS[block.alert_level]
    return [f"> {icon} **{block.alert_level.upper()}**: {block.text}"]


def _email_template(block: EmailTemplateBlock, rb: RunbookOutput) -> list[str]:
    template = block.template
    lines = [
        f"### 📧 Email Template: {template.phase} ({template.timing})",
        f"**Subject**: `{template.subject}`",
        f"**To**: {'; '.join(template.to) or '[NO RECIPIENTS]'}",
    ]
    if template.cc:
        lines.append(f"**CC**: {'; '.join(template.cc)}")
    lines.append("")
    lines.extend(_fenced(template.body))
    return lines


def _stakeholder_slot(block: StakeholderSlot, rb: RunbookOutput) -> list[str]:
    return render_table(rb.resolve_slot(block).rows)


BLOCK_RENDERERS: dict[str, Callable] = {
    "heading": _heading,
    "paragraph": _paragraph,
    "numbered_step": _numbered_step,
    "checklist_item": _checklist_item,
    "bullet": _bullet,
    "command": _command,
    "table": _table,
    "decision_tree": _decision_tree,
    "alert_box": _alert_box,
    "email_template": _email_template,
    "stakeholder_slot": _stakeholder_slot,
}


def _action_tracker(items: list[ActionItem]) -> list[str]:
    rows = [["ID", "Phase", "Action", "Owner", "Team", "Priority", "Status", "Target"]]
    rows.extend(
        [i.id, i.phase, i.action, i.owner, i.team, i.priority, i.status, i.target_by]
        for i in items
    )
    return render_table(rows)


def runbook_to_markdown(rb: RunbookOutput, include_tracker: bool = True) -> str:
    """
    Render a runbook as a Markdown document

    Args:
        rb: Generated runbook
        include_tracker: Append the action-item ledger as a closing table

    Returns:
        Markdown text, sections separated by horizontal rules
    """
    ic_name = rb.incident_commander.name if rb.incident_commander else "TBD"
    lines = [
        f"# Major Incident Runbook — {rb.incident.number}",
        f"> Generated: {rb.generated_at.strftime(GENERATED_AT_FORMAT)}",
        f"> Incident Commander: {ic_name}",
        "",
    ]

    for section in rb.sections:
        lines.extend(["---", f"## {section.section_number}. {section.title}", ""])
        for block in section.blocks:
            lines.extend(BLOCK_RENDERERS[block.type](block, rb))
            lines.append("")

    if include_tracker and rb.action_items:
        lines.extend(["---", "## Action Tracker", ""])
        lines.extend(_action_tracker(rb.action_items))
        lines.append("")

    return "\n".join(lines)
