"""Section 6: escalation matrix."""

from ..models import ContentBlock, Heading, Paragraph, Section, Stakeholder, TableBlock
from .base import SectionContext

TITLE = "Escalation Matrix"

LEVEL_LABELS = {
    1: "Level 1 — Immediate",
    2: "Level 2 — T+30",
    3: "Level 3 — T+60+",
}


def _names_at(stakeholders: list[Stakeholder], level: int) -> str:
    return ", ".join(s.name for s in stakeholders if s.escalation_level == level)


def build(ctx: SectionContext) -> Section:
    stakeholders = ctx.stakeholders

    blocks: list[ContentBlock] = [
        Paragraph(
            text=(
                "Use this matrix to escalate if the incident is not resolved within the "
                "stated time window. **Do not wait until the time is up** — if you are not "
                "making progress, escalate sooner."
            )
        ),
        TableBlock(
            rows=[
                ["Time Elapsed", "Action", "Escalate To", "Contact Method"],
                [
                    "T+15 (not contained)",
                    "Escalate to Technical Lead + IC if not already engaged",
                    _names_at(stakeholders, 1),
                    "Phone + Slack",
                ],
                [
                    "T+30 (not contained)",
                    "Escalate to VP/Senior Management; consider vendor support",
                    _names_at(stakeholders, 2) or "Level 2 contacts",
                    "Phone + Email",
                ],
                [
                    "T+60 (not contained)",
                    "Escalate to C-Suite; open P1 case with relevant vendor",
                    _names_at(stakeholders, 3) or "Executive team",
                    "Phone",
                ],
                [
                    "T+120 (still unresolved)",
                    "Consider declaring Major Incident; invoke DR plan; all hands",
                    "All stakeholders + DRI team",
                    "Emergency all-hands bridge",
                ],
            ]
        ),
        Heading(level=2, text="Individual Escalation Contacts"),
        TableBlock(
            rows=[["Name", "Role", "Escalation Level", "Phone", "Email", "Slack"]]
            + [
                [
                    s.name,
                    s.role,
                    LEVEL_LABELS[s.escalation_level],
                    s.phone,
                    s.email,
                    s.slack,
                ]
                for s in stakeholders
            ]
        ),
    ]

    if ctx.vendors:
        blocks.append(Heading(level=2, text="Vendor / Third-Party Escalation"))
        blocks.append(
            TableBlock(
                rows=[["Vendor", "Account Number", "Support URL", "Phone", "Severity to Declare"]]
                + [
                    [v.vendor, v.account_number, v.support_url, v.phone, v.severity_mapping]
                    for v in ctx.vendors
                ]
            )
        )

    return Section(section_number=6, title=TITLE, blocks=blocks)
