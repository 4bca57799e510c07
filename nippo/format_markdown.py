"""Markdown formatter for nippo."""

from __future__ import annotations

from nippo.report_data import ReportData, ReportItem

_INDENT = "    "


def format_markdown(report: ReportData, detailed: bool = False) -> str:
    """Render the report as a nested Markdown bullet list.

    Args:
        report: Report with sections already prepared.
        detailed: Include repo, number, author and comment count per item.

    Returns:
        The report text, or an empty string when there is nothing to
        report. Sections and groups without items produce no header.
    """
    lines: list[str] = []
    for section in report.sections:
        groups = [g for g in section.groups if g.items]
        if not groups:
            continue
        lines.append(f"* {section.name}")
        for group in groups:
            lines.append(f"{_INDENT}* {group.action}")
            for item in group.items:
                lines.append(f"{_INDENT * 2}* {_render_item(item, detailed)}")
    return "\n".join(lines)


def _escape_link_text(text: str) -> str:
    """Escape brackets so a title cannot close the link text early."""
    return text.replace("[", "\\[").replace("]", "\\]")


def _render_item(item: ReportItem, detailed: bool) -> str:
    """Render a ReportItem as a Markdown link."""
    if not detailed:
        return f"[{_escape_link_text(item.title)}]({item.url})"

    label = item.title
    if item.number:
        ref = f"{item.repo}#{item.number}" if item.repo else f"#{item.number}"
        label = f"{ref} {label}"
    text = f"[{_escape_link_text(label)}]({item.url})"

    if item.author:
        text += f" by @{item.author}"

    if item.comments:
        noun = "comment" if item.comments == 1 else "comments"
        text += f" ({item.comments} {noun})"

    return text
