from __future__ import annotations

from casereport.report.context import RenderContext, require_field, section
from casereport.report.elements import (
    draw_key_value_row,
    draw_note,
    draw_section_title,
    draw_text_blocks,
    ensure_section_space,
    ensure_title_space,
)
from casereport.report.text import markdown_blocks


SECTION = 'findings'


@section(SECTION)
def render_findings_section(ctx: RenderContext) -> float:
    surface, theme, report = ctx.surface, ctx.theme, ctx.report
    layout = theme.layout

    entries = []
    for index, finding in enumerate(report.findings):
        title = require_field(finding, 'title', section=SECTION, label=f'findings[{index}].title')
        severity = getattr(finding.severity, 'value', finding.severity) or 'medium'
        heading = f'{index + 1}. {str(severity).upper()}'
        if finding.reference:
            title = f'{title} [{finding.reference}]'
        entries.append((heading, title, theme.severity_color(str(severity)), markdown_blocks(finding.summary)))

    cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
    cursor_y = draw_section_title(surface, theme, 'Findings', cursor_y, 'Observations ranked by severity')

    if not entries:
        cursor_y = draw_note(surface, theme, 'No findings recorded.', cursor_y)
        return cursor_y + layout.section_spacing

    for heading, title, color, blocks in entries:
        cursor_y = ensure_section_space(surface, cursor_y, layout.line_height, theme)
        cursor_y = draw_key_value_row(surface, theme, layout.margin, cursor_y, heading, title, value_color=color)
        cursor_y = draw_text_blocks(surface, theme, blocks, cursor_y)

    return cursor_y + layout.section_spacing
