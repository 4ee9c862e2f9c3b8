from __future__ import annotations

from casereport.report.context import RenderContext, require_field, section
from casereport.report.elements import (
    BULLET_INDENT,
    draw_key_value_row,
    draw_note,
    draw_paragraph,
    draw_section_title,
    ensure_section_space,
    ensure_title_space,
)
from casereport.report.formatting import format_bytes
from casereport.types import Attachment


SECTION = 'evidence'


def _describe(attachment: Attachment) -> str:
    parts = [attachment.kind or 'document', format_bytes(attachment.size_bytes)]
    if attachment.sha256:
        parts.append(f'sha256 {attachment.sha256[:12]}')
    return ' · '.join(parts)


@section(SECTION)
def render_evidence_section(ctx: RenderContext) -> float:
    surface, theme, report = ctx.surface, ctx.theme, ctx.report
    layout = theme.layout

    entries = [
        (
            require_field(item, 'name', section=SECTION, label=f'attachments[{index}].name'),
            _describe(item),
            item.description,
        )
        for index, item in enumerate(report.attachments)
    ]

    cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
    cursor_y = draw_section_title(
        surface,
        theme,
        'Evidence',
        cursor_y,
        f'{len(entries)} attachment(s) referenced in this report',
    )

    if not entries:
        cursor_y = draw_note(surface, theme, 'No attachments referenced.', cursor_y)
        return cursor_y + layout.section_spacing

    for name, summary, description in entries:
        cursor_y = ensure_section_space(surface, cursor_y, layout.line_height, theme)
        cursor_y = draw_key_value_row(surface, theme, layout.margin, cursor_y, name, summary)
        if description:
            cursor_y = draw_paragraph(
                surface,
                theme,
                description,
                cursor_y,
                x=layout.margin + BULLET_INDENT,
                size=theme.typography.small,
                color=theme.colors.text_secondary,
            )

    return cursor_y + layout.section_spacing
