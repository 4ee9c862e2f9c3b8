from __future__ import annotations

from casereport.report.context import RenderContext, require_field, section
from casereport.report.elements import (
    draw_key_value_row,
    draw_note,
    draw_section_title,
    ensure_section_space,
    ensure_title_space,
)
from casereport.report.formatting import format_timestamp


SECTION = 'signatures'

SIGNATURE_LINE_WIDTH = 200.0


@section(SECTION)
def render_signatures_section(ctx: RenderContext) -> float:
    surface, theme, report = ctx.surface, ctx.theme, ctx.report
    layout = theme.layout

    signatories = [
        (
            require_field(item, 'name', section=SECTION, label=f'signatures[{index}].name'),
            require_field(item, 'role', section=SECTION, label=f'signatures[{index}].role'),
            item.signed_at,
        )
        for index, item in enumerate(report.signatures)
    ]

    cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
    cursor_y = draw_section_title(surface, theme, 'Signatures', cursor_y, 'Approval of the report content')

    if not signatories:
        cursor_y = draw_note(surface, theme, 'No signatures required.', cursor_y)
        return cursor_y + layout.section_spacing

    # Name row, two blank lines for the handwritten signature, closed by a rule.
    block_height = layout.line_height * 3
    for name, role, signed_at in signatories:
        cursor_y = ensure_section_space(surface, cursor_y, block_height, theme)
        signed = format_timestamp(signed_at, theme.timestamp_format) if signed_at else 'not signed'
        cursor_y = draw_key_value_row(surface, theme, layout.margin, cursor_y, name, f'{role} · {signed}')
        rule_y = cursor_y + layout.line_height * 2 - 2
        surface.set_draw_color(theme.colors.text_secondary)
        surface.set_line_width(0.6)
        surface.line(layout.margin, rule_y, layout.margin + SIGNATURE_LINE_WIDTH, rule_y)
        cursor_y += layout.line_height * 2

    return cursor_y + layout.section_spacing
