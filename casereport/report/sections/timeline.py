from __future__ import annotations

from casereport.report.context import RenderContext, require_field, section
from casereport.report.elements import (
    BULLET_INDENT,
    draw_divider,
    draw_key_value_row,
    draw_note,
    draw_paragraph,
    draw_section_title,
    ensure_section_space,
    ensure_title_space,
)


SECTION = 'timeline'


@section(SECTION)
def render_timeline_section(ctx: RenderContext) -> float:
    surface, theme, report = ctx.surface, ctx.theme, ctx.report
    layout = theme.layout

    events = [
        (
            require_field(event, 'date', section=SECTION, label=f'timeline[{index}].date'),
            require_field(event, 'title', section=SECTION, label=f'timeline[{index}].title'),
            event.description,
        )
        for index, event in enumerate(report.timeline)
    ]

    cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
    cursor_y = draw_section_title(surface, theme, 'Timeline', cursor_y, 'Critical and upcoming events')

    if not events:
        cursor_y = draw_note(surface, theme, 'No timeline events.', cursor_y)
        return cursor_y + layout.section_spacing

    for position, (date, title, description) in enumerate(events):
        if position:
            guarded_y = ensure_section_space(surface, cursor_y, layout.divider_gap, theme)
            # A divider directly under the top margin separates nothing.
            cursor_y = draw_divider(surface, theme, cursor_y) if guarded_y == cursor_y else guarded_y
        cursor_y = ensure_section_space(surface, cursor_y, layout.line_height, theme)
        cursor_y = draw_key_value_row(surface, theme, layout.margin, cursor_y, date, title)
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
