from __future__ import annotations

from casereport.report.context import RenderContext, require_field, section
from casereport.report.elements import (
    draw_key_value_row,
    draw_note,
    draw_section_title,
    ensure_section_space,
    ensure_title_space,
)


SECTION = 'actions'

_PRIORITY_RANK = {
    'critical': 0,
    'high': 1,
    'medium': 2,
    'low': 3,
}


@section(SECTION)
def render_actions_section(ctx: RenderContext) -> float:
    surface, theme, report = ctx.surface, ctx.theme, ctx.report
    layout = theme.layout

    rows = []
    for index, action in enumerate(report.actions):
        title = require_field(action, 'title', section=SECTION, label=f'actions[{index}].title')
        details = [title]
        if action.owner_role:
            details.append(action.owner_role)
        if action.time_horizon:
            details.append(action.time_horizon)
        priority = str(action.priority or 'medium').strip().lower()
        rows.append((_PRIORITY_RANK.get(priority, len(_PRIORITY_RANK)), priority.upper(), ' · '.join(details)))
    # Stable sort keeps caller order within a priority.
    rows.sort(key=lambda row: row[0])

    cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
    cursor_y = draw_section_title(surface, theme, 'Actions', cursor_y, 'Board actionables and deadlines')

    if not rows:
        cursor_y = draw_note(surface, theme, 'No open actions.', cursor_y)
        return cursor_y + layout.section_spacing

    for _rank, label, value in rows:
        cursor_y = ensure_section_space(surface, cursor_y, layout.line_height, theme)
        cursor_y = draw_key_value_row(surface, theme, layout.margin, cursor_y, label, value)

    return cursor_y + layout.section_spacing
