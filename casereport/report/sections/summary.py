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
from casereport.report.formatting import format_number
from casereport.report.text import markdown_blocks
from casereport.types import Kpi


SECTION = 'summary'

_TREND_LABELS = {
    'up': 'rising',
    'down': 'falling',
    'flat': 'stable',
}


def _kpi_value(kpi: Kpi) -> str:
    value = kpi.value if isinstance(kpi.value, str) else format_number(kpi.value)
    if kpi.trend is None:
        return value
    return f'{value} ({_TREND_LABELS.get(kpi.trend.value, kpi.trend.value)})'


@section(SECTION)
def render_summary_section(ctx: RenderContext) -> float:
    surface, theme, report = ctx.surface, ctx.theme, ctx.report
    layout = theme.layout

    rows = [
        (require_field(kpi, 'label', section=SECTION, label=f'kpis[{index}].label'), _kpi_value(kpi))
        for index, kpi in enumerate(report.kpis)
    ]
    blocks = markdown_blocks(report.summary)

    cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
    cursor_y = draw_section_title(surface, theme, 'Executive summary', cursor_y, 'Key conclusions and indicators')

    if not blocks and not rows:
        cursor_y = draw_note(surface, theme, 'No executive summary provided.', cursor_y)
        return cursor_y + layout.section_spacing

    cursor_y = draw_text_blocks(surface, theme, blocks, cursor_y)
    for label, value in rows:
        cursor_y = ensure_section_space(surface, cursor_y, layout.line_height, theme)
        cursor_y = draw_key_value_row(surface, theme, layout.margin, cursor_y, label, value)

    return cursor_y + layout.section_spacing
