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


SECTION = 'metadata'

DISTRIBUTION_NOTE = (
    'The report is prepared from available data and may not be distributed '
    'without written consent.'
)


@section(SECTION)
def render_metadata_section(ctx: RenderContext) -> float:
    surface, theme, report = ctx.surface, ctx.theme, ctx.report
    layout = theme.layout

    exported_at = require_field(report, 'metadata.exported_at', section=SECTION)
    subject = require_field(report, 'metadata.subject', section=SECTION)
    rows: list[tuple[str, str]] = [
        ('Case ID', require_field(report, 'metadata.case_id', section=SECTION)),
        ('Case name', require_field(report, 'metadata.case_name', section=SECTION)),
        ('Subject', str(getattr(subject, 'value', subject)).upper()),
        ('Classification', require_field(report, 'metadata.classification', section=SECTION)),
        ('Exported by', require_field(report, 'metadata.exported_by', section=SECTION)),
        ('Exported', format_timestamp(exported_at, theme.timestamp_format)),
        ('Report version', require_field(report, 'metadata.report_version', section=SECTION)),
    ]

    cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
    cursor_y = draw_section_title(surface, theme, 'Metadata / notes', cursor_y, 'Classification and version')

    for label, value in rows:
        cursor_y = ensure_section_space(surface, cursor_y, layout.line_height, theme)
        cursor_y = draw_key_value_row(surface, theme, layout.margin, cursor_y, label, str(value))

    cursor_y += layout.line_height
    cursor_y = draw_note(surface, theme, f'{theme.brand.name} – {DISTRIBUTION_NOTE}', cursor_y)
    return cursor_y + layout.section_spacing
