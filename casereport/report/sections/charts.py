from __future__ import annotations

import base64
import binascii
import re

from casereport.report.context import RenderContext, ReportDataError, require_field, section
from casereport.report.elements import content_width, draw_image_block, draw_note, draw_section_title, ensure_title_space


SECTION = 'charts'

_DATA_URL_RE = re.compile(r'^data:image/(?P<fmt>png|jpe?g|webp);base64,(?P<payload>.+)$', re.IGNORECASE | re.DOTALL)


def decode_data_url(data_url: str, *, field: str) -> tuple[str, bytes]:
    match = _DATA_URL_RE.match(str(data_url or '').strip())
    if match is None:
        raise ReportDataError(SECTION, field, detail='is not a base64 image data URL')
    fmt = match.group('fmt').upper().replace('JPG', 'JPEG')
    try:
        payload = base64.b64decode(match.group('payload'), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ReportDataError(SECTION, field, detail='has invalid base64 payload') from exc
    if not payload:
        raise ReportDataError(SECTION, field, detail='is empty')
    return fmt, payload


@section(SECTION)
def render_charts_section(ctx: RenderContext) -> float:
    surface, theme, report = ctx.surface, ctx.theme, ctx.report
    layout = theme.layout

    charts = []
    for index, chart in enumerate(report.charts):
        title = require_field(chart, 'title', section=SECTION, label=f'charts[{index}].title')
        fmt, payload = decode_data_url(chart.data_url, field=f'charts[{index}].data_url')
        if chart.width <= 0 or chart.height <= 0:
            raise ReportDataError(SECTION, f'charts[{index}].width', detail='must be positive')
        charts.append((title, fmt, payload, chart.width, chart.height))

    cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
    cursor_y = draw_section_title(surface, theme, 'Trend charts', cursor_y)

    if not charts:
        cursor_y = draw_note(surface, theme, 'No charts attached.', cursor_y)
        return cursor_y + layout.section_spacing

    max_height = content_width(surface, theme) / 2
    for title, fmt, payload, width, height in charts:
        cursor_y = draw_image_block(
            surface,
            theme,
            payload,
            fmt,
            cursor_y,
            intrinsic_width=width,
            intrinsic_height=height,
            caption=title,
            max_height=max_height,
        )
        cursor_y += layout.divider_gap

    return cursor_y + layout.section_spacing
