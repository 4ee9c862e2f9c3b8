from __future__ import annotations

from casereport.types import ReportMetadata

from .context import require_field
from .elements import content_width, fit_single_line
from .formatting import format_timestamp
from .surface import DrawingSurface
from .theme import Theme


SECTION = 'page header'


def draw_page_header(
    surface: DrawingSurface,
    theme: Theme,
    metadata: ReportMetadata,
    *,
    page_number: int,
    total_pages: int,
) -> None:
    """Brand, suite title, case name and classification inside the top margin band."""
    layout, typography, palette = theme.layout, theme.typography, theme.colors
    width = surface.page_size().width
    left = layout.margin
    right = width - layout.margin
    top = layout.margin / 4
    # Left, centre and right slots must not overlap.
    slot = content_width(surface, theme)
    second_row = top + typography.section_title + 2

    surface.set_font(theme.font_family, 'bold')
    surface.set_font_size(typography.small)
    surface.set_text_color(palette.text_muted)
    surface.text(fit_single_line(surface, theme.brand.short_name, slot * 0.25), left, top)

    surface.set_font_size(typography.section_title)
    surface.set_text_color(palette.text_primary)
    surface.text(fit_single_line(surface, theme.brand.suite, slot * 0.4), width / 2, top, align='center')

    surface.set_font(theme.font_family, 'normal')
    surface.set_font_size(typography.body)
    surface.set_text_color(palette.text_secondary)
    case_name = require_field(metadata, 'case_name', section=SECTION, label='metadata.case_name')
    surface.text(fit_single_line(surface, case_name, slot * 0.28), right, top, align='right')

    surface.set_font_size(typography.small)
    surface.set_text_color(palette.text_muted)
    surface.text(
        require_field(metadata, 'classification', section=SECTION, label='metadata.classification'),
        width / 2,
        second_row,
        align='center',
    )
    surface.text(f'Page {page_number}/{total_pages}', right, second_row, align='right')

    rule_y = layout.margin - layout.divider_gap / 2
    surface.set_draw_color(palette.divider)
    surface.set_line_width(0.6)
    surface.line(left, rule_y, right, rule_y)


def draw_page_footer(
    surface: DrawingSurface,
    theme: Theme,
    metadata: ReportMetadata,
    *,
    page_number: int,
    total_pages: int,
) -> None:
    layout, typography = theme.layout, theme.typography
    width, height = surface.page_size()
    y = height - layout.margin / 2 - typography.small / 2
    slot = content_width(surface, theme)

    exported_at = format_timestamp(getattr(metadata, 'exported_at', None), theme.timestamp_format)
    exported_by = getattr(metadata, 'exported_by', None) or '-'
    version = getattr(metadata, 'report_version', None) or '-'

    surface.set_font(theme.font_family, 'normal')
    surface.set_font_size(typography.small)
    surface.set_text_color(theme.colors.text_muted)
    surface.text(fit_single_line(surface, theme.brand.name, slot * 0.3), layout.margin, y)
    surface.text(f'Page {page_number} / {total_pages}', width / 2, y, align='center')
    surface.text(
        fit_single_line(surface, f'Exported by {exported_by} – {exported_at} – {version}', slot * 0.42),
        width - layout.margin,
        y,
        align='right',
    )


def decorate_pages(surface: DrawingSurface, theme: Theme, metadata: ReportMetadata) -> None:
    total_pages = surface.page_count()
    for page_number in range(1, total_pages + 1):
        surface.set_page(page_number)
        draw_page_header(surface, theme, metadata, page_number=page_number, total_pages=total_pages)
        draw_page_footer(surface, theme, metadata, page_number=page_number, total_pages=total_pages)
