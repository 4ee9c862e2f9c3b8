from __future__ import annotations

import logging
from typing import Iterable

from .surface import DrawingSurface, RGB
from .text import TextBlock
from .theme import Theme


logger = logging.getLogger(__name__)

KEY_COLUMN_WIDTH = 140.0
BULLET_INDENT = 12.0
ELLIPSIS = '…'


def content_start_y(theme: Theme) -> float:
    return theme.layout.margin


def content_width(surface: DrawingSurface, theme: Theme) -> float:
    return surface.page_size().width - 2 * theme.layout.margin


def usable_bottom(surface: DrawingSurface, theme: Theme) -> float:
    return surface.page_size().height - theme.layout.margin


def ensure_section_space(
    surface: DrawingSurface,
    cursor_y: float,
    needed_height: float,
    theme: Theme,
) -> float:
    """Return the cursor to draw a block of ``needed_height`` at.

    Starts a new page and returns the top margin when the block would cross
    the bottom margin. Call this immediately before drawing any unit whose
    height is known, with that exact height.
    """
    bottom = usable_bottom(surface, theme)
    if cursor_y + needed_height <= bottom:
        return cursor_y

    top = theme.layout.margin
    if cursor_y <= top:
        # Already at the top of a fresh page; another page would not help.
        logger.warning(
            'Block of height %.1f exceeds usable page height %.1f; drawing clipped',
            needed_height,
            bottom - top,
        )
        return cursor_y

    surface.add_page()
    logger.debug(
        'Page break before block of height %.1f at y=%.1f; now on page %d',
        needed_height,
        cursor_y,
        surface.page_count(),
    )
    return top


def ensure_title_space(surface: DrawingSurface, cursor_y: float, theme: Theme) -> float:
    """Guard a section title together with the first line below it."""
    return ensure_section_space(surface, cursor_y, theme.layout.title_block + theme.layout.line_height, theme)


def _fits_one_line(surface: DrawingSurface, text: str, max_width: float) -> bool:
    return len(surface.split_text(text, max_width)) == 1


def fit_single_line(surface: DrawingSurface, text: str, max_width: float) -> str:
    """Return ``text`` or its longest prefix plus an ellipsis that fits ``max_width``.

    Width is measured through ``split_text``, which breaks words wider than
    ``max_width``, so a single long token is trimmed as well.
    """
    value = str(text or '')
    lines = surface.split_text(value, max_width)
    if not lines:
        return ''
    if len(lines) == 1:
        return lines[0]
    head = lines[0].rstrip()
    while head and not _fits_one_line(surface, f'{head}{ELLIPSIS}', max_width):
        head = head[:-1].rstrip()
    return f'{head}{ELLIPSIS}'


def draw_section_title(
    surface: DrawingSurface,
    theme: Theme,
    title: str,
    cursor_y: float,
    subtitle: str | None = None,
) -> float:
    x = theme.layout.margin
    width = content_width(surface, theme)

    surface.set_font(theme.font_family, 'bold')
    surface.set_font_size(theme.typography.section_title)
    surface.set_text_color(theme.colors.text_primary)
    surface.text(fit_single_line(surface, title, width), x, cursor_y)

    if subtitle:
        surface.set_font(theme.font_family, 'normal')
        surface.set_font_size(theme.typography.small)
        surface.set_text_color(theme.colors.text_secondary)
        surface.text(
            fit_single_line(surface, subtitle, width),
            x,
            cursor_y + theme.typography.section_title + 4,
        )

    rule_y = cursor_y + theme.layout.title_block - theme.layout.divider_gap / 2
    surface.set_draw_color(theme.colors.accent)
    surface.set_line_width(1.2)
    surface.line(x, rule_y, x + min(48.0, width), rule_y)
    return cursor_y + theme.layout.title_block


def draw_key_value_row(
    surface: DrawingSurface,
    theme: Theme,
    margin_x: float,
    cursor_y: float,
    label: str,
    value: str,
    *,
    value_color: RGB | None = None,
) -> float:
    right = surface.page_size().width - theme.layout.margin
    key_width = min(KEY_COLUMN_WIDTH, max(0.0, (right - margin_x) / 2))
    value_x = margin_x + key_width

    surface.set_font(theme.font_family, 'normal')
    surface.set_font_size(theme.typography.body)
    surface.set_text_color(theme.colors.text_secondary)
    surface.text(fit_single_line(surface, label, key_width - 6), margin_x, cursor_y)

    surface.set_font(theme.font_family, 'bold')
    surface.set_text_color(value_color or theme.colors.text_primary)
    surface.text(fit_single_line(surface, value, right - value_x), value_x, cursor_y)
    return cursor_y + theme.layout.line_height


def draw_divider(surface: DrawingSurface, theme: Theme, cursor_y: float) -> float:
    y = cursor_y + theme.layout.divider_gap / 2
    surface.set_draw_color(theme.colors.divider)
    surface.set_line_width(0.6)
    surface.line(theme.layout.margin, y, surface.page_size().width - theme.layout.margin, y)
    return cursor_y + theme.layout.divider_gap


def draw_paragraph(
    surface: DrawingSurface,
    theme: Theme,
    text: str,
    cursor_y: float,
    *,
    x: float | None = None,
    size: float | None = None,
    style: str = 'normal',
    color: RGB | None = None,
) -> float:
    """Measure ``text`` against the content width, then guard and draw it line by line."""
    left = theme.layout.margin if x is None else x
    width = surface.page_size().width - theme.layout.margin - left

    surface.set_font(theme.font_family, style)
    surface.set_font_size(size or theme.typography.body)
    surface.set_text_color(color or theme.colors.text_primary)

    for line in surface.split_text(str(text or ''), width):
        cursor_y = ensure_section_space(surface, cursor_y, theme.layout.line_height, theme)
        surface.text(line, left, cursor_y)
        cursor_y += theme.layout.line_height
    return cursor_y


def draw_text_blocks(
    surface: DrawingSurface,
    theme: Theme,
    blocks: Iterable[TextBlock],
    cursor_y: float,
) -> float:
    margin = theme.layout.margin
    for block in blocks:
        if block.kind == 'heading':
            cursor_y = draw_paragraph(surface, theme, block.text, cursor_y, style='bold')
        elif block.kind == 'bullet':
            cursor_y = draw_paragraph(surface, theme, block.text, cursor_y, x=margin + BULLET_INDENT)
        else:
            cursor_y = draw_paragraph(surface, theme, block.text, cursor_y)
            cursor_y += theme.layout.line_height / 2
    return cursor_y


def draw_note(surface: DrawingSurface, theme: Theme, text: str, cursor_y: float) -> float:
    return draw_paragraph(
        surface,
        theme,
        text,
        cursor_y,
        size=theme.typography.small,
        style='italic',
        color=theme.colors.text_muted,
    )


def draw_image_block(
    surface: DrawingSurface,
    theme: Theme,
    data: bytes,
    fmt: str,
    cursor_y: float,
    *,
    intrinsic_width: float,
    intrinsic_height: float,
    caption: str | None = None,
    max_height: float | None = None,
) -> float:
    """Scale an image into the content box, guard the whole block, then place it."""
    if intrinsic_width <= 0 or intrinsic_height <= 0:
        raise ValueError(f'image size must be positive, got {intrinsic_width}x{intrinsic_height}')

    line_height = theme.layout.line_height
    caption_height = line_height if caption else 0.0
    box_width = content_width(surface, theme)
    box_height = usable_bottom(surface, theme) - theme.layout.margin - caption_height
    if max_height is not None:
        box_height = min(box_height, max_height)

    scale = min(box_width / intrinsic_width, box_height / intrinsic_height)
    width = intrinsic_width * scale
    height = intrinsic_height * scale

    cursor_y = ensure_section_space(surface, cursor_y, caption_height + height, theme)
    if caption:
        surface.set_font(theme.font_family, 'normal')
        surface.set_font_size(theme.typography.small)
        surface.set_text_color(theme.colors.text_muted)
        surface.text(fit_single_line(surface, caption, box_width), theme.layout.margin, cursor_y)
        cursor_y += caption_height

    surface.image(data, fmt, theme.layout.margin, cursor_y, width, height)
    return cursor_y + height
