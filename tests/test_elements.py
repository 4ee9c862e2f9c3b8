from __future__ import annotations

import pytest

from casereport.report.elements import (
    draw_divider,
    draw_image_block,
    draw_key_value_row,
    draw_paragraph,
    draw_section_title,
    ensure_section_space,
    ensure_title_space,
    fit_single_line,
)
from casereport.report.theme import Theme, ThemeLayout


@pytest.fixture
def theme() -> Theme:
    return Theme(layout=ThemeLayout(margin=40, line_height=14, section_spacing=20, title_block=34))


def test_ensure_section_space_keeps_cursor_when_block_fits(make_surface, theme):
    surface = make_surface()
    assert ensure_section_space(surface, 700, 60, theme) == 700
    assert surface.page_count() == 1


def test_ensure_section_space_accepts_block_ending_on_bottom_margin(make_surface, theme):
    surface = make_surface()
    assert ensure_section_space(surface, 746, 14, theme) == 746
    assert surface.page_count() == 1


def test_ensure_section_space_breaks_page_and_resets_to_margin(make_surface, theme):
    surface = make_surface()
    assert ensure_section_space(surface, 747, 14, theme) == 40
    assert surface.page_count() == 2


def test_ensure_section_space_does_not_loop_on_oversized_block(make_surface, theme):
    surface = make_surface()
    assert ensure_section_space(surface, 40, 2000, theme) == 40
    assert surface.page_count() == 1


@pytest.mark.parametrize(
    'heights',
    [
        [14] * 120,
        [14, 34, 100, 14, 250, 14, 14, 300, 14, 60, 700, 14],
        [720, 1, 720, 719, 2],
    ],
)
def test_guard_never_lets_a_block_cross_the_bottom_margin(make_surface, theme, heights):
    surface = make_surface()
    bottom = surface.height - theme.layout.margin
    cursor = theme.layout.margin
    pages_seen = 1
    for height in heights:
        before_pages = surface.page_count()
        cursor = ensure_section_space(surface, cursor, height, theme)
        if surface.page_count() != before_pages:
            assert cursor == theme.layout.margin
            pages_seen += 1
        assert cursor + height <= bottom
        cursor += height
    assert surface.page_count() == pages_seen


def test_section_title_advances_by_title_block(make_surface, theme):
    surface = make_surface()
    assert draw_section_title(surface, theme, 'Findings', 100, 'Subtitle') == 134
    texts = surface.texts()
    assert [call.content for call in texts] == ['Findings', 'Subtitle']
    assert texts[0].y == 100
    assert texts[0].style == 'bold'
    assert texts[0].font_size == theme.typography.section_title


def test_key_value_row_draws_both_cells_on_one_line(make_surface, theme):
    surface = make_surface()
    assert draw_key_value_row(surface, theme, 40, 200, 'Case ID', 'CASE-1') == 214
    label, value = surface.texts()
    assert (label.content, value.content) == ('Case ID', 'CASE-1')
    assert label.y == value.y == 200
    assert value.x > label.x


def test_key_value_row_truncates_long_values_to_one_line(make_surface, theme):
    surface = make_surface()
    draw_key_value_row(surface, theme, 40, 200, 'Label', 'word ' * 200)
    texts = surface.texts()
    assert len(texts) == 2
    assert texts[1].content.endswith('…')


def test_fit_single_line_keeps_short_text(make_surface):
    surface = make_surface()
    assert fit_single_line(surface, 'short', 300) == 'short'


def test_divider_advances_by_gap(make_surface, theme):
    surface = make_surface()
    assert draw_divider(surface, theme, 300) == 300 + theme.layout.divider_gap
    assert surface.calls[0].kind == 'line'


def test_paragraph_wraps_and_spills_onto_next_page(make_surface, theme):
    surface = make_surface()
    text = ' '.join(['lorem'] * 400)
    line_count = len(surface.split_text(text, surface.width - 2 * theme.layout.margin))
    end = draw_paragraph(surface, theme, text, 700)

    assert surface.page_count() == 2
    page_two = surface.texts(page=2)
    assert page_two[0].y == theme.layout.margin
    on_first_page = len(surface.texts(page=1))
    assert on_first_page == 4  # 700, 714, 728, 742
    assert end == theme.layout.margin + (line_count - on_first_page) * theme.layout.line_height


def test_image_block_is_scaled_and_guarded_as_one_unit(make_surface, theme):
    surface = make_surface()
    end = draw_image_block(
        surface,
        theme,
        b'png-bytes',
        'PNG',
        600,
        intrinsic_width=1040,
        intrinsic_height=520,
        caption='Trend',
    )
    assert surface.page_count() == 2
    caption, image = surface.calls[0], surface.calls[1]
    assert caption.page == image.page == 2
    assert caption.y == theme.layout.margin
    assert image.y == theme.layout.margin + theme.layout.line_height
    # 520 wide content box halves the intrinsic size.
    assert image.height == 260
    assert end == image.y + 260


def test_image_block_rejects_non_positive_size(make_surface, theme):
    with pytest.raises(ValueError):
        draw_image_block(make_surface(), theme, b'x', 'PNG', 40, intrinsic_width=0, intrinsic_height=10)


def test_key_value_row_applies_value_color(make_surface, theme):
    surface = make_surface()
    draw_key_value_row(surface, theme, 40, 200, 'Level', 'KRITISK', value_color=theme.colors.danger)
    draw_key_value_row(surface, theme, 40, 214, 'Owner', 'Board')
    colors = {call.content: call.color for call in surface.texts()}
    assert colors['KRITISK'] == theme.colors.danger
    assert colors['Board'] == theme.colors.text_primary
    assert colors['Level'] == theme.colors.text_secondary


def test_ensure_title_space_reserves_one_line_below_the_title(make_surface, theme):
    surface = make_surface()
    bottom = surface.height - theme.layout.margin
    assert ensure_title_space(surface, bottom - theme.layout.title_block - theme.layout.line_height, theme) == (
        bottom - theme.layout.title_block - theme.layout.line_height
    )
    assert surface.page_count() == 1
    assert ensure_title_space(surface, bottom - theme.layout.title_block, theme) == theme.layout.margin
    assert surface.page_count() == 2
