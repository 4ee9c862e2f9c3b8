from __future__ import annotations

import pytest

from casereport.report.assembler import AssemblerState, DocumentAssembler, render_report
from casereport.report.context import ReportDataError
from casereport.report.pipeline import DEFAULT_SECTION_ORDER, SECTION_REGISTRY, resolve_sections
from casereport.report.surface import ReportLabSurface
from casereport.report.theme import REPORT_THEME, Theme, ThemeLayout
from casereport.types import CaseReport, ReportMetadata


SECTION_TITLES = {
    'metadata': 'Metadata / notes',
    'summary': 'Executive summary',
    'findings': 'Findings',
    'financial': 'Financial overview',
    'risk': 'Risk & compliance',
    'evidence': 'Evidence',
    'actions': 'Actions',
    'timeline': 'Timeline',
    'charts': 'Trend charts',
    'signatures': 'Signatures',
}


@pytest.fixture
def theme() -> Theme:
    return Theme(layout=ThemeLayout(margin=40, line_height=14, section_spacing=20))


def _titles_in_draw_order(surface, theme):
    return [
        call.content
        for call in surface.texts()
        if call.style == 'bold' and call.font_size == theme.typography.section_title
        and call.y >= theme.layout.margin
    ]


def test_sections_render_in_caller_order(make_surface, theme, full_report):
    order = ['signatures', 'timeline', 'metadata', 'financial', 'findings', 'summary']
    surface = make_surface()
    render_report(surface, theme, full_report, resolve_sections(order), decorate=False)
    assert _titles_in_draw_order(surface, theme) == [SECTION_TITLES[name] for name in order]


def test_default_order_starts_with_metadata():
    assert DEFAULT_SECTION_ORDER[0] == 'metadata'
    assert set(DEFAULT_SECTION_ORDER) == set(SECTION_REGISTRY)


def test_resolve_sections_rejects_unknown_name():
    with pytest.raises(ValueError, match="unknown report section 'appendix'"):
        resolve_sections(['metadata', 'appendix'])


def test_render_is_deterministic(make_surface, theme, full_report):
    runs = []
    for _ in range(2):
        surface = make_surface(height=500)
        assembler = DocumentAssembler()
        path = assembler.render(surface, theme, full_report, resolve_sections())
        runs.append((surface.calls, surface.page_count(), assembler.trace, path))
    assert runs[0] == runs[1]


def test_cursor_starts_at_margin_and_is_threaded_between_sections(make_surface, theme, full_report):
    surface = make_surface()
    assembler = DocumentAssembler(decorate=False)
    assembler.render(surface, theme, full_report, resolve_sections())

    assert assembler.state is AssemblerState.done
    assert assembler.trace[0].start_y == theme.layout.margin
    for previous, current in zip(assembler.trace, assembler.trace[1:]):
        assert current.start_y == previous.end_y
    assert [item.section for item in assembler.trace] == list(DEFAULT_SECTION_ORDER)


def test_cursor_never_moves_up_within_a_page(make_surface, theme, full_report):
    surface = make_surface(height=500)
    render_report(surface, theme, full_report, resolve_sections(), decorate=False)

    previous = None
    for call in surface.calls:
        if previous is not None and call.page == previous.page:
            assert call.y >= previous.y
        if previous is not None and call.page != previous.page:
            assert call.page == previous.page + 1
            assert call.y == theme.layout.margin
        previous = call


def test_saves_with_deterministic_filename(make_surface, theme, full_report):
    surface = make_surface()
    path = render_report(surface, theme, full_report, resolve_sections(['metadata']))
    assert surface.saved == ['case-2024-017_nordhavn-holding-aps_case-report_20240517_v3.pdf']
    assert path.name == surface.saved[0]


def test_missing_case_id_aborts_without_saving(make_surface, theme, metadata):
    broken = ReportMetadata.model_construct(**metadata.model_dump(exclude={'case_id'}))
    report = CaseReport.model_construct(metadata=broken)
    surface = make_surface()
    assembler = DocumentAssembler()

    with pytest.raises(ReportDataError, match='metadata.case_id'):
        assembler.render(surface, theme, report, resolve_sections())

    assert assembler.state is AssemblerState.failed
    assert surface.saved == []


def test_missing_case_id_writes_no_file(tmp_path, metadata):
    broken = ReportMetadata.model_construct(**metadata.model_dump(exclude={'case_id'}))
    report = CaseReport.model_construct(metadata=broken)
    output_dir = tmp_path / 'out'
    surface = ReportLabSurface(output_dir)

    with pytest.raises(ReportDataError):
        render_report(surface, REPORT_THEME, report, resolve_sections())

    assert not output_dir.exists() or list(output_dir.iterdir()) == []


def test_surface_failure_propagates_unchanged(make_surface, theme, full_report):
    surface = make_surface(fail_on_save=True)
    assembler = DocumentAssembler()
    with pytest.raises(OSError, match='disk full'):
        assembler.render(surface, theme, full_report, resolve_sections(['metadata']))
    assert assembler.state is AssemblerState.failed


def test_assembler_renders_only_once(make_surface, theme, full_report):
    assembler = DocumentAssembler()
    assembler.render(make_surface(), theme, full_report, resolve_sections(['metadata']))
    with pytest.raises(RuntimeError, match='already used'):
        assembler.render(make_surface(), theme, full_report, resolve_sections(['metadata']))


def test_decorations_stay_inside_margin_bands(make_surface, theme, full_report):
    surface = make_surface(height=500)
    assembler = DocumentAssembler()
    assembler.render(surface, theme, full_report, resolve_sections())

    pages = surface.page_count()
    assert pages > 1
    top, bottom = theme.layout.margin, surface.height - theme.layout.margin
    headers = [call for call in surface.texts() if call.content.startswith('Page ') and call.y < top]
    footers = [call for call in surface.texts() if call.content.startswith('Page ') and call.y > bottom]
    assert [call.content for call in headers] == [f'Page {n}/{pages}' for n in range(1, pages + 1)]
    assert [call.content for call in footers] == [f'Page {n} / {pages}' for n in range(1, pages + 1)]
    for call in surface.texts():
        in_content = top <= call.y < bottom
        is_decoration = call.content.startswith('Page ') or call.content in {
            theme.brand.short_name,
            theme.brand.suite,
            theme.brand.name,
        }
        if is_decoration:
            assert not in_content


def test_long_case_name_is_trimmed_in_page_header(make_surface, theme, full_report):
    long_name = 'Nordhavn Holding ApS og datterselskaber ' * 4
    report = full_report.model_copy(
        update={'metadata': full_report.metadata.model_copy(update={'case_name': long_name})}
    )
    surface = make_surface()

    render_report(surface, theme, report, resolve_sections(['metadata']))

    header_names = [
        call for call in surface.texts() if call.y < theme.layout.margin and call.content.startswith('Nordhavn')
    ]
    assert len(header_names) == surface.page_count()
    slot = (surface.width - 2 * theme.layout.margin) * 0.28
    for call in header_names:
        assert call.content.endswith('…')
        # Recording surface advances half the font size per character.
        assert len(call.content) * call.font_size * 0.5 <= slot
