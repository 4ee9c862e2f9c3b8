from __future__ import annotations

from dataclasses import dataclass, field, fields

from casereport.config import Settings

ReportColor = tuple[int, int, int]


def _check_positive(owner: object) -> None:
    for item in fields(owner):
        value = getattr(owner, item.name)
        if not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f'{type(owner).__name__}.{item.name} must be positive, got {value!r}')


@dataclass(frozen=True)
class ThemeLayout:
    margin: float = 56
    section_spacing: float = 32
    column_gap: float = 28
    line_height: float = 16
    # Height consumed by a section title plus its subtitle line.
    title_block: float = 36
    divider_gap: float = 12

    def __post_init__(self) -> None:
        _check_positive(self)


@dataclass(frozen=True)
class ThemeTypography:
    heading: float = 20
    subheading: float = 14
    section_title: float = 12
    body: float = 10
    small: float = 8

    def __post_init__(self) -> None:
        _check_positive(self)


@dataclass(frozen=True)
class ThemeColors:
    accent: ReportColor = (247, 181, 0)
    text_primary: ReportColor = (14, 23, 47)
    text_secondary: ReportColor = (71, 85, 105)
    text_muted: ReportColor = (148, 163, 184)
    divider: ReportColor = (226, 232, 240)
    danger: ReportColor = (239, 68, 68)
    warning: ReportColor = (245, 158, 11)
    success: ReportColor = (34, 197, 94)


@dataclass(frozen=True)
class ThemeBrand:
    name: str = 'Intel24 Data Intel™'
    short_name: str = 'Intel24'
    suite: str = 'Executive Intelligence Brief'


@dataclass(frozen=True)
class Theme:
    layout: ThemeLayout = field(default_factory=ThemeLayout)
    typography: ThemeTypography = field(default_factory=ThemeTypography)
    colors: ThemeColors = field(default_factory=ThemeColors)
    brand: ThemeBrand = field(default_factory=ThemeBrand)
    font_family: str = 'helvetica'
    timestamp_format: str = '%d.%m.%Y %H:%M'

    def severity_color(self, level: str | None) -> ReportColor:
        token = str(level or '').strip().lower()
        if token in {'critical', 'kritisk'}:
            return self.colors.danger
        if token in {'high', 'høj'}:
            return self.colors.warning
        if token in {'medium', 'moderat'}:
            return self.colors.accent
        if token in {'low', 'lav'}:
            return self.colors.success
        return self.colors.text_muted


REPORT_THEME = Theme()


def build_theme(settings: Settings) -> Theme:
    return Theme(
        layout=ThemeLayout(
            margin=settings.pdf_page_margin,
            section_spacing=settings.pdf_section_spacing,
            column_gap=settings.pdf_column_gap,
            line_height=settings.pdf_line_height,
            title_block=settings.pdf_title_block,
            divider_gap=settings.pdf_divider_gap,
        ),
        typography=ThemeTypography(
            heading=settings.pdf_heading_font_size,
            subheading=settings.pdf_subheading_font_size,
            section_title=settings.pdf_title_font_size,
            body=settings.pdf_body_font_size,
            small=settings.pdf_small_font_size,
        ),
        brand=ThemeBrand(
            name=settings.brand_name,
            short_name=settings.brand_short_name,
            suite=settings.brand_suite,
        ),
        font_family=settings.pdf_font_name,
        timestamp_format=settings.timestamp_format,
    )
