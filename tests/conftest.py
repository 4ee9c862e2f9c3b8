from __future__ import annotations

import base64
import textwrap
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import pytest

from casereport.config import get_settings
from casereport.report.surface import PageSize
from casereport.types import (
    ActionItem,
    Attachment,
    CaseReport,
    ChartImage,
    FinancialAlert,
    FinancialOverview,
    Finding,
    Kpi,
    ReportMetadata,
    RiskAssessment,
    RiskScore,
    Signatory,
    TimelineEvent,
)


# 1x1 transparent PNG
PNG_DATA_URL = (
    'data:image/png;base64,'
    'iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=='
)


@dataclass(frozen=True)
class DrawCall:
    kind: str
    page: int
    x: float
    y: float
    content: str = ''
    height: float = 0.0
    font_size: float = 0.0
    style: str = 'normal'
    color: tuple[int, int, int] | None = None


class RecordingSurface:
    """In-memory DrawingSurface that records every call for assertions."""

    def __init__(self, width: float = 600, height: float = 800, *, fail_on_save: bool = False) -> None:
        self.width = width
        self.height = height
        self.fail_on_save = fail_on_save
        self.pages = 1
        self.current = 1
        self.calls: list[DrawCall] = []
        self.saved: list[str] = []
        self.font_size = 10.0
        self.style = 'normal'
        self.color: tuple[int, int, int] | None = None

    def text(self, content, x, y, *, max_width=None, align='left'):
        self.calls.append(
            DrawCall(
                'text',
                self.current,
                x,
                y,
                str(content),
                font_size=self.font_size,
                style=self.style,
                color=self.color,
            )
        )

    def line(self, x1, y1, x2, y2):
        self.calls.append(DrawCall('line', self.current, x1, min(y1, y2)))

    def image(self, data, fmt, x, y, w, h):
        self.calls.append(DrawCall('image', self.current, x, y, fmt, height=h))

    def set_font(self, family, style='normal'):
        self.style = style

    def set_font_size(self, size):
        self.font_size = float(size)

    def set_text_color(self, rgb):
        self.color = tuple(rgb)

    def set_draw_color(self, rgb):
        pass

    def set_line_width(self, width):
        pass

    def split_text(self, content, max_width):
        # Fixed advance of half the font size per character.
        per_line = max(1, int(max_width // (self.font_size * 0.5)))
        return textwrap.wrap(str(content or ''), per_line) or ['']

    def add_page(self):
        self.pages += 1
        self.current = self.pages

    def page_size(self):
        return PageSize(self.width, self.height)

    def page_count(self):
        return self.pages

    def set_page(self, number):
        if number < 1 or number > self.pages:
            raise IndexError(number)
        self.current = number

    def save(self, filename):
        if self.fail_on_save:
            raise OSError('disk full')
        self.saved.append(filename)
        return Path(filename)

    def texts(self, page: int | None = None) -> list[DrawCall]:
        return [call for call in self.calls if call.kind == 'text' and (page is None or call.page == page)]


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('REPORT_OUTPUT_DIR', str(tmp_path / 'exports'))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def make_surface():
    return RecordingSurface


@pytest.fixture
def png_bytes() -> bytes:
    return base64.b64decode(PNG_DATA_URL.split(',', 1)[1])


@pytest.fixture
def metadata() -> ReportMetadata:
    return ReportMetadata(
        case_id='CASE-2024-017',
        case_name='Nordhavn Holding ApS',
        subject='tsl',
        classification='INTERN / FORTROLIG',
        exported_by='Analyst One',
        exported_at=datetime(2024, 5, 17, 9, 30, tzinfo=timezone.utc),
        report_version='v3',
    )


@pytest.fixture
def full_report(metadata) -> CaseReport:
    return CaseReport(
        metadata=metadata,
        summary=(
            '# Overview\n\n'
            'Group liquidity deteriorated through **Q4** while intercompany loans grew.\n\n'
            '- Equity below statutory minimum\n'
            '- Tax case pending\n'
        ),
        kpis=[Kpi(label='Gross profit', value=12.5, trend='down'), Kpi(label='DSO', value='74 days')],
        findings=[
            Finding(title=f'Finding {index}', severity='high', summary='Transfer pricing deviates from policy.')
            for index in range(1, 6)
        ],
        financial=FinancialOverview(
            gross_profit=12_500_000,
            profit_after_tax=-1_200_000,
            equity=3_400_000,
            solidity=8.4,
            dso=74,
            yoy_gross_change=-8.0,
            alerts=[
                FinancialAlert(label='Negative result', value=-1_200_000, unit='DKK'),
                FinancialAlert(label='Slow collection', value=74, unit='days', description='Above 60-day policy.'),
            ],
        ),
        attachments=[Attachment(name='annual_report_2023.pdf', size_bytes=482113, sha256='ab' * 32)],
        risk=RiskAssessment(
            total_score=17,
            max_score=25,
            level='HIGH',
            tax_case_exposure=4_200_000,
            scores=[RiskScore(category='Tax', risk_level='HIGH', score=4, max_score=5, justification='Open audit.')],
        ),
        actions=[
            ActionItem(title='File annual accounts', priority='low'),
            ActionItem(title='Appoint restructuring advisor', priority='critical', owner_role='Board'),
        ],
        timeline=[
            TimelineEvent(date='2024-01-31', title='Auditor resigned', description='Qualified opinion withdrawn.'),
            TimelineEvent(date='2024-03-15', title='Tax assessment issued'),
        ],
        charts=[ChartImage(title='Gross profit trend', data_url=PNG_DATA_URL, width=400, height=200)],
        signatures=[Signatory(name='Analyst One', role='Case officer')],
    )
