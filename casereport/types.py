from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from .config import get_settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Subject(str, Enum):
    tsl = 'tsl'
    umit = 'umit'


class Severity(str, Enum):
    low = 'low'
    medium = 'medium'
    high = 'high'
    critical = 'critical'


class Trend(str, Enum):
    up = 'up'
    down = 'down'
    flat = 'flat'


class ReportMetadata(BaseModel):
    case_id: str
    case_name: str
    subject: Subject
    classification: str
    exported_by: str
    exported_at: datetime
    report_version: str


class Kpi(BaseModel):
    label: str
    value: str | float | int
    trend: Trend | None = None


class Finding(BaseModel):
    title: str
    severity: Severity = Severity.medium
    summary: str | None = None
    reference: str | None = None


class FinancialAlert(BaseModel):
    label: str
    value: float
    unit: Literal['DKK', 'days'] = 'DKK'
    description: str | None = None


class FinancialOverview(BaseModel):
    gross_profit: float | None = None
    profit_after_tax: float | None = None
    equity: float | None = None
    cash: float | None = None
    # Solvency ratio in percent
    solidity: float | None = None
    # Days sales outstanding
    dso: float | None = None
    yoy_gross_change: float | None = None
    yoy_profit_change: float | None = None
    alerts: list[FinancialAlert] = Field(default_factory=list)


class Attachment(BaseModel):
    name: str
    kind: str = 'document'
    size_bytes: int | None = None
    sha256: str | None = None
    description: str | None = None


class RiskScore(BaseModel):
    category: str
    risk_level: str
    score: float
    max_score: float
    justification: str | None = None


class RiskAssessment(BaseModel):
    total_score: float
    max_score: float
    level: str
    tax_case_exposure: float | None = None
    compliance_issue: str | None = None
    scores: list[RiskScore] = Field(default_factory=list)


class ActionItem(BaseModel):
    title: str
    priority: str = 'medium'
    owner_role: str | None = None
    time_horizon: str | None = None


class TimelineEvent(BaseModel):
    date: str
    title: str
    description: str | None = None


class ChartImage(BaseModel):
    title: str
    data_url: str
    width: float
    height: float


class Signatory(BaseModel):
    name: str
    role: str
    signed_at: datetime | None = None


class CaseReport(BaseModel):
    metadata: ReportMetadata
    summary: str | None = None
    kpis: list[Kpi] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)
    financial: FinancialOverview | None = None
    attachments: list[Attachment] = Field(default_factory=list)
    risk: RiskAssessment | None = None
    actions: list[ActionItem] = Field(default_factory=list)
    timeline: list[TimelineEvent] = Field(default_factory=list)
    charts: list[ChartImage] = Field(default_factory=list)
    signatures: list[Signatory] = Field(default_factory=list)


class ExportResult(BaseModel):
    success: bool
    filename: str | None = None
    path: str | None = None
    page_count: int = 0
    sections: list[str] = Field(default_factory=list)
    error: str | None = None


def build_report_metadata(
    *,
    case_id: str,
    case_name: str,
    subject: Subject | str,
    exported_by: str | None = None,
    exported_at: datetime | None = None,
    report_version: str | None = None,
    classification: str | None = None,
) -> ReportMetadata:
    settings = get_settings()
    return ReportMetadata(
        case_id=case_id,
        case_name=case_name,
        subject=subject,
        exported_by=exported_by or settings.default_exported_by,
        exported_at=exported_at or utcnow(),
        report_version=report_version or settings.default_report_version,
        classification=classification or settings.default_classification,
    )
