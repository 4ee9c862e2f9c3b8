from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from .config import Settings, get_settings
from .report.assembler import DocumentAssembler
from .report.context import section_name
from .report.pipeline import resolve_sections
from .report.surface import ReportLabSurface
from .report.theme import Theme, build_theme
from .storage import append_event
from .types import CaseReport, ExportResult


logger = logging.getLogger(__name__)


class ExportService:
    """Runs one PDF export per call and reports the outcome as an ExportResult."""

    def __init__(self, settings: Settings | None = None, *, theme: Theme | None = None) -> None:
        self.settings = settings or get_settings()
        self.theme = theme or build_theme(self.settings)

    def _record(self, root: Path, event: str, **extra: Any) -> None:
        if not self.settings.record_export_events:
            return
        try:
            append_event(event, root=root, **extra)
        except OSError as exc:
            logger.warning('Failed to append export event %s under %s: %s', event, root, exc)

    def create_surface(self, report: CaseReport, output_dir: Path, *, page_format: str | None = None) -> ReportLabSurface:
        metadata = getattr(report, 'metadata', None)
        case_id = getattr(metadata, 'case_id', None) or ''
        case_name = getattr(metadata, 'case_name', None) or case_id
        return ReportLabSurface(
            output_dir,
            page_format=page_format or self.settings.pdf_page_format,
            title=f'{case_name} · {self.theme.brand.suite}',
            subject=getattr(metadata, 'classification', None),
            author=getattr(metadata, 'exported_by', None),
            keywords=f'{case_id}, {self.theme.brand.short_name}',
            creator=self.settings.app_name,
        )

    def export(
        self,
        report: CaseReport,
        *,
        sections: Iterable[str] | None = None,
        output_dir: Path | None = None,
        page_format: str | None = None,
    ) -> ExportResult:
        target = Path(output_dir) if output_dir is not None else self.settings.output_dir
        case_id = getattr(getattr(report, 'metadata', None), 'case_id', None)

        try:
            renderers = resolve_sections(sections)
        except ValueError as exc:
            return ExportResult(success=False, error=str(exc))
        names = [section_name(renderer) for renderer in renderers]

        self._record(target, 'export_started', case_id=case_id, sections=names)
        assembler = DocumentAssembler()
        try:
            surface = self.create_surface(report, target, page_format=page_format)
            path = assembler.render(surface, self.theme, report, renderers)
        except (OSError, ValueError) as exc:
            logger.warning('Export of case %s failed: %s', case_id, exc)
            self._record(target, 'export_failed', case_id=case_id, error=str(exc))
            return ExportResult(success=False, sections=names, error=str(exc))

        page_count = surface.page_count()
        self._record(
            target,
            'export_completed',
            case_id=case_id,
            filename=path.name,
            page_count=page_count,
        )
        logger.info('Exported case %s to %s (%d pages)', case_id, path, page_count)
        return ExportResult(
            success=True,
            filename=path.name,
            path=str(path),
            page_count=page_count,
            sections=names,
        )


def export_case_report(report: CaseReport, **kwargs: Any) -> ExportResult:
    return ExportService().export(report, **kwargs)
