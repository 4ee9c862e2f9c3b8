from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

from casereport.types import CaseReport

from .context import RenderContext, SectionRenderer, section_name
from .decorations import decorate_pages
from .elements import content_start_y
from .filename import build_report_filename
from .surface import DrawingSurface
from .theme import Theme


logger = logging.getLogger(__name__)


class AssemblerState(str, Enum):
    assembling = 'assembling'
    done = 'done'
    failed = 'failed'


@dataclass(frozen=True)
class SectionTrace:
    section: str
    start_y: float
    end_y: float
    start_page: int
    end_page: int


class DocumentAssembler:
    """Folds section renderers over one surface and saves the document.

    One instance renders one document. Sections run in the order given; the
    first page is assumed to exist, later pages are added by the overflow
    guard inside the renderers.
    """

    def __init__(self, *, decorate: bool = True) -> None:
        self.decorate = decorate
        self.state: AssemblerState | None = None
        self.trace: list[SectionTrace] = []

    def render(
        self,
        surface: DrawingSurface,
        theme: Theme,
        report: CaseReport,
        sections: Sequence[SectionRenderer],
    ) -> Path:
        if self.state is not None:
            raise RuntimeError(f'assembler already used (state={self.state.value}); create one per export')
        self.state = AssemblerState.assembling

        stage = 'start'
        try:
            cursor_y = content_start_y(theme)
            for renderer in sections:
                stage = section_name(renderer)
                start_page = surface.page_count()
                start_y = cursor_y
                cursor_y = renderer(
                    RenderContext(surface=surface, theme=theme, report=report, cursor_y=cursor_y)
                )
                self.trace.append(
                    SectionTrace(
                        section=stage,
                        start_y=start_y,
                        end_y=cursor_y,
                        start_page=start_page,
                        end_page=surface.page_count(),
                    )
                )
                logger.debug('Section %s done: cursor %.1f -> %.1f, page %d', stage, start_y, cursor_y, surface.page_count())

            if self.decorate:
                stage = 'decorations'
                decorate_pages(surface, theme, report.metadata)

            stage = 'save'
            filename = build_report_filename(report.metadata)
            path = surface.save(filename)
        except Exception as exc:
            self.state = AssemblerState.failed
            logger.warning('Report assembly failed during %s: %s', stage, exc)
            raise

        self.state = AssemblerState.done
        logger.info('Rendered %s: %d sections on %d pages', path.name, len(self.trace), surface.page_count())
        return path


def render_report(
    surface: DrawingSurface,
    theme: Theme,
    report: CaseReport,
    sections: Sequence[SectionRenderer],
    *,
    decorate: bool = True,
) -> Path:
    return DocumentAssembler(decorate=decorate).render(surface, theme, report, sections)
