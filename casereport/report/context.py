from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from casereport.types import CaseReport

from .surface import DrawingSurface
from .theme import Theme


class ReportDataError(ValueError):
    """Raised by a section renderer when required report data is missing."""

    def __init__(self, section: str, field: str, detail: str = 'is missing') -> None:
        self.section = section
        self.field = field
        super().__init__(f"{section} section: required field '{field}' {detail}")


@dataclass(frozen=True)
class RenderContext:
    surface: DrawingSurface
    theme: Theme
    report: CaseReport
    cursor_y: float


SectionRenderer = Callable[[RenderContext], float]


def section(name: str) -> Callable[[SectionRenderer], SectionRenderer]:
    """Tag a renderer with the name used in the section registry and logs."""

    def decorate(fn: SectionRenderer) -> SectionRenderer:
        fn.section_name = name  # type: ignore[attr-defined]
        return fn

    return decorate


def section_name(renderer: SectionRenderer) -> str:
    return getattr(renderer, 'section_name', None) or getattr(renderer, '__name__', repr(renderer))


def require_field(owner: Any, path: str, *, section: str, label: str | None = None) -> Any:
    """Resolve a dotted attribute path and fail if the value is absent or blank.

    ``label`` overrides the field name reported in the error, e.g. ``findings[3].title``.
    """
    field_name = label or path
    value: Any = owner
    for part in path.split('.'):
        value = getattr(value, part, None)
        if value is None:
            raise ReportDataError(section, field_name)
    if isinstance(value, str) and not value.strip():
        raise ReportDataError(section, field_name, detail='is blank')
    return value
