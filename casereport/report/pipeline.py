from __future__ import annotations

from typing import Iterable

from .context import SectionRenderer
from .sections.actions import render_actions_section
from .sections.charts import render_charts_section
from .sections.evidence import render_evidence_section
from .sections.financial import render_financial_section
from .sections.findings import render_findings_section
from .sections.metadata import render_metadata_section
from .sections.risk import render_risk_section
from .sections.signatures import render_signatures_section
from .sections.summary import render_summary_section
from .sections.timeline import render_timeline_section


SECTION_REGISTRY: dict[str, SectionRenderer] = {
    'metadata': render_metadata_section,
    'summary': render_summary_section,
    'findings': render_findings_section,
    'financial': render_financial_section,
    'risk': render_risk_section,
    'evidence': render_evidence_section,
    'actions': render_actions_section,
    'timeline': render_timeline_section,
    'charts': render_charts_section,
    'signatures': render_signatures_section,
}

DEFAULT_SECTION_ORDER: tuple[str, ...] = tuple(SECTION_REGISTRY)


def resolve_sections(names: Iterable[str] | None = None) -> list[SectionRenderer]:
    """Map section names to renderers, keeping the caller's order."""
    if names is None:
        names = DEFAULT_SECTION_ORDER
    renderers: list[SectionRenderer] = []
    for raw in names:
        name = str(raw or '').strip().lower()
        if not name:
            continue
        renderer = SECTION_REGISTRY.get(name)
        if renderer is None:
            available = ', '.join(SECTION_REGISTRY)
            raise ValueError(f"unknown report section '{raw}'. Available sections: {available}")
        renderers.append(renderer)
    if not renderers:
        raise ValueError('at least one report section is required')
    return renderers
