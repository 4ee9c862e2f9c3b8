from __future__ import annotations

from casereport.report.context import RenderContext, require_field, section
from casereport.report.elements import (
    BULLET_INDENT,
    draw_key_value_row,
    draw_note,
    draw_paragraph,
    draw_section_title,
    ensure_section_space,
    ensure_title_space,
)
from casereport.report.formatting import format_amount, format_number


SECTION = 'risk'


@section(SECTION)
def render_risk_section(ctx: RenderContext) -> float:
    surface, theme, report = ctx.surface, ctx.theme, ctx.report
    layout = theme.layout
    risk = report.risk

    if risk is None:
        cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
        cursor_y = draw_section_title(surface, theme, 'Risk & compliance', cursor_y)
        cursor_y = draw_note(surface, theme, 'No risk assessment available.', cursor_y)
        return cursor_y + layout.section_spacing

    level = require_field(risk, 'level', section=SECTION, label='risk.level')
    categories = [
        (
            require_field(score, 'category', section=SECTION, label=f'risk.scores[{index}].category'),
            f'{score.risk_level} ({format_number(score.score)}/{format_number(score.max_score)})',
            theme.severity_color(score.risk_level),
            score.justification,
        )
        for index, score in enumerate(risk.scores)
    ]

    cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
    cursor_y = draw_section_title(
        surface,
        theme,
        'Risk & compliance',
        cursor_y,
        f'Overall level: {level}',
    )

    rows = [
        (
            'Total risk',
            f'{format_number(risk.total_score)}/{format_number(risk.max_score)} ({level})',
            theme.severity_color(level),
        )
    ]
    if risk.tax_case_exposure:
        rows.append(('Tax case exposure', format_amount(risk.tax_case_exposure), theme.colors.warning))
    for label, value, color in rows:
        cursor_y = ensure_section_space(surface, cursor_y, layout.line_height, theme)
        cursor_y = draw_key_value_row(surface, theme, layout.margin, cursor_y, label, value, value_color=color)

    if risk.compliance_issue:
        cursor_y = draw_paragraph(surface, theme, risk.compliance_issue, cursor_y)

    for category, value, color, justification in categories:
        cursor_y = ensure_section_space(surface, cursor_y, layout.line_height, theme)
        cursor_y = draw_key_value_row(surface, theme, layout.margin, cursor_y, category, value, value_color=color)
        if justification:
            cursor_y = draw_paragraph(
                surface,
                theme,
                justification,
                cursor_y,
                x=layout.margin + BULLET_INDENT,
                size=theme.typography.small,
                color=theme.colors.text_secondary,
            )

    return cursor_y + layout.section_spacing
