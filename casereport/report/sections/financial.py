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
from casereport.report.formatting import format_amount, format_number, format_percent, format_unit_value
from casereport.report.theme import ReportColor, Theme
from casereport.types import FinancialOverview


SECTION = 'financial'


def _amount(value: float | None, yoy_change: float | None = None) -> str:
    text = format_amount(value)
    if value is not None and yoy_change is not None:
        text = f'{text} ({format_percent(yoy_change, signed=True)} YoY)'
    return text


def _amount_color(theme: Theme, value: float | None) -> ReportColor | None:
    if value is not None and value < 0:
        return theme.colors.danger
    return None


def _metric_rows(theme: Theme, financial: FinancialOverview) -> list[tuple[str, str, ReportColor | None]]:
    rows = [
        (
            'Gross profit',
            _amount(financial.gross_profit, financial.yoy_gross_change),
            _amount_color(theme, financial.gross_profit),
        ),
        (
            'Profit after tax',
            _amount(financial.profit_after_tax, financial.yoy_profit_change),
            _amount_color(theme, financial.profit_after_tax),
        ),
        ('Equity', _amount(financial.equity), _amount_color(theme, financial.equity)),
    ]
    if financial.cash is not None:
        rows.append(('Cash', _amount(financial.cash), _amount_color(theme, financial.cash)))
    rows.append(('Solvency', format_percent(financial.solidity), None))
    rows.append(('DSO', f'{format_number(financial.dso)} days' if financial.dso is not None else 'N/A', None))
    return rows


@section(SECTION)
def render_financial_section(ctx: RenderContext) -> float:
    surface, theme, report = ctx.surface, ctx.theme, ctx.report
    layout = theme.layout
    financial = report.financial

    if financial is None:
        cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
        cursor_y = draw_section_title(surface, theme, 'Financial overview', cursor_y)
        cursor_y = draw_note(surface, theme, 'No financial data available.', cursor_y)
        return cursor_y + layout.section_spacing

    alerts = [
        (
            require_field(alert, 'label', section=SECTION, label=f'financial.alerts[{index}].label'),
            format_unit_value(
                require_field(alert, 'value', section=SECTION, label=f'financial.alerts[{index}].value'),
                getattr(alert, 'unit', 'DKK'),
            ),
            alert.description,
        )
        for index, alert in enumerate(financial.alerts)
    ]
    rows = _metric_rows(theme, financial)

    cursor_y = ensure_title_space(surface, ctx.cursor_y, theme)
    cursor_y = draw_section_title(surface, theme, 'Financial overview', cursor_y, 'Key figures and critical observations')
    for label, value, color in rows:
        cursor_y = ensure_section_space(surface, cursor_y, layout.line_height, theme)
        cursor_y = draw_key_value_row(surface, theme, layout.margin, cursor_y, label, value, value_color=color)

    if alerts:
        cursor_y += layout.line_height / 2
        cursor_y = draw_paragraph(surface, theme, 'Critical observations', cursor_y, style='bold', color=theme.colors.danger)
        for label, value, description in alerts:
            cursor_y = draw_paragraph(surface, theme, f'• {label}: {value}', cursor_y, x=layout.margin + BULLET_INDENT)
            if description:
                cursor_y = draw_paragraph(
                    surface,
                    theme,
                    description,
                    cursor_y,
                    x=layout.margin + 2 * BULLET_INDENT,
                    size=theme.typography.small,
                    color=theme.colors.text_secondary,
                )

    return cursor_y + layout.section_spacing
