from __future__ import annotations

from datetime import datetime


def format_timestamp(value: datetime | None, fmt: str = '%d.%m.%Y %H:%M') -> str:
    if value is None:
        return '-'
    return value.strftime(fmt)


def format_number(value: float | int | None) -> str:
    if value is None:
        return 'N/A'
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return f'{number:.1f}'


def format_amount(value: float | None, currency: str = 'DKK') -> str:
    if value is None:
        return 'N/A'
    millions = value / 1_000_000
    return f'{currency} {millions:.1f}m'


def format_bytes(size: int | None) -> str:
    if size is None or size < 0:
        return '-'
    if size < 1024:
        return f'{size} B'
    value = size / 1024
    for unit in ('KB', 'MB'):
        if value < 1024:
            return f'{value:.1f} {unit}'
        value /= 1024
    return f'{value:.1f} GB'


def format_percent(value: float | None, *, signed: bool = False) -> str:
    if value is None:
        return 'N/A'
    return f'{value:+.1f}%' if signed else f'{value:.1f}%'


def format_unit_value(value: float, unit: str) -> str:
    """Alert values carry their own unit: whole kroner or a day count."""
    if unit == 'DKK':
        return f'DKK {value:,.0f}'
    return f'{format_number(value)} {unit}'
