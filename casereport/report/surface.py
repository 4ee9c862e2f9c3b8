from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Protocol, Union

from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from casereport.storage import safe_artifact_name, write_bytes_atomic


logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

PAGE_FORMATS: dict[str, tuple[float, float]] = {
    'A4': A4,
    'LETTER': letter,
}

_BASE14_FONTS: dict[str, dict[str, str]] = {
    'helvetica': {
        'normal': 'Helvetica',
        'bold': 'Helvetica-Bold',
        'italic': 'Helvetica-Oblique',
        'bolditalic': 'Helvetica-BoldOblique',
    },
    'times': {
        'normal': 'Times-Roman',
        'bold': 'Times-Bold',
        'italic': 'Times-Italic',
        'bolditalic': 'Times-BoldItalic',
    },
    'courier': {
        'normal': 'Courier',
        'bold': 'Courier-Bold',
        'italic': 'Courier-Oblique',
        'bolditalic': 'Courier-BoldOblique',
    },
}
_FALLBACK_FONT = 'Helvetica'


class PageSize(NamedTuple):
    width: float
    height: float


class DrawingSurface(Protocol):
    """Paged canvas the layout engine draws on.

    Coordinates are in points, top-down, origin at the top-left corner of the
    current page. The ``y`` passed to ``text`` is the top of the first line;
    ``image`` takes the top-left corner.
    """

    def text(
        self,
        content: str,
        x: float,
        y: float,
        *,
        max_width: float | None = None,
        align: str = 'left',
    ) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None: ...

    def image(self, data: bytes, fmt: str, x: float, y: float, w: float, h: float) -> None: ...

    def set_font(self, family: str, style: str = 'normal') -> None: ...

    def set_font_size(self, size: float) -> None: ...

    def set_text_color(self, rgb: RGB) -> None: ...

    def set_draw_color(self, rgb: RGB) -> None: ...

    def set_line_width(self, width: float) -> None: ...

    def split_text(self, content: str, max_width: float) -> list[str]: ...

    def add_page(self) -> None: ...

    def page_size(self) -> PageSize: ...

    def page_count(self) -> int: ...

    def set_page(self, number: int) -> None: ...

    def save(self, filename: str) -> Path: ...


def resolve_font_name(family: str, style: str = 'normal') -> str:
    family_key = str(family or '').strip().lower()
    style_key = str(style or 'normal').strip().lower().replace('-', '').replace(' ', '')
    if style_key in {'', 'regular', 'roman'}:
        style_key = 'normal'
    if style_key in {'oblique'}:
        style_key = 'italic'
    if style_key in {'italicbold', 'boldoblique'}:
        style_key = 'bolditalic'

    variants = _BASE14_FONTS.get(family_key)
    if variants is not None:
        return variants.get(style_key, variants['normal'])

    candidate = str(family or '').strip()
    try:
        pdfmetrics.getFont(candidate)
        return candidate
    except Exception:
        logger.warning('PDF font %s is not registered; falling back to %s', candidate, _FALLBACK_FONT)
        return _FALLBACK_FONT


def _rgb_fraction(rgb: RGB) -> tuple[float, float, float]:
    red, green, blue = rgb
    return red / 255.0, green / 255.0, blue / 255.0


@dataclass(frozen=True)
class _TextOp:
    content: str
    x: float
    y: float  # baseline
    align: str
    font_name: str
    font_size: float
    color: RGB


@dataclass(frozen=True)
class _LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    color: RGB
    width: float


@dataclass(frozen=True)
class _ImageOp:
    data: bytes
    fmt: str
    x: float
    y: float
    w: float
    h: float


_Op = Union[_TextOp, _LineOp, _ImageOp]


class ReportLabSurface:
    """DrawingSurface backed by a reportlab canvas.

    Drawing calls are recorded per page so that earlier pages can still be
    revisited (page headers need the final page count). Nothing is written
    until ``save`` replays the pages into an in-memory PDF and moves the bytes
    into ``output_dir`` atomically.
    """

    def __init__(
        self,
        output_dir: Path,
        *,
        page_format: str = 'A4',
        title: str | None = None,
        author: str | None = None,
        subject: str | None = None,
        keywords: str | None = None,
        creator: str = 'Intel24 Console',
    ) -> None:
        fmt = str(page_format or 'A4').strip().upper()
        if fmt not in PAGE_FORMATS:
            raise ValueError(f'unsupported page format: {page_format}')
        self._output_dir = Path(output_dir)
        self._pagesize = PageSize(*PAGE_FORMATS[fmt])
        self._pages: list[list[_Op]] = [[]]
        self._current = 0

        self._font_name = _FALLBACK_FONT
        self._font_size = 10.0
        self._text_color: RGB = (0, 0, 0)
        self._draw_color: RGB = (0, 0, 0)
        self._line_width = 1.0

        self._title = title
        self._author = author
        self._subject = subject
        self._keywords = keywords
        self._creator = creator

    # drawing

    def text(
        self,
        content: str,
        x: float,
        y: float,
        *,
        max_width: float | None = None,
        align: str = 'left',
    ) -> None:
        raw = str(content or '')
        lines = self.split_text(raw, max_width) if max_width else raw.split('\n')
        leading = self._font_size * 1.15
        ascent, _descent = pdfmetrics.getAscentDescent(self._font_name, self._font_size)
        for index, line in enumerate(lines):
            self._pages[self._current].append(
                _TextOp(
                    content=line,
                    x=x,
                    y=y + ascent + index * leading,
                    align=align,
                    font_name=self._font_name,
                    font_size=self._font_size,
                    color=self._text_color,
                )
            )

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._pages[self._current].append(
            _LineOp(x1=x1, y1=y1, x2=x2, y2=y2, color=self._draw_color, width=self._line_width)
        )

    def image(self, data: bytes, fmt: str, x: float, y: float, w: float, h: float) -> None:
        if not data:
            raise ValueError('image data is empty')
        self._pages[self._current].append(_ImageOp(data=bytes(data), fmt=fmt, x=x, y=y, w=w, h=h))

    # state

    def set_font(self, family: str, style: str = 'normal') -> None:
        self._font_name = resolve_font_name(family, style)

    def set_font_size(self, size: float) -> None:
        if size <= 0:
            raise ValueError(f'font size must be positive, got {size}')
        self._font_size = float(size)

    def set_text_color(self, rgb: RGB) -> None:
        self._text_color = tuple(rgb)  # type: ignore[assignment]

    def set_draw_color(self, rgb: RGB) -> None:
        self._draw_color = tuple(rgb)  # type: ignore[assignment]

    def set_line_width(self, width: float) -> None:
        self._line_width = float(width)

    def split_text(self, content: str, max_width: float) -> list[str]:
        lines: list[str] = []
        for line in simpleSplit(str(content or ''), self._font_name, self._font_size, max_width):
            lines.extend(self._break_wide_line(line, max_width))
        return lines or ['']

    def text_width(self, content: str) -> float:
        return pdfmetrics.stringWidth(str(content or ''), self._font_name, self._font_size)

    def _break_wide_line(self, line: str, max_width: float) -> list[str]:
        # simpleSplit never breaks inside a word; URLs and digests need it.
        if self.text_width(line) <= max_width:
            return [line]
        chunks: list[str] = []
        current = ''
        for char in line:
            if current and self.text_width(current + char) > max_width:
                chunks.append(current)
                current = char
            else:
                current += char
        if current:
            chunks.append(current)
        return chunks

    # pages

    def add_page(self) -> None:
        self._pages.append([])
        self._current = len(self._pages) - 1

    def page_size(self) -> PageSize:
        return self._pagesize

    def page_count(self) -> int:
        return len(self._pages)

    def set_page(self, number: int) -> None:
        if number < 1 or number > len(self._pages):
            raise IndexError(f'page {number} out of range 1..{len(self._pages)}')
        self._current = number - 1

    # output

    def render_bytes(self) -> bytes:
        buffer = io.BytesIO()
        canvas = Canvas(buffer, pagesize=self._pagesize)
        if self._title:
            canvas.setTitle(self._title)
        if self._author:
            canvas.setAuthor(self._author)
        if self._subject:
            canvas.setSubject(self._subject)
        if self._keywords:
            canvas.setKeywords(self._keywords)
        canvas.setCreator(self._creator)

        for ops in self._pages:
            for op in ops:
                self._replay(canvas, op)
            canvas.showPage()
        canvas.save()
        return buffer.getvalue()

    def save(self, filename: str) -> Path:
        name = safe_artifact_name(filename)
        payload = self.render_bytes()
        path = self._output_dir / name
        write_bytes_atomic(path, payload)
        logger.debug('Wrote %s (%d pages, %d bytes)', path, len(self._pages), len(payload))
        return path

    def _replay(self, canvas: Canvas, op: _Op) -> None:
        page_height = self._pagesize.height
        if isinstance(op, _TextOp):
            canvas.setFont(op.font_name, op.font_size)
            canvas.setFillColorRGB(*_rgb_fraction(op.color))
            baseline = page_height - op.y
            if op.align == 'right':
                canvas.drawRightString(op.x, baseline, op.content)
            elif op.align == 'center':
                canvas.drawCentredString(op.x, baseline, op.content)
            else:
                canvas.drawString(op.x, baseline, op.content)
        elif isinstance(op, _LineOp):
            canvas.setStrokeColorRGB(*_rgb_fraction(op.color))
            canvas.setLineWidth(op.width)
            canvas.line(op.x1, page_height - op.y1, op.x2, page_height - op.y2)
        else:
            canvas.drawImage(
                ImageReader(io.BytesIO(op.data)),
                op.x,
                page_height - op.y - op.h,
                width=op.w,
                height=op.h,
                mask='auto',
            )
