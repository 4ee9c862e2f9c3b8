from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from markdown_it import MarkdownIt


_MARKDOWN_PARSER: MarkdownIt | None = None


@dataclass(frozen=True)
class TextBlock:
    kind: str  # paragraph | bullet | heading
    text: str


def _markdown_parser() -> MarkdownIt:
    global _MARKDOWN_PARSER
    if _MARKDOWN_PARSER is None:
        _MARKDOWN_PARSER = MarkdownIt('commonmark', {'typographer': False}).enable('strikethrough')
    return _MARKDOWN_PARSER


def _normalize_newlines(value: str) -> str:
    return value.replace('\r\n', '\n').replace('\r', '\n')


def _inline_plain_text(token: Any) -> str:
    parts: list[str] = []
    for child in token.children or []:
        if child.type in {'text', 'code_inline', 'html_inline'}:
            parts.append(child.content)
        elif child.type == 'softbreak':
            parts.append(' ')
        elif child.type == 'hardbreak':
            parts.append('\n')
        elif child.type == 'image':
            parts.append(child.content or '')
    return ''.join(parts).strip()


def markdown_blocks(markdown: str | None) -> list[TextBlock]:
    """Flatten markdown into plain-text paragraphs, headings and bullet items."""
    source = _normalize_newlines(str(markdown or '')).strip()
    if not source:
        return []

    blocks: list[TextBlock] = []
    list_stack: list[dict[str, Any]] = []
    in_heading = False
    list_item_depth = 0

    for token in _markdown_parser().parse(source):
        if token.type == 'bullet_list_open':
            list_stack.append({'ordered': False, 'index': 0})
        elif token.type == 'ordered_list_open':
            start = token.attrGet('start')
            list_stack.append({'ordered': True, 'index': int(start or 1) - 1})
        elif token.type in {'bullet_list_close', 'ordered_list_close'}:
            if list_stack:
                list_stack.pop()
        elif token.type == 'list_item_open':
            list_item_depth += 1
            if list_stack:
                list_stack[-1]['index'] += 1
        elif token.type == 'list_item_close':
            list_item_depth = max(0, list_item_depth - 1)
        elif token.type == 'heading_open':
            in_heading = True
        elif token.type == 'heading_close':
            in_heading = False
        elif token.type in {'fence', 'code_block'}:
            content = token.content.rstrip('\n')
            if content:
                blocks.append(TextBlock('paragraph', content))
        elif token.type == 'inline':
            text = _inline_plain_text(token)
            if not text:
                continue
            if in_heading:
                blocks.append(TextBlock('heading', text))
            elif list_item_depth and list_stack:
                current = list_stack[-1]
                marker = f"{current['index']}." if current['ordered'] else '•'
                blocks.append(TextBlock('bullet', f'{marker} {text}'))
            else:
                blocks.append(TextBlock('paragraph', text))

    return blocks
