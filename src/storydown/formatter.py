"""Content block formatter.

Turns one story's extracted code blocks and args tables into Markdown
subsections nested one level below the story's leaf heading. Code blocks are
deduplicated before numbering; tables are normalized so every row has at
least as many cells as there are header columns. Cell text is assumed to be
single-line and pipe-free already; no escaping happens here.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from storydown.models.content import CodeBlock
from storydown.models.story import Heading

if TYPE_CHECKING:
    from collections.abc import Iterable

    from storydown.models.content import Table

_TRAILING_SPACE_BEFORE_NEWLINE_RE = re.compile(r"[ \t]+\n")
_TRAILING_SPACE_AT_END_RE = re.compile(r"[ \t]+$")

FENCE = "```"


def normalize_code(text: str) -> str:
    """Normalize code text while keeping its line structure verbatim.

    NBSP becomes a space, CRLF becomes LF, and trailing spaces/tabs are
    trimmed at the end of each line and of the whole text.
    """
    text = text.replace("\u00a0", " ").replace("\r\n", "\n")
    text = _TRAILING_SPACE_BEFORE_NEWLINE_RE.sub("\n", text)
    return _TRAILING_SPACE_AT_END_RE.sub("", text)


def unique_code_blocks(blocks: Iterable[CodeBlock]) -> list[CodeBlock]:
    """Normalize and deduplicate code blocks, keeping first occurrences in order.

    Blocks that are empty after normalization are dropped.
    """
    seen: set[str] = set()
    unique: list[CodeBlock] = []
    for block in blocks:
        code = normalize_code(block.code)
        if not code or code in seen:
            continue
        seen.add(code)
        unique.append(CodeBlock(language=block.language, code=code))
    return unique


def table_headers(table: Table) -> list[str]:
    """Return the header row to emit, synthesizing ``Column N`` labels if needed.

    An empty list means the table has nothing to show and must be skipped.
    """
    if table.headers:
        return list(table.headers)
    if table.rows:
        return [f"Column {i}" for i in range(1, len(table.rows[0]) + 1)]
    return []


def _table_row(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def format_table(table: Table) -> str:
    """Render a table as Markdown rows, or ``""`` when it has no headers or rows.

    Short rows are right-padded with empty cells. Rows wider than the header
    are emitted unchanged.
    """
    headers = table_headers(table)
    if not headers:
        return ""

    lines = [_table_row(headers), _table_row(["---"] * len(headers))]
    for row in table.rows:
        padded = list(row) + [""] * (len(headers) - len(row))
        lines.append(_table_row(padded))
    return "\n".join(lines) + "\n"


def format_code_blocks(story_level: int, blocks: Iterable[CodeBlock]) -> str:
    parts: list[str] = []
    for index, block in enumerate(unique_code_blocks(blocks), start=1):
        heading = Heading(level=story_level + 1, text=f"Code example {index}")
        parts.append(f"{heading.render()}\n\n")
        parts.append(f"{FENCE}{block.language}\n{block.code}\n{FENCE}\n\n")
    return "".join(parts)


def format_tables(story_level: int, tables: Iterable[Table]) -> str:
    # Numbered by emitted tables, not input position: skipped tables leave
    # no gap, the same as deduplicated code examples.
    parts: list[str] = []
    index = 0
    for table in tables:
        body = format_table(table)
        if not body:
            continue
        index += 1
        heading = Heading(level=story_level + 1, text=f"Props table {index}")
        parts.append(f"{heading.render()}\n\n{body}\n")
    return "".join(parts)


def format_content(
    story_level: int,
    code_blocks: Iterable[CodeBlock],
    tables: Iterable[Table],
) -> str:
    """Render a story's code examples followed by its props tables.

    Empty input yields an empty string.
    """
    return format_code_blocks(story_level, code_blocks) + format_tables(story_level, tables)
