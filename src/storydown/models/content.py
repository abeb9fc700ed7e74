from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CodeBlock(BaseModel):
    """A code example found on a docs page."""

    language: str = ""  # Empty → unlabeled fence
    code: str


class Table(BaseModel):
    """An args/props table found on a docs page.

    Rows may be narrower than ``headers``; the formatter pads them.
    """

    headers: list[str] = []
    rows: list[list[str]] = []


class StoryContent(BaseModel):
    """Everything extracted from a single story's docs page.

    Accepts both the extractor wire shape (``codeBlocks``) and field names.
    """

    model_config = ConfigDict(populate_by_name=True)

    code_blocks: list[CodeBlock] = Field(default_factory=list, alias="codeBlocks")
    tables: list[Table] = Field(default_factory=list)
