"""Unit tests for the content block formatter."""

from __future__ import annotations

from storydown.formatter import (
    format_code_blocks,
    format_content,
    format_table,
    format_tables,
    normalize_code,
    table_headers,
    unique_code_blocks,
)
from storydown.models.content import CodeBlock, Table


class TestNormalizeCode:
    def test_trims_trailing_space_per_line(self) -> None:
        assert normalize_code("a = 1   \nb = 2\t\n") == "a = 1\nb = 2\n"

    def test_trims_trailing_space_at_end(self) -> None:
        assert normalize_code("a = 1 \t ") == "a = 1"

    def test_crlf_to_lf(self) -> None:
        assert normalize_code("a\r\nb") == "a\nb"

    def test_nbsp_to_space(self) -> None:
        assert normalize_code("a\u00a0=\u00a01") == "a = 1"

    def test_keeps_indentation_and_blank_lines(self) -> None:
        code = "function f() {\n  return 1;\n\n\n}"
        assert normalize_code(code) == code

    def test_idempotent(self) -> None:
        once = normalize_code("x  \r\n\r\n  y \u00a0")
        assert normalize_code(once) == once


class TestUniqueCodeBlocks:
    def test_keeps_first_occurrence(self) -> None:
        blocks = [
            CodeBlock(language="tsx", code="a"),
            CodeBlock(language="jsx", code="a"),
            CodeBlock(language="tsx", code="b"),
        ]
        result = unique_code_blocks(blocks)
        assert [(b.language, b.code) for b in result] == [("tsx", "a"), ("tsx", "b")]

    def test_duplicates_compared_after_normalization(self) -> None:
        blocks = [CodeBlock(code="a  \nb"), CodeBlock(code="a\r\nb   ")]
        assert len(unique_code_blocks(blocks)) == 1

    def test_drops_blank_blocks(self) -> None:
        assert unique_code_blocks([CodeBlock(code="  \t")]) == []


class TestFormatCodeBlocks:
    def test_single_block(self) -> None:
        result = format_code_blocks(3, [CodeBlock(language="tsx", code="<Button/>")])
        assert result == "#### Code example 1\n\n```tsx\n<Button/>\n```\n\n"

    def test_unlabeled_fence(self) -> None:
        result = format_code_blocks(1, [CodeBlock(code="plain")])
        assert result == "## Code example 1\n\n```\nplain\n```\n\n"

    def test_dedup_before_numbering(self) -> None:
        blocks = [CodeBlock(code="a"), CodeBlock(code="a"), CodeBlock(code="b")]
        result = format_code_blocks(2, blocks)
        assert result == (
            "### Code example 1\n\n```\na\n```\n\n"
            "### Code example 2\n\n```\nb\n```\n\n"
        )
        assert "Code example 3" not in result

    def test_internal_blank_lines_preserved(self) -> None:
        result = format_code_blocks(2, [CodeBlock(language="js", code="a();\n\n\nb();")])
        assert "```js\na();\n\n\nb();\n```" in result

    def test_input_order_kept(self) -> None:
        blocks = [CodeBlock(code="zeta"), CodeBlock(code="alpha")]
        result = format_code_blocks(2, blocks)
        assert result.index("zeta") < result.index("alpha")


class TestTableHeaders:
    def test_given_headers(self) -> None:
        assert table_headers(Table(headers=["Name", "Type"], rows=[])) == ["Name", "Type"]

    def test_synthesized_from_first_row(self) -> None:
        table = Table(headers=[], rows=[["a", "b"], ["c", "d"]])
        assert table_headers(table) == ["Column 1", "Column 2"]

    def test_synthesized_width_follows_first_row_only(self) -> None:
        table = Table(rows=[["a"], ["b", "c", "d"]])
        assert table_headers(table) == ["Column 1"]

    def test_nothing_to_show(self) -> None:
        assert table_headers(Table()) == []


class TestFormatTable:
    def test_short_row_padded(self) -> None:
        table = Table(headers=["Name", "Type"], rows=[["x"]])
        assert format_table(table) == "| Name | Type |\n| --- | --- |\n| x |  |\n"

    def test_full_rows(self) -> None:
        table = Table(headers=["Name", "Default"], rows=[["size", "md"], ["disabled", "false"]])
        assert format_table(table) == (
            "| Name | Default |\n"
            "| --- | --- |\n"
            "| size | md |\n"
            "| disabled | false |\n"
        )

    def test_wide_row_not_truncated(self) -> None:
        table = Table(headers=["A"], rows=[["1", "2"]])
        assert format_table(table) == "| A |\n| --- |\n| 1 | 2 |\n"

    def test_headers_without_rows(self) -> None:
        assert format_table(Table(headers=["A", "B"])) == "| A | B |\n| --- | --- |\n"

    def test_synthesized_headers_rendered(self) -> None:
        table = Table(rows=[["a", "b"], ["c", "d"]])
        assert format_table(table) == (
            "| Column 1 | Column 2 |\n| --- | --- |\n| a | b |\n| c | d |\n"
        )

    def test_empty_table(self) -> None:
        assert format_table(Table()) == ""

    def test_empty_first_row_without_headers(self) -> None:
        assert format_table(Table(rows=[[], ["a"]])) == ""


class TestFormatTables:
    def test_heading_and_blank_line(self) -> None:
        result = format_tables(2, [Table(headers=["Name"], rows=[["x"]])])
        assert result == "### Props table 1\n\n| Name |\n| --- |\n| x |\n\n"

    def test_empty_table_skipped_entirely(self) -> None:
        assert format_tables(2, [Table(headers=[], rows=[])]) == ""

    def test_numbering_skips_nothing(self) -> None:
        tables = [Table(), Table(headers=["A"], rows=[["1"]]), Table(headers=["B"])]
        result = format_tables(1, tables)
        assert "## Props table 1\n\n| A |" in result
        assert "## Props table 2\n\n| B |" in result
        assert "Props table 3" not in result


class TestFormatContent:
    def test_empty_input(self) -> None:
        assert format_content(3, [], []) == ""

    def test_code_before_tables(self) -> None:
        result = format_content(
            2,
            [CodeBlock(language="tsx", code="<A/>")],
            [Table(headers=["Name"], rows=[["x"]])],
        )
        assert result == (
            "### Code example 1\n\n```tsx\n<A/>\n```\n\n"
            "### Props table 1\n\n| Name |\n| --- |\n| x |\n\n"
        )

    def test_deterministic(self) -> None:
        blocks = [CodeBlock(code="a"), CodeBlock(code="b"), CodeBlock(code="a")]
        tables = [Table(rows=[["x", "y"]])]
        assert format_content(2, blocks, tables) == format_content(2, blocks, tables)
