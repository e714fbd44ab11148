"""Unit tests for the line classifier."""

import pytest

from codegen_templates.core.lines import ClassifiedLine, LineKind, classify_lines
from codegen_templates.core.tokens import TokenKind
from codegen_templates.errors import LexError


def _classify(text: str) -> list[ClassifiedLine]:
    return classify_lines(text, 0, len(text))


def test_classifies_each_line_kind() -> None:
    text = "a\n\n#region\n#endregion\n#region TEMPLATE FOREACH($a : $b)\n  b\n"

    assert [line.kind for line in _classify(text)] == [
        LineKind.REGULAR,
        LineKind.EMPTY,
        LineKind.REGION_START,
        LineKind.REGION_END,
        LineKind.REGION_START_WITH_DIRECTIVES,
        LineKind.REGULAR,
    ]


def test_indentation_counts_leading_spaces() -> None:
    (line,) = _classify("    x = 1;\n")

    assert line.indentation == 4
    assert (line.begin, line.end) == (0, 10)


def test_whitespace_only_line_is_empty() -> None:
    lines = _classify("   \nx\n")

    assert lines[0].kind is LineKind.EMPTY
    assert lines[0].indentation == -1
    assert (lines[0].begin, lines[0].end) == (0, 3)


def test_carriage_return_is_stripped() -> None:
    lines = _classify("ab\r\ncd\r\n")
    assert [(line.begin, line.end) for line in lines] == [(0, 2), (4, 6)]


def test_tab_is_a_lex_error_with_exact_position() -> None:
    with pytest.raises(LexError, match="tab characters") as exc_info:
        _classify("ok\n  \tbad\n")

    assert exc_info.value.line == 1
    assert exc_info.value.column == 2


def test_tab_on_otherwise_empty_line_is_rejected() -> None:
    with pytest.raises(LexError):
        _classify("a\n\t\n")


def test_directive_tokens_are_positioned_on_their_line() -> None:
    text = 'x\n  #region TEMPLATE DEFINE("X")\n'
    line = _classify(text)[1]

    assert line.kind is LineKind.REGION_START_WITH_DIRECTIVES
    assert line.indentation == 2
    assert line.directives_begin == 21
    assert line.tokens[0].kind is TokenKind.IDENTIFIER
    assert line.tokens[0].line == 1
    assert line.tokens[0].column == 19
    assert line.tokens[-1].kind is TokenKind.END_OF_LINE


def test_template_keyword_needs_a_trailing_space() -> None:
    (line,) = _classify("#region TEMPLATE\n")
    assert line.kind is LineKind.REGION_START


def test_region_end_allows_only_trailing_whitespace() -> None:
    lines = _classify("#endregion   \n#endregion foo\n")
    assert [line.kind for line in lines] == [LineKind.REGION_END, LineKind.REGULAR]


def test_final_line_without_newline_is_classified() -> None:
    lines = _classify("a\nbc")
    assert [(line.begin, line.end) for line in lines] == [(0, 1), (2, 4)]


def test_final_single_character_line_without_newline_is_dropped() -> None:
    assert [(line.begin, line.end) for line in _classify("a\nb")] == [(0, 1)]
    assert _classify("a") == []
    assert len(_classify("ab")) == 1


def test_classifies_a_sub_range() -> None:
    text = "xxx\nline\nyyy"
    lines = classify_lines(text, 4, 9)

    assert [(line.kind, line.begin, line.end) for line in lines] == [(LineKind.REGULAR, 4, 8)]


def test_str_describes_directive_tokens() -> None:
    (line,) = _classify("#region TEMPLATE INSERT($x)\n")
    assert str(line) == "Begin Region (IDENTIFIER OPEN_PAREN FIELD_ACCESSOR CLOSE_PAREN END_OF_LINE)"
