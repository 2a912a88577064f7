"""Tests for line wrapping and comment layout."""

from __future__ import annotations

import pytest

from vhdlgen.config import FormattingConfig
from vhdlgen.formatting.layout import LineFormatter
from vhdlgen.models import Function, Parameter, Signal

SENTENCE = "This line of documentation is rather long indeed"


def _formatter(**overrides: object) -> LineFormatter:
    return LineFormatter(FormattingConfig().with_overrides(**overrides))


def test_wrap_line_breaks_at_spaces_within_width() -> None:
    lines = _formatter().wrap_line(SENTENCE, "", 20)
    assert lines == ["This line of", "documentation is", "rather long indeed"]
    assert " ".join(lines) == SENTENCE


@pytest.mark.parametrize("width", range(4, 60))
def test_wrapped_lines_never_exceed_width_unless_single_word(width: int) -> None:
    formatter = _formatter()
    text = "wrap these words supercalifragilistic carefully to the configured column limit"
    for line in formatter.wrap_line(text, "-- ", width):
        assert len(line) <= width or " " not in line[3:]


def test_overlong_word_is_emitted_alone() -> None:
    lines = _formatter().wrap_line("a supercalifragilistic b", "", 10)
    assert lines == ["a", "supercalifragilistic", "b"]


def test_prefix_counts_towards_width_with_tabs_expanded() -> None:
    formatter = _formatter(use_tabs=True, tab_size=4)
    assert formatter.wrap_line("aa bb cc", "\t-- ", 12) == ["\t-- aa bb", "\t-- cc"]


def test_continuation_prefix_is_used_after_first_line() -> None:
    lines = _formatter().wrap_line("one two three four", "- ", 10, continuation_prefix="  ")
    assert lines == ["- one two", "  three", "  four"]


def test_wrap_line_defaults_to_configured_width() -> None:
    formatter = _formatter(max_line_width=12)
    assert formatter.width == 12
    assert formatter.wrap_line("alpha beta gamma") == ["alpha beta", "gamma"]


def test_indent_uses_tabs_or_spaces() -> None:
    assert _formatter(use_tabs=True).indent(2) == "\t\t"
    assert _formatter(use_tabs=False, tab_size=2).indent(3) == "      "
    assert _formatter().indent(0) == ""


def test_flower_line_spans_the_full_width() -> None:
    formatter = _formatter(max_line_width=20, use_tabs=True, tab_size=4)
    assert formatter.flower_line(0) == "--" + "-" * 18
    nested = formatter.flower_line(1)
    assert nested == "\t--" + "-" * 14
    assert formatter.measure(nested) == 20


def test_flower_line_is_absent_without_character() -> None:
    assert _formatter(flower_box_char=None).flower_line() is None


def test_fill_flowers_centres_the_banner() -> None:
    formatter = _formatter(max_line_width=20)
    filled = formatter.fill_flowers("--<%flowerfill%> Signals <%flowerfill%>")
    assert filled == "------ Signals -----"
    assert len(filled) == 20


def test_fill_flowers_accounts_for_indentation() -> None:
    formatter = _formatter(max_line_width=20, use_tabs=False, tab_size=2)
    filled = formatter.fill_flowers("--<%flowerfill%>", 1)
    assert len("  " + filled) == 20


def test_fill_flowers_without_character_drops_markers() -> None:
    formatter = _formatter(flower_box_char=None)
    assert formatter.fill_flowers("--<%flowerfill%> Signals <%flowerfill%>") == "-- Signals "


def test_format_comment_builds_flower_box() -> None:
    formatter = _formatter(max_line_width=40, use_tabs=False)
    signal = Signal("count", "unsigned", "Current count value.", remarks="Resets to zero.")
    flower = "--" + "-" * 38
    assert formatter.format_comment(signal) == [
        flower,
        "-- count - Current count value.",
        "--",
        "-- Resets to zero.",
        flower,
    ]


def test_format_comment_lists_keyed_entries() -> None:
    formatter = _formatter(max_line_width=40, flower_box_char=None)
    function = Function(
        name="add",
        return_type="integer",
        description="Adds.",
        returns="sum",
        parameters=[Parameter("a", "integer", "first")],
        body=["return a;"],
    )
    assert formatter.format_comment(function, entries=function.doc_entries()) == [
        "-- add - Adds.",
        "--",
        "-- Parameters:",
        "--   a - first",
        "--",
        "-- Returns:",
        "--   sum",
    ]


def test_doc_line_uses_hanging_indent() -> None:
    formatter = _formatter(max_line_width=30)
    signal = Signal("clk", "std_logic", "System clock driving every register here")
    assert formatter.doc_line(signal) == [
        "-- clk - System clock driving",
        "--       every register here",
    ]


def test_code_lines_keep_fitting_lines_verbatim() -> None:
    formatter = _formatter(use_tabs=False, tab_size=2)
    assert formatter.code_lines("x <= a  and  b;", 1) == ["  x <= a  and  b;"]
    assert formatter.code_lines("   ", 1) == [""]


def test_code_lines_do_not_split_string_literals() -> None:
    formatter = _formatter(max_line_width=30, use_tabs=False, tab_size=2)
    lines = formatter.code_lines('report "a long message string here" severity note;')
    assert lines == ["report", '  "a long message string here"', "  severity note;"]


def test_code_lines_move_trailing_comment() -> None:
    formatter = _formatter(max_line_width=30, use_tabs=False, tab_size=2)
    lines = formatter.code_lines("count <= count + 1; -- increment the counter value")
    assert lines == ["count <= count + 1;", "  -- increment the counter", "  -- value"]


def test_comment_text_keeps_fitting_lines_verbatim() -> None:
    formatter = _formatter()
    assert formatter.comment_text("-- Filename:    top.vhdl") == ["-- Filename:    top.vhdl"]


def test_comment_text_keeps_marker_when_wrapping() -> None:
    formatter = _formatter(max_line_width=20)
    lines = formatter.comment_text("-- Generated using a rather long tool name")
    assert all(line.startswith("-- ") for line in lines)
    assert all(len(line) <= 20 for line in lines)
    assert len(lines) > 1


def test_doc_line_drops_hanging_indent_when_words_would_overflow() -> None:
    formatter = _formatter(max_line_width=40)
    signal = Signal("a_long_signal_name_here", "std_logic", "goes high whenever handshake_completed fires")
    assert formatter.doc_line(signal) == [
        "-- a_long_signal_name_here - goes high",
        "-- whenever handshake_completed fires",
    ]


@pytest.mark.parametrize("width", range(20, 70))
def test_doc_line_only_overflows_for_overlong_words(width: int) -> None:
    formatter = _formatter(max_line_width=width)
    signal = Signal("a_long_signal_name_here", "std_logic", "goes high whenever handshake_completed fires")
    for line in formatter.doc_line(signal):
        if len(line) > width:
            words = line.split()
            assert len(words) == 2
            assert len("-- " + words[1]) > width


def test_fallback_prefix_is_unused_when_hanging_indent_fits() -> None:
    lines = _formatter().wrap_line("aa bb cc", "- ", 8, continuation_prefix="    ", fallback_prefix="- ")
    assert lines == ["- aa bb", "    cc"]
