import dataclasses

import pytest

from ChatMarkup import markdown_parser
from ChatMarkup.markdown_parser import find_closing, parse_inline, parse_inline_at, parse_markdown
from ChatMarkup.model import (
    Bold,
    BulletPoint,
    Code,
    Codeblock,
    Header,
    Italics,
    Line,
    Link,
    Quotes,
    Spoiler,
    StrikeThrough,
    Text,
    Underline,
)


def test_find_closing_stops_at_line_break():
    assert find_closing("abc**", "**") == "abc"
    assert find_closing("ab\nc**", "**") is None
    assert find_closing("ab\nc```", "```", stop_at_newline=False) == "ab\nc"


def test_find_closing_from_offset():
    assert find_closing("xx**ab**", "**", start=4) == "ab"
    assert find_closing("_x\n_y", "_", "__", start=1) is None
    assert find_closing("_x\n_y_", "_", "__", start=4) == "y"


def test_many_lines_with_unmatched_delimiter():
    source = "_x\n" * 20000
    assert parse_markdown(source) == [Text(source)]


def test_find_closing_skips_excluded_delimiter():
    assert find_closing("a*b", "*", "**") == "a"
    # the first half of a doubled delimiter never closes
    assert find_closing("a**", "*", "**") == "a*"
    assert find_closing("a***", "*", "**") == "a"


def test_find_closing_aligns_to_end_of_run():
    assert find_closing("*text***", "**") == "*text*"
    assert find_closing("a~~~", "~~") == "a~"


def test_parse_inline_at_reports_consumed_length():
    node, consumed = parse_inline_at("say **hi** now", 4)
    assert node == Bold([Text("hi")])
    assert consumed == 6
    assert parse_inline_at("say **hi** now", 0) is None


def test_parse_inline_keeps_literal_runs():
    assert parse_inline("a `b` c") == [Text("a "), Code("b"), Text(" c")]
    assert parse_inline("plain") == [Text("plain")]
    assert parse_inline("") == []


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("**hello**", [Bold([Text("hello")])]),
        ("*hi* there", [Italics([Text("hi")]), Text(" there")]),
        ("- a\n- b", [BulletPoint(0, [Text("a")]), BulletPoint(0, [Text("b")])]),
        ("- a\n  - b", [BulletPoint(0, [Text("a")]), BulletPoint(2, [Text("b")])]),
        ("```rs\ncode\n```", [Codeblock("rs", "code\n")]),
        ("[text](http://x)", [Link([Text("text")], "http://x")]),
        ("---\n", [Line()]),
    ],
)
def test_parse_reference_messages(source, expected):
    assert parse_markdown(source) == expected


def test_parse_empty_input():
    assert parse_markdown("") == []


def test_unterminated_delimiter_is_literal_text():
    assert parse_markdown("**unterminated") == [Text("**unterminated")]
    assert parse_markdown("a ~~b") == [Text("a ~~b")]
    assert parse_markdown("[label] (not a link)") == [Text("[label] (not a link)")]
    assert parse_markdown("[a](b") == [Text("[a](b")]
    # the scan restarts one character on, where a single backtick closes
    assert parse_markdown("```x") == [Text("`"), Code(""), Text("x")]


def test_inline_constructs_nest():
    assert parse_markdown("**a *b* c**") == [Bold([Text("a "), Italics([Text("b")]), Text(" c")])]
    assert parse_markdown("***text***") == [Bold([Italics([Text("text")])])]
    assert parse_markdown("[**b**](u)") == [Link([Bold([Text("b")])], "u")]


def test_all_inline_delimiters():
    assert parse_markdown("__u__ and _i_") == [Underline([Text("u")]), Text(" and "), Italics([Text("i")])]
    assert parse_markdown("~~gone~~") == [StrikeThrough([Text("gone")])]
    assert parse_markdown("||secret||") == [Spoiler([Text("secret")])]


def test_code_interiors_are_literal():
    assert parse_markdown("`a*b*`") == [Code("a*b*")]
    assert parse_markdown("```x **y**```") == [Codeblock("", "x **y**")]


def test_inline_code_cannot_span_lines():
    assert parse_markdown("`a\nb`") == [Text("`a\nb`")]


def test_codeblock_spans_lines_inside_text():
    nodes = parse_markdown("see ```py\nprint(1)\n``` done")
    assert nodes == [Text("see "), Codeblock("py", "print(1)\n"), Text(" done")]


def test_headers():
    assert parse_markdown("# Title") == [Header(1, [Text("Title")])]
    assert parse_markdown("### x\nbody") == [Header(3, [Text("x")]), Text("body")]
    assert parse_markdown("####### x") == [Text("####### x")]


def test_quotes_require_blank_after_marker():
    assert parse_markdown("> quoted *text*") == [Quotes([Text("quoted "), Italics([Text("text")])])]
    assert parse_markdown(">no space") == [Text(">no space")]


def test_unterminated_construct_inside_block_stays_in_block():
    assert parse_markdown("> **x") == [Quotes([Text("**x")])]
    assert parse_markdown("- **x\n- y") == [BulletPoint(0, [Text("**x")]), BulletPoint(0, [Text("y")])]
    assert parse_markdown("# *x") == [Header(1, [Text("*x")])]


def test_pending_text_is_flushed_before_block():
    assert parse_markdown("hello\n# hi") == [Text("hello\n"), Header(1, [Text("hi")])]
    assert parse_markdown("a\nb") == [Text("a\nb")]
    assert parse_markdown("  hi") == [Text("  hi")]


def test_horizontal_rule():
    assert parse_markdown("---") == [Line()]
    assert parse_markdown("-----  \nnext") == [Line(), Text("next")]
    assert parse_markdown("a\n---\nb") == [Text("a\n"), Line(), Text("b")]
    assert parse_markdown("--- x") == [BulletPoint(0, [Text("-- x")])]


def test_bullet_points():
    assert parse_markdown("- **b** c") == [BulletPoint(0, [Bold([Text("b")]), Text(" c")])]
    assert parse_markdown("-\n") == [BulletPoint(0, [])]
    assert parse_markdown("\t- tab") == [BulletPoint(1, [Text("tab")])]


def test_non_ascii_passes_through_as_text():
    assert parse_markdown("héllo **wörld**") == [Text("héllo "), Bold([Text("wörld")])]
    assert parse_markdown("＊a＊") == [Text("＊a＊")]
    assert parse_markdown("é\n- x") == [Text("é\n"), BulletPoint(0, [Text("x")])]
    assert parse_markdown("🎉 - ok") == [Text("🎉 - ok")]


def test_many_unmatched_delimiters_terminate():
    source = "[" * 500 + "*\n" * 200
    assert parse_markdown(source) == [Text(source)]


def test_tree_is_immutable():
    bold = parse_markdown("**x**")[0]
    assert isinstance(bold.children, tuple)
    with pytest.raises(dataclasses.FrozenInstanceError):
        bold.children = ()
    assert not hasattr(Text("x"), "children")


def test_parse_logs_summary(caplog):
    with caplog.at_level("DEBUG", logger=markdown_parser.__name__):
        parse_markdown("**x**")
    assert "1 top-level nodes" in caplog.text
