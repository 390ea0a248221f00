from feishu_reply.utils.text import chunk_text, chunk_text_with_mode, convert_markdown_tables

TABLE = "| name | score |\n| --- | ---: |\n| Ann | 9 |\n| Bo |  |\n"


def test_chunk_text_short_and_empty() -> None:
    assert chunk_text("") == []
    assert chunk_text("short", 10) == ["short"]
    assert chunk_text("no limit here", 0) == ["no limit here"]


def test_chunk_text_prefers_newlines_then_spaces() -> None:
    assert chunk_text("line one\nline two", 12) == ["line one", "line two"]
    assert chunk_text("alpha beta gamma", 11) == ["alpha beta", "gamma"]


def test_chunk_text_hard_splits_unbroken_text() -> None:
    chunks = chunk_text("x" * 25, 10)

    assert chunks == ["x" * 10, "x" * 10, "x" * 5]


def test_chunk_text_keeps_indentation_after_cut() -> None:
    code = "```\ndef f():\n    return 1\n```"

    assert chunk_text(code, 14) == ["```\ndef f():", "    return 1", "```"]


def test_chunks_never_exceed_limit() -> None:
    text = "word " * 500 + "\n" + "y" * 333
    for limit in (7, 50, 256):
        assert all(len(c) <= limit for c in chunk_text(text, limit))


def test_newline_mode_sends_paragraphs_separately() -> None:
    text = "first paragraph\n\nsecond\n\n\n  third  "

    assert chunk_text_with_mode(text, 4000, "newline") == ["first paragraph", "second", "third"]
    assert chunk_text_with_mode(text, 4000, "length") == [text]


def test_newline_mode_still_respects_limit() -> None:
    assert chunk_text_with_mode("aaaa bbbb\n\ncc", 5, "newline") == ["aaaa", "bbbb", "cc"]


def test_unknown_chunk_mode_behaves_like_length() -> None:
    assert chunk_text_with_mode("a\n\nb", 4000, "sideways") == ["a\n\nb"]


def test_convert_tables_to_bullets() -> None:
    text = f"Scores:\n{TABLE}Done."

    assert convert_markdown_tables(text, "bullets") == (
        "Scores:\n- **name** Ann | **score** 9\n- **name** Bo\nDone."
    )


def test_convert_tables_to_code_block() -> None:
    assert convert_markdown_tables(TABLE, "code") == f"```\n{TABLE.rstrip()}\n```\n"


def test_convert_tables_off_and_unknown_mode() -> None:
    assert convert_markdown_tables(TABLE, "off") == TABLE
    assert convert_markdown_tables(TABLE, "html") == TABLE


def test_pipes_without_separator_row_are_left_alone() -> None:
    text = "| a | b |\n| c | d |"

    assert convert_markdown_tables(text, "bullets") == text
