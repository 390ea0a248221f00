"""Text chunking and markdown table conversion for outbound messages."""

import re

DEFAULT_TEXT_CHUNK_LIMIT = 4000

# Standard markdown table: header row, separator row, one or more data rows
_TABLE_RE = re.compile(
    r"("
    r"(?:^[ \t]*\|.+\|[ \t]*\n)"
    r"(?:^[ \t]*\|[-: \t|]+\|[ \t]*\n)"
    r"(?:^[ \t]*\|.+\|[ \t]*(?:\n|$))+"
    r")",
    re.MULTILINE,
)

_SEPARATOR_ROW_RE = re.compile(r"^[ \t]*\|[-: \t|]+\|")


def chunk_text(text: str, limit: int = DEFAULT_TEXT_CHUNK_LIMIT) -> list[str]:
    """Split *text* into pieces of at most *limit* characters.

    Cuts at the last newline inside the window, else the last space,
    else hard at *limit*. The separator at the cut and trailing whitespace
    before it are dropped; indentation after it is kept.
    """
    if not text:
        return []
    if limit <= 0 or len(text) <= limit:
        return [text]

    chunks: list[str] = []
    remaining = text
    while len(remaining) > limit:
        window = remaining[:limit]
        cut = window.rfind("\n")
        if cut <= 0:
            cut = window.rfind(" ")
        if cut <= 0:
            piece, remaining = remaining[:limit], remaining[limit:]
        else:
            piece, remaining = remaining[:cut], remaining[cut + 1:]
        piece = piece.rstrip()
        if piece:
            chunks.append(piece)
        remaining = remaining.lstrip("\n")
    if remaining.strip():
        chunks.append(remaining)
    return chunks


def chunk_text_with_mode(
    text: str, limit: int = DEFAULT_TEXT_CHUNK_LIMIT, mode: str = "length"
) -> list[str]:
    """Chunk *text* according to *mode*.

    ``length`` fills each chunk up to *limit*; ``newline`` sends every
    paragraph (blank-line separated) as its own chunk, length-splitting
    paragraphs that are still too long. Unknown modes behave like ``length``.
    """
    if mode != "newline":
        return chunk_text(text, limit)

    chunks: list[str] = []
    for paragraph in re.split(r"\n{2,}", text):
        paragraph = paragraph.strip()
        if paragraph:
            chunks.extend(chunk_text(paragraph, limit))
    return chunks


def _split_row(row: str) -> list[str]:
    return [c.strip() for c in row.strip().strip("|").split("|")]


def _table_to_bullets(match: re.Match[str]) -> str:
    lines = [ln.strip() for ln in match.group(1).strip().split("\n") if ln.strip()]
    headers = _split_row(lines[0])
    out: list[str] = []
    for row in lines[1:]:
        if _SEPARATOR_ROW_RE.match(row):
            continue
        cells = _split_row(row)
        pairs = " | ".join(
            f"**{headers[i]}** {cells[i]}"
            for i in range(min(len(headers), len(cells)))
            if cells[i]
        )
        if pairs:
            out.append(f"- {pairs}")
    if not out:
        return match.group(0)
    trailing = "\n" if match.group(1).endswith("\n") else ""
    return "\n".join(out) + trailing


def _table_to_code(match: re.Match[str]) -> str:
    table = match.group(1)
    trailing = "\n" if table.endswith("\n") else ""
    return f"```\n{table.rstrip()}\n```{trailing}"


def convert_markdown_tables(text: str, mode: str = "bullets") -> str:
    """Rewrite markdown tables for surfaces that cannot render them.

    Modes: ``off`` (unchanged), ``bullets`` (one bullet per data row with
    bold headers), ``code`` (table wrapped in a fenced block).
    """
    if not text or "|" not in text:
        return text
    if mode == "bullets":
        return _TABLE_RE.sub(_table_to_bullets, text)
    if mode == "code":
        return _TABLE_RE.sub(_table_to_code, text)
    return text
