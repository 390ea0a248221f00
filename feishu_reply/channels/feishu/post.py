"""Feishu *post* (rich-text) message encoding and decoding.

Post content JSON structure::

    {
      "zh_cn": {                 # locale block; "en_us" carries the same
        "title": "...",
        "content": [             # list of paragraphs
          [                      # each paragraph is a list of elements
            {"tag": "text", "text": "Hello "},
            {"tag": "at",   "user_id": "ou_xxx", "user_name": "Name"},
            {"tag": "a",    "text": "link", "href": "https://..."},
            {"tag": "img",  "image_key": "..."},
            {"tag": "md",   "text": "**markdown**"},
          ],
        ]
      }
    }

Older payloads nest the locale blocks under ``post`` or put ``title`` /
``content`` at the top level; both are still accepted when decoding.
"""

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from feishu_reply.bus.events import MentionTarget

POST_PLACEHOLDER = "[富文本消息]"
POST_LOCALES = ("zh_cn", "en_us")


@dataclass
class ParsedPost:
    """Plain-text view of an inbound post."""

    text_content: str
    image_keys: list[str] = field(default_factory=list)


def _nested(parent: str, key: str) -> Callable[[dict[str, Any]], Any]:
    def _get(payload: dict[str, Any]) -> Any:
        inner = payload.get(parent)
        return inner.get(key) if isinstance(inner, dict) else None

    return _get


# First present value wins
_LOCALE_ACCESSORS: tuple[Callable[[dict[str, Any]], Any], ...] = (
    lambda p: p.get("zh_cn"),
    lambda p: p.get("en_us"),
    _nested("post", "zh_cn"),
    _nested("post", "en_us"),
)


def _resolve_locale_block(parsed: dict[str, Any]) -> dict[str, Any]:
    for accessor in _LOCALE_ACCESSORS:
        block = accessor(parsed)
        if isinstance(block, dict):
            return block
        if isinstance(block, list) or block:
            # a present but non-object locale value still ends the lookup
            return {}
    return {"title": parsed.get("title"), "content": parsed.get("content")}


def build_post_payload(
    text: str, mentions: Sequence[MentionTarget] | None = None
) -> dict[str, Any]:
    """Build the locale-keyed post body for *text*.

    Mentions lead the single paragraph, each followed by a space; the text
    itself goes last as one ``md`` element so Feishu renders its markdown.
    """
    elements: list[dict[str, str]] = []
    for mention in mentions or ():
        elements.append(
            {"tag": "at", "user_id": mention.open_id, "user_name": mention.name}
        )
        elements.append({"tag": "text", "text": " "})
    elements.append({"tag": "md", "text": text})

    content = [elements]
    return {locale: {"content": content} for locale in POST_LOCALES}


def encode_post(text: str, mentions: Sequence[MentionTarget] | None = None) -> str:
    """Serialise :func:`build_post_payload` into a message ``content`` string."""
    return json.dumps(build_post_payload(text, mentions), ensure_ascii=False)


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_post_content(content: str) -> ParsedPost:
    """Parse post content into plain text and embedded image keys.

    Malformed input never raises; it decodes to the placeholder text.
    """
    try:
        parsed = json.loads(content)
    except (json.JSONDecodeError, TypeError) as exc:
        logger.debug(f"Unparseable post content: {exc}")
        return ParsedPost(POST_PLACEHOLDER)
    if not isinstance(parsed, dict):
        return ParsedPost(POST_PLACEHOLDER)

    block = _resolve_locale_block(parsed)
    title = _str(block.get("title"))
    paragraphs = block.get("content") or []
    if not isinstance(paragraphs, list):
        paragraphs = []

    text = f"{title}\n\n" if title else ""
    image_keys: list[str] = []

    for para in paragraphs:
        if not isinstance(para, list):
            continue
        for elem in para:
            if not isinstance(elem, dict):
                continue
            tag = elem.get("tag")
            if tag in ("text", "md"):
                text += _str(elem.get("text"))
            elif tag == "a":
                text += _str(elem.get("text")) or _str(elem.get("href"))
            elif tag == "at":
                text += "@" + (_str(elem.get("user_name")) or _str(elem.get("user_id")))
            elif tag == "img":
                image_key = _str(elem.get("image_key"))
                if image_key:
                    image_keys.append(image_key)
        text += "\n"

    return ParsedPost(text.strip() or POST_PLACEHOLDER, image_keys)
