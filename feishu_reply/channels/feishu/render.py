"""Choose how a reply is rendered: interactive card, post, or plain text."""

import re
from dataclasses import dataclass
from enum import Enum


class RenderMode(str, Enum):
    POST = "post"  # rich text (default)
    AUTO = "auto"  # card only when the text needs one
    RAW = "raw"  # plain text
    CARD = "card"  # always an interactive card


@dataclass(frozen=True)
class RenderDecision:
    use_card: bool = False
    use_post: bool = False

    @property
    def message_type(self) -> str:
        if self.use_card:
            return "interactive"
        return "post" if self.use_post else "text"


_FENCED_CODE_RE = re.compile(r"```[\s\S]*?```")
# Header row followed by a separator row
_TABLE_RE = re.compile(r"\|.+\|[\r\n]+\|[-:| ]+\|")
_FEISHU_LINK_RE = re.compile(
    r"https?://(?:[a-z0-9-]+\.)?(?:feishu\.cn|larksuite\.com|lark\.com)(?:/|$)",
    re.IGNORECASE,
)


def should_use_card(text: str) -> bool:
    """Detect markdown that only renders properly inside a card."""
    return bool(_FENCED_CODE_RE.search(text) or _TABLE_RE.search(text))


def contains_feishu_domain_link(text: str) -> bool:
    return bool(_FEISHU_LINK_RE.search(text))


def select_render_mode(text: str, render_mode: str) -> RenderDecision:
    """Resolve the configured render mode against the reply text.

    Feishu links in a post are not unfurled, so posts fall back to plain
    text when the reply links back to Feishu itself. Unrecognised modes
    are not rejected and end up as plain text.
    """
    mode = str(getattr(render_mode, "value", render_mode))
    use_card = mode == RenderMode.CARD.value or (
        mode == RenderMode.AUTO.value and should_use_card(text)
    )
    use_post = mode == RenderMode.POST.value and not contains_feishu_domain_link(text)
    return RenderDecision(use_card=use_card, use_post=use_post)
