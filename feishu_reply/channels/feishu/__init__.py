"""Feishu/Lark reply delivery."""

from feishu_reply.channels.feishu.dispatcher import (
    FeishuReplyDispatcher,
    create_feishu_reply_dispatcher,
)
from feishu_reply.channels.feishu.post import (
    ParsedPost,
    build_post_payload,
    encode_post,
    parse_post_content,
)
from feishu_reply.channels.feishu.render import RenderDecision, RenderMode, select_render_mode
from feishu_reply.channels.feishu.send import FeishuApiError, FeishuTransport, LarkTransport
from feishu_reply.channels.feishu.tool_messages import localize_tool_message
from feishu_reply.channels.feishu.typing_indicator import TypingIndicator, TypingIndicatorState

__all__ = [
    "FeishuApiError",
    "FeishuReplyDispatcher",
    "FeishuTransport",
    "LarkTransport",
    "ParsedPost",
    "RenderDecision",
    "RenderMode",
    "TypingIndicator",
    "TypingIndicatorState",
    "build_post_payload",
    "create_feishu_reply_dispatcher",
    "encode_post",
    "localize_tool_message",
    "parse_post_content",
    "select_render_mode",
]
