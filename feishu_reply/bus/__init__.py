"""Reply events exchanged between the agent and the channel."""

from feishu_reply.bus.events import MentionTarget, ReplyKind, ReplyPayload

__all__ = ["MentionTarget", "ReplyKind", "ReplyPayload"]
