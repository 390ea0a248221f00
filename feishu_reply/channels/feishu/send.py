"""Feishu/Lark transport: message sends and typing reactions via lark-oapi."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from typing import Any, Protocol

import lark_oapi as lark
from lark_oapi.api.im.v1 import (
    CreateMessageReactionRequest,
    CreateMessageReactionRequestBody,
    CreateMessageRequest,
    CreateMessageRequestBody,
    DeleteMessageReactionRequest,
    Emoji,
    ReplyMessageRequest,
    ReplyMessageRequestBody,
)
from loguru import logger

from feishu_reply.bus.events import MentionTarget
from feishu_reply.channels.feishu.post import encode_post
from feishu_reply.channels.feishu.typing_indicator import TypingIndicatorState
from feishu_reply.config.schema import FeishuConfig

TYPING_EMOJI = "Typing"


class FeishuApiError(RuntimeError):
    """Raised when the Feishu Open API rejects a request."""

    def __init__(self, action: str, code: Any, msg: Any, log_id: Any = None) -> None:
        self.action = action
        self.code = code
        self.msg = msg
        self.log_id = log_id
        super().__init__(f"{action} failed: code={code}, msg={msg}, log_id={log_id}")


class FeishuTransport(Protocol):
    """What the reply pipeline needs from the chat platform."""

    async def send_message(
        self,
        to: str,
        text: str,
        *,
        reply_to_message_id: str | None = None,
        mentions: Sequence[MentionTarget] | None = None,
        message_type: str = "text",
    ) -> str | None: ...

    async def send_markdown_card(
        self,
        to: str,
        text: str,
        *,
        reply_to_message_id: str | None = None,
        mentions: Sequence[MentionTarget] | None = None,
    ) -> str | None: ...

    async def add_reaction(self, message_id: str) -> TypingIndicatorState: ...

    async def remove_reaction(self, state: TypingIndicatorState) -> None: ...


def receive_id_type(to: str) -> str:
    return "chat_id" if to.startswith("oc_") else "open_id"


def format_text_mentions(text: str, mentions: Sequence[MentionTarget] | None) -> str:
    """Prefix *text* with ``<at>`` tags understood by ``text`` messages."""
    if not mentions:
        return text
    tags = "".join(f'<at user_id="{m.open_id}">{m.name}</at> ' for m in mentions)
    return f"{tags}{text}"


def format_card_mentions(text: str, mentions: Sequence[MentionTarget] | None) -> str:
    """Prefix *text* with ``<at>`` tags understood by card markdown."""
    if not mentions:
        return text
    tags = "".join(f"<at id={m.open_id}></at> " for m in mentions)
    return f"{tags}{text}"


def build_markdown_card(text: str) -> dict[str, Any]:
    return {
        "config": {"wide_screen_mode": True},
        "elements": [{"tag": "markdown", "content": text}],
    }


class LarkTransport:
    """:class:`FeishuTransport` backed by a ``lark_oapi.Client``.

    The SDK is synchronous, so every call runs in the default executor.
    """

    def __init__(self, client: Any, typing_emoji: str = TYPING_EMOJI) -> None:
        self._client = client
        self._typing_emoji = typing_emoji

    @classmethod
    def from_config(cls, config: FeishuConfig) -> "LarkTransport":
        domain = lark.LARK_DOMAIN if config.domain.lower() == "lark" else lark.FEISHU_DOMAIN
        client = (
            lark.Client.builder()
            .app_id(config.app_id)
            .app_secret(config.app_secret)
            .domain(domain)
            .log_level(lark.LogLevel.INFO)
            .build()
        )
        return cls(client, typing_emoji=config.typing_emoji)

    # ── messages ──

    async def send_message(
        self,
        to: str,
        text: str,
        *,
        reply_to_message_id: str | None = None,
        mentions: Sequence[MentionTarget] | None = None,
        message_type: str = "text",
    ) -> str | None:
        if message_type == "post":
            content = encode_post(text, mentions)
        else:
            message_type = "text"
            content = json.dumps(
                {"text": format_text_mentions(text, mentions)}, ensure_ascii=False
            )
        return await self._send_msg(to, message_type, content, reply_to_message_id)

    async def send_markdown_card(
        self,
        to: str,
        text: str,
        *,
        reply_to_message_id: str | None = None,
        mentions: Sequence[MentionTarget] | None = None,
    ) -> str | None:
        card = build_markdown_card(format_card_mentions(text, mentions))
        content = json.dumps(card, ensure_ascii=False)
        return await self._send_msg(to, "interactive", content, reply_to_message_id)

    async def _send_msg(
        self,
        to: str,
        msg_type: str,
        content: str,
        reply_to_message_id: str | None = None,
    ) -> str | None:
        """Send one message, as a reply when *reply_to_message_id* is set."""
        if reply_to_message_id:
            req = (
                ReplyMessageRequest.builder()
                .message_id(reply_to_message_id)
                .request_body(
                    ReplyMessageRequestBody.builder()
                    .msg_type(msg_type)
                    .content(content)
                    .build()
                )
                .build()
            )
            call = self._client.im.v1.message.reply
        else:
            req = (
                CreateMessageRequest.builder()
                .receive_id_type(receive_id_type(to))
                .request_body(
                    CreateMessageRequestBody.builder()
                    .receive_id(to)
                    .msg_type(msg_type)
                    .content(content)
                    .build()
                )
                .build()
            )
            call = self._client.im.v1.message.create

        loop = asyncio.get_running_loop()
        resp = await loop.run_in_executor(None, call, req)
        if not resp.success():
            error = FeishuApiError("Send", resp.code, resp.msg, resp.get_log_id())
            logger.error(str(error))
            raise error

        sent_mid = str(getattr(getattr(resp, "data", None), "message_id", "") or "")
        logger.debug(f"Sent {msg_type} to {to}")
        return sent_mid or None

    # ── reactions ──

    async def add_reaction(self, message_id: str) -> TypingIndicatorState:
        req = (
            CreateMessageReactionRequest.builder()
            .message_id(message_id)
            .request_body(
                CreateMessageReactionRequestBody.builder()
                .reaction_type(Emoji.builder().emoji_type(self._typing_emoji).build())
                .build()
            )
            .build()
        )
        loop = asyncio.get_running_loop()
        resp = await loop.run_in_executor(
            None, self._client.im.v1.message_reaction.create, req
        )
        if not resp.success():
            raise FeishuApiError("Reaction", resp.code, resp.msg, resp.get_log_id())
        reaction_id = getattr(getattr(resp, "data", None), "reaction_id", None)
        return TypingIndicatorState(message_id=message_id, reaction_id=reaction_id)

    async def remove_reaction(self, state: TypingIndicatorState) -> None:
        if not state.reaction_id:
            return
        req = (
            DeleteMessageReactionRequest.builder()
            .message_id(state.message_id)
            .reaction_id(state.reaction_id)
            .build()
        )
        loop = asyncio.get_running_loop()
        resp = await loop.run_in_executor(
            None, self._client.im.v1.message_reaction.delete, req
        )
        if not resp.success():
            raise FeishuApiError("Reaction removal", resp.code, resp.msg, resp.get_log_id())
