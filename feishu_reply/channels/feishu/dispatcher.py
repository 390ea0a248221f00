"""Reply dispatcher for Feishu.

One dispatcher is created per reply context (chat plus the message being
answered). It turns agent reply payloads into Feishu messages:

1. empty replies and ``process: poll`` tool summaries are dropped;
2. tool status lines are localized;
3. the render mode decides between card, post and plain text;
4. text is chunked and the chunks are sent strictly in order, with
   @mentions attached to the first chunk only.

A reaction on the answered message stands in for a typing indicator for
the duration of the reply cycle.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from loguru import logger

from feishu_reply.bus.events import MentionTarget, ReplyKind, ReplyPayload
from feishu_reply.channels.feishu.render import RenderDecision, select_render_mode
from feishu_reply.channels.feishu.send import FeishuTransport, LarkTransport
from feishu_reply.channels.feishu.tool_messages import (
    is_process_poll_summary,
    localize_tool_message,
)
from feishu_reply.channels.feishu.typing_indicator import TypingCallbacks, TypingIndicator
from feishu_reply.config.schema import FeishuConfig
from feishu_reply.utils.text import chunk_text_with_mode, convert_markdown_tables

Chunker = Callable[[str, int, str], list[str]]
TableConverter = Callable[[str, str], str]


class FeishuReplyDispatcher:
    """Deliver reply payloads for one Feishu reply context."""

    def __init__(
        self,
        config: FeishuConfig,
        transport: FeishuTransport,
        chat_id: str,
        reply_to_message_id: str | None = None,
        mention_targets: Sequence[MentionTarget] | None = None,
        *,
        chunker: Chunker = chunk_text_with_mode,
        table_converter: TableConverter = convert_markdown_tables,
        callbacks: TypingCallbacks | None = None,
    ) -> None:
        self.config = config
        self.chat_id = chat_id
        self.reply_to_message_id = reply_to_message_id
        self.mention_targets: tuple[MentionTarget, ...] = tuple(mention_targets or ())
        self._transport = transport
        self._chunker = chunker
        self._table_converter = table_converter
        self.typing = TypingIndicator(transport, reply_to_message_id, callbacks)
        self._reply_started = False

    # ── lifecycle hooks ──

    async def on_reply_start(self) -> None:
        """Fires before the first delivery of a reply cycle."""
        await self.typing.start()

    async def on_idle(self) -> None:
        """Fires when the reply cycle is over, successful or not."""
        await self.typing.stop()

    async def on_error(self, exc: BaseException, kind: str) -> None:
        logger.error(f"feishu {kind} reply failed: {exc}")
        await self.typing.stop()

    async def mark_idle(self) -> None:
        self._reply_started = False
        await self.on_idle()

    # ── delivery ──

    async def dispatch(self, payload: ReplyPayload) -> bool:
        """Deliver *payload*; failures are reported, never raised.

        Returns ``True`` when the payload was delivered (or intentionally
        skipped) and ``False`` when a send failed.
        """
        if not self._reply_started:
            self._reply_started = True
            await self.on_reply_start()
        try:
            await self.deliver(payload)
        except Exception as exc:
            await self.on_error(exc, payload.kind)
            return False
        return True

    async def run(self, payloads: Iterable[ReplyPayload]) -> bool:
        """Dispatch a whole reply cycle, then go idle."""
        ok = True
        try:
            for payload in payloads:
                ok = await self.dispatch(payload) and ok
        finally:
            await self.mark_idle()
        return ok

    async def deliver(self, payload: ReplyPayload) -> None:
        """Send one payload. Send failures propagate to the caller."""
        raw_text = payload.text or ""
        logger.debug(f"feishu deliver called: text={raw_text[:100]}")
        if not raw_text.strip():
            logger.debug("feishu deliver: empty text, skipping")
            return

        is_tool = payload.kind == ReplyKind.TOOL.value
        if (
            is_tool
            and self.config.tool_messages.suppress_process_poll
            and is_process_poll_summary(raw_text)
        ):
            logger.debug("feishu deliver: process poll summary suppressed")
            return

        text = localize_tool_message(raw_text) if is_tool else raw_text
        decision = select_render_mode(text, self.config.render_mode)

        if decision.use_card:
            await self._send_cards(text)
        else:
            await self._send_messages(text, decision)

    def _chunk(self, text: str) -> list[str]:
        return self._chunker(text, self.config.text_chunk_limit, self.config.chunk_mode)

    def _mentions_for(self, index: int) -> tuple[MentionTarget, ...] | None:
        # @mentions go out with the first chunk only
        if index == 0 and self.mention_targets:
            return self.mention_targets
        return None

    async def _send_cards(self, text: str) -> None:
        chunks = self._chunk(text)
        logger.debug(f"feishu deliver: sending {len(chunks)} card chunks to {self.chat_id}")
        for index, chunk in enumerate(chunks):
            await self._transport.send_markdown_card(
                self.chat_id,
                chunk,
                reply_to_message_id=self.reply_to_message_id,
                mentions=self._mentions_for(index),
            )

    async def _send_messages(self, text: str, decision: RenderDecision) -> None:
        converted = self._table_converter(text, self.config.markdown_table_mode)
        chunks = self._chunk(converted)
        message_type = decision.message_type
        logger.debug(
            f"feishu deliver: sending {len(chunks)} {message_type} chunks to {self.chat_id}"
        )
        for index, chunk in enumerate(chunks):
            await self._transport.send_message(
                self.chat_id,
                chunk,
                reply_to_message_id=self.reply_to_message_id,
                mentions=self._mentions_for(index),
                message_type=message_type,
            )


def create_feishu_reply_dispatcher(
    config: FeishuConfig,
    chat_id: str,
    reply_to_message_id: str | None = None,
    mention_targets: Sequence[MentionTarget] | None = None,
    transport: FeishuTransport | None = None,
) -> FeishuReplyDispatcher:
    """Build a dispatcher, talking to Feishu through lark-oapi by default."""
    if transport is None:
        transport = LarkTransport.from_config(config)
    return FeishuReplyDispatcher(
        config,
        transport,
        chat_id,
        reply_to_message_id,
        mention_targets,
    )
