"""Typing indicator for Feishu, emulated with a message reaction.

Feishu has no typing API, so while a reply is being produced the bot puts
a "Typing" reaction on the message it is answering and removes it once
the reply cycle is over. Failures here only get logged; they must never
get in the way of delivering the reply itself.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from feishu_reply.channels.feishu.send import FeishuTransport


@dataclass(frozen=True)
class TypingIndicatorState:
    """Handle for a reaction added by :meth:`TypingIndicator.start`."""

    message_id: str
    reaction_id: str | None = None


class TypingPhase(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    ACTIVE = "active"
    STOPPING = "stopping"


@dataclass(frozen=True)
class TypingCallbacks:
    """Error sinks for indicator start/stop failures."""

    on_start_error: Callable[[BaseException], None]
    on_stop_error: Callable[[BaseException], None]


def log_typing_failure(channel: str, action: str, error: BaseException) -> None:
    logger.warning(f"{channel}: typing indicator {action} failed: {error}")


def create_typing_callbacks(channel: str = "feishu") -> TypingCallbacks:
    return TypingCallbacks(
        on_start_error=lambda err: log_typing_failure(channel, "start", err),
        on_stop_error=lambda err: log_typing_failure(channel, "stop", err),
    )


class TypingIndicator:
    """Reaction-backed typing indicator for one reply cycle."""

    def __init__(
        self,
        transport: FeishuTransport,
        message_id: str | None,
        callbacks: TypingCallbacks | None = None,
    ) -> None:
        self._transport = transport
        self._message_id = message_id
        self._callbacks = callbacks or create_typing_callbacks()
        self._state: TypingIndicatorState | None = None
        self._phase = TypingPhase.IDLE

    @property
    def state(self) -> TypingIndicatorState | None:
        return self._state

    @property
    def phase(self) -> TypingPhase:
        return self._phase

    async def start(self) -> None:
        if not self._message_id or self._phase is not TypingPhase.IDLE:
            return
        self._phase = TypingPhase.STARTING
        try:
            self._state = await self._transport.add_reaction(self._message_id)
        except Exception as exc:
            self._phase = TypingPhase.IDLE
            self._callbacks.on_start_error(exc)
            return
        self._phase = TypingPhase.ACTIVE
        logger.debug("feishu: added typing indicator reaction")

    async def stop(self) -> None:
        state = self._state
        if state is None:
            return
        # Cleared up front: a failed removal still ends the indicator.
        self._state = None
        self._phase = TypingPhase.STOPPING
        try:
            await self._transport.remove_reaction(state)
            logger.debug("feishu: removed typing indicator reaction")
        except Exception as exc:
            self._callbacks.on_stop_error(exc)
        finally:
            self._phase = TypingPhase.IDLE
