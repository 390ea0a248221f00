"""Event types for reply delivery."""

from dataclasses import dataclass
from enum import Enum


class ReplyKind(str, Enum):
    """Where a reply payload came from in the agent run."""

    TOOL = "tool"  # machine-generated tool status line
    BLOCK = "block"  # streamed block of the answer
    FINAL = "final"  # final answer


@dataclass
class ReplyPayload:
    """One generated reply to deliver to a chat."""

    text: str | None
    kind: str = ReplyKind.FINAL.value

    def __post_init__(self) -> None:
        if isinstance(self.kind, ReplyKind):
            self.kind = self.kind.value


@dataclass(frozen=True)
class MentionTarget:
    """A user to @mention in the reply."""

    open_id: str  # Feishu open_id (ou_xxx)
    name: str
