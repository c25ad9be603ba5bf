"""Inbound port: platform-agnostic message representation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ChannelType(str, Enum):
    IM = "im"
    CHANNEL = "channel"
    GROUP = "group"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ChannelType":
        """Map a raw channel_type value, anything unrecognised -> UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class FileRef:
    """File attached to an incoming message."""

    id: str
    name: str
    mimetype: str
    size: int
    url_private: str


@dataclass(frozen=True)
class IncomingMessage:
    """Snapshot of one inbound chat event."""

    text: str
    channel_type: ChannelType
    channel: str
    ts: str
    thread_ts: Optional[str] = None
    is_bot: bool = False
    files: Tuple[FileRef, ...] = field(default_factory=tuple)
