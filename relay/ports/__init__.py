"""Port interfaces (Hexagonal Architecture)."""

from relay.ports.inbound import ChannelType, FileRef, IncomingMessage
from relay.ports.outbound import ChatPort, FilePort, PredictionPort

__all__ = [
    "ChannelType",
    "FileRef",
    "IncomingMessage",
    "ChatPort",
    "FilePort",
    "PredictionPort",
]
