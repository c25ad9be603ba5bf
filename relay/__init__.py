"""Flowise Slack Relay: answers Slack messages with a Flowise chatflow."""

__version__ = "0.1.0"

from relay.config import AppConfig, ConfigError
from relay.domain.relay import RelayBrain
from relay.domain.transcoder import to_chat_markup
from relay.ports.inbound import ChannelType, FileRef, IncomingMessage

__all__ = [
    "__version__",
    "AppConfig",
    "ConfigError",
    "RelayBrain",
    "to_chat_markup",
    "ChannelType",
    "FileRef",
    "IncomingMessage",
]
