"""Slack adapter: event handlers, ChatPort and file fetcher."""

from relay.adapters.slack.adapter import SlackChatAdapter, register_handlers, to_incoming
from relay.adapters.slack.files import SlackFileFetcher

__all__ = [
    "SlackChatAdapter",
    "SlackFileFetcher",
    "register_handlers",
    "to_incoming",
]
