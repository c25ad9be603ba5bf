"""Conversation session keys."""

from relay.ports.inbound import ChannelType, IncomingMessage


def thread_anchor(msg: IncomingMessage) -> str:
    """Timestamp every reply is threaded under."""
    return msg.thread_ts or msg.ts


def session_key(msg: IncomingMessage) -> str:
    """Deterministic id for the conversation msg belongs to.

    Format: "slack_dm_{channel}_{anchor}" for direct messages,
    "slack_{channel}_{anchor}" otherwise.
    """
    anchor = thread_anchor(msg)
    if msg.channel_type == ChannelType.IM:
        return f"slack_dm_{msg.channel}_{anchor}"
    return f"slack_{msg.channel}_{anchor}"
