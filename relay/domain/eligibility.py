"""Message eligibility: should the relay answer this event?

Pure Python, no framework dependencies.
"""

import re
from typing import Optional

from relay.ports.inbound import ChannelType, IncomingMessage

# Slack mention token: <@U123ABC> or <@U123ABC|name>
MENTION_RE = re.compile(r"<@[^>]+>")

_SHARED_CHANNELS = (ChannelType.CHANNEL, ChannelType.GROUP)


def mention_token(bot_user_id: str) -> str:
    return f"<@{bot_user_id}>"


def has_bot_mention(text: str, bot_user_id: Optional[str]) -> bool:
    """True if text mentions the bot. Always False while the id is unknown."""
    if not bot_user_id or not text:
        return False
    token = mention_token(bot_user_id)
    return token in text or f"<@{bot_user_id}|" in text


def clean_text(text: Optional[str]) -> str:
    """Remove all mention tokens and surrounding whitespace."""
    return MENTION_RE.sub("", text or "").strip()


def needs_identity(msg: IncomingMessage) -> bool:
    """Whether the decision for msg depends on the bot user id.

    Bot senders, direct messages and unknown channel types are settled
    by the rules alone.
    """
    return not msg.is_bot and msg.channel_type in _SHARED_CHANNELS


def needs_thread_lookup(msg: IncomingMessage, bot_user_id: Optional[str]) -> bool:
    """Whether thread participation could change the decision for msg.

    Only shared-channel thread replies without a direct mention qualify,
    and only once the bot identity is known.
    """
    return (
        not msg.is_bot
        and msg.channel_type in _SHARED_CHANNELS
        and bool(msg.thread_ts)
        and bool(bot_user_id)
        and not has_bot_mention(msg.text, bot_user_id)
    )


def should_process(
    msg: IncomingMessage,
    bot_user_id: Optional[str],
    bot_in_thread: bool = False,
) -> bool:
    """Decide whether msg should be answered.

    Rules, in order:
    1. bot senders are never answered
    2. direct messages are always answered
    3. channel/group messages need a direct mention, or must be a thread
       reply in a thread the bot already took part in
    4. everything else is ignored
    """
    if msg.is_bot:
        return False
    if msg.channel_type == ChannelType.IM:
        return True
    if msg.channel_type in _SHARED_CHANNELS:
        if has_bot_mention(msg.text, bot_user_id):
            return True
        return bool(msg.thread_ts) and bool(bot_user_id) and bot_in_thread
    return False
