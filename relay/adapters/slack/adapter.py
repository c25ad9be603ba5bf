"""Slack adapter: bridges slack-bolt events to RelayBrain.

Converts Slack message events to IncomingMessage and provides the
ChatPort implementation on top of the async Web API client.
"""

import sys
from typing import Any, Callable, Dict, List, Optional

from slack_bolt.async_app import AsyncApp
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from relay.domain.relay import RelayBrain
from relay.ports.inbound import ChannelType, FileRef, IncomingMessage

# Plain messages, messages with files and thread replies also sent to the channel
HANDLED_SUBTYPES = {None, "file_share", "thread_broadcast"}

THREAD_HISTORY_LIMIT = 100

# Web API error codes meaning the bot token no longer works
AUTH_ERRORS = {"invalid_auth", "not_authed", "token_revoked", "token_expired", "account_inactive"}


def _log(msg: str):
    print(msg, file=sys.stderr)


def to_file_ref(raw: Dict[str, Any]) -> FileRef:
    return FileRef(
        id=raw.get("id", ""),
        name=raw.get("name") or "attachment",
        mimetype=raw.get("mimetype") or "application/octet-stream",
        size=int(raw.get("size") or 0),
        url_private=raw.get("url_private_download") or raw.get("url_private") or "",
    )


def to_incoming(event: Dict[str, Any]) -> IncomingMessage:
    """Convert a Slack message event to platform-agnostic IncomingMessage."""
    return IncomingMessage(
        text=event.get("text") or "",
        channel_type=ChannelType.parse(event.get("channel_type")),
        channel=event.get("channel", ""),
        ts=event.get("ts", ""),
        thread_ts=event.get("thread_ts") or None,
        is_bot=bool(event.get("bot_id")),
        files=tuple(to_file_ref(f) for f in event.get("files") or []),
    )


def is_auth_error(error: BaseException) -> bool:
    """True when a Web API call failed because the bot token is no longer valid."""
    if not isinstance(error, SlackApiError) or error.response is None:
        return False
    return error.response.get("error") in AUTH_ERRORS


class SlackChatAdapter:
    """ChatPort implementation using AsyncWebClient.

    on_auth_error is called when a Web API call reports a dead token, so the
    cached bot identity can be dropped and resolved again.
    """

    def __init__(self, client: AsyncWebClient, on_auth_error: Optional[Callable[[], None]] = None):
        self._client = client
        self.on_auth_error = on_auth_error

    def _check_auth(self, error: SlackApiError):
        if is_auth_error(error) and self.on_auth_error:
            _log(f"[slack] auth error from Web API ({error.response.get('error')}), dropping cached bot identity")
            self.on_auth_error()

    async def resolve_bot_user_id(self) -> str:
        auth = await self._client.auth_test()
        return auth["user_id"]

    async def bot_in_thread(self, channel: str, thread_ts: str, bot_user_id: str) -> bool:
        """Whether the bot has posted in the thread before."""
        try:
            replies = await self._client.conversations_replies(
                channel=channel, ts=thread_ts, limit=THREAD_HISTORY_LIMIT
            )
        except SlackApiError as e:
            self._check_auth(e)
            raise
        return any(m.get("user") == bot_user_id for m in replies.get("messages", []))

    async def post_reply(
        self,
        channel: str,
        thread_ts: str,
        text: str,
        blocks: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        kwargs: Dict[str, Any] = {"channel": channel, "text": text, "thread_ts": thread_ts}
        if blocks:
            kwargs["blocks"] = blocks
        try:
            await self._client.chat_postMessage(**kwargs)
        except SlackApiError as e:
            self._check_auth(e)
            raise


def register_handlers(app: AsyncApp, brain: RelayBrain) -> None:
    """Register Slack event handlers on the app."""

    @app.event("message")
    async def handle_message(event: Dict[str, Any]) -> None:
        """Handle channel messages, thread replies and DMs."""
        subtype = event.get("subtype")
        if subtype not in HANDLED_SUBTYPES:
            return
        await brain.handle(to_incoming(event))

    @app.error
    async def handle_error(error: Exception, body: Dict[str, Any]) -> None:
        event = (body or {}).get("event", {})
        _log(f"[slack] app error: {error} (event type={event.get('type')}, channel={event.get('channel')})")
        if is_auth_error(error):
            brain.identity.invalidate()
