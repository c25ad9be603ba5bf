"""Reply text extraction from prediction payloads."""

import json
import sys
from typing import Any, Optional

from relay.domain.transcoder import to_chat_markup

# One message per failure class
NO_TEXT_APOLOGY = "Sorry, I couldn't process the response properly."
PROCESSING_APOLOGY = "Sorry, I had trouble processing the response."
REQUEST_APOLOGY = "I'm sorry, I encountered an error processing your request. Please try again later."


def _log(msg: str):
    print(msg, file=sys.stderr)


def _assistant_text(payload: dict) -> Optional[str]:
    """First assistant message's first content text, if the shape matches."""
    assistant = payload.get("assistant")
    if not isinstance(assistant, dict):
        return None
    messages = assistant.get("messages")
    if not isinstance(messages, list):
        return None
    for message in messages:
        if not isinstance(message, dict) or message.get("role") != "assistant":
            continue
        content = message.get("content")
        if not isinstance(content, list) or not content:
            return None
        text = content[0].get("text") if isinstance(content[0], dict) else None
        value = text.get("value") if isinstance(text, dict) else None
        return value if isinstance(value, str) and value else None
    return None


def extract_reply(payload: Any) -> str:
    """Reply text for payload, converted to mrkdwn.

    Resolution order:
    1. top-level "text"
    2. assistant.messages[role=assistant].content[0].text.value
    3. NO_TEXT_APOLOGY

    Never raises; unexpected errors yield PROCESSING_APOLOGY.
    """
    try:
        if isinstance(payload, (str, bytes)):
            payload = json.loads(payload)
        if not isinstance(payload, dict):
            return NO_TEXT_APOLOGY

        text = payload.get("text")
        if isinstance(text, str) and text:
            return to_chat_markup(text)

        value = _assistant_text(payload)
        if value:
            return to_chat_markup(value)

        return NO_TEXT_APOLOGY
    except Exception as e:
        _log(f"[extractor] error processing prediction response: {e}")
        return PROCESSING_APOLOGY
