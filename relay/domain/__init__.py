"""Domain layer: pure Python, no framework dependencies."""

from relay.domain.models import BlockKind, TranscodedBlock
from relay.domain.eligibility import clean_text, has_bot_mention, should_process
from relay.domain.extractor import (
    NO_TEXT_APOLOGY,
    PROCESSING_APOLOGY,
    REQUEST_APOLOGY,
    extract_reply,
)
from relay.domain.identity import BotIdentity, IdentityStatus
from relay.domain.relay import RelayBrain
from relay.domain.retry import RetryableError, RetryPolicy
from relay.domain.segmenter import segment, to_slack_blocks
from relay.domain.session import session_key, thread_anchor
from relay.domain.transcoder import to_chat_markup

__all__ = [
    "BlockKind",
    "TranscodedBlock",
    "clean_text",
    "has_bot_mention",
    "should_process",
    "NO_TEXT_APOLOGY",
    "PROCESSING_APOLOGY",
    "REQUEST_APOLOGY",
    "extract_reply",
    "BotIdentity",
    "IdentityStatus",
    "RelayBrain",
    "RetryableError",
    "RetryPolicy",
    "segment",
    "to_slack_blocks",
    "session_key",
    "thread_anchor",
    "to_chat_markup",
]
