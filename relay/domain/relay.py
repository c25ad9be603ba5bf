"""RelayBrain: one handling cycle per inbound event, no framework dependencies.

Encapsulates the eligibility decision, the prediction call, reply
formatting and apology fallback without any Slack or HTTP import.
"""

import sys
from datetime import datetime
from typing import List, Optional, Tuple

from relay.config import DEFAULT_MAX_FILE_BYTES
from relay.domain.eligibility import (
    clean_text,
    needs_identity,
    needs_thread_lookup,
    should_process,
)
from relay.domain.extractor import REQUEST_APOLOGY, extract_reply
from relay.domain.identity import BotIdentity
from relay.domain.segmenter import segment, to_slack_blocks
from relay.domain.session import session_key, thread_anchor
from relay.ports.inbound import FileRef, IncomingMessage
from relay.ports.outbound import ChatPort, FilePort, PredictionPort


def _log(msg: str):
    print(msg, file=sys.stderr)


class RelayBrain:
    """Pure relay logic: testable with mock ports.

    Handles:
    - Eligibility (should I answer?), including the thread-history lookup
    - File collection for uploads
    - Prediction call and reply extraction
    - mrkdwn formatting and block segmentation
    - Apology reply when anything upstream fails
    """

    def __init__(
        self,
        prediction: PredictionPort,
        chat: ChatPort,
        identity: BotIdentity,
        files: Optional[FilePort] = None,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
        debug: bool = False,
    ):
        self.prediction = prediction
        self.chat = chat
        self.identity = identity
        self._files = files
        self._max_file_bytes = max_file_bytes
        self._debug = debug

    def _debug_log(self, msg: str):
        if self._debug:
            _log(f"[relay] {msg}")

    async def decide(self, msg: IncomingMessage) -> bool:
        """Eligibility for msg, consulting thread history only when it matters."""
        # Bot senders, DMs and unknown channel types are decided without the bot id
        bot_user_id = await self.identity.get() if needs_identity(msg) else None
        participated = False
        if needs_thread_lookup(msg, bot_user_id):
            try:
                participated = await self.chat.bot_in_thread(msg.channel, msg.thread_ts, bot_user_id)
            except Exception as e:
                _log(f"[relay] thread history lookup failed for {msg.thread_ts}: {e}")
        eligible = should_process(msg, bot_user_id, participated)
        self._debug_log(
            f"eligibility: channel_type={msg.channel_type.value} is_bot={msg.is_bot} "
            f"in_thread={bool(msg.thread_ts)} participated={participated} "
            f"bot_id={bot_user_id} -> {eligible}"
        )
        return eligible

    async def collect_files(self, msg: IncomingMessage) -> List[Tuple[FileRef, bytes]]:
        """Download attached files one at a time, skipping oversized or failed ones."""
        if not msg.files or self._files is None:
            return []
        collected: List[Tuple[FileRef, bytes]] = []
        for ref in msg.files:
            if ref.size > self._max_file_bytes:
                _log(f"[relay] file {ref.name} too large ({ref.size} > {self._max_file_bytes} bytes), skipping")
                continue
            try:
                data = await self._files.fetch(ref)
            except Exception as e:
                _log(f"[relay] failed to fetch file {ref.name}: {e}")
                continue
            collected.append((ref, data))
        return collected

    async def handle(self, msg: IncomingMessage) -> bool:
        """Run one handling cycle. Returns True if a reply was attempted."""
        if not await self.decide(msg):
            return False

        anchor = thread_anchor(msg)
        session_id = session_key(msg)
        question = clean_text(msg.text)
        _log(f"[{datetime.now().isoformat()}] Processing message in {msg.channel_type.value}")
        self._debug_log(f"session={session_id} question_length={len(question)} files={len(msg.files)}")

        try:
            files = await self.collect_files(msg)
            payload = await self.prediction.predict(question, session_id, files)
            reply = extract_reply(payload)
            blocks = to_slack_blocks(segment(reply))
            await self.chat.post_reply(msg.channel, anchor, reply, blocks or None)
            _log(f"[{datetime.now().isoformat()}] Reply sent (session={session_id})")
        except Exception as e:
            status = getattr(e, "status", None)
            _log(
                f"[relay] error handling message: {e} "
                f"(session={session_id}, endpoint={self.prediction.endpoint}, status={status})"
            )
            try:
                await self.chat.post_reply(msg.channel, anchor, REQUEST_APOLOGY)
            except Exception as post_error:
                _log(f"[relay] could not post apology to {msg.channel}/{anchor}: {post_error}")
        return True
