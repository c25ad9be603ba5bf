"""Outbound ports: interfaces for external system adapters."""

from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from relay.ports.inbound import FileRef


@runtime_checkable
class PredictionPort(Protocol):
    """Interface for the conversational prediction backend."""

    @property
    def endpoint(self) -> str: ...

    async def predict(
        self,
        question: str,
        session_id: str,
        files: Sequence[Tuple[FileRef, bytes]] = (),
    ) -> Any: ...


@runtime_checkable
class ChatPort(Protocol):
    """Interface for posting to and reading from the chat platform."""

    async def resolve_bot_user_id(self) -> str: ...

    async def bot_in_thread(self, channel: str, thread_ts: str, bot_user_id: str) -> bool: ...

    async def post_reply(
        self,
        channel: str,
        thread_ts: str,
        text: str,
        blocks: Optional[List[Dict[str, Any]]] = None,
    ) -> None: ...


@runtime_checkable
class FilePort(Protocol):
    """Interface for fetching attached file contents."""

    async def fetch(self, file: FileRef) -> bytes: ...
