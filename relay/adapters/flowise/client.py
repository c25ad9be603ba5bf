"""Flowise prediction client using aiohttp."""

import asyncio
import base64
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import aiohttp
from pydantic import BaseModel

from relay.config import FlowiseConfig
from relay.domain.retry import RetryableError, RetryPolicy
from relay.ports.inbound import FileRef

RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


def _log(msg: str):
    print(msg, file=sys.stderr)


class PredictionError(Exception):
    """Non-200 reply from the prediction endpoint."""

    def __init__(self, status: int, body: str = ""):
        super().__init__(f"HTTP {status}: {body[:200]}")
        self.status = status
        self.body = body


class TransientPredictionError(PredictionError, RetryableError):
    """Rate limited or temporarily unavailable; worth another attempt."""
    pass


# Request/Response models
class OverrideConfig(BaseModel):
    sessionId: str


class FileUpload(BaseModel):
    data: str
    type: str = "file"
    name: str
    mime: str


class PredictionRequest(BaseModel):
    question: str
    overrideConfig: OverrideConfig
    uploads: Optional[List[FileUpload]] = None


def to_data_url(data: bytes, mime: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def build_upload(ref: FileRef, data: bytes) -> FileUpload:
    mime = ref.mimetype or "application/octet-stream"
    return FileUpload(data=to_data_url(data, mime), name=ref.name, mime=mime)


class FlowiseClient:
    """Async client for POST {base}/api/v1/prediction/{chatflow_id}."""

    def __init__(
        self,
        config: FlowiseConfig,
        retry_policy: Optional[RetryPolicy] = None,
        sleep=asyncio.sleep,
    ):
        self._config = config
        self._retry = retry_policy or RetryPolicy()
        self._sleep = sleep

    @property
    def endpoint(self) -> str:
        return self._config.prediction_url

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
        }

    @staticmethod
    def build_request(
        question: str,
        session_id: str,
        files: Sequence[Tuple[FileRef, bytes]] = (),
    ) -> PredictionRequest:
        uploads = [build_upload(ref, data) for ref, data in files] or None
        return PredictionRequest(
            question=question,
            overrideConfig=OverrideConfig(sessionId=session_id),
            uploads=uploads,
        )

    async def _post_once(self, body: Dict[str, Any]) -> Any:
        async with aiohttp.ClientSession() as session:
            async with session.post(self.endpoint, json=body, headers=self._headers()) as resp:
                if resp.status == 200:
                    return await resp.json(content_type=None)
                text = await resp.text()
                if resp.status in RETRYABLE_STATUSES:
                    raise TransientPredictionError(resp.status, text)
                raise PredictionError(resp.status, text)

    async def predict(
        self,
        question: str,
        session_id: str,
        files: Sequence[Tuple[FileRef, bytes]] = (),
    ) -> Any:
        """Send question and return the decoded JSON reply.

        Raises:
            PredictionError: non-200 status after retries.
            aiohttp.ClientError: transport failure after retries.
        """
        body = self.build_request(question, session_id, files).model_dump(exclude_none=True)
        _log(
            f"[{datetime.now().isoformat()}] [flowise] POST prediction "
            f"(session={session_id}, uploads={len(files)})"
        )
        payload = await self._retry.run(
            lambda: self._post_once(body),
            retry_on=(TransientPredictionError, aiohttp.ClientError, asyncio.TimeoutError),
            sleep=self._sleep,
            on_retry=lambda n, e, d: _log(f"[flowise] attempt {n} failed ({e}), retrying in {d:.1f}s"),
        )
        _log(f"[{datetime.now().isoformat()}] [flowise] Completed (session={session_id})")
        return payload
