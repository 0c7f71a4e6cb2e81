"""
Confirmation Protocol - reporting decisions to the permission service
=====================================================================

The coordinator commits a decision locally first and only then reports it
here. Nothing returned by this module can change a committed decision:
callers log failures and move on.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel

from sampling_approval.config.settings import ServiceConfig
from sampling_approval.core.exceptions import ConfirmationError
from sampling_approval.core.structured_logger import get_logger

logger = get_logger("ConfirmationClient")

DEFAULT_PRINCIPAL_TYPE = "Extension"


class ConfirmationResult(BaseModel):
    """Outcome reported by the permission service."""
    error: str | None = None
    status_code: int | None = None
    raw: dict[str, Any] = {}

    @property
    def ok(self) -> bool:
        return not self.error


@runtime_checkable
class ConfirmationClient(Protocol):
    """
    Anything that can report a chosen action for a request id.

    Implementations return a ConfirmationResult carrying ``error`` for
    application-level failures and raise ConfirmationError when the service
    cannot be reached at all.
    """

    async def submit(
        self,
        session_id: str,
        request_id: str,
        action: str,
        principal_type: str = DEFAULT_PRINCIPAL_TYPE,
    ) -> ConfirmationResult:
        ...


class HttpConfirmationClient:
    """
    ConfirmationClient backed by the permission service's HTTP API.

    POSTs ``{session_id, id, action, principal_type}`` to the configured
    confirmation endpoint. No retries; the default timeout is unbounded.
    """

    def __init__(
        self,
        config: ServiceConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        headers = {"X-Secret-Key": config.secret_key} if config.secret_key else {}
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers=headers,
            timeout=httpx.Timeout(config.timeout_seconds),
            transport=transport,
        )

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    async def submit(
        self,
        session_id: str,
        request_id: str,
        action: str,
        principal_type: str = DEFAULT_PRINCIPAL_TYPE,
    ) -> ConfirmationResult:
        payload = {
            "session_id": session_id,
            "id": request_id,
            "action": action,
            "principal_type": principal_type,
        }
        try:
            resp = await self._client.post(self.config.confirm_path, json=payload)
        except httpx.HTTPError as e:
            raise ConfirmationError(
                request_id,
                f"Could not reach permission service: {e}",
                details={"url": f"{self.config.base_url}{self.config.confirm_path}"},
            ) from e

        body = _json_body(resp)
        error = body.get("error")
        if not error and resp.is_error:
            error = f"HTTP {resp.status_code}"

        result = ConfirmationResult(
            error=str(error) if error else None,
            status_code=resp.status_code,
            raw=body,
        )
        logger.debug(
            "Confirmation response received",
            request_id=request_id,
            action=action,
            status_code=resp.status_code,
        )
        return result

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpConfirmationClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def _json_body(resp: httpx.Response) -> dict[str, Any]:
    # The endpoint usually answers with an empty body on success.
    if not resp.content:
        return {}
    try:
        body = resp.json()
    except ValueError:
        return {"error": resp.text} if resp.is_error else {}
    return body if isinstance(body, dict) else {}
