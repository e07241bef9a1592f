"""
HireBoard - Applicant store client.

Async HTTP client for the applicant store REST resource. Every call either
returns parsed schemas or raises a StoreError subclass; retry policy, if
any, belongs to the caller.
"""
import logging
from typing import Any, Iterable, List, Optional

import httpx
from pydantic import ValidationError

from .config import settings
from .context import SessionContext
from .filters import FilterSpec
from .schemas import (
    Applicant, ApplicantNote, ApplicantPage, BookmarkResult, JobSummary,
    NoteCreated, Stage
)
from .stages import stage_id

logger = logging.getLogger("hireboard.client")


class StoreError(Exception):
    """Base class for applicant store failures."""
    pass


class StoreTransportError(StoreError):
    """The request never reached the store, or no response came back."""
    pass


class StoreResponseError(StoreError):
    """The store answered with an error status or an unreadable body."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        if detail:
            return detail if isinstance(detail, str) else str(detail)
    return response.reason_phrase


class ApplicantStoreClient:
    """
    Client for the store's /applicants and /jobs endpoints.

    One instance per board session; the session context's headers are sent
    with every request. Close with `aclose()` or use as an async context
    manager.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        context: Optional[SessionContext] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.client.api_base_url).rstrip("/")
        self.context = context or SessionContext()
        self.timeout = settings.client.request_timeout if timeout is None else timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.context.headers(),
            timeout=self.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ApplicantStoreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.debug("%s %s transport failure: %r", method, path, exc)
            raise StoreTransportError(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            raise StoreResponseError(response.status_code, _error_message(response))
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise StoreResponseError(response.status_code, "Invalid JSON in store response") from exc

    @staticmethod
    def _parse(model, data):
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise StoreResponseError(200, f"Unexpected {model.__name__} payload: {exc}") from exc

    # --- Reads ---

    async def list_applicants(
        self,
        filters: Optional[FilterSpec] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> ApplicantPage:
        """GET /applicants with the filter's query parameters."""
        params = (filters or FilterSpec()).to_params()
        if page is not None:
            params["page"] = page
        if limit is not None:
            params["limit"] = limit
        data = await self._request("GET", "/applicants", params=params)
        return self._parse(ApplicantPage, data)

    async def get_applicant(self, applicant_id: str) -> Applicant:
        data = await self._request("GET", f"/applicants/{applicant_id}")
        return self._parse(Applicant, data)

    async def list_jobs(self) -> List[JobSummary]:
        data = await self._request("GET", "/jobs")
        if not isinstance(data, list):
            raise StoreResponseError(200, "Expected a list of jobs")
        return [self._parse(JobSummary, item) for item in data]

    # --- Mutations ---

    async def move_to_stage(self, applicant_id: str, stage: Stage) -> None:
        await self._request(
            "PUT", f"/applicants/{applicant_id}/stage",
            json={"stage": stage_id(stage)},
        )

    async def bulk_move(self, applicant_ids: Iterable[str], stage: Stage) -> int:
        """Move several applicants in one call; returns how many the store updated."""
        data = await self._request(
            "PUT", "/applicants/bulk/stage",
            json={"applicantIds": list(applicant_ids), "stage": stage_id(stage)},
        )
        return int((data or {}).get("updated", 0))

    async def add_note(self, applicant_id: str, content: str) -> ApplicantNote:
        data = await self._request(
            "POST", f"/applicants/{applicant_id}/notes",
            json={"content": content},
        )
        return self._parse(NoteCreated, data).note

    async def update_rating(self, applicant_id: str, rating: int) -> None:
        await self._request(
            "PUT", f"/applicants/{applicant_id}/rating",
            json={"rating": rating},
        )

    async def toggle_bookmark(self, applicant_id: str) -> bool:
        """Flip the bookmark server-side; returns the new value."""
        data = await self._request("POST", f"/applicants/{applicant_id}/bookmark")
        return self._parse(BookmarkResult, data).is_bookmarked

    async def reject(self, applicant_id: str, reason: str) -> None:
        await self._request(
            "POST", f"/applicants/{applicant_id}/reject",
            json={"reason": reason},
        )
