"""
HireBoard - Pipeline board controller.

Holds the board's applicant collection, filter state, selection and
detail panel, and issues stage transitions and annotations against the
applicant store.

Update policy:
    Mutations with a locally known outcome (stage moves, rating, bookmark,
    reject) are applied to the collection first. While writes to a field
    are outstanding the controller remembers the field's last server
    value; when the last of them settles the board shows that value, so
    failed writes leave the applicant as the store has it. Notes are not
    optimistic: their id, author and timestamp come from the store. Every
    successful mutation is followed by a reload, which is the
    authoritative view.

Reloads:
    Each reload carries a sequence number. Starting one cancels older
    in-flight reloads, and only the response to the newest request is
    applied, so a slow fetch for stale filters never overwrites newer state.

Failures:
    Store errors are logged and the operation returns False. Caller
    mistakes (unknown applicant, invalid stage, empty note) raise.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .client import ApplicantStoreClient, StoreError
from .config import ClientSettings, settings
from .context import SessionContext
from .filters import FilterSpec
from .schemas import Applicant, JobSummary, Stage
from .selection import SelectionSet
from .stages import (
    PIPELINE_STAGES, PipelineStage, is_valid_stage, next_stage,
    partition_by_stage, stage_counts, stage_id
)

logger = logging.getLogger("hireboard.controller")


class UnknownApplicantError(KeyError):
    """The applicant id is not in the board's collection."""
    pass


def _validate_stage(value) -> Stage:
    if not is_valid_stage(value):
        raise ValueError(f"Unknown stage: {value!r}")
    return Stage(stage_id(value))


class _PendingField:
    """Bookkeeping for one applicant field with optimistic writes in flight."""
    __slots__ = ("confirmed", "attempted", "outstanding")

    def __init__(self, confirmed: Any):
        self.confirmed = confirmed
        self.attempted = confirmed
        self.outstanding = 0


class PipelineController:
    """
    Kanban board state for one session.

    The collection, selection and detail panel belong to this instance
    alone. All methods run on one event loop; none of them lock.
    """

    def __init__(
        self,
        store: ApplicantStoreClient,
        context: Optional[SessionContext] = None,
        stages: Iterable[PipelineStage] = PIPELINE_STAGES,
        filters: Optional[FilterSpec] = None,
        skip_same_stage_moves: Optional[bool] = None,
    ):
        self.store = store
        self.context = context or SessionContext()
        self.stages: List[PipelineStage] = list(stages)
        self.filters = filters or FilterSpec()
        self.selection = SelectionSet()
        self.applicants: List[Applicant] = []
        self.total = 0
        self.jobs: List[JobSummary] = []
        self.detail: Optional[Applicant] = None
        if skip_same_stage_moves is None:
            skip_same_stage_moves = settings.client.skip_same_stage_moves
        self.skip_same_stage_moves = skip_same_stage_moves

        self._request_seq = 0
        self._applied_seq = 0
        self._inflight: Dict[int, asyncio.Task] = {}
        self._pending: Dict[Tuple[str, str], _PendingField] = {}
        self._mutations: Dict[str, int] = {}

    # --- Board state ---

    @property
    def is_loading(self) -> bool:
        return bool(self._inflight)

    def board(self) -> Dict[str, List[Applicant]]:
        """Current collection grouped into columns."""
        return partition_by_stage(self.applicants, self.stages)

    def column_counts(self) -> Dict[str, int]:
        return stage_counts(self.board())

    def find(self, applicant_id: str) -> Optional[Applicant]:
        index = self._index_of(applicant_id)
        return self.applicants[index] if index is not None else None

    def get(self, applicant_id: str) -> Applicant:
        applicant = self.find(applicant_id)
        if applicant is None:
            raise UnknownApplicantError(applicant_id)
        return applicant

    def _index_of(self, applicant_id: str) -> Optional[int]:
        for index, applicant in enumerate(self.applicants):
            if applicant.id == applicant_id:
                return index
        return None

    def _replace(self, applicant: Applicant) -> None:
        index = self._index_of(applicant.id)
        if index is not None:
            self.applicants[index] = applicant
        if self.detail is not None and self.detail.id == applicant.id:
            self.detail = applicant

    def _has_pending(self, applicant_id: str) -> bool:
        return any(key[0] == applicant_id for key in self._pending)

    def _begin(self, applicant_id: str, **changes) -> None:
        """Optimistically patch one applicant, remembering the server values it hides."""
        current = self.get(applicant_id)
        for field, value in changes.items():
            key = (applicant_id, field)
            entry = self._pending.get(key)
            if entry is None:
                entry = self._pending[key] = _PendingField(getattr(current, field))
            entry.attempted = value
            entry.outstanding += 1
        self._mutations[applicant_id] = self._mutations.get(applicant_id, 0) + 1
        self._replace(current.model_copy(update=changes))

    def _settle(self, applicant_id: str, changes: Dict[str, Any], succeeded: bool) -> None:
        """
        Finish one optimistic write.

        A successful write makes `changes` the server value. Once the last
        outstanding write on a field settles, the board shows the field's
        server value; until then the newest attempted value stays visible.
        """
        restore = {}
        for field, value in changes.items():
            key = (applicant_id, field)
            entry = self._pending[key]
            entry.outstanding -= 1
            if succeeded:
                entry.confirmed = value
            if entry.outstanding == 0:
                del self._pending[key]
                restore[field] = entry.confirmed

        current = self.find(applicant_id)
        if current is None:
            return
        if any(getattr(current, field) != value for field, value in restore.items()):
            self._replace(current.model_copy(update=restore))

    def _overlay_pending(self) -> None:
        """Reloaded rows are server state; keep showing writes still in flight on top."""
        patches: Dict[str, Dict[str, Any]] = {}
        for (applicant_id, field), entry in self._pending.items():
            current = self.find(applicant_id)
            if current is None:
                continue
            entry.confirmed = getattr(current, field)
            patches.setdefault(applicant_id, {})[field] = entry.attempted
        for applicant_id, changes in patches.items():
            self._replace(self.get(applicant_id).model_copy(update=changes))

    # --- Loading ---

    async def reload(self) -> bool:
        """
        Fetch the collection for the current filters.

        Returns True when this request's response was applied. False means
        the fetch failed, was cancelled, or was superseded by a newer one.
        """
        self._request_seq += 1
        seq = self._request_seq
        for older_seq, older in list(self._inflight.items()):
            if older_seq < seq:
                older.cancel()

        task = asyncio.ensure_future(self.store.list_applicants(self.filters))
        self._inflight[seq] = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            self._inflight.pop(seq, None)

        if task.cancelled():
            logger.debug("Reload #%d superseded before it completed", seq)
            return False
        exc = task.exception()
        if exc is not None:
            if isinstance(exc, StoreError):
                logger.error("Failed to load applicants: %s", exc)
                return False
            raise exc
        if seq < self._request_seq or seq <= self._applied_seq:
            logger.debug("Discarding stale reload #%d (latest #%d)", seq, self._request_seq)
            return False

        page = task.result()
        self._applied_seq = seq
        self.applicants = self._unique(page.applicants)
        self.total = page.total
        self._overlay_pending()
        self._refresh_detail()
        logger.debug("Loaded %d of %d applicants", len(self.applicants), self.total)
        return True

    @staticmethod
    def _unique(applicants: List[Applicant]) -> List[Applicant]:
        seen = set()
        unique = []
        for applicant in applicants:
            if applicant.id in seen:
                logger.warning("Store returned applicant %s twice; keeping the first", applicant.id)
                continue
            seen.add(applicant.id)
            unique.append(applicant)
        return unique

    def _refresh_detail(self) -> None:
        if self.detail is None:
            return
        fresh = self.find(self.detail.id)
        if fresh is not None:
            self.detail = fresh

    async def set_filters(self, **changes) -> bool:
        """Apply filter changes (job_id, stage, source, query) and reload once."""
        updated = self.filters.replace(**changes)
        if updated == self.filters:
            return True
        self.filters = updated
        return await self.reload()

    async def clear_filters(self) -> bool:
        if self.filters.is_empty():
            return True
        self.filters = FilterSpec()
        return await self.reload()

    async def load_jobs(self) -> bool:
        """Fetch jobs for the filter dropdown."""
        try:
            self.jobs = await self.store.list_jobs()
        except StoreError as exc:
            logger.error("Failed to load jobs: %s", exc)
            return False
        return True

    async def cancel_pending(self) -> None:
        """Cancel in-flight reloads, e.g. when the session ends."""
        pending = list(self._inflight.values())
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # --- Stage transitions ---

    async def move_to_stage(self, applicant_id: str, target_stage) -> bool:
        """Move one applicant to `target_stage` (a catalog stage or `rejected`)."""
        target = _validate_stage(target_stage)
        current = self.get(applicant_id)
        settled = (applicant_id, "stage") not in self._pending
        if current.stage == target and settled and self.skip_same_stage_moves:
            logger.debug("Applicant %s already in %s; nothing to do", applicant_id, target.value)
            return True

        changes = {"stage": target}
        self._begin(applicant_id, **changes)
        succeeded = False
        try:
            await self.store.move_to_stage(applicant_id, target)
            succeeded = True
        except StoreError as exc:
            logger.error("Failed to move applicant %s to %s: %s", applicant_id, target.value, exc)
        finally:
            self._settle(applicant_id, changes, succeeded)
        if not succeeded:
            return False

        logger.info("%s moved applicant %s to %s", self.context.actor, applicant_id, target.value)
        await self.reload()
        return True

    async def drop(self, applicant_id: str, column_stage_id: str) -> bool:
        """A card dropped onto a column."""
        return await self.move_to_stage(applicant_id, column_stage_id)

    async def move_next(self, applicant_id: str) -> bool:
        current = self.get(applicant_id)
        return await self.move_to_stage(applicant_id, next_stage(current.stage, self.stages))

    async def bulk_move(self, applicant_ids: Iterable[str], target_stage) -> bool:
        """
        Move several applicants with one store call.

        An empty id list is a no-op. On success the selection is cleared;
        on failure it is left as it was.
        """
        ids = list(applicant_ids)
        if len(set(ids)) != len(ids):
            raise ValueError("Bulk move ids must be unique")
        target = _validate_stage(target_stage)
        if not ids:
            return True

        changes = {"stage": target}
        on_board = [applicant_id for applicant_id in ids if self._index_of(applicant_id) is not None]
        for applicant_id in on_board:
            self._begin(applicant_id, **changes)
        succeeded = False
        try:
            await self.store.bulk_move(ids, target)
            succeeded = True
        except StoreError as exc:
            logger.error("Failed to bulk move %d applicants to %s: %s", len(ids), target.value, exc)
        finally:
            for applicant_id in on_board:
                self._settle(applicant_id, changes, succeeded)
        if not succeeded:
            return False

        logger.info("%s moved %d applicants to %s", self.context.actor, len(ids), target.value)
        self.selection.clear()
        await self.reload()
        return True

    async def move_selected(self, target_stage) -> bool:
        return await self.bulk_move(self.selection.ids(), target_stage)

    # --- Selection ---

    def toggle_select(self, applicant_id: str) -> bool:
        return self.selection.toggle(applicant_id)

    def clear_selection(self) -> None:
        self.selection.clear()

    # --- Detail panel ---

    async def open_detail(self, applicant_id: str) -> Applicant:
        """
        Show an applicant in the detail panel, refreshed from the store when possible.

        The fetched copy only replaces the board's copy if no reload was
        applied and no write to this applicant started while it was in
        flight; otherwise the board's copy is newer and is shown instead.
        """
        local = self.get(applicant_id)
        before = (self._applied_seq, self._mutations.get(applicant_id, 0))
        try:
            fresh = await self.store.get_applicant(applicant_id)
        except StoreError as exc:
            logger.warning("Could not refresh applicant %s, showing cached copy: %s", applicant_id, exc)
            self.detail = self.find(applicant_id) or local
            return self.detail

        current = self.find(applicant_id)
        after = (self._applied_seq, self._mutations.get(applicant_id, 0))
        if current is not None and (after != before or self._has_pending(applicant_id)):
            logger.debug("Applicant %s changed while its detail was loading; keeping the board copy", applicant_id)
            self.detail = current
            return current
        self.detail = fresh
        self._replace(fresh)
        return fresh

    def close_detail(self) -> None:
        self.detail = None

    async def add_note(self, applicant_id: str, content: str) -> bool:
        text = (content or "").strip()
        if not text:
            raise ValueError("Note content must not be empty")
        self.get(applicant_id)
        try:
            await self.store.add_note(applicant_id, text)
        except StoreError as exc:
            logger.error("Failed to add note to applicant %s: %s", applicant_id, exc)
            return False
        await self.reload()
        return True

    async def update_rating(self, applicant_id: str, rating: int) -> bool:
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValueError(f"Rating must be an integer from 1 to 5, got {rating!r}")
        changes = {"rating": rating}
        self._begin(applicant_id, **changes)
        succeeded = False
        try:
            await self.store.update_rating(applicant_id, rating)
            succeeded = True
        except StoreError as exc:
            logger.error("Failed to update rating for applicant %s: %s", applicant_id, exc)
        finally:
            self._settle(applicant_id, changes, succeeded)
        if not succeeded:
            return False
        await self.reload()
        return True

    async def toggle_bookmark(self, applicant_id: str) -> bool:
        flipped = not self.get(applicant_id).is_bookmarked
        self._begin(applicant_id, is_bookmarked=flipped)
        confirmed = None
        try:
            confirmed = await self.store.toggle_bookmark(applicant_id)
        except StoreError as exc:
            logger.error("Failed to toggle bookmark for applicant %s: %s", applicant_id, exc)
        finally:
            # the store answers with the value it now holds
            value = flipped if confirmed is None else confirmed
            self._settle(applicant_id, {"is_bookmarked": value}, confirmed is not None)
        if confirmed is None:
            return False
        await self.reload()
        return True

    async def reject(self, applicant_id: str, reason: str) -> bool:
        """Reject an applicant; it leaves the board and its detail panel closes."""
        text = (reason or "").strip()
        if not text:
            raise ValueError("A rejection reason is required")
        changes = {"stage": Stage.REJECTED}
        self._begin(applicant_id, **changes)
        succeeded = False
        try:
            await self.store.reject(applicant_id, text)
            succeeded = True
        except StoreError as exc:
            logger.error("Failed to reject applicant %s: %s", applicant_id, exc)
        finally:
            self._settle(applicant_id, changes, succeeded)
        if not succeeded:
            return False

        logger.info("%s rejected applicant %s", self.context.actor, applicant_id)
        if self.detail is not None and self.detail.id == applicant_id:
            self.detail = None
        await self.reload()
        return True


@asynccontextmanager
async def board_session(
    context: Optional[SessionContext] = None,
    client_settings: Optional[ClientSettings] = None,
    transport=None,
    load: bool = True,
):
    """
    Open a board for one hosting session.

    Creates the store client and controller, loads applicants and jobs
    concurrently, and closes the client when the session ends.

    Usage:
        async with board_session() as board:
            await board.set_filters(query="walker")
    """
    cfg = client_settings or settings.client
    context = context or SessionContext.from_settings(cfg)
    store = ApplicantStoreClient(
        cfg.api_base_url,
        context=context,
        timeout=cfg.request_timeout,
        transport=transport,
    )
    controller = PipelineController(
        store,
        context,
        skip_same_stage_moves=cfg.skip_same_stage_moves,
    )
    try:
        if load:
            await asyncio.gather(controller.reload(), controller.load_jobs())
        yield controller
    finally:
        await controller.cancel_pending()
        await store.aclose()
