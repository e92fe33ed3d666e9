"""
Vote synchronization controller.

Owns the authoritative in-memory vote view and decides, at any moment,
which data set backs it:

- local mode (no endpoint URL): the local ledger is the only authority
- cloud mode (endpoint URL set): every successful remote read replaces
  the view and the ledger wholesale, including an empty read

Fetch results are stamped with a generation number. A result is applied
only if no fetch issued after it has already been applied, and a mode
change invalidates everything still in flight.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Set

from core.sync.ports import EndpointConfig, Ledger, VoteSink, VoteSource
from core.votes.models import Vote
from shared.logging.logger import get_logger

log = get_logger("core.sync")


class SyncMode(Enum):
    LOCAL = "local"
    CLOUD = "cloud"


class TabView(Enum):
    VOTE = "vote"
    RESULTS = "results"
    ANALYSIS = "analysis"


@dataclass(frozen=True)
class Notice:
    message: str
    kind: str = "success"

    @property
    def is_error(self) -> bool:
        return self.kind == "error"


@dataclass
class SyncState:
    votes: List[Vote] = field(default_factory=list)
    view: TabView = TabView.VOTE
    # UI indicators only; the protocol never reads them
    syncing: bool = False
    submitting: bool = False


class SyncController:
    def __init__(
        self,
        *,
        ledger: Ledger,
        source: VoteSource,
        sink: VoteSink,
        endpoint: EndpointConfig,
        poll_interval: float = 2.0,
        settle_delay: float = 1.5,
        on_change: Optional[Callable[[SyncState], None]] = None,
        on_notice: Optional[Callable[[Notice], None]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._ledger = ledger
        self._source = source
        self._sink = sink
        self._endpoint = endpoint
        self._poll_interval = poll_interval
        self._settle_delay = settle_delay
        self._on_change = on_change
        self._on_notice = on_notice
        self._sleep = sleep

        self._fetch_generation = 0
        self._applied_generation = 0

        self._timer: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self._applied_mode = self.mode

        self.state = SyncState(votes=self._ledger.load())

    # ------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------

    @property
    def mode(self) -> SyncMode:
        return SyncMode.CLOUD if self._source.is_configured() else SyncMode.LOCAL

    @property
    def is_cloud(self) -> bool:
        return self.mode is SyncMode.CLOUD

    @property
    def votes(self) -> List[Vote]:
        return list(self.state.votes)

    @property
    def polling(self) -> bool:
        return self._timer is not None and not self._timer.done()

    async def set_endpoint(self, url: Optional[str]) -> Notice:
        was_cloud = self.is_cloud
        try:
            if url and url.strip():
                self._endpoint.set_url(url)
            else:
                self._endpoint.clear()
        except OSError as e:
            log.error(f"Failed to persist endpoint URL: {e}")
            return Notice("Could not save the connection settings", "error")

        return await self._enter_mode(was_cloud)

    async def reconcile_mode(self) -> Optional[Notice]:
        """
        Pick up an endpoint change made outside this controller, such as
        another process editing the stored URL.

        Runs the same transition as `set_endpoint` when the mode differs
        from the last one this controller applied; returns None otherwise.
        """
        if self.mode is self._applied_mode:
            return None
        log.info(f"Endpoint changed externally; switching to {self.mode.value} mode")
        notice = await self._enter_mode(self._applied_mode is SyncMode.CLOUD)
        self._emit_notice(notice)
        return notice

    async def _enter_mode(self, was_cloud: bool) -> Notice:
        self._applied_mode = self.mode

        # Results from the previous endpoint (or mode) must not land
        self._invalidate_inflight()

        if not self.is_cloud:
            if was_cloud:
                await self.stop()
                self._replace_votes(self._ledger.load())
                log.info("Cloud sync disabled; showing local ledger")
            return Notice("Local-only mode", "info")

        log.info("Cloud sync enabled")
        await self.refresh()
        self.start()
        return Notice("Connection configured", "info")

    # ------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------

    def start(self) -> None:
        """
        Start the poll timer in cloud mode. The first tick fires immediately.
        """
        if self.polling or not self.is_cloud:
            return
        log.info(f"Polling remote votes every {self._poll_interval}s")
        self._timer = asyncio.create_task(self._run_timer())

    async def stop(self) -> None:
        """
        Cancel the poll timer. In-flight fetches are left to resolve.
        """
        timer = self._timer
        self._timer = None
        if timer is None:
            return
        timer.cancel()
        try:
            await timer
        except asyncio.CancelledError:
            pass
        log.info("Polling stopped")

    async def _run_timer(self) -> None:
        try:
            while True:
                if self.is_cloud:
                    self._spawn_tick()
                await self._sleep(self._poll_interval)
        except asyncio.CancelledError:
            log.debug("Poll timer cancelled")
            raise

    def _spawn_tick(self) -> None:
        task = asyncio.create_task(self._tick())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _tick(self) -> None:
        try:
            await self.poll()
        except Exception:
            log.exception("Poll tick failed")

    async def poll(self) -> bool:
        """
        Run one fetch. Returns True if the remote answered with a vote list.
        """
        if not self.is_cloud:
            return False
        result = await self._fetch_and_apply()
        if result is None:
            log.debug("Poll tick discarded (remote read failed)")
            return False
        return True

    async def refresh(self) -> bool:
        """
        Out-of-band fetch with the syncing indicator raised.
        """
        if not self.is_cloud:
            return False
        self.state.syncing = True
        self._notify_state()
        try:
            return await self.poll()
        finally:
            self.state.syncing = False
            self._notify_state()

    async def show_view(self, view: TabView) -> None:
        self.state.view = view
        self._notify_state()
        if view is TabView.RESULTS and self.is_cloud:
            await self.refresh()

    # ------------------------------------------------------------
    # Fetch application
    # ------------------------------------------------------------

    def _invalidate_inflight(self) -> None:
        self._applied_generation = self._fetch_generation

    async def _fetch_and_apply(self) -> Optional[List[Vote]]:
        self._fetch_generation += 1
        generation = self._fetch_generation

        votes = await self._source.fetch_all()
        if votes is None:
            return None

        if generation <= self._applied_generation:
            log.debug(
                f"Discarding stale fetch result (generation {generation}, "
                f"applied {self._applied_generation})"
            )
            return votes

        self._applied_generation = generation
        self._replace_votes(votes)
        try:
            self._ledger.overwrite(votes)
        except Exception as e:
            log.error(f"Failed to cache remote votes locally: {e}")
        return votes

    def _replace_votes(self, votes: List[Vote]) -> None:
        self.state.votes = list(votes)
        self._notify_state()

    # ------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------

    async def submit(self, candidate_id: str, region: str) -> Notice:
        if not candidate_id:
            return Notice("Select a candidate first", "error")

        self.state.submitting = True
        self._notify_state()
        try:
            if self.is_cloud:
                return await self._submit_cloud(candidate_id, region)
            return self._submit_local(candidate_id, region)
        finally:
            self.state.submitting = False
            self._notify_state()

    def _submit_local(self, candidate_id: str, region: str) -> Notice:
        vote = Vote.create(candidate_id, region)
        self._replace_votes([*self.state.votes, vote])

        try:
            self._ledger.append(vote)
        except Exception as e:
            log.error(f"[{vote.id}] Local vote could not be saved: {e}")
            self._replace_votes([v for v in self.state.votes if v.id != vote.id])
            return Notice("Error registering vote", "error")

        log.info(f"[{vote.id}] Vote registered locally for {candidate_id} ({region})")
        return Notice("Vote registered (local)", "success")

    async def _submit_cloud(self, candidate_id: str, region: str) -> Notice:
        self._emit_notice(Notice("Sending to the cloud...", "info"))

        try:
            vote = Vote.create(candidate_id, region)
            await self._sink.append(vote)

            # Sheet rows take a moment to become readable after append
            await self._sleep(self._settle_delay)

            remote_votes = await self._fetch_and_apply()
        except Exception:
            log.exception("Cloud vote submission failed")
            return Notice("Error registering vote", "error")

        if remote_votes is not None:
            if not any(v.id == vote.id for v in remote_votes):
                log.info(f"[{vote.id}] Vote sent but not yet visible in sheet")
            else:
                log.info(f"[{vote.id}] Vote confirmed by sheet read")
            return Notice("Vote synced successfully", "success")

        log.warning(f"[{vote.id}] Confirmation read failed; showing vote optimistically")
        self._replace_votes([*self.state.votes, vote])

        # Endpoint cleared mid-submit: the ledger is the authority again
        if not self.is_cloud:
            try:
                self._ledger.append(vote)
            except Exception as e:
                log.error(f"[{vote.id}] Vote could not be kept in the local ledger: {e}")

        return Notice("Vote sent (view updating...)", "info")

    # ------------------------------------------------------------
    # Clear
    # ------------------------------------------------------------

    def clear(self) -> Notice:
        try:
            self._ledger.clear()
        except Exception as e:
            log.error(f"Failed to clear local votes: {e}")
            return Notice("Could not clear local data", "error")

        self._replace_votes([])
        if self.is_cloud:
            return Notice(
                "Local data cleared; cloud votes return on the next sync",
                "info",
            )
        return Notice("Local data cleared", "info")

    # ------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------

    def _notify_state(self) -> None:
        if self._on_change:
            try:
                self._on_change(self.state)
            except Exception:
                log.debug("State change notification failed", exc_info=True)

    def _emit_notice(self, notice: Notice) -> None:
        if self._on_notice:
            try:
                self._on_notice(notice)
            except Exception:
                log.debug("Notice callback failed", exc_info=True)
