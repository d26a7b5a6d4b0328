"""
Timer state machine.

Reconciles three sources of time into one status for a single task:
the backend's timer_started_at / timer_completed_at, a local pause
override, and the wall clock.

States
------
NOT_STARTED   no timer_started_at
RUNNING       started, not completed, no valid local pause
PAUSED        started, not completed, valid local pause override
COMPLETED     timer_completed_at set, or the countdown reached zero

Transitions
-----------
NOT_STARTED -> RUNNING              start    (backend: started_at = now)
RUNNING     -> RUNNING              tick     (recompute)
RUNNING     -> COMPLETED            tick     (backend: completed_at, once)
RUNNING     -> PAUSED               pause    (local only)
PAUSED      -> RUNNING              resume   (backend: started_at shifted back)
RUNNING | PAUSED | COMPLETED -> RUNNING      restart (backend: started_at = now)
COMPLETED   -> NOT_STARTED          acknowledge_completion with the clear policy

The tick task only exists while the timer is running and its view is
visible. Everything runs on one asyncio loop, so transitions never race
within a controller; two controllers on the same task do not coordinate.
"""
import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional, Set

from app import config
from app.utils.datetime_helper import utc_now

from . import clock
from .errors import NotFoundError, TimerError, TransientRemoteError, ValidationError
from .models.timer_state import (
    CompletionPolicy,
    LocalPauseOverride,
    TimerSnapshot,
    TimerStatus,
    TimerSubject,
)
from .mutations import TimerMutations
from .pause_store import PauseStore
from .visibility import VisibilityGate

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[TimerSnapshot], None]


class TimerController:
    """Drives one task's timer: derives status, runs the tick, issues mutations"""

    def __init__(
        self,
        subject: TimerSubject,
        mutations: TimerMutations,
        pause_store: PauseStore,
        *,
        gate: Optional[VisibilityGate] = None,
        now: Callable[[], datetime] = utc_now,
        tick_interval: float = config.TIMER_TICK_SECONDS,
        completion_policy: CompletionPolicy | str = config.TIMER_COMPLETION_POLICY,
        on_change: Optional[SnapshotListener] = None,
        on_complete: Optional[SnapshotListener] = None,
    ):
        self._subject = subject
        self._mutations = mutations
        self._pause_store = pause_store
        self._gate = gate or VisibilityGate()
        self._now = now
        self._tick_interval = tick_interval
        self._completion_policy = CompletionPolicy(completion_policy)
        self._on_change = on_change
        self._on_complete = on_complete

        self._override: Optional[LocalPauseOverride] = pause_store.load_pause(subject)
        self._status = TimerStatus.NOT_STARTED
        self._remaining = 0
        self._progress = 0.0
        self._pending = False
        # timer_version of the session whose completion was already requested
        self._completion_requested_for: Optional[str] = None

        self._ticker: Optional[asyncio.Task] = None
        self._background: Set[asyncio.Task] = set()
        self._closed = False

        self._unsubscribe = self._gate.subscribe(self._on_visibility_changed)
        self._refresh()
        self._maybe_complete()
        self._sync_ticker()

    # ── properties ────────────────────────────────────────────────────

    @property
    def subject(self) -> TimerSubject:
        return self._subject

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def pending(self) -> bool:
        """True while a start/resume/restart/clear call is in flight"""
        return self._pending

    @property
    def override(self) -> Optional[LocalPauseOverride]:
        return self._override

    @property
    def completion_policy(self) -> CompletionPolicy:
        return self._completion_policy

    @property
    def is_ticking(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            subject_id=self._subject.id,
            title=self._subject.title,
            status=self._status,
            remaining_seconds=self._remaining,
            progress=self._progress,
            duration_seconds=self._subject.timer_duration_seconds,
            is_urgent_after_timer=bool(self._subject.is_urgent_after_timer),
            pending=self._pending,
        )

    # ── user actions ──────────────────────────────────────────────────

    async def start(self) -> TimerSnapshot:
        """Start a countdown from NOT_STARTED"""
        duration = self._require_duration("start")
        if self._status != TimerStatus.NOT_STARTED or self._pending:
            logger.debug(f"Ignoring start for {self._subject.id} in state {self._status.value}")
            return self.snapshot()

        logger.info(f"Starting timer for task {self._subject.id} ({duration}s)")
        updated = await self._remote(
            "start",
            lambda: self._mutations.start_timer(self._subject.id, duration),
        )
        self._discard_override()
        self._apply_subject(updated)
        return self.snapshot()

    def pause(self) -> TimerSnapshot:
        """Freeze the countdown locally; the backend is not touched"""
        if self._status != TimerStatus.RUNNING or self._pending:
            logger.debug(f"Ignoring pause for {self._subject.id} in state {self._status.value}")
            return self.snapshot()

        self._require_duration("pause")

        now = self._now()
        remaining = clock.remaining_seconds(
            self._subject.timer_started_at, self._subject.timer_duration_seconds, now
        )
        if remaining == 0:
            # Ran out between ticks; let completion happen instead
            self._refresh()
            self._maybe_complete()
            self._notify()
            return self.snapshot()

        self._override = LocalPauseOverride(
            timer_started_at=self._subject.timer_started_at,
            timer_duration_seconds=self._subject.timer_duration_seconds,
            remaining_seconds_at_pause=remaining,
        )
        self._pause_store.save_pause(self._subject.id, self._override)
        logger.info(f"Paused timer for task {self._subject.id} locally with {remaining}s left")

        self._refresh()
        self._sync_ticker()
        self._notify()
        return self.snapshot()

    async def resume(self) -> TimerSnapshot:
        """
        Resume a local pause.

        Implemented as a restart whose start time is shifted back by the
        time that had already elapsed, so the countdown continues from the
        remaining seconds recorded at pause.
        """
        duration = self._require_duration("resume")
        if self._status != TimerStatus.PAUSED or self._override is None or self._pending:
            logger.debug(f"Ignoring resume for {self._subject.id} in state {self._status.value}")
            return self.snapshot()

        remaining = self._override.remaining_seconds_at_pause
        new_start = clock.resumed_start_time(duration, remaining, self._now())
        logger.info(f"Resuming timer for task {self._subject.id} with {remaining}s left")

        updated = await self._remote(
            "resume",
            lambda: self._mutations.start_timer(self._subject.id, duration, start_time=new_start),
        )
        self._discard_override()
        self._apply_subject(updated)
        return self.snapshot()

    async def restart(self) -> TimerSnapshot:
        """Start over from the full duration, from any state but NOT_STARTED"""
        duration = self._require_duration("restart")
        if self._status == TimerStatus.NOT_STARTED or self._pending:
            logger.debug(f"Ignoring restart for {self._subject.id} in state {self._status.value}")
            return self.snapshot()

        logger.info(f"Restarting timer for task {self._subject.id} ({duration}s)")
        updated = await self._remote(
            "restart",
            lambda: self._mutations.start_timer(self._subject.id, duration),
        )
        self._discard_override()
        self._apply_subject(updated)
        return self.snapshot()

    async def acknowledge_completion(self) -> TimerSnapshot:
        """
        Called once the completed state has been shown to the user.

        With the clear policy every timer field is nulled on the backend and
        the timer returns to NOT_STARTED; with the keep policy nothing changes.
        """
        if self._status != TimerStatus.COMPLETED or self._pending:
            return self.snapshot()
        if self._completion_policy != CompletionPolicy.CLEAR:
            return self.snapshot()

        # Make sure the completion itself landed before wiping the fields
        await self.drain()
        logger.info(f"Clearing completed timer for task {self._subject.id}")
        updated = await self._remote(
            "clear",
            lambda: self._mutations.clear_timer(self._subject.id),
        )
        self._discard_override()
        self._apply_subject(updated)
        return self.snapshot()

    # ── clock / backend inputs ────────────────────────────────────────

    async def tick(self) -> TimerSnapshot:
        """Recompute from the wall clock and complete the timer if it just ran out"""
        self._refresh()
        self._maybe_complete()
        self._sync_ticker()
        self._notify()
        return self.snapshot()

    def update_subject(self, subject: TimerSubject) -> TimerSnapshot:
        """Take a fresh copy of the task from the backend (refetch or realtime push)"""
        if subject.id != self._subject.id:
            raise ValueError(f"Controller for {self._subject.id} cannot track {subject.id}")
        self._apply_subject(subject)
        return self.snapshot()

    # ── lifecycle ─────────────────────────────────────────────────────

    async def close(self) -> None:
        """Stop ticking and detach from the visibility gate"""
        self._closed = True
        self._unsubscribe()
        ticker, self._ticker = self._ticker, None
        if ticker is not None and ticker is not asyncio.current_task():
            ticker.cancel()
            try:
                await ticker
            except asyncio.CancelledError:
                pass

    async def drain(self) -> None:
        """Wait for fire-and-forget completion calls to settle"""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # ── internals ─────────────────────────────────────────────────────

    def _require_duration(self, action: str) -> int:
        duration = self._subject.timer_duration_seconds
        if duration is None or duration <= 0:
            logger.error(f"Cannot {action} timer for task {self._subject.id}: no duration configured")
            raise ValidationError(f"Cannot {action} timer: timer_duration_seconds is not set")
        return duration

    async def _remote(
        self,
        action: str,
        call: Callable[[], Awaitable[TimerSubject]],
    ) -> TimerSubject:
        """Run a mutation with the pending flag set; local state is left alone on failure"""
        self._pending = True
        self._notify()
        try:
            return await call()
        except (NotFoundError, ValidationError, TransientRemoteError):
            logger.error(f"Failed to {action} timer for task {self._subject.id}", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"Failed to {action} timer for task {self._subject.id}: {e}", exc_info=True)
            raise TransientRemoteError(f"Failed to {action} timer: {e}") from e
        finally:
            self._pending = False
            self._notify()

    def _discard_override(self) -> None:
        self._override = None
        self._pause_store.clear_pause(self._subject.id)

    def _apply_subject(self, subject: TimerSubject) -> None:
        self._subject = subject
        if self._override is not None and not self._override.matches(subject):
            # Restarted, resumed or reconfigured elsewhere; the backend wins
            logger.info(f"Dropping local pause for task {subject.id}: timer changed remotely")
            self._discard_override()
        self._refresh()
        self._maybe_complete()
        self._sync_ticker()
        self._notify()

    def _refresh(self) -> None:
        subject = self._subject
        self._status = clock.timer_status(subject, self._override, self._now())

        if self._status == TimerStatus.NOT_STARTED:
            self._remaining, self._progress = 0, 0.0
        elif self._status == TimerStatus.PAUSED:
            remaining = self._override.remaining_seconds_at_pause
            self._remaining = remaining
            self._progress = clock.paused_progress_percent(subject.timer_duration_seconds, remaining)
        elif subject.timer_completed_at is not None:
            self._remaining, self._progress = 0, 100.0
        elif not subject.timer_duration_seconds or subject.timer_duration_seconds <= 0:
            logger.warning(f"Task {subject.id} has a started timer without a duration")
            self._remaining, self._progress = 0, 0.0
        else:
            now = self._now()
            self._remaining = clock.remaining_seconds(
                subject.timer_started_at, subject.timer_duration_seconds, now
            )
            self._progress = clock.progress_percent(
                subject.timer_started_at, subject.timer_duration_seconds, now
            )

    def _maybe_complete(self) -> None:
        """Fire completion exactly once per timer session, when it ran out naturally"""
        subject = self._subject
        if (
            self._status != TimerStatus.COMPLETED
            or subject.timer_completed_at is not None
            or subject.timer_started_at is None
        ):
            return
        version = subject.timer_version
        if version is None or version == self._completion_requested_for:
            return
        if self._spawn(self._complete(version)) is not None:
            self._completion_requested_for = version

    async def _complete(self, version: str) -> None:
        subject_id = self._subject.id
        try:
            updated = await self._mutations.complete_timer(subject_id)
        except TimerError as e:
            logger.error(f"Failed to complete timer for task {subject_id}: {e}")
            return
        except Exception as e:
            logger.error(f"Failed to complete timer for task {subject_id}: {e}", exc_info=True)
            return

        logger.info(f"Timer completed for task {subject_id}")
        if self._subject.timer_version == version:
            self._apply_subject(updated)
        if self._on_complete is not None:
            try:
                self._on_complete(self.snapshot())
            except Exception as e:
                logger.error(f"Timer completion listener failed: {e}", exc_info=True)

    def _should_tick(self) -> bool:
        return not self._closed and self._gate.visible and self._status == TimerStatus.RUNNING

    def _sync_ticker(self) -> None:
        if self._should_tick():
            if self._ticker is None or self._ticker.done():
                try:
                    loop = asyncio.get_running_loop()
                except RuntimeError:
                    return
                self._ticker = loop.create_task(self._run_ticker())
        elif self._ticker is not None:
            ticker, self._ticker = self._ticker, None
            if ticker is not asyncio.current_task():
                ticker.cancel()

    async def _run_ticker(self) -> None:
        try:
            while self._should_tick():
                await asyncio.sleep(self._tick_interval)
                if not self._should_tick():
                    break
                self._refresh()
                self._maybe_complete()
                self._notify()
        finally:
            if self._ticker is asyncio.current_task():
                self._ticker = None

    def _on_visibility_changed(self, visible: bool) -> None:
        if visible:
            # Catch up from the wall clock instead of resuming a stale countdown
            self._refresh()
            self._maybe_complete()
            self._notify()
        self._sync_ticker()

    def _spawn(self, coro) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            return None
        task = loop.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def _notify(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self.snapshot())
        except Exception as e:
            logger.error(f"Timer change listener failed: {e}", exc_info=True)
