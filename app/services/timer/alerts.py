"""Timer alert monitor - reports timers that run out while being watched"""
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Set

from app.utils.datetime_helper import utc_now

from . import clock
from .models.timer_state import TimerSubject

logger = logging.getLogger(__name__)


class TimerAlertMonitor:
    """
    Watches every active timer of a user and raises one alert per expiry.

    A timer only alerts if it was seen running first, so timers that
    expired before the monitor started (e.g. before a page load) stay
    quiet. Dismissed timers never alert again for the same session.
    """

    def __init__(self):
        # timer_version -> when it was first seen running
        self._tracked: Dict[str, datetime] = {}
        self._alerting: Dict[str, TimerSubject] = {}
        self._dismissed: Set[str] = set()

    @property
    def alerts(self) -> List[TimerSubject]:
        return list(self._alerting.values())

    def check(self, timers: Iterable[TimerSubject], now: datetime | None = None) -> List[TimerSubject]:
        """
        Examine the current active timers.

        Returns:
            Timers that expired since the previous check
        """
        now = now or utc_now()
        timers = list(timers)
        newly_expired: List[TimerSubject] = []

        # Sessions restarted, resumed or cleared before running out
        current = {subject.timer_version for subject in timers}
        for version in [v for v in self._tracked if v not in current]:
            del self._tracked[version]

        for subject in timers:
            version = subject.timer_version
            if version is None or subject.timer_completed_at is not None:
                continue
            if version in self._dismissed or version in self._alerting:
                continue
            if subject.timer_started_at > now:
                # Started in the future (clock skew); look again later
                continue

            remaining = clock.remaining_seconds(
                subject.timer_started_at, subject.timer_duration_seconds, now
            )
            if version not in self._tracked:
                if remaining > 0:
                    self._tracked[version] = now
                continue

            if remaining == 0:
                logger.info(f"Timer completed, showing alert for task {subject.id}")
                self._alerting[version] = subject
                newly_expired.append(subject)

        return newly_expired

    def dismiss_all(self) -> None:
        """Acknowledge every current alert"""
        for version in self._alerting:
            self._dismissed.add(version)
            self._tracked.pop(version, None)
        self._alerting.clear()
