"""Tests for the timer alert monitor."""

from datetime import timedelta

from app.services.timer.alerts import TimerAlertMonitor
from app.services.timer.models.timer_state import TimerSubject

from helpers import T0


def running(task_id="task-1", started=T0, duration=60):
    return TimerSubject(id=task_id, timer_started_at=started, timer_duration_seconds=duration)


class TestTimerAlertMonitor:

    def test_alerts_once_when_a_watched_timer_expires(self):
        monitor = TimerAlertMonitor()
        timer = running()

        assert monitor.check([timer], T0 + timedelta(seconds=10)) == []
        assert monitor.check([timer], T0 + timedelta(seconds=61)) == [timer]
        assert monitor.check([timer], T0 + timedelta(seconds=62)) == []
        assert monitor.alerts == [timer]

    def test_timer_already_expired_at_first_sight_stays_quiet(self):
        monitor = TimerAlertMonitor()
        timer = running(started=T0 - timedelta(hours=1))

        assert monitor.check([timer], T0) == []
        assert monitor.check([timer], T0 + timedelta(seconds=1)) == []
        assert monitor.alerts == []

    def test_dismissed_alerts_do_not_return(self):
        monitor = TimerAlertMonitor()
        timer = running()
        monitor.check([timer], T0)
        monitor.check([timer], T0 + timedelta(seconds=60))

        monitor.dismiss_all()

        assert monitor.alerts == []
        assert monitor.check([timer], T0 + timedelta(seconds=90)) == []

    def test_restarted_timer_is_a_new_session(self):
        monitor = TimerAlertMonitor()
        first = running()
        monitor.check([first], T0)
        monitor.check([first], T0 + timedelta(seconds=60))
        monitor.dismiss_all()

        second = running(started=T0 + timedelta(seconds=100))
        assert monitor.check([second], T0 + timedelta(seconds=110)) == []
        assert monitor.check([second], T0 + timedelta(seconds=160)) == [second]

    def test_ignores_completed_and_unstarted_timers(self):
        monitor = TimerAlertMonitor()
        done = running().model_copy(update={"timer_completed_at": T0 + timedelta(seconds=60)})
        idle = TimerSubject(id="task-2", timer_duration_seconds=60)

        assert monitor.check([done, idle], T0) == []
        assert monitor.check([done, idle], T0 + timedelta(seconds=120)) == []

    def test_future_start_is_checked_later(self):
        monitor = TimerAlertMonitor()
        timer = running(started=T0 + timedelta(seconds=30))

        assert monitor.check([timer], T0) == []
        assert monitor.check([timer], T0 + timedelta(seconds=31)) == []
        assert monitor.check([timer], T0 + timedelta(seconds=95)) == [timer]

    def test_forgets_sessions_that_leave_the_active_list(self):
        monitor = TimerAlertMonitor()
        first = running()
        other = running(task_id="task-2")
        monitor.check([first, other], T0)

        # first was restarted before running out, other was cleared
        second = running(started=T0 + timedelta(seconds=30))
        monitor.check([second], T0 + timedelta(seconds=30))

        assert set(monitor._tracked) == {second.timer_version}
        assert monitor.check([second], T0 + timedelta(seconds=90)) == [second]
