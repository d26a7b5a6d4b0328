"""Tests for the compact and full timer view models."""

import pytest

from app.services.timer.models.timer_state import TimerSnapshot, TimerStatus
from app.services.timer.presentation import (
    ControlAction,
    Glyph,
    Tone,
    progress_tone,
    render_compact,
    render_full,
)


def snapshot(status, **fields):
    fields.setdefault("duration_seconds", 1800)
    return TimerSnapshot(subject_id="task-1", status=status, **fields)


class TestCompactView:

    def test_not_started_offers_start(self):
        view = render_compact(snapshot(TimerStatus.NOT_STARTED))
        assert view.glyph == Glyph.PLAY
        assert view.label == "30m"
        assert view.action == ControlAction.START
        assert not view.animated

    def test_running_is_animated_countdown(self):
        view = render_compact(snapshot(TimerStatus.RUNNING, remaining_seconds=300, progress=83.3))
        assert view.glyph == Glyph.CLOCK
        assert view.label == "05:00"
        assert view.animated
        assert view.tone == Tone.URGENT
        assert view.action is None

    def test_paused(self):
        view = render_compact(snapshot(TimerStatus.PAUSED, remaining_seconds=1200, progress=33.3))
        assert view.glyph == Glyph.PAUSE
        assert view.label == "20:00"
        assert view.tone == Tone.PAUSED

    def test_completed(self):
        view = render_compact(snapshot(TimerStatus.COMPLETED, progress=100))
        assert view.glyph == Glyph.CHECK
        assert view.label == "Done"
        assert view.tone == Tone.DONE

    def test_completed_urgent_task_shows_alert(self):
        view = render_compact(snapshot(TimerStatus.COMPLETED, is_urgent_after_timer=True))
        assert view.glyph == Glyph.ALERT
        assert view.tone == Tone.URGENT


class TestFullView:

    def test_not_started(self):
        view = render_full(snapshot(TimerStatus.NOT_STARTED))
        assert view.countdown == "00:00"
        assert view.progress == 0
        assert view.primary.action == ControlAction.START
        assert view.primary.enabled
        assert not view.restart.enabled

    def test_not_started_without_duration_cannot_start(self):
        view = render_full(snapshot(TimerStatus.NOT_STARTED, duration_seconds=None))
        assert not view.primary.enabled

    def test_running(self):
        view = render_full(snapshot(TimerStatus.RUNNING, remaining_seconds=300, progress=83.33333))
        assert view.countdown == "05:00"
        assert view.progress == 83.33
        assert view.primary.action == ControlAction.PAUSE
        assert view.primary.enabled
        assert view.restart.enabled
        assert view.badge is None

    def test_paused(self):
        view = render_full(snapshot(TimerStatus.PAUSED, remaining_seconds=1200, progress=33.3))
        assert view.primary.action == ControlAction.RESUME
        assert view.badge == "Paused"
        assert view.restart.enabled

    def test_completed(self):
        view = render_full(snapshot(TimerStatus.COMPLETED, progress=100))
        assert view.countdown == "00:00"
        assert view.progress == 100
        assert view.badge == "Completed"
        assert view.primary.action == ControlAction.START
        assert not view.primary.enabled
        assert view.restart.enabled

    def test_controls_disabled_while_pending(self):
        view = render_full(snapshot(TimerStatus.RUNNING, remaining_seconds=10, pending=True))
        assert not view.primary.enabled
        assert not view.restart.enabled


@pytest.mark.parametrize("progress,tone", [
    (0, Tone.CALM),
    (49.9, Tone.CALM),
    (50, Tone.WARNING),
    (79.9, Tone.WARNING),
    (80, Tone.URGENT),
    (100, Tone.URGENT),
])
def test_progress_tone(progress, tone):
    assert progress_tone(progress) == tone
