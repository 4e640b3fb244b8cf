import pytest

from treetrace import PlaybackConfig, build_trace
from treetrace.playback import ManualScheduler, PlaybackController, PlaybackState
from treetrace.playback.scheduler import ManualTimer

DELAY = 100


@pytest.fixture
def sched():
    return ManualScheduler()


@pytest.fixture
def five():
    return build_trace([50, 30, 70, 20, 40], "avl")


def _controller(trace, sched, **kwargs):
    kwargs.setdefault("delay_ms", DELAY)
    return PlaybackController(trace, scheduler=sched, **kwargs)


def test_load_starts_playing_at_zero(five, sched):
    ctrl = _controller(five, sched)
    assert ctrl.state is PlaybackState.PLAYING
    assert ctrl.current_index == 0
    assert ctrl.current_snapshot is five[0]
    assert sched.pending == 1


def test_timer_advances_one_step_per_delay(five, sched):
    ctrl = _controller(five, sched)
    sched.advance(DELAY - 1)
    assert ctrl.current_index == 0
    sched.advance(1)
    assert ctrl.current_index == 1
    sched.advance(DELAY * 2)
    assert ctrl.current_index == 3
    assert ctrl.current_snapshot is five[3]


def test_pause_freezes_index_and_resume_continues(five, sched):
    ctrl = _controller(five, sched)
    sched.advance(DELAY * 2)
    assert ctrl.current_index == 2

    assert ctrl.pause()
    assert ctrl.state is PlaybackState.PAUSED
    for _ in range(10):
        sched.advance(DELAY)
    assert ctrl.current_index == 2
    assert sched.pending == 0

    assert ctrl.resume()
    assert ctrl.state is PlaybackState.PLAYING
    sched.advance(DELAY)
    assert ctrl.current_index == 3


def test_pause_and_resume_are_noops_in_wrong_state(five, sched):
    ctrl = _controller(five, sched)
    assert not ctrl.resume()
    ctrl.pause()
    assert not ctrl.pause()
    assert ctrl.toggle()
    assert ctrl.is_playing
    assert ctrl.toggle()
    assert ctrl.state is PlaybackState.PAUSED


def test_completed_is_terminal(five, sched):
    ctrl = _controller(five, sched)
    sched.advance(DELAY * 50)
    assert ctrl.current_index == 4
    assert ctrl.state is PlaybackState.COMPLETED
    assert sched.pending == 0
    assert not ctrl.step()
    assert ctrl.current_index == 4
    assert not ctrl.resume()


def test_restart_goes_back_to_zero_and_plays(five, sched):
    ctrl = _controller(five, sched)
    sched.advance(DELAY * 50)
    ctrl.restart()
    assert ctrl.current_index == 0
    assert ctrl.state is PlaybackState.PLAYING
    sched.advance(DELAY)
    assert ctrl.current_index == 1

    ctrl.pause()
    ctrl.restart()
    assert ctrl.current_index == 0
    assert ctrl.is_playing


def test_manual_step_while_paused(five, sched):
    ctrl = _controller(five, sched, config=PlaybackConfig(autoplay=False))
    assert ctrl.state is PlaybackState.PAUSED
    assert sched.pending == 0
    assert ctrl.step()
    assert ctrl.current_index == 1
    assert ctrl.state is PlaybackState.PAUSED


def test_empty_trace_is_idle(sched):
    ctrl = _controller(build_trace([], "avl"), sched)
    assert ctrl.state is PlaybackState.IDLE
    assert ctrl.current_snapshot is None
    assert ctrl.trace is None
    assert not ctrl.step()
    assert not ctrl.resume()
    ctrl.restart()
    assert ctrl.state is PlaybackState.IDLE
    assert sched.pending == 0


def test_no_trace_is_idle(sched):
    ctrl = PlaybackController(scheduler=sched)
    assert ctrl.state is PlaybackState.IDLE
    assert ctrl.last_index == -1


def test_single_snapshot_completes_immediately(sched):
    ctrl = _controller(build_trace([1], "red_black"), sched)
    assert ctrl.state is PlaybackState.COMPLETED
    assert ctrl.current_index == 0
    assert sched.pending == 0


def test_load_replaces_trace_and_cancels_old_timer(five, sched):
    ctrl = _controller(five, sched)
    sched.advance(DELAY + DELAY // 2)
    assert ctrl.current_index == 1

    other = build_trace([1, 2, 3], "red_black")
    ctrl.load(other)
    assert ctrl.trace is other
    assert ctrl.current_index == 0
    assert ctrl.state is PlaybackState.PLAYING
    assert sched.pending == 1

    sched.advance(DELAY // 2)
    assert ctrl.current_index == 0
    sched.advance(DELAY // 2)
    assert ctrl.current_index == 1


class _LeakyScheduler(ManualScheduler):
    """A scheduler whose cancel() does nothing, so stale ticks still fire."""

    def call_later(self, delay_ms, callback):
        super().call_later(delay_ms, callback)
        return ManualTimer(due=self.now + delay_ms, callback=callback)


def test_stale_ticks_are_ignored_even_if_not_cancelled(five):
    sched = _LeakyScheduler()
    ctrl = _controller(five, sched)
    sched.advance(DELAY // 2)
    ctrl.load(build_trace([1, 2, 3], "avl"))
    # old tick due at 100 fires, new one is due at 150
    sched.advance(DELAY // 2)
    assert ctrl.current_index == 0
    sched.advance(DELAY // 2)
    assert ctrl.current_index == 1

    ctrl.pause()
    sched.advance(DELAY * 10)
    assert ctrl.current_index == 1


def test_set_delay_keeps_index_and_repaces(five, sched):
    ctrl = _controller(five, sched)
    sched.advance(DELAY)
    assert ctrl.current_index == 1

    ctrl.set_delay(300)
    assert ctrl.delay_ms == 300
    assert ctrl.current_index == 1
    sched.advance(DELAY * 2)
    assert ctrl.current_index == 1
    sched.advance(DELAY)
    assert ctrl.current_index == 2

    ctrl.pause()
    ctrl.set_delay(50)
    assert sched.pending == 0
    ctrl.resume()
    sched.advance(50)
    assert ctrl.current_index == 3


@pytest.mark.parametrize("bad", [0, -10, 1.5, True, "100"])
def test_set_delay_rejects_bad_values(five, sched, bad):
    ctrl = _controller(five, sched)
    with pytest.raises(ValueError):
        ctrl.set_delay(bad)
    assert ctrl.delay_ms == DELAY


def test_speed_preset_config(five, sched):
    ctrl = PlaybackController(five, scheduler=sched, config=PlaybackConfig.preset("fast"))
    assert ctrl.delay_ms == 500
    with pytest.raises(ValueError, match="unknown speed preset"):
        PlaybackConfig.preset("ludicrous")


def test_listeners_see_every_index_change(five, sched):
    ctrl = _controller(five, sched)
    seen = []
    ctrl.subscribe(lambda c: seen.append((c.current_index, c.state)))
    sched.advance(DELAY * 10)
    assert [i for i, _ in seen] == [1, 2, 3, 4]
    assert seen[-1][1] is PlaybackState.COMPLETED

    ctrl.restart()
    assert seen[-1] == (0, PlaybackState.PLAYING)


def test_unsubscribe_and_stop(five, sched):
    ctrl = _controller(five, sched)
    seen = []

    def listener(c):
        seen.append(c.current_index)

    ctrl.subscribe(listener)
    ctrl.unsubscribe(listener)
    sched.advance(DELAY)
    assert seen == []

    ctrl.stop()
    assert ctrl.state is PlaybackState.IDLE
    assert sched.pending == 0
    sched.advance(DELAY * 5)
    assert ctrl.current_index == 0
