import pytest

from falling_block_rl.game import GravityTimer


def test_rejects_non_positive_period():
    with pytest.raises(ValueError):
        GravityTimer(0)


def test_advance_emits_due_ticks():
    timer = GravityTimer(1000)
    assert timer.advance(5000) == []
    gen = timer.start()
    assert timer.advance(999) == []
    assert timer.advance(1) == [gen]
    assert timer.advance(2500) == [gen, gen]
    assert timer.advance(500) == [gen]


def test_stop_and_restart_invalidate_old_generation():
    timer = GravityTimer(100)
    first = timer.start()
    assert timer.is_current(first)
    timer.stop()
    assert not timer.running
    assert not timer.is_current(first)
    assert timer.advance(1000) == []
    second = timer.start()
    assert second != first
    assert timer.is_current(second)
    assert not timer.is_current(first)


def test_restart_resets_phase():
    timer = GravityTimer(100)
    timer.start()
    timer.advance(90)
    timer.stop()
    timer.start()
    assert timer.advance(20) == []


def test_hooks_follow_start_and_stop():
    calls = []

    class Recording(GravityTimer):
        def _arm(self):
            calls.append(("arm", self.generation))

        def _disarm(self):
            calls.append(("disarm", self.generation))

    timer = Recording(50)
    timer.stop()
    timer.start()
    timer.stop()
    assert calls == [("arm", 1), ("disarm", 2)]
