"""Tests for the per-key debouncer."""

import pytest

from versionlens.events import Debouncer


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def debouncer(clock):
    return Debouncer(timeout_ms=500, clock=clock)


class TestDebouncer:
    def test_default_timeout(self):
        assert Debouncer().timeout == 0.5

    def test_first_call_proceeds(self, debouncer):
        assert debouncer.should_proceed("package.json")

    def test_repeat_within_window_rejected(self, debouncer, clock):
        assert debouncer.should_proceed("package.json")
        clock.now += 0.1
        assert not debouncer.should_proceed("package.json")

    def test_window_elapsed(self, debouncer, clock):
        assert debouncer.should_proceed("package.json")
        clock.now += 0.5
        assert debouncer.should_proceed("package.json")

    def test_rejection_does_not_extend_window(self, debouncer, clock):
        assert debouncer.should_proceed("a")
        clock.now += 0.4
        assert not debouncer.should_proceed("a")
        clock.now += 0.1
        assert debouncer.should_proceed("a")

    def test_keys_are_independent(self, debouncer):
        assert debouncer.should_proceed("a/package.json")
        assert debouncer.should_proceed("b/package.json")

    def test_reset(self, debouncer):
        assert debouncer.should_proceed("a")
        debouncer.reset("a")
        assert debouncer.should_proceed("a")
        debouncer.reset("never-seen")

    def test_clear(self, debouncer):
        debouncer.should_proceed("a")
        debouncer.should_proceed("b")
        debouncer.clear()
        assert debouncer.should_proceed("a")
        assert debouncer.should_proceed("b")

    def test_remaining(self, debouncer, clock):
        assert debouncer.remaining("a") is None
        debouncer.should_proceed("a")
        clock.now += 0.2
        assert debouncer.remaining("a") == pytest.approx(0.3)
        assert debouncer.is_debounced("a")
        clock.now += 0.3
        assert debouncer.remaining("a") is None
        assert not debouncer.is_debounced("a")
