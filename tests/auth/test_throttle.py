import pytest  # type: ignore[import-not-found]

from blogdesk.auth.throttle import LoginThrottle


class Tick:
    def __init__(self) -> None:
        self.t = 1000.0

    def __call__(self) -> float:
        return self.t


def test_blocks_after_max_attempts_within_window() -> None:
    tick = Tick()
    th = LoginThrottle(max_attempts=5, window_s=900, clock=tick)
    for _ in range(5):
        assert th.hit("10.0.0.1") == (True, 0.0)
    allowed, retry_after = th.hit("10.0.0.1")
    assert allowed is False
    assert retry_after == pytest.approx(900)


def test_window_resets_after_expiry() -> None:
    tick = Tick()
    th = LoginThrottle(max_attempts=1, window_s=60, clock=tick)
    assert th.hit("k")[0]
    assert not th.hit("k")[0]
    tick.t += 60
    assert th.hit("k")[0]


def test_keys_are_independent() -> None:
    th = LoginThrottle(max_attempts=1, window_s=60, clock=Tick())
    assert th.hit("a")[0]
    assert th.hit("b")[0]
    assert not th.hit("a")[0]
    assert not th.hit("b")[0]


def test_expired_windows_are_pruned() -> None:
    tick = Tick()
    th = LoginThrottle(max_attempts=5, window_s=60, clock=tick)
    for i in range(100):
        th.hit(f"10.0.0.{i}")
    assert len(th) == 100

    tick.t += 60
    th.hit("10.0.1.1")
    assert len(th) == 1


def test_rejects_nonsense_limits() -> None:
    with pytest.raises(ValueError):
        LoginThrottle(max_attempts=0, window_s=60)
    with pytest.raises(ValueError):
        LoginThrottle(max_attempts=1, window_s=0)
