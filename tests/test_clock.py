import pytest

from gridsnake.clock import TickClock
from gridsnake.config import ConfigurationError


def test_inactive_until_started():
    c = TickClock(100)
    assert not c.active
    assert not c.due(10_000)


def test_fires_once_per_period():
    c = TickClock(100)
    c.start(0)
    assert not c.due(99)
    assert c.due(100)
    assert not c.due(150)
    assert c.due(200)


def test_late_poll_does_not_catch_up():
    c = TickClock(100)
    c.start(0)
    assert c.due(1_000)
    # ten periods were missed but only one tick is granted
    assert not c.due(1_000)
    assert not c.due(1_099)
    assert c.due(1_100)


def test_slightly_late_poll_keeps_cadence():
    c = TickClock(100)
    c.start(0)
    assert c.due(130)
    assert c.due(200)


def test_stop_and_restart_gives_clean_period():
    c = TickClock(100)
    c.start(0)
    c.stop()
    assert not c.active
    assert not c.due(500)
    c.start(500)
    assert not c.due(599)
    assert c.due(600)


def test_set_period_reschedules_from_now():
    c = TickClock(100)
    c.start(0)
    c.set_period(200, 50)
    assert not c.due(100)
    assert not c.due(249)
    assert c.due(250)
    assert not c.due(449)
    assert c.due(450)


def test_set_period_when_stopped_stays_stopped():
    c = TickClock(100)
    c.set_period(50, 0)
    assert c.period_ms == 50
    assert not c.active


@pytest.mark.parametrize("bad", [0, -10])
def test_rejects_non_positive_period(bad):
    with pytest.raises(ConfigurationError):
        TickClock(bad)
    c = TickClock(100)
    with pytest.raises(ConfigurationError):
        c.set_period(bad, 0)
    assert c.period_ms == 100
