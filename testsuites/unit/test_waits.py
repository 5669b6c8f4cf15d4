import time

import pytest

from page_loader import ElementNotFoundError, WaitConfig, WaitTimeoutError, get_wait_config, wait_until


def _true_after(seconds):
    start = time.monotonic()
    return lambda: time.monotonic() - start >= seconds


def test_wait_times_out_before_condition_becomes_true():
    predicate = _true_after(0.150)
    started = time.monotonic()

    with pytest.raises(WaitTimeoutError) as exc_info:
        wait_until(predicate, timeout=0.050, poll_interval=0.010)

    elapsed = time.monotonic() - started
    assert 0.050 <= elapsed < 0.150
    assert isinstance(exc_info.value, TimeoutError)


def test_wait_succeeds_when_deadline_allows():
    predicate = _true_after(0.150)
    assert wait_until(predicate, timeout=0.300, poll_interval=0.010) is True


def test_wait_returns_first_truthy_value():
    values = iter([None, 0, "", "ready"])
    assert wait_until(lambda: next(values), timeout=1.0, poll_interval=0.001) == "ready"


def test_zero_timeout_evaluates_once():
    calls = []

    def predicate():
        calls.append(1)
        return False

    with pytest.raises(WaitTimeoutError):
        wait_until(predicate, timeout=0, poll_interval=0.01)
    assert len(calls) == 1


def test_timeout_reports_last_failure():
    def predicate():
        raise ElementNotFoundError("No element for id=late")

    with pytest.raises(WaitTimeoutError, match="spinner gone") as exc_info:
        wait_until(predicate, timeout=0.03, poll_interval=0.01, description="spinner gone")

    assert "No element for id=late" in exc_info.value.last_error


def test_unexpected_errors_propagate_immediately():
    calls = []

    def predicate():
        calls.append(1)
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        wait_until(predicate, timeout=1.0, poll_interval=0.01)
    assert len(calls) == 1


def test_config_supplies_defaults():
    with pytest.raises(WaitTimeoutError):
        wait_until(lambda: False, config=WaitConfig(timeout=0.02, poll_interval=0.005))


@pytest.mark.parametrize("timeout, poll_interval", [(-1, 0.1), (1, 0), (1, -0.5)])
def test_invalid_bounds_are_rejected(timeout, poll_interval):
    with pytest.raises(ValueError):
        wait_until(lambda: True, timeout=timeout, poll_interval=poll_interval)


def test_wait_scenarios_can_be_overridden_from_environment(monkeypatch):
    assert get_wait_config("element") == WaitConfig(timeout=5.0, poll_interval=0.25)

    monkeypatch.setenv("WAITS_ELEMENT_TIMEOUT", "1.5")
    assert get_wait_config("element").timeout == 1.5


def test_unknown_scenario_falls_back_to_default():
    assert get_wait_config("no-such-scenario") == get_wait_config("default")
