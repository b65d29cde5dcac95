from __future__ import annotations

import pytest
import responses

from simkltrakt.auth.device_flow import (
    fetch_simkl_pin_token,
    poll_device_token,
    request_device_code,
    run_setup,
)
from simkltrakt.utils.errors import AuthorizationFailed

DEVICE_CODE_URL = "https://api.trakt.tv/oauth/device/code"
DEVICE_TOKEN_URL = "https://api.trakt.tv/oauth/device/token"
DEVICE = {
    "device_code": "dev-code",
    "user_code": "ABCD1234",
    "verification_url": "https://trakt.tv/activate",
    "expires_in": 600,
    "interval": 5,
}
TOKENS = {"access_token": "a", "refresh_token": "r", "expires_in": 7776000}


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@responses.activate
def test_request_device_code() -> None:
    responses.add(responses.POST, DEVICE_CODE_URL, json=DEVICE, status=200)
    assert request_device_code("trakt-id") == DEVICE


@responses.activate
def test_poll_waits_while_pending() -> None:
    responses.add(responses.POST, DEVICE_TOKEN_URL, status=400)
    responses.add(responses.POST, DEVICE_TOKEN_URL, status=400)
    responses.add(responses.POST, DEVICE_TOKEN_URL, json=TOKENS, status=200)
    clock = FakeClock()

    tokens = poll_device_token(DEVICE, "trakt-id", "secret", sleep=clock.sleep, clock=clock)

    assert tokens == TOKENS
    assert clock.sleeps == [5, 5, 5]


@responses.activate
def test_poll_slows_down_on_429() -> None:
    responses.add(responses.POST, DEVICE_TOKEN_URL, status=429)
    responses.add(responses.POST, DEVICE_TOKEN_URL, json=TOKENS, status=200)
    clock = FakeClock()

    poll_device_token(DEVICE, "trakt-id", "secret", sleep=clock.sleep, clock=clock)

    assert clock.sleeps == [5, 10]


@pytest.mark.parametrize("status", [404, 409, 410, 418, 500])
@responses.activate
def test_poll_stops_on_terminal_status(status: int) -> None:
    responses.add(responses.POST, DEVICE_TOKEN_URL, status=status)
    clock = FakeClock()

    with pytest.raises(AuthorizationFailed):
        poll_device_token(DEVICE, "trakt-id", "secret", sleep=clock.sleep, clock=clock)
    assert len(responses.calls) == 1


@responses.activate
def test_poll_times_out() -> None:
    responses.add(responses.POST, DEVICE_TOKEN_URL, status=400)
    clock = FakeClock()
    device = {**DEVICE, "expires_in": 12, "interval": 5}

    with pytest.raises(AuthorizationFailed, match="timed out"):
        poll_device_token(device, "trakt-id", "secret", sleep=clock.sleep, clock=clock)
    assert len(responses.calls) == 3


@responses.activate
def test_simkl_pin_without_token_fails() -> None:
    responses.add(responses.GET, "https://api.simkl.com/oauth/pin/ABCD", json={"result": "KO"}, status=200)
    with pytest.raises(AuthorizationFailed):
        fetch_simkl_pin_token("ABCD", "simkl-id")


@responses.activate
def test_run_setup_persists_after_each_step(store) -> None:
    responses.add(
        responses.GET,
        "https://api.simkl.com/oauth/pin",
        json={"user_code": "SIMK", "verification_url": "https://simkl.com/pin"},
        status=200,
    )
    responses.add(responses.GET, "https://api.simkl.com/oauth/pin/SIMK", json={"access_token": "sa"}, status=200)
    responses.add(responses.POST, DEVICE_CODE_URL, json=DEVICE, status=200)
    responses.add(responses.POST, DEVICE_TOKEN_URL, json=TOKENS, status=200)
    answers = iter(["simkl-id", "trakt-id", "trakt-secret", ""])

    credentials = run_setup(store, prompt=lambda _q: next(answers), sleep=lambda _s: None)

    assert credentials.simkl_access_token == "sa"
    assert credentials.trakt_tokens == TOKENS
    assert len(store.saved) == 3
    assert store.saved[0]["simkl_access_token"] == ""
    assert store.saved[1]["simkl_access_token"] == "sa"
    assert store.saved[2]["trakt_tokens"] == TOKENS


def test_run_setup_rejects_empty_ids(store) -> None:
    answers = iter(["", "trakt-id", "trakt-secret"])
    with pytest.raises(AuthorizationFailed):
        run_setup(store, prompt=lambda _q: next(answers))
    assert store.saved == []
