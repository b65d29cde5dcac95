from __future__ import annotations

import pytest
import responses

from simkltrakt.sync.normalize import normalize
from simkltrakt.sync.submitter import submit
from simkltrakt.trakt.trakt_client import TraktClient
from simkltrakt.utils.errors import SubmitFailed

HISTORY_URL = "https://api.trakt.tv/sync/history"

PAYLOAD = {
    "movies": [{"watched_at": "2024-01-01T00:00:00Z", "ids": {"imdb": "tt1", "tmdb": 1}}],
    "shows": [],
}


def test_nothing_to_sync_makes_no_call(credentials, store) -> None:
    snapshot = {
        "movies": [{"movie": {"ids": {"imdb": "tt1"}}}],
        "shows": [{"show": {"ids": {"imdb": "tt2"}}, "seasons": [{"number": 1, "episodes": [{"number": 1}]}]}],
        "anime": [{"last_watched_at": None, "show": {"ids": {}}}],
    }
    with responses.RequestsMock() as rsps:
        outcome = submit(normalize(snapshot), TraktClient(credentials, store))
        assert len(rsps.calls) == 0
    assert outcome.status == "noop"


@responses.activate
def test_success_reads_added_counts(credentials, store) -> None:
    responses.add(responses.POST, HISTORY_URL, json={"added": {"movies": 1, "episodes": 12}}, status=201)
    outcome = submit(PAYLOAD, TraktClient(credentials, store))
    assert (outcome.status, outcome.movies_added, outcome.episodes_added) == ("success", 1, 12)


@responses.activate
def test_absent_counts_default_to_zero(credentials, store) -> None:
    responses.add(responses.POST, HISTORY_URL, json={"not_found": {}}, status=201)
    outcome = submit(PAYLOAD, TraktClient(credentials, store))
    assert (outcome.movies_added, outcome.episodes_added) == (0, 0)


@responses.activate
def test_failure_raises_with_status(credentials, store) -> None:
    responses.add(responses.POST, HISTORY_URL, status=422)
    with pytest.raises(SubmitFailed) as excinfo:
        submit(PAYLOAD, TraktClient(credentials, store))
    assert excinfo.value.status == 422
    assert len(responses.calls) == 1
