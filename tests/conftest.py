import pytest

from spotgenre.ratelimit import reset_rate_backoff, set_request_delay


@pytest.fixture(autouse=True)
def no_api_delay(monkeypatch):
    """Disable the post-call delay and reset adaptive backoff between tests."""
    monkeypatch.setenv("SPOTIFY_API_DELAY", "0")
    reset_rate_backoff()
    yield
    reset_rate_backoff()
    set_request_delay(None)


def make_saved_track(track_id, name=None, artist_id="artist1", uri=True, added_at="2024-01-01T00:00:00Z"):
    """Build a saved-track item shaped like /me/tracks output."""
    track = {
        "id": track_id,
        "name": name or f"Song {track_id}",
        "artists": [{"id": artist_id, "name": f"Artist {artist_id}"}] if artist_id else [],
        "uri": f"spotify:track:{track_id}" if uri and track_id else None,
    }
    return {"added_at": added_at, "track": track}


@pytest.fixture
def saved_track():
    return make_saved_track
