import json

import pytest
from unittest.mock import MagicMock

from osuapipy import OsuApi


class FakeResponse:
    """Just enough of requests.Response for the client."""

    def __init__(self, status_code=200, payload=None, text=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self):
        return json.loads(self.text)


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def sleeps(monkeypatch):
    """Patch out the backoff sleep and record the requested delays."""
    recorded = []
    monkeypatch.setattr("osuapipy.client.time.sleep", recorded.append)
    return recorded


@pytest.fixture
def api(session, sleeps):
    return OsuApi("secret-key", server="https://osu.example/api", session=session)


@pytest.fixture
def raw_beatmap():
    return {
        "beatmapset_id": "1",
        "beatmap_id": "75",
        "approved": "1",
        "total_length": "142",
        "hit_length": "109",
        "version": "Normal",
        "file_md5": "a5b99395a42bd55bc5eb1d2411cbdf8b",
        "diff_size": "4",
        "diff_overall": "6",
        "diff_approach": "6",
        "diff_drain": "6",
        "mode": "0",
        "count_normal": "160",
        "count_slider": "30",
        "count_spinner": "4",
        "submit_date": "2007-10-06 17:46:31",
        "approved_date": "2007-10-06 17:46:31",
        "last_update": "2007-10-06 17:46:31",
        "artist": "Kenji Ninuma",
        "artist_unicode": None,
        "title": "DISCO PRINCE",
        "title_unicode": None,
        "creator": "peppy",
        "creator_id": "2",
        "bpm": "119.999",
        "source": "",
        "tags": "katamari",
        "genre_id": "2",
        "language_id": "3",
        "favourite_count": "1060",
        "rating": "9.04",
        "storyboard": "0",
        "video": "0",
        "download_unavailable": "0",
        "audio_unavailable": "0",
        "playcount": "593345",
        "passcount": "75580",
        "packs": "S1,T44",
        "max_combo": "314",
        "diff_aim": "1.1",
        "diff_speed": "1.0",
        "difficultyrating": "2.3",
    }
