import logging
from datetime import datetime, timezone

import pytest
import requests

from osuapipy import OsuApi, Mods, create_client
from osuapipy.client import Verbosity
from osuapipy.exceptions import (
    ApiResponseError,
    ConfigurationError,
    InvalidResponseError,
    NetworkError,
    NotFoundError,
    OsuApiError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
)


def requested_url(session, index=-1):
    return session.get.call_args_list[index].args[0]


def test_url_contains_key_endpoint_and_params(api, session, make_response):
    session.get.return_value = make_response(200, [{"user_id": "2"}])
    api.fetch("get_user", {"u": "peppy", "type": "string", "event_days": None})
    assert requested_url(session) == "https://osu.example/api/get_user?k=secret-key&u=peppy&type=string"


def test_string_params_are_passed_through(api, session, make_response):
    session.get.return_value = make_response(200, {"match": {"match_id": "1"}, "games": []})
    api.fetch("get_match", "mp=1")
    assert requested_url(session) == "https://osu.example/api/get_match?k=secret-key&mp=1"


def test_fetch_normalizes(api, session, make_response):
    session.get.return_value = make_response(
        200, [{"perfect": "1", "score": "923357", "date": "2020-01-01 10:00:00"}]
    )
    result = api.fetch("get_scores", {"b": 1})
    assert result == [
        {"perfect": True, "score": 923357, "date": datetime(2020, 1, 1, 10, tzinfo=timezone.utc)}
    ]


def test_fetch_keeps_impossible_dates_as_text(api, session, make_response):
    session.get.return_value = make_response(200, [{"beatmap_id": "75", "approved_date": "0000-00-00 00:00:00"}])
    assert api.fetch("get_beatmaps", {"b": 75}) == [{"beatmap_id": 75, "approved_date": "0000-00-00 00:00:00"}]


def test_default_session_headers():
    client = OsuApi("k")
    assert client.session.headers["Accept"] == "application/json"
    assert client.session.headers["Content-Type"] == "application/json"
    assert "gzip" in client.session.headers["Accept-Encoding"]
    client.close()


def test_rate_limit_retries_exactly_five_times(api, session, sleeps, make_response):
    session.get.return_value = make_response(429, text="", reason="Too Many Requests")
    with pytest.raises(RateLimitError) as info:
        api.fetch("get_beatmaps", {"b": 75})
    assert session.get.call_count == 5
    assert len(sleeps) == 4
    assert all(1.0 <= delay <= 5.0 for delay in sleeps)
    assert all(round(delay * 10) == pytest.approx(delay * 10) for delay in sleeps)
    err = info.value
    assert err.attempts == 5
    assert err.code == 429


def test_rate_limit_then_success(api, session, sleeps, make_response):
    session.get.side_effect = [
        make_response(429, text=""),
        make_response(429, text=""),
        make_response(200, [{"beatmap_id": "75"}]),
    ]
    assert api.fetch("get_beatmaps", {"b": 75}) == [{"beatmap_id": 75}]
    assert session.get.call_count == 3
    assert len(sleeps) == 2


def test_network_errors_are_retried(api, session, sleeps, make_response):
    session.get.side_effect = [
        requests.ConnectionError("refused"),
        requests.Timeout("slow"),
        make_response(200, [{"user_id": "2"}]),
    ]
    assert api.fetch("get_user", {"u": 2}) == [{"user_id": 2}]
    assert session.get.call_count == 3
    assert len(sleeps) == 2


def test_network_failure_after_all_attempts(api, session, sleeps):
    session.get.side_effect = requests.ConnectionError("dns failure")
    with pytest.raises(NetworkError) as info:
        api.fetch("get_user", {"u": 2})
    assert session.get.call_count == 5
    assert len(sleeps) == 4
    assert info.value.to_dict() == {
        "message": info.value.message,
        "server": "https://osu.example/api",
        "endpoint": "get_user",
        "parameters": {"u": 2},
    }


def test_max_attempts_is_configurable(session, sleeps):
    client = OsuApi("k", session=session, max_attempts=2)
    session.get.side_effect = requests.Timeout("slow")
    with pytest.raises(NetworkError):
        client.fetch("get_user", {"u": 2})
    assert session.get.call_count == 2


@pytest.mark.parametrize(
    "status, error",
    [(401, UnauthorizedError), (500, ServerError), (503, ServerError), (418, OsuApiError)],
)
def test_other_statuses_fail_without_retry(api, session, sleeps, make_response, status, error):
    session.get.return_value = make_response(status, text="nope", reason="Error")
    with pytest.raises(error) as info:
        api.fetch("get_user", {"u": 2})
    assert session.get.call_count == 1
    assert sleeps == []
    assert info.value.code == status
    assert info.value.endpoint == "get_user"


def test_not_found_status(api, session, make_response):
    session.get.return_value = make_response(404, text="", reason="Not Found")
    with pytest.raises(NotFoundError):
        api.fetch("get_user", {"u": 2})


def test_empty_array_is_domain_empty_failure(api, session, make_response):
    session.get.return_value = make_response(200, [])
    with pytest.raises(NotFoundError) as info:
        api.fetch("get_beatmaps", {"b": 999999999})
    assert not isinstance(info.value, NetworkError)
    assert info.value.parameters == {"b": 999999999}
    assert session.get.call_count == 1


def test_error_field_in_body(api, session, make_response):
    session.get.return_value = make_response(200, {"error": "Please provide a valid API key."})
    with pytest.raises(ApiResponseError) as info:
        api.fetch("get_user", {"u": 2})
    assert "valid API key" in info.value.message


def test_unavailable_match(api, session, make_response):
    session.get.return_value = make_response(200, {"match": 0, "games": []})
    with pytest.raises(NotFoundError):
        api.fetch("get_match", {"mp": 1})


def test_malformed_json(api, session, make_response):
    session.get.return_value = make_response(200, text="<html>oops</html>")
    with pytest.raises(InvalidResponseError):
        api.fetch("get_user", {"u": 2})
    assert session.get.call_count == 1


def test_key_never_in_error(api, session, make_response):
    session.get.return_value = make_response(401, text="", reason="Unauthorized")
    with pytest.raises(UnauthorizedError) as info:
        api.fetch("get_user", {"u": 2})
    assert "secret-key" not in str(info.value)
    assert "secret-key" not in repr(info.value.to_dict())


def test_verbosity_all_logs_attempts(session, sleeps, make_response, caplog):
    client = OsuApi("k", session=session, verbosity="all")
    session.get.side_effect = [make_response(429, text=""), make_response(200, [{"a": "1"}])]
    with caplog.at_level(logging.INFO, logger="osuapipy.client"):
        client.fetch("get_user", {"u": 2})
    messages = [r.getMessage() for r in caplog.records]
    assert any("retrying" in m for m in messages)
    assert any("200" in m for m in messages)


def test_verbosity_none_is_silent(api, session, make_response, caplog):
    session.get.return_value = make_response(500, text="", reason="Server Error")
    with caplog.at_level(logging.DEBUG, logger="osuapipy.client"):
        with pytest.raises(ServerError):
            api.fetch("get_user", {"u": 2})
    assert caplog.records == []


def test_verbosity_errors_logs_only_failures(session, make_response, caplog):
    client = OsuApi("k", session=session, verbosity=Verbosity.ERRORS)
    session.get.return_value = make_response(200, [{"a": "1"}])
    with caplog.at_level(logging.INFO, logger="osuapipy.client"):
        client.fetch("get_user", {"u": 2})
        assert caplog.records == []
        session.get.return_value = make_response(401, text="", reason="Unauthorized")
        with pytest.raises(UnauthorizedError):
            client.fetch("get_user", {"u": 2})
    assert [r.levelno for r in caplog.records] == [logging.WARNING]


def test_unknown_verbosity():
    with pytest.raises(ValueError):
        OsuApi("k", verbosity="loud")


def test_configuration_validation():
    with pytest.raises(ConfigurationError):
        OsuApi("")
    with pytest.raises(ValueError):
        OsuApi("k", server="ftp://nope")


def test_create_client_reads_environment(monkeypatch):
    monkeypatch.setenv("OSU_API_KEY", "from-env")
    assert create_client().api_key == "from-env"
    monkeypatch.delenv("OSU_API_KEY")
    with pytest.raises(ConfigurationError):
        create_client()


# endpoint helpers

def test_get_beatmap_adjusts_and_strips_unsupported(api, session, make_response, raw_beatmap):
    session.get.return_value = make_response(200, [raw_beatmap])
    beatmap = api.get_beatmap(75, mods={Mods.HIDDEN, Mods.NIGHTCORE})
    assert requested_url(session).endswith("get_beatmaps?k=secret-key&b=75&mods=64")
    assert beatmap.mods == {Mods.HIDDEN, Mods.NIGHTCORE}
    assert beatmap.bpm == pytest.approx(119.999 * 1.5)
    assert beatmap.total_length == pytest.approx(142 / 1.5)
    assert beatmap.difficultyrating == 2.3


def test_get_beatmap_without_mods(api, session, make_response, raw_beatmap):
    session.get.return_value = make_response(200, [raw_beatmap])
    beatmap = api.get_beatmap(75)
    assert requested_url(session).endswith("get_beatmaps?k=secret-key&b=75")
    assert beatmap.diff_approach == 6
    assert beatmap.mods == frozenset()


def test_get_beatmap_with_zero_date(api, session, make_response, raw_beatmap):
    session.get.return_value = make_response(200, [dict(raw_beatmap, approved_date="0000-00-00 00:00:00")])
    beatmap = api.get_beatmap(75)
    assert beatmap.approved_date is None
    assert beatmap.submit_date == datetime(2007, 10, 6, 17, 46, 31, tzinfo=timezone.utc)


def test_explicit_nomod_wire_encoding(session, sleeps, make_response, raw_beatmap):
    session.get.return_value = make_response(200, [raw_beatmap])
    OsuApi("k", session=session).get_beatmap(75, mods={Mods.NONE})
    assert requested_url(session).endswith("&b=75&mods=0")

    OsuApi("k", session=session, send_nomod=False).get_beatmap(75, mods={Mods.NONE})
    assert requested_url(session).endswith("&b=75")


def test_get_beatmap_missing(api, session, make_response):
    session.get.return_value = make_response(200, [])
    with pytest.raises(NotFoundError):
        api.get_beatmap(1)


def test_get_user(api, session, make_response):
    session.get.return_value = make_response(
        200,
        [{
            "user_id": "2", "username": "peppy", "join_date": "2007-08-28 03:09:12",
            "pp_rank": "0", "accuracy": "98.5", "country": "AU",
            "events": [{"display_html": "<b>x</b>", "beatmap_id": "75", "beatmapset_id": "1",
                        "date": "2020-01-01 00:00:00", "epicfactor": "1"}],
        }],
    )
    user = api.get_user("peppy", mode=0)
    assert requested_url(session).endswith("get_user?k=secret-key&u=peppy&type=string&m=0")
    assert user.user_id == 2
    assert user.username == "peppy"
    assert user.accuracy == 98.5
    assert user.join_date == datetime(2007, 8, 28, 3, 9, 12, tzinfo=timezone.utc)
    assert user.events[0].beatmap_id == 75


def test_get_user_by_id_keeps_numeric_username_as_text(api, session, make_response):
    session.get.return_value = make_response(200, [{"user_id": "5", "username": "1234"}])
    user = api.get_user(5)
    assert "u=5&type=id" in requested_url(session)
    assert user.username == "1234"


def test_get_user_keeps_leading_zeros_in_text(api, session, make_response):
    session.get.return_value = make_response(200, [{"user_id": "7", "username": "007", "country": "GB"}])
    user = api.get_user("007")
    assert "u=007&type=string" in requested_url(session)
    assert user.username == "007"
    assert user.user_id == 7


def test_beatmap_scores_keep_numeric_usernames(api, session, make_response):
    session.get.return_value = make_response(200, [{"score": "5", "user_id": "2", "username": "1e2"}])
    assert api.get_beatmap_scores(75)[0].username == "1e2"


def test_get_user_scores(api, session, make_response):
    session.get.return_value = make_response(
        200,
        [{"beatmap_id": "75", "score_id": "9", "score": "1000", "perfect": "0", "enabled_mods": "72",
          "user_id": "2", "date": "2020-01-01 10:00:00", "rank": "S", "pp": "123.4",
          "replay_available": "1"}],
    )
    scores = api.get_user_scores(2, "recent", limit=3)
    assert "get_user_recent?k=secret-key&u=2&type=id&m=0&limit=3" in requested_url(session)
    score = scores[0]
    assert score.pp == 123.4
    assert score.perfect is False
    assert score.replay_available is True
    assert score.mods == {Mods.HIDDEN, Mods.DOUBLETIME}


def test_get_user_scores_rejects_unknown_kind(api):
    with pytest.raises(ValueError):
        api.get_user_scores(2, "worst")


def test_get_beatmap_scores(api, session, make_response):
    session.get.return_value = make_response(200, [{"score": "5", "user_id": "2", "username": "peppy"}])
    scores = api.get_beatmap_scores(75, user="peppy", mods={Mods.HIDDEN})
    assert requested_url(session).endswith("get_scores?k=secret-key&b=75&m=0&u=peppy&type=string&mods=8&limit=5")
    assert scores[0].beatmap_id == 75


def test_get_match(api, session, make_response):
    session.get.return_value = make_response(
        200,
        {
            "match": {"match_id": "1", "name": "test", "start_time": "2020-01-01 10:00:00", "end_time": None},
            "games": [{"game_id": "3", "beatmap_id": "75", "mods": "64", "scoring_type": "3", "team_type": "2",
                       "scores": [{"slot": "1", "team": "2", "user_id": "2", "score": "100",
                                   "pass": "1", "perfect": "0", "enabled_mods": None}]}],
        },
    )
    match = api.get_match(1)
    assert match.match_id == 1
    assert match.end_time is None
    game = match.games[0]
    assert game.mods == 64
    assert game.get_win_condition().name == "SCORE_V2"
    assert game.scores[0].passed is True
    assert game.scores[0].enabled_mods is None


def test_get_replay(api, session, make_response):
    session.get.return_value = make_response(200, {"content": "XQAAIAA=", "encoding": "base64"})
    replay = api.get_replay(75, 2)
    assert replay.encoding == "base64"
    assert replay.content == "XQAAIAA="


def test_get_replay_unavailable(api, session, make_response):
    session.get.return_value = make_response(200, {"error": "Replay not available."})
    with pytest.raises(ApiResponseError):
        api.get_replay(75, 2)
