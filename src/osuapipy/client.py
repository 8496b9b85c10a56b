"""
client.py - Core osu! v1 API client (request engine + endpoint helpers)

Provides the OsuApi class that is the primary entrypoint for library users.
`fetch()` sends one logical GET request (retrying transient failures with a
randomized backoff), validates the body and normalizes the all-strings JSON
into typed values. The endpoint helpers share the same request path but hand
the raw body to the typed records, which coerce field by field so text such as
a "007" username is kept verbatim.

Usage example:
    from osuapipy import OsuApi, Mods
    api = OsuApi(api_key="MY_KEY")
    beatmap = api.get_beatmap(75, mods={Mods.DOUBLETIME})
    print(beatmap.bpm, beatmap.diff_approach, beatmap.difficultyrating)
"""

from __future__ import annotations

import dataclasses
import os
import time
from enum import IntEnum
from typing import *
from urllib.parse import quote
import logging

import requests

from .adjust import adjust_beatmap_stats_to_mods
from .endpoints import OSUAPIURLS
from .mods import Mods, encode_mods, remove_unsupported_mods, to_modset
from .normalize import normalize_response
from .types_models import BEATMAP, MATCH, REPLAY, SCORE, USER
from .utils import build_query, random_backoff, session_factory

from .exceptions import (
    OsuApiError,
    ApiResponseError,
    ConfigurationError,
    InvalidResponseError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    map_http_status,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
API_KEY_ENV = "OSU_API_KEY"

Params = Union[str, Mapping[str, Any], None]
ModsArg = Union[int, Iterable[Mods], None]


class Verbosity(IntEnum):
    """How much OsuApi logs: nothing, only final failures, or every attempt."""
    NONE = 0
    ERRORS = 1
    ALL = 2

    @classmethod
    def parse(cls, value: Union["Verbosity", int, str]) -> "Verbosity":
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"unknown verbosity {value!r}; expected none, errors or all") from None
        return cls(int(value))


def _user_params(user: Union[int, str]) -> Dict[str, Any]:
    """`u`/`type` pair: ints are looked up as ids, strings as usernames."""
    if isinstance(user, int) and not isinstance(user, bool):
        return {"u": user, "type": "id"}
    return {"u": str(user), "type": "string"}


class OsuApi:
    """
    HTTP client for the osu! v1 REST API.

    Responsibilities:
      - Manage a requests.Session with the JSON/gzip headers the API expects.
      - Send `{server}/{endpoint}?k={key}&{params}` with transparent retry.
      - Turn every failure into an OsuApiError subclass carrying
        server/endpoint/parameters.
      - Provide typed endpoint helpers (users, scores, beatmaps, matches, replays).

    Parameters
    ----------
    api_key : str
        Your osu! API key (https://osu.ppy.sh/p/api).
    server : str
        API base URL (defaults to OSUAPIURLS.BASE_URL). Useful for private servers.
    verbosity : Verbosity | str | int
        "none", "errors" or "all"; gates the records emitted on this module's logger.
    timeout : float
        Default per-attempt timeout in seconds.
    max_attempts : int
        Attempts per logical request for network errors and HTTP 429.
    session : Optional[requests.Session]
        Inject a custom/mocked session.
    send_nomod : bool
        When a beatmap request explicitly asks for no mods ({Mods.NONE}),
        send `mods=0` (True) or leave the parameter out (False).

    Examples
    --------
    >>> api = OsuApi("MY_KEY", verbosity="errors")
    >>> raw = api.fetch("get_user", {"u": "peppy", "type": "string"})
    """

    def __init__(
        self,
        api_key: str,
        server: Optional[str] = None,
        verbosity: Union[Verbosity, int, str] = Verbosity.NONE,
        timeout: float = 15.0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        session: Optional[requests.Session] = None,
        send_nomod: bool = True,
    ):
        if not api_key:
            raise ConfigurationError("api_key must be a non-empty string")
        self.api_key: str = api_key
        self.server: str = OSUAPIURLS.BASE_URL
        if server:
            self.set_server(server)
        self.verbosity = Verbosity.parse(verbosity)
        self.timeout = float(timeout)
        self.max_attempts = max(1, int(max_attempts))
        self.send_nomod = bool(send_nomod)
        self.session = session or session_factory()

    # Configuration helpers
    def set_server(self, server: str) -> None:
        """
        Change the base URL requests are sent to.

        Raises
        ------
        ValueError : if `server` is not an http(s) URL.
        """
        if not isinstance(server, str) or not server.startswith("http"):
            raise ValueError("server must be an http/https URL")
        self.server = server.rstrip("/")

    def set_verbosity(self, verbosity: Union[Verbosity, int, str]) -> None:
        """Set how much is logged: "none", "errors" or "all"."""
        self.verbosity = Verbosity.parse(verbosity)

    # Logging helpers
    def _log_attempt(self, msg: str, *args: Any) -> None:
        if self.verbosity >= Verbosity.ALL:
            logger.info(msg, *args)

    def _log_failure(self, msg: str, *args: Any) -> None:
        if self.verbosity >= Verbosity.ERRORS:
            logger.warning(msg, *args)

    # URL builder
    def _build_url(self, endpoint: str, params: Params = None) -> str:
        """
        Build `{server}/{endpoint}?k={key}&{params}`.

        `params` may be a prebuilt query string or a mapping (None values dropped).
        """
        query = f"k={quote(self.api_key, safe='')}"
        extra = build_query(params)
        if extra:
            query += "&" + extra
        return f"{self.server}/{endpoint.strip('/')}?{query}"

    def _fail(self, err: OsuApiError, endpoint: str, params: Params, attempts: int) -> OsuApiError:
        err.with_context(self.server, endpoint, params, attempts)
        self._log_failure("osu!api %s failed after %d attempt(s): %s", endpoint, attempts, err.message)
        return err

    # Central request method
    def _request(self, endpoint: str, params: Params = None, *, timeout: Optional[float] = None) -> Any:
        """
        Perform one logical GET request and return the decoded JSON body.

        Attempts are strictly sequential. Network failures (connection
        refused, DNS, timeout) and HTTP 429 are retried after a random
        1.0-5.0 s pause until `max_attempts` is reached. Any other non-2xx
        status fails immediately.

        Parameters
        ----------
        endpoint : str
            Endpoint name, e.g. OSUAPIURLS.GET_BEATMAPS.
        params : str | Mapping | None
            Query parameters (the key is added automatically).
        timeout : float, optional
            Per-attempt timeout overriding the client default; also the way
            to bound how long a caller can be blocked by one attempt.

        Returns
        -------
        Decoded JSON (list or dict), not normalized.

        Raises
        ------
        NetworkError : no response after every attempt, or the request could not be sent.
        RateLimitError : HTTP 429 on every attempt.
        UnauthorizedError, BadRequestError, ServerError, ... : other HTTP errors.
        InvalidResponseError : 2xx body is not JSON.
        ApiResponseError : body is an object carrying "error".
        NotFoundError : HTTP 404, empty result or unavailable match.
        """
        timeout = float(timeout) if timeout is not None else self.timeout
        url = self._build_url(endpoint, params)

        attempt = 0
        while True:
            attempt += 1
            try:
                resp = self.session.get(url, timeout=timeout)
            except (requests.ConnectionError, requests.Timeout) as exc:
                if attempt < self.max_attempts:
                    delay = random_backoff()
                    self._log_attempt(
                        "osu!api %s %r: no response on attempt %d/%d (%s); retrying in %.1fs",
                        endpoint, params, attempt, self.max_attempts, exc, delay,
                    )
                    time.sleep(delay)
                    continue
                raise self._fail(
                    NetworkError(f"Server did not respond after {attempt} attempts: {exc}"),
                    endpoint, params, attempt,
                ) from exc
            except requests.RequestException as exc:
                raise self._fail(
                    NetworkError(f"Request could not be sent: {exc}"), endpoint, params, attempt
                ) from exc

            self._log_attempt(
                "osu!api %s %r -> %s %s (attempt %d/%d)",
                endpoint, params, resp.status_code, resp.reason, attempt, self.max_attempts,
            )

            if resp.status_code == 429:
                if attempt < self.max_attempts:
                    delay = random_backoff()
                    self._log_attempt("osu!api rate limited; retrying in %.1fs", delay)
                    time.sleep(delay)
                    continue
                raise self._fail(
                    RateLimitError(f"Rate limited on all {attempt} attempts", 429, resp),
                    endpoint, params, attempt,
                )

            if not 200 <= resp.status_code < 300:
                content_text = resp.text[:500] if resp.text else ""
                message = f"{resp.status_code} {resp.reason or ''}: {content_text}".strip()
                raise self._fail(map_http_status(resp.status_code, message, resp), endpoint, params, attempt)

            return self._check_payload(resp, endpoint, params, attempt)

    def _check_payload(self, resp: requests.Response, endpoint: str, params: Params, attempt: int) -> Any:
        """Decode a 2xx body and reject empty / error-flagged payloads."""
        try:
            payload = resp.json()
        except ValueError as exc:
            raise self._fail(
                InvalidResponseError(f"Invalid JSON payload: {exc}", resp.status_code, resp),
                endpoint, params, attempt,
            ) from exc

        if isinstance(payload, list) and not payload:
            raise self._fail(
                NotFoundError("No results for this query", resp.status_code, payload),
                endpoint, params, attempt,
            )
        if isinstance(payload, dict):
            if "error" in payload:
                raise self._fail(
                    ApiResponseError(str(payload["error"]), resp.status_code, payload),
                    endpoint, params, attempt,
                )
            # get_match answers {"match": 0, "games": []} for unknown/private matches
            if "match" in payload and payload["match"] in (0, "0"):
                raise self._fail(
                    NotFoundError("Match not found or unavailable", resp.status_code, payload),
                    endpoint, params, attempt,
                )
        return payload

    def fetch(self, endpoint: str, params: Params = None, *, timeout: Optional[float] = None) -> Any:
        """
        Request `endpoint` and return the normalized payload (numbers, booleans,
        UTC datetimes instead of strings). See `_request()` for the errors raised.
        """
        return normalize_response(self._request(endpoint, params, timeout=timeout))

    # Endpoint helpers (records are built from the raw body, see types_models)
    def _mods_param(self, mods: ModsArg, *, strip_unsupported: bool) -> Optional[int]:
        if mods is None:
            return None
        modset = remove_unsupported_mods(mods) if strip_unsupported else mods
        bits = encode_mods(modset)
        if bits == 0 and not self.send_nomod:
            return None
        return bits

    def get_user(self, user: Union[int, str], mode: int = 0, *, event_days: Optional[int] = None) -> USER:
        """
        Retrieve a user profile.

        Parameters
        ----------
        user : int | str
            User id (int) or username (str).
        mode : int
            Game mode, see Gamemodes.
        event_days : Optional[int]
            How many days of profile events to include (API allows 1-31).
        """
        params = _user_params(user)
        params["m"] = int(mode)
        params["event_days"] = event_days
        payload = self._request(OSUAPIURLS.GET_USER, params)
        return USER.from_dict(payload[0] if isinstance(payload, list) else payload)

    def get_user_scores(
        self,
        user: Union[int, str],
        plays: str = "best",
        mode: int = 0,
        limit: int = 5,
    ) -> List[SCORE]:
        """
        Retrieve a user's best scores or scores from the last 24 hours.

        Parameters
        ----------
        plays : str
            "best" or "recent".
        limit : int
            Number of scores (API allows 1-100).

        Raises
        ------
        ValueError : on an unknown `plays` value.
        NotFoundError : the user has no such scores.
        """
        endpoints = {"best": OSUAPIURLS.GET_USER_BEST, "recent": OSUAPIURLS.GET_USER_RECENT}
        if plays not in endpoints:
            raise ValueError("plays must be 'best' or 'recent'")
        params = _user_params(user)
        params.update({"m": int(mode), "limit": int(limit)})
        payload = self._request(endpoints[plays], params)
        return [SCORE.from_dict(s) for s in payload]

    def get_beatmaps(
        self,
        *,
        beatmap_id: Optional[int] = None,
        beatmapset_id: Optional[int] = None,
        mode: Optional[int] = None,
        converted: bool = False,
        mods: ModsArg = None,
        limit: Optional[int] = None,
    ) -> List[BEATMAP]:
        """
        Retrieve beatmaps, adjusted to `mods`.

        Mods the API cannot rate are stripped from the request (NIGHTCORE is
        sent as DOUBLETIME) so star rating, aim and speed come back computed.
        Size/approach/overall/drain/bpm/lengths are then adjusted locally
        with the full mod set.
        """
        params = {
            "b": beatmap_id,
            "s": beatmapset_id,
            "m": None if mode is None else int(mode),
            "a": 1 if converted else None,
            "mods": self._mods_param(mods, strip_unsupported=True),
            "limit": limit,
        }
        payload = self._request(OSUAPIURLS.GET_BEATMAPS, params)
        modset = to_modset(mods) - {Mods.NONE}
        results: List[BEATMAP] = []
        for item in payload:
            beatmap = BEATMAP.from_dict(item)
            if modset:
                beatmap = dataclasses.replace(adjust_beatmap_stats_to_mods(beatmap, modset), mods=modset)
            results.append(beatmap)
        return results

    def get_beatmap(self, beatmap_id: int, mods: ModsArg = None, mode: Optional[int] = None, converted: bool = False) -> BEATMAP:
        """
        Retrieve one beatmap difficulty adjusted to `mods`.

        Example
        -------
        >>> bm = api.get_beatmap(75, mods=Mods.DOUBLETIME | Mods.HARDROCK)
        >>> bm.bpm, bm.diff_approach
        """
        return self.get_beatmaps(beatmap_id=beatmap_id, mode=mode, converted=converted, mods=mods)[0]

    def get_beatmap_scores(
        self,
        beatmap_id: int,
        mode: int = 0,
        user: Optional[Union[int, str]] = None,
        mods: ModsArg = None,
        limit: int = 5,
    ) -> List[SCORE]:
        """
        Retrieve the top scores of a beatmap, optionally for one user and/or
        one exact mod combination.
        """
        params: Dict[str, Any] = {"b": beatmap_id, "m": int(mode)}
        if user is not None:
            params.update(_user_params(user))
        params["mods"] = self._mods_param(mods, strip_unsupported=False)
        params["limit"] = int(limit)
        payload = self._request(OSUAPIURLS.GET_SCORES, params)
        return [SCORE.from_dict(s, beatmap_id=beatmap_id) for s in payload]

    def get_match(self, match_id: int) -> MATCH:
        """Retrieve a multiplayer match. Raises NotFoundError when the id is unknown."""
        payload = self._request(OSUAPIURLS.GET_MATCH, {"mp": match_id})
        return MATCH.from_dict(payload)

    def get_replay(self, beatmap_id: int, user: Union[int, str], mode: int = 0, mods: ModsArg = None) -> REPLAY:
        """
        Retrieve the replay of a user's score on a beatmap.

        Raises ApiResponseError when the API reports the replay as unavailable.
        """
        params: Dict[str, Any] = {"b": beatmap_id}
        params.update(_user_params(user))
        params["m"] = int(mode)
        params["mods"] = self._mods_param(mods, strip_unsupported=False)
        payload = self._request(OSUAPIURLS.GET_REPLAY, params)
        return REPLAY.from_dict(payload)

    # context manager helpers
    def close(self) -> None:
        """Close the underlying requests session."""
        self.session.close()

    def __enter__(self) -> "OsuApi":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<OsuApi server={self.server!r} verbosity={self.verbosity.name} api_key_set={bool(self.api_key)}>"


# module-level helper: convenience factory
def create_client(api_key: Optional[str] = None, **kwargs) -> OsuApi:
    """
    Convenience factory to create a configured OsuApi client.

    Parameters
    ----------
    api_key : Optional[str]
        API key; falls back to the OSU_API_KEY environment variable.
    kwargs : additional args forwarded to the OsuApi constructor.

    Raises
    ------
    ConfigurationError : if no key is given and OSU_API_KEY is unset.
    """
    key = api_key or os.environ.get(API_KEY_ENV)
    if not key:
        raise ConfigurationError(f"No API key given and {API_KEY_ENV} is not set")
    return OsuApi(api_key=key, **kwargs)
