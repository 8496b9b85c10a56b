"""
endpoints.py

Centralized container for the osu! v1 API server and endpoint names.
"""

from typing import *


class OSUAPIURLS:
    """
    Endpoint names of the osu! v1 REST API.

    Requests are sent as `{BASE_URL}/{ENDPOINT}?k={key}&{params}`.

    Documentation Source:
        - https://github.com/ppy/osu-api/wiki
    """

    BASE_URL = "https://osu.ppy.sh/api"
    """Base API root for the v1 API."""

    GET_BEATMAPS = "get_beatmaps"
    """GET → Beatmaps filtered by set id, beatmap id, user, hash, mode or mods."""

    GET_USER = "get_user"
    """GET → A single user profile (id or username) for a mode."""

    GET_USER_BEST = "get_user_best"
    """GET → Top scores of a user."""

    GET_USER_RECENT = "get_user_recent"
    """GET → Scores of a user from the last 24 hours."""

    GET_SCORES = "get_scores"
    """GET → Top scores on a beatmap, optionally for one user / mod combination."""

    GET_MATCH = "get_match"
    """GET → A multiplayer match and all games played in it."""

    GET_REPLAY = "get_replay"
    """GET → The replay data of a score (base64 LZMA stream)."""

    @classmethod
    def list_names(cls) -> List[str]:
        """Return the sorted endpoint attribute names (e.g. ['GET_BEATMAPS', ...])."""
        return sorted(n for n in vars(cls) if n.startswith("GET_"))
