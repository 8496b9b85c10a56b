"""
osuapipy package initializer.

This file exposes the high-level public API for the package:
 - OsuApi (main client) and create_client (convenience factory)
 - Mods and the bitfield helpers (decode_mods, encode_mods, ...)
 - adjust_beatmap_stats_to_mods (local difficulty recomputation)
 - normalize_response (string payload -> typed values)
 - typed records (BEATMAP, SCORE, USER, MATCH, REPLAY) and enum tables
 - exceptions (module with custom exceptions)
"""

__all__ = [
    "OsuApi", "create_client", "Verbosity", "OSUAPIURLS",
    "Mods", "decode_mods", "encode_mods", "remove_unsupported_mods", "mod_names", "UNSUPPORTED_MODS",
    "adjust_beatmap_stats_to_mods", "approach_rate_to_ms",
    "normalize_response", "BOOLEAN_FIELDS",
    "get_length", "logger_setup",
    "OsuApiError", "BadRequestError", "UnauthorizedError", "ForbiddenError", "NotFoundError",
    "RateLimitError", "ServerError", "NetworkError", "InvalidResponseError", "ApiResponseError",
    "ConfigurationError", "map_http_status",
    "Gamemodes", "Categories", "Genres", "Languages", "MultiplayerModes", "WinConditions",
    "MODE_NAMES", "get_mode_name",
    "BEATMAP", "SCORE", "USER", "USEREVENT", "MATCH", "MATCHGAME", "MATCHSCORE", "REPLAY",
    "exceptions", "__version__",
]

# package version (update as you release)
__version__ = "0.1.0"

# re-export exceptions for convenience
from .exceptions import *  # noqa: F401,F403
from . import exceptions

from .client import OsuApi, Verbosity, create_client
from .endpoints import OSUAPIURLS
from .mods import Mods, decode_mods, encode_mods, remove_unsupported_mods, mod_names, UNSUPPORTED_MODS
from .adjust import adjust_beatmap_stats_to_mods, approach_rate_to_ms
from .normalize import normalize_response, BOOLEAN_FIELDS
from .types_models import *  # noqa: F401,F403
from .utils import get_length, logger_setup
