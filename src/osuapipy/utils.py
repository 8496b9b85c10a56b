from __future__ import annotations

import logging,random
from typing import *
from urllib.parse import urlencode

import requests
from requests.adapters import HTTPAdapter

__all__ = [
    "logger_setup",
    "session_factory",
    "random_backoff",
    "build_query",
    "get_length",
]

DEFAULT_USER_AGENT = "osuapipy/0.1"

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Accept-Encoding": "gzip",
    "Content-Type": "application/json",
}


def logger_setup(name: str = "osuapipy",
                 level: int = logging.INFO,
                 *,
                 log_to_file: Optional[str] = None,
                 file_level: Optional[int] = None,
                 fmt: str = "%(asctime)s %(name)s %(levelname)s: %(message)s",
                 datefmt: str = "%Y-%m-%d %H:%M:%S") -> logging.Logger:
    """
    Create and return a configured logger for the library.

    The library itself only emits records through module loggers; call this
    from an application to actually see them.

    Behavior:
        - Adds a console (StreamHandler) with the given `level`.
        - If `log_to_file` is provided, also adds a FileHandler.
        - Multiple calls with the same `name` will not duplicate handlers (idempotent).

    Parameters
    ----------
    name : str
        Logger name (usually the package name).
    level : int
        Logging level for console (e.g., logging.INFO).
    log_to_file : Optional[str]
        If provided, path of file to log to (created if missing).
    file_level : Optional[int]
        Logging level for file handler (defaults to `level` if None).
    fmt : str
        Log message format string.
    datefmt : str
        Date format used by formatter.

    Returns
    -------
    logging.Logger

    Example
    -------
    >>> logger = logger_setup("osuapipy", level=logging.DEBUG, log_to_file="osu.log")
    >>> logger.info("ready")
    """
    logger = logging.getLogger(name)
    logger.setLevel(min(level, file_level if file_level is not None else level))

    if not getattr(logger, "_osuapipy_setup_done", False):
        formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(formatter)
        logger.addHandler(ch)

        if log_to_file:
            fh = logging.FileHandler(log_to_file, encoding="utf-8")
            fh.setLevel(file_level if file_level is not None else level)
            fh.setFormatter(formatter)
            logger.addHandler(fh)

        logger._osuapipy_setup_done = True

    return logger


def session_factory(user_agent: Optional[str] = None,
                    *,
                    pool_maxsize: int = 10,
                    pool_connections: int = 10,
                    default_headers: Optional[Dict[str, str]] = None) -> requests.Session:
    """
    Create a configured requests.Session for the library.

    Sets the JSON/gzip headers the API expects and mounts a pooled HTTPAdapter.
    Retries are NOT delegated to urllib3: OsuApi runs its own retry loop so
    every attempt can be logged and rate limits get a randomized backoff.

    Parameters
    ----------
    user_agent : Optional[str]
        User-Agent string to set. If None, DEFAULT_USER_AGENT is used.
    pool_maxsize : int
        Max connection pool size for the adapter.
    pool_connections : int
        Pool connections count for the adapter.
    default_headers : Optional[Dict[str,str]]
        Additional headers merged over the defaults.

    Returns
    -------
    requests.Session
    """
    session = requests.Session()

    headers = dict(DEFAULT_HEADERS)
    headers["User-Agent"] = user_agent or DEFAULT_USER_AGENT
    if default_headers:
        headers.update(default_headers)
    session.headers.update(headers)

    adapter = HTTPAdapter(pool_connections=pool_connections, pool_maxsize=pool_maxsize)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def random_backoff(low: float = 1.0, high: float = 5.0, step: float = 0.1) -> float:
    """
    Pick a retry delay uniformly from [low, high] in `step` increments.

    With the defaults the result is one of 1.0, 1.1, ..., 5.0 seconds.
    """
    if low < 0 or high < low or step <= 0:
        raise ValueError("expected 0 <= low <= high and step > 0")
    steps = int(round((high - low) / step))
    return round(low + random.randint(0, steps) * step, 4)


def build_query(params: Union[str, Mapping[str, Any], None]) -> str:
    """
    Turn query parameters into a query-string fragment (without leading '?' or '&').

    A string is passed through (leading separators stripped). In a mapping,
    None values are dropped and booleans are sent as 1/0.

    Example
    -------
    >>> build_query({"b": 75, "mods": None, "a": True})
    'b=75&a=1'
    """
    if params is None:
        return ""
    if isinstance(params, str):
        return params.lstrip("?&")
    pairs = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = int(value)
        pairs.append((key, value))
    return urlencode(pairs)


def get_length(seconds: float) -> str:
    """
    Format a duration in seconds as m:ss, or h:mm:ss past an hour.

    Fractions of a second (e.g. lengths adjusted for DoubleTime) are dropped.

    >>> get_length(83)
    '1:23'
    >>> get_length(3725.7)
    '1:02:05'
    """
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
