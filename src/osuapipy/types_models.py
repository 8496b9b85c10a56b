"""
types_models.py

Typed dataclasses for the objects returned by the osu! v1 API.

Purpose
-------
- Provide typed, documented containers for beatmaps, scores, users, matches and replays.
- Supply `from_dict()` factories that take the raw API payload and coerce each
  field to its declared type. Text fields are read verbatim, so pass the raw
  body rather than a `normalize_response()` result ("007" would already be 7).
- Keep the original payload available in `.data` for debugging/forward-compatibility.

Notes
-----
- Lightweight on purpose: no validation beyond presence/type coercion.
- `BEATMAP` is the record `adjust_beatmap_stats_to_mods()` copies and adjusts.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Dict, Any, FrozenSet
from enum import IntEnum
from datetime import datetime

from .mods import Mods, decode_mods
from .normalize import normalize_response, parse_datetime
from .utils import get_length


# Enums
class Gamemodes(IntEnum):
    """Game modes (https://osu.ppy.sh/wiki/en/Game_mode)."""
    OSU = 0
    TAIKO = 1
    CTB = 2
    MANIA = 3


MODE_NAMES = ("osu!", "taiko", "catch the beat", "osu!mania")


class Categories(IntEnum):
    """Values of a beatmap's `approved` field (https://osu.ppy.sh/wiki/en/Beatmap/Category)."""
    GRAVEYARD = -2
    WIP = -1
    PENDING = 0
    RANKED = 1
    APPROVED = 2
    QUALIFIED = 3
    LOVED = 4


class Genres(IntEnum):
    """Values of a beatmap's `genre_id` field."""
    ANY = 0
    UNSPECIFIED = 1
    VIDEO_GAME = 2
    ANIME = 3
    ROCK = 4
    POP = 5
    OTHER = 6
    NOVELTY = 7
    HIP_HOP = 9
    ELECTRONIC = 10
    METAL = 11
    CLASSICAL = 12
    FOLK = 13
    JAZZ = 14


class Languages(IntEnum):
    """Values of a beatmap's `language_id` field."""
    ANY = 0
    UNSPECIFIED = 1
    ENGLISH = 2
    JAPANESE = 3
    CHINESE = 4
    INSTRUMENTAL = 5
    KOREAN = 6
    FRENCH = 7
    GERMAN = 8
    SWEDISH = 9
    SPANISH = 10
    ITALIAN = 11
    RUSSIAN = 12
    POLISH = 13
    OTHER = 14


class MultiplayerModes(IntEnum):
    """Team type of a multiplayer game."""
    HEAD_TO_HEAD = 0
    TAG_COOP = 1
    TEAM_VS = 2
    TAG_TEAM_VS = 3


class WinConditions(IntEnum):
    """Scoring type of a multiplayer game."""
    SCORE = 0
    ACCURACY = 1
    COMBO = 2
    SCORE_V2 = 3


def get_mode_name(mode: int) -> str:
    """Display name of a game mode id (0 -> "osu!")."""
    return MODE_NAMES[int(mode)]


# coercion helpers (payloads are raw API strings, pre-typed values pass through)
def _num(value: Any, default: Any = None) -> Any:
    value = normalize_response(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def _str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _dt(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return parse_datetime(str(value))
    except (ValueError, OverflowError):
        return None


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip() not in ("", "0")
    return bool(value)


def _enum(enum_cls, value: Any):
    try:
        return enum_cls(int(value))
    except (TypeError, ValueError):
        return None


@dataclass
class BEATMAP:
    """
    A single difficulty of a beatmapset.

    Attributes
    ----------
    beatmap_id, beatmapset_id : Optional[int]
        Identity of the difficulty and of its set.
    approved : Optional[int]
        Ranked status, see `Categories`.
    total_length : float
        Length in seconds including breaks.
    hit_length : float
        Length in seconds without breaks.
    version : Optional[str]
        Difficulty name (e.g. "Mirash's Insane").
    diff_size, diff_overall, diff_approach, diff_drain : float
        Circle size, overall difficulty, approach rate and health drain.
    bpm : float
        Beats per minute.
    difficultyrating, diff_aim, diff_speed : Optional[float]
        Star rating and its components. Only the API can compute these;
        aim is None for taiko/mania, speed for taiko/ctb/mania.
    mods : FrozenSet[Mods]
        Mods the stats were adjusted to (empty for the base beatmap).
    data : Dict[str, Any]
        Original payload.
    """
    beatmap_id: Optional[int] = None
    beatmapset_id: Optional[int] = None
    approved: Optional[int] = None
    total_length: float = 0
    hit_length: float = 0
    version: Optional[str] = None
    file_md5: Optional[str] = None
    diff_size: float = 0
    diff_overall: float = 0
    diff_approach: float = 0
    diff_drain: float = 0
    bpm: float = 0
    mode: Optional[int] = None
    count_normal: Optional[int] = None
    count_slider: Optional[int] = None
    count_spinner: Optional[int] = None
    submit_date: Optional[datetime] = None
    approved_date: Optional[datetime] = None
    last_update: Optional[datetime] = None
    artist: Optional[str] = None
    artist_unicode: Optional[str] = None
    title: Optional[str] = None
    title_unicode: Optional[str] = None
    creator: Optional[str] = None
    creator_id: Optional[int] = None
    source: Optional[str] = None
    tags: Optional[str] = None
    genre_id: Optional[int] = None
    language_id: Optional[int] = None
    favourite_count: Optional[int] = None
    rating: Optional[float] = None
    storyboard: bool = False
    video: bool = False
    download_unavailable: bool = False
    audio_unavailable: bool = False
    playcount: Optional[int] = None
    passcount: Optional[int] = None
    packs: Optional[str] = None
    max_combo: Optional[int] = None
    diff_aim: Optional[float] = None
    diff_speed: Optional[float] = None
    difficultyrating: Optional[float] = None
    mods: FrozenSet[Mods] = field(default_factory=frozenset)
    data: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "BEATMAP":
        d = d or {}
        return cls(
            beatmap_id=_num(d.get("beatmap_id")),
            beatmapset_id=_num(d.get("beatmapset_id")),
            approved=_num(d.get("approved")),
            total_length=_num(d.get("total_length"), 0),
            hit_length=_num(d.get("hit_length"), 0),
            version=_str(d.get("version")),
            file_md5=_str(d.get("file_md5")),
            diff_size=_num(d.get("diff_size"), 0),
            diff_overall=_num(d.get("diff_overall"), 0),
            diff_approach=_num(d.get("diff_approach"), 0),
            diff_drain=_num(d.get("diff_drain"), 0),
            bpm=_num(d.get("bpm"), 0),
            mode=_num(d.get("mode")),
            count_normal=_num(d.get("count_normal")),
            count_slider=_num(d.get("count_slider")),
            count_spinner=_num(d.get("count_spinner")),
            submit_date=_dt(d.get("submit_date")),
            approved_date=_dt(d.get("approved_date")),
            last_update=_dt(d.get("last_update")),
            artist=_str(d.get("artist")),
            artist_unicode=_str(d.get("artist_unicode")),
            title=_str(d.get("title")),
            title_unicode=_str(d.get("title_unicode")),
            creator=_str(d.get("creator")),
            creator_id=_num(d.get("creator_id")),
            source=_str(d.get("source")),
            tags=_str(d.get("tags")),
            genre_id=_num(d.get("genre_id")),
            language_id=_num(d.get("language_id")),
            favourite_count=_num(d.get("favourite_count")),
            rating=_num(d.get("rating")),
            storyboard=_flag(d.get("storyboard")),
            video=_flag(d.get("video")),
            download_unavailable=_flag(d.get("download_unavailable")),
            audio_unavailable=_flag(d.get("audio_unavailable")),
            playcount=_num(d.get("playcount")),
            passcount=_num(d.get("passcount")),
            packs=_str(d.get("packs")),
            max_combo=_num(d.get("max_combo")),
            diff_aim=_num(d.get("diff_aim")),
            diff_speed=_num(d.get("diff_speed")),
            difficultyrating=_num(d.get("difficultyrating")),
            data=d,
        )

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out.pop("data", None)
        out["mods"] = sorted(int(m) for m in self.mods)
        return out

    def get_category(self) -> Optional[Categories]:
        return _enum(Categories, self.approved)

    def get_genre(self) -> Optional[Genres]:
        return _enum(Genres, self.genre_id)

    def get_language(self) -> Optional[Languages]:
        return _enum(Languages, self.language_id)

    def get_length(self) -> str:
        """Total length formatted as m:ss (h:mm:ss for long maps)."""
        return get_length(self.total_length)

    def __repr__(self) -> str:
        return (
            f"<BEATMAP id={self.beatmap_id!r} {self.artist} - {self.title} [{self.version}] "
            f"sr={self.difficultyrating!r}>"
        )


@dataclass
class SCORE:
    """
    A score, as returned by get_scores, get_user_best and get_user_recent.

    `pp` and `replay_available` are only present on some endpoints.
    """
    beatmap_id: Optional[int] = None
    score_id: Optional[int] = None
    score: int = 0
    maxcombo: int = 0
    count50: int = 0
    count100: int = 0
    count300: int = 0
    countmiss: int = 0
    countkatu: int = 0
    countgeki: int = 0
    perfect: bool = False
    enabled_mods: int = 0
    user_id: Optional[int] = None
    username: Optional[str] = None
    date: Optional[datetime] = None
    rank: Optional[str] = None
    pp: Optional[float] = None
    replay_available: Optional[bool] = None
    data: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]], beatmap_id: Optional[int] = None) -> "SCORE":
        d = d or {}
        replay = d.get("replay_available")
        return cls(
            beatmap_id=_num(d.get("beatmap_id"), beatmap_id),
            score_id=_num(d.get("score_id")),
            score=_num(d.get("score"), 0),
            maxcombo=_num(d.get("maxcombo"), 0),
            count50=_num(d.get("count50"), 0),
            count100=_num(d.get("count100"), 0),
            count300=_num(d.get("count300"), 0),
            countmiss=_num(d.get("countmiss"), 0),
            countkatu=_num(d.get("countkatu"), 0),
            countgeki=_num(d.get("countgeki"), 0),
            perfect=_flag(d.get("perfect")),
            enabled_mods=_num(d.get("enabled_mods"), 0),
            user_id=_num(d.get("user_id")),
            username=_str(d.get("username")),
            date=_dt(d.get("date")),
            rank=_str(d.get("rank")),
            pp=_num(d.get("pp")),
            replay_available=None if replay is None else _flag(replay),
            data=d,
        )

    @property
    def mods(self) -> FrozenSet[Mods]:
        return decode_mods(self.enabled_mods)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out.pop("data", None)
        return out


@dataclass
class USEREVENT:
    """A recent profile event (rank achievements, beatmap submissions...)."""
    display_html: Optional[str] = None
    beatmap_id: Optional[int] = None
    beatmapset_id: Optional[int] = None
    date: Optional[datetime] = None
    epicfactor: Optional[int] = None
    data: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "USEREVENT":
        d = d or {}
        return cls(
            display_html=_str(d.get("display_html")),
            beatmap_id=_num(d.get("beatmap_id")),
            beatmapset_id=_num(d.get("beatmapset_id")),
            date=_dt(d.get("date")),
            epicfactor=_num(d.get("epicfactor")),
            data=d,
        )


@dataclass
class USER:
    """
    A user profile for one game mode.

    Ranks and counts default to 0 for users who never played the mode.
    """
    user_id: int = 0
    username: str = ""
    join_date: Optional[datetime] = None
    count300: int = 0
    count100: int = 0
    count50: int = 0
    playcount: int = 0
    ranked_score: int = 0
    total_score: int = 0
    pp_rank: int = 0
    level: float = 0
    pp_raw: float = 0
    accuracy: float = 0
    count_rank_ss: int = 0
    count_rank_ssh: int = 0
    count_rank_s: int = 0
    count_rank_sh: int = 0
    count_rank_a: int = 0
    country: str = ""
    total_seconds_played: int = 0
    pp_country_rank: int = 0
    events: List[USEREVENT] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "USER":
        d = d or {}
        return cls(
            user_id=_num(d.get("user_id"), 0),
            username=_str(d.get("username")) or "",
            join_date=_dt(d.get("join_date")),
            count300=_num(d.get("count300"), 0),
            count100=_num(d.get("count100"), 0),
            count50=_num(d.get("count50"), 0),
            playcount=_num(d.get("playcount"), 0),
            ranked_score=_num(d.get("ranked_score"), 0),
            total_score=_num(d.get("total_score"), 0),
            pp_rank=_num(d.get("pp_rank"), 0),
            level=_num(d.get("level"), 0),
            pp_raw=_num(d.get("pp_raw"), 0),
            accuracy=_num(d.get("accuracy"), 0),
            count_rank_ss=_num(d.get("count_rank_ss"), 0),
            count_rank_ssh=_num(d.get("count_rank_ssh"), 0),
            count_rank_s=_num(d.get("count_rank_s"), 0),
            count_rank_sh=_num(d.get("count_rank_sh"), 0),
            count_rank_a=_num(d.get("count_rank_a"), 0),
            country=_str(d.get("country")) or "",
            total_seconds_played=_num(d.get("total_seconds_played"), 0),
            pp_country_rank=_num(d.get("pp_country_rank"), 0),
            events=[USEREVENT.from_dict(e) for e in d.get("events") or []],
            data=d,
        )

    def __repr__(self) -> str:
        return f"<USER id={self.user_id} username={self.username!r} pp_rank={self.pp_rank}>"


@dataclass
class MATCHSCORE:
    """One player's score in a multiplayer game. `team`: 0 none, 1 blue, 2 red."""
    slot: int = 0
    team: int = 0
    user_id: Optional[int] = None
    score: int = 0
    maxcombo: int = 0
    rank: int = 0
    count50: int = 0
    count100: int = 0
    count300: int = 0
    countmiss: int = 0
    countgeki: int = 0
    countkatu: int = 0
    perfect: bool = False
    passed: bool = False
    enabled_mods: Optional[int] = None
    data: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "MATCHSCORE":
        d = d or {}
        return cls(
            slot=_num(d.get("slot"), 0),
            team=_num(d.get("team"), 0),
            user_id=_num(d.get("user_id")),
            score=_num(d.get("score"), 0),
            maxcombo=_num(d.get("maxcombo"), 0),
            rank=_num(d.get("rank"), 0),
            count50=_num(d.get("count50"), 0),
            count100=_num(d.get("count100"), 0),
            count300=_num(d.get("count300"), 0),
            countmiss=_num(d.get("countmiss"), 0),
            countgeki=_num(d.get("countgeki"), 0),
            countkatu=_num(d.get("countkatu"), 0),
            perfect=_flag(d.get("perfect")),
            passed=_flag(d.get("pass")),
            enabled_mods=_num(d.get("enabled_mods")),
            data=d,
        )


@dataclass
class MATCHGAME:
    """A single map played inside a multiplayer match. `mods` is the room-wide bitmask."""
    game_id: Optional[int] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    beatmap_id: Optional[int] = None
    play_mode: Optional[int] = None
    match_type: Optional[int] = None
    scoring_type: Optional[int] = None
    team_type: Optional[int] = None
    mods: int = 0
    scores: List[MATCHSCORE] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "MATCHGAME":
        d = d or {}
        return cls(
            game_id=_num(d.get("game_id")),
            start_time=_dt(d.get("start_time")),
            end_time=_dt(d.get("end_time")),
            beatmap_id=_num(d.get("beatmap_id")),
            play_mode=_num(d.get("play_mode")),
            match_type=_num(d.get("match_type")),
            scoring_type=_num(d.get("scoring_type")),
            team_type=_num(d.get("team_type")),
            mods=_num(d.get("mods"), 0),
            scores=[MATCHSCORE.from_dict(s) for s in d.get("scores") or []],
            data=d,
        )

    def get_win_condition(self) -> Optional[WinConditions]:
        return _enum(WinConditions, self.scoring_type)

    def get_team_mode(self) -> Optional[MultiplayerModes]:
        return _enum(MultiplayerModes, self.team_type)


@dataclass
class MATCH:
    """
    A multiplayer match. `end_time` is None while the room is still open.
    """
    match_id: Optional[int] = None
    name: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    games: List[MATCHGAME] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "MATCH":
        d = d or {}
        info = d.get("match") or {}
        return cls(
            match_id=_num(info.get("match_id")),
            name=_str(info.get("name")),
            start_time=_dt(info.get("start_time")),
            end_time=_dt(info.get("end_time")),
            games=[MATCHGAME.from_dict(g) for g in d.get("games") or []],
            data=d,
        )


@dataclass
class REPLAY:
    """
    Replay data of a score. `content` is a base64 encoded LZMA stream
    (see the .osr file format); `encoding` should always be "base64".
    """
    content: Optional[str] = None
    encoding: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "REPLAY":
        d = d or {}
        return cls(content=_str(d.get("content")), encoding=_str(d.get("encoding")), data=d)


# Module exports
__all__ = [
    "Gamemodes", "Categories", "Genres", "Languages", "MultiplayerModes", "WinConditions",
    "MODE_NAMES", "get_mode_name",
    "BEATMAP", "SCORE", "USER", "USEREVENT", "MATCH", "MATCHGAME", "MATCHSCORE", "REPLAY",
]
