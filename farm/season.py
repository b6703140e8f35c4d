from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from farm.config import GameConfig
from farm.errors import InvalidSeasonIndex, StorageError
from farm.events import DayAdvanced, EventLog, SeasonChanged, emit

logger = logging.getLogger(__name__)

SEASON_COUNT = 4


class Season(IntEnum):
    SPRING = 0
    SUMMER = 1
    FALL = 2
    WINTER = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


def parse_season_index(raw: object) -> Season:
    """Return the Season for an index 0..3 (or a digit string / season name)."""
    if isinstance(raw, Season):
        return raw
    if isinstance(raw, str):
        key = raw.strip()
        if not key.isdigit():
            try:
                return Season[key.upper()]
            except KeyError:
                raise InvalidSeasonIndex(f"Unknown season {raw!r}") from None
        raw = int(key)
    if isinstance(raw, bool) or not isinstance(raw, int) or not 0 <= raw < SEASON_COUNT:
        raise InvalidSeasonIndex(f"{InvalidSeasonIndex.default_message} (got {raw!r})")
    return Season(raw)


@dataclass
class SeasonClock:
    current_season: int = Season.SPRING
    days_passed: int = 0
    season_start_day: int = 0
    # Identity allowed to force the season.
    authority: str = ""

    @property
    def season(self) -> Season:
        return Season(self.current_season)

    @property
    def day_of_season(self) -> int:
        """Zero-based day within the current season."""
        return self.days_passed - self.season_start_day

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_season": int(self.current_season),
            "days_passed": self.days_passed,
            "season_start_day": self.season_start_day,
            "authority": self.authority,
        }

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "SeasonClock":
        try:
            clock = SeasonClock(
                current_season=int(raw.get("current_season", 0)),
                days_passed=int(raw.get("days_passed", 0)),
                season_start_day=int(raw.get("season_start_day", 0)),
                authority=str(raw.get("authority", "")),
            )
        except (TypeError, ValueError) as exc:
            raise StorageError(f"malformed season record: {exc}") from exc
        if not 0 <= clock.current_season < SEASON_COUNT or clock.days_passed < clock.season_start_day:
            raise StorageError(f"inconsistent season record: {raw!r}")
        return clock


def season_length(season: int, config: GameConfig | None = None) -> int:
    """Return the configured number of days in a season."""
    config = config or GameConfig()
    return config.season_lengths[season]


def advance_day(clock: SeasonClock, config: GameConfig | None = None, events: EventLog | None = None) -> SeasonClock:
    """Move the clock forward one day, wrapping to the next season when it is over."""
    clock.days_passed += 1
    if clock.day_of_season >= season_length(clock.current_season, config):
        old = clock.current_season
        clock.current_season = (old + 1) % SEASON_COUNT
        clock.season_start_day = clock.days_passed
        logger.debug("season changed %s -> %s on day %d", Season(old).label, clock.season.label, clock.days_passed)
        emit(events, SeasonChanged(old_season=int(old), new_season=int(clock.current_season), days_passed=clock.days_passed))
    emit(events, DayAdvanced(days_passed=clock.days_passed, current_season=int(clock.current_season)))
    return clock


def set_season(clock: SeasonClock, index: object, events: EventLog | None = None) -> SeasonClock:
    """Force the current season; the new season starts today."""
    season = parse_season_index(index)
    old = clock.current_season
    clock.current_season = season
    clock.season_start_day = clock.days_passed
    logger.debug("season forced to %s on day %d", season.label, clock.days_passed)
    emit(events, SeasonChanged(old_season=int(old), new_season=int(season), days_passed=clock.days_passed))
    return clock
