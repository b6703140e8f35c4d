"""Domain events emitted by the farm handlers.

Events are plain frozen records appended to an EventLog. Handlers only write
them; nothing in the engine reads them back to make a decision.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Iterator, TypeVar


@dataclass(frozen=True)
class Event:
    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class CropPlanted(Event):
    owner: str
    tile_index: int
    crop_type: int
    season: int
    fertility: int
    rotation_bonus: int
    timestamp: int


@dataclass(frozen=True)
class CropHarvested(Event):
    owner: str
    tile_index: int
    crop_type: int
    base_yield: int
    final_yield: int
    points: int
    fertility_after: int
    timestamp: int


@dataclass(frozen=True)
class TileCleared(Event):
    owner: str
    tile_index: int
    crop_type: int | None
    timestamp: int


@dataclass(frozen=True)
class FallowRestored(Event):
    owner: str
    tile_index: int
    fertility_gained: int
    fertility_after: int
    timestamp: int


@dataclass(frozen=True)
class WaterApplied(Event):
    owner: str
    plot_index: int
    water_level: int
    uses_remaining: int
    timestamp: int


@dataclass(frozen=True)
class WaterDecayed(Event):
    owner: str
    days: int
    amount_per_day: int
    timestamp: int


@dataclass(frozen=True)
class FertilizerApplied(Event):
    owner: str
    plot_index: int
    fertility_after: int
    fertilizer_remaining: int


@dataclass(frozen=True)
class CanRefilled(Event):
    owner: str
    cost: int
    timestamp: int


@dataclass(frozen=True)
class ToolPurchased(Event):
    owner: str
    tool_type: int
    quantity: int
    cost: int
    timestamp: int


@dataclass(frozen=True)
class ResourceGathered(Event):
    owner: str
    resource_type: int
    amount: int
    total: int
    timestamp: int


@dataclass(frozen=True)
class ItemCrafted(Event):
    owner: str
    item_id: int
    instant: bool
    ready_at: int
    timestamp: int


@dataclass(frozen=True)
class CraftingCompleted(Event):
    owner: str
    item_id: int
    quantity: int
    timestamp: int


@dataclass(frozen=True)
class CompostCollected(Event):
    owner: str
    bins: int
    days: int
    fertilizer_gained: int
    timestamp: int


@dataclass(frozen=True)
class PatternDetected(Event):
    owner: str
    tile_index: int
    pattern_type: int
    multiplier: str


@dataclass(frozen=True)
class PatternsPreview(Event):
    owner: str
    tile_index: int
    pattern_types: tuple[int, ...]
    companion: int | None
    projected_yield: int


@dataclass(frozen=True)
class DayAdvanced(Event):
    days_passed: int
    current_season: int


@dataclass(frozen=True)
class SeasonChanged(Event):
    old_season: int
    new_season: int
    days_passed: int


E = TypeVar("E", bound=Event)


@dataclass
class EventLog:
    events: list[Event] = field(default_factory=list)

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, kind: type[E]) -> list[E]:
        return [e for e in self.events if isinstance(e, kind)]

    def __iter__(self) -> Iterator[Event]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)


def emit(events: EventLog | None, event: Event) -> None:
    """Append to events when a log was supplied."""
    if events is not None:
        events.emit(event)
