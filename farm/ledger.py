from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from farm.config import GameConfig
from farm.errors import CapacityError, StorageError
from farm.grid import TILE_COUNT
from farm.resources import (
    COIN_CAP,
    FERTILIZER_CAP,
    PREMIUM_SEED_CAP,
    RESOURCES,
    STRUCTURE_CAP,
    WATERING_CAN_MAX_USES,
    ResourceType,
)

MIN_FERTILITY = 20
MAX_FERTILITY = 100

STARTING_FERTILIZER = 5
STARTING_RESOURCES = {
    ResourceType.WOOD: 10,
    ResourceType.STONE: 5,
    ResourceType.FIBER: 8,
    ResourceType.SEEDS: 0,
}

STRUCTURE_FIELDS = ("compost_bins", "scarecrows", "fences", "sprinklers", "advanced_tools")


def saturating_add(value: int, amount: int, cap: int) -> int:
    """Return value + amount, truncated at cap."""
    return min(value + amount, cap)


def saturating_sub(value: int, amount: int) -> int:
    """Return value - amount, never below zero."""
    return max(value - amount, 0)


def checked_add(value: int, amount: int, cap: int, error: type[CapacityError]) -> int:
    """Return value + amount, raising error instead of exceeding cap."""
    total = value + amount
    if total > cap:
        raise error(f"{error.default_message} ({value} + {amount} > {cap})")
    return total


def clamp_fertility(value: int) -> int:
    return max(MIN_FERTILITY, min(MAX_FERTILITY, value))


@dataclass
class Plot:
    crop: int | None = None
    planted_at: int = 0
    # 0 means never initialized.
    fertility: int = 0
    last_crop: int = 0
    restorative_bonus_used: bool = False
    planted_in_season: int | None = None
    fallow_since: int = 0

    @property
    def is_empty(self) -> bool:
        return self.crop is None

    def clear(self, now: int) -> None:
        self.crop = None
        self.planted_at = 0
        self.planted_in_season = None
        self.restorative_bonus_used = False
        self.fallow_since = now

    def to_dict(self) -> dict[str, Any]:
        return {
            "crop": self.crop,
            "planted_at": self.planted_at,
            "fertility": self.fertility,
            "last_crop": self.last_crop,
            "restorative_bonus_used": self.restorative_bonus_used,
            "planted_in_season": self.planted_in_season,
            "fallow_since": self.fallow_since,
        }

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "Plot":
        crop = raw.get("crop")
        season = raw.get("planted_in_season")
        return Plot(
            crop=None if not crop else int(crop),
            planted_at=int(raw.get("planted_at", 0)),
            fertility=int(raw.get("fertility", 0)),
            last_crop=int(raw.get("last_crop", 0)),
            restorative_bonus_used=bool(raw.get("restorative_bonus_used", False)),
            planted_in_season=None if season is None else int(season),
            fallow_since=int(raw.get("fallow_since", 0)),
        )


@dataclass(frozen=True)
class CraftingJob:
    item_id: int
    started_at: int
    duration: int

    @property
    def ready_at(self) -> int:
        return self.started_at + self.duration

    def is_complete(self, now: int) -> bool:
        return now >= self.ready_at


@dataclass
class PlayerLedger:
    owner: str
    plots: list[Plot] = field(default_factory=lambda: [Plot() for _ in range(TILE_COUNT)])
    water_levels: list[int] = field(default_factory=lambda: [0] * TILE_COUNT)
    # None means the plot was never watered.
    last_watered: list[int | None] = field(default_factory=lambda: [None] * TILE_COUNT)
    last_water_decay_check: int = 0
    watering_can_uses: int = 0
    fertilizer_count: int = 0
    premium_seeds: int = 0
    wood: int = 0
    stone: int = 0
    fiber: int = 0
    seeds: int = 0
    compost_bins: int = 0
    scarecrows: int = 0
    fences: int = 0
    sprinklers: int = 0
    advanced_tools: int = 0
    crafting_job: CraftingJob | None = None
    # None means the resource was never gathered.
    last_gather_time: dict[ResourceType, int | None] = field(
        default_factory=lambda: {r: None for r in ResourceType}
    )
    last_compost_collection: int = 0
    coins: int = 0

    def resource(self, resource: ResourceType) -> int:
        return getattr(self, resource.field_name)

    def set_resource(self, resource: ResourceType, value: int) -> None:
        setattr(self, resource.field_name, value)

    def grant_resource(self, resource: ResourceType, amount: int) -> int:
        """Add amount, truncating at the resource's stack cap. Returns the new total."""
        total = saturating_add(self.resource(resource), amount, RESOURCES[resource].max_stack)
        self.set_resource(resource, total)
        return total

    def grant_fertilizer(self, amount: int) -> None:
        self.fertilizer_count = saturating_add(self.fertilizer_count, amount, FERTILIZER_CAP)

    def grant_premium_seeds(self, amount: int) -> None:
        self.premium_seeds = saturating_add(self.premium_seeds, amount, PREMIUM_SEED_CAP)

    def grant_structure(self, name: str, amount: int) -> None:
        setattr(self, name, saturating_add(getattr(self, name), amount, STRUCTURE_CAP))

    def grant_coins(self, amount: int) -> None:
        self.coins = saturating_add(self.coins, amount, COIN_CAP)

    def to_dict(self) -> dict[str, Any]:
        job = self.crafting_job
        return {
            "owner": self.owner,
            "plots": [p.to_dict() for p in self.plots],
            "water_levels": list(self.water_levels),
            "last_watered": list(self.last_watered),
            "last_water_decay_check": self.last_water_decay_check,
            "watering_can_uses": self.watering_can_uses,
            "fertilizer_count": self.fertilizer_count,
            "premium_seeds": self.premium_seeds,
            "wood": self.wood,
            "stone": self.stone,
            "fiber": self.fiber,
            "seeds": self.seeds,
            **{name: getattr(self, name) for name in STRUCTURE_FIELDS},
            "crafting_job": None
            if job is None
            else {"item_id": job.item_id, "started_at": job.started_at, "duration": job.duration},
            "last_gather_time": {r.field_name: self.last_gather_time.get(r) for r in ResourceType},
            "last_compost_collection": self.last_compost_collection,
            "coins": self.coins,
        }

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "PlayerLedger":
        """Rebuild a ledger from to_dict() output."""
        try:
            plots = [Plot.from_dict(p) for p in raw["plots"]]
            water = [int(v) for v in raw["water_levels"]]
            watered = [None if v is None else int(v) for v in raw["last_watered"]]
            if not len(plots) == len(water) == len(watered) == TILE_COUNT:
                raise StorageError(f"ledger for {raw.get('owner')!r} does not hold {TILE_COUNT} plots")
            job_raw = raw.get("crafting_job")
            job = None
            if job_raw is not None:
                job = CraftingJob(
                    item_id=int(job_raw["item_id"]),
                    started_at=int(job_raw["started_at"]),
                    duration=int(job_raw["duration"]),
                )
            gather_raw = raw.get("last_gather_time", {})
            last_gather = {}
            for r in ResourceType:
                value = gather_raw.get(r.field_name)
                last_gather[r] = None if value is None else int(value)
            return PlayerLedger(
                owner=str(raw["owner"]),
                plots=plots,
                water_levels=water,
                last_watered=watered,
                last_water_decay_check=int(raw.get("last_water_decay_check", 0)),
                watering_can_uses=int(raw.get("watering_can_uses", 0)),
                fertilizer_count=int(raw.get("fertilizer_count", 0)),
                premium_seeds=int(raw.get("premium_seeds", 0)),
                wood=int(raw.get("wood", 0)),
                stone=int(raw.get("stone", 0)),
                fiber=int(raw.get("fiber", 0)),
                seeds=int(raw.get("seeds", 0)),
                compost_bins=int(raw.get("compost_bins", 0)),
                scarecrows=int(raw.get("scarecrows", 0)),
                fences=int(raw.get("fences", 0)),
                sprinklers=int(raw.get("sprinklers", 0)),
                advanced_tools=int(raw.get("advanced_tools", 0)),
                crafting_job=job,
                last_gather_time=last_gather,
                last_compost_collection=int(raw.get("last_compost_collection", 0)),
                coins=int(raw.get("coins", 0)),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"malformed ledger record: {exc}") from exc


def new_ledger(owner: str, now: int, config: GameConfig | None = None) -> PlayerLedger:
    """Return a fresh ledger with the starting inventory and fertile plots."""
    config = config or GameConfig()
    return PlayerLedger(
        owner=owner,
        plots=[Plot(fertility=config.player_fertility, fallow_since=now) for _ in range(TILE_COUNT)],
        water_levels=[config.starting_water_level] * TILE_COUNT,
        last_water_decay_check=now,
        watering_can_uses=WATERING_CAN_MAX_USES,
        fertilizer_count=STARTING_FERTILIZER,
        wood=STARTING_RESOURCES[ResourceType.WOOD],
        stone=STARTING_RESOURCES[ResourceType.STONE],
        fiber=STARTING_RESOURCES[ResourceType.FIBER],
        seeds=STARTING_RESOURCES[ResourceType.SEEDS],
        last_compost_collection=now,
    )
