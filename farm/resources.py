from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from farm.errors import InvalidResourceType, InvalidToolType

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

WATERING_CAN_MAX_USES = 10
FERTILIZER_CAP = 65535
PREMIUM_SEED_CAP = 65535
STRUCTURE_CAP = 255
COIN_CAP = 2**64 - 1
MAX_WATER = 100


class ResourceType(IntEnum):
    WOOD = 0
    STONE = 1
    FIBER = 2
    SEEDS = 3

    @property
    def field_name(self) -> str:
        """Name of the PlayerLedger counter that stores this resource."""
        return self.name.lower()


@dataclass(frozen=True)
class ResourceSpec:
    resource: ResourceType
    max_stack: int
    max_per_action: int
    # 0 means the resource has no gather cooldown.
    cooldown_seconds: int

    @property
    def gatherable(self) -> bool:
        return self.max_per_action > 0


RESOURCES: dict[ResourceType, ResourceSpec] = {
    ResourceType.WOOD: ResourceSpec(ResourceType.WOOD, max_stack=999, max_per_action=5, cooldown_seconds=SECONDS_PER_HOUR),
    ResourceType.STONE: ResourceSpec(ResourceType.STONE, max_stack=999, max_per_action=3, cooldown_seconds=SECONDS_PER_HOUR),
    ResourceType.FIBER: ResourceSpec(ResourceType.FIBER, max_stack=500, max_per_action=8, cooldown_seconds=1800),
    # Seeds only come from harvests and pattern bonuses.
    ResourceType.SEEDS: ResourceSpec(ResourceType.SEEDS, max_stack=500, max_per_action=0, cooldown_seconds=0),
}


class ToolType(IntEnum):
    WATERING_CAN = 0
    FERTILIZER = 1
    PREMIUM_SEEDS = 2


@dataclass(frozen=True)
class ToolConfig:
    tool: ToolType
    water_amount: int
    fertility_boost: int
    cost_points: int


TOOLS: dict[ToolType, ToolConfig] = {
    ToolType.WATERING_CAN: ToolConfig(ToolType.WATERING_CAN, water_amount=50, fertility_boost=0, cost_points=20),
    ToolType.FERTILIZER: ToolConfig(ToolType.FERTILIZER, water_amount=0, fertility_boost=20, cost_points=10),
    ToolType.PREMIUM_SEEDS: ToolConfig(ToolType.PREMIUM_SEEDS, water_amount=0, fertility_boost=0, cost_points=15),
}


def _parse_enum(raw: object, enum_cls, error):
    if isinstance(raw, enum_cls):
        return raw
    if isinstance(raw, str):
        key = raw.strip()
        if not key.isdigit():
            try:
                return enum_cls[key.upper().replace("-", "_").replace(" ", "_")]
            except KeyError:
                raise error(f"{error.default_message} {raw!r}") from None
        raw = int(key)
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise error(f"{error.default_message} {raw!r}")
    try:
        return enum_cls(raw)
    except ValueError:
        raise error(f"{error.default_message} {raw!r}") from None


def parse_resource_type(raw: object) -> ResourceType:
    """Return the ResourceType for an id (0..3) or name."""
    return _parse_enum(raw, ResourceType, InvalidResourceType)


def parse_tool_type(raw: object) -> ToolType:
    """Return the ToolType for an id (0..2) or name."""
    return _parse_enum(raw, ToolType, InvalidToolType)
