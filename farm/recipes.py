from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from farm.errors import InvalidCraftableItem
from farm.resources import ResourceType, _parse_enum


class CraftableItem(IntEnum):
    WATERING_CAN_REFILL = 0
    FERTILIZER = 1
    COMPOST_BIN = 2
    SCARECROW = 3
    FENCE = 4
    SPRINKLER = 5
    ADVANCED_TOOL = 6


@dataclass(frozen=True)
class Recipe:
    item: CraftableItem
    inputs: tuple[tuple[ResourceType, int], ...]
    output_quantity: int
    # Seconds; 0 = instant.
    crafting_time: int
    description: str

    @property
    def is_instant(self) -> bool:
        return self.crafting_time == 0


RECIPES: dict[CraftableItem, Recipe] = {
    CraftableItem.WATERING_CAN_REFILL: Recipe(
        CraftableItem.WATERING_CAN_REFILL,
        inputs=((ResourceType.WOOD, 3), (ResourceType.FIBER, 2)),
        output_quantity=1,
        crafting_time=0,
        description="Refills watering can to 10 uses",
    ),
    CraftableItem.FERTILIZER: Recipe(
        CraftableItem.FERTILIZER,
        inputs=((ResourceType.FIBER, 5), (ResourceType.SEEDS, 3)),
        output_quantity=3,
        crafting_time=0,
        description="Creates 3 fertilizers for soil boosting",
    ),
    CraftableItem.COMPOST_BIN: Recipe(
        CraftableItem.COMPOST_BIN,
        inputs=((ResourceType.WOOD, 10), (ResourceType.STONE, 5)),
        output_quantity=1,
        crafting_time=3600,
        description="Generates 1 fertilizer per day automatically",
    ),
    CraftableItem.SCARECROW: Recipe(
        CraftableItem.SCARECROW,
        inputs=((ResourceType.WOOD, 8), (ResourceType.FIBER, 12)),
        output_quantity=1,
        crafting_time=1800,
        description="Protects crops from pests",
    ),
    CraftableItem.FENCE: Recipe(
        CraftableItem.FENCE,
        inputs=((ResourceType.WOOD, 15), (ResourceType.STONE, 8)),
        output_quantity=1,
        crafting_time=2700,
        description="Borders the farm",
    ),
    CraftableItem.SPRINKLER: Recipe(
        CraftableItem.SPRINKLER,
        inputs=((ResourceType.WOOD, 20), (ResourceType.STONE, 12), (ResourceType.FIBER, 5)),
        output_quantity=1,
        crafting_time=7200,
        description="Waters adjacent plots",
    ),
    CraftableItem.ADVANCED_TOOL: Recipe(
        CraftableItem.ADVANCED_TOOL,
        inputs=((ResourceType.WOOD, 5), (ResourceType.STONE, 3)),
        output_quantity=1,
        crafting_time=5400,
        description="Waters a 3x3 area",
    ),
}


def parse_craftable_item(raw: object) -> CraftableItem:
    """Return the CraftableItem for an id (0..6) or name."""
    return _parse_enum(raw, CraftableItem, InvalidCraftableItem)
