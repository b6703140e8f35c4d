from __future__ import annotations

import logging
from dataclasses import dataclass

from farm.config import GameConfig
from farm.errors import (
    InsufficientFertilizer,
    InsufficientPoints,
    InsufficientToolUses,
    InvalidPlotIndex,
    InvalidQuantity,
    WateringTooFrequent,
)
from farm.events import CanRefilled, EventLog, FertilizerApplied, ToolPurchased, WaterApplied, WaterDecayed, emit
from farm.grid import validate_index
from farm.ledger import PlayerLedger, clamp_fertility, saturating_add, saturating_sub
from farm.resources import MAX_WATER, SECONDS_PER_DAY, TOOLS, WATERING_CAN_MAX_USES, ToolType, parse_tool_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseResult:
    tool: ToolType
    quantity: int
    cost: int


def water_tile(
    ledger: PlayerLedger,
    plot_index: int,
    now: int,
    config: GameConfig | None = None,
    events: EventLog | None = None,
) -> int:
    """Pour one watering-can use onto a plot. Returns the new water level."""
    config = config or GameConfig()
    validate_index(plot_index, InvalidPlotIndex)
    if ledger.watering_can_uses <= 0:
        raise InsufficientToolUses()
    last = ledger.last_watered[plot_index]
    if last is not None and now - last < config.watering_cooldown:
        raise WateringTooFrequent(
            f"plot {plot_index} can be watered again at {last + config.watering_cooldown}"
        )
    amount = TOOLS[ToolType.WATERING_CAN].water_amount
    level = saturating_add(ledger.water_levels[plot_index], amount, MAX_WATER)
    ledger.water_levels[plot_index] = level
    ledger.last_watered[plot_index] = now
    ledger.watering_can_uses = saturating_sub(ledger.watering_can_uses, 1)
    logger.debug("watered plot %d to %d (%d uses left)", plot_index, level, ledger.watering_can_uses)
    emit(
        events,
        WaterApplied(
            owner=ledger.owner,
            plot_index=plot_index,
            water_level=level,
            uses_remaining=ledger.watering_can_uses,
            timestamp=now,
        ),
    )
    return level


def use_fertilizer(ledger: PlayerLedger, plot_index: int, events: EventLog | None = None) -> int:
    """Spend one fertilizer on a plot. Returns the new fertility."""
    validate_index(plot_index, InvalidPlotIndex)
    if ledger.fertilizer_count <= 0:
        raise InsufficientFertilizer()
    plot = ledger.plots[plot_index]
    plot.fertility = clamp_fertility(plot.fertility + TOOLS[ToolType.FERTILIZER].fertility_boost)
    ledger.fertilizer_count -= 1
    emit(
        events,
        FertilizerApplied(
            owner=ledger.owner,
            plot_index=plot_index,
            fertility_after=plot.fertility,
            fertilizer_remaining=ledger.fertilizer_count,
        ),
    )
    return plot.fertility


def _spend_coins(ledger: PlayerLedger, cost: int) -> None:
    if ledger.coins < cost:
        raise InsufficientPoints(f"need {cost} coins, have {ledger.coins}")
    ledger.coins -= cost


def buy_tool(
    ledger: PlayerLedger,
    tool_type: object,
    quantity: int,
    now: int,
    events: EventLog | None = None,
) -> PurchaseResult:
    """Buy tools with coins. A watering can is a single item, so buying one resets its uses."""
    tool = parse_tool_type(tool_type)
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantity(f"{InvalidQuantity.default_message} (got {quantity!r})")
    cost = TOOLS[tool].cost_points * quantity
    _spend_coins(ledger, cost)
    if tool == ToolType.WATERING_CAN:
        ledger.watering_can_uses = WATERING_CAN_MAX_USES
    elif tool == ToolType.FERTILIZER:
        ledger.grant_fertilizer(quantity)
    else:
        ledger.grant_premium_seeds(quantity)
    logger.debug("bought %d x %s for %d coins", quantity, tool.name.lower(), cost)
    emit(events, ToolPurchased(owner=ledger.owner, tool_type=int(tool), quantity=quantity, cost=cost, timestamp=now))
    return PurchaseResult(tool=tool, quantity=quantity, cost=cost)


def refill_watering_can(ledger: PlayerLedger, now: int, events: EventLog | None = None) -> int:
    """Pay the watering can price once and restore it to full uses. Returns the cost."""
    cost = TOOLS[ToolType.WATERING_CAN].cost_points
    _spend_coins(ledger, cost)
    ledger.watering_can_uses = WATERING_CAN_MAX_USES
    emit(events, CanRefilled(owner=ledger.owner, cost=cost, timestamp=now))
    return cost


def decay_water(
    ledger: PlayerLedger,
    now: int,
    config: GameConfig | None = None,
    events: EventLog | None = None,
) -> int:
    """Evaporate water_decay_per_day from every plot for each whole day since the last check.

    Returns the number of days applied; 0 leaves the ledger untouched.
    """
    config = config or GameConfig()
    days = max(0, now - ledger.last_water_decay_check) // SECONDS_PER_DAY
    if days < 1:
        return 0
    loss = days * config.water_decay_per_day
    ledger.water_levels = [saturating_sub(level, loss) for level in ledger.water_levels]
    ledger.last_water_decay_check = now
    logger.debug("water decayed %d over %d day(s)", loss, days)
    emit(events, WaterDecayed(owner=ledger.owner, days=days, amount_per_day=config.water_decay_per_day, timestamp=now))
    return days
