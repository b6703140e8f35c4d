from __future__ import annotations

import logging
from dataclasses import dataclass

from farm.errors import (
    CraftingInProgress,
    CraftingNotComplete,
    GatherAmountExceeded,
    GatherCooldownActive,
    InsufficientResources,
    NoCompostBins,
    NoCraftingInProgress,
    ResourceStackOverflow,
)
from farm.events import CompostCollected, CraftingCompleted, EventLog, ItemCrafted, ResourceGathered, emit
from farm.ledger import CraftingJob, PlayerLedger, checked_add
from farm.recipes import RECIPES, CraftableItem, Recipe, parse_craftable_item
from farm.resources import RESOURCES, SECONDS_PER_DAY, WATERING_CAN_MAX_USES, parse_resource_type

logger = logging.getLogger(__name__)

_STRUCTURES = {
    CraftableItem.COMPOST_BIN: "compost_bins",
    CraftableItem.SCARECROW: "scarecrows",
    CraftableItem.FENCE: "fences",
    CraftableItem.SPRINKLER: "sprinklers",
    CraftableItem.ADVANCED_TOOL: "advanced_tools",
}


@dataclass(frozen=True)
class CraftResult:
    item: CraftableItem
    instant: bool
    ready_at: int


def gather_resource(
    ledger: PlayerLedger,
    resource_type: object,
    amount: int,
    now: int,
    events: EventLog | None = None,
) -> int:
    """Gather wood, stone or fiber. Returns the new stack total."""
    resource = parse_resource_type(resource_type)
    spec = RESOURCES[resource]
    if not spec.gatherable:
        raise GatherAmountExceeded(f"{resource.field_name} cannot be gathered")
    if isinstance(amount, bool) or not isinstance(amount, int) or not 0 < amount <= spec.max_per_action:
        raise GatherAmountExceeded(
            f"{resource.field_name}: amount must be 1..{spec.max_per_action} (got {amount!r})"
        )
    last = ledger.last_gather_time.get(resource)
    if spec.cooldown_seconds > 0 and last is not None and now - last < spec.cooldown_seconds:
        raise GatherCooldownActive(
            f"{resource.field_name} can be gathered again at {last + spec.cooldown_seconds}"
        )
    total = checked_add(ledger.resource(resource), amount, spec.max_stack, ResourceStackOverflow)
    ledger.set_resource(resource, total)
    ledger.last_gather_time[resource] = now
    logger.debug("gathered %d %s (now %d)", amount, resource.field_name, total)
    emit(
        events,
        ResourceGathered(owner=ledger.owner, resource_type=int(resource), amount=amount, total=total, timestamp=now),
    )
    return total


def _consume_inputs(ledger: PlayerLedger, recipe: Recipe) -> None:
    # Check everything before deducting anything.
    missing = [
        f"{resource.field_name} {ledger.resource(resource)}/{needed}"
        for resource, needed in recipe.inputs
        if ledger.resource(resource) < needed
    ]
    if missing:
        raise InsufficientResources(f"{recipe.item.name.lower()} needs {', '.join(missing)}")
    for resource, needed in recipe.inputs:
        ledger.set_resource(resource, ledger.resource(resource) - needed)


def grant_crafted_item(ledger: PlayerLedger, item: CraftableItem, quantity: int, now: int) -> None:
    """Put a finished item into the ledger."""
    if item == CraftableItem.WATERING_CAN_REFILL:
        ledger.watering_can_uses = WATERING_CAN_MAX_USES
    elif item == CraftableItem.FERTILIZER:
        ledger.grant_fertilizer(quantity)
    else:
        if item == CraftableItem.COMPOST_BIN and ledger.compost_bins == 0:
            # Compost accrues from the moment the first bin exists.
            ledger.last_compost_collection = now
        ledger.grant_structure(_STRUCTURES[item], quantity)


def craft_item(ledger: PlayerLedger, item_id: object, now: int, events: EventLog | None = None) -> CraftResult:
    """Consume a recipe's inputs; instant recipes pay out at once, timed ones occupy the crafting slot."""
    item = parse_craftable_item(item_id)
    recipe = RECIPES[item]
    if ledger.crafting_job is not None and not recipe.is_instant:
        raise CraftingInProgress(f"item {ledger.crafting_job.item_id} ready at {ledger.crafting_job.ready_at}")
    _consume_inputs(ledger, recipe)
    if recipe.is_instant:
        grant_crafted_item(ledger, item, recipe.output_quantity, now)
        ready_at = now
    else:
        job = CraftingJob(item_id=int(item), started_at=now, duration=recipe.crafting_time)
        ledger.crafting_job = job
        ready_at = job.ready_at
    logger.debug("crafting %s (instant=%s, ready at %d)", item.name.lower(), recipe.is_instant, ready_at)
    emit(
        events,
        ItemCrafted(owner=ledger.owner, item_id=int(item), instant=recipe.is_instant, ready_at=ready_at, timestamp=now),
    )
    return CraftResult(item=item, instant=recipe.is_instant, ready_at=ready_at)


def claim_crafted_item(ledger: PlayerLedger, now: int, events: EventLog | None = None) -> CraftableItem:
    """Collect the finished timed craft and free the crafting slot."""
    job = ledger.crafting_job
    if job is None:
        raise NoCraftingInProgress()
    if not job.is_complete(now):
        raise CraftingNotComplete(f"ready at {job.ready_at} (now {now})")
    item = parse_craftable_item(job.item_id)
    quantity = RECIPES[item].output_quantity
    grant_crafted_item(ledger, item, quantity, now)
    ledger.crafting_job = None
    emit(events, CraftingCompleted(owner=ledger.owner, item_id=int(item), quantity=quantity, timestamp=now))
    return item


def collect_compost(ledger: PlayerLedger, now: int, events: EventLog | None = None) -> int:
    """Collect one fertilizer per compost bin per whole day since the last collection.

    Returns the fertilizer gained; a call within the same day changes nothing.
    """
    if ledger.compost_bins <= 0:
        raise NoCompostBins()
    days = max(0, now - ledger.last_compost_collection) // SECONDS_PER_DAY
    if days < 1:
        return 0
    gained = ledger.compost_bins * days
    ledger.grant_fertilizer(gained)
    ledger.last_compost_collection = now
    logger.debug("compost: %d bin(s) x %d day(s) = %d fertilizer", ledger.compost_bins, days, gained)
    emit(
        events,
        CompostCollected(
            owner=ledger.owner, bins=ledger.compost_bins, days=days, fertilizer_gained=gained, timestamp=now
        ),
    )
    return gained
