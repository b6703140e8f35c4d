import pytest

from farm.crafting import claim_crafted_item, collect_compost, craft_item, gather_resource
from farm.errors import (
    CraftingInProgress,
    CraftingNotComplete,
    GatherAmountExceeded,
    GatherCooldownActive,
    InsufficientResources,
    InvalidCraftableItem,
    InvalidResourceType,
    NoCompostBins,
    NoCraftingInProgress,
    ResourceStackOverflow,
)
from farm.events import CompostCollected, CraftingCompleted, EventLog, ItemCrafted
from farm.ledger import new_ledger
from farm.recipes import CraftableItem
from farm.resources import ResourceType

DAY = 86400


def test_gather_resource_and_cooldown():
    """Wood can be gathered once per hour."""
    ledger = new_ledger("alice", 0)
    assert gather_resource(ledger, ResourceType.WOOD, 5, 0) == 15
    with pytest.raises(GatherCooldownActive):
        gather_resource(ledger, "wood", 1, 3000)
    assert ledger.wood == 15
    assert gather_resource(ledger, 0, 5, 3600) == 20
    assert ledger.last_gather_time[ResourceType.WOOD] == 3600


def test_cooldowns_are_per_resource():
    """Gathering stone does not block fiber."""
    ledger = new_ledger("alice", 0)
    gather_resource(ledger, ResourceType.STONE, 3, 0)
    assert gather_resource(ledger, ResourceType.FIBER, 8, 0) == 16
    with pytest.raises(GatherCooldownActive):
        gather_resource(ledger, ResourceType.FIBER, 1, 1799)
    gather_resource(ledger, ResourceType.FIBER, 1, 1800)


@pytest.mark.parametrize(
    "resource, amount, error",
    [
        (ResourceType.WOOD, 6, GatherAmountExceeded),
        (ResourceType.STONE, 0, GatherAmountExceeded),
        (ResourceType.SEEDS, 1, GatherAmountExceeded),
        (9, 1, InvalidResourceType),
        ("gold", 1, InvalidResourceType),
    ],
)
def test_gather_resource_rejects_bad_requests(resource, amount, error):
    """Bad gather requests fail before any cooldown is stamped."""
    ledger = new_ledger("alice", 0)
    with pytest.raises(error):
        gather_resource(ledger, resource, amount, 0)
    assert all(v is None for v in ledger.last_gather_time.values())


def test_seeds_are_not_gatherable():
    """Seeds only come from harvests."""
    ledger = new_ledger("alice", 0)
    with pytest.raises(GatherAmountExceeded, match="seeds cannot be gathered"):
        gather_resource(ledger, "seeds", 1, 0)
    assert ledger.seeds == 0


def test_gather_resource_overflow_leaves_state():
    """A gather that would pass the stack cap fails and does not start the cooldown."""
    ledger = new_ledger("alice", 0)
    ledger.wood = 997
    with pytest.raises(ResourceStackOverflow):
        gather_resource(ledger, ResourceType.WOOD, 5, 0)
    assert ledger.wood == 997
    assert ledger.last_gather_time[ResourceType.WOOD] is None
    assert gather_resource(ledger, ResourceType.WOOD, 2, 0) == 999


def test_instant_recipe():
    """Instant recipes pay out at once."""
    ledger = new_ledger("alice", 0)
    ledger.watering_can_uses = 0
    result = craft_item(ledger, CraftableItem.WATERING_CAN_REFILL, 10)
    assert result.instant
    assert ledger.watering_can_uses == 10
    assert (ledger.wood, ledger.fiber) == (7, 6)
    assert ledger.crafting_job is None


def test_recipe_inputs_are_all_or_nothing():
    """A recipe missing any input consumes nothing."""
    ledger = new_ledger("alice", 0)
    before = ledger.to_dict()
    with pytest.raises(InsufficientResources):
        craft_item(ledger, CraftableItem.SPRINKLER, 0)
    with pytest.raises(InsufficientResources):
        craft_item(ledger, CraftableItem.FERTILIZER, 0)
    assert ledger.to_dict() == before
    with pytest.raises(InvalidCraftableItem):
        craft_item(ledger, 7, 0)


def test_timed_recipe_flow():
    """A compost bin takes an hour, blocks the slot, and starts the compost clock when claimed."""
    ledger = new_ledger("alice", 0)
    events = EventLog()
    result = craft_item(ledger, CraftableItem.COMPOST_BIN, 0, events)
    assert not result.instant
    assert result.ready_at == 3600
    assert (ledger.wood, ledger.stone) == (0, 0)
    assert events.of_type(ItemCrafted)[0].ready_at == 3600

    ledger.wood = 20
    ledger.stone = 20
    with pytest.raises(CraftingInProgress):
        craft_item(ledger, CraftableItem.FENCE, 100)
    assert (ledger.wood, ledger.stone) == (20, 20)
    # Instant recipes still work while the slot is busy.
    craft_item(ledger, CraftableItem.WATERING_CAN_REFILL, 100)

    with pytest.raises(CraftingNotComplete):
        claim_crafted_item(ledger, 3599)
    assert claim_crafted_item(ledger, 3600, events) == CraftableItem.COMPOST_BIN
    assert ledger.compost_bins == 1
    assert ledger.crafting_job is None
    assert ledger.last_compost_collection == 3600
    assert events.of_type(CraftingCompleted)[0].quantity == 1
    with pytest.raises(NoCraftingInProgress):
        claim_crafted_item(ledger, 3600)


def test_collect_compost():
    """Each bin yields one fertilizer per whole day."""
    ledger = new_ledger("alice", 0)
    with pytest.raises(NoCompostBins):
        collect_compost(ledger, DAY)
    ledger.compost_bins = 2
    ledger.last_compost_collection = 1000
    events = EventLog()
    assert collect_compost(ledger, 1000 + DAY - 1, events) == 0
    assert ledger.fertilizer_count == 5
    assert ledger.last_compost_collection == 1000
    assert collect_compost(ledger, 1000 + 2 * DAY + 5, events) == 4
    assert ledger.fertilizer_count == 9
    assert ledger.last_compost_collection == 1000 + 2 * DAY + 5
    assert events.of_type(CompostCollected)[0].days == 2
