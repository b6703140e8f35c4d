"""Command surface: named commands dispatched against a keyed store.

dispatch() resolves the caller's identity, loads what the command needs,
runs the handler and saves the records back only when the handler
succeeded. A failing handler leaves storage untouched.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from farm import crafting, farming, irrigation
from farm.config import GameConfig
from farm.errors import IdentityMismatch, PlayerAlreadyExists, SeasonAlreadyInitialized, UnknownCommand
from farm.events import EventLog
from farm.ledger import PlayerLedger, new_ledger
from farm.season import SeasonClock, advance_day, set_season
from farm.storage import JsonStore, validate_owner_key


@dataclass
class CommandContext:
    caller: str
    now: int
    config: GameConfig
    events: EventLog
    ledger: PlayerLedger | None = None
    clock: SeasonClock | None = None


@dataclass(frozen=True)
class Command:
    name: str
    args: tuple[str, ...]
    run: Callable[[CommandContext, Sequence[Any]], Any]
    needs_player: bool = True
    needs_season: bool = False
    # False for previews: nothing is written back.
    writes: bool = True
    writes_season: bool = False

    @property
    def usage(self) -> str:
        return " ".join([self.name, *(a.upper() for a in self.args)])


def _init_player(ctx: CommandContext, args: Sequence[Any]) -> PlayerLedger:
    ctx.ledger = new_ledger(ctx.caller, ctx.now, ctx.config)
    return ctx.ledger


def _init_season(ctx: CommandContext, args: Sequence[Any]) -> SeasonClock:
    ctx.clock = SeasonClock(authority=ctx.caller)
    return ctx.clock


def _set_season(ctx: CommandContext, args: Sequence[Any]) -> SeasonClock:
    if ctx.clock.authority != ctx.caller:
        raise IdentityMismatch(f"{ctx.caller!r} is not the season authority")
    return set_season(ctx.clock, args[0], ctx.events)


COMMANDS: dict[str, Command] = {
    c.name: c
    for c in (
        Command("initPlayer", (), _init_player, needs_player=False),
        Command("initSeason", (), _init_season, needs_player=False, writes_season=True),
        Command(
            "plantCrop",
            ("tile_index", "crop_type"),
            lambda ctx, a: farming.plant_crop(ctx.ledger, ctx.clock, a[0], a[1], ctx.now, ctx.config, ctx.events),
            needs_season=True,
        ),
        Command(
            "harvestCrop",
            ("tile_index",),
            lambda ctx, a: farming.harvest_crop(ctx.ledger, a[0], ctx.now, ctx.config, ctx.events),
        ),
        Command("clearTile", ("tile_index",), lambda ctx, a: farming.clear_tile(ctx.ledger, a[0], ctx.now, ctx.events)),
        Command(
            "leaveFallow",
            ("tile_index",),
            lambda ctx, a: farming.leave_fallow(ctx.ledger, a[0], ctx.now, ctx.config, ctx.events),
        ),
        Command(
            "checkPatterns",
            ("plot_index",),
            lambda ctx, a: farming.check_patterns(ctx.ledger, a[0], ctx.now, ctx.events),
            writes=False,
        ),
        Command(
            "waterTile",
            ("plot_index",),
            lambda ctx, a: irrigation.water_tile(ctx.ledger, a[0], ctx.now, ctx.config, ctx.events),
        ),
        Command("useFertilizer", ("plot_index",), lambda ctx, a: irrigation.use_fertilizer(ctx.ledger, a[0], ctx.events)),
        Command(
            "refillWateringCan",
            (),
            lambda ctx, a: irrigation.refill_watering_can(ctx.ledger, ctx.now, ctx.events),
        ),
        Command(
            "buyTool",
            ("tool_type", "quantity"),
            lambda ctx, a: irrigation.buy_tool(ctx.ledger, a[0], a[1], ctx.now, ctx.events),
        ),
        Command(
            "decayWater",
            (),
            lambda ctx, a: irrigation.decay_water(ctx.ledger, ctx.now, ctx.config, ctx.events),
        ),
        Command(
            "gatherResource",
            ("resource_type", "amount"),
            lambda ctx, a: crafting.gather_resource(ctx.ledger, a[0], a[1], ctx.now, ctx.events),
        ),
        Command("craftItem", ("item_id",), lambda ctx, a: crafting.craft_item(ctx.ledger, a[0], ctx.now, ctx.events)),
        Command("claimCraftedItem", (), lambda ctx, a: crafting.claim_crafted_item(ctx.ledger, ctx.now, ctx.events)),
        Command("collectCompost", (), lambda ctx, a: crafting.collect_compost(ctx.ledger, ctx.now, ctx.events)),
        Command(
            "advanceDay",
            (),
            lambda ctx, a: advance_day(ctx.clock, ctx.config, ctx.events),
            needs_player=False,
            needs_season=True,
            writes_season=True,
        ),
        Command(
            "setSeason",
            ("season_index",),
            _set_season,
            needs_player=False,
            needs_season=True,
            writes_season=True,
        ),
    )
}


def get_command(name: str) -> Command:
    try:
        return COMMANDS[name]
    except KeyError:
        raise UnknownCommand(f"unknown command {name!r}") from None


def coerce_arg(raw: Any) -> Any:
    """Turn integer-looking strings into ints; everything else is passed through for the handler to validate."""
    if isinstance(raw, str):
        text = raw.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    return raw


def dispatch(
    store: JsonStore,
    caller: str,
    name: str,
    args: Sequence[Any] = (),
    now: int = 0,
    config: GameConfig | None = None,
    events: EventLog | None = None,
) -> Any:
    """Run one command for caller against store and return the handler's result."""
    command = get_command(name)
    if len(args) != len(command.args):
        raise UnknownCommand(f"usage: {command.usage}")
    validate_owner_key(caller)
    ctx = CommandContext(
        caller=caller,
        now=now,
        config=config or GameConfig(),
        events=events if events is not None else EventLog(),
    )

    if name == "initPlayer" and store.has_player(caller):
        raise PlayerAlreadyExists(f"player {caller!r} already exists")
    if name == "initSeason" and store.has_season():
        raise SeasonAlreadyInitialized()

    if command.needs_player:
        ledger = store.load_player(caller)
        if ledger.owner != caller:
            raise IdentityMismatch(f"record for {caller!r} is owned by {ledger.owner!r}")
        ctx.ledger = ledger
    if command.needs_season:
        ctx.clock = store.load_season()

    result = command.run(ctx, [coerce_arg(a) for a in args])

    if command.writes and ctx.ledger is not None:
        store.save_player(ctx.ledger)
    if command.writes_season:
        store.save_season(ctx.clock)
    return result
