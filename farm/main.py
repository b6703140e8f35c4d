from __future__ import annotations

import dataclasses
import logging
import sys
import time
from enum import IntEnum
from fractions import Fraction

from farm.commands import COMMANDS, dispatch
from farm.config import load_game_config
from farm.errors import FarmError
from farm.events import EventLog
from farm.ledger import PlayerLedger
from farm.season import SeasonClock
from farm.storage import JsonStore


def _parse_args(argv: list[str]) -> tuple[list[str], int | None, bool, str | None]:
    """Parse CLI args into (positionals, now, verbose, config_path)."""
    now: int | None = None
    verbose = False
    config_path: str | None = None
    args: list[str] = []
    idx = 1
    while idx < len(argv):
        arg = argv[idx]
        if arg in ("--now", "--config"):
            if idx + 1 >= len(argv):
                raise ValueError(f"missing value for {arg}")
            if arg == "--now":
                now = int(argv[idx + 1])
            else:
                config_path = argv[idx + 1]
            idx += 2
            continue
        if arg.startswith("--now="):
            now = int(arg.split("=", 1)[1])
            idx += 1
            continue
        if arg.startswith("--config="):
            config_path = arg.split("=", 1)[1]
            idx += 1
            continue
        if arg in ("-v", "--verbose"):
            verbose = True
            idx += 1
            continue
        args.append(arg)
        idx += 1
    if len(args) < 3:
        raise ValueError("expected STATE_DIR CALLER COMMAND")
    return args, now, verbose, config_path


def _format_value(value: object) -> str:
    if isinstance(value, IntEnum):
        return value.name.lower()
    if isinstance(value, Fraction):
        return f"{float(value):.4f}"
    if isinstance(value, (tuple, list)):
        return "[" + ", ".join(_format_value(v) for v in value) + "]"
    return str(value)


def format_result(result: object) -> str:
    """Render a handler result as one human-readable line."""
    if result is None:
        return "ok"
    if isinstance(result, PlayerLedger):
        return (
            f"player={result.owner} coins={result.coins} wood={result.wood} stone={result.stone} "
            f"fiber={result.fiber} seeds={result.seeds} fertilizer={result.fertilizer_count} "
            f"can_uses={result.watering_can_uses}"
        )
    if isinstance(result, SeasonClock):
        return (
            f"season={result.season.label} day={result.days_passed} "
            f"day_of_season={result.day_of_season} authority={result.authority}"
        )
    if dataclasses.is_dataclass(result):
        parts = [f"{f.name}={_format_value(getattr(result, f.name))}" for f in dataclasses.fields(result)]
        return " ".join(parts)
    return _format_value(result)


def _usage() -> None:
    print("Usage: python -m farm.main STATE_DIR CALLER COMMAND [ARGS...] [--now TS] [--config PATH] [-v]")
    print("commands:")
    for command in COMMANDS.values():
        print(f"  {command.usage}")


def main() -> int:
    """Run one farm command against a JSON state directory."""
    try:
        args, now, verbose, config_path = _parse_args(sys.argv)
    except ValueError as exc:
        print(f"error: {exc}")
        _usage()
        return 2

    state_dir, caller, name, *command_args = args
    command = COMMANDS.get(name)
    if command is None or len(command_args) != len(command.args):
        print(f"error: unknown command or wrong arguments: {' '.join([name, *command_args])}")
        _usage()
        return 2

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if now is None:
        now = int(time.time())

    events = EventLog()
    try:
        config = load_game_config(config_path)
        result = dispatch(JsonStore(state_dir), caller, name, command_args, now=now, config=config, events=events)
    except FarmError as exc:
        print(f"error: {exc.code}: {exc}")
        return 1

    print(format_result(result))
    for event in events:
        fields = " ".join(f"{k}={v}" for k, v in event.to_dict().items() if k != "event")
        print(f"  event {event.name}: {fields}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
