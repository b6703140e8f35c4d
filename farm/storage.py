from __future__ import annotations

import json
import os
import re
from pathlib import Path

from farm.errors import InvalidOwnerKey, PlayerAlreadyExists, PlayerNotFound, SeasonNotInitialized, StorageError
from farm.ledger import PlayerLedger
from farm.season import SeasonClock

_OWNER_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


def validate_owner_key(owner: str) -> str:
    if not isinstance(owner, str) or not _OWNER_KEY.match(owner):
        raise InvalidOwnerKey(f"{InvalidOwnerKey.default_message} (got {owner!r})")
    return owner


class JsonStore:
    """
    Keyed JSON records under one directory:
    - players/<owner>.json, one ledger per identity
    - season.json, the shared season clock
    Each write goes to a temp file first and is moved into place with os.replace.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _player_path(self, owner: str) -> Path:
        return self.root / "players" / f"{validate_owner_key(owner)}.json"

    @property
    def season_path(self) -> Path:
        return self.root / "season.json"

    def _read(self, path: Path) -> dict:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"cannot read {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise StorageError(f"{path} does not hold a JSON object")
        return raw

    def _write(self, path: Path, data: dict) -> None:
        text = json.dumps(data, indent=2, sort_keys=True)
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except OSError as exc:
            raise StorageError(f"cannot write {path}: {exc}") from exc

    def has_player(self, owner: str) -> bool:
        return self._player_path(owner).exists()

    def load_player(self, owner: str) -> PlayerLedger:
        path = self._player_path(owner)
        if not path.exists():
            raise PlayerNotFound(f"no player record for {owner!r}")
        return PlayerLedger.from_dict(self._read(path))

    def save_player(self, ledger: PlayerLedger) -> None:
        self._write(self._player_path(ledger.owner), ledger.to_dict())

    def create_player(self, ledger: PlayerLedger) -> None:
        if self.has_player(ledger.owner):
            raise PlayerAlreadyExists(f"player {ledger.owner!r} already exists")
        self.save_player(ledger)

    def has_season(self) -> bool:
        return self.season_path.exists()

    def load_season(self) -> SeasonClock:
        if not self.has_season():
            raise SeasonNotInitialized()
        return SeasonClock.from_dict(self._read(self.season_path))

    def save_season(self, clock: SeasonClock) -> None:
        self._write(self.season_path, clock.to_dict())
