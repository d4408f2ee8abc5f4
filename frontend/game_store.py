import json
import logging
from pathlib import Path

from engine.Core import GameEngine

LOGGER = logging.getLogger(__name__)

SLOT_COUNT = 3
SAVE_PREFIX = "savegame_slot"
SAVE_SUFFIX = ".json"


def _slot_path(slot: int) -> Path:
    return Path(__file__).with_name(f"{SAVE_PREFIX}{slot}{SAVE_SUFFIX}")


def _valid_slot(slot: int) -> int:
    try:
        slot_int = int(slot)
    except (TypeError, ValueError):
        slot_int = 1
    if slot_int < 1:
        slot_int = 1
    if slot_int > SLOT_COUNT:
        slot_int = SLOT_COUNT
    return slot_int


def has_saved_game(slot: int = 1) -> bool:
    path = _slot_path(_valid_slot(slot))
    return path.exists() and path.is_file()


def save_record(record: dict, slot: int = 1) -> bool:
    path = _slot_path(_valid_slot(slot))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(record, ensure_ascii=False), encoding="utf-8")
        return True
    except (OSError, TypeError, ValueError):
        LOGGER.warning("failed to save game to %s", path, exc_info=True)
        return False


def save_game(engine: GameEngine, slot: int = 1) -> bool:
    return save_record(engine.toRecord(), slot)


def load_record(slot: int = 1) -> dict | None:
    path = _slot_path(_valid_slot(slot))
    if not path.exists() or not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        LOGGER.warning("failed to read saved game %s", path, exc_info=True)
        return None
    if not isinstance(data, dict):
        LOGGER.warning("saved game %s is not an object", path)
        return None
    return data


def clear_game(slot: int = 1) -> bool:
    path = _slot_path(_valid_slot(slot))
    try:
        path.unlink(missing_ok=True)
        return True
    except OSError:
        LOGGER.warning("failed to remove saved game %s", path, exc_info=True)
        return False


def list_slot_status() -> list[dict]:
    rows = []
    for slot in range(1, SLOT_COUNT + 1):
        path = _slot_path(slot)
        exists = path.exists() and path.is_file()
        rows.append({"slot": slot, "exists": exists, "path": str(path.name)})
    return rows
