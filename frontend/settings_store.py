import configparser
import logging
from pathlib import Path

from engine.Cards import SUIT_COUNTS
from engine.Core import GameConfig
from engine.Scoring import SCORES_TO_KEEP

LOGGER = logging.getLogger(__name__)

SETTINGS_PATH = Path(__file__).with_name("settings.ini")
SECTION = "game"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
SLOT_COUNT = 3

DEFAULT_SETTINGS = {
    "suit_count": "4",
    "player_name": "",
    "scores_to_keep": str(SCORES_TO_KEEP),
    "save_slot": "1",
    "log_level": "WARNING",
}


def _as_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


def _sanitize(settings):
    data = dict(DEFAULT_SETTINGS)
    data.update({k: v for k, v in settings.items() if k in DEFAULT_SETTINGS})

    suit_count = _as_int(data["suit_count"], DEFAULT_SETTINGS["suit_count"])
    if suit_count not in SUIT_COUNTS:
        suit_count = int(DEFAULT_SETTINGS["suit_count"])
    data["suit_count"] = str(suit_count)

    data["player_name"] = str(data["player_name"]).strip()

    keep = _as_int(data["scores_to_keep"], DEFAULT_SETTINGS["scores_to_keep"])
    if keep < 1:
        keep = 1
    data["scores_to_keep"] = str(keep)

    slot = _as_int(data["save_slot"], DEFAULT_SETTINGS["save_slot"])
    if slot < 1:
        slot = 1
    if slot > SLOT_COUNT:
        slot = SLOT_COUNT
    data["save_slot"] = str(slot)

    level = str(data["log_level"]).strip().upper()
    if level not in LOG_LEVELS:
        level = DEFAULT_SETTINGS["log_level"]
    data["log_level"] = level
    return data


def load_settings():
    if not SETTINGS_PATH.exists():
        return dict(DEFAULT_SETTINGS)
    parser = configparser.ConfigParser()
    try:
        parser.read(SETTINGS_PATH, encoding="utf-8")
    except configparser.Error:
        LOGGER.warning("unreadable settings file %s, using defaults", SETTINGS_PATH, exc_info=True)
        return dict(DEFAULT_SETTINGS)
    if SECTION not in parser:
        return dict(DEFAULT_SETTINGS)
    return _sanitize(dict(parser[SECTION]))


def save_settings(settings):
    parser = configparser.ConfigParser()
    parser[SECTION] = _sanitize(settings)
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with SETTINGS_PATH.open("w", encoding="utf-8") as f:
        parser.write(f)


def build_config(settings, seed=None) -> GameConfig:
    data = _sanitize(settings)
    return GameConfig(
        suits=int(data["suit_count"]),
        seed=seed,
        scoresToKeep=int(data["scores_to_keep"]),
        playerName=data["player_name"],
    )
