import time
from dataclasses import dataclass

INITIAL_SCORE = 500
MOVE_COST = 1
RUN_BONUS = 100
RUN_UNDO_PENALTY = 99
SCORES_TO_KEEP = 10
# Scores saved before levels existed were all 4-suit games.
LEGACY_SUIT_COUNT = 4


def asInt(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


def today() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


@dataclass
class HighScoreEntry:
    suitCount: int
    score: int
    date: str
    playerName: str = ""

    def outranks(self, other: "HighScoreEntry") -> bool:
        if self.suitCount != other.suitCount:
            return self.suitCount > other.suitCount
        return self.score > other.score

    def toDict(self) -> dict:
        return {
            "suitCount": self.suitCount,
            "score": self.score,
            "date": self.date,
            "playerName": self.playerName,
        }

    @staticmethod
    def fromDict(data):
        if not isinstance(data, dict) or "score" not in data:
            return None
        suitCount = data.get("suitCount", data.get("level", LEGACY_SUIT_COUNT))
        playerName = data.get("playerName", data.get("player", ""))
        return HighScoreEntry(
            suitCount=asInt(suitCount, LEGACY_SUIT_COUNT),
            score=asInt(data.get("score")),
            date=str(data.get("date", "")),
            playerName="" if playerName is None else str(playerName),
        )


def highScoreCheck(entries: list, entry: HighScoreEntry, limit: int = SCORES_TO_KEEP) -> list:
    """
    Insert entry into a table ordered by (suit count desc, score desc).

    The entry goes in front of the first entry it outranks, so equal results
    keep the earlier game first. The table is truncated to limit.
    """
    out = list(entries)
    for index, current in enumerate(out):
        if entry.outranks(current):
            out.insert(index, entry)
            break
    else:
        out.append(entry)
    return out[:limit]


def winRate(played: int, won: int) -> float:
    if played <= 0:
        return 0.0
    return round(100.0 * won / played, 2)
