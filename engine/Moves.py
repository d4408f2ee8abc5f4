from engine.Errors import CorruptSaveData

LEGACY_DEAL_ID = -1
LEGACY_RUN_ID = -2


class MoveRecord:
    kind = ""

    def undo(self, core):
        pass

    def isAuto(self) -> bool:
        return False

    def toDict(self) -> dict:
        return {"kind": self.kind}

    def __eq__(self, other):
        return type(self) is type(other) and self.toDict() == other.toDict()

    def __repr__(self):
        return f"{type(self).__name__}({self.toDict()})"


class DealMove(MoveRecord):
    kind = "deal"

    def __init__(self, reservePile: int):
        self.reservePile = reservePile

    def undo(self, core):
        core.undoDeal(self)

    def toDict(self):
        return {"kind": self.kind, "reservePile": self.reservePile}


class RunRemovalMove(MoveRecord):
    kind = "runRemoval"

    def __init__(self, sourceColumn: int, foundationPile: int, turnedCardBeneath: bool):
        self.sourceColumn = sourceColumn
        self.foundationPile = foundationPile
        self.turnedCardBeneath = turnedCardBeneath

    def undo(self, core):
        core.undoRunRemoval(self)

    def isAuto(self):
        return True

    def toDict(self):
        return {
            "kind": self.kind,
            "sourceColumn": self.sourceColumn,
            "foundationPile": self.foundationPile,
            "turnedCardBeneath": self.turnedCardBeneath,
        }


class TransferMove(MoveRecord):
    kind = "transfer"

    def __init__(self, cardId: int, sourceColumn: int, targetPile: int, turnedCardBeneath: bool):
        self.cardId = cardId
        self.sourceColumn = sourceColumn
        self.targetPile = targetPile
        self.turnedCardBeneath = turnedCardBeneath

    def undo(self, core):
        core.undoTransfer(self)

    def toDict(self):
        return {
            "kind": self.kind,
            "cardId": self.cardId,
            "sourceColumn": self.sourceColumn,
            "targetPile": self.targetPile,
            "turnedCardBeneath": self.turnedCardBeneath,
        }


def _legacyMove(data: dict) -> MoveRecord:
    # Old saves stored {cardId, sourcePile, targetPile, resultedInTurn} with
    # negative card ids marking deals and run removals.
    cardId = int(data["cardId"])
    turned = data.get("resultedInTurn") is True
    if cardId == LEGACY_DEAL_ID:
        return DealMove(int(data["sourcePile"]))
    if cardId == LEGACY_RUN_ID:
        return RunRemovalMove(int(data["sourcePile"]), int(data["targetPile"]), turned)
    return TransferMove(cardId, int(data["sourcePile"]), int(data["targetPile"]), turned)


def moveFromDict(data) -> MoveRecord:
    if not isinstance(data, dict):
        raise CorruptSaveData(f"move record must be an object, got {type(data).__name__}")
    try:
        kind = data.get("kind")
        if kind is None:
            return _legacyMove(data)
        if kind == DealMove.kind:
            return DealMove(int(data["reservePile"]))
        if kind == RunRemovalMove.kind:
            return RunRemovalMove(
                int(data["sourceColumn"]),
                int(data["foundationPile"]),
                bool(data["turnedCardBeneath"]),
            )
        if kind == TransferMove.kind:
            return TransferMove(
                int(data["cardId"]),
                int(data["sourceColumn"]),
                int(data["targetPile"]),
                bool(data["turnedCardBeneath"]),
            )
    except (KeyError, TypeError, ValueError) as e:
        raise CorruptSaveData(f"malformed move record {data!r}") from e
    raise CorruptSaveData(f"unknown move kind {kind!r}")


class HistoryRecorder:
    """
    The undo log. Records are appended as moves happen and popped by undo;
    there is no redo.
    """

    def __init__(self, core, records=None):
        self.core = core
        self.lst = list(records or [])

    def __len__(self):
        return len(self.lst)

    def log(self, record: MoveRecord):
        self.lst.append(record)

    def last(self):
        if len(self.lst) == 0:
            return None
        return self.lst[-1]

    def undo(self) -> bool:
        """
        Reverse the newest player action.

        Automatic records (run removals) never stand alone: after reversing
        one, the record below it is popped and reversed too, until a player
        action has been undone.
        """
        if len(self.lst) == 0:
            return False
        record = self.lst.pop()
        record.undo(self.core)
        while record.isAuto() and len(self.lst) > 0:
            record = self.lst.pop()
            record.undo(self.core)
        return True

    def toList(self) -> list:
        return [record.toDict() for record in self.lst]
