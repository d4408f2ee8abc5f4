from dataclasses import dataclass


@dataclass(frozen=True)
class GameEvent:
    pass


@dataclass(frozen=True)
class CardMoved(GameEvent):
    cardId: int
    fromPile: int
    toPile: int


@dataclass(frozen=True)
class CardFlipped(GameEvent):
    cardId: int
    faceUp: bool


@dataclass(frozen=True)
class RunRemoved(GameEvent):
    foundationPile: int
    cardIds: tuple[int, ...]


@dataclass(frozen=True)
class GameWon(GameEvent):
    score: int


@dataclass(frozen=True)
class DealDisabled(GameEvent):
    pass


@dataclass(frozen=True)
class InvalidMove(GameEvent):
    reason: str


@dataclass(frozen=True)
class NoMoreMoves(GameEvent):
    reason: str
