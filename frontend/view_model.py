from dataclasses import dataclass


@dataclass(frozen=True)
class CardView:
    id: int
    suit: str
    rank: str
    face_up: bool
    draggable: bool


@dataclass(frozen=True)
class PileView:
    index: int
    kind: str
    cards: tuple[CardView, ...]


@dataclass(frozen=True)
class GameViewModel:
    score: int
    suit_count: int
    playing: bool
    won: bool
    can_deal: bool
    can_undo: bool
    piles: tuple[PileView, ...]


@dataclass(frozen=True)
class AnimationEvent:
    type: str
    payload: dict
