from engine.Core import GameEngine
from engine.Events import (
    CardFlipped,
    CardMoved,
    DealDisabled,
    GameEvent,
    GameWon,
    InvalidMove,
    NoMoreMoves,
    RunRemoved,
)
from engine.Tableau import pileKind
from frontend.view_model import AnimationEvent, CardView, GameViewModel, PileView


class EngineAdapter:
    """Bridges the engine state/events to a renderer-friendly model."""

    @staticmethod
    def snapshot(engine: GameEngine) -> GameViewModel:
        piles = []
        for idx, pile in enumerate(engine.tableau.piles):
            cards = tuple(
                CardView(
                    id=card.id,
                    suit=card.suit,
                    rank=card.rank,
                    face_up=card.faceUp,
                    draggable=engine.canDrag(card.id),
                )
                for card in pile
            )
            piles.append(PileView(index=idx, kind=pileKind(idx), cards=cards))
        return GameViewModel(
            score=engine.score,
            suit_count=engine.suitCount,
            playing=engine.playing,
            won=engine.isWon(),
            can_deal=engine.canDeal(),
            can_undo=engine.canUndo(),
            piles=tuple(piles),
        )

    @staticmethod
    def event_to_animation(event: GameEvent) -> AnimationEvent:
        if isinstance(event, CardMoved):
            return AnimationEvent(
                type="MOVE",
                payload={"card": event.cardId, "src": event.fromPile, "dest": event.toPile},
            )
        if isinstance(event, CardFlipped):
            return AnimationEvent(
                type="FLIP",
                payload={"card": event.cardId, "face_up": event.faceUp},
            )
        if isinstance(event, RunRemoved):
            return AnimationEvent(
                type="COMPLETE_SUIT",
                payload={"foundation": event.foundationPile, "cards": event.cardIds},
            )
        if isinstance(event, GameWon):
            return AnimationEvent(type="WIN", payload={"score": event.score})
        if isinstance(event, DealDisabled):
            return AnimationEvent(type="DEAL_DISABLED", payload={})
        if isinstance(event, (InvalidMove, NoMoreMoves)):
            return AnimationEvent(type="MESSAGE", payload={"text": event.reason})
        return AnimationEvent(type="UNKNOWN", payload={"event": type(event).__name__})
