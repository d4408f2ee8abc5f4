import json
import logging
from collections import Counter
from dataclasses import dataclass, field

from engine.Cards import DECK_SIZE, PACKS, RANKS, SUITS, Card
from engine.Errors import CorruptSaveData
from engine.Moves import DealMove, RunRemovalMove, moveFromDict
from engine.Scoring import INITIAL_SCORE, HighScoreEntry, asInt
from engine.Tableau import COLUMNS, PILE_COUNT, RUN_LENGTH, Tableau, isColumn, isFoundation, isReserve

LOGGER = logging.getLogger(__name__)

COPIES_PER_RANK = PACKS * len(SUITS)


@dataclass
class SavedGame:
    deck: list
    piles: list
    moves: list
    score: int = INITIAL_SCORE
    highScores: list = field(default_factory=list)
    playerName: str = ""
    statPlayed: int = 0
    statWon: int = 0


def encodeCard(card: Card) -> dict:
    return {"suit": card.suit, "rank": card.rank, "facingUp": card.faceUp}


def encodeDeck(deck) -> list:
    return [encodeCard(card) for card in deck]


def decodeDeck(rows) -> list:
    """
    Rebuild the 104 cards of a saved deck; a card's id is its position.
    :raise CorruptSaveData: wrong length, unknown suit or rank, or a rank
        count that no two-pack deck can have
    """
    if not isinstance(rows, list):
        raise CorruptSaveData(f"deck must be a list, got {type(rows).__name__}")
    if len(rows) != DECK_SIZE:
        raise CorruptSaveData(f"deck must hold {DECK_SIZE} cards, got {len(rows)}")
    deck = []
    for cardId, row in enumerate(rows):
        if not isinstance(row, dict):
            raise CorruptSaveData(f"card {cardId} is not an object")
        # "value" is the rank key of old saves
        rank = row.get("rank", row.get("value"))
        try:
            card = Card(cardId, row.get("suit"), rank)
        except ValueError as e:
            raise CorruptSaveData(f"card {cardId}: {e}") from e
        card.faceUp = row.get("facingUp") is True
        deck.append(card)
    counts = Counter(card.rank for card in deck)
    bad = [rank for rank in RANKS if counts[rank] != COPIES_PER_RANK]
    if bad:
        raise CorruptSaveData(f"deck has the wrong number of {', '.join(bad)}")
    return deck


def encodeGameString(deck) -> str:
    """The copy-paste code of a deal: compact JSON with spaces as @ and quotes as spaces."""
    text = json.dumps(encodeDeck(deck), separators=(",", ":"))
    return text.replace(" ", "@").replace('"', " ")


def decodeGameString(text: str) -> list:
    try:
        rows = json.loads(text.strip().replace(" ", '"').replace("@", " "))
    except (AttributeError, ValueError) as e:
        raise CorruptSaveData("game code is not readable") from e
    return decodeDeck(rows)


def _decodePiles(rawPiles, deck) -> list:
    if not isinstance(rawPiles, list) or len(rawPiles) != PILE_COUNT:
        raise CorruptSaveData(f"expected {PILE_COUNT} piles")
    seen = set()
    piles = []
    for idx, raw in enumerate(rawPiles):
        if not isinstance(raw, list):
            raise CorruptSaveData(f"pile {idx} is not a list")
        pile = []
        for cardId in raw:
            if not isinstance(cardId, int) or isinstance(cardId, bool) or not 0 <= cardId < len(deck):
                raise CorruptSaveData(f"pile {idx} holds unknown card {cardId!r}")
            if cardId in seen:
                raise CorruptSaveData(f"card {cardId} is in more than one pile")
            seen.add(cardId)
            pile.append(deck[cardId])
        piles.append(pile)
    if len(seen) != len(deck):
        raise CorruptSaveData(f"{len(deck) - len(seen)} cards are missing from the piles")
    return piles


def _checkMove(move):
    if isinstance(move, DealMove):
        ok = isReserve(move.reservePile)
    elif isinstance(move, RunRemovalMove):
        ok = isColumn(move.sourceColumn) and isFoundation(move.foundationPile)
    else:
        ok = (isColumn(move.sourceColumn) and isColumn(move.targetPile)
              and move.sourceColumn != move.targetPile)
    if not ok:
        raise CorruptSaveData(f"move {move!r} names the wrong kind of pile")


def _hideTop(tableau, idx, move):
    card = tableau.top(idx)
    if card is None or not card.faceUp:
        raise CorruptSaveData(f"move {move!r} turned a card that is not on top of pile {idx}")
    card.faceUp = False


def _checkMoves(moves, piles):
    """
    Undo the whole log on copies of the cards; every record has to find the
    cards it moved where it left them.
    """
    scratch = Tableau([[Card(c.id, c.suit, c.rank, c.faceUp) for c in pile] for pile in piles])
    for move in reversed(moves):
        _checkMove(move)
        if isinstance(move, DealMove):
            if len(scratch[move.reservePile]) != 0:
                raise CorruptSaveData(f"move {move!r} dealt from a reserve that still holds cards")
            for column in reversed(COLUMNS):
                card = scratch.top(column)
                if card is None:
                    raise CorruptSaveData(f"move {move!r} dealt onto an empty column {column}")
                scratch.transfer(column, len(scratch[column]) - 1, move.reservePile)
                card.faceUp = False
        elif isinstance(move, RunRemovalMove):
            foundation = scratch[move.foundationPile]
            if len(foundation) != RUN_LENGTH:
                raise CorruptSaveData(f"move {move!r} names a foundation without a run")
            if move.turnedCardBeneath:
                _hideTop(scratch, move.sourceColumn, move)
            scratch.transfer(move.foundationPile, 0, move.sourceColumn)
        else:
            if not scratch.contains(move.cardId):
                raise CorruptSaveData(f"move {move!r} names an unknown card")
            pileIdx, pos = scratch.locate(move.cardId)
            if pileIdx != move.targetPile:
                raise CorruptSaveData(f"move {move!r} lost track of card {move.cardId}")
            if move.turnedCardBeneath:
                _hideTop(scratch, move.sourceColumn, move)
            scratch.transfer(pileIdx, pos, move.sourceColumn)


def _decodeHighScores(rows) -> list:
    if not isinstance(rows, list):
        return []
    out = []
    for row in rows:
        entry = HighScoreEntry.fromDict(row)
        if entry is None:
            LOGGER.debug("dropping unreadable high score %r", row)
            continue
        out.append(entry)
    return out


def toRecord(engine) -> dict:
    return {
        "deck": encodeDeck(engine.deck),
        "piles": engine.tableau.pileIds(),
        "moves": engine.history.toList(),
        "score": engine.score,
        "highScores": [entry.toDict() for entry in engine.highScores],
        "playerName": engine.playerName,
        "statPlayed": engine.statPlayed,
        "statWon": engine.statWon,
    }


def fromRecord(record) -> SavedGame:
    if not isinstance(record, dict):
        raise CorruptSaveData("saved game must be an object")
    deck = decodeDeck(record.get("deck"))
    piles = _decodePiles(record.get("piles"), deck)
    rawMoves = record.get("moves", [])
    if not isinstance(rawMoves, list):
        raise CorruptSaveData("moves must be a list")
    moves = [moveFromDict(move) for move in rawMoves]
    _checkMoves(moves, piles)
    playerName = record.get("playerName", "")
    return SavedGame(
        deck=deck,
        piles=piles,
        moves=moves,
        score=asInt(record.get("score"), INITIAL_SCORE),
        highScores=_decodeHighScores(record.get("highScores")),
        playerName=playerName if isinstance(playerName, str) else "",
        statPlayed=max(0, asInt(record.get("statPlayed"))),
        statWon=max(0, asInt(record.get("statWon"))),
    )
