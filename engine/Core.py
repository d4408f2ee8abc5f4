import logging
import random

from engine import Serializer
from engine.Cards import buildDeck, countSuits
from engine.Errors import CorruptSaveData, InvariantViolation
from engine.Events import CardFlipped, CardMoved, DealDisabled, GameWon, InvalidMove, NoMoreMoves, RunRemoved
from engine.Interface import Interface
from engine.Moves import DealMove, HistoryRecorder, RunRemovalMove, TransferMove
from engine.Scoring import (
    INITIAL_SCORE,
    MOVE_COST,
    RUN_BONUS,
    RUN_UNDO_PENALTY,
    SCORES_TO_KEEP,
    HighScoreEntry,
    highScoreCheck,
    today,
)
from engine.Tableau import COLUMNS, PILE_COUNT, RUN_LENGTH, Tableau, dealPiles, isColumn

LOGGER = logging.getLogger(__name__)


class GameConfig:
    def __init__(self, suits=4, seed=None, scoresToKeep=SCORES_TO_KEEP, playerName=""):
        self.suits = suits
        self.seed = seed
        self.scoresToKeep = scoresToKeep
        self.playerName = playerName

    def makeRng(self):
        if self.seed is None:
            return random.Random()
        return random.Random(self.seed)


class GameEngine:
    """
    ask*** : commands issued by the player, rejected with an InvalidMove event when illegal.
    do*** : actual operation, no checking.
    undo*** : reverse one logged move record, called back from the history.

    Every command clears `events`, fills it in order and passes it to the
    interface when done. Commands that change the game hand the new record to
    the persistence callback.
    """

    def __init__(self, config: GameConfig = None):
        self.config = config if config is not None else GameConfig()
        self.interface = Interface()
        self.persistence = None
        self.rng = self.config.makeRng()  # every game of this engine draws from it

        self.deck = []  # all cards, indexed by id
        self.tableau = Tableau([[] for _ in range(PILE_COUNT)])
        self.history = HistoryRecorder(self)
        self.score = INITIAL_SCORE
        self.suitCount = self.config.suits
        self.playing = False
        self.dealDisabled = False

        self.highScores = []
        self.playerName = self.config.playerName
        self.statPlayed = 0
        self.statWon = 0

        self.events = []

    def registerInterface(self, interface):
        self.interface = interface
        interface.core = self

    def registerPersistence(self, callback):
        """
        :param callback: called with the serialized record after every change
        """
        self.persistence = callback

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def newGame(self, suitCount=None) -> bool:
        if suitCount is None:
            suitCount = self.config.suits
        deck = buildDeck(suitCount, self.rng)
        self.events = []
        if self.playing:
            LOGGER.info("abandoning the game in progress")
            self.statPlayed += 1
        self._setUp(deck, dealPiles(deck))
        LOGGER.debug("new %d-suit game", self.suitCount)
        self.interface.onStart()
        self._finishCommand(True)
        return True

    def askDeal(self) -> bool:
        self.events = []
        if self.isWon():
            return self._reject("The game is over")
        if len(self.tableau.emptyColumns()) > 0:
            return self._reject("You cannot deal when there are empty spaces")
        reserve = self.tableau.dealableReserve()
        if reserve < 0:
            self._disableDeal()
            return self._reject("No cards left to deal")
        self.doDeal(reserve)
        self._record(DealMove(reserve))
        if self.tableau.dealableReserve() < 0:
            self._disableDeal()
        self.doRemoveRuns()
        self._finishCommand(True)
        return True

    def askMove(self, cardId: int, targetPile: int) -> bool:
        self.events = []
        if self.isWon():
            return self._reject("The game is over")
        if not self.tableau.contains(cardId):
            return self._reject(f"There is no card {cardId}")
        if not isColumn(targetPile):
            return self._reject("Cards can only be moved onto a column")
        src, pos = self.tableau.locate(cardId)
        card = self.tableau[src][pos]
        if not isColumn(src):
            return self._reject("Only cards in a column can be moved")
        if not card.faceUp:
            return self._reject("Face-down cards cannot be moved")
        if src == targetPile:
            return self._reject("The card is already on that column")
        top = self.tableau.top(targetPile)
        if top is not None and not top.suitableAsBaseFor(card):
            return self._reject(f"{card.rank} cannot be placed on {top.rank}")
        self.doTransfer(src, pos, targetPile)
        self.doRemoveRuns()
        self._finishCommand(True)
        return True

    def askUndo(self) -> bool:
        self.events = []
        if self.isWon():
            return self._reject("The game is over")
        if not self.history.undo():
            LOGGER.debug("nothing to undo")
            self._emit(NoMoreMoves("No more moves to undo"))
            self._finishCommand(False)
            return False
        self._finishCommand(True)
        return True

    def restore(self, deckRows) -> bool:
        """Deal a saved deck again from its starting position."""
        return self._restoreDeck(Serializer.decodeDeck, deckRows)

    def restoreFromString(self, code: str) -> bool:
        return self._restoreDeck(Serializer.decodeGameString, code)

    def loadRecord(self, record) -> bool:
        """Resume a game from a persistence record, falling back to a fresh game when it is corrupt."""
        self.events = []
        try:
            saved = Serializer.fromRecord(record)
        except CorruptSaveData:
            LOGGER.warning("saved game is corrupt, starting a fresh game", exc_info=True)
            self._startFresh()
            return False
        self._setUp(saved.deck, saved.piles, saved.moves, saved.score)
        self.highScores = saved.highScores
        self.playerName = saved.playerName
        self.statPlayed = saved.statPlayed
        self.statWon = saved.statWon
        self.playing = len(saved.moves) > 0 and not self.isWon()
        LOGGER.debug("resumed a %d-suit game with %d moves", self.suitCount, len(saved.moves))
        self.interface.onStart()
        self._finishCommand(False)
        return True

    def loadPosition(self, piles, score=INITIAL_SCORE):
        """
        Start from an arbitrary arrangement of cards.
        :param piles: 23 lists of cards whose ids run from 0 without gaps
        :param score:
        """
        self.events = []
        deck = sorted((card for pile in piles for card in pile), key=lambda card: card.id)
        self._setUp(deck, piles, score=score)
        self.interface.onStart()

    def setPlayerName(self, name: str):
        self.playerName = name
        for entry in self.highScores:
            if entry.playerName == "":
                entry.playerName = name
        self._persist()

    def resetHighScores(self):
        self.highScores = []
        self.statPlayed = 0
        self.statWon = 0
        self._persist()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def card(self, cardId: int):
        return self.deck[cardId]

    def isWon(self) -> bool:
        return self.tableau.isComplete()

    def canDeal(self) -> bool:
        return (not self.isWon()
                and len(self.tableau.emptyColumns()) == 0
                and self.tableau.dealableReserve() >= 0)

    def canUndo(self) -> bool:
        return len(self.history) > 0 and not self.isWon()

    def canDrag(self, cardId: int) -> bool:
        """A card can be picked up when it heads a face-up same-suit run at the top of a column."""
        if not self.tableau.contains(cardId):
            return False
        src, pos = self.tableau.locate(cardId)
        if not isColumn(src):
            return False
        pile = self.tableau[src]
        if not pile[pos].faceUp:
            return False
        for i in range(pos, len(pile) - 1):
            if not pile[i].suitableAsSequenceFor(pile[i + 1]):
                return False
        return True

    def toRecord(self) -> dict:
        return Serializer.toRecord(self)

    def gameString(self) -> str:
        return Serializer.encodeGameString(self.deck)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def doDeal(self, reserve: int):
        for column in COLUMNS:
            card = self.tableau.top(reserve)
            self.tableau.transfer(reserve, len(self.tableau[reserve]) - 1, column)
            self._emit(CardMoved(card.id, reserve, column))
            card.faceUp = True
            self._emit(CardFlipped(card.id, True))

    def doTransfer(self, src: int, pos: int, dest: int):
        cards = self.tableau.transfer(src, pos, dest)
        for card in cards:
            self._emit(CardMoved(card.id, src, dest))
        turned = self._revealTop(src)
        self._record(TransferMove(cards[0].id, src, dest, turned))
        self.score -= MOVE_COST

    def doRemoveRuns(self) -> bool:
        """
        Move every completed King to Ace run sitting on top of a column to a
        foundation.
        :return: whether the game is still in progress
        """
        removed = 0
        for column in COLUMNS:
            if not self.tableau.hasCompleteRun(column):
                continue
            foundation = self.tableau.emptyFoundation()
            if foundation < 0:
                LOGGER.error("column %d holds a complete run but no foundation is empty", column)
                raise InvariantViolation(f"no empty foundation for the run on column {column}")
            pile = self.tableau[column]
            cards = self.tableau.transfer(column, len(pile) - RUN_LENGTH, foundation)
            self.score += RUN_BONUS
            self._emit(RunRemoved(foundation, tuple(card.id for card in cards)))
            turned = self._revealTop(column)
            self._record(RunRemovalMove(column, foundation, turned))
            removed += 1
        if removed > 0 and self.tableau.isComplete():
            self.doWin()
        return not self.isWon()

    def doWin(self):
        self.playing = False
        self.statPlayed += 1
        self.statWon += 1
        entry = HighScoreEntry(self.suitCount, self.score, today(), self.playerName)
        self.highScores = highScoreCheck(self.highScores, entry, self.config.scoresToKeep)
        LOGGER.info("game won with %d points", self.score)
        self._emit(GameWon(self.score))
        self.interface.onWin(self.score)

    def undoTransfer(self, move: TransferMove):
        if move.turnedCardBeneath:
            self._hideTop(move.sourceColumn)
        pileIdx, pos = self.tableau.locate(move.cardId)
        cards = self.tableau.transfer(pileIdx, pos, move.sourceColumn)
        for card in cards:
            self._emit(CardMoved(card.id, pileIdx, move.sourceColumn))
        self.score -= MOVE_COST

    def undoDeal(self, move: DealMove):
        for column in reversed(COLUMNS):
            card = self.tableau.top(column)
            self.tableau.transfer(column, len(self.tableau[column]) - 1, move.reservePile)
            self._emit(CardMoved(card.id, column, move.reservePile))
            card.faceUp = False
            self._emit(CardFlipped(card.id, False))
        self.dealDisabled = False
        self.score -= MOVE_COST

    def undoRunRemoval(self, move: RunRemovalMove):
        if move.turnedCardBeneath:
            self._hideTop(move.sourceColumn)
        foundation = self.tableau[move.foundationPile]
        cards = self.tableau.transfer(move.foundationPile, len(foundation) - RUN_LENGTH, move.sourceColumn)
        for card in cards:
            self._emit(CardMoved(card.id, move.foundationPile, move.sourceColumn))
        self.score -= RUN_UNDO_PENALTY

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _setUp(self, deck, piles, moves=(), score=INITIAL_SCORE):
        self.deck = list(deck)
        self.tableau = Tableau(piles)
        self.history = HistoryRecorder(self, moves)
        self.score = score
        self.suitCount = countSuits(self.deck)
        self.playing = False
        self.dealDisabled = self.tableau.dealableReserve() < 0

    def _restoreDeck(self, decode, data) -> bool:
        self.events = []
        try:
            deck = decode(data)
        except CorruptSaveData:
            LOGGER.warning("cannot restore the deck, starting a fresh game", exc_info=True)
            self._startFresh()
            return False
        self._setUp(deck, dealPiles(deck))
        self.playing = True
        LOGGER.debug("restored a %d-suit deal", self.suitCount)
        self.interface.onStart()
        self._finishCommand(True)
        return True

    def _startFresh(self):
        # a game that could not be loaded is not counted as abandoned
        self.playing = False
        self.newGame(self.config.suits)

    def _record(self, move):
        self.playing = True
        self.history.log(move)

    def _revealTop(self, idx: int) -> bool:
        card = self.tableau.top(idx)
        if card is None or card.faceUp:
            return False
        card.faceUp = True
        self._emit(CardFlipped(card.id, True))
        return True

    def _hideTop(self, idx: int):
        card = self.tableau.top(idx)
        card.faceUp = False
        self._emit(CardFlipped(card.id, False))

    def _disableDeal(self):
        self.dealDisabled = True
        self._emit(DealDisabled())

    def _emit(self, event):
        self.events.append(event)
        self.interface.onEvent(event)

    def _reject(self, reason: str) -> bool:
        LOGGER.debug("rejected: %s", reason)
        self._emit(InvalidMove(reason))
        self._finishCommand(False)
        return False

    def _finishCommand(self, changed: bool):
        self.interface.onCommandFinished(list(self.events))
        if changed:
            self._persist()

    def _persist(self):
        if self.persistence is not None:
            self.persistence(self.toRecord())
