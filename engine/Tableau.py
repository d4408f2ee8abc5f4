from engine.Cards import DECK_SIZE

RESERVE_PILES = range(0, 5)
FOUNDATION_PILES = range(5, 13)
COLUMNS = range(13, 23)
PILE_COUNT = 23

RESERVE_SIZE = 10
RUN_LENGTH = 13
RESERVE_CARDS = len(RESERVE_PILES) * RESERVE_SIZE
FIRST_FACE_UP = DECK_SIZE - len(COLUMNS)


def isReserve(idx: int) -> bool:
    return idx in RESERVE_PILES


def isFoundation(idx: int) -> bool:
    return idx in FOUNDATION_PILES


def isColumn(idx: int) -> bool:
    return idx in COLUMNS


def pileKind(idx: int) -> str:
    if isReserve(idx):
        return "reserve"
    if isFoundation(idx):
        return "foundation"
    if isColumn(idx):
        return "column"
    raise IndexError(f"no pile {idx}")


def dealPiles(deck) -> list:
    """
    Lay a deck out as a starting position.

    The first 50 cards fill the reserves ten at a time, the rest go round-robin
    over the columns; only the final round (one card per column) lands face-up.
    """
    piles = [[] for _ in range(PILE_COUNT)]
    for i in range(RESERVE_CARDS):
        card = deck[i]
        card.faceUp = False
        piles[RESERVE_PILES[i // RESERVE_SIZE]].append(card)
    for i in range(RESERVE_CARDS, len(deck)):
        card = deck[i]
        card.faceUp = i >= FIRST_FACE_UP
        piles[COLUMNS[(i - RESERVE_CARDS) % len(COLUMNS)]].append(card)
    return piles


class Tableau:
    """The 23 piles, bottom to top, plus a card id -> pile index lookup."""

    def __init__(self, piles):
        if len(piles) != PILE_COUNT:
            raise ValueError(f"expected {PILE_COUNT} piles, got {len(piles)}")
        self.piles = [list(pile) for pile in piles]
        self.where = {}
        for idx, pile in enumerate(self.piles):
            for card in pile:
                self.where[card.id] = idx

    def __getitem__(self, idx):
        return self.piles[idx]

    def contains(self, cardId) -> bool:
        return cardId in self.where

    def locate(self, cardId) -> tuple[int, int]:
        idx = self.where[cardId]
        pile = self.piles[idx]
        for pos in range(len(pile) - 1, -1, -1):
            if pile[pos].id == cardId:
                return idx, pos
        raise KeyError(cardId)

    def top(self, idx):
        pile = self.piles[idx]
        if len(pile) == 0:
            return None
        return pile[-1]

    def transfer(self, src: int, pos: int, dest: int) -> list:
        """Move pile[src][pos:] onto dest, keeping their order."""
        srcPile = self.piles[src]
        cards = srcPile[pos:]
        del srcPile[pos:]
        self.piles[dest].extend(cards)
        for card in cards:
            self.where[card.id] = dest
        return cards

    def emptyColumns(self) -> list:
        return [idx for idx in COLUMNS if len(self.piles[idx]) == 0]

    def dealableReserve(self) -> int:
        for idx in reversed(RESERVE_PILES):
            if len(self.piles[idx]) == RESERVE_SIZE:
                return idx
        return -1

    def emptyFoundation(self) -> int:
        for idx in FOUNDATION_PILES:
            if len(self.piles[idx]) == 0:
                return idx
        return -1

    def completedRuns(self) -> int:
        return sum(1 for idx in FOUNDATION_PILES if len(self.piles[idx]) == RUN_LENGTH)

    def isComplete(self) -> bool:
        return self.completedRuns() == len(FOUNDATION_PILES)

    def hasCompleteRun(self, column: int) -> bool:
        pile = self.piles[column]
        if len(pile) < RUN_LENGTH:
            return False
        top = pile[-1]
        if not (top.faceUp and top.isAce()):
            return False
        upper = top
        for i in range(2, RUN_LENGTH + 1):
            card = pile[-i]
            if not card.faceUp or not card.suitableAsSequenceFor(upper):
                return False
            upper = card
        return True

    def cardCount(self) -> int:
        return sum(len(pile) for pile in self.piles)

    def pileIds(self) -> list:
        return [[card.id for card in pile] for pile in self.piles]
