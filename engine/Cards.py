import random

SUITS = ("c", "d", "h", "s")
RED_SUITS = ("d", "h")
BLACK_SUITS = ("c", "s")
RANKS = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")
SUIT_SYMBOLS = {"c": "♣", "d": "♦", "h": "♥", "s": "♠"}
SUIT_COUNTS = (1, 2, 4)

PACKS = 2
DECK_SIZE = PACKS * len(SUITS) * len(RANKS)


class Card:
    NUM_PER_SUIT = 13

    def __init__(self, id: int, suit: str, rank: str, faceUp=False):
        if suit not in SUITS:
            raise ValueError(f"unknown suit {suit!r}")
        if rank not in RANKS:
            raise ValueError(f"unknown rank {rank!r}")
        self._id = id
        self._suit = suit
        self._rank = rank
        self._order = RANKS.index(rank)
        self.faceUp = faceUp

    @property
    def id(self) -> int:
        return self._id

    @property
    def suit(self) -> str:
        return self._suit

    @property
    def rank(self) -> str:
        return self._rank

    @property
    def order(self) -> int:
        return self._order

    def __str__(self):
        if self.faceUp:
            return f"{self.id}:{self.rank}{self.suit}"
        return f"{self.id}:--"

    def __repr__(self):
        return self.__str__()

    def gameStr(self):
        if not self.faceUp:
            return "---"
        return SUIT_SYMBOLS[self.suit] + self.rank.ljust(2)

    def color(self):
        if self.suit in RED_SUITS:
            return "red"
        return "black"

    def isAce(self):
        return self.order == 0

    def suitableAsBaseFor(self, upper):
        return self.order == upper.order + 1

    def suitableAsSequenceFor(self, upper):
        return self.suit == upper.suit and self.order == upper.order + 1


def suitSlots(suitCount: int, rng) -> list:
    """Map the four suit slots of a pack onto the suits used in this game."""
    if suitCount == 4:
        return list(SUITS)
    if suitCount == 2:
        red = rng.choice(RED_SUITS)
        black = rng.choice(BLACK_SUITS)
        return [black, red, red, black]
    if suitCount == 1:
        suit = rng.choice(SUITS)
        return [suit] * len(SUITS)
    raise ValueError(f"suit count must be one of {SUIT_COUNTS}, got {suitCount!r}")


def buildDeck(suitCount: int, rng=None) -> list:
    """
    Build and shuffle the two-pack stock.
    :param suitCount: effective number of distinct suits (1, 2 or 4)
    :param rng: a random.Random, the module generator is used when omitted
    :return: 104 face-down cards, ids matching their position
    """
    if rng is None:
        rng = random
    slots = suitSlots(suitCount, rng)
    faces = []
    for _ in range(PACKS):
        for suit in slots:
            for rank in RANKS:
                faces.append((suit, rank))
    rng.shuffle(faces)
    return [Card(i, suit, rank) for i, (suit, rank) in enumerate(faces)]


def countSuits(deck) -> int:
    return len({card.suit for card in deck})
