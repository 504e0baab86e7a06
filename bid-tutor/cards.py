"""
Card Primitives
Strains, ranks, cards and the 52-card deck used to deal a board
"""

import random
from dataclasses import dataclass
from enum import IntEnum


class Strain(IntEnum):
    """Denomination of a contract bid, in bidding order (clubs lowest)"""

    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3
    NOTRUMP = 4

    @property
    def is_suit(self):
        return self is not Strain.NOTRUMP

    @property
    def is_major(self):
        return self in (Strain.HEARTS, Strain.SPADES)

    @property
    def letter(self):
        return STRAIN_LETTERS[self]

    @property
    def symbol(self):
        return STRAIN_SYMBOLS[self]

    @classmethod
    def from_letter(cls, text):
        """Look up a strain by its LIN / bid letter ('C', 'D', 'H', 'S', 'N', 'NT')"""
        text = text.upper()
        if text == 'N':
            text = 'NT'
        for strain, letter in STRAIN_LETTERS.items():
            if letter == text:
                return strain
        raise ValueError(f"Unknown strain: {text}")


STRAIN_LETTERS = {
    Strain.CLUBS: 'C',
    Strain.DIAMONDS: 'D',
    Strain.HEARTS: 'H',
    Strain.SPADES: 'S',
    Strain.NOTRUMP: 'NT',
}

STRAIN_SYMBOLS = {
    Strain.CLUBS: '♣',
    Strain.DIAMONDS: '♦',
    Strain.HEARTS: '♥',
    Strain.SPADES: '♠',
    Strain.NOTRUMP: 'NT',
}

# The four real suits, lowest first
SUITS = (Strain.CLUBS, Strain.DIAMONDS, Strain.HEARTS, Strain.SPADES)

# Display order of a hand (spades first), as in LIN strings
DISPLAY_SUITS = (Strain.SPADES, Strain.HEARTS, Strain.DIAMONDS, Strain.CLUBS)


class Rank(IntEnum):
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def char(self):
        return RANK_CHARS[self]

    @property
    def hcp(self):
        """High card points (A=4, K=3, Q=2, J=1)"""
        return max(self.value - 10, 0)

    @classmethod
    def from_char(cls, char):
        for rank, rank_char in RANK_CHARS.items():
            if rank_char == char.upper():
                return rank
        raise ValueError(f"Unknown rank: {char}")


RANK_CHARS = {rank: str(rank.value) for rank in Rank if rank < Rank.TEN}
RANK_CHARS.update({
    Rank.TEN: 'T',
    Rank.JACK: 'J',
    Rank.QUEEN: 'Q',
    Rank.KING: 'K',
    Rank.ACE: 'A',
})


@dataclass(frozen=True, order=True)
class Card:
    suit: Strain
    rank: Rank

    def __post_init__(self):
        if not Strain(self.suit).is_suit:
            raise ValueError("A card cannot belong to No Trump")

    def __str__(self):
        return f"{self.suit.letter}{self.rank.char}"

    @property
    def hcp(self):
        return self.rank.hcp


def new_deck():
    """Return the 52 distinct cards, clubs first, in rank order"""
    return [Card(suit, rank) for suit in SUITS for rank in Rank]


def shuffle(deck, rng=None):
    """Shuffle a deck in place; pass a seeded random.Random for repeatable deals"""
    (rng or random).shuffle(deck)
    return deck


def deal(deck=None, rng=None):
    """
    Deal a deck round-robin into four 13-card hands

    Args:
        deck: Cards to deal (default: a freshly shuffled deck)
        rng: Optional random.Random used when shuffling a fresh deck

    Returns:
        List of four card lists, one per seat starting with North
    """
    if deck is None:
        deck = shuffle(new_deck(), rng)
    if len(deck) != 52:
        raise ValueError(f"Cannot deal {len(deck)} cards")

    hands = [[], [], [], []]
    for i, card in enumerate(deck):
        hands[i % 4].append(card)
    return hands
