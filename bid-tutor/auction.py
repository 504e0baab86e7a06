"""
Auction Model
Seats, bids, the append-only auction and the final contract it produces
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import NamedTuple, Optional

from cards import Strain


class BidParseError(ValueError):
    """Bid text could not be understood"""


class IllegalBidError(ValueError):
    """Bid is well formed but not allowed at this point of the auction"""


class OutOfTurnError(Exception):
    """A seat tried to bid while another seat is on turn"""

    def __init__(self, expected, attempted=None):
        self.expected = expected
        self.attempted = attempted
        super().__init__(f"it's {expected.label}'s turn")


class AuctionClosedError(Exception):
    """A bid was submitted after the auction ended"""

    def __init__(self):
        super().__init__("the auction is complete")


class Position(IntEnum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    def partner(self):
        return Position((self + 2) % 4)

    def next(self):
        """Seat to the left, who bids next"""
        return Position((self + 1) % 4)

    @property
    def letter(self):
        return self.name[0]

    @property
    def label(self):
        return self.name.capitalize()

    @property
    def partnership(self):
        return 'NS' if self in (Position.NORTH, Position.SOUTH) else 'EW'


def parse_position(text):
    """Parse 'N', 'north', 'North' ... into a Position"""
    key = str(text).strip().upper()
    for position in Position:
        if key in (position.name, position.letter):
            return position
    raise ValueError(f"Unknown position: {text}")


class Call(Enum):
    PASS = 'P'
    DOUBLE = 'X'
    REDOUBLE = 'XX'
    CONTRACT = 'C'


@dataclass(frozen=True)
class Bid:
    """A call in the auction: Pass, Double, Redouble, or a contract bid"""

    call: Call
    level: int = 0
    strain: Optional[Strain] = None

    @classmethod
    def contract(cls, level, strain):
        if not 1 <= level <= 7:
            raise ValueError(f"bid level must be between 1 and 7, got {level}")
        return cls(Call.CONTRACT, level, Strain(strain))

    @property
    def is_contract(self):
        return self.call is Call.CONTRACT

    @property
    def is_pass(self):
        return self.call is Call.PASS

    @property
    def is_double(self):
        return self.call is Call.DOUBLE

    @property
    def is_redouble(self):
        return self.call is Call.REDOUBLE

    @property
    def rank(self):
        """Comparable rank of a contract bid (level * 5 + strain)"""
        if not self.is_contract:
            return None
        return self.level * 5 + self.strain

    @property
    def code(self):
        """Short text form accepted by parse_bid ('1NT', 'P', 'X', 'XX')"""
        if self.is_contract:
            return f"{self.level}{self.strain.letter}"
        return self.call.value

    def __str__(self):
        if self.call is Call.PASS:
            return 'Pass'
        if self.call is Call.DOUBLE:
            return 'Double'
        if self.call is Call.REDOUBLE:
            return 'Redouble'
        return f"{self.level}{self.strain.symbol}"


PASS = Bid(Call.PASS)
DOUBLE = Bid(Call.DOUBLE)
REDOUBLE = Bid(Call.REDOUBLE)

_CALL_WORDS = {
    'PASS': PASS, 'P': PASS,
    'DOUBLE': DOUBLE, 'DBL': DOUBLE, 'X': DOUBLE,
    'REDOUBLE': REDOUBLE, 'RDBL': REDOUBLE, 'XX': REDOUBLE,
}


def parse_bid(text):
    """
    Parse bid text typed by a player

    Accepts pass/p, double/dbl/x, redouble/rdbl/xx, or a level 1-7
    followed by C, D, H, S, N or NT. Case-insensitive.

    Raises:
        BidParseError: if the text is not a bid
    """
    word = (text or '').strip().upper()
    if word in _CALL_WORDS:
        return _CALL_WORDS[word]

    if len(word) < 2:
        raise BidParseError("invalid bid format")
    if word[0] not in '0123456789':
        raise BidParseError("invalid bid format")

    level = int(word[0])
    if not 1 <= level <= 7:
        raise BidParseError("bid level must be between 1 and 7")

    suit = word[1:]
    if suit not in ('C', 'D', 'H', 'S', 'N', 'NT'):
        raise BidParseError(f"invalid suit: {suit}")

    return Bid.contract(level, Strain.from_letter(suit))


class AuctionEntry(NamedTuple):
    bid: Bid
    position: Position


@dataclass(frozen=True)
class Contract:
    level: int
    strain: Strain
    declarer: Position
    doubled: bool = False
    redoubled: bool = False

    def __str__(self):
        suffix = 'XX' if self.redoubled else 'X' if self.doubled else ''
        return f"{self.level}{self.strain.symbol}{suffix} by {self.declarer.label}"


class Auction:
    """Ordered record of every call made during a deal"""

    def __init__(self, entries=()):
        self._entries = [AuctionEntry(bid, Position(pos)) for bid, pos in entries]

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def entries(self):
        """Immutable snapshot of the auction so far"""
        return tuple(self._entries)

    def add_bid(self, bid, position):
        """Record a call; legality is the caller's responsibility"""
        self._entries.append(AuctionEntry(bid, Position(position)))

    def last_non_pass_bid(self):
        """Most recent contract bid, or None if nobody has bid yet"""
        for entry in reversed(self._entries):
            if entry.bid.is_contract:
                return entry.bid
        return None

    def last_contract_entry(self):
        for entry in reversed(self._entries):
            if entry.bid.is_contract:
                return entry
        return None

    def is_valid_bid(self, bid):
        """
        Check a bid against the auction so far

        Pass, Double and Redouble are always accepted; nothing checks that
        there is something to double or who made it. A contract bid must
        outrank the last contract bid.
        """
        if not bid.is_contract:
            return True
        last = self.last_non_pass_bid()
        if last is None:
            return True
        return bid.rank > last.rank

    def is_auction_complete(self):
        """Four or more calls ending in three passes, with something other than a pass"""
        if len(self._entries) < 4:
            return False
        if not all(entry.bid.is_pass for entry in self._entries[-3:]):
            return False
        return any(not entry.bid.is_pass for entry in self._entries)

    def is_passed_out(self):
        """All four players passed without anyone bidding"""
        return len(self._entries) == 4 and all(entry.bid.is_pass for entry in self._entries)

    def is_over(self):
        return self.is_auction_complete() or self.is_passed_out()

    def bids_by(self, position):
        """Contract bids made by one seat, in order"""
        return [entry.bid for entry in self._entries
                if entry.position == position and entry.bid.is_contract]

    def final_contract(self):
        """
        Contract reached by a completed auction

        The declarer is the player of the winning partnership who first
        named the contract's strain.

        Returns:
            Contract, or None while the auction is still open or was passed out
        """
        if not self.is_auction_complete():
            return None

        last = self.last_contract_entry()
        if last is None:
            return None

        doubled = redoubled = False
        index = self._entries.index(last)
        for entry in self._entries[index + 1:]:
            if entry.bid.is_double:
                doubled = True
            elif entry.bid.is_redouble:
                redoubled = True

        declarer = last.position
        for entry in self._entries:
            if (entry.bid.is_contract
                    and entry.bid.strain == last.bid.strain
                    and entry.position.partnership == last.position.partnership):
                declarer = entry.position
                break

        return Contract(last.bid.level, last.bid.strain, declarer, doubled, redoubled)
