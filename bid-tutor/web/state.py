"""
Session State Management
Per-table deals and auctions, shared between request handlers
"""

import threading
import uuid

from auction import Auction, AuctionClosedError, IllegalBidError, OutOfTurnError, Position
from bidding_system import Hand
from cards import Strain, deal


class SessionNotFoundError(KeyError):
    """No table with the requested id"""

    def __init__(self, session_id):
        self.session_id = session_id
        super().__init__(session_id)

    def __str__(self):
        return f"session not found: {self.session_id}"


class ReadWriteLock:
    """Many concurrent readers or one writer"""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    def acquire_read(self):
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1

    def release_read(self):
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self):
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True

    def release_write(self):
        with self._cond:
            self._writing = False
            self._cond.notify_all()

    def reading(self):
        return _Guard(self.acquire_read, self.release_read)

    def writing(self):
        return _Guard(self.acquire_write, self.release_write)


class _Guard:
    def __init__(self, acquire, release):
        self._acquire = acquire
        self._release = release

    def __enter__(self):
        self._acquire()
        return self

    def __exit__(self, *exc):
        self._release()
        return False


class Session:
    """One practice table: four hands, the auction and whose turn it is"""

    def __init__(self, hands, dealer=Position.NORTH, session_id=None):
        if len(hands) != 4 or any(len(hand) != 13 for hand in hands):
            raise ValueError("A table needs four hands of 13 cards")
        self.id = session_id or str(uuid.uuid4())
        self.hands = {Position(i): hand for i, hand in enumerate(hands)}
        self.dealer = dealer
        self.turn = dealer
        self.auction = Auction()

    @classmethod
    def deal_new(cls, rng=None):
        """Shuffle a fresh deck and deal 13 cards to each seat"""
        return cls([Hand.from_cards(cards) for cards in deal(rng=rng)])

    @property
    def complete(self):
        return self.auction.is_auction_complete()

    @property
    def passed_out(self):
        return self.auction.is_passed_out()

    def apply_bid(self, position, bid):
        """
        Validate and record a bid, then pass the turn on

        Raises:
            AuctionClosedError: the auction has already ended
            OutOfTurnError: position is not on turn
            IllegalBidError: bid does not outrank the last contract bid
        """
        position = Position(position)
        if self.auction.is_over():
            raise AuctionClosedError()
        if position != self.turn:
            raise OutOfTurnError(self.turn, position)
        if not self.auction.is_valid_bid(bid):
            raise IllegalBidError(f"{bid} is not higher than {self.auction.last_non_pass_bid()}")

        self.auction.add_bid(bid, position)
        self.turn = position.next()

    def to_dict(self):
        contract = self.auction.final_contract()
        return {
            'id': self.id,
            'dealer': self.dealer.letter,
            'turn': None if self.auction.is_over() else self.turn.letter,
            'players': [
                {
                    'position': position.letter,
                    'hcp': hand.hcp,
                    'spades': hand.holding(Strain.SPADES),
                    'hearts': hand.holding(Strain.HEARTS),
                    'diamonds': hand.holding(Strain.DIAMONDS),
                    'clubs': hand.holding(Strain.CLUBS),
                }
                for position, hand in self.hands.items()
            ],
            'auction': [
                {
                    'position': entry.position.letter,
                    'bid': entry.bid.code,
                    'level': entry.bid.level,
                    'strain': entry.bid.strain.letter if entry.bid.is_contract else None,
                    'pass': entry.bid.is_pass,
                    'double': entry.bid.is_double,
                    'redouble': entry.bid.is_redouble,
                }
                for entry in self.auction.entries
            ],
            'complete': self.complete,
            'passedOut': self.passed_out,
            'contract': _contract_dict(contract),
        }


def _contract_dict(contract):
    if contract is None:
        return None
    return {
        'level': contract.level,
        'strain': contract.strain.letter,
        'declarer': contract.declarer.letter,
        'doubled': contract.doubled,
        'redoubled': contract.redoubled,
        'text': str(contract),
    }


class SessionStore:
    """All open tables, guarded by one reader/writer lock"""

    def __init__(self):
        self._sessions = {}
        self._lock = ReadWriteLock()

    def __len__(self):
        with self._lock.reading():
            return len(self._sessions)

    def create(self, rng=None):
        session = Session.deal_new(rng)
        with self._lock.writing():
            self._sessions[session.id] = session
        return session

    def add(self, session):
        with self._lock.writing():
            self._sessions[session.id] = session
        return session

    def _get(self, session_id):
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def snapshot(self, session_id):
        """Serialized copy of one table"""
        with self._lock.reading():
            return self._get(session_id).to_dict()

    def read(self, session_id, func):
        """Run func(session) while holding the shared lock"""
        with self._lock.reading():
            return func(self._get(session_id))

    def submit_bid(self, session_id, position, bid):
        """Record a bid atomically and return the updated table"""
        with self._lock.writing():
            session = self._get(session_id)
            session.apply_bid(position, bid)
            return session.to_dict()

    def submit_robot_bid(self, session_id, engine):
        """
        Let the engine bid for whichever seat is on turn

        Returns:
            (position, bid, reasoning, session dict)
        """
        with self._lock.writing():
            session = self._get(session_id)
            if session.auction.is_over():
                raise AuctionClosedError()
            position = session.turn
            bid, reasoning = engine.get_recommendation(session.hands[position], session.auction, position)
            session.apply_bid(position, bid)
            return position, bid, reasoning, session.to_dict()
