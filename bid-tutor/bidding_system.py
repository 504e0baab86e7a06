"""
Polish Club Bidding System
Rule-based implementation of the Polish Club convention set used by the
robot players at the practice table

Features:
- Hand evaluation (HCP, distribution, balanced shape, stoppers)
- Opening bids (strong/weak 1C, 1NT, five-card majors, 1D)
- Responses: Stayman, Jacoby transfers, 1C negative/positive, simple raises
- Rebids: Blackwood, Gerber, transfer completion, Stayman answers,
  strong-club continuations, Puppet Stayman over 2NT
- Slam tries over 3-level bids

Every decision is recomputed from the hand and the auction so far; the
engine keeps no state between calls and never raises for a legal auction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, NamedTuple

from auction import PASS, Auction, Bid, Position
from cards import DISPLAY_SUITS, SUITS, Card, Rank, Strain

CLUBS = Strain.CLUBS
DIAMONDS = Strain.DIAMONDS
HEARTS = Strain.HEARTS
SPADES = Strain.SPADES
NOTRUMP = Strain.NOTRUMP


class Hand:
    """Represents a bridge hand with evaluation methods"""

    def __init__(self, lin_hand=None, cards=None):
        """
        Initialize hand from LIN format (e.g., 'SAKQJHAKT9D8765C432')
        or from a list of Card objects
        """
        if cards is None:
            cards = self.parse_lin(lin_hand or '')
        # Clubs first, highest rank first within a suit
        self.cards = sorted(cards, key=lambda card: (card.suit, -card.rank))
        self.hcp, self.distribution = self.evaluate()

    @classmethod
    def from_cards(cls, cards):
        return cls(cards=cards)

    @staticmethod
    def parse_lin(lin_str):
        """Parse LIN format into a list of cards"""
        cards = []
        current_suit = None
        for char in lin_str.upper():
            if char in 'SHDC':
                current_suit = Strain.from_letter(char)
            elif char in 'AKQJT98765432':
                if current_suit is None:
                    raise ValueError(f"Card without a suit in LIN hand: {lin_str}")
                cards.append(Card(current_suit, Rank.from_char(char)))
        return cards

    def evaluate(self):
        """Count HCP (A=4, K=3, Q=2, J=1) and cards per suit"""
        hcp = sum(card.hcp for card in self.cards)
        distribution = {suit: 0 for suit in SUITS}
        for card in self.cards:
            distribution[card.suit] += 1
        return hcp, distribution

    def suit_length(self, suit):
        return self.distribution[suit]

    def suit_cards(self, suit):
        return [card for card in self.cards if card.suit == suit]

    def has_card(self, suit, rank):
        return Card(suit, rank) in self.cards

    def count_aces(self):
        return sum(1 for card in self.cards if card.rank == Rank.ACE)

    def is_balanced(self):
        """No void or singleton, at most one doubleton"""
        lengths = self.distribution.values()
        if any(length <= 1 for length in lengths):
            return False
        return sum(1 for length in lengths if length == 2) <= 1

    def has_stopper(self, suit):
        """Check if hand has a stopper in given suit (A, Kx, Qxx)"""
        length = self.suit_length(suit)
        if self.has_card(suit, Rank.ACE):
            return True
        if self.has_card(suit, Rank.KING) and length >= 2:
            return True
        if self.has_card(suit, Rank.QUEEN) and length >= 3:
            return True
        return False

    def holding(self, suit):
        """Ranks held in one suit, highest first, e.g. 'A K 7 2'"""
        return ' '.join(card.rank.char for card in self.suit_cards(suit))

    def to_lin(self):
        return ''.join(
            suit.letter + ''.join(card.rank.char for card in self.suit_cards(suit))
            for suit in DISPLAY_SUITS
        )

    def __len__(self):
        return len(self.cards)

    def __str__(self):
        return self.to_lin()


# ==================== Context Classification ====================

class Situation(Enum):
    OPENING = 'opening'
    RESPONSE = 'response'
    REBID = 'rebid'
    COMPETITIVE = 'competitive'


@dataclass(frozen=True)
class BiddingContext:
    """Everything the rules need to know about one seat's turn"""

    hand: Hand
    auction: Auction
    position: Position
    my_bids: tuple
    partner_bids: tuple
    partner_just_bid: bool

    @property
    def hcp(self):
        return self.hand.hcp

    @property
    def situation(self):
        if not self.my_bids:
            if self.partner_just_bid:
                return Situation.RESPONSE
            if self.auction.last_non_pass_bid() is None:
                return Situation.OPENING
            return Situation.COMPETITIVE
        if self.partner_just_bid:
            return Situation.REBID
        return Situation.COMPETITIVE

    @property
    def my_last(self):
        return self.my_bids[-1] if self.my_bids else None

    @property
    def partner_last(self):
        return self.partner_bids[-1] if self.partner_bids else None

    @property
    def partner_first(self):
        return self.partner_bids[0] if self.partner_bids else None

    @property
    def last_bid(self):
        return self.auction.last_non_pass_bid()

    def length(self, suit):
        return self.hand.suit_length(suit)

    def agreed_suit(self):
        """
        Trump suit for a key-card answer: the partnership's most recent
        suit bid before partner's latest bid. None when only No Trump
        was bid.
        """
        entries = self.auction.entries
        partner = self.position.partner()
        ask = None
        for i in range(len(entries) - 1, -1, -1):
            if entries[i].position == partner and entries[i].bid.is_contract:
                ask = i
                break
        if ask is None:
            return None
        for entry in reversed(entries[:ask]):
            if entry.position.partnership != self.position.partnership:
                continue
            if entry.bid.is_contract and entry.bid.strain.is_suit:
                return entry.bid.strain
        return None


def classify(hand, auction, position):
    """
    Build the bidding context for the seat about to act

    Pass, Double and Redouble never count as a player's bid. Partner has
    "just bid" when the latest call, skipping opponents' passes, is a
    contract bid by partner.
    """
    position = Position(position)
    partner = position.partner()
    snapshot = Auction(auction.entries)

    my_bids = []
    partner_bids = []
    partner_just_bid = None
    for entry in reversed(snapshot.entries):
        if partner_just_bid is None and not (entry.bid.is_pass and entry.position not in (position, partner)):
            partner_just_bid = entry.position == partner and entry.bid.is_contract
        if not entry.bid.is_contract:
            continue
        if entry.position == position:
            my_bids.insert(0, entry.bid)
        elif entry.position == partner:
            partner_bids.insert(0, entry.bid)

    return BiddingContext(
        hand=hand,
        auction=snapshot,
        position=position,
        my_bids=tuple(my_bids),
        partner_bids=tuple(partner_bids),
        partner_just_bid=bool(partner_just_bid),
    )


# ==================== Rule Tables ====================

class Rule(NamedTuple):
    """One convention: when it applies and which bids it suggests, best first"""

    name: str
    applies: Callable
    candidates: Callable


def bid(level, strain):
    return Bid.contract(level, strain)


def is_bid(candidate, level, strain):
    return (candidate is not None and candidate.is_contract
            and candidate.level == level and candidate.strain == strain)


def _name(strain):
    return {CLUBS: 'clubs', DIAMONDS: 'diamonds', HEARTS: 'hearts',
            SPADES: 'spades', NOTRUMP: 'no trump'}[strain]


# ---------- Openings ----------

def _open_strong_club(ctx):
    return [(bid(1, CLUBS), f"1♣ Strong club ({ctx.hcp} HCP)")]


def _open_weak_club(ctx):
    return [(bid(1, CLUBS), f"1♣ Weak club, balanced ({ctx.hcp} HCP)")]


def _open_1nt(ctx):
    return [(bid(1, NOTRUMP), f"1NT balanced ({ctx.hcp} HCP)")]


def _open_major(ctx):
    if ctx.length(SPADES) >= 5:
        return [(bid(1, SPADES), f"1♠ ({ctx.length(SPADES)}-card suit, {ctx.hcp} HCP)")]
    if ctx.length(HEARTS) >= 5:
        return [(bid(1, HEARTS), f"1♥ ({ctx.length(HEARTS)}-card suit, {ctx.hcp} HCP)")]
    return []


def _open_diamond(ctx):
    return [(bid(1, DIAMONDS), f"1♦ ({ctx.length(DIAMONDS)}-card suit, {ctx.hcp} HCP)")]


OPENING_RULES = [
    Rule('strong club',
         lambda ctx: ctx.hcp >= 18,
         _open_strong_club),
    Rule('weak club',
         lambda ctx: (11 <= ctx.hcp <= 14 and ctx.hand.is_balanced()
                      and ctx.length(HEARTS) < 5 and ctx.length(SPADES) < 5),
         _open_weak_club),
    Rule('1NT opening',
         lambda ctx: ctx.hand.is_balanced() and 15 <= ctx.hcp <= 17,
         _open_1nt),
    Rule('five-card major',
         lambda ctx: 11 <= ctx.hcp <= 17,
         _open_major),
    Rule('diamond opening',
         lambda ctx: 11 <= ctx.hcp <= 17 and ctx.length(DIAMONDS) >= 4,
         _open_diamond),
]


# ---------- Responses ----------

def _slam_try(ctx):
    if ctx.last_bid.strain == NOTRUMP:
        return [(bid(4, CLUBS), f"4♣ Gerber, asking for aces ({ctx.hcp} HCP)")]
    return [(bid(4, NOTRUMP), f"4NT Blackwood, asking for key cards ({ctx.hcp} HCP)")]


def _respond_to_1nt(ctx):
    hcp = ctx.hcp
    if hcp >= 5 and ctx.length(HEARTS) >= 5:
        return [(bid(2, DIAMONDS), f"2♦ Jacoby transfer (5+ hearts, {hcp} HCP)")]
    if hcp >= 5 and ctx.length(SPADES) >= 5:
        return [(bid(2, HEARTS), f"2♥ Jacoby transfer (5+ spades, {hcp} HCP)")]
    if hcp >= 8 and (ctx.length(HEARTS) >= 4 or ctx.length(SPADES) >= 4):
        return [(bid(2, CLUBS), f"2♣ Stayman (4-card major, {hcp} HCP)")]
    if hcp < 8:
        return [(PASS, f"Pass 1NT ({hcp} HCP, no game interest)")]
    return []


def _respond_to_1c(ctx):
    hcp = ctx.hcp
    if hcp <= 6:
        return [(bid(1, DIAMONDS), f"1♦ Negative response ({hcp} HCP)")]
    if ctx.length(SPADES) >= 4:
        return [(bid(1, SPADES), f"1♠ Positive, 4+ spades ({hcp} HCP)")]
    if ctx.length(HEARTS) >= 4:
        return [(bid(1, HEARTS), f"1♥ Positive, 4+ hearts ({hcp} HCP)")]
    if hcp <= 10 and ctx.hand.is_balanced():
        return [(bid(1, NOTRUMP), f"1NT Positive, balanced ({hcp} HCP)")]
    return []


def _raise_partner(ctx):
    partner_bid = ctx.partner_last
    strain = partner_bid.strain
    if partner_bid.level >= 7:
        return []
    return [(bid(partner_bid.level + 1, strain),
             f"Raise to {bid(partner_bid.level + 1, strain)} "
             f"({ctx.length(strain)}-card support, {ctx.hcp} HCP)")]


RESPONSE_RULES = [
    Rule('slam try',
         lambda ctx: ctx.hcp >= 16 and ctx.last_bid.level >= 3,
         _slam_try),
    Rule('response to 1NT',
         lambda ctx: is_bid(ctx.partner_last, 1, NOTRUMP),
         _respond_to_1nt),
    Rule('response to 1♣',
         lambda ctx: is_bid(ctx.partner_last, 1, CLUBS),
         _respond_to_1c),
    Rule('simple raise',
         lambda ctx: (6 <= ctx.hcp <= 9 and ctx.partner_last.strain.is_suit
                      and ctx.length(ctx.partner_last.strain) >= 3),
         _raise_partner),
]


# ---------- Rebids ----------

BLACKWOOD_STEPS = {0: CLUBS, 1: DIAMONDS, 2: HEARTS, 3: SPADES}
GERBER_STEPS = {1: HEARTS, 2: SPADES, 3: NOTRUMP}


def _answer_blackwood(ctx):
    trump = ctx.agreed_suit()
    key_cards = ctx.hand.count_aces()
    if trump is not None and ctx.hand.has_card(trump, Rank.KING):
        key_cards += 1
    # Steps wrap every four key cards: 0 and 4 both answer 5♣
    strain = BLACKWOOD_STEPS[key_cards % 4]
    return [(bid(5, strain), f"{bid(5, strain)} Blackwood answer ({key_cards} key cards)")]


def _answer_gerber(ctx):
    aces = ctx.hand.count_aces()
    strain = DIAMONDS if aces in (0, 4) else GERBER_STEPS[aces]
    return [(bid(4, strain), f"{bid(4, strain)} Gerber answer ({aces} aces)")]


def _complete_transfer(ctx):
    major = HEARTS if ctx.partner_last.strain == DIAMONDS else SPADES
    support = ctx.length(major)
    if support >= 3 and 16 <= ctx.hcp <= 17:
        return [(bid(3, major), f"{bid(3, major)} Super-accept ({support}-card support, {ctx.hcp} HCP)"),
                (bid(2, major), f"{bid(2, major)} Complete transfer")]
    return [(bid(2, major), f"{bid(2, major)} Complete transfer to {_name(major)}")]


def _answer_stayman(ctx):
    if ctx.length(HEARTS) >= 4:
        reason = "both majors, hearts first" if ctx.length(SPADES) >= 4 else "4+ hearts"
        return [(bid(2, HEARTS), f"2♥ Stayman answer ({reason})")]
    if ctx.length(SPADES) >= 4:
        return [(bid(2, SPADES), "2♠ Stayman answer (4+ spades)")]
    return [(bid(2, DIAMONDS), "2♦ Stayman answer (no 4-card major)")]


def _after_stayman_answer(ctx):
    hcp = ctx.hcp
    shown = ctx.partner_last.strain
    if shown.is_major and hcp <= 7:
        return [(PASS, f"Pass, partner's major is high enough ({hcp} HCP)")]
    if hcp >= 8 and shown.is_major and ctx.length(shown) >= 4:
        return [(bid(4, shown), f"{bid(4, shown)} Game with a 4-4 fit ({hcp} HCP)")]
    if 8 <= hcp <= 9:
        return [(bid(2, NOTRUMP), f"2NT Invitational ({hcp} HCP)")]
    if hcp >= 16:
        return [(bid(4, NOTRUMP), f"4NT Slam invitation ({hcp} HCP)")]
    if 10 <= hcp <= 15:
        return [(bid(3, NOTRUMP), f"3NT Game, no major fit ({hcp} HCP)")]
    return []


def _strong_club_rebid(ctx):
    hcp = ctx.hcp
    balanced = ctx.hand.is_balanced()
    if 11 <= hcp <= 14 and balanced:
        return [(bid(1, NOTRUMP), f"1NT Weak club, balanced minimum ({hcp} HCP)")]
    if hcp < 18:
        return []
    if balanced and hcp <= 19:
        return [(bid(2, NOTRUMP), f"2NT Strong club, balanced ({hcp} HCP)")]
    if ctx.length(CLUBS) >= 5:
        return [(bid(2, CLUBS), f"2♣ Strong club, 5+ clubs ({hcp} HCP)")]
    if ctx.length(HEARTS) >= 4:
        return [(bid(2, HEARTS), f"2♥ Strong club, 4+ hearts ({hcp} HCP)")]
    if ctx.length(SPADES) >= 4:
        return [(bid(2, SPADES), f"2♠ Strong club, 4+ spades ({hcp} HCP)")]
    if ctx.length(DIAMONDS) >= 4:
        return [(bid(2, DIAMONDS), f"2♦ Strong club, 4+ diamonds ({hcp} HCP)")]
    return []


def _club_major_continuation(ctx):
    hcp = ctx.hcp
    major = ctx.partner_last.strain
    support = ctx.length(major)
    if support >= 4 or (support >= 3 and hcp >= 13):
        level = 3 if support >= 4 or hcp >= 14 else 2
        return [(bid(level, major), f"{bid(level, major)} Raise ({support}-card support, {hcp} HCP)")]
    if ctx.hand.is_balanced() and 11 <= hcp <= 14:
        return [(bid(1, NOTRUMP), f"1NT Balanced minimum ({hcp} HCP)")]
    if ctx.length(CLUBS) >= 5:
        return [(bid(2, CLUBS), f"2♣ Real clubs ({ctx.length(CLUBS)} cards)")]
    if ctx.length(DIAMONDS) >= 4:
        return [(bid(2, DIAMONDS), f"2♦ Second suit ({ctx.length(DIAMONDS)} diamonds)")]
    return []


def _club_notrump_continuation(ctx):
    if ctx.length(CLUBS) >= 5:
        return [(bid(2, CLUBS), f"2♣ Real clubs ({ctx.length(CLUBS)} cards)")]
    if ctx.length(DIAMONDS) >= 4:
        return [(bid(2, DIAMONDS), f"2♦ Second suit ({ctx.length(DIAMONDS)} diamonds)")]
    if ctx.hand.is_balanced() and ctx.hcp >= 18:
        return [(bid(2, NOTRUMP), f"2NT Strong balanced ({ctx.hcp} HCP)")]
    return []


def _answer_puppet(ctx):
    if ctx.length(HEARTS) >= 5:
        return [(bid(3, HEARTS), "3♥ Puppet answer (5 hearts)")]
    if ctx.length(SPADES) >= 5:
        return [(bid(3, SPADES), "3♠ Puppet answer (5 spades)")]
    return [(bid(3, DIAMONDS), "3♦ Puppet answer (no 5-card major)")]


def _after_puppet_answer(ctx):
    hcp = ctx.hcp
    shown = ctx.partner_last.strain
    if shown.is_major and ctx.length(shown) >= 3:
        if hcp >= 13:
            return [(bid(6, shown), f"{bid(6, shown)} Small slam ({ctx.length(shown)}-card fit, {hcp} HCP)")]
        if hcp >= 8:
            return [(bid(4, shown), f"{bid(4, shown)} Game ({ctx.length(shown)}-card fit, {hcp} HCP)")]
        return [(bid(3, NOTRUMP), f"3NT ({hcp} HCP)")]
    if hcp >= 8:
        return [(bid(3, NOTRUMP), f"3NT No major fit ({hcp} HCP)")]
    return [(PASS, f"Pass ({hcp} HCP)")]


def _responder_second_turn(ctx):
    hcp = ctx.hcp
    rebid = ctx.partner_last
    if rebid.strain == NOTRUMP:
        if ctx.length(HEARTS) >= 5 or ctx.length(SPADES) >= 5:
            return [(bid(3, CLUBS), f"3♣ Puppet Stayman (5-card major, {hcp} HCP)")]
        if hcp >= 12:
            return [(bid(4, CLUBS), f"4♣ Gerber, asking for aces ({hcp} HCP)")]
        if hcp >= 8:
            return [(bid(3, NOTRUMP), f"3NT ({hcp} HCP)")]
        return [(PASS, f"Pass 2NT ({hcp} HCP)")]
    if rebid.strain == CLUBS:
        if ctx.length(HEARTS) >= 4:
            return [(bid(2, HEARTS), "2♥ Showing 4+ hearts")]
        if ctx.length(SPADES) >= 4:
            return [(bid(2, SPADES), "2♠ Showing 4+ spades")]
        return [(bid(2, DIAMONDS), "2♦ Waiting")]
    if rebid.strain == DIAMONDS:
        if ctx.length(DIAMONDS) >= 3 and hcp >= 6:
            return [(bid(3, DIAMONDS), f"3♦ Raise ({ctx.length(DIAMONDS)}-card support, {hcp} HCP)")]
        if hcp >= 6:
            return [(bid(2, NOTRUMP), f"2NT ({hcp} HCP)")]
        return [(PASS, f"Pass ({hcp} HCP)")]
    # 2H or 2S
    major = rebid.strain
    if ctx.length(major) >= 3:
        return [(bid(3, major), f"{bid(3, major)} Raise ({ctx.length(major)}-card support)")]
    if hcp >= 6:
        return [(bid(2, NOTRUMP), f"2NT ({hcp} HCP)")]
    return [(PASS, f"Pass ({hcp} HCP)")]


REBID_RULES = [
    Rule('Blackwood answer',
         lambda ctx: is_bid(ctx.partner_last, 4, NOTRUMP),
         _answer_blackwood),
    Rule('Gerber answer',
         lambda ctx: is_bid(ctx.partner_last, 4, CLUBS) and ctx.my_last.strain == NOTRUMP,
         _answer_gerber),
    Rule('transfer completion',
         lambda ctx: (is_bid(ctx.my_last, 1, NOTRUMP)
                      and (is_bid(ctx.partner_last, 2, DIAMONDS) or is_bid(ctx.partner_last, 2, HEARTS))),
         _complete_transfer),
    Rule('Stayman answer',
         lambda ctx: is_bid(ctx.my_last, 1, NOTRUMP) and is_bid(ctx.partner_last, 2, CLUBS),
         _answer_stayman),
    Rule('after Stayman answer',
         lambda ctx: (is_bid(ctx.my_last, 2, CLUBS) and is_bid(ctx.partner_first, 1, NOTRUMP)
                      and ctx.partner_last.level == 2 and ctx.partner_last.strain in (DIAMONDS, HEARTS, SPADES)),
         _after_stayman_answer),
    Rule('strong club rebid',
         lambda ctx: is_bid(ctx.my_last, 1, CLUBS) and is_bid(ctx.partner_last, 1, DIAMONDS),
         _strong_club_rebid),
    Rule('1♣ - 1M continuation',
         lambda ctx: (is_bid(ctx.my_last, 1, CLUBS)
                      and (is_bid(ctx.partner_last, 1, HEARTS) or is_bid(ctx.partner_last, 1, SPADES))),
         _club_major_continuation),
    Rule('1♣ - 1NT continuation',
         lambda ctx: is_bid(ctx.my_last, 1, CLUBS) and is_bid(ctx.partner_last, 1, NOTRUMP),
         _club_notrump_continuation),
    Rule('Puppet answer',
         lambda ctx: is_bid(ctx.my_last, 2, NOTRUMP) and is_bid(ctx.partner_last, 3, CLUBS),
         _answer_puppet),
    Rule('after Puppet answer',
         lambda ctx: (is_bid(ctx.my_last, 3, CLUBS) and ctx.partner_last.level == 3
                      and ctx.partner_last.strain in (DIAMONDS, HEARTS, SPADES)),
         _after_puppet_answer),
    Rule("responder's second turn",
         lambda ctx: (is_bid(ctx.my_last, 1, DIAMONDS) and is_bid(ctx.partner_first, 1, CLUBS)
                      and ctx.partner_last.level == 2),
         _responder_second_turn),
]

RULES = {
    Situation.OPENING: OPENING_RULES,
    Situation.RESPONSE: RESPONSE_RULES,
    Situation.REBID: REBID_RULES,
    Situation.COMPETITIVE: [],
}


def resolve(rules, ctx):
    """
    Walk a rule table top to bottom

    The first rule that applies and offers a legal bid wins. An illegal
    candidate falls through to the rule's next candidate, then to the
    next rule, and finally to Pass.
    """
    for rule in rules:
        if not rule.applies(ctx):
            continue
        for candidate, reason in rule.candidates(ctx):
            if ctx.auction.is_valid_bid(candidate):
                return candidate, reason
    return PASS, f"Pass (no clear bid, {ctx.hcp} HCP)"


class PolishClubBidding:
    """
    Polish Club bidding engine

    Stateless: a recommendation depends only on the hand, the auction and
    the seat, so one instance can serve every table and thread.
    """

    def __init__(self, rules=None):
        self.rules = dict(RULES)
        if rules:
            self.rules.update(rules)

    def get_recommendation(self, hand, auction, position):
        """
        Get bidding recommendation for the seat about to act

        Args:
            hand: Hand, or a LIN string
            auction: Auction so far
            position: Seat that is about to bid

        Returns: (bid, reasoning)
        """
        if isinstance(hand, str):
            hand = Hand(hand)
        ctx = classify(hand, auction, position)
        return resolve(self.rules[ctx.situation], ctx)

    def make_bid(self, hand, auction, position):
        """Return only the recommended bid"""
        return self.get_recommendation(hand, auction, position)[0]

    def explain(self, hand, auction, position, submitted):
        """
        Compare a player's bid with the recommendation

        Returns:
            dict with isRecommended, recommendedBid and, when they differ,
            an HCP-based explanation
        """
        if isinstance(hand, str):
            hand = Hand(hand)
        recommended, reasoning = self.get_recommendation(hand, auction, position)
        result = {
            'isRecommended': submitted == recommended,
            'recommendedBid': recommended.code,
            'reasoning': reasoning,
        }
        if submitted != recommended:
            result['explanation'] = f"With {hand.hcp} HCP, the recommended bid is {recommended}"
        return result
