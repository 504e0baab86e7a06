"""
Bid Tutor - command line practice table
You sit South; the other three seats bid with the Polish Club engine.
After each of your bids the tutor says whether it agrees.

    python tutor.py            # play one board in the terminal
    python tutor.py --seed 7   # repeatable deal
    python tutor.py --web      # start the browser version instead
"""

import argparse
import random
import re

from auction import Auction, AuctionClosedError, BidParseError, IllegalBidError, Position, parse_bid
from bidding_system import Hand, PolishClubBidding
from cards import DISPLAY_SUITS, Strain, deal
from contract_scoring import calculate_score

HUMAN_SEAT = Position.SOUTH

# ANSI escape codes for colors
SUIT_SYMBOLS = {
    Strain.SPADES: '\033[97m♠\033[0m',  # White
    Strain.HEARTS: '\033[91m♥\033[0m',  # Red
    Strain.DIAMONDS: '\033[91m♦\033[0m',  # Red
    Strain.CLUBS: '\033[97m♣\033[0m'   # White
}


def visible_len(s):
    return len(re.sub(r'\x1b\[[0-9;]*m', '', s))


def pad_right(s, width):
    return s + ' ' * (width - visible_len(s))


def format_hand(hand):
    """One line per suit, spades first"""
    return [f"{SUIT_SYMBOLS[suit]}: {hand.holding(suit) or '-'}" for suit in DISPLAY_SUITS]


def format_auction(auction, first=Position.NORTH):
    """Auction as a four-column grid starting with the first bidder"""
    seats = [Position((first + i) % 4) for i in range(4)]
    lines = [''.join(pad_right(seat.label, 10) for seat in seats)]
    row = []
    for entry in auction.entries:
        row.append(pad_right(str(entry.bid), 10))
        if len(row) == 4:
            lines.append(''.join(row))
            row = []
    if row:
        lines.append(''.join(row))
    return lines


class PracticeTable:
    """One board: the human bids for their seat, the engine bids the rest"""

    def __init__(self, engine=None, human=HUMAN_SEAT, read_bid=input, hands=None, rng=None,
                 dealer=Position.NORTH):
        self.engine = engine or PolishClubBidding()
        self.human = human
        self.read_bid = read_bid
        if hands is None:
            hands = [Hand.from_cards(cards) for cards in deal(rng=rng)]
        self.hands = {Position(i): hand for i, hand in enumerate(hands)}
        self.dealer = dealer
        self.turn = dealer
        self.auction = Auction()
        self.agreed = 0
        self.human_bids = 0

    def show_hand(self):
        hand = self.hands[self.human]
        print(f"\n{' ' * 4}{self.human.label} (HCP: {hand.hcp})")
        for line in format_hand(hand):
            print(f"{' ' * 6}{line}")
        print()

    def ask_human(self):
        """Prompt until the human enters a legal bid"""
        while True:
            text = self.read_bid(f"Your bid ({self.human.label}): ")
            try:
                bid = parse_bid(text)
            except BidParseError as e:
                print(f"⚠️  {e}. Try 1C, 2NT, pass, x or xx.")
                continue
            if not self.auction.is_valid_bid(bid):
                print(f"⚠️  {bid} is not higher than {self.auction.last_non_pass_bid()}")
                continue
            return bid

    def coach(self, bid):
        feedback = self.engine.explain(self.hands[self.human], self.auction, self.human, bid)
        self.human_bids += 1
        if feedback['isRecommended']:
            self.agreed += 1
            print(f"✅ Good bid: {feedback['reasoning']}")
        else:
            print(f"💡 {feedback['explanation']} ({feedback['reasoning']})")

    def play_turn(self):
        """Make one bid for the seat on turn"""
        if self.auction.is_over():
            raise AuctionClosedError()

        position = self.turn
        if position == self.human:
            bid = self.ask_human()
            self.coach(bid)
        else:
            bid = self.engine.make_bid(self.hands[position], self.auction, position)
            print(f"🤖 {position.label} bids {bid}")

        if not self.auction.is_valid_bid(bid):
            raise IllegalBidError(f"{position.label} cannot bid {bid}")
        self.auction.add_bid(bid, position)
        self.turn = position.next()
        return bid

    def play(self):
        """
        Bid the board to the end

        Returns:
            Contract, or None if all four players passed
        """
        self.show_hand()
        while not self.auction.is_over():
            if self.turn == self.human and self.auction.entries:
                print()
                for line in format_auction(self.auction, self.dealer):
                    print(f"  {line}")
            self.play_turn()

        print(f"\n{'=' * 40}")
        for line in format_auction(self.auction, self.dealer):
            print(f"  {line}")

        contract = self.auction.final_contract()
        if contract is None:
            print("\n📭 Passed out")
        else:
            score = calculate_score(contract)
            print(f"\n🏁 Final contract: {contract} ({score['total']} if made)")
        if self.human_bids:
            print(f"🎯 You agreed with the tutor on {self.agreed} of {self.human_bids} bids")
        print(f"{'=' * 40}\n")
        return contract


def main(argv=None):
    parser = argparse.ArgumentParser(description="Practice Polish Club bidding against three robots")
    parser.add_argument('--seed', type=int, help="seed for a repeatable deal")
    parser.add_argument('--web', action='store_true', help="start the web server instead")
    parser.add_argument('--port', type=int, default=5001, help="web server port (default: 5001)")
    args = parser.parse_args(argv)

    if args.web:
        from web import start_server
        start_server(port=args.port)
        return

    rng = random.Random(args.seed) if args.seed is not None else None
    try:
        PracticeTable(rng=rng).play()
    except (EOFError, KeyboardInterrupt):
        print("\n👋 Bye")


if __name__ == "__main__":
    main()
