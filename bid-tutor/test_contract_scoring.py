"""
Unit tests for contract scoring
"""

import unittest

from auction import Contract, Position
from cards import Strain
from contract_scoring import calculate_score, trick_score

N, E = Position.NORTH, Position.EAST


class TestTrickScore(unittest.TestCase):

    def test_trick_values(self):
        self.assertEqual(trick_score(2, Strain.CLUBS), 40)
        self.assertEqual(trick_score(4, Strain.HEARTS), 120)
        self.assertEqual(trick_score(1, Strain.NOTRUMP), 40)
        self.assertEqual(trick_score(3, Strain.NOTRUMP), 100)

    def test_doubling(self):
        self.assertEqual(trick_score(2, Strain.SPADES, doubled=True), 120)
        self.assertEqual(trick_score(2, Strain.SPADES, redoubled=True), 240)
        self.assertEqual(trick_score(2, Strain.SPADES, doubled=True, redoubled=True), 240)


class TestMadeContracts(unittest.TestCase):
    """Contracts made exactly"""

    def test_part_score(self):
        score = calculate_score(Contract(2, Strain.CLUBS, N))
        self.assertEqual(score['total'], 90)
        self.assertFalse(score['makes_game'])

    def test_major_game(self):
        score = calculate_score(Contract(4, Strain.HEARTS, N))
        self.assertEqual(score['total'], 420)
        self.assertTrue(score['makes_game'])
        self.assertEqual(score['partnership'], 'NS')

    def test_vulnerable_3nt(self):
        self.assertEqual(calculate_score(Contract(3, Strain.NOTRUMP, E), vulnerable=True)['total'], 600)

    def test_vulnerable_small_slam(self):
        self.assertEqual(calculate_score(Contract(6, Strain.DIAMONDS, N), vulnerable=True)['total'], 1370)

    def test_doubled_grand_slam(self):
        contract = Contract(7, Strain.SPADES, N, doubled=True)
        self.assertEqual(calculate_score(contract)['total'], 1770)

    def test_doubled_into_game(self):
        """2S doubled is worth 120 trick points, enough for game"""
        score = calculate_score(Contract(2, Strain.SPADES, N, doubled=True))
        self.assertTrue(score['makes_game'])
        self.assertEqual(score['total'], 120 + 300 + 50)

    def test_redoubled_part_score(self):
        score = calculate_score(Contract(1, Strain.CLUBS, N, redoubled=True))
        self.assertEqual(score['total'], 80 + 50 + 100)


class TestOverAndUndertricks(unittest.TestCase):

    def test_overtricks(self):
        score = calculate_score(Contract(4, Strain.SPADES, N), tricks_made=11)
        self.assertEqual(score['overtricks'], 1)
        self.assertEqual(score['total'], 450)

    def test_doubled_overtricks(self):
        score = calculate_score(Contract(2, Strain.SPADES, N, doubled=True), vulnerable=True, tricks_made=9)
        self.assertEqual(score['overtrick_points'], 200)

    def test_undoubled_undertricks(self):
        self.assertEqual(calculate_score(Contract(4, Strain.HEARTS, N), tricks_made=8)['total'], -100)
        self.assertEqual(calculate_score(Contract(4, Strain.HEARTS, N), True, tricks_made=8)['total'], -200)

    def test_doubled_undertricks(self):
        contract = Contract(3, Strain.NOTRUMP, E, doubled=True)
        self.assertEqual(calculate_score(contract, tricks_made=5)['total'], -(100 + 200 + 200 + 300))
        self.assertEqual(calculate_score(contract, True, tricks_made=8)['total'], -200)

    def test_redoubled_undertrick(self):
        contract = Contract(1, Strain.SPADES, E, redoubled=True)
        score = calculate_score(contract, tricks_made=6)
        self.assertEqual(score['total'], -200)
        self.assertEqual(score['undertricks'], 1)


if __name__ == '__main__':
    unittest.main()
