"""
Contract Scoring
Scores the contract reached at the end of an auction:
- Trick points (minors 20, majors 30, No Trump 40 then 30)
- Game (500 vulnerable / 300 not) or part-score (50) bonus
- Slam bonuses
- Doubled and redoubled contracts, overtricks and undertricks
"""

from cards import Strain

TRICK_VALUES = {
    Strain.CLUBS: 20,
    Strain.DIAMONDS: 20,
    Strain.HEARTS: 30,
    Strain.SPADES: 30,
    Strain.NOTRUMP: 30,  # first trick in NT is worth 40
}


def trick_score(level, strain, doubled=False, redoubled=False):
    """Points for the contracted tricks"""
    if strain == Strain.NOTRUMP:
        points = 40 + (level - 1) * 30
    else:
        points = level * TRICK_VALUES[strain]

    if redoubled:
        points *= 4
    elif doubled:
        points *= 2
    return points


def calculate_score(contract, vulnerable=False, tricks_made=None):
    """
    Calculate the declaring side's score for a contract.

    Args:
        contract: auction.Contract
        vulnerable: Is the declaring side vulnerable?
        tricks_made: Tricks taken by declarer (default: exactly the contract)

    Returns:
        dict with scoring breakdown; total is negative when the contract fails
    """
    tricks_needed = 6 + contract.level
    if tricks_made is None:
        tricks_made = tricks_needed

    if tricks_made < tricks_needed:
        return _calculate_penalty(contract, tricks_needed - tricks_made, vulnerable)
    return _calculate_made_contract(contract, tricks_made - tricks_needed, vulnerable)


def _calculate_made_contract(contract, overtricks, vulnerable):
    doubled, redoubled = contract.doubled, contract.redoubled
    trick_points = trick_score(contract.level, contract.strain, doubled, redoubled)
    makes_game = trick_points >= 100

    bonus = 0
    if makes_game:
        bonus += 500 if vulnerable else 300
    else:
        bonus += 50

    if contract.level == 6:  # Small slam
        bonus += 750 if vulnerable else 500
    elif contract.level == 7:  # Grand slam
        bonus += 1500 if vulnerable else 1000

    # Insult bonus
    if redoubled:
        bonus += 100
    elif doubled:
        bonus += 50

    overtrick_points = 0
    if overtricks > 0:
        if doubled or redoubled:
            overtrick_value = 200 if vulnerable else 100
            if redoubled:
                overtrick_value *= 2
            overtrick_points = overtricks * overtrick_value
        else:
            overtrick_points = overtricks * TRICK_VALUES[contract.strain]

    total = trick_points + bonus + overtrick_points
    return {
        'partnership': contract.declarer.partnership,
        'trick_points': trick_points,
        'bonus': bonus,
        'overtricks': overtricks,
        'overtrick_points': overtrick_points,
        'total': total,
        'makes_game': makes_game,
        'vulnerable': vulnerable,
        'description': f"{contract} made" + (f" with {overtricks} overtrick(s)" if overtricks else ''),
    }


def _calculate_penalty(contract, undertricks, vulnerable):
    doubled, redoubled = contract.doubled, contract.redoubled
    if not (doubled or redoubled):
        penalty = undertricks * (100 if vulnerable else 50)
    else:
        penalty = 0
        for i in range(undertricks):
            if i == 0:
                penalty += 200 if vulnerable else 100
            elif i in (1, 2):
                penalty += 300 if vulnerable else 200
            else:
                penalty += 300
        if redoubled:
            penalty *= 2

    return {
        'partnership': contract.declarer.partnership,
        'trick_points': 0,
        'bonus': 0,
        'undertricks': undertricks,
        'total': -penalty,
        'makes_game': False,
        'vulnerable': vulnerable,
        'description': f"{contract} down {undertricks}",
    }
