"""
combo_scoring.py - Power level, consistency and aggregate cost of a combo

The constants are hand-tuned heuristics and are kept as-is:
- Power level is a fixed base per interaction shape
- Consistency starts at 10 and is penalized for expensive or many-colored
  combos, with a small bonus when a creature is involved
"""
from typing import Dict, FrozenSet, Sequence, Tuple

from .card_model import Card, ColorIdentity
from .patterns import Interaction

MIN_SCORE = 1
MAX_SCORE = 10

BASE_POWER: Dict[Interaction, int] = {
    Interaction.BOUNCE_LOOP: 8,
    Interaction.TAP_UNTAP_LOOP: 9,
    Interaction.VALUE_ENGINE: 6,
    Interaction.SACRIFICE_LOOP: 5,
    Interaction.FREE_CAST: 5,
}
GENERIC_SYNERGY_POWER = 5


def clamp_score(value: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, int(value)))


class ComboScorer:
    """Scores a candidate combo from its participating cards."""

    def power_level(self, interaction: Interaction) -> int:
        return clamp_score(BASE_POWER.get(interaction, GENERIC_SYNERGY_POWER))

    def consistency(self, cards: Sequence[Card]) -> int:
        """How reliably the combo can be assembled (1-10)."""
        if not cards:
            return MIN_SCORE
        consistency = 10

        avg_mana_value = sum(c.mana_value for c in cards) / len(cards)
        if avg_mana_value > 4:
            consistency -= 2
        if avg_mana_value > 6:
            consistency -= 2

        color_count = len(self.required_colors(cards))
        if color_count > 2:
            consistency -= 1
        if color_count > 3:
            consistency -= 2

        # Creatures are easier to find and deploy
        if any(c.is_creature() for c in cards):
            consistency += 1

        return clamp_score(consistency)

    def score(self, cards: Sequence[Card], interaction: Interaction) -> Tuple[int, int]:
        """Return (power_level, consistency)."""
        return self.power_level(interaction), self.consistency(cards)

    @staticmethod
    def mana_cost(cards: Sequence[Card]) -> int:
        """Sum of participant mana values."""
        return int(round(sum(c.mana_value for c in cards)))

    @staticmethod
    def required_colors(cards: Sequence[Card]) -> FrozenSet[str]:
        """Union of participant color identities."""
        identity = ColorIdentity()
        for card in cards:
            identity = identity.union(card.color_identity)
        return identity.colors
