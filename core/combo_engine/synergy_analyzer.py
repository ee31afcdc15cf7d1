"""
synergy_analyzer.py - Pairwise combo detection between two cards

This module checks one card's triggers against the other card's enablers using
a resonance table keyed by (trigger kind, enabler capability), classifies the
resulting combo from the trigger's effect, and falls back to a value-engine
heuristic when no loop is found.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from .card_model import Card
from .combo_scoring import ComboScorer
from .pattern_extractor import PatternIndex
from .patterns import (ComboPattern, ComboType, EnablerCapability, EnablerPattern,
                       Interaction, TriggerKind, TriggerPattern)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResonanceRule:
    """A (trigger kind, enabler capability) pairing known to loop.

    `capability` None accepts any enabler. The effect and enabler-text term
    lists are any-of, except `effect_all` which needs every term.
    """
    trigger_kind: TriggerKind
    capability: Optional[EnablerCapability]
    interaction: Interaction
    effect_any: Tuple[str, ...] = ()
    effect_all: Tuple[str, ...] = ()
    enabler_text_any: Tuple[str, ...] = ()

    def pairs_with(self, trigger: TriggerPattern, enabler: EnablerPattern) -> bool:
        """Kind-level match, ignoring effect and text conditions."""
        if trigger.kind is not self.trigger_kind:
            return False
        return self.capability is None or enabler.enables(self.capability)

    def matches(self, trigger: TriggerPattern, enabler: EnablerPattern, enabler_text: str) -> bool:
        if not self.pairs_with(trigger, enabler):
            return False
        effect = trigger.effect
        if self.effect_any and not any(term in effect for term in self.effect_any):
            return False
        if self.effect_all and not all(term in effect for term in self.effect_all):
            return False
        if self.enabler_text_any and not any(term in enabler_text for term in self.enabler_text_any):
            return False
        return True


RESONANCE_TABLE: Tuple[ResonanceRule, ...] = (
    ResonanceRule(TriggerKind.ENTERS_PLAY, EnablerCapability.BOUNCE_FLICKER, Interaction.BOUNCE_LOOP,
                  effect_any=('add', 'deal', 'draw', 'create')),
    ResonanceRule(TriggerKind.LEAVES_PLAY, EnablerCapability.SACRIFICE, Interaction.SACRIFICE_LOOP,
                  effect_all=('create', 'token')),
    ResonanceRule(TriggerKind.ON_TAP, EnablerCapability.UNTAP, Interaction.TAP_UNTAP_LOOP,
                  effect_any=('add', 'deal', 'draw')),
    ResonanceRule(TriggerKind.ON_CAST, None, Interaction.FREE_CAST,
                  enabler_text_any=('without paying',)),
)

# First row whose terms all appear in the effect decides the combo type
EFFECT_CLASSIFICATION: Tuple[Tuple[Tuple[str, ...], ComboType], ...] = (
    (('add',), ComboType.INFINITE_MANA),
    (('deal',), ComboType.INFINITE_DAMAGE),
    (('draw',), ComboType.INFINITE_CARDS),
    (('gain', 'life'), ComboType.INFINITE_LIFE),
    (('create',), ComboType.VALUE_ENGINE),
)

VALUE_ENGINE_TERMS = ('draw', 'create', 'search')

STEP_TEMPLATES: Dict[Interaction, Tuple[str, ...]] = {
    Interaction.BOUNCE_LOOP: (
        "1. Play {trigger}",
        "2. Activate {enabler} to return {trigger} to your hand",
        "3. Replay {trigger}",
        "4. Repeat the loop",
    ),
    Interaction.TAP_UNTAP_LOOP: (
        "1. Tap {trigger}",
        "2. Activate {enabler} to untap {trigger}",
        "3. Repeat indefinitely",
    ),
    Interaction.SACRIFICE_LOOP: (
        "1. Put {trigger} onto the battlefield",
        "2. Sacrifice {trigger} to {enabler}",
        "3. {trigger} dies and creates a token",
        "4. Sacrifice the token to {enabler} and repeat",
    ),
    Interaction.FREE_CAST: (
        "1. Put {trigger} onto the battlefield",
        "2. Cast spells without paying their mana cost using {enabler}",
        "3. Each cast triggers {trigger}",
    ),
    Interaction.VALUE_ENGINE: (
        "1. Establish {trigger} and {enabler}",
        "2. Activate {enabler} repeatedly",
        "3. Accumulate card and board advantage from {trigger}",
    ),
}


def classify_effect(effect: str) -> ComboType:
    """Combo type implied by a trigger's effect snippet."""
    for terms, combo_type in EFFECT_CLASSIFICATION:
        if all(term in effect for term in terms):
            return combo_type
    return ComboType.GENERIC_SYNERGY


def _lower_text(card: Card) -> str:
    return card.oracle_text.lower() if isinstance(card.oracle_text, str) else ''


def _requirements(interaction: Interaction, trigger_card: Card, enabler: EnablerPattern,
                  enabler_card: Card) -> Tuple[str, ...]:
    if interaction is Interaction.BOUNCE_LOOP:
        cycle_cost = int(round(trigger_card.mana_value)) + (1 if enabler.cost else 0)
        return (f"Enough mana per cycle: {cycle_cost}",)
    if interaction is Interaction.TAP_UNTAP_LOOP:
        return (f"Untap cost payable each iteration: {enabler.cost or 'free'}",)
    if interaction is Interaction.SACRIFICE_LOOP:
        return (f"{enabler_card.name} must be able to sacrifice repeatedly",)
    if interaction is Interaction.FREE_CAST:
        return ("Spells available to cast for free",)
    return ("Stable initial setup",)


class SynergyAnalyzer:
    """Analyzes two cards' patterns for combo potential."""

    def __init__(self, index: PatternIndex, scorer: Optional[ComboScorer] = None,
                 resonance_table: Sequence[ResonanceRule] = RESONANCE_TABLE):
        self.index = index
        self.scorer = scorer or ComboScorer()
        self.resonance_table = tuple(resonance_table)

    def resonance_for(self, trigger: TriggerPattern, enabler: EnablerPattern,
                      enabler_card: Card) -> Optional[ResonanceRule]:
        """The first resonance rule the pairing satisfies, if any."""
        if trigger.card_id == enabler.card_id:
            return None
        enabler_text = _lower_text(enabler_card)
        for rule in self.resonance_table:
            if rule.matches(trigger, enabler, enabler_text):
                return rule
        return None

    def resonates(self, trigger: TriggerPattern, enabler: EnablerPattern, enabler_card: Card) -> bool:
        return self.resonance_for(trigger, enabler, enabler_card) is not None

    def build_combo(self, trigger_card: Card, enabler_card: Card, trigger: TriggerPattern,
                    enabler: EnablerPattern, interaction: Interaction) -> ComboPattern:
        """Assemble a scored ComboPattern with its step narrative."""
        if interaction is Interaction.VALUE_ENGINE:
            combo_type = ComboType.VALUE_ENGINE
        else:
            combo_type = classify_effect(trigger.effect)

        cards = (trigger_card, enabler_card)
        power_level, consistency = self.scorer.score(cards, interaction)
        steps = tuple(
            line.format(trigger=trigger_card.name, enabler=enabler_card.name)
            for line in STEP_TEMPLATES[interaction]
        )
        return ComboPattern(
            combo_type=combo_type,
            cards=(trigger_card.id, enabler_card.id),
            steps=steps,
            requirements=_requirements(interaction, trigger_card, enabler, enabler_card),
            power_level=power_level,
            consistency=consistency,
            mana_cost=self.scorer.mana_cost(cards),
            colors_required=self.scorer.required_colors(cards),
        )

    def analyze_pair(self, card_a: Card, card_b: Card) -> Optional[ComboPattern]:
        """Classify the strongest interaction between two cards, or None.

        Cards are visited in id order so the outcome does not depend on
        argument order.
        """
        if card_a.id == card_b.id:
            return None
        first, second = sorted((card_a, card_b), key=lambda c: c.id)

        for trigger_card, enabler_card in ((first, second), (second, first)):
            for trigger in self.index.triggers_for(trigger_card.id):
                for enabler in self.index.enablers_for(enabler_card.id):
                    rule = self.resonance_for(trigger, enabler, enabler_card)
                    if rule is not None:
                        logger.debug(
                            f"{trigger_card.name} + {enabler_card.name}: {rule.interaction.value}")
                        return self.build_combo(trigger_card, enabler_card, trigger, enabler, rule.interaction)

        return self._check_value_engine(first, second)

    def _check_value_engine(self, first: Card, second: Card) -> Optional[ComboPattern]:
        """Progressive-advantage fallback: a payoff trigger plus a repeatable enabler."""
        cards = {first.id: first, second.id: second}
        triggers = self.index.triggers_for(first.id) + self.index.triggers_for(second.id)
        enablers = self.index.enablers_for(first.id) + self.index.enablers_for(second.id)

        for trigger in triggers:
            if not any(term in trigger.effect for term in VALUE_ENGINE_TERMS):
                continue
            for enabler in enablers:
                if enabler.repeatable and enabler.card_id != trigger.card_id:
                    return self.build_combo(cards[trigger.card_id], cards[enabler.card_id],
                                            trigger, enabler, Interaction.VALUE_ENGINE)
        return None

    @staticmethod
    def explain(card_a: Card, card_b: Card, combo: ComboPattern) -> str:
        return f"{card_a.name} + {card_b.name}: {combo.combo_type.value} combo"
