"""
patterns.py - Structured annotations inferred from rules text, and engine output

TriggerPattern and EnablerPattern are produced once per session by the pattern
extractor; ComboPattern is what the discovery drivers return.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple


class TriggerKind(Enum):
    """Game events a card reacts to automatically."""
    ENTERS_PLAY = "enters_play"
    LEAVES_PLAY = "leaves_play"
    ON_CAST = "on_cast"
    ON_TAP = "on_tap"
    ON_ATTACK = "on_attack"
    ON_DAMAGE = "on_damage"
    ON_LIFEGAIN = "on_lifegain"
    ON_SACRIFICE = "on_sacrifice"
    ON_DISCARD = "on_discard"


class EnablerCapability(Enum):
    """Things a card can be activated to do."""
    UNTAP = "untap"
    BOUNCE_FLICKER = "bounce_flicker"
    SACRIFICE = "sacrifice"
    TOKEN_GENERATION = "token_generation"
    MANA_PRODUCTION = "mana_production"


class ComboType(Enum):
    INFINITE_MANA = "infinite_mana"
    INFINITE_DAMAGE = "infinite_damage"
    INFINITE_CARDS = "infinite_cards"
    INFINITE_LIFE = "infinite_life"
    VALUE_ENGINE = "value_engine"
    LOCK = "lock"
    GENERIC_SYNERGY = "generic_synergy"

    @property
    def is_infinite(self) -> bool:
        return self.value.startswith('infinite_')


class Interaction(Enum):
    """Shape of the loop behind a combo; drives narrative and base power."""
    BOUNCE_LOOP = "bounce_loop"
    TAP_UNTAP_LOOP = "tap_untap_loop"
    SACRIFICE_LOOP = "sacrifice_loop"
    FREE_CAST = "free_cast"
    VALUE_ENGINE = "value_engine"


@dataclass(frozen=True)
class TriggerPattern:
    card_id: str
    kind: TriggerKind
    effect: str
    condition: Optional[str] = None
    cost: Optional[str] = None


@dataclass(frozen=True)
class EnablerPattern:
    card_id: str
    capabilities: FrozenSet[EnablerCapability]
    cost: str = ''
    repeatable: bool = False

    def enables(self, capability: EnablerCapability) -> bool:
        return capability in self.capabilities


@dataclass(frozen=True)
class ComboPattern:
    """A candidate combo between two cards."""
    combo_type: ComboType
    cards: Tuple[str, ...]
    steps: Tuple[str, ...] = ()
    requirements: Tuple[str, ...] = ()
    power_level: int = 5
    consistency: int = 10
    mana_cost: int = 0
    colors_required: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if len(self.cards) < 2:
            raise ValueError("A combo needs at least two cards")
        if len(set(self.cards)) != len(self.cards):
            raise ValueError(f"Combo cards must be distinct: {self.cards}")

    def dedupe_key(self) -> Tuple[Tuple[str, ...], str]:
        """Canonical identity: sorted participants plus combo type."""
        return tuple(sorted(self.cards)), self.combo_type.value

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict for JSON responses."""
        return {
            'type': self.combo_type.value,
            'cards': list(self.cards),
            'steps': list(self.steps),
            'requirements': list(self.requirements),
            'power_level': self.power_level,
            'consistency': self.consistency,
            'mana_cost': self.mana_cost,
            'colors_required': sorted(self.colors_required, key='WUBRG'.index),
        }
