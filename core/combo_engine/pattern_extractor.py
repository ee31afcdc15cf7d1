"""
pattern_extractor.py - Infers trigger and enabler capabilities from rules text

Extraction is keyword/phrase presence over lower-cased rules text, not a rules
parser. Every recognized mechanic is a row in TRIGGER_RULES or ENABLER_RULES;
recognizing a new one means adding a row.
"""
import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from .card_model import Card
from .exceptions import MalformedCardText
from .patterns import EnablerCapability, EnablerPattern, TriggerKind, TriggerPattern

logger = logging.getLogger(__name__)

DEFAULT_EFFECT_LIMIT = 200

SENTENCE_TERMINATOR = re.compile(r'[.\n]')

# "{2}, {T}: effect", "Sacrifice a creature: effect", "+1: effect"
ACTIVATED_ABILITY = re.compile(r'^[ \t]*([^:\n.]{1,80}?):[ \t]*(.*)$', re.MULTILINE)
COST_VERBS = ('sacrifice', 'pay', 'discard', 'exile', 'remove', 'tap', 'untap', 'return', 'put')
LOYALTY_COST = re.compile(r'^[+\-−]?\d+$')

CAST_CONDITION = re.compile(
    r'(?:whenever|when) you cast[^.\n]*?\b(spell|creature|artifact|enchantment|instant|sorcery)\b')
TAP_SYMBOL = re.compile(r'\{[^}]*t[^}]*\}')


@dataclass(frozen=True)
class TriggerRule:
    """One recognized trigger.

    The first of `phrases` found in the text (in listed order) anchors the
    effect snippet; `requires_any` must also contribute one present word.
    """
    kind: TriggerKind
    phrases: Tuple[str, ...]
    requires_any: Tuple[str, ...] = ()
    captures_condition: bool = False
    captures_tap_cost: bool = False


@dataclass(frozen=True)
class EnablerRule:
    """One recognized enabler; every group in `all_of` needs one present phrase."""
    capability: EnablerCapability
    all_of: Tuple[Tuple[str, ...], ...]
    none_of: Tuple[str, ...] = ()
    needs_activation_cost: bool = False
    anchor: str = ''


TRIGGER_RULES: Tuple[TriggerRule, ...] = (
    TriggerRule(TriggerKind.ENTERS_PLAY, ('enters the battlefield',)),
    TriggerRule(TriggerKind.LEAVES_PLAY, ('dies', 'is put into a graveyard')),
    TriggerRule(TriggerKind.ON_CAST, ('whenever you cast', 'when you cast'), captures_condition=True),
    TriggerRule(TriggerKind.ON_TAP, ('tap', '{t}'), requires_any=('add', 'deal', 'draw'), captures_tap_cost=True),
    TriggerRule(TriggerKind.ON_ATTACK, ('attack',), requires_any=('whenever',)),
    TriggerRule(TriggerKind.ON_DAMAGE, ('damage',), requires_any=('whenever', 'when')),
    TriggerRule(TriggerKind.ON_LIFEGAIN, ('gain life',), requires_any=('whenever', 'when')),
    TriggerRule(TriggerKind.ON_SACRIFICE, ('sacrifice',), requires_any=('whenever', 'when')),
    TriggerRule(TriggerKind.ON_DISCARD, ('discard',), requires_any=('whenever', 'when')),
)

ENABLER_RULES: Tuple[EnablerRule, ...] = (
    EnablerRule(EnablerCapability.UNTAP, (('untap',),), none_of=("doesn't untap",), anchor='untap'),
    EnablerRule(EnablerCapability.BOUNCE_FLICKER, (('return',), ('hand', 'battlefield')), anchor='return'),
    EnablerRule(EnablerCapability.SACRIFICE, (('sacrifice',),), needs_activation_cost=True, anchor='sacrifice'),
    EnablerRule(EnablerCapability.TOKEN_GENERATION, (('create',), ('token',)), anchor='create'),
    EnablerRule(EnablerCapability.MANA_PRODUCTION, (('add',), ('mana', 'add {')), anchor='add'),
)


def card_text(card: Card) -> str:
    """Lower-cased rules text; raises MalformedCardText when unusable."""
    if not isinstance(card.oracle_text, str):
        raise MalformedCardText(card.id, card.oracle_text)
    return card.oracle_text.lower()


def effect_snippet(text: str, phrase: str, limit: int = DEFAULT_EFFECT_LIMIT) -> str:
    """Text following `phrase` up to the next sentence terminator.

    The end of the text counts as a terminator when it falls inside the
    window; otherwise a window without terminator yields ''.
    """
    index = text.find(phrase)
    if index == -1:
        return ''
    rest = text[index + len(phrase):]
    window = rest[:limit]
    match = SENTENCE_TERMINATOR.search(window)
    if match:
        snippet = window[:match.start()]
    elif len(rest) <= limit:
        snippet = window
    else:
        return ''
    return snippet.strip(' ,;:—-')


def _is_cost(prefix: str) -> bool:
    prefix = prefix.strip()
    if '{' in prefix or LOYALTY_COST.match(prefix):
        return True
    return prefix.startswith(COST_VERBS)


def activated_abilities(text: str) -> List[Tuple[str, str]]:
    """(cost, effect) for every activated ability line in `text`."""
    abilities = []
    for match in ACTIVATED_ABILITY.finditer(text):
        cost, effect = match.group(1).strip(), match.group(2).strip()
        if _is_cost(cost):
            abilities.append((cost, effect))
    return abilities


def _format_cost(cost: str) -> str:
    return re.sub(r'\{[^}]*\}', lambda m: m.group(0).upper(), cost)


def activation_cost(abilities: List[Tuple[str, str]], anchor: str) -> str:
    """Cost of the first activated ability mentioning `anchor`, or ''."""
    for cost, effect in abilities:
        if anchor in effect or anchor in cost:
            return _format_cost(cost)
    return ''


def _first_present(text: str, phrases: Iterable[str]) -> Optional[str]:
    for phrase in phrases:
        if phrase in text:
            return phrase
    return None


def extract_triggers(card: Card, limit: int = DEFAULT_EFFECT_LIMIT) -> List[TriggerPattern]:
    text = card_text(card)
    triggers = []
    for rule in TRIGGER_RULES:
        phrase = _first_present(text, rule.phrases)
        if phrase is None:
            continue
        if rule.requires_any and _first_present(text, rule.requires_any) is None:
            continue

        condition = None
        if rule.captures_condition:
            match = CAST_CONDITION.search(text)
            condition = match.group(1) if match else None

        cost = None
        if rule.captures_tap_cost:
            tap_match = TAP_SYMBOL.search(text)
            cost = tap_match.group(0).upper() if tap_match else '{T}'

        triggers.append(TriggerPattern(
            card_id=card.id,
            kind=rule.kind,
            effect=effect_snippet(text, phrase, limit),
            condition=condition,
            cost=cost,
        ))
    return triggers


def extract_enablers(card: Card) -> List[EnablerPattern]:
    text = card_text(card)
    abilities = activated_abilities(text)
    repeatable = bool(abilities) or 'activate' in text or 'whenever' in text

    enablers = []
    for rule in ENABLER_RULES:
        if any(phrase in text for phrase in rule.none_of):
            continue
        if not all(_first_present(text, group) for group in rule.all_of):
            continue
        if rule.needs_activation_cost and not abilities:
            continue
        enablers.append(EnablerPattern(
            card_id=card.id,
            capabilities=frozenset({rule.capability}),
            cost=activation_cost(abilities, rule.anchor),
            repeatable=repeatable,
        ))
    return enablers


def extract(cards: Iterable[Card], limit: int = DEFAULT_EFFECT_LIMIT) -> Tuple[List[TriggerPattern], List[EnablerPattern]]:
    """Scan every card's rules text for trigger and enabler phrases.

    Cards with malformed text are skipped. Output order follows card order
    then rule order, so repeated runs over the same pool are identical.
    """
    triggers: List[TriggerPattern] = []
    enablers: List[EnablerPattern] = []
    for card in cards:
        try:
            card_triggers = extract_triggers(card, limit)
            card_enablers = extract_enablers(card)
        except MalformedCardText as e:
            logger.warning(f"Skipping pattern extraction for {card.name or card.id}: {e.message}")
            continue
        triggers.extend(card_triggers)
        enablers.extend(card_enablers)
    return triggers, enablers


@dataclass(frozen=True)
class PatternIndex:
    """Read-only per-card lookup over extracted patterns."""
    triggers_by_card: Mapping[str, Tuple[TriggerPattern, ...]] = field(default_factory=dict)
    enablers_by_card: Mapping[str, Tuple[EnablerPattern, ...]] = field(default_factory=dict)

    @classmethod
    def build(cls, triggers: Iterable[TriggerPattern], enablers: Iterable[EnablerPattern]) -> 'PatternIndex':
        by_trigger = defaultdict(list)
        by_enabler = defaultdict(list)
        for trigger in triggers:
            by_trigger[trigger.card_id].append(trigger)
        for enabler in enablers:
            by_enabler[enabler.card_id].append(enabler)
        return cls(
            triggers_by_card=MappingProxyType({k: tuple(v) for k, v in by_trigger.items()}),
            enablers_by_card=MappingProxyType({k: tuple(v) for k, v in by_enabler.items()}),
        )

    def triggers_for(self, card_id: str) -> Tuple[TriggerPattern, ...]:
        return self.triggers_by_card.get(card_id, ())

    def enablers_for(self, card_id: str) -> Tuple[EnablerPattern, ...]:
        return self.enablers_by_card.get(card_id, ())
