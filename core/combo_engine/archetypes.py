"""
archetypes.py - Archetype keyword table used to pre-filter the corpus
"""
from typing import Callable, Dict

from .card_model import Card


def _text(card: Card) -> str:
    return card.oracle_text.lower() if isinstance(card.oracle_text, str) else ''


def _lifegain(card: Card) -> bool:
    text = _text(card)
    return 'gain life' in text or 'lifegain' in text or 'lifegain' in card.tags


def _artifacts(card: Card) -> bool:
    return card.has_type('Artifact') or 'artifact' in _text(card) or 'artifacts' in card.tags


def _spells(card: Card) -> bool:
    text = _text(card)
    return 'instant' in text or 'sorcery' in text or 'noncreature spell' in text


def _tokens(card: Card) -> bool:
    text = _text(card)
    return 'create' in text and 'token' in text


def _sacrifice(card: Card) -> bool:
    return 'sacrifice' in _text(card) or 'sacrifice' in card.tags


def _graveyard(card: Card) -> bool:
    return 'graveyard' in _text(card)


def _counters(card: Card) -> bool:
    text = _text(card)
    return '+1/+1' in text or ('counter' in text and 'counter target' not in text)


ARCHETYPE_MATCHERS: Dict[str, Callable[[Card], bool]] = {
    'lifegain': _lifegain,
    'artifacts': _artifacts,
    'spells': _spells,
    'tokens': _tokens,
    'sacrifice': _sacrifice,
    'graveyard': _graveyard,
    'counters': _counters,
}


def matches_archetype(card: Card, archetype: str) -> bool:
    """True when the card fits the archetype.

    Unknown archetypes fall back to membership in the card's tags; an empty
    archetype matches every card.
    """
    key = (archetype or '').strip().lower()
    if not key:
        return True
    matcher = ARCHETYPE_MATCHERS.get(key)
    if matcher is None:
        return key in card.tags
    return matcher(card)
