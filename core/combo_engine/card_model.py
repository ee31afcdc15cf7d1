"""
card_model.py - Card records as seen by the combo discovery engine

This module provides the immutable Card record built from card store documents,
and the ColorIdentity helper used for color filtering and combo color requirements.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from .config import FORMAT_LEGALITY_FIELDS

COLOR_ORDER = 'WUBRG'

COLOR_NAMES = {
    'White': 'W', 'Blue': 'U', 'Black': 'B', 'Red': 'R', 'Green': 'G',
}


@dataclass(frozen=True)
class ColorIdentity:
    """Represents a color identity in Magic: The Gathering."""
    colors: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_color_list(cls, color_list: Optional[Iterable[str]]) -> 'ColorIdentity':
        """Create color identity from color symbols or color names."""
        colors = set()
        for color in color_list or []:
            if not isinstance(color, str):
                continue
            symbol = COLOR_NAMES.get(color, color.strip().upper())
            if len(symbol) == 1 and symbol in COLOR_ORDER:
                colors.add(symbol)
        return cls(frozenset(colors))

    @classmethod
    def from_mana_cost(cls, mana_cost: str) -> 'ColorIdentity':
        """Extract colors from a mana cost string, hybrid symbols included."""
        colors = set()
        for symbol in re.findall(r'\{([WUBRG/P0-9]+)\}', (mana_cost or '').upper()):
            colors.update(c for c in symbol.split('/') if c in COLOR_ORDER)
        return cls(frozenset(colors))

    def union(self, other: 'ColorIdentity') -> 'ColorIdentity':
        return ColorIdentity(self.colors | other.colors)

    def contains(self, other: 'ColorIdentity') -> bool:
        """Check if this color identity contains another."""
        return other.colors.issubset(self.colors)

    def overlaps(self, other: 'ColorIdentity') -> bool:
        return bool(self.colors & other.colors)

    def is_colorless(self) -> bool:
        return len(self.colors) == 0

    def color_count(self) -> int:
        return len(self.colors)

    def sorted_colors(self) -> List[str]:
        """Colors in WUBRG order."""
        return sorted(self.colors, key=COLOR_ORDER.index)

    def to_string(self) -> str:
        if not self.colors:
            return "Colorless"
        return "".join(self.sorted_colors())

    def to_dict(self) -> Dict[str, Any]:
        return {'colors': self.sorted_colors()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ColorIdentity':
        return cls.from_color_list(data.get('colors', []))


def _split_type_line(type_line: str) -> Tuple[List[str], List[str]]:
    """Split 'Legendary Creature — Elf Druid' into types and subtypes."""
    if ' — ' in type_line:
        main_types, sub_types = type_line.split(' — ', 1)
        return main_types.split(), sub_types.split()
    return type_line.split(), []


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@dataclass(frozen=True)
class Card:
    """A single card record, read-only for the lifetime of a session.

    `oracle_text` is kept exactly as stored; the pattern extractor rejects
    values that are not strings.
    """
    id: str
    name: str
    mana_value: float = 0.0
    mana_cost: str = ''
    colors: FrozenSet[str] = field(default_factory=frozenset)
    color_identity: ColorIdentity = field(default_factory=ColorIdentity)
    types: Tuple[str, ...] = ()
    subtypes: Tuple[str, ...] = ()
    oracle_text: Optional[str] = ''
    legalities: Mapping[str, bool] = field(default_factory=dict, compare=False, hash=False)
    tags: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_card_data(cls, card_data: Dict[str, Any]) -> 'Card':
        """Create a Card from a card store document.

        Accepts the store shape (`types`, `mana_value`, `legal_<format>` flags)
        and falls back to Scryfall-style fields (`type_line`, `cmc`,
        `legalities`) when the former are missing.
        """
        card_id = card_data.get('id') or card_data.get('_id') or ''

        types = card_data.get('types')
        subtypes = card_data.get('subtypes')
        if types is None:
            types, parsed_subtypes = _split_type_line(card_data.get('type_line') or '')
            if subtypes is None:
                subtypes = parsed_subtypes

        mana_value = card_data.get('mana_value')
        if mana_value is None:
            mana_value = card_data.get('cmc')

        colors = ColorIdentity.from_color_list(card_data.get('colors')).colors
        if card_data.get('color_identity') is not None:
            color_identity = ColorIdentity.from_color_list(card_data.get('color_identity'))
        else:
            color_identity = ColorIdentity(colors).union(
                ColorIdentity.from_mana_cost(card_data.get('mana_cost', '')))

        legalities = {}
        scryfall_legalities = card_data.get('legalities') or {}
        for format_name, flag_field in FORMAT_LEGALITY_FIELDS.items():
            if flag_field in card_data:
                legalities[format_name] = bool(card_data.get(flag_field))
            elif format_name in scryfall_legalities:
                legalities[format_name] = scryfall_legalities[format_name] in ('legal', 'restricted')

        return cls(
            id=str(card_id),
            name=card_data.get('name', ''),
            mana_value=_as_float(mana_value),
            mana_cost=card_data.get('mana_cost') or '',
            colors=colors,
            color_identity=color_identity,
            types=tuple(types or ()),
            subtypes=tuple(subtypes or ()),
            oracle_text=card_data.get('oracle_text'),
            legalities=legalities,
            tags=frozenset(str(t).lower() for t in card_data.get('tags') or ()),
        )

    def is_creature(self) -> bool:
        return any(t.lower() == 'creature' for t in self.types)

    def has_type(self, card_type: str) -> bool:
        return any(t.lower() == card_type.lower() for t in self.types)

    def is_legal_in(self, format_name: str) -> bool:
        return bool(self.legalities.get(format_name, False))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'mana_value': self.mana_value,
            'mana_cost': self.mana_cost,
            'colors': ColorIdentity(self.colors).sorted_colors(),
            'color_identity': self.color_identity.sorted_colors(),
            'types': list(self.types),
            'subtypes': list(self.subtypes),
            'oracle_text': self.oracle_text,
            'tags': sorted(self.tags),
        }
