"""
report.py - Statistics and advisory suggestions for discovery responses
"""
from collections import OrderedDict
from typing import Any, Dict, List, Sequence

from .patterns import ComboPattern, ComboType

ARCHETYPE_TIPS = {
    'artifacts': 'Artifact combos: look for cost reducers and free artifacts to speed them up',
    'tokens': 'Token combos: mass pump effects make the tokens lethal',
    'lifegain': 'Lifegain combos: multiple payoffs make the engine more resilient',
    'sacrifice': 'Sacrifice combos: token generators provide endless fodder',
    'spells': 'Spell combos: cost reduction and cantrips keep the engine running',
}


def group_by_type(combos: Sequence[ComboPattern]) -> Dict[str, List[ComboPattern]]:
    groups: Dict[str, List[ComboPattern]] = OrderedDict()
    for combo in combos:
        groups.setdefault(combo.combo_type.value, []).append(combo)
    return groups


def _average(values: List[float]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 1)


def summarize(discovered: Sequence[ComboPattern], filtered: Sequence[ComboPattern],
              returned: Sequence[ComboPattern], elapsed_ms: int) -> Dict[str, Any]:
    return {
        'total_analyzed': len(discovered),
        'filtered_results': len(filtered),
        'returned_results': len(returned),
        'analysis_time_ms': elapsed_ms,
        'combo_types_found': list(group_by_type(returned).keys()),
        'avg_power_level': _average([c.power_level for c in returned]),
        'avg_mana_cost': _average([c.mana_cost for c in returned]),
    }


def seed_suggestions(combos: Sequence[ComboPattern]) -> List[str]:
    """Advice for a seed-driven search."""
    suggestions: List[str] = []
    if not combos:
        suggestions.append('No direct combos found; try adding cards with complementary mechanics')
        suggestions.append('Look for cards with "enters the battlefield", "sacrifice" or tap/untap effects')
        suggestions.append('Consider cards that create tokens or produce mana to enable combos')
        return suggestions

    infinite = [c for c in combos if c.combo_type.is_infinite]
    value_engines = [c for c in combos if c.combo_type is ComboType.VALUE_ENGINE]
    if infinite:
        suggestions.append(f'Found {len(infinite)} infinite combos')
        suggestions.append('Add protection and tutors to make the combos more consistent')
    if value_engines:
        suggestions.append(f'Found {len(value_engines)} value engines that build incremental advantage')
    if any(c.mana_cost > 8 for c in combos):
        suggestions.append('Some combos are expensive; consider ramp or cost reducers')
    if any(len(c.colors_required) > 2 for c in combos):
        suggestions.append('Multicolor combos found: make sure the mana base is solid')
    return suggestions


def archetype_suggestions(combos: Sequence[ComboPattern], colors: Sequence[str], archetype: str,
                          stats: Dict[str, Any]) -> List[str]:
    """Advice for a color/archetype search."""
    suggestions: List[str] = []
    archetype = (archetype or '').strip().lower()

    if not combos:
        suggestions.append('No new combos found for this combination')
        if len(colors) > 3:
            suggestions.append('Try fewer colors for more consistent combos')
        elif not colors:
            suggestions.append('Pick some colors to narrow the search')
        if archetype:
            suggestions.append(f'The "{archetype}" archetype may be too narrow; try a broader one')
            suggestions.append('Archetypes such as "artifacts", "tokens" or "lifegain" usually offer more options')
        else:
            suggestions.append('Pick an archetype to find more focused synergies')
        suggestions.append('Unusual color combinations often hide the most original combos')
        return suggestions

    avg_power = stats.get('avg_power_level', 0.0)
    avg_cost = stats.get('avg_mana_cost', 0.0)
    if avg_power >= 8:
        suggestions.append('High-power combos found: plan for protection and a reliable setup')
    elif avg_power <= 5:
        suggestions.append('Moderate combos found: they may be safer in a competitive field')

    if avg_cost > 8:
        suggestions.append('Expensive combos: add mana acceleration or cost reduction')
    elif avg_cost <= 4:
        suggestions.append('Efficient combos: well suited to fast formats like Standard')

    infinite = [c for c in combos if c.combo_type.is_infinite]
    value_engines = [c for c in combos if c.combo_type is ComboType.VALUE_ENGINE]
    if len(infinite) > len(value_engines):
        suggestions.append('More infinite combos than value engines: keep a backup plan')
    elif value_engines:
        suggestions.append('Value engines found: ideal for long games')

    if len(colors) == 1:
        suggestions.append('Mono-color: consider a splash to reach more enablers')
    elif len(colors) >= 3:
        suggestions.append('Multicolor: a solid mana base is essential for consistency')

    if archetype in ARCHETYPE_TIPS:
        suggestions.append(ARCHETYPE_TIPS[archetype])

    suggestions.append('Test these combos before crafting to confirm they hold up')
    return suggestions
