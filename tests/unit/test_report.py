"""
Unit tests for response statistics and suggestions.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from core.combo_engine import report
from core.combo_engine.patterns import ComboPattern, ComboType


def _combo(cards, combo_type, power, mana_cost=3, colors=()):
    return ComboPattern(combo_type=combo_type, cards=tuple(cards), power_level=power,
                        mana_cost=mana_cost, colors_required=frozenset(colors))


class TestSummaries:

    def test_group_by_type_keeps_order(self):
        combos = [_combo(['a', 'b'], ComboType.INFINITE_MANA, 9),
                  _combo(['c', 'd'], ComboType.VALUE_ENGINE, 6),
                  _combo(['e', 'f'], ComboType.INFINITE_MANA, 8)]
        groups = report.group_by_type(combos)
        assert list(groups.keys()) == ['infinite_mana', 'value_engine']
        assert len(groups['infinite_mana']) == 2

    def test_summarize(self):
        returned = [_combo(['a', 'b'], ComboType.INFINITE_MANA, 9, mana_cost=3),
                    _combo(['c', 'd'], ComboType.VALUE_ENGINE, 6, mana_cost=4)]
        stats = report.summarize(returned * 2, returned, returned, 12)
        assert stats['total_analyzed'] == 4
        assert stats['returned_results'] == 2
        assert stats['analysis_time_ms'] == 12
        assert stats['avg_power_level'] == 7.5
        assert stats['avg_mana_cost'] == 3.5
        assert stats['combo_types_found'] == ['infinite_mana', 'value_engine']

    def test_summarize_empty(self):
        stats = report.summarize([], [], [], 0)
        assert stats['avg_power_level'] == 0.0
        assert stats['combo_types_found'] == []


class TestSuggestions:

    def test_seed_suggestions_without_combos(self):
        suggestions = report.seed_suggestions([])
        assert len(suggestions) == 3

    def test_seed_suggestions_counts_infinite(self):
        combos = [_combo(['a', 'b'], ComboType.INFINITE_MANA, 9, mana_cost=10, colors='WUB')]
        suggestions = report.seed_suggestions(combos)
        assert 'Found 1 infinite combos' in suggestions
        assert any('expensive' in s for s in suggestions)
        assert any('Multicolor' in s for s in suggestions)

    def test_archetype_suggestions_without_combos(self):
        suggestions = report.archetype_suggestions([], ['W', 'U', 'B', 'R'], 'tokens', {})
        assert 'Try fewer colors for more consistent combos' in suggestions
        assert any('"tokens"' in s for s in suggestions)

    def test_archetype_suggestions_with_combos(self):
        combos = [_combo(['a', 'b'], ComboType.INFINITE_MANA, 9, mana_cost=3)]
        stats = report.summarize(combos, combos, combos, 1)
        suggestions = report.archetype_suggestions(combos, ['G'], 'artifacts', stats)
        assert suggestions[0].startswith('High-power')
        assert report.ARCHETYPE_TIPS['artifacts'] in suggestions
        assert suggestions[-1] == 'Test these combos before crafting to confirm they hold up'
