"""
Tests for pairwise combo analysis.

Covers the resonance table (bounce, tap/untap, sacrifice and free-cast loops),
effect classification, the value-engine fallback and order independence.
"""

import pytest
import sys
from itertools import combinations
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.combo_engine.discovery import DiscoverySession
from core.combo_engine.patterns import ComboType
from core.combo_engine.synergy_analyzer import SynergyAnalyzer, classify_effect

from conftest import make_card


class TestClassifyEffect:

    @pytest.mark.parametrize('effect,expected', [
        ('add {g}', ComboType.INFINITE_MANA),
        ('it deals 1 damage to any target', ComboType.INFINITE_DAMAGE),
        ('draw a card', ComboType.INFINITE_CARDS),
        ('you gain 2 life', ComboType.INFINITE_LIFE),
        ('create a 1/1 token', ComboType.VALUE_ENGINE),
        ('scry 1', ComboType.GENERIC_SYNERGY),
    ])
    def test_first_matching_row_wins(self, effect, expected):
        assert classify_effect(effect) is expected


class TestAnalyzePair:
    """Test the resonance rules on representative pairs."""

    def test_bounce_loop_infinite_mana(self, session, etb_mana_card, bounce_card):
        combo = session.analyzer.analyze_pair(etb_mana_card, bounce_card)
        assert combo is not None
        assert combo.combo_type is ComboType.INFINITE_MANA
        assert combo.cards == (etb_mana_card.id, bounce_card.id)
        assert combo.power_level == 8
        assert combo.steps[0] == '1. Play Sprout Caller'
        assert combo.requirements == ('Enough mana per cycle: 3',)

    def test_vanilla_pair_has_no_combo(self, session, vanilla_card, bounce_card, etb_mana_card):
        assert session.analyzer.analyze_pair(vanilla_card, bounce_card) is None
        assert session.analyzer.analyze_pair(vanilla_card, etb_mana_card) is None

    def test_tap_untap_loop(self, session, mana_elf, untap_aura):
        combo = session.analyzer.analyze_pair(untap_aura, mana_elf)
        assert combo.combo_type is ComboType.INFINITE_MANA
        assert combo.cards == (mana_elf.id, untap_aura.id)
        assert combo.power_level == 9
        assert combo.requirements == ('Untap cost payable each iteration: {U}',)
        assert combo.colors_required == frozenset({'G', 'U'})
        assert combo.mana_cost == 4

    def test_sacrifice_loop(self, session, dies_token_card, sac_outlet):
        combo = session.analyzer.analyze_pair(sac_outlet, dies_token_card)
        assert combo.combo_type is ComboType.VALUE_ENGINE
        assert combo.cards == (dies_token_card.id, sac_outlet.id)
        assert combo.power_level == 5
        assert 'Altar Seer' in combo.requirements[0]

    def test_value_engine_fallback(self, session, spell_draw_card, mana_elf):
        combo = session.analyzer.analyze_pair(mana_elf, spell_draw_card)
        assert combo.combo_type is ComboType.VALUE_ENGINE
        assert combo.cards == (spell_draw_card.id, mana_elf.id)
        assert combo.power_level == 6

    def test_free_cast(self, spell_draw_card):
        enabler = make_card('z-omniscience',
                            "{2}, {T}: Create a 1/1 Spirit token. You may cast spells without paying their mana cost.",
                            types=('Enchantment',), mana_value=7)
        pool_session = DiscoverySession.from_cards([spell_draw_card, enabler])
        combo = pool_session.analyzer.analyze_pair(spell_draw_card, enabler)
        assert combo.cards == (spell_draw_card.id, enabler.id)
        assert combo.combo_type is ComboType.INFINITE_CARDS
        assert combo.power_level == 5

    def test_same_card_is_not_a_combo(self, session, etb_mana_card):
        assert session.analyzer.analyze_pair(etb_mana_card, etb_mana_card) is None

    def test_pair_is_symmetric(self, session, sample_pool):
        for card_a, card_b in combinations(sample_pool, 2):
            assert session.analyzer.analyze_pair(card_a, card_b) == session.analyzer.analyze_pair(card_b, card_a)

    def test_pair_is_deterministic(self, session, sample_pool):
        first = [session.analyzer.analyze_pair(a, b) for a, b in combinations(sample_pool, 2)]
        second = [session.analyzer.analyze_pair(a, b) for a, b in combinations(sample_pool, 2)]
        assert first == second

    def test_scores_in_bounds(self, session, sample_pool):
        for card_a, card_b in combinations(sample_pool, 2):
            combo = session.analyzer.analyze_pair(card_a, card_b)
            if combo is None:
                continue
            assert 1 <= combo.power_level <= 10
            assert 1 <= combo.consistency <= 10
            assert len(set(combo.cards)) == len(combo.cards) == 2

    def test_explain(self, etb_mana_card, bounce_card, session):
        combo = session.analyzer.analyze_pair(etb_mana_card, bounce_card)
        assert SynergyAnalyzer.explain(etb_mana_card, bounce_card, combo) == \
            'Sprout Caller + Recall Totem: infinite_mana combo'
