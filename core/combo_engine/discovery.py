"""
discovery.py - Discovery sessions and the seed/archetype discovery drivers

A DiscoverySession is built once by `initialize(format)` (pool load plus
pattern extraction) and is read-only afterwards. Every driver takes the
session explicitly; nothing is cached between sessions.
"""
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .archetypes import matches_archetype
from .card_model import Card, ColorIdentity
from .card_pool import CardPoolLoader
from .config import DEFAULT_FORMAT, DiscoveryConfig, legality_field
from .exceptions import SessionNotInitialized
from .pattern_extractor import PatternIndex, extract
from .patterns import ComboPattern, EnablerPattern, TriggerPattern
from .ranking import dedupe_and_rank
from .synergy_analyzer import SynergyAnalyzer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoverySession:
    """Card pool and extracted patterns for one format."""
    format: str
    cards: Tuple[Card, ...]
    triggers: Tuple[TriggerPattern, ...]
    enablers: Tuple[EnablerPattern, ...]
    config: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    cards_by_id: Mapping[str, Card] = field(init=False, repr=False, compare=False)
    index: PatternIndex = field(init=False, repr=False, compare=False)
    analyzer: SynergyAnalyzer = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        index = PatternIndex.build(self.triggers, self.enablers)
        object.__setattr__(self, 'cards_by_id', MappingProxyType({c.id: c for c in self.cards}))
        object.__setattr__(self, 'index', index)
        object.__setattr__(self, 'analyzer', SynergyAnalyzer(index))

    @classmethod
    def from_cards(cls, cards: Iterable[Card], format_name: str = DEFAULT_FORMAT,
                   config: Optional[DiscoveryConfig] = None) -> 'DiscoverySession':
        """Run pattern extraction over an already loaded pool."""
        config = config or DiscoveryConfig()
        cards = tuple(cards)
        triggers, enablers = extract(cards, config.effect_snippet_limit)
        logger.info(f"Identified {len(triggers)} triggers and {len(enablers)} enablers "
                    f"across {len(cards)} cards")
        return cls(format=format_name, cards=cards, triggers=tuple(triggers),
                   enablers=tuple(enablers), config=config)

    def cards_with_ids(self, card_ids: Iterable[str]) -> List[Card]:
        """Pool cards whose id is in `card_ids`, in pool order."""
        wanted = set(card_ids or ())
        unknown = wanted.difference(self.cards_by_id)
        if unknown:
            logger.debug(f"Ignoring ids not in the {self.format} pool: {sorted(unknown)}")
        return [card for card in self.cards if card.id in wanted]


def initialize(format_name: str = DEFAULT_FORMAT, loader: Optional[CardPoolLoader] = None,
               config: Optional[DiscoveryConfig] = None) -> DiscoverySession:
    """Load the pool legal in `format_name` and extract its patterns.

    Raises:
        UnsupportedFormat: unknown format
        DataUnavailable: the card store query failed
    """
    config = config or DiscoveryConfig.from_env()
    legality_field(format_name)
    logger.info(f"Initializing combo discovery session for {format_name}")
    loader = loader or CardPoolLoader(config=config)
    cards = loader.load(format_name)
    return DiscoverySession.from_cards(cards, format_name, config)


def _require_session(session: Optional[DiscoverySession]) -> DiscoverySession:
    if session is None:
        raise SessionNotInitialized()
    return session


def _safe_analyze(session: DiscoverySession, card_a: Card, card_b: Card) -> Optional[ComboPattern]:
    """analyze_pair, with any failure treated as no combo for the pair."""
    try:
        return session.analyzer.analyze_pair(card_a, card_b)
    except Exception as e:
        logger.warning(f"Pair evaluation failed for {card_a.id} + {card_b.id}: {e}")
        return None


def _all_pairs(session: DiscoverySession, cards: Sequence[Card]) -> List[Tuple[Card, Card, ComboPattern]]:
    results = []
    for i in range(len(cards)):
        for j in range(i + 1, len(cards)):
            combo = _safe_analyze(session, cards[i], cards[j])
            if combo is not None:
                results.append((cards[i], cards[j], combo))
    return results


def _find_completions(session: DiscoverySession, seed: Card, exclude_ids: set) -> List[ComboPattern]:
    """Combos pairing `seed` with one resonant card from the rest of the pool.

    Each seed pattern yields at most `completions_per_pattern` distinct cards,
    however many of their patterns resonate.
    """
    analyzer = session.analyzer
    limit = session.config.completions_per_pattern
    completions: List[ComboPattern] = []

    for trigger in session.index.triggers_for(seed.id):
        matched_cards = set()
        for enabler in session.enablers:
            if len(matched_cards) >= limit:
                break
            if enabler.card_id in exclude_ids or enabler.card_id in matched_cards:
                continue
            enabler_card = session.cards_by_id[enabler.card_id]
            try:
                rule = analyzer.resonance_for(trigger, enabler, enabler_card)
                if rule is None:
                    continue
                completions.append(analyzer.build_combo(seed, enabler_card, trigger, enabler, rule.interaction))
                matched_cards.add(enabler.card_id)
            except Exception as e:
                logger.warning(f"Completion failed for {seed.id} + {enabler.card_id}: {e}")

    for enabler in session.index.enablers_for(seed.id):
        matched_cards = set()
        for trigger in session.triggers:
            if len(matched_cards) >= limit:
                break
            if trigger.card_id in exclude_ids or trigger.card_id in matched_cards:
                continue
            trigger_card = session.cards_by_id[trigger.card_id]
            try:
                rule = analyzer.resonance_for(trigger, enabler, seed)
                if rule is None:
                    continue
                completions.append(analyzer.build_combo(trigger_card, seed, trigger, enabler, rule.interaction))
                matched_cards.add(trigger.card_id)
            except Exception as e:
                logger.warning(f"Completion failed for {trigger.card_id} + {seed.id}: {e}")

    return completions


def discover_from_seeds(session: Optional[DiscoverySession], seed_ids: Iterable[str]) -> List[ComboPattern]:
    """Combos within the seed set plus seed completions from the rest of the pool."""
    session = _require_session(session)
    seed_ids = list(seed_ids or ())
    seeds = session.cards_with_ids(seed_ids)
    seed_set = {card.id for card in seeds}
    logger.info(f"Analyzing combos from {len(seeds)} seed cards")

    combos = [combo for _, _, combo in _all_pairs(session, seeds)]
    for seed in seeds:
        combos.extend(_find_completions(session, seed, seed_set))

    ranked = dedupe_and_rank(combos, session.config.seed_result_cap)
    logger.info(f"Seed discovery found {len(combos)} candidates, returning {len(ranked)}")
    return ranked


def _color_filter(colors: Sequence[str]):
    requested = ColorIdentity.from_color_list(colors)
    if requested.is_colorless():
        return lambda card: True
    return lambda card: requested.contains(card.color_identity)


def discover_by_archetype(session: Optional[DiscoverySession], colors: Sequence[str],
                          archetype: str) -> List[ComboPattern]:
    """All-pairs discovery over the first cards fitting the colors and archetype."""
    session = _require_session(session)
    fits_colors = _color_filter(colors or ())
    relevant = [card for card in session.cards
                if fits_colors(card) and matches_archetype(card, archetype)]
    logger.info(f"Found {len(relevant)} cards for archetype {archetype!r} "
                f"in colors {''.join(colors or ()) or 'any'}")

    window = relevant[:session.config.archetype_card_limit]
    combos = [combo for _, _, combo in _all_pairs(session, window)]
    return dedupe_and_rank(combos, session.config.archetype_result_cap)


def find_synergies_between_cards(session: Optional[DiscoverySession],
                                 card_ids: Iterable[str]) -> Dict[str, List[Any]]:
    """All-pairs analysis over an explicit card set, with one explanation per combo."""
    session = _require_session(session)
    cards = session.cards_with_ids(card_ids)
    synergies: List[ComboPattern] = []
    explanations: List[str] = []
    for card_a, card_b, combo in _all_pairs(session, cards):
        synergies.append(combo)
        explanations.append(SynergyAnalyzer.explain(card_a, card_b, combo))
    return {'synergies': synergies, 'explanations': explanations}


def _session_for(format_name: str, session: Optional[DiscoverySession]) -> DiscoverySession:
    if session is None or session.format != format_name:
        return initialize(format_name)
    return session


def discover_combos_from_cards(seed_card_ids: Sequence[str], format_name: str = DEFAULT_FORMAT,
                               session: Optional[DiscoverySession] = None) -> List[ComboPattern]:
    """Seed-driven discovery, initializing a session for the format when needed."""
    return discover_from_seeds(_session_for(format_name, session), seed_card_ids)


def discover_combos_by_archetype(colors: Sequence[str], archetype: str, format_name: str = DEFAULT_FORMAT,
                                 session: Optional[DiscoverySession] = None) -> List[ComboPattern]:
    """Archetype-driven discovery, initializing a session for the format when needed."""
    return discover_by_archetype(_session_for(format_name, session), colors, archetype)
