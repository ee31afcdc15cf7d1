"""
Combo discovery engine for MTG ECOREC: infers trigger/enabler capabilities from
card rules text and searches card pairs for repeatable or infinite interactions.
"""
from .card_model import Card, ColorIdentity
from .card_pool import CardPoolLoader
from .config import DiscoveryConfig, StoreConfig
from .discovery import (DiscoverySession, discover_by_archetype, discover_combos_by_archetype,
                        discover_combos_from_cards, discover_from_seeds,
                        find_synergies_between_cards, initialize)
from .exceptions import (ComboEngineError, ConfigurationError, DataUnavailable, MalformedCardText,
                         SessionNotInitialized, UnsupportedFormat)
from .patterns import ComboPattern, ComboType, EnablerCapability, EnablerPattern, TriggerKind, TriggerPattern
from .ranking import dedupe_and_rank
