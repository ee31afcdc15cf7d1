"""
config.py - Configuration for the combo discovery engine

Values are read from the environment (a .env file is honored). The pairwise
search bounds live here rather than in the drivers so they can be tuned per
deployment.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, List

from dotenv import load_dotenv

from .exceptions import ConfigurationError, UnsupportedFormat

# Load environment variables from .env file
load_dotenv()

# Store field holding the legality flag for each supported format
FORMAT_LEGALITY_FIELDS: Dict[str, str] = {
    'standard': 'legal_standard',
    'historic': 'legal_historic',
    'brawl': 'legal_brawl',
}

DEFAULT_FORMAT = 'standard'


def legality_field(format_name: str) -> str:
    """Return the store field flagging legality in `format_name`."""
    key = format_name.strip().lower() if isinstance(format_name, str) else ''
    if key not in FORMAT_LEGALITY_FIELDS:
        raise UnsupportedFormat(format_name, FORMAT_LEGALITY_FIELDS.keys())
    return FORMAT_LEGALITY_FIELDS[key]


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer", details={'value': raw})


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class StoreConfig:
    """Where the card store lives."""
    connection_string: str = field(default_factory=lambda: os.environ.get('COSMOS_CONNECTION_STRING', ''))
    database_name: str = field(default_factory=lambda: os.environ.get('COSMOS_DB_NAME', 'mtgecorec'))
    collection_name: str = field(default_factory=lambda: os.environ.get('COSMOS_CARDS_COLLECTION', 'cards'))


@dataclass
class DiscoveryConfig:
    """Bounds and switches for a discovery session."""
    archetype_card_limit: int = 50
    completions_per_pattern: int = 5
    seed_result_cap: int = 20
    archetype_result_cap: int = 15
    effect_snippet_limit: int = 200
    require_in_arena: bool = True

    @classmethod
    def from_env(cls) -> 'DiscoveryConfig':
        """Build a config from COMBO_* environment variables."""
        config = cls(
            archetype_card_limit=_env_int('COMBO_ARCHETYPE_CARD_LIMIT', 50),
            completions_per_pattern=_env_int('COMBO_COMPLETIONS_PER_PATTERN', 5),
            seed_result_cap=_env_int('COMBO_SEED_RESULT_CAP', 20),
            archetype_result_cap=_env_int('COMBO_ARCHETYPE_RESULT_CAP', 15),
            effect_snippet_limit=_env_int('COMBO_EFFECT_SNIPPET_LIMIT', 200),
            require_in_arena=_env_bool('COMBO_REQUIRE_IN_ARENA', True),
        )
        errors = config.validate()
        if errors:
            raise ConfigurationError("Invalid discovery configuration", details={'errors': errors})
        return config

    def validate(self) -> List[str]:
        """Return a list of validation errors (empty if valid)."""
        errors: List[str] = []
        for name in ('archetype_card_limit', 'completions_per_pattern',
                     'seed_result_cap', 'archetype_result_cap', 'effect_snippet_limit'):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be positive")
        return errors
