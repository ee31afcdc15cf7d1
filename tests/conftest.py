"""Shared test fixtures."""
import os
import sys
from collections import defaultdict

import pytest

# Add project root to path so tests can import the package
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from core.combo_engine.card_model import Card, ColorIdentity
from core.combo_engine.config import DiscoveryConfig
from core.combo_engine.discovery import DiscoverySession


def make_card(card_id, text, name=None, mana_value=2, colors=(), types=('Creature',), tags=()):
    """Build a Card the way the store would hand it over."""
    return Card(
        id=card_id,
        name=name or card_id.replace('-', ' ').title(),
        mana_value=mana_value,
        colors=frozenset(colors),
        color_identity=ColorIdentity(frozenset(colors)),
        types=tuple(types),
        oracle_text=text,
        legalities={'standard': True},
        tags=frozenset(tags),
    )


class FakeCollection:
    """In-memory stand-in for a pymongo collection (equality and $ne filters)."""

    def __init__(self, documents=None, error=None):
        self.documents = list(documents or [])
        self.error = error
        self.queries = []

    def find(self, query=None, projection=None):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return [dict(doc) for doc in self.documents if self._matches(doc, query or {})]

    @staticmethod
    def _matches(doc, query):
        for key, expected in query.items():
            if isinstance(expected, dict) and '$ne' in expected:
                if doc.get(key) == expected['$ne']:
                    return False
            elif doc.get(key) != expected:
                return False
        return True


class FakeClient:
    """Stand-in for MongoClient; every database and collection name resolves to one collection."""

    def __init__(self, collection):
        self.collection = collection
        self.closed = False

    def __getitem__(self, db_name):
        return defaultdict(lambda: self.collection)

    def close(self):
        self.closed = True


@pytest.fixture
def etb_mana_card():
    return make_card('a-etb-mana', "Whenever this enters the battlefield, add {G}.",
                     name='Sprout Caller', colors=('G',))


@pytest.fixture
def bounce_card():
    return make_card('b-bouncer', "{1}: Return target creature you own to its owner's hand.",
                     name='Recall Totem', types=('Artifact',))


@pytest.fixture
def vanilla_card():
    return make_card('c-vanilla', "Flying", name='Sky Drake', colors=('U',), mana_value=4)


@pytest.fixture
def mana_elf():
    return make_card('d-elf', "{T}: Add {G}.", name='Grove Elf', mana_value=1, colors=('G',))


@pytest.fixture
def untap_aura():
    return make_card('e-aura', "Enchant creature\n{U}: Untap enchanted creature.",
                     name='Quickening Aura', mana_value=3, colors=('U',), types=('Enchantment',))


@pytest.fixture
def dies_token_card():
    return make_card('f-traveler', "When this creature dies, create a 1/1 white Spirit creature token with flying.",
                     name='Doomed Wanderer', mana_value=1, colors=('W',), tags=('tokens', 'sacrifice'))


@pytest.fixture
def sac_outlet():
    return make_card('g-seer', "Sacrifice a creature: Scry 1.", name='Altar Seer',
                     mana_value=1, colors=('B',), tags=('sacrifice',))


@pytest.fixture
def spell_draw_card():
    return make_card('h-scholar', "Whenever you cast a noncreature spell, draw a card.",
                     name='Arcane Scholar', mana_value=3, colors=('U',))


@pytest.fixture
def sample_pool(etb_mana_card, bounce_card, vanilla_card, mana_elf, untap_aura,
                dies_token_card, sac_outlet, spell_draw_card):
    return [etb_mana_card, bounce_card, vanilla_card, mana_elf, untap_aura,
            dies_token_card, sac_outlet, spell_draw_card]


@pytest.fixture
def config():
    return DiscoveryConfig()


@pytest.fixture
def session(sample_pool, config):
    return DiscoverySession.from_cards(sample_pool, 'standard', config)
