import logging
from typing import Any, Dict, List, Optional

from pymongo import MongoClient

from .config import StoreConfig, legality_field

logger = logging.getLogger(__name__)

# Fields the engine reads from each card document
CARD_PROJECTION = {
    'id': 1, 'name': 1, 'mana_value': 1, 'cmc': 1, 'mana_cost': 1,
    'colors': 1, 'color_identity': 1, 'types': 1, 'subtypes': 1, 'type_line': 1,
    'oracle_text': 1, 'legal_standard': 1, 'legal_historic': 1, 'legal_brawl': 1,
    'legalities': 1, 'tags': 1,
}


def get_mongo_client(store_config: Optional[StoreConfig] = None) -> MongoClient:
    store_config = store_config or StoreConfig()
    if not store_config.connection_string:
        raise RuntimeError("Missing Cosmos DB connection string in environment variables.")
    return MongoClient(store_config.connection_string)


def get_collection(client, db_name, collection_name):
    """
    Returns a collection object for the given database and collection name.
    """
    return client[db_name][collection_name]


def legality_query(format_name: str, require_in_arena: bool = True) -> Dict[str, Any]:
    """Mongo filter selecting cards legal in `format_name`."""
    query: Dict[str, Any] = {legality_field(format_name): True}
    if require_in_arena:
        # Documents without the flag are kept
        query['in_arena'] = {'$ne': False}
    return query


def find_cards_by_legality(collection, format_name: str, require_in_arena: bool = True) -> List[Dict[str, Any]]:
    """Return every card document legal in `format_name`.

    PyMongoError propagates to the caller.
    """
    query = legality_query(format_name, require_in_arena)
    logger.debug(f"Querying card store with {query}")
    return list(collection.find(query, CARD_PROJECTION))
