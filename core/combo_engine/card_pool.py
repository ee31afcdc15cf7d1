"""
card_pool.py - Loads the cards legal in a format from the card store

Any store failure aborts the session: downstream steps need a complete pool.
"""
import logging
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from .card_model import Card
from .config import DiscoveryConfig, StoreConfig, legality_field
from .cosmos_driver import find_cards_by_legality, get_collection, get_mongo_client
from .exceptions import DataUnavailable

logger = logging.getLogger(__name__)


class CardPoolLoader:
    """Retrieves the subset of cards legal in a requested format."""

    def __init__(self, collection=None, store_config: Optional[StoreConfig] = None,
                 config: Optional[DiscoveryConfig] = None):
        """
        Args:
            collection: A pymongo-compatible collection; when omitted, each load
                opens a client from `store_config` and closes it afterwards
            store_config: Connection settings used when `collection` is None
            config: Discovery settings (only `require_in_arena` is read here)
        """
        self.collection = collection
        self.store_config = store_config or StoreConfig()
        self.config = config or DiscoveryConfig()

    def _open_client(self):
        try:
            return get_mongo_client(self.store_config)
        except RuntimeError as e:
            raise DataUnavailable(str(e))

    def _query(self, collection, format_name: str) -> List[Dict[str, Any]]:
        try:
            return find_cards_by_legality(collection, format_name, self.config.require_in_arena)
        except PyMongoError as e:
            logger.error(f"Card store query failed for format {format_name}: {e}")
            raise DataUnavailable(
                f"Error loading cards for format {format_name}",
                details={'format': format_name, 'error': str(e)},
            ) from e

    def load(self, format_name: str) -> List[Card]:
        """Load every card legal in `format_name`.

        Raises:
            UnsupportedFormat: unknown format
            DataUnavailable: the store query failed
        """
        legality_field(format_name)
        if self.collection is not None:
            documents = self._query(self.collection, format_name)
        else:
            client = self._open_client()
            try:
                collection = get_collection(
                    client, self.store_config.database_name, self.store_config.collection_name)
                documents = self._query(collection, format_name)
            finally:
                client.close()

        cards: List[Card] = []
        seen_ids = set()
        for document in documents:
            card = Card.from_card_data(document)
            if not card.id:
                logger.warning(f"Skipping card without id: {card.name!r}")
                continue
            if card.id in seen_ids:
                logger.debug(f"Skipping duplicate card id {card.id}")
                continue
            seen_ids.add(card.id)
            cards.append(card)

        logger.info(f"Loaded {len(cards)} cards for format {format_name}")
        return cards
