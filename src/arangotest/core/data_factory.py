"""
Lightweight test data factory
Generates realistic test documents and clearly prefixed entity names
"""

import logging
import uuid
from typing import Any, Callable, Dict, List, Optional

import pytest
from arango.collection import StandardCollection
from faker import Faker

from ..config import TestConfig, get_config
from ..models import RouteEdge, UserDoc
from ..utils.error_handling import describe

logger = logging.getLogger(__name__)

BULK_SIZE = 1000


class DataFactory:
    """Lightweight test data generator"""

    def __init__(self, config: Optional[TestConfig] = None, seed: Optional[int] = None):
        self.config = config or get_config()
        self.fake = Faker()
        if seed is not None:
            self.fake.seed_instance(seed)
        self.created_names: Dict[str, List[str]] = {}

    def track_name(self, entity_type: str, name: str):
        """Track created entity name for cleanup"""
        if entity_type not in self.created_names:
            self.created_names[entity_type] = []
        self.created_names[entity_type].append(name)

    def unique_name(self, entity_type: str) -> str:
        """Prefixed name that is a valid database, collection and user name"""
        name = f"{self.config.test_data_prefix}_{entity_type}_{uuid.uuid4().hex[:12]}"
        self.track_name(entity_type, name)
        return name

    def generate_user(self, **overrides) -> UserDoc:
        data = {
            "name": self.fake.first_name(),
            "age": self.fake.random_int(min=18, max=99),
        }
        data.update(overrides)
        return UserDoc(**data)

    def generate_users(self, count: int) -> List[UserDoc]:
        return [self.generate_user() for _ in range(count)]

    def generate_route(self, from_id: str, to_id: str, **overrides) -> RouteEdge:
        data = {
            "_from": from_id,
            "_to": to_id,
            "distance": self.fake.random_int(min=1, max=5000),
        }
        data.update(overrides)
        return RouteEdge(**data)

    def generate_big_document(self, index: int, fields: int = 20) -> Dict[str, Any]:
        """Document with many attributes, used for bulk and benchmark loads"""
        doc = {"_key": f"doc_{index}", "index": index}
        for i in range(fields):
            doc[f"field_{i}"] = self.fake.sentence(nb_words=8)
        return doc

    def get_cleanup_names(self) -> Dict[str, List[str]]:
        """Get all tracked names for cleanup"""
        return {kind: list(names) for kind, names in self.created_names.items()}

    def reset_tracking(self):
        """Clear tracked names"""
        self.created_names.clear()


def send_bulks(collection: StandardCollection, creator: Callable[[int], Any], size: int) -> None:
    """
    Insert `size` documents built by creator(i) in batches of BULK_SIZE.

    Fails the running test on the first per-document error.
    """
    current = 0
    while current < size:
        step = min(BULK_SIZE, size - current)
        batch = []
        for i in range(current, current + step):
            doc = creator(i)
            batch.append(doc.to_document() if hasattr(doc, "to_document") else doc)

        results = collection.insert_many(batch)
        errors = [r for r in results if isinstance(r, Exception)]
        if errors:
            pytest.fail(f"Failed to create {len(errors)} of {step} documents: {describe(errors[0])}")

        current += step
        logger.debug(f"Inserted {current}/{size} documents into {collection.name}")
