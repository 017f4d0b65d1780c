"""
Car Doctor Backend — Service Catalog
======================================

What:  Read-only access to the service offerings collection.
Who:   GET /services and GET /services/{id}.
"""

import logging
from typing import List, Optional

from car_doctor.database import SERVICES, DocumentStore, to_object_id
from car_doctor.schemas.catalog import ServiceOffering

logger = logging.getLogger(__name__)


class CatalogService:
    """Stateless; the store is passed in on every call."""

    async def list_services(self, store: DocumentStore) -> List[ServiceOffering]:
        documents = await store.find(SERVICES)
        logger.debug("Listed %d service offerings", len(documents))
        return [ServiceOffering.model_validate(doc) for doc in documents]

    async def get_service(self, store: DocumentStore, service_id: str) -> Optional[ServiceOffering]:
        """
        Fetch one offering by id.

        Returns None (serialized as JSON `null`) when no document matches;
        a malformed id raises ValidationError before the store is touched.
        """
        object_id = to_object_id(service_id)
        document = await store.find_one(SERVICES, object_id)
        if document is None:
            return None
        return ServiceOffering.model_validate(document)


catalog_service = CatalogService()
