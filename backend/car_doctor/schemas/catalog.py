"""
Car Doctor Backend — Service Offering Schema
==============================================

What:  Response model for documents in the services collection.
How:   Only `_id` is declared; every other stored field (title, price,
       img, description, facility, ...) passes through untouched since
       the collection is curated outside this service.
"""

from pydantic import BaseModel, Field


class ServiceOffering(BaseModel):
    id: str = Field(alias="_id", description="Document id (24-char hex)")

    model_config = {"extra": "allow", "populate_by_name": True}
