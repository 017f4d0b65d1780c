"""
Car Doctor Backend — Service Catalog Routes
=============================================

What:  Public, read-only listing of service offerings.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from car_doctor.database import DocumentStore, get_store
from car_doctor.schemas.catalog import ServiceOffering
from car_doctor.schemas.common import ErrorResponse
from car_doctor.services.catalog_service import catalog_service

router = APIRouter(prefix="/services", tags=["Services"])


@router.get(
    "",
    response_model=List[ServiceOffering],
    responses={503: {"description": "Document store unavailable", "model": ErrorResponse}},
    summary="List all service offerings",
)
async def list_services(store: DocumentStore = Depends(get_store)) -> List[ServiceOffering]:
    return await catalog_service.list_services(store)


@router.get(
    "/{service_id}",
    response_model=Optional[ServiceOffering],
    responses={
        200: {"description": "The offering, or null when no document has this id"},
        400: {"description": "Malformed id", "model": ErrorResponse},
    },
    summary="Get one service offering",
)
async def get_service(
    service_id: str,
    store: DocumentStore = Depends(get_store),
) -> Optional[ServiceOffering]:
    return await catalog_service.get_service(store, service_id)
