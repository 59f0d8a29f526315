from fastapi import APIRouter

from backoffice.api.deps import IdentityDep
from backoffice.schemas.catalog import CatalogResponse
from backoffice.services.catalog import build_catalog_response

catalog_router = APIRouter(prefix="/catalog", tags=["catalog"])


@catalog_router.get("/request-types", response_model=CatalogResponse)
async def list_request_types(identity: IdentityDep) -> CatalogResponse:
    """List self-service request categories with their types and form fields."""
    return build_catalog_response()
