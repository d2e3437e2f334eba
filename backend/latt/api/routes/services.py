"""Service Catalog Routes: read-only listing of known services."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from latt.api.dependencies import CurrentUserId
from latt.infrastructure.database import get_db
from latt.schemas.subscription import ServiceResponse
from latt.services.service_resolver import list_services

router = APIRouter(prefix="/api/v1/services", tags=["services"])


@router.get("", response_model=list[ServiceResponse])
async def get_services(
    user_id: CurrentUserId, db: AsyncSession = Depends(get_db),
):
    """All services, ordered by name."""
    return [ServiceResponse.model_validate(s) for s in await list_services(db)]
