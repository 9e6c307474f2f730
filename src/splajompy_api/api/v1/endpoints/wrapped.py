# src/splajompy_api/api/v1/endpoints/wrapped.py
"""Year-in-review endpoint."""

from typing import Annotated

from fastapi import APIRouter, Query

from splajompy_api.core.settings import settings
from splajompy_api.schemas import WrappedData

from ..dependencies import CurrentUserDep, WrappedServiceDep

router = APIRouter(prefix="/wrapped", tags=["wrapped"])


@router.get("", response_model=WrappedData)
async def get_wrapped(
    current_user: CurrentUserDep,
    service: WrappedServiceDep,
    year: Annotated[int, Query(ge=2000, le=9998)] = settings.wrapped_year,
) -> WrappedData:
    """Return the caller's year in review; 404 when they are not eligible."""
    return await service.get_wrapped(current_user, year)
