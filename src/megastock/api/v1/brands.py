from typing import Annotated

from fastapi import APIRouter, Security

from megastock.core.security import get_user_role
from megastock.domain.catalog import BRANDS
from megastock.domain.models import Brand, UserRole

router = APIRouter(prefix="/brands", tags=["Brands"])


@router.get("/", response_model=list[Brand])
async def list_brands(role: Annotated[UserRole, Security(get_user_role)]) -> list[Brand]:
    return list(BRANDS)
