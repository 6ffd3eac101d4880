from dataclasses import asdict

from fastapi import APIRouter, Depends

from core.app_context import AppContext

from ..dependencies import get_context
from ..schemas import CityRead, StateRead

router = APIRouter(prefix="/lookup", tags=["lookup"])


@router.get("/states", response_model=list[StateRead])
def read_states(ctx: AppContext = Depends(get_context)):
    return [asdict(state) for state in ctx.address_gateway.list_states()]


@router.get("/states/{uf}/cities", response_model=list[CityRead])
def read_cities(uf: str, ctx: AppContext = Depends(get_context)):
    return [asdict(city) for city in ctx.address_gateway.list_cities(uf)]
