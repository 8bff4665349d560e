import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.api.dependencies import backend_failure
from app.crud import crud_settings
from app.db.mongodb import get_station_db
from app.schemas.settings import (
    ClearDataResult,
    FuelPrices,
    FuelPricesUpdate,
    SystemProfile,
    SystemProfileUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/settings/fuel-prices", response_model=FuelPrices)
async def read_fuel_prices(db: AsyncIOMotorDatabase = Depends(get_station_db)):
    try:
        prices = await crud_settings.get_fuel_prices(db)
    except PyMongoError as e:
        raise backend_failure("Failed to load fuel prices", e)
    if prices is None:
        logger.info("No fuel prices found, using defaults")
        return FuelPrices(petrolPrice=0, dieselPrice=0)
    return prices


@router.put("/settings/fuel-prices", response_model=FuelPrices)
async def update_fuel_prices(
    prices_in: FuelPricesUpdate,
    db: AsyncIOMotorDatabase = Depends(get_station_db),
):
    try:
        return await crud_settings.save_fuel_prices(db, prices_in)
    except PyMongoError as e:
        raise backend_failure("Failed to save fuel prices", e)


@router.get("/settings/system-profile", response_model=SystemProfile)
async def read_system_profile(db: AsyncIOMotorDatabase = Depends(get_station_db)):
    try:
        profile = await crud_settings.get_system_profile(db)
    except PyMongoError as e:
        raise backend_failure("Failed to load system profile", e)
    if profile is None:
        raise HTTPException(status_code=404, detail="System profile not configured")
    return profile


@router.put("/settings/system-profile", response_model=SystemProfile)
async def update_system_profile(
    profile_in: SystemProfileUpdate,
    db: AsyncIOMotorDatabase = Depends(get_station_db),
):
    try:
        return await crud_settings.save_system_profile(db, profile_in)
    except PyMongoError as e:
        raise backend_failure("Failed to save system profile", e)


@router.delete("/settings/data", response_model=ClearDataResult)
async def clear_station_data(
    confirm: bool = Query(False, description="Debe ser true: el borrado no se puede deshacer"),
    db: AsyncIOMotorDatabase = Depends(get_station_db),
):
    """
    Borra permanentemente lecturas, recepciones y registros del generador.
    Precios, perfil y usuarios no se tocan.
    """
    if not confirm:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Confirmation required: pass confirm=true")

    try:
        deleted = await crud_settings.clear_station_data(db)
    except PyMongoError as e:
        raise backend_failure("Failed to clear data", e)

    logger.warning("Station data cleared: %s", deleted)
    return ClearDataResult(
        deleted=deleted,
        message="All station data collections have been cleared successfully.",
    )
