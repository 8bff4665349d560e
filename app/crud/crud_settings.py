# app/crud/crud_settings.py
from typing import Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.clock import now_iso
from app.db.mongodb import DATA_COLLECTIONS, SETTINGS
from app.schemas.settings import FuelPrices, FuelPricesUpdate, SystemProfile, SystemProfileUpdate

FUEL_PRICES_KEY = "fuelPrices"
SYSTEM_PROFILE_KEY = "systemProfile"


async def get_fuel_prices(db: AsyncIOMotorDatabase) -> Optional[FuelPrices]:
    doc = await db[SETTINGS].find_one({"_id": FUEL_PRICES_KEY})
    return FuelPrices.model_validate(doc) if doc else None


async def save_fuel_prices(db: AsyncIOMotorDatabase, prices_in: FuelPricesUpdate) -> FuelPrices:
    prices = FuelPrices(**prices_in.model_dump(), lastUpdated=now_iso())
    await db[SETTINGS].replace_one({"_id": FUEL_PRICES_KEY}, prices.model_dump(), upsert=True)
    return prices


async def get_system_profile(db: AsyncIOMotorDatabase) -> Optional[SystemProfile]:
    doc = await db[SETTINGS].find_one({"_id": SYSTEM_PROFILE_KEY})
    return SystemProfile.model_validate(doc) if doc else None


async def save_system_profile(db: AsyncIOMotorDatabase, profile_in: SystemProfileUpdate) -> SystemProfile:
    """ createdAt se fija en el primer guardado y no se vuelve a tocar """
    stamp = now_iso()
    existing = await get_system_profile(db)
    profile = SystemProfile(
        name=profile_in.name,
        createdAt=existing.createdAt if existing and existing.createdAt else stamp,
        updatedAt=stamp,
    )
    await db[SETTINGS].replace_one({"_id": SYSTEM_PROFILE_KEY}, profile.model_dump(), upsert=True)
    return profile


async def clear_station_data(db: AsyncIOMotorDatabase) -> Dict[str, int]:
    """ Borra en lote todas las colecciones de datos de la estacion """
    deleted = {}
    for name in DATA_COLLECTIONS:
        result = await db[name].delete_many({})
        deleted[name] = result.deleted_count
    return deleted
