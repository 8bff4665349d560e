import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.api.dependencies import backend_failure, issues_error
from app.core.clock import now_iso, station_month_start
from app.crud import crud_genset
from app.db.mongodb import get_station_db
from app.schemas.genset import GensetReading, GensetReadingCreate, GensetSummary
from app.services import genset as genset_service
from app.services.station import StationConfig, get_station_config

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/genset/readings", response_model=List[GensetReading])
async def read_genset_readings(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncIOMotorDatabase = Depends(get_station_db),
):
    try:
        return await crud_genset.get_latest_genset_readings(db, limit=limit)
    except PyMongoError as e:
        raise backend_failure("Failed to load genset readings", e)


@router.get("/genset/summary", response_model=GensetSummary)
async def read_genset_summary(db: AsyncIOMotorDatabase = Depends(get_station_db)):
    """ Ultima recarga, horometro sugerido para la proxima y litros del mes """
    try:
        recent = await crud_genset.get_latest_genset_readings(db, limit=2)
        month_fuel = await crud_genset.sum_fuel_added_since(db, station_month_start().isoformat())
    except PyMongoError as e:
        raise backend_failure("Failed to load genset readings", e)

    return GensetSummary(
        lastReading=recent[0] if recent else None,
        nextRefuelRunningHours=genset_service.next_refuel_running_hours(recent),
        fuelAddedThisMonth=month_fuel,
    )


@router.post("/genset/readings", response_model=GensetReading, status_code=status.HTTP_201_CREATED)
async def create_genset_reading(
    reading_in: GensetReadingCreate,
    db: AsyncIOMotorDatabase = Depends(get_station_db),
    config: StationConfig = Depends(get_station_config),
):
    try:
        last_reading = await crud_genset.get_last_genset_reading(db)
    except PyMongoError as e:
        raise backend_failure("Failed to load genset readings", e)

    outcome = genset_service.record_genset_reading(
        reading_in, last_reading, timestamp=now_iso(), fuel_added=config.genset_fuel_per_refuel
    )
    if outcome.issue:
        # no se guarda nada
        raise issues_error([outcome.issue], status_code=status.HTTP_409_CONFLICT)

    try:
        saved = await crud_genset.create_genset_reading(db, outcome.reading)
    except PyMongoError as e:
        raise backend_failure("Failed to save genset reading", e)
    logger.info("Genset reading saved: %s h (+%s h)", saved.runningHours, saved.hoursSinceLastRefuel)
    return saved
