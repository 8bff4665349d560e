import logging

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.api.dependencies import backend_failure, issues_error
from app.core.clock import now_iso, station_date_key
from app.core.config import settings
from app.crud import crud_readings, crud_tank_level
from app.crud.crud_tank_level import TankLevelConflict
from app.db.mongodb import get_station_db
from app.schemas.readings import (
    ReadingPreviewRequest,
    ReadingPreviewResponse,
    ReadingSaveResponse,
    ReadingSheet,
)
from app.schemas.tank_level import TankLevelAdjustment
from app.services import calculator
from app.services.station import StationConfig, get_station_config

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/readings/latest", response_model=ReadingSheet)
async def read_latest_readings(
    db: AsyncIOMotorDatabase = Depends(get_station_db),
    config: StationConfig = Depends(get_station_config),
):
    """
    Ultima planilla guardada (la apertura del periodo actual sale de aqui).
    Si no hay ninguna, devuelve una planilla en cero.
    """
    try:
        latest = await crud_readings.get_latest_readings(db)
    except PyMongoError as e:
        raise backend_failure("Failed to load readings", e)

    if latest is None:
        logger.info("No previous readings found, using default values")
        return calculator.blank_sheet(config)
    return latest


@router.get("/readings/{date_key}", response_model=ReadingSheet)
async def read_readings_for_date(
    date_key: str,
    db: AsyncIOMotorDatabase = Depends(get_station_db),
):
    try:
        sheet = await crud_readings.get_readings(db, date_key)
    except PyMongoError as e:
        raise backend_failure("Failed to load readings", e)
    if sheet is None:
        raise HTTPException(status_code=404, detail=f"No readings found for date {date_key}")
    return sheet


@router.post("/readings/preview", response_model=ReadingPreviewResponse)
async def preview_readings(
    payload: ReadingPreviewRequest,
    config: StationConfig = Depends(get_station_config),
):
    """
    Aplica lo que escribio el operador (cierres, varilla) y devuelve la
    planilla con ventas/varianza recalculadas. No escribe nada.
    """
    try:
        sheet = calculator.apply_raw_input(payload.sheet, payload.input, config)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return ReadingPreviewResponse(sheet=sheet, issues=calculator.validate_before_save(sheet))


@router.post("/readings", response_model=ReadingSaveResponse, status_code=status.HTTP_201_CREATED)
async def save_readings(
    sheet_in: ReadingSheet,
    db: AsyncIOMotorDatabase = Depends(get_station_db),
    config: StationConfig = Depends(get_station_config),
):
    """
    Guarda la planilla del dia y devuelve la del proximo periodo,
    armada con los cierres recien guardados (no se vuelve a leer Mongo).
    """
    sheet = calculator.recompute_sheet(sheet_in, config)
    issues = calculator.validate_before_save(sheet)
    if issues:
        raise issues_error(issues)

    sheet = sheet.model_copy(update={"date": station_date_key(), "savedAt": now_iso()})
    try:
        previous = await crud_readings.get_readings(db, sheet.date)
        saved = await crud_readings.save_readings(db, sheet)
    except PyMongoError as e:
        raise backend_failure("Failed to save readings", e)
    logger.info("Readings saved for date %s", saved.date)

    # Solo se descuenta lo que cambio respecto de la planilla que se piso
    for fuel, delta in calculator.sales_to_post(saved, previous).items():
        if not delta:
            continue
        adjustment = TankLevelAdjustment(
            tankType=fuel,
            delta=delta,
            event="sale" if previous is None else "sale-correction",
            refId=saved.date,
            user="readings",
        )
        try:
            await crud_tank_level.adjust_tank_level(db, adjustment, settings.TANK_LEVEL_MAX_RETRIES)
        except (PyMongoError, TankLevelConflict) as e:
            # la planilla ya quedo guardada; el nivel se corrige con un ajuste manual
            logger.error("Tank level not updated after readings %s: %s", saved.date, e)

    return ReadingSaveResponse(saved=saved, next=calculator.rollover_sheet(saved))
