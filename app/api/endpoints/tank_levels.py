from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.api.dependencies import backend_failure
from app.core.config import settings
from app.crud import crud_tank_level
from app.crud.crud_tank_level import TankLevelConflict
from app.db.mongodb import get_station_db
from app.schemas.tank_level import TankLevelAdjustment, TankLevelLog, TankLevels

router = APIRouter()


@router.get("/tank-levels", response_model=TankLevels)
async def read_tank_levels(db: AsyncIOMotorDatabase = Depends(get_station_db)):
    try:
        return await crud_tank_level.get_tank_levels(db)
    except PyMongoError as e:
        raise backend_failure("Failed to load tank levels", e)


@router.post("/tank-levels/adjust", response_model=TankLevelLog)
async def adjust_tank_level(
    adjustment: TankLevelAdjustment,
    db: AsyncIOMotorDatabase = Depends(get_station_db),
):
    """
    Suma (recepcion) o resta (venta) litros al nivel actual de un tanque.
    El nivel nunca baja de 0.
    """
    try:
        return await crud_tank_level.adjust_tank_level(db, adjustment, settings.TANK_LEVEL_MAX_RETRIES)
    except TankLevelConflict as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except PyMongoError as e:
        raise backend_failure("Failed to update tank level", e)
