# app/crud/crud_tank_level.py
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from app.core.clock import now_iso
from app.db.mongodb import TANK_LEVEL_LOGS, TANK_LEVELS
from app.schemas.common import FuelType
from app.schemas.tank_level import TankLevelAdjustment, TankLevelLog, TankLevels

logger = logging.getLogger(__name__)

CURRENT_KEY = "current"


class TankLevelConflict(Exception):
    """ Se agotaron los reintentos del compare-and-set """


async def get_tank_levels(db: AsyncIOMotorDatabase) -> TankLevels:
    doc = await db[TANK_LEVELS].find_one({"_id": CURRENT_KEY})
    return TankLevels.model_validate(doc) if doc else TankLevels()


async def set_tank_level(db: AsyncIOMotorDatabase, tank_type: FuelType, liters: float) -> TankLevels:
    """
    Fija el nivel de un tanque (despues de una recepcion). Ultimo en escribir gana,
    pero sube 'version' para que un ajuste concurrente reintente en vez de pisarlo.
    """
    await db[TANK_LEVELS].update_one(
        {"_id": CURRENT_KEY},
        {
            "$set": {FuelType(tank_type).value: liters, "lastUpdated": now_iso()},
            "$inc": {"version": 1},
        },
        upsert=True,
    )
    return await get_tank_levels(db)


async def _ensure_current(db: AsyncIOMotorDatabase) -> dict:
    doc = await db[TANK_LEVELS].find_one({"_id": CURRENT_KEY})
    if doc and "version" in doc:
        return doc
    if doc:
        # documento escrito sin contador: se inicializa una sola vez
        await db[TANK_LEVELS].update_one(
            {"_id": CURRENT_KEY, "version": {"$exists": False}},
            {"$set": {"version": 0}},
        )
        return await db[TANK_LEVELS].find_one({"_id": CURRENT_KEY})
    try:
        await db[TANK_LEVELS].insert_one({"_id": CURRENT_KEY, "petrol": 0.0, "diesel": 0.0, "version": 0})
    except DuplicateKeyError:
        # otro escritor lo creo primero
        pass
    return await db[TANK_LEVELS].find_one({"_id": CURRENT_KEY})


async def adjust_tank_level(
    db: AsyncIOMotorDatabase,
    adjustment: TankLevelAdjustment,
    max_retries: int = 10,
) -> TankLevelLog:
    """
    Lectura-modificacion-escritura atomica sobre tankLevels/current:
    nuevo = max(0, previo + delta), con compare-and-set sobre 'version'.
    El registro en tankLevelLogs se inserta despues y no es atomico con el nivel.
    """
    fuel = FuelType(adjustment.tankType).value

    for attempt in range(max_retries):
        doc = await _ensure_current(db)
        version = doc.get("version", 0)
        new_level = max(0.0, (doc.get(fuel) or 0) + adjustment.delta)
        stamp = now_iso()

        result = await db[TANK_LEVELS].update_one(
            {"_id": CURRENT_KEY, "version": version},
            {"$set": {fuel: new_level, "lastUpdated": stamp}, "$inc": {"version": 1}},
        )
        if result.matched_count == 1:
            log = TankLevelLog(
                type=adjustment.tankType,
                delta=adjustment.delta,
                newLevel=new_level,
                event=adjustment.event,
                refId=adjustment.refId,
                user=adjustment.user,
                timestamp=stamp,
            )
            await db[TANK_LEVEL_LOGS].insert_one(log.model_dump(mode="json"))
            return log

        logger.debug("Conflicto de version en tankLevels (intento %s)", attempt + 1)

    raise TankLevelConflict(f"Could not update {fuel} level after {max_retries} attempts")
