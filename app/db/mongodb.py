# app/db/mongodb.py
import logging

import motor.motor_asyncio
import pymongo

from app.core.config import settings

logger = logging.getLogger(__name__)

READINGS = "readings"
TANK_REFILLS = "tankRefills"
GENSET_READINGS = "gensetReadings"
TANK_LEVELS = "tankLevels"
TANK_LEVEL_LOGS = "tankLevelLogs"
SETTINGS = "settings"

# Colecciones que borra "Clear Data" (incluye las de genset heredadas)
DATA_COLLECTIONS = {
    READINGS: "Tank Readings",
    TANK_REFILLS: "Tank Refills",
    "gensetLogs": "Genset Logs",
    "gensetFuel": "Genset Fuel Records",
    "gensetRuntime": "Genset Runtime Records",
    GENSET_READINGS: "Genset Readings",
}

client: motor.motor_asyncio.AsyncIOMotorClient = None
db_station: motor.motor_asyncio.AsyncIOMotorDatabase = None

async def connect_to_mongo():
    global client, db_station
    logger.info("Iniciando conexión a MongoDB...")
    client = motor.motor_asyncio.AsyncIOMotorClient(settings.MONGO_URL)
    db_station = client[settings.MONGO_DB_NAME]
    logger.info("Conectado a MongoDB. DB Estación: '%s'", settings.MONGO_DB_NAME)

async def close_mongo_connection():
    global client
    if client:
        client.close()
        logger.info("Desconectado de MongoDB.")


async def ensure_indexes(db: motor.motor_asyncio.AsyncIOMotorDatabase):
    """ Indices para las consultas 'ultimos N' de cada coleccion """
    await db[READINGS].create_index([("date", pymongo.DESCENDING)])
    await db[TANK_REFILLS].create_index([("timestamp", pymongo.DESCENDING)])
    await db[GENSET_READINGS].create_index([("timestamp", pymongo.DESCENDING)])
    await db[TANK_LEVEL_LOGS].create_index([("timestamp", pymongo.DESCENDING)])


def get_station_db() -> motor.motor_asyncio.AsyncIOMotorDatabase:
    """
    Dependencia de FastAPI:
    Devuelve la base de datos de la estación.
    """
    return db_station
