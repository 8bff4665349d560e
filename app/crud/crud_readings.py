# app/crud/crud_readings.py
from typing import Optional

import pymongo
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.db.mongodb import READINGS
from app.schemas.readings import ReadingSheet


async def get_latest_readings(db: AsyncIOMotorDatabase) -> Optional[ReadingSheet]:
    doc = await db[READINGS].find_one({}, sort=[("date", pymongo.DESCENDING)])
    return ReadingSheet.model_validate(doc) if doc else None


async def get_readings(db: AsyncIOMotorDatabase, date_key: str) -> Optional[ReadingSheet]:
    doc = await db[READINGS].find_one({"_id": date_key})
    return ReadingSheet.model_validate(doc) if doc else None


async def save_readings(db: AsyncIOMotorDatabase, sheet: ReadingSheet) -> ReadingSheet:
    """
    Guarda la planilla bajo su fecha. Ultimo en escribir gana:
    dos operadores guardando el mismo dia se pisan.
    """
    document = sheet.model_dump()
    await db[READINGS].replace_one({"_id": sheet.date}, document, upsert=True)
    return sheet
