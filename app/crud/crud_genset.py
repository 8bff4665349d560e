# app/crud/crud_genset.py
from typing import List, Optional

import pymongo
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.db.mongodb import GENSET_READINGS
from app.schemas.genset import GensetReading

_NEWEST_FIRST = [("timestamp", pymongo.DESCENDING), ("_id", pymongo.DESCENDING)]


def _to_reading(doc: dict) -> GensetReading:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return GensetReading.model_validate(doc)


async def get_latest_genset_readings(db: AsyncIOMotorDatabase, limit: int = 10) -> List[GensetReading]:
    cursor = db[GENSET_READINGS].find({}).sort(_NEWEST_FIRST).limit(limit)
    docs = await cursor.to_list(length=limit)
    return [_to_reading(doc) for doc in docs]


async def get_last_genset_reading(db: AsyncIOMotorDatabase) -> Optional[GensetReading]:
    doc = await db[GENSET_READINGS].find_one({}, sort=_NEWEST_FIRST)
    return _to_reading(doc) if doc else None


async def create_genset_reading(db: AsyncIOMotorDatabase, reading: GensetReading) -> GensetReading:
    document = reading.model_dump(exclude={"id"}, mode="json")
    result = await db[GENSET_READINGS].insert_one(document)
    return reading.model_copy(update={"id": str(result.inserted_id)})


async def sum_fuel_added_since(db: AsyncIOMotorDatabase, since_iso: str) -> float:
    """ Total de litros cargados desde 'since_iso' (timestamps ISO en UTC) """
    cursor = db[GENSET_READINGS].aggregate([
        {"$match": {"timestamp": {"$gte": since_iso}}},
        {"$group": {"_id": None, "total": {"$sum": "$fuelAdded"}}},
    ])
    result = await cursor.to_list(length=1)
    return float(result[0]["total"]) if result else 0.0
