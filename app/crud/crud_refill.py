# app/crud/crud_refill.py
from typing import List

import pymongo
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.db.mongodb import TANK_REFILLS
from app.schemas.refill import TankRefill


def _to_refill(doc: dict) -> TankRefill:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return TankRefill.model_validate(doc)


async def create_refill(db: AsyncIOMotorDatabase, refill: TankRefill) -> TankRefill:
    document = refill.model_dump(exclude={"id"}, mode="json")
    result = await db[TANK_REFILLS].insert_one(document)
    return refill.model_copy(update={"id": str(result.inserted_id)})


async def get_latest_refills(db: AsyncIOMotorDatabase, limit: int = 10) -> List[TankRefill]:
    cursor = db[TANK_REFILLS].find({}).sort([
        ("timestamp", pymongo.DESCENDING),
        ("_id", pymongo.DESCENDING),
    ]).limit(limit)
    docs = await cursor.to_list(length=limit)
    return [_to_refill(doc) for doc in docs]
