# app/schemas/tank_level.py
from pydantic import BaseModel
from typing import Optional

from .common import FuelType


class TankLevels(BaseModel):
    """ tankLevels/current """
    petrol: float = 0
    diesel: float = 0
    lastUpdated: Optional[str] = None

    class Config:
        extra = 'ignore'


class TankLevelAdjustment(BaseModel):
    tankType: FuelType
    delta: float
    event: str
    refId: str = ""
    user: str = ""


class TankLevelLog(BaseModel):
    type: FuelType
    delta: float
    newLevel: float
    event: str
    refId: str
    user: str
    timestamp: str
