# app/schemas/settings.py
from pydantic import BaseModel, Field
from typing import Optional

from .common import NonBlankStr


class FuelPricesUpdate(BaseModel):
    petrolPrice: float = Field(..., ge=0)
    dieselPrice: float = Field(..., ge=0)


class FuelPrices(FuelPricesUpdate):
    """ settings/fuelPrices (ZMW por litro) """
    lastUpdated: Optional[str] = None

    class Config:
        extra = 'ignore'


class SystemProfileUpdate(BaseModel):
    name: NonBlankStr


class SystemProfile(SystemProfileUpdate):
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    class Config:
        extra = 'ignore'


class ClearDataResult(BaseModel):
    deleted: dict[str, int]
    message: str
