# app/schemas/genset.py
from pydantic import BaseModel, Field
from typing import Optional
import enum


class GensetStatus(str, enum.Enum):
    running = "running"
    stopped = "stopped"


class GensetReadingCreate(BaseModel):
    runningHours: float = Field(..., ge=0)
    operator: str = "unknown"
    gensetStatus: GensetStatus = GensetStatus.running
    powerOutageStart: Optional[str] = None


class GensetReading(BaseModel):
    """ Documento de la coleccion 'gensetReadings' """
    id: Optional[str] = None
    timestamp: str
    runningHours: float
    hoursSinceLastRefuel: float
    fuelAdded: float
    fuelConsumptionRate: float
    operator: str
    gensetStatus: GensetStatus = GensetStatus.running
    powerOutageStart: Optional[str] = None

    class Config:
        extra = 'ignore'


class GensetSummary(BaseModel):
    lastReading: Optional[GensetReading] = None
    nextRefuelRunningHours: Optional[float] = None
    fuelAddedThisMonth: float = 0
