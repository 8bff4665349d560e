# app/schemas/readings.py
from pydantic import BaseModel, Field
from typing import List, Optional

from .common import ValidationIssue


class PumpReading(BaseModel):
    """ Estado del medidor de un surtidor para un periodo (litros) """
    opening: float = 0
    closing: float = 0
    sales: float = 0


class TankSummary(BaseModel):
    opening: float = 0
    closing: float = 0
    meterReading: float = 0
    dipReading: float = 0
    tankSales: float = 0
    pumpSales: float = 0
    variance: float = 0


def _blank_pumps() -> List[PumpReading]:
    return [PumpReading() for _ in range(4)]


class ReadingSheet(BaseModel):
    """ Documento de la coleccion 'readings' """
    date: Optional[str] = None
    petrolPumps: List[PumpReading] = Field(default_factory=_blank_pumps)
    dieselPumps: List[PumpReading] = Field(default_factory=_blank_pumps)
    petrolTank: TankSummary = Field(default_factory=TankSummary)
    dieselTank: TankSummary = Field(default_factory=TankSummary)
    savedAt: Optional[str] = None

    class Config:
        extra = 'ignore'


class RawReadingInput(BaseModel):
    """
    Valores tal como los escribe el operador.
    None = campo no tocado en esta sesion de edicion.
    """
    petrolClosings: List[Optional[str]] = []
    dieselClosings: List[Optional[str]] = []
    petrolDip: Optional[str] = None
    dieselDip: Optional[str] = None


class ReadingPreviewRequest(BaseModel):
    sheet: ReadingSheet
    input: RawReadingInput = Field(default_factory=RawReadingInput)


class ReadingPreviewResponse(BaseModel):
    sheet: ReadingSheet
    issues: List[ValidationIssue] = []


class ReadingSaveResponse(BaseModel):
    saved: ReadingSheet
    next: ReadingSheet
