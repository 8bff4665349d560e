# app/schemas/dashboard.py
from pydantic import BaseModel
from typing import Dict


class PumpSalesPoint(BaseModel):
    label: str
    sales: float


class DashboardStats(BaseModel):
    """ Coincide con 'todayStats' del Dashboard en React """
    totalSales: float = 0
    fuelVolume: float = 0
    transactions: int = 0
    variance: float = 0
    petrolSales: float = 0
    dieselSales: float = 0
    petrolVariance: float = 0
    dieselVariance: float = 0
    pumpSales: list[PumpSalesPoint] = []
    tankLevels: Dict[str, float] = {"petrol": 0, "diesel": 0}
    tankLevelPercent: Dict[str, float] = {"petrol": 0, "diesel": 0}
    petrolDipReading: float = 0
    dieselDipReading: float = 0
    pricesLoaded: bool = False
    readingsLoaded: bool = False
