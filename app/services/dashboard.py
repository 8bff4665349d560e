# app/services/dashboard.py
"""
Estado del dashboard armado desde tres fuentes independientes
(precios, ultima planilla de lecturas, nivel actual de tanques).
Las fuentes llegan en cualquier orden: se guarda estado por campo y el
snapshot se calcula con lo que haya.
"""
from typing import Optional

from app.schemas.common import FuelType
from app.schemas.dashboard import DashboardStats, PumpSalesPoint
from app.schemas.readings import ReadingSheet
from app.schemas.settings import FuelPrices
from app.schemas.tank_level import TankLevels
from app.services.calculator import pump_sales_total
from app.services.station import StationConfig

AVERAGE_TRANSACTION_LITERS = 20

PRICES = "prices"
READINGS = "readings"
TANK_LEVELS = "tankLevels"


class DashboardState:

    def __init__(self, config: StationConfig):
        self.config = config
        self.prices: Optional[FuelPrices] = None
        self.readings: Optional[ReadingSheet] = None
        self.tank_levels: Optional[TankLevels] = None

    def apply(self, source: str, document: Optional[dict]):
        """ Actualiza un solo campo; un documento None limpia esa fuente """
        if source == PRICES:
            self.prices = FuelPrices.model_validate(document) if document else None
        elif source == READINGS:
            self.readings = ReadingSheet.model_validate(document) if document else None
        elif source == TANK_LEVELS:
            self.tank_levels = TankLevels.model_validate(document) if document else None
        else:
            raise ValueError(f"Unknown dashboard source: {source}")

    def _percent(self, fuel: FuelType, liters: float) -> float:
        capacity = self.config.tank(fuel).capacity_liters
        if not capacity:
            return 0.0
        return max(0.0, min(100.0, liters / capacity * 100))

    def snapshot(self) -> DashboardStats:
        stats = DashboardStats(pricesLoaded=self.prices is not None)

        if self.readings is not None:
            sheet = self.readings
            petrol_sales = pump_sales_total(sheet.petrolPumps)
            diesel_sales = pump_sales_total(sheet.dieselPumps)
            volume = petrol_sales + diesel_sales

            stats.readingsLoaded = True
            stats.petrolSales = petrol_sales
            stats.dieselSales = diesel_sales
            stats.fuelVolume = volume
            stats.transactions = round(volume / AVERAGE_TRANSACTION_LITERS)
            stats.petrolVariance = sheet.petrolTank.variance
            stats.dieselVariance = sheet.dieselTank.variance
            stats.variance = sheet.petrolTank.variance + sheet.dieselTank.variance
            stats.pumpSales = (
                [PumpSalesPoint(label=f"P{i + 1}", sales=p.sales) for i, p in enumerate(sheet.petrolPumps)]
                + [PumpSalesPoint(label=f"D{i + 1}", sales=p.sales) for i, p in enumerate(sheet.dieselPumps)]
            )
            stats.petrolDipReading = sheet.petrolTank.meterReading or 0
            stats.dieselDipReading = sheet.dieselTank.meterReading or 0

            if self.prices is not None:
                stats.totalSales = (petrol_sales * self.prices.petrolPrice
                                    + diesel_sales * self.prices.dieselPrice)

        # El nivel en vivo manda; si no hay, se usa el cierre de la ultima planilla
        if self.tank_levels is not None:
            levels = {"petrol": self.tank_levels.petrol, "diesel": self.tank_levels.diesel}
        elif self.readings is not None:
            levels = {"petrol": self.readings.petrolTank.closing, "diesel": self.readings.dieselTank.closing}
        else:
            levels = {"petrol": 0.0, "diesel": 0.0}

        stats.tankLevels = levels
        stats.tankLevelPercent = {
            fuel.value: self._percent(fuel, levels[fuel.value]) for fuel in FuelType
        }
        return stats
