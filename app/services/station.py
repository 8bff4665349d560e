# app/services/station.py
"""
Configuracion explicita que reciben las funciones de calculo.
Nada en app/services lee 'settings' directamente: los endpoints
construyen un StationConfig y lo pasan.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict

from app.core.config import settings
from app.schemas.common import FuelType

DipToLiters = Callable[[float], float]


def linear_dip_converter(liters_per_meter: float = 1000.0) -> DipToLiters:
    """
    Conversion lineal varilla -> litros.
    Es un reemplazo provisional de la tabla de calibracion del tanque.
    """
    def convert(meters: float) -> float:
        return meters * liters_per_meter
    return convert


@dataclass(frozen=True)
class TankSpec:
    max_liters: float
    capacity_liters: float


@dataclass(frozen=True)
class StationConfig:
    tanks: Dict[FuelType, TankSpec]
    dip_to_liters: DipToLiters = field(default_factory=linear_dip_converter)
    pumps_per_tank: int = 4
    variance_warning_pct: float = 5.0
    genset_fuel_per_refuel: float = 20.0

    def tank(self, fuel: FuelType) -> TankSpec:
        return self.tanks[FuelType(fuel)]


def get_station_config() -> StationConfig:
    """ Dependencia de FastAPI: configuracion de la estacion desde settings """
    return StationConfig(
        tanks={
            FuelType.petrol: TankSpec(settings.PETROL_MAX_LITERS, settings.PETROL_CAPACITY_LITERS),
            FuelType.diesel: TankSpec(settings.DIESEL_MAX_LITERS, settings.DIESEL_CAPACITY_LITERS),
        },
        dip_to_liters=linear_dip_converter(settings.DIP_LITERS_PER_METER),
        pumps_per_tank=settings.PUMPS_PER_TANK,
        variance_warning_pct=settings.REFILL_VARIANCE_WARNING_PCT,
        genset_fuel_per_refuel=settings.GENSET_FUEL_PER_REFUEL,
    )
