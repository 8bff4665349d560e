# app/services/calculator.py
"""
Calculo de lecturas del periodo: ventas por surtidor, ventas del tanque
(por varilla) y la varianza entre ambas.

Invariante: cada vez que cambia tankSales o pumpSales, la varianza del
tanque se recalcula en la misma actualizacion
(variance = tankSales - pumpSales).
"""
import re
from typing import Dict, List, Optional, Sequence, Tuple

from app.schemas.common import FuelType, IssueKind, ValidationIssue
from app.schemas.readings import PumpReading, RawReadingInput, ReadingSheet, TankSummary
from app.services.station import DipToLiters, StationConfig, linear_dip_converter

DECIMALS = 3

_default_dip = linear_dip_converter()


def normalize_meter_input(value: str) -> str:
    """
    Limpia lo que escribe el operador:
    solo digitos, '.' y un '-' inicial; un unico punto decimal; max 3 decimales.
    Un '-' que no va al principio corta el numero ("1-2" -> "1").
    """
    cleaned = re.sub(r"[^\d.-]", "", value.strip())
    negative = cleaned.startswith("-")
    if negative:
        cleaned = cleaned[1:]
    cleaned = cleaned.split("-", 1)[0]

    parts = cleaned.split(".")
    if len(parts) > 2:
        parts = [parts[0], "".join(parts[1:])]
    if len(parts) == 2 and len(parts[1]) > DECIMALS:
        parts[1] = parts[1][:DECIMALS]

    cleaned = ".".join(parts)
    return f"-{cleaned}" if negative else cleaned


def parse_meter_input(value: Optional[str | float]) -> float:
    """ Texto del operador -> numero. Lo que no se puede leer vale 0. """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(normalize_meter_input(value))
    except ValueError:
        return 0.0


def pump_sales_total(pumps: Sequence[PumpReading]) -> float:
    return sum(pump.sales for pump in pumps)


def record_pump_closing(pump: PumpReading, closing_value: Optional[str | float]) -> PumpReading:
    """
    Registra el cierre de un surtidor. No hay cota inferior: un cierre menor
    que la apertura da ventas negativas (puede ser un reinicio del medidor).
    El llamador debe reconciliar pumpSales/variance del tanque.
    """
    closing = parse_meter_input(closing_value)
    return pump.model_copy(update={"closing": closing, "sales": closing - pump.opening})


def apply_pump_sales(tank: TankSummary, pumps: Sequence[PumpReading]) -> TankSummary:
    pump_sales = pump_sales_total(pumps)
    return tank.model_copy(update={
        "pumpSales": pump_sales,
        "variance": tank.tankSales - pump_sales,
    })


def record_dip_reading(
    tank: TankSummary,
    raw_meters: Optional[str | float],
    dip_to_liters: DipToLiters = _default_dip,
) -> TankSummary:
    meters = parse_meter_input(raw_meters)
    liters = dip_to_liters(meters)
    tank_sales = tank.opening - liters
    return tank.model_copy(update={
        "meterReading": meters,
        "dipReading": meters,
        "closing": liters,
        "tankSales": tank_sales,
        "variance": tank_sales - tank.pumpSales,
    })


def recompute_tank(
    tank: TankSummary,
    pumps: Sequence[PumpReading],
    dip_to_liters: DipToLiters = _default_dip,
) -> TankSummary:
    """ Recalcula todos los derivados del tanque desde meterReading y los surtidores """
    tank = record_dip_reading(tank, tank.meterReading, dip_to_liters)
    return apply_pump_sales(tank, pumps)


def recompute_sheet(sheet: ReadingSheet, config: StationConfig) -> ReadingSheet:
    """ No se confia en los derivados que manda el cliente: se recalculan todos """
    petrol_pumps = [record_pump_closing(p, p.closing) for p in sheet.petrolPumps]
    diesel_pumps = [record_pump_closing(p, p.closing) for p in sheet.dieselPumps]
    return sheet.model_copy(update={
        "petrolPumps": petrol_pumps,
        "dieselPumps": diesel_pumps,
        "petrolTank": recompute_tank(sheet.petrolTank, petrol_pumps, config.dip_to_liters),
        "dieselTank": recompute_tank(sheet.dieselTank, diesel_pumps, config.dip_to_liters),
    })


def _apply_closings(pumps: List[PumpReading], closings: Sequence[Optional[str]], label: str) -> List[PumpReading]:
    if len(closings) > len(pumps):
        raise ValueError(f"{label}: {len(closings)} closings for {len(pumps)} pumps")
    updated = list(pumps)
    for index, raw in enumerate(closings):
        if raw is not None:
            updated[index] = record_pump_closing(updated[index], raw)
    return updated


def apply_raw_input(sheet: ReadingSheet, raw: RawReadingInput, config: StationConfig) -> ReadingSheet:
    """ Aplica una sesion de edicion (cierres + varilla) y reconcilia la varianza """
    petrol_pumps = _apply_closings(sheet.petrolPumps, raw.petrolClosings, "petrol")
    diesel_pumps = _apply_closings(sheet.dieselPumps, raw.dieselClosings, "diesel")

    petrol_tank, diesel_tank = sheet.petrolTank, sheet.dieselTank
    if raw.petrolDip is not None:
        petrol_tank = record_dip_reading(petrol_tank, raw.petrolDip, config.dip_to_liters)
    if raw.dieselDip is not None:
        diesel_tank = record_dip_reading(diesel_tank, raw.dieselDip, config.dip_to_liters)

    return sheet.model_copy(update={
        "petrolPumps": petrol_pumps,
        "dieselPumps": diesel_pumps,
        "petrolTank": apply_pump_sales(petrol_tank, petrol_pumps),
        "dieselTank": apply_pump_sales(diesel_tank, diesel_pumps),
    })


def rollover_period(pumps: Sequence[PumpReading], tank: TankSummary) -> Tuple[List[PumpReading], TankSummary]:
    """
    Cierre de periodo: el cierre recien guardado pasa a ser la apertura.
    Siempre con los valores recien guardados, nunca re-leidos del backend.
    """
    next_pumps = [PumpReading(opening=pump.closing, closing=0, sales=0) for pump in pumps]
    next_tank = TankSummary(opening=tank.closing)
    return next_pumps, next_tank


def rollover_sheet(saved: ReadingSheet) -> ReadingSheet:
    petrol_pumps, petrol_tank = rollover_period(saved.petrolPumps, saved.petrolTank)
    diesel_pumps, diesel_tank = rollover_period(saved.dieselPumps, saved.dieselTank)
    return ReadingSheet(
        petrolPumps=petrol_pumps,
        dieselPumps=diesel_pumps,
        petrolTank=petrol_tank,
        dieselTank=diesel_tank,
    )


def sales_to_post(saved: ReadingSheet, previous: Optional[ReadingSheet]) -> Dict[FuelType, float]:
    """
    Litros a descontar del nivel de cada tanque al guardar la planilla.
    Si la fecha ya tenia planilla, solo la diferencia: volver a guardar
    el mismo dia no descuenta las ventas dos veces.
    """
    deltas = {}
    for fuel, tank, old_tank in (
        (FuelType.petrol, saved.petrolTank, previous.petrolTank if previous else None),
        (FuelType.diesel, saved.dieselTank, previous.dieselTank if previous else None),
    ):
        already_posted = old_tank.pumpSales if old_tank else 0.0
        deltas[fuel] = -(tank.pumpSales - already_posted)
    return deltas


def blank_sheet(config: StationConfig) -> ReadingSheet:
    return ReadingSheet(
        petrolPumps=[PumpReading() for _ in range(config.pumps_per_tank)],
        dieselPumps=[PumpReading() for _ in range(config.pumps_per_tank)],
    )


def _missing(detail: str, field: str) -> ValidationIssue:
    return ValidationIssue(kind=IssueKind.missing_field, detail=detail, field=field)


def validate_before_save(sheet: ReadingSheet) -> List[ValidationIssue]:
    """ Devuelve TODOS los campos faltantes de una vez (no corta en el primero) """
    issues = []
    for index, pump in enumerate(sheet.petrolPumps):
        if pump.closing == 0:
            issues.append(_missing(f"Petrol Pump P{index + 1} closing value is required", f"petrolPumps[{index}].closing"))
    for index, pump in enumerate(sheet.dieselPumps):
        if pump.closing == 0:
            issues.append(_missing(f"Diesel Pump D{index + 1} closing value is required", f"dieselPumps[{index}].closing"))

    if sheet.petrolTank.closing == 0:
        issues.append(_missing("Petrol tank closing value is required", "petrolTank.closing"))
    if sheet.dieselTank.closing == 0:
        issues.append(_missing("Diesel tank closing value is required", "dieselTank.closing"))
    return issues
