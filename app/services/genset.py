# app/services/genset.py
"""
Registro de recargas del generador (siempre 20 L por recarga).
Una lectura nueva solo es valida si el horometro avanza.
"""
from dataclasses import dataclass
from typing import Optional, Sequence

from app.schemas.common import IssueKind, ValidationIssue
from app.schemas.genset import GensetReading, GensetReadingCreate

DEFAULT_HOURS_TO_NEXT_REFUEL = 6
SHORT_INTERVAL_HOURS_TO_NEXT_REFUEL = 7


@dataclass
class GensetOutcome:
    reading: Optional[GensetReading] = None
    issue: Optional[ValidationIssue] = None


def record_genset_reading(
    current: GensetReadingCreate,
    last_reading: Optional[GensetReading],
    timestamp: str,
    fuel_added: float = 20.0,
) -> GensetOutcome:
    """
    Devuelve la lectura a guardar, o solo el issue InvalidTransition
    (sin lectura) cuando el horometro no supera al anterior.
    """
    if last_reading and current.runningHours <= last_reading.runningHours:
        return GensetOutcome(issue=ValidationIssue(
            kind=IssueKind.invalid_transition,
            detail=f"Running hours must be greater than last reading ({last_reading.runningHours})",
            field="runningHours",
        ))

    hours_since = current.runningHours - last_reading.runningHours if last_reading else 0.0
    rate = fuel_added / hours_since if hours_since > 0 else 0.0

    return GensetOutcome(reading=GensetReading(
        timestamp=timestamp,
        runningHours=current.runningHours,
        hoursSinceLastRefuel=hours_since,
        fuelAdded=fuel_added,
        fuelConsumptionRate=rate,
        operator=current.operator or "unknown",
        gensetStatus=current.gensetStatus,
        powerOutageStart=current.powerOutageStart,
    ))


def next_refuel_running_hours(recent: Sequence[GensetReading]) -> Optional[float]:
    """
    Horometro sugerido para la proxima recarga (heuristica simple):
    +6 h por defecto; +7 h si el ultimo intervalo fue menor a 6 h.
    'recent' va del mas nuevo al mas viejo.
    """
    if not recent:
        return None
    last = recent[0]
    hours_to_add = DEFAULT_HOURS_TO_NEXT_REFUEL
    if len(recent) > 1 and last.hoursSinceLastRefuel < DEFAULT_HOURS_TO_NEXT_REFUEL:
        hours_to_add = SHORT_INTERVAL_HOURS_TO_NEXT_REFUEL
    return round(last.runningHours + hours_to_add, 1)

