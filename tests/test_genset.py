from datetime import datetime

import pytest
import pytz

from app.core.clock import station_month_start
from app.schemas.common import IssueKind
from app.schemas.genset import GensetReading, GensetReadingCreate
from app.services.genset import next_refuel_running_hours, record_genset_reading


def _reading(hours, since, timestamp="2026-10-10T08:00:00+00:00", fuel=20.0):
    return GensetReading(
        timestamp=timestamp,
        runningHours=hours,
        hoursSinceLastRefuel=since,
        fuelAdded=fuel,
        fuelConsumptionRate=fuel / since if since else 0,
        operator="op",
    )


def test_first_reading_has_no_interval():
    outcome = record_genset_reading(GensetReadingCreate(runningHours=100), None, "2026-10-10T08:00:00+00:00")
    assert outcome.issue is None
    assert outcome.reading.hoursSinceLastRefuel == 0
    assert outcome.reading.fuelConsumptionRate == 0
    assert outcome.reading.fuelAdded == 20


def test_reading_derives_interval_and_rate():
    outcome = record_genset_reading(GensetReadingCreate(runningHours=105, operator="Banda"),
                                    _reading(100, 0), "2026-10-10T14:00:00+00:00")
    assert outcome.reading.hoursSinceLastRefuel == 5
    assert outcome.reading.fuelConsumptionRate == pytest.approx(4.0)
    assert outcome.reading.operator == "Banda"


@pytest.mark.parametrize("hours", [100, 99.5])
def test_non_advancing_hours_are_rejected(hours):
    outcome = record_genset_reading(GensetReadingCreate(runningHours=hours), _reading(100, 0), "x")
    assert outcome.reading is None
    assert outcome.issue.kind == IssueKind.invalid_transition


def test_next_refuel_prediction():
    assert next_refuel_running_hours([]) is None
    assert next_refuel_running_hours([_reading(100, 0)]) == 106
    assert next_refuel_running_hours([_reading(106, 6), _reading(100, 0)]) == 112
    assert next_refuel_running_hours([_reading(104.5, 4.5), _reading(100, 0)]) == 111.5



def test_month_start_is_station_local_midnight_in_utc():
    # 23:30 UTC del 31/10 ya es 1/11 en Lusaka (UTC+2)
    moment = pytz.utc.localize(datetime(2026, 10, 31, 23, 30))
    assert station_month_start(moment).isoformat() == "2026-10-31T22:00:00+00:00"

    moment = pytz.utc.localize(datetime(2026, 10, 31, 20, 0))
    assert station_month_start(moment).isoformat() == "2026-09-30T22:00:00+00:00"
