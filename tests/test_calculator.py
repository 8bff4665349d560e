import pytest

from app.schemas.common import FuelType, IssueKind
from app.schemas.readings import PumpReading, RawReadingInput, ReadingSheet, TankSummary
from app.services import calculator


def _assert_variance_consistent(tank: TankSummary):
    assert tank.variance == pytest.approx(tank.tankSales - tank.pumpSales)


@pytest.mark.parametrize("raw, expected", [
    ("150", 150.0),
    ("110.1234", 110.123),
    ("1.2.3", 1.23),
    ("1,234.5", 1234.5),
    ("  42 L", 42.0),
    ("-5.5", -5.5),
    ("1-2", 1.0),
    ("--5", 0.0),
    ("12.5-3", 12.5),
    (".", 0.0),
    ("-.", 0.0),
    ("abc", 0.0),
    ("", 0.0),
    (None, 0.0),
])
def test_parse_meter_input(raw, expected):
    assert calculator.parse_meter_input(raw) == pytest.approx(expected)


def test_decimals_are_truncated_not_rounded():
    assert calculator.normalize_meter_input("2.9999") == "2.999"


def test_record_pump_closing_derives_sales():
    pump = calculator.record_pump_closing(PumpReading(opening=100), "150")
    assert pump.closing == 150
    assert pump.sales == 50


def test_closing_below_opening_gives_negative_sales():
    pump = calculator.record_pump_closing(PumpReading(opening=100), "90")
    assert pump.sales == -10


def test_dip_reading_converts_meters_to_liters():
    tank = calculator.record_dip_reading(TankSummary(opening=120000), "110")
    assert tank.closing == 110000
    assert tank.meterReading == 110
    assert tank.tankSales == 10000
    _assert_variance_consistent(tank)


def test_dip_reading_keeps_three_decimals():
    tank = calculator.record_dip_reading(TankSummary(), "110.1234")
    assert tank.meterReading == pytest.approx(110.123)
    assert tank.closing == pytest.approx(110123)


def test_dip_converter_is_injectable():
    tank = calculator.record_dip_reading(TankSummary(opening=5000), "2", dip_to_liters=lambda m: m * 500)
    assert tank.closing == 1000
    assert tank.tankSales == 4000


def test_zero_dip_is_not_clamped():
    tank = calculator.record_dip_reading(TankSummary(opening=300, pumpSales=50), "0")
    assert tank.closing == 0
    assert tank.tankSales == 300
    assert tank.variance == 250


def _scenario_sheet() -> ReadingSheet:
    return ReadingSheet(
        petrolPumps=[PumpReading(opening=o) for o in (100, 200, 300, 400)],
        dieselPumps=[PumpReading(opening=o) for o in (1000, 2000, 3000, 4000)],
        petrolTank=TankSummary(opening=15000),
        dieselTank=TankSummary(opening=20000),
    )


def test_end_to_end_pump_and_tank_variance(station_config):
    raw = RawReadingInput(petrolClosings=["150", "250", "300", "500"], petrolDip="13.7")
    sheet = calculator.apply_raw_input(_scenario_sheet(), raw, station_config)

    assert [p.sales for p in sheet.petrolPumps] == [50, 50, 0, 100]
    tank = sheet.petrolTank
    assert tank.pumpSales == 200
    assert tank.closing == pytest.approx(13700)
    assert tank.tankSales == pytest.approx(1300)
    assert tank.variance == pytest.approx(1100)


def test_variance_reconciled_whatever_the_input_order(station_config):
    sheet = _scenario_sheet()
    # primero la varilla, despues los surtidores
    sheet = calculator.apply_raw_input(sheet, RawReadingInput(petrolDip="13.7"), station_config)
    _assert_variance_consistent(sheet.petrolTank)
    sheet = calculator.apply_raw_input(sheet, RawReadingInput(petrolClosings=["150", None, None, "500"]), station_config)
    _assert_variance_consistent(sheet.petrolTank)
    assert sheet.petrolTank.pumpSales == 150
    assert sheet.petrolTank.variance == pytest.approx(1150)
    _assert_variance_consistent(sheet.dieselTank)


def test_untouched_closings_are_left_alone(station_config):
    sheet = _scenario_sheet()
    sheet.petrolPumps[1] = PumpReading(opening=200, closing=260, sales=60)
    sheet = calculator.apply_raw_input(sheet, RawReadingInput(petrolClosings=["150", None]), station_config)
    assert sheet.petrolPumps[1].closing == 260
    assert sheet.petrolTank.pumpSales == 110


def test_too_many_closings_rejected(station_config):
    raw = RawReadingInput(petrolClosings=["1"] * 5)
    with pytest.raises(ValueError):
        calculator.apply_raw_input(_scenario_sheet(), raw, station_config)


def test_recompute_sheet_ignores_client_derived_fields(station_config):
    sheet = _scenario_sheet()
    sheet.petrolPumps[0] = PumpReading(opening=100, closing=150, sales=9999)
    sheet.petrolTank = TankSummary(opening=15000, meterReading=13.7, closing=1, tankSales=1, variance=-5)

    fixed = calculator.recompute_sheet(sheet, station_config)
    assert fixed.petrolPumps[0].sales == 50
    assert fixed.petrolTank.closing == pytest.approx(13700)
    assert fixed.petrolTank.pumpSales == pytest.approx(sum(p.sales for p in fixed.petrolPumps))
    _assert_variance_consistent(fixed.petrolTank)
    _assert_variance_consistent(fixed.dieselTank)


def test_rollover_uses_just_saved_closings():
    pumps = [PumpReading(opening=100, closing=150, sales=50), PumpReading(opening=200, closing=275, sales=75)]
    tank = TankSummary(opening=15000, closing=13700, meterReading=13.7, dipReading=13.7,
                       tankSales=1300, pumpSales=125, variance=1175)

    next_pumps, next_tank = calculator.rollover_period(pumps, tank)

    assert [p.opening for p in next_pumps] == [150, 275]
    assert all(p.closing == 0 and p.sales == 0 for p in next_pumps)
    assert next_tank.opening == 13700
    assert next_tank.closing == 0
    assert next_tank.meterReading == 0
    _assert_variance_consistent(next_tank)


def test_validate_before_save_reports_everything_at_once(station_config):
    issues = calculator.validate_before_save(calculator.blank_sheet(station_config))
    assert len(issues) == 10
    assert all(issue.kind == IssueKind.missing_field for issue in issues)
    assert issues[0].detail == "Petrol Pump P1 closing value is required"
    assert issues[4].detail == "Diesel Pump D1 closing value is required"
    assert issues[-1].field == "dieselTank.closing"


def test_validate_before_save_passes_complete_sheet(station_config):
    raw = RawReadingInput(
        petrolClosings=["150", "250", "300", "500"],
        dieselClosings=["1010", "2020", "3030", "4040"],
        petrolDip="13.7",
        dieselDip="19.9",
    )
    sheet = calculator.apply_raw_input(_scenario_sheet(), raw, station_config)
    assert calculator.validate_before_save(sheet) == []


def test_first_save_posts_all_pump_sales():
    saved = ReadingSheet(petrolTank=TankSummary(pumpSales=200), dieselTank=TankSummary(pumpSales=40))
    deltas = calculator.sales_to_post(saved, None)
    assert deltas == {FuelType.petrol: -200, FuelType.diesel: -40}


def test_resave_posts_only_the_change():
    previous = ReadingSheet(petrolTank=TankSummary(pumpSales=200), dieselTank=TankSummary(pumpSales=40))
    saved = ReadingSheet(petrolTank=TankSummary(pumpSales=300), dieselTank=TankSummary(pumpSales=40))
    deltas = calculator.sales_to_post(saved, previous)
    assert deltas[FuelType.petrol] == -100
    assert deltas[FuelType.diesel] == 0
