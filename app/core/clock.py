# app/core/clock.py
import datetime
import pytz

from app.core.config import settings


def station_tz():
    return pytz.timezone(settings.STATION_TIMEZONE)


def now_utc() -> datetime.datetime:
    return datetime.datetime.now(pytz.utc)


def now_iso() -> str:
    """ Timestamp ISO en UTC (mismo formato para todas las colecciones) """
    return now_utc().isoformat()


def station_date_key(moment: datetime.datetime | None = None) -> str:
    """ Clave 'YYYY-MM-DD' del dia local de la estacion """
    moment = moment or now_utc()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=pytz.utc)
    return moment.astimezone(station_tz()).strftime("%Y-%m-%d")


def station_month_start(moment: datetime.datetime | None = None) -> datetime.datetime:
    """ Inicio (00:00 local del dia 1) del mes de la estacion, en UTC """
    local = (moment or now_utc()).astimezone(station_tz())
    first_day = station_tz().localize(datetime.datetime(local.year, local.month, 1))
    return first_day.astimezone(pytz.utc)
