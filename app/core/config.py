from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str
    MONGO_URL: str
    MONGO_DB_NAME: str = "fuel_station"

    STATION_TIMEZONE: str = "Africa/Lusaka"
    LOG_LEVEL: str = "INFO"

    # surtidores por tanque (P1..P4 / D1..D4)
    PUMPS_PER_TANK: int = 4
    DIP_LITERS_PER_METER: float = 1000.0

    # volumen maximo nominal (varilla llena)
    PETROL_MAX_LITERS: float = 30645.3
    DIESEL_MAX_LITERS: float = 30185.5
    # capacidad operacional (dashboard)
    PETROL_CAPACITY_LITERS: float = 25000.0
    DIESEL_CAPACITY_LITERS: float = 25000.0

    REFILL_VARIANCE_WARNING_PCT: float = 5.0
    GENSET_FUEL_PER_REFUEL: float = 20.0
    TANK_LEVEL_MAX_RETRIES: int = 10

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173", # Puerto por defecto de Vite
        "http://localhost:3000",
        "http://localhost",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"

settings = Settings()
