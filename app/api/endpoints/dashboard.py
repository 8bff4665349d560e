import asyncio
import logging

import pymongo
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.api.dependencies import backend_failure
from app.crud import crud_readings, crud_settings, crud_tank_level
from app.crud.crud_settings import FUEL_PRICES_KEY
from app.crud.crud_tank_level import CURRENT_KEY
from app.db.mongodb import READINGS, SETTINGS, TANK_LEVELS, get_station_db
from app.schemas.dashboard import DashboardStats
from app.services import dashboard as dashboard_service
from app.services.dashboard import DashboardState
from app.services.station import StationConfig, get_station_config

logger = logging.getLogger(__name__)

router = APIRouter()

STREAM_ERROR = "error"
DISCONNECTED = "disconnected"


async def _load_state(db: AsyncIOMotorDatabase, config: StationConfig) -> DashboardState:
    """ Las tres fuentes se leen en paralelo y se aplican por separado """
    prices, readings, levels = await asyncio.gather(
        crud_settings.get_fuel_prices(db),
        crud_readings.get_latest_readings(db),
        db[TANK_LEVELS].find_one({"_id": CURRENT_KEY}),
    )
    state = DashboardState(config)
    state.apply(dashboard_service.PRICES, prices.model_dump() if prices else None)
    state.apply(dashboard_service.READINGS, readings.model_dump() if readings else None)
    state.apply(dashboard_service.TANK_LEVELS, levels)
    return state


@router.get("/dashboard", response_model=DashboardStats)
async def read_dashboard(
    db: AsyncIOMotorDatabase = Depends(get_station_db),
    config: StationConfig = Depends(get_station_config),
):
    try:
        state = await _load_state(db, config)
    except PyMongoError as e:
        raise backend_failure("Failed to load dashboard data", e)
    return state.snapshot()


async def _watch(db: AsyncIOMotorDatabase, source: str, queue: asyncio.Queue):
    """ Change stream de una fuente -> (source, documento) a la cola """
    if source == dashboard_service.PRICES:
        collection, match = SETTINGS, {"documentKey._id": FUEL_PRICES_KEY}
    elif source == dashboard_service.TANK_LEVELS:
        collection, match = TANK_LEVELS, {"documentKey._id": CURRENT_KEY}
    else:
        collection, match = READINGS, {}

    pipeline = [{"$match": match}] if match else []
    async with db[collection].watch(pipeline, full_document="updateLookup") as stream:
        async for change in stream:
            if source == dashboard_service.READINGS:
                # siempre la planilla mas reciente, no la que cambio
                document = await db[READINGS].find_one({}, sort=[("date", pymongo.DESCENDING)])
            else:
                document = change.get("fullDocument")
            await queue.put((source, document))


async def _receive_until_disconnect(websocket: WebSocket, queue: asyncio.Queue):
    """ El cliente no manda nada util; se lee solo para enterarse del cierre """
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            await queue.put((DISCONNECTED, None))
            return


def _report_failure(queue: asyncio.Queue):
    """ Cualquier excepcion de una tarea de fondo termina en la cola """
    def callback(task: asyncio.Task):
        if not task.cancelled() and task.exception() is not None:
            queue.put_nowait((STREAM_ERROR, task.exception()))
    return callback


@router.websocket("/dashboard/ws")
async def dashboard_stream(
    websocket: WebSocket,
    db: AsyncIOMotorDatabase = Depends(get_station_db),
    config: StationConfig = Depends(get_station_config),
):
    """
    Envia un snapshot nuevo cada vez que cambia precios, lecturas o nivel.
    Requiere MongoDB con replica set (change streams).
    """
    await websocket.accept()
    queue: asyncio.Queue = asyncio.Queue()
    tasks = []
    try:
        state = await _load_state(db, config)
        await websocket.send_json(state.snapshot().model_dump(mode="json"))

        tasks = [
            asyncio.create_task(_watch(db, source, queue))
            for source in (dashboard_service.PRICES, dashboard_service.READINGS, dashboard_service.TANK_LEVELS)
        ]
        tasks.append(asyncio.create_task(_receive_until_disconnect(websocket, queue)))
        for task in tasks:
            task.add_done_callback(_report_failure(queue))

        while True:
            source, document = await queue.get()
            if source == DISCONNECTED:
                logger.info("Dashboard websocket disconnected")
                break
            if source == STREAM_ERROR:
                logger.error("Dashboard stream failed: %s", document, exc_info=document)
                await websocket.close(code=1011)
                break
            state.apply(source, document)
            await websocket.send_json(state.snapshot().model_dump(mode="json"))
    except WebSocketDisconnect:
        logger.info("Dashboard websocket disconnected")
    except PyMongoError as e:
        logger.error("Dashboard stream failed: %s", e)
        await websocket.close(code=1011)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
