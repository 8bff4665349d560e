import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.api.dependencies import backend_failure, issues_error
from app.core.clock import now_iso
from app.crud import crud_refill, crud_tank_level
from app.db.mongodb import get_station_db
from app.schemas.refill import (
    RefillDraft,
    RefillSaveResponse,
    RefillStep,
    RefillStepResponse,
    TankRefill,
)
from app.services.refill import RefillWorkflow
from app.services.station import StationConfig, get_station_config

logger = logging.getLogger(__name__)

router = APIRouter()


def _step_response(workflow: RefillWorkflow) -> RefillStepResponse:
    figures = workflow.figures() if workflow.step == RefillStep.review else None
    return RefillStepResponse(
        step=workflow.step,
        draft=workflow.draft,
        figures=figures,
        warnings=workflow.warnings,
    )


@router.get("/refills", response_model=List[TankRefill])
async def read_refills(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncIOMotorDatabase = Depends(get_station_db),
):
    """ Ultimas recepciones, la mas nueva primero """
    try:
        return await crud_refill.get_latest_refills(db, limit=limit)
    except PyMongoError as e:
        raise backend_failure("Failed to load tank refills", e)


@router.post("/refills/prep", response_model=RefillStepResponse)
async def lock_refill_prep(
    draft: RefillDraft,
    config: StationConfig = Depends(get_station_config),
):
    """ Paso 1 -> 2: tanque, factura, varilla inicial y volumen esperado """
    workflow = RefillWorkflow(config, draft, RefillStep.prep)
    if not workflow.lock_prep():
        raise issues_error(workflow.issues)
    return _step_response(workflow)


@router.post("/refills/offload", response_model=RefillStepResponse)
async def complete_refill_offload(
    draft: RefillDraft,
    config: StationConfig = Depends(get_station_config),
):
    """ Paso 2 -> 3: varilla final; devuelve entregado/varianza/estado para revisar """
    workflow = RefillWorkflow(config, draft, RefillStep.prep)
    if not workflow.lock_prep() or not workflow.complete_offload():
        raise issues_error(workflow.issues)
    return _step_response(workflow)


@router.post("/refills", response_model=RefillSaveResponse, status_code=status.HTTP_201_CREATED)
async def save_refill(
    draft: RefillDraft,
    db: AsyncIOMotorDatabase = Depends(get_station_db),
    config: StationConfig = Depends(get_station_config),
):
    """
    Paso 3: confirmacion con firma. Una varianza grande solo genera aviso;
    la capacidad excedida y los campos faltantes bloquean el guardado.
    """
    workflow = RefillWorkflow(config, draft, RefillStep.review)
    if not workflow.confirm():
        raise issues_error(workflow.issues)

    refill = TankRefill(
        **workflow.draft.model_dump(),
        **workflow.figures().model_dump(),
        timestamp=now_iso(),
    )
    try:
        saved = await crud_refill.create_refill(db, refill)
    except PyMongoError as e:
        raise backend_failure("Failed to save refill record", e)

    try:
        await crud_tank_level.set_tank_level(db, saved.tankType, saved.finalDip)
    except PyMongoError as e:
        # no es transaccional con la recepcion: el registro ya existe
        logger.error("Refill %s saved but tank level not updated: %s", saved.id, e)

    logger.info("Refill %s saved (%s, %s L, %s)", saved.id, saved.tankType.value,
                saved.actualDelivered, saved.status.value)
    warnings = workflow.warnings
    cleared = workflow.reset()
    return RefillSaveResponse(refill=saved, warnings=warnings, step=workflow.step, draft=cleared)
