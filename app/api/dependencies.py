# app/api/dependencies.py
import logging
from typing import List

from fastapi import HTTPException, status

from app.schemas.common import ValidationIssue

logger = logging.getLogger(__name__)

BACKEND_FAILURE_DETAIL = "{action}. Please try again."


def issues_error(issues: List[ValidationIssue], status_code: int = status.HTTP_422_UNPROCESSABLE_ENTITY) -> HTTPException:
    """ Errores de validacion como lista: { issues: [{kind, detail, field}] } """
    return HTTPException(
        status_code=status_code,
        detail={"issues": [issue.model_dump(mode="json") for issue in issues]},
    )


def backend_failure(action: str, exc: Exception) -> HTTPException:
    """
    Falla de red/persistencia: se registra y se devuelve un mensaje generico.
    No hay reintento automatico; el cliente conserva su borrador.
    """
    logger.error("BackendFailure: %s (%s)", action, exc, exc_info=exc)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=BACKEND_FAILURE_DETAIL.format(action=action),
    )
