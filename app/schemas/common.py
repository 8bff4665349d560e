# app/schemas/common.py
from pydantic import BaseModel, StringConstraints
from typing import Annotated, Optional
import enum


class FuelType(str, enum.Enum):
    petrol = "petrol"
    diesel = "diesel"


class IssueKind(str, enum.Enum):
    missing_field = "MissingField"
    invalid_transition = "InvalidTransition"
    capacity_exceeded = "CapacityExceeded"
    large_variance = "LargeVariance"
    backend_failure = "BackendFailure"


class ValidationIssue(BaseModel):
    """ Resultado etiquetado de una validacion: { kind, detail } """
    kind: IssueKind
    detail: str
    field: Optional[str] = None


# Texto obligatorio: se recorta y no puede quedar vacio
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
