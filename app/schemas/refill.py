# app/schemas/refill.py
from pydantic import BaseModel, Field
from typing import List, Optional
import enum

from .common import FuelType, ValidationIssue


class RefillStatus(str, enum.Enum):
    exact = "Exact"
    over = "Over"
    short = "Short"


class RefillStep(str, enum.Enum):
    prep = "prep"
    offload = "offload"
    review = "review"
    saved = "saved"


class RefillDraft(BaseModel):
    """ Lo que el operador va llenando en los tres pasos """
    tankType: Optional[FuelType] = FuelType.petrol
    invoiceNumber: str = ""
    initialDip: float = 0
    expectedDelivery: float = 0
    finalDip: float = 0
    operator: str = ""
    signature: bool = False
    notes: Optional[str] = ""
    photoName: Optional[str] = None


class RefillFigures(BaseModel):
    actualDelivered: float
    variance: float
    variancePercentage: float
    status: RefillStatus


class TankRefill(RefillDraft, RefillFigures):
    """ Documento de la coleccion 'tankRefills' """
    id: Optional[str] = None
    tankType: FuelType
    timestamp: str

    class Config:
        extra = 'ignore'


class RefillStepResponse(BaseModel):
    step: RefillStep
    draft: RefillDraft
    figures: Optional[RefillFigures] = None
    warnings: List[ValidationIssue] = []


class RefillSaveResponse(BaseModel):
    refill: TankRefill
    warnings: List[ValidationIssue] = []
    step: RefillStep = RefillStep.prep
    draft: RefillDraft = Field(default_factory=RefillDraft)
