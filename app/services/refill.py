# app/services/refill.py
"""
Recepcion de combustible en tres pasos: prep -> offload -> review -> saved.

Las varillas de la recepcion ya vienen en litros; la entrega real es
finalDip - initialDip y se compara contra la guia/factura.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from app.schemas.common import IssueKind, ValidationIssue
from app.schemas.refill import RefillDraft, RefillFigures, RefillStatus, RefillStep
from app.services.station import StationConfig


class InvalidRefillStep(Exception):
    """ Transicion pedida desde un paso que no corresponde """

    def __init__(self, current: RefillStep, requested: str):
        super().__init__(f"Cannot {requested} from step '{current.value}'")
        self.current = current
        self.requested = requested


@dataclass
class RefillValidation:
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def refill_status(variance: float) -> RefillStatus:
    if variance == 0:
        return RefillStatus.exact
    return RefillStatus.over if variance > 0 else RefillStatus.short


def refill_figures(draft: RefillDraft) -> RefillFigures:
    actual_delivered = (draft.finalDip or 0) - (draft.initialDip or 0)
    variance = actual_delivered - (draft.expectedDelivery or 0)
    percentage = (variance / draft.expectedDelivery) * 100 if draft.expectedDelivery else 0.0
    return RefillFigures(
        actualDelivered=actual_delivered,
        variance=variance,
        variancePercentage=percentage,
        status=refill_status(variance),
    )


def _missing(detail: str, field_name: str) -> ValidationIssue:
    return ValidationIssue(kind=IssueKind.missing_field, detail=detail, field=field_name)


def _prep_issues(draft: RefillDraft) -> List[ValidationIssue]:
    issues = []
    if not draft.tankType:
        issues.append(_missing("Tank type is required", "tankType"))
    if not draft.invoiceNumber or not draft.invoiceNumber.strip():
        issues.append(_missing("Invoice number is required", "invoiceNumber"))
    if not draft.initialDip:
        issues.append(_missing("Initial dip reading is required", "initialDip"))
    if not draft.expectedDelivery:
        issues.append(_missing("Expected delivery volume is required", "expectedDelivery"))
    return issues


def _offload_issues(draft: RefillDraft) -> List[ValidationIssue]:
    if not draft.finalDip or draft.finalDip <= 0:
        return [_missing("Final dip reading is required", "finalDip")]
    return []


def large_variance_warning(draft: RefillDraft, config: StationConfig) -> Optional[ValidationIssue]:
    """ Aviso (no bloquea): diferencia entregado vs esperado sobre el umbral """
    if not (draft.expectedDelivery and draft.finalDip and draft.initialDip):
        return None
    figures = refill_figures(draft)
    percent_diff = abs(figures.actualDelivered - draft.expectedDelivery) / draft.expectedDelivery * 100
    if percent_diff > config.variance_warning_pct:
        return ValidationIssue(
            kind=IssueKind.large_variance,
            detail=f"Warning: Large variance detected ({percent_diff:.1f}%). Please verify measurements.",
            field="finalDip",
        )
    return None


def validate_refill(draft: RefillDraft, config: StationConfig) -> RefillValidation:
    result = RefillValidation()
    result.errors.extend(_prep_issues(draft))
    result.errors.extend(_offload_issues(draft))
    if not draft.signature:
        result.errors.append(_missing("Please confirm by checking the signature box", "signature"))

    if draft.tankType and draft.finalDip:
        max_volume = config.tank(draft.tankType).max_liters
        if draft.finalDip > max_volume:
            result.errors.append(ValidationIssue(
                kind=IssueKind.capacity_exceeded,
                detail=f"Final dip exceeds tank capacity ({max_volume}L)",
                field="finalDip",
            ))

    warning = large_variance_warning(draft, config)
    if warning:
        result.warnings.append(warning)
    return result


class RefillWorkflow:
    """
    Maquina de estados de una recepcion. Las validaciones se resuelven
    localmente antes de cualquier escritura; si una transicion falla el
    borrador queda intacto y el paso no cambia.
    """

    def __init__(self, config: StationConfig, draft: Optional[RefillDraft] = None,
                 step: RefillStep = RefillStep.prep):
        self.config = config
        self.draft = draft or RefillDraft()
        self.step = step
        self.issues: List[ValidationIssue] = []
        self.warnings: List[ValidationIssue] = []

    def _require(self, step: RefillStep, action: str):
        if self.step != step:
            raise InvalidRefillStep(self.step, action)

    def update(self, **fields) -> RefillDraft:
        self.draft = self.draft.model_copy(update=fields)
        return self.draft

    def lock_prep(self) -> bool:
        self._require(RefillStep.prep, "lock delivery preparation")
        self.issues = _prep_issues(self.draft)
        if self.issues:
            return False
        self.step = RefillStep.offload
        return True

    def complete_offload(self) -> bool:
        self._require(RefillStep.offload, "complete offload")
        self.issues = _offload_issues(self.draft)
        if self.issues:
            return False
        warning = large_variance_warning(self.draft, self.config)
        self.warnings = [warning] if warning else []
        self.step = RefillStep.review
        return True

    def back_to_prep(self):
        self._require(RefillStep.offload, "go back to preparation")
        self.issues = []
        self.step = RefillStep.prep

    def back_to_offload(self):
        self._require(RefillStep.review, "go back to offload")
        self.issues = []
        self.step = RefillStep.offload

    def figures(self) -> RefillFigures:
        return refill_figures(self.draft)

    def confirm(self) -> bool:
        """ Paso review -> saved (si pasa validate_refill). La escritura la hace el llamador. """
        self._require(RefillStep.review, "save")
        validation = validate_refill(self.draft, self.config)
        self.issues = validation.errors
        self.warnings = validation.warnings
        if not validation.ok:
            return False
        self.step = RefillStep.saved
        return True

    def reset(self) -> RefillDraft:
        """ Tras guardar: vuelta a prep con campos limpios (se conserva el operador) """
        self._require(RefillStep.saved, "reset")
        self.draft = RefillDraft(operator=self.draft.operator)
        self.step = RefillStep.prep
        self.issues = []
        return self.draft
