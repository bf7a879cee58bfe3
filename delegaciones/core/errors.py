# delegaciones/core/errors.py
from __future__ import annotations
from typing import Any, List, Literal
from pydantic import BaseModel

IssueCode = Literal[
    "InvalidInstance",
    "TooShort",
    "MissingDate",
    "InvalidDate",
    "DateOrderViolation",
    "InvalidEnum",
]


class ValidationIssue(BaseModel):
    field: str
    code: IssueCode
    message: str


class DelegationError(Exception):
    """Base de los errores recuperables del núcleo de delegaciones."""

    code = "DelegationError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(DelegationError):
    code = "NotFound"

    def __init__(self, kind: str, ident: Any):
        super().__init__(f"{kind} {ident} no encontrada")
        self.kind = kind
        self.ident = ident


class UnknownStatus(DelegationError):
    code = "UnknownStatus"

    def __init__(self, value: Any):
        super().__init__(f"Estado desconocido: {value!r}")
        self.value = value


class DateOrderViolation(DelegationError):
    code = "DateOrderViolation"

    def __init__(self, message: str = "Fecha de vencimiento no puede ser anterior a la de designación"):
        super().__init__(message)


class ValidationFailed(DelegationError):
    """Agrupa todos los problemas de una solicitud candidata (pueden coexistir varios)."""

    code = "ValidationError"

    def __init__(self, issues: List[ValidationIssue]):
        super().__init__("; ".join(f"{i.field}: {i.message}" for i in issues) or "Solicitud inválida")
        self.issues = list(issues)

    def codes_for(self, field: str) -> List[str]:
        return [i.code for i in self.issues if i.field == field]
