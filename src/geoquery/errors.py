"""
Geometry query exceptions and error codes.

Error code ranges:
- E1xx: insufficient input (too few points for the operation)
- E2xx: degenerate input (coplanar/collinear where more is needed)
- E3xx: singular transforms
- E4xx: numeric instability (predicates disagree beyond tolerance)
- E5xx: invalid input (malformed or non-finite coordinates)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class ErrorCode(Enum):
    """Stable codes for every geometry failure."""
    INSUFFICIENT_INPUT = "E100"
    DEGENERATE_INPUT = "E200"
    SINGULAR_TRANSFORM = "E300"
    NUMERIC_INSTABILITY = "E400"
    INVALID_INPUT = "E500"


@dataclass
class ErrorInfo:
    """Details of a single failure, suitable for logging or retry logic."""
    code: ErrorCode
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def format(self) -> str:
        """Format the failure for display."""
        text = f"error[{self.code.value}]: {self.message}"
        if self.details:
            extra = ", ".join(f"{k}={v!r}" for k, v in sorted(self.details.items()))
            text += f" ({extra})"
        return text

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "code": self.code.value,
            "kind": self.code.name,
            "message": self.message,
            "details": {k: _jsonable(v) for k, v in self.details.items()},
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return str(value)


class GeometryError(Exception):
    """Base exception for geometry query errors."""

    code = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, **details: Any):
        self.info = ErrorInfo(self.code, message, dict(details))
        super().__init__(message)

    @property
    def message(self) -> str:
        return self.info.message

    @property
    def details(self) -> Dict[str, Any]:
        return self.info.details

    def to_json(self) -> dict:
        return self.info.to_json()

    def __str__(self) -> str:
        return self.info.format()


class InsufficientInput(GeometryError):
    """Too few points for the requested operation (E1xx)."""
    code = ErrorCode.INSUFFICIENT_INPUT


class DegenerateInput(GeometryError):
    """Point set lacks the dimension the operation needs (E2xx)."""
    code = ErrorCode.DEGENERATE_INPUT


class SingularTransform(GeometryError):
    """Affine map whose linear part cannot be inverted (E3xx)."""
    code = ErrorCode.SINGULAR_TRANSFORM


class NumericInstability(GeometryError):
    """Internal predicates disagree beyond tolerance (E4xx)."""
    code = ErrorCode.NUMERIC_INSTABILITY


class InvalidInput(GeometryError):
    """Malformed or non-finite coordinates (E5xx)."""
    code = ErrorCode.INVALID_INPUT


# --- constructors for the common cases ---

def error_too_few_points(operation: str, required: int, got: int) -> InsufficientInput:
    """E100: fewer points than ``operation`` needs."""
    return InsufficientInput(
        f"{operation} needs at least {required} point(s), got {got}",
        operation=operation,
        required=required,
        got=got,
    )


def error_not_spanning(operation: str, rank: int) -> DegenerateInput:
    """E200: points do not affinely span 3D space."""
    shape = {0: "coincident", 1: "collinear", 2: "coplanar"}.get(rank, "degenerate")
    return DegenerateInput(
        f"{operation} needs non-coplanar points, input is {shape}",
        operation=operation,
        rank=rank,
    )


def error_singular(determinant: float, tol: float) -> SingularTransform:
    """E300: determinant of the linear part is within ``tol`` of zero."""
    return SingularTransform(
        f"affine map is not invertible (det={determinant:g})",
        determinant=determinant,
        tolerance=tol,
    )


__all__ = [
    'ErrorCode',
    'ErrorInfo',
    'GeometryError',
    'InsufficientInput',
    'DegenerateInput',
    'SingularTransform',
    'NumericInstability',
    'InvalidInput',
    'error_too_few_points',
    'error_not_spanning',
    'error_singular',
]
