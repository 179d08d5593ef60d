"""
Tolerance configuration
=======================
Central registry for the numeric tolerances shared by every query.

``epsilon`` is the absolute tolerance used for coincidence, parallelism
and singularity tests.  ``predicate_dps`` is the number of decimal digits
used when an orientation predicate is too close to zero to trust its
floating point sign (see ``geoquery.predicates``).

The initial values come from the environment (``GEOQUERY_EPSILON``,
``GEOQUERY_PREDICATE_DPS``) and can be replaced globally with
``set_tolerance()``, from a YAML file with ``load_config()``, or for one
block of code with ``using_tolerance()``.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterator, Mapping, Optional, Union

import yaml

DEFAULT_EPSILON = 1e-9
DEFAULT_PREDICATE_DPS = 50

ENV_EPSILON = "GEOQUERY_EPSILON"
ENV_PREDICATE_DPS = "GEOQUERY_PREDICATE_DPS"


@dataclass(frozen=True)
class Tolerance:
    """Immutable tolerance settings."""

    epsilon: float = DEFAULT_EPSILON
    predicate_dps: int = DEFAULT_PREDICATE_DPS

    def __post_init__(self) -> None:
        if not (self.epsilon > 0.0):
            raise ValueError(f"epsilon must be positive, got {self.epsilon!r}")
        if self.predicate_dps < 15:
            raise ValueError(f"predicate_dps must be at least 15, got {self.predicate_dps!r}")


def tolerance_from_env(environ: Optional[Mapping[str, str]] = None) -> Tolerance:
    """Build a ``Tolerance`` from environment variables, falling back to defaults."""

    if environ is None:
        environ = os.environ
    epsilon = float(environ.get(ENV_EPSILON, DEFAULT_EPSILON))
    dps = int(environ.get(ENV_PREDICATE_DPS, DEFAULT_PREDICATE_DPS))
    return Tolerance(epsilon=epsilon, predicate_dps=dps)


def load_config(path: Union[str, Path], base: Optional[Tolerance] = None) -> Tolerance:
    """Read ``epsilon``/``predicate_dps`` from a YAML file.

    Keys missing from the file keep the values of ``base`` (the current
    tolerance by default).  Unknown keys are rejected.
    """

    with open(path, "r", encoding="utf-8") as stream:
        data = yaml.safe_load(stream) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")
    unknown = set(data) - {"epsilon", "predicate_dps"}
    if unknown:
        raise ValueError(f"{path}: unknown tolerance keys {sorted(unknown)}")

    tol = base if base is not None else get_tolerance()
    if "epsilon" in data:
        tol = replace(tol, epsilon=float(data["epsilon"]))
    if "predicate_dps" in data:
        tol = replace(tol, predicate_dps=int(data["predicate_dps"]))
    return tol


_DEFAULT = tolerance_from_env()
_current: ContextVar[Tolerance] = ContextVar("geoquery_tolerance", default=_DEFAULT)


def get_tolerance() -> Tolerance:
    """Return the tolerance in effect for the current context."""
    return _current.get()


def set_tolerance(tol: Tolerance) -> None:
    """Replace the tolerance for the current context."""
    if not isinstance(tol, Tolerance):
        raise TypeError("set_tolerance expects a Tolerance")
    _current.set(tol)


@contextmanager
def using_tolerance(**overrides) -> Iterator[Tolerance]:
    """Temporarily override tolerance fields, e.g. ``using_tolerance(epsilon=1e-6)``."""

    tol = replace(get_tolerance(), **overrides)
    token = _current.set(tol)
    try:
        yield tol
    finally:
        _current.reset(token)


def resolve_epsilon(tol: Optional[float] = None) -> float:
    """Return ``tol`` if given, otherwise the configured epsilon."""

    if tol is None:
        return get_tolerance().epsilon
    if not (tol > 0.0):
        raise ValueError(f"tolerance must be positive, got {tol!r}")
    return float(tol)


__all__ = [
    "DEFAULT_EPSILON",
    "DEFAULT_PREDICATE_DPS",
    "Tolerance",
    "tolerance_from_env",
    "load_config",
    "get_tolerance",
    "set_tolerance",
    "using_tolerance",
    "resolve_epsilon",
]
