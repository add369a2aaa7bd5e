"""
Serialization module for PortOpt requests and results.

Purpose
-------
Provides JSON conversion for optimization requests (read from request files
by the CLI) and optimization results (exported for charting or other
presentation layers). Nothing here stores user state between runs.

Design Principles
-----------------
- Type-safe: Requests are validated through the Pydantic models in config.py
- Human-readable: Indented JSON for easy editing
- Versioned: Every payload carries SCHEMA_VERSION

Example
-------
>>> from pathlib import Path
>>> from portopt.serialization import load_request, save_result
>>> request = load_request(Path("request.json"))
>>> result = optimize_portfolio(request, seed=42)
>>> save_result(result, Path("result.json"))
"""

from __future__ import annotations
from typing import Any, Dict, TYPE_CHECKING
from pathlib import Path
import json

from .config import AllocationInput
from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .optimizer import OptimizationResult
    from .types import OptimizationResultDict

__all__ = [
    "SCHEMA_VERSION",
    "request_to_dict",
    "request_from_dict",
    "load_request",
    "save_request",
    "result_to_dict",
    "save_result",
]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "0.1.0"


def _check_schema_version(data: Dict[str, Any]) -> None:
    version = data.get("schema_version", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise ConfigurationError(
            f"Unsupported schema_version {version!r} (expected {SCHEMA_VERSION!r})"
        )


# ---------------------------------------------------------------------------
# Request Serialization
# ---------------------------------------------------------------------------

def request_to_dict(request: AllocationInput) -> Dict[str, Any]:
    """
    Convert AllocationInput to a dictionary with a schema version.

    Parameters
    ----------
    request : AllocationInput
        Request to serialize

    Returns
    -------
    dict
        JSON-compatible request payload
    """
    return {"schema_version": SCHEMA_VERSION, **request.model_dump()}


def request_from_dict(data: Dict[str, Any]) -> AllocationInput:
    """
    Create AllocationInput from a dictionary.

    Raises
    ------
    ConfigurationError
        Unsupported schema version.
    pydantic.ValidationError
        Invalid request fields (mix not summing to 100, ranges, ...).
    """
    _check_schema_version(data)
    payload = {k: v for k, v in data.items() if k != "schema_version"}
    return AllocationInput.model_validate(payload)


def load_request(path: Path) -> AllocationInput:
    """
    Load and validate a request from a JSON file.

    Raises
    ------
    ConfigurationError
        File is not valid JSON or not a JSON object.
    pydantic.ValidationError
        Request fields fail validation.
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    return request_from_dict(data)


def save_request(request: AllocationInput, path: Path) -> None:
    """Write a request to a JSON file (parent directories are created)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(request_to_dict(request), f, indent=2)


# ---------------------------------------------------------------------------
# Result Serialization
# ---------------------------------------------------------------------------

def result_to_dict(result: OptimizationResult) -> OptimizationResultDict:
    """
    Convert OptimizationResult to a JSON-compatible dictionary.

    Undefined recovery times are exported as null.
    """
    return {
        "schema_version": SCHEMA_VERSION,
        "request": result.request.model_dump(),
        "target_value": result.target_value,
        "current_weights": dict(result.current_weights),
        "optimized_weights": dict(result.optimized_weights),
        "current_metrics": result.current_metrics.to_dict(),
        "optimized_metrics": result.optimized_metrics.to_dict(),
        "current_stress": result.current_stress.to_dict(),
        "optimized_stress": result.optimized_stress.to_dict(),
        "current_projection": [p.to_dict() for p in result.current_projection],
        "optimized_projection": [p.to_dict() for p in result.optimized_projection],
    }


def save_result(result: OptimizationResult, path: Path) -> None:
    """Write a result to a JSON file (parent directories are created)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(result_to_dict(result), f, indent=2)

