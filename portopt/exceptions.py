"""
Custom exceptions for PortOpt.

Purpose
-------
Provides a unified exception hierarchy for consistent error handling
across all PortOpt modules. All exceptions inherit from PortOptError,
enabling catch-all handling when needed.

Exception Hierarchy
-------------------
PortOptError (base)
├── ConfigurationError - Invalid configuration or parameters
├── ValidationError - Data validation failures
│   └── AllocationSumError - Asset mix percentages not summing to 100
├── UnknownInstrumentError - Symbol missing from the instrument table
├── ContractViolationError - Unknown risk tolerance / target kind reached the engine
└── DegenerateMetricsError - Non-finite portfolio metrics

Usage
-----
>>> from portopt.exceptions import UnknownInstrumentError
>>>
>>> # Raise specific exception
>>> raise UnknownInstrumentError("XYZ")
>>>
>>> # Catch all PortOpt exceptions
>>> try:
...     result = optimize_portfolio(request)
>>> except PortOptError as e:
...     print(f"PortOpt error: {e}")
"""


class PortOptError(Exception):
    """
    Base exception for all PortOpt errors.

    All PortOpt-specific exceptions inherit from this class,
    enabling unified error handling when needed.

    Examples
    --------
    >>> try:
    ...     optimize_portfolio(request)
    ... except PortOptError as e:
    ...     logger.error(f"Optimization failed: {e}")
    """
    pass


class ConfigurationError(PortOptError):
    """
    Invalid configuration or parameters.

    Raised when settings or request files cannot be turned into a valid
    configuration, such as:
    - Unsupported schema version in a request file
    - Malformed JSON payloads
    - Missing required configuration fields
    """
    pass


class ValidationError(PortOptError, ValueError):
    """
    Data validation failures.

    Also a ValueError, so raising it inside a Pydantic validator is reported
    as a regular field error.

    Raised when engine arguments fail validation checks, such as:
    - Negative weights or horizons
    - Negative contributions
    - Out-of-bounds instrument statistics

    Examples
    --------
    >>> raise ValidationError(
    ...     f"horizon_years must be non-negative, got {horizon_years}."
    ... )
    """
    pass


class AllocationSumError(ValidationError):
    """
    Asset mix percentages do not add up to 100.

    Examples
    --------
    >>> raise AllocationSumError(
    ...     f"Allocation must sum to 100%, got {total:.2f}%."
    ... )
    """
    pass


class UnknownInstrumentError(PortOptError, KeyError):
    """
    Symbol not present in the instrument table.

    Weight vectors are built from fixed tables, so an unknown symbol is a
    programming error. The aggregator fails fast instead of counting the
    weight as zero.

    Examples
    --------
    >>> table.get("XYZ")
    Traceback (most recent call last):
    ...
    UnknownInstrumentError: "Unknown instrument symbol 'XYZ'. Known: SWDA, SPY, ..."
    """

    def __init__(self, symbol: str, known=()):
        self.symbol = symbol
        message = f"Unknown instrument symbol {symbol!r}."
        if known:
            message += f" Known: {', '.join(known)}"
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0]


class ContractViolationError(PortOptError):
    """
    A value that input validation should have rejected reached the engine.

    Raised for unknown risk tolerances and target kinds. The engine never
    falls back to a default for these.

    Examples
    --------
    >>> raise ContractViolationError(
    ...     f"Unknown risk tolerance {risk_tolerance!r}. "
    ...     f"Expected one of: low, medium, high."
    ... )
    """
    pass


class DegenerateMetricsError(PortOptError):
    """
    Portfolio metrics are not finite.

    Raised when a projection is requested from metrics containing NaN or
    infinite values.

    Examples
    --------
    >>> raise DegenerateMetricsError(
    ...     f"Cannot project non-finite metrics: {metrics}"
    ... )
    """
    pass
