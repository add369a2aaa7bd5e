"""
PortOpt: Savings Plan Portfolio Optimizer

Suggests an instrument allocation for a risk tolerance and projects the
growth of a monthly savings plan towards a wealth target.

Modules
-------
- instruments  : Instrument reference table (static statistics)
- allocation   : Current-mix mapping and risk-bucket allocations
- metrics      : Portfolio metrics aggregation and crisis stress test
- projection   : Student-t shocked year-by-year projection
- optimizer    : Request → result pipeline
- config       : Pydantic request models and application settings
- serialization: JSON request/result conversion
- plotting     : Projection charts
- cli          : Command-line interface

"""

from .allocation import map_current_mix_to_instruments, recommend_allocation
from .config import AllocationInput, AssetMix
from .instruments import DEFAULT_TABLE, Instrument, InstrumentTable
from .metrics import MetricsSummary, StressTestResult, aggregate, stress_test
from .optimizer import OptimizationResult, optimize_portfolio
from .projection import ProjectionPoint, project
from . import utils
