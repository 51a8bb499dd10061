"""
Models for curtailment schedules, savings and risk analysis.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .price_models import PriceBucket


class ShutdownEvent(BaseModel):
    """A contiguous block of curtailed hours."""
    model_config = ConfigDict(frozen=True)

    date: date
    start_hour: int
    datetime: datetime  # start of the block
    duration_hours: int
    price: float  # average energy price over the block, $/MWh
    peak_price: float
    baseline_price: float
    energy_savings: float  # avoided energy cost for a 1 MW load
    all_in_savings: float  # avoided energy + transmission cost
    operational_cost: float = 0.0


class MonteCarloSummary(BaseModel):
    """Distribution of simulated savings for a fixed schedule."""
    iterations: int
    expected_value: float
    std_dev: float
    percentile_5: float
    percentile_95: float
    min_value: float
    max_value: float
    probability_of_profit: float


class CostRiskResult(BaseModel):
    """Net savings of a schedule after costs and risk adjustments."""
    gross_savings: float
    gross_all_in_savings: float
    operational_costs: float
    transmission_cost_variation: float
    risk_adjustment: float
    volatility_adjustment: float
    net_savings: float
    net_all_in_savings: float
    new_average_price: float
    confidence_level: float
    projected_roi: float
    monte_carlo: Optional[MonteCarloSummary] = None


class ScheduleResult(BaseModel):
    """Output of the constrained shutdown scheduler."""
    events: List[ShutdownEvent]
    total_shutdown_hours: int
    max_shutdown_hours: int
    violations: List[str]


class AnalysisResult(BaseModel):
    """Model for a complete curtailment analysis."""
    strategy: str
    target_uptime_percent: Optional[float] = None
    strike_price: Optional[float] = None
    total_hours: int
    allowed_downtime_hours: int
    total_shutdown_hours: int
    downtime_percentage: float
    total_savings: float
    total_all_in_savings: float
    average_savings: float
    original_average: float
    new_average_price: float
    original_all_in_average: float
    new_all_in_average: float
    transmission_adder: float
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    uses_synthetic_data: bool = False
    events: List[ShutdownEvent] = []
    price_distribution: List[PriceBucket] = []
    violations: List[str] = []
    risk: Optional[CostRiskResult] = None


class ScenarioResult(BaseModel):
    """One uptime target in a side-by-side comparison."""
    uptime_percentage: float
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None


class ThresholdSweepRow(BaseModel):
    """Operating profile when running only below a strike price."""
    threshold: float
    operating_hours: int
    percent_time_operating: float
    average_operating_cost: float


class PriceInput(BaseModel):
    """Caller-supplied hourly observation."""
    datetime: datetime
    price: Optional[float] = None


class AnalysisRequest(BaseModel):
    """Request body for analysing a caller-supplied price series."""
    prices: List[PriceInput] = Field(min_length=1)
    target_uptime_percent: float = 95.0
    strategy: str = "deterministic"
    transmission_adder: Optional[float] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    monte_carlo_seed: Optional[int] = None
