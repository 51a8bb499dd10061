"""
Scenario runner: the deterministic optimizer over a list of uptime targets.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import List, Optional, Sequence

import pandas as pd

from ..config import AnalysisConfig
from ..exceptions import ComputationInvariantError
from ..models import ScenarioResult
from .normalizer import PriceRecords, normalize_price_series
from .uptime_optimizer import optimize_uptime, validate_uptime_target

logger = logging.getLogger(__name__)


def _run_single(
    records: PriceRecords,
    target: float,
    config: AnalysisConfig,
    start: Optional[datetime],
    end: Optional[datetime]
) -> ScenarioResult:
    """Filter the shared records and optimize for one target."""
    series = normalize_price_series(records, start, end)
    try:
        result = optimize_uptime(series, target, config)
    except ComputationInvariantError as e:
        logger.warning(f"⚠️  Scenario {target}% produced no result: {e.message}")
        return ScenarioResult(uptime_percentage=target, error=e.message)
    return ScenarioResult(uptime_percentage=target, result=result)


def run_scenarios(
    records: PriceRecords,
    targets: Optional[Sequence[float]] = None,
    config: Optional[AnalysisConfig] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> List[ScenarioResult]:
    """
    Optimize the same price records for several uptime targets.

    Every target is validated before any run starts. Each run filters the
    shared, read-only records to the same window on its own, so runs can be
    spread over ``config.scenario_workers`` threads. A run whose result fails
    the improvement check is reported with ``result=None`` and an error.

    Returns:
        List[ScenarioResult]: One entry per target, in the order given
    """
    config = config or AnalysisConfig()
    targets = [validate_uptime_target(t) for t in (targets or config.scenario_targets)]

    if not isinstance(records, (pd.DataFrame, list, tuple)):
        # Generators can only be consumed once
        records = list(records)

    logger.info(f"Running {len(targets)} uptime scenarios: {targets}")

    if config.scenario_workers > 1 and len(targets) > 1:
        with ThreadPoolExecutor(max_workers=config.scenario_workers) as executor:
            futures = [
                executor.submit(_run_single, records, target, config, start, end)
                for target in targets
            ]
            return [future.result() for future in futures]

    return [_run_single(records, target, config, start, end) for target in targets]
