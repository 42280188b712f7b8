"""
Value domains for the chart's metric groups.

Several metrics share one plot area but not one scale: weight, calories
(intake and target pooled) and a shared group (BMI, sleep, fasting, water
pooled) each get their own vertical domain. A domain is always padded and
never narrower than the group's minimum spread, so a flat or single-sample
series still renders in the middle of the plot instead of collapsing.
"""

import logging
import math
from typing import Dict, Iterable, List, Sequence, Tuple

from progress_svc.core.metric_registry import (
    DomainGroupDefinition,
    list_domain_groups,
    metrics_for_group,
)
from progress_svc.services.chart.models import ChartRecord, ValueDomain

logger = logging.getLogger(__name__)

TICK_COUNT = 5


def compute_domain(values: Sequence[float], padding: float, min_spread: float) -> ValueDomain:
    """
    Compute a padded domain with an enforced minimum spread.

    - No values: ``[0, min_spread]``
    - Spread below ``min_spread``: recentred on the midpoint with spread
      exactly ``min_spread``
    - Finally both ends are expanded by ``padding``

    Raises:
        ValueError: If ``min_spread`` is not positive or ``padding`` is negative
    """
    if min_spread <= 0:
        raise ValueError(f"min_spread must be positive, got {min_spread}")
    if padding < 0:
        raise ValueError(f"padding must not be negative, got {padding}")

    if not values:
        return ValueDomain(min=0, max=min_spread)

    low = min(values)
    high = max(values)
    if high - low < min_spread:
        mid = (low + high) / 2
        low = mid - min_spread / 2
        high = mid + min_spread / 2

    return ValueDomain(min=low - padding, max=high + padding)


def group_values(records: Iterable[ChartRecord], group: DomainGroupDefinition) -> List[float]:
    """All present values of every field in the group, pooled."""
    group_fields = [metric.field for metric in metrics_for_group(group.name)]
    values: List[float] = []
    for record in records:
        for field_name in group_fields:
            value = record.value(field_name)
            if value is not None:
                values.append(value)
    return values


def compute_chart_domains(records: Sequence[ChartRecord]) -> Dict[str, ValueDomain]:
    """Domain of every registered metric group for the given records."""
    domains: Dict[str, ValueDomain] = {}
    for group in list_domain_groups():
        values = group_values(records, group)
        domains[group.name] = compute_domain(values, group.padding, group.min_spread)
        logger.debug(
            "Computed domain",
            extra={
                'group': group.name,
                'samples': len(values),
                'min': domains[group.name].min,
                'max': domains[group.name].max,
            }
        )
    return domains


def tick_values(domain: ValueDomain, count: int = TICK_COUNT) -> Tuple[float, ...]:
    """Evenly spaced tick values from ``domain.min`` to ``domain.max`` inclusive."""
    if count < 2:
        raise ValueError(f"count must be at least 2, got {count}")
    step = domain.span / (count - 1)
    return tuple(domain.min + i * step for i in range(count))


def format_tick(value: float, decimals: int) -> str:
    """Tick label with a fixed number of decimals."""
    if decimals <= 0:
        return str(math.floor(value + 0.5))
    return f"{value:.{decimals}f}"
