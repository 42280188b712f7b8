"""
Central chart metric registry - single source of truth for chart metric definitions.

This module provides:
- YAML-based configuration loading and validation
- ChartMetricDefinition / DomainGroupDefinition dataclasses
- Read-only lookup by ChartRecord field, by source log and by domain group

All chart series styling, the source-to-field mapping used by the aggregator
and the per-group domain constants derive from metrics.yaml. YAML access is
encapsulated here - no other module should read metrics.yaml directly.

Usage:
    from progress_svc.core.metric_registry import get_metric, get_domain_group

    weight = get_metric("weight")
    group = get_domain_group(weight.domain_group)   # padding=2, min_spread=10
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r'^#[0-9A-Fa-f]{6}$')


# =============================================================================
# DEFINITION DATACLASSES
# =============================================================================

@dataclass(frozen=True)
class DomainGroupDefinition:
    """
    A set of fields sharing one vertical scale.

    Attributes:
        name: Group identifier (weight, calorie, shared)
        display_name: Axis title
        padding: Amount added below the minimum and above the maximum
        min_spread: Smallest allowed max - min before padding
        tick_decimals: Decimal places for axis tick labels
        side: Axis side for tick labels ("left" or "right")
    """
    name: str
    display_name: str
    padding: float
    min_spread: float
    tick_decimals: int
    side: str


@dataclass(frozen=True)
class ChartMetricDefinition:
    """
    Immutable definition for one chart series.

    Attributes:
        field: ChartRecord attribute holding the value
        display_name: Legend and tooltip label
        color: Hex color code for the series
        unit: Tooltip unit suffix (may be empty)
        source: Metric log key the value comes from
        source_field: Attribute of the source entry model
        domain_group: Name of the DomainGroupDefinition scaling this field
        dashed: Whether the polyline is drawn dashed
    """
    field: str
    display_name: str
    color: str
    unit: str
    source: str
    source_field: str
    domain_group: str
    dashed: bool = False


# =============================================================================
# YAML CONFIGURATION LOADING & VALIDATION
# =============================================================================

def _get_config_path() -> Path:
    """Get the path to the metrics configuration file."""
    return Path(__file__).parent / 'metrics.yaml'


def _load_yaml_config() -> Dict[str, Any]:
    """
    Load and parse the YAML configuration file.

    Raises:
        FileNotFoundError: If metrics.yaml is not found
        yaml.YAMLError: If YAML parsing fails
    """
    config_path = _get_config_path()
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        logger.error("Metrics config file not found", extra={'path': str(config_path)})
        raise
    except yaml.YAMLError as e:
        logger.error("Failed to parse metrics config", extra={'path': str(config_path), 'error': str(e)})
        raise


def _parse_domain_group(raw: Dict[str, Any], index: int) -> DomainGroupDefinition:
    """
    Validate and parse a single domain group entry.

    Raises:
        ValueError: If required fields are missing or out of range
    """
    for required in ('name', 'padding', 'min_spread'):
        if required not in raw:
            raise ValueError(f"Domain group at index {index} is missing required field: '{required}'")

    padding = float(raw['padding'])
    min_spread = float(raw['min_spread'])
    if padding < 0:
        raise ValueError(f"Domain group '{raw['name']}' has negative padding")
    if min_spread <= 0:
        raise ValueError(f"Domain group '{raw['name']}' must have a positive min_spread")

    side = raw.get('side', 'left')
    if side not in ('left', 'right'):
        raise ValueError(f"Domain group '{raw['name']}' has invalid side: '{side}'")

    return DomainGroupDefinition(
        name=raw['name'],
        display_name=raw.get('display_name', raw['name'].title()),
        padding=padding,
        min_spread=min_spread,
        tick_decimals=int(raw.get('tick_decimals', 1)),
        side=side,
    )


def _parse_metric(raw: Dict[str, Any], index: int, group_names: Tuple[str, ...]) -> ChartMetricDefinition:
    """
    Validate and parse a single metric entry.

    Raises:
        ValueError: If required fields are missing or invalid
    """
    for required in ('field', 'color', 'source', 'source_field', 'domain_group'):
        if required not in raw:
            raise ValueError(f"Metric at index {index} is missing required field: '{required}'")

    color = raw['color']
    if not _HEX_COLOR.match(color):
        raise ValueError(f"Metric '{raw['field']}' has invalid color format: '{color}'")

    if raw['domain_group'] not in group_names:
        raise ValueError(f"Metric '{raw['field']}' references unknown domain group '{raw['domain_group']}'")

    return ChartMetricDefinition(
        field=raw['field'],
        display_name=raw.get('display_name', raw['field'].replace('_', ' ').title()),
        color=color,
        unit=raw.get('unit') or '',
        source=raw['source'],
        source_field=raw['source_field'],
        domain_group=raw['domain_group'],
        dashed=bool(raw.get('dashed', False)),
    )


@lru_cache(maxsize=1)
def _load_registry() -> Tuple[Tuple[ChartMetricDefinition, ...], Tuple[DomainGroupDefinition, ...]]:
    """
    Load and cache the complete registry from YAML.

    Cached so the YAML file is read exactly once per process.
    """
    config = _load_yaml_config()

    groups = tuple(
        _parse_domain_group(raw, i)
        for i, raw in enumerate(config.get('domain_groups', []))
    )
    group_names = tuple(g.name for g in groups)

    metrics: List[ChartMetricDefinition] = []
    seen_fields = set()
    for i, raw in enumerate(config.get('metrics', [])):
        metric = _parse_metric(raw, i, group_names)
        if metric.field in seen_fields:
            raise ValueError(f"Duplicate metric field: '{metric.field}'")
        seen_fields.add(metric.field)
        metrics.append(metric)

    logger.debug(
        "Metric registry loaded",
        extra={'metrics': len(metrics), 'domain_groups': len(groups)}
    )
    return tuple(metrics), groups


# =============================================================================
# PUBLIC API
# =============================================================================

def list_metrics() -> Tuple[ChartMetricDefinition, ...]:
    """All chart metrics in tooltip order."""
    metrics, _ = _load_registry()
    return metrics


def get_metric(field: str) -> ChartMetricDefinition:
    """
    Get a metric definition by ChartRecord field name.

    Raises:
        KeyError: If the field is not in the registry
    """
    for metric in list_metrics():
        if metric.field == field:
            return metric
    raise KeyError(f"Unknown chart metric: '{field}'")


def metrics_for_source(source: str) -> Tuple[ChartMetricDefinition, ...]:
    """Metrics whose values are read from the given metric log."""
    return tuple(m for m in list_metrics() if m.source == source)


def metrics_for_group(group_name: str) -> Tuple[ChartMetricDefinition, ...]:
    """Metrics scaled against the given domain group."""
    return tuple(m for m in list_metrics() if m.domain_group == group_name)


def list_domain_groups() -> Tuple[DomainGroupDefinition, ...]:
    """All domain groups in axis order."""
    _, groups = _load_registry()
    return groups


def get_domain_group(name: str) -> DomainGroupDefinition:
    """
    Get a domain group by name.

    Raises:
        KeyError: If the group is not in the registry
    """
    for group in list_domain_groups():
        if group.name == name:
            return group
    raise KeyError(f"Unknown domain group: '{name}'")


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_metric_value(value: float) -> str:
    """Format a raw value the way it was logged: 80 -> "80", 26.10 -> "26.1"."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip('0').rstrip('.')
