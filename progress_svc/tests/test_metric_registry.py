"""
Unit tests for the chart metric registry.

Tests cover:
- Loading metrics.yaml: field order, groups, styling
- Lookups by field, source log and domain group
- Validation of malformed YAML entries
- format_metric_value
"""
import pytest

from progress_svc.core.metric_registry import (
    _parse_domain_group,
    _parse_metric,
    format_metric_value,
    get_domain_group,
    get_metric,
    list_domain_groups,
    list_metrics,
    metrics_for_group,
    metrics_for_source,
)
from progress_svc.schemas.entries import ENTRY_MODELS
from progress_svc.services.chart.models import CHART_FIELDS


class TestRegistryContents:

    def test_metrics_in_tooltip_order(self):
        assert [m.field for m in list_metrics()] == [
            "weight", "bmi", "sleep", "fasting_duration", "water", "intake", "target",
        ]

    def test_every_chart_field_is_registered(self):
        assert sorted(m.field for m in list_metrics()) == sorted(CHART_FIELDS)

    def test_source_fields_exist_on_entry_models(self):
        for metric in list_metrics():
            model = ENTRY_MODELS[metric.source]
            assert metric.source_field in model.model_fields

    def test_only_target_is_dashed(self):
        assert [m.field for m in list_metrics() if m.dashed] == ["target"]

    def test_domain_groups(self):
        groups = {g.name: g for g in list_domain_groups()}
        assert set(groups) == {"weight", "calorie", "shared"}
        assert (groups["weight"].padding, groups["weight"].min_spread) == (2, 10)
        assert (groups["calorie"].padding, groups["calorie"].min_spread) == (200, 1000)
        assert (groups["shared"].padding, groups["shared"].min_spread) == (2, 10)
        assert groups["calorie"].tick_decimals == 0


class TestLookups:

    def test_get_metric(self):
        weight = get_metric("weight")
        assert weight.unit == "kg"
        assert weight.domain_group == "weight"
        assert weight.color == "#F97316"

    def test_get_metric_unknown(self):
        with pytest.raises(KeyError):
            get_metric("steps")

    def test_metrics_for_source(self):
        assert [m.field for m in metrics_for_source("daily_intake")] == ["intake", "target"]
        assert [m.field for m in metrics_for_source("progress")] == ["weight", "bmi"]
        assert metrics_for_source("unknown") == ()

    def test_metrics_for_group(self):
        assert [m.field for m in metrics_for_group("shared")] == [
            "bmi", "sleep", "fasting_duration", "water",
        ]

    def test_get_domain_group_unknown(self):
        with pytest.raises(KeyError):
            get_domain_group("steps")


class TestValidation:

    def _metric(self, **overrides):
        raw = {
            "field": "weight",
            "color": "#F97316",
            "source": "progress",
            "source_field": "weight",
            "domain_group": "weight",
        }
        raw.update(overrides)
        return raw

    def test_valid_metric_defaults(self):
        metric = _parse_metric(self._metric(), 0, ("weight",))
        assert metric.display_name == "Weight"
        assert metric.unit == ""
        assert metric.dashed is False

    def test_invalid_color(self):
        with pytest.raises(ValueError, match="invalid color"):
            _parse_metric(self._metric(color="orange"), 0, ("weight",))

    def test_unknown_group(self):
        with pytest.raises(ValueError, match="unknown domain group"):
            _parse_metric(self._metric(domain_group="mass"), 0, ("weight",))

    def test_missing_field(self):
        raw = self._metric()
        del raw["source_field"]
        with pytest.raises(ValueError, match="source_field"):
            _parse_metric(raw, 3, ("weight",))

    def test_group_rejects_non_positive_spread(self):
        with pytest.raises(ValueError):
            _parse_domain_group({"name": "weight", "padding": 2, "min_spread": 0}, 0)

    def test_group_rejects_bad_side(self):
        with pytest.raises(ValueError):
            _parse_domain_group({"name": "weight", "padding": 2, "min_spread": 10, "side": "top"}, 0)


class TestFormatMetricValue:

    def test_whole_numbers_drop_decimals(self):
        assert format_metric_value(80.0) == "80"
        assert format_metric_value(1850) == "1850"
        assert format_metric_value(0) == "0"

    def test_fractions_keep_significant_decimals(self):
        assert format_metric_value(26.1) == "26.1"
        assert format_metric_value(7.25) == "7.25"
        assert format_metric_value(79.40) == "79.4"
