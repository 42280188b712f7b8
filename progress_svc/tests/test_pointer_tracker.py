"""
Tests for pointer lookup and tooltip content.
"""
from progress_svc.services.chart.aggregator import merge_chart_records
from progress_svc.services.chart.coordinate_mapper import CoordinateMapper
from progress_svc.services.chart.domain_calculator import compute_chart_domains
from progress_svc.services.chart.models import ChartRecord, Viewport
from progress_svc.services.chart.pointer_tracker import build_tooltip, format_day, locate_record


def _locate(records, pointer_x, viewport=None):
    viewport = viewport or Viewport()
    mapper = CoordinateMapper(viewport, len(records))
    domains = compute_chart_domains(records)
    return locate_record(pointer_x, records, mapper, domains["weight"])


class TestLocateRecord:
    """Tests for locate_record function."""

    def test_no_records(self):
        assert _locate((), 250) is None

    def test_left_margin_selects_first_record(self, scenario_sources):
        records = merge_chart_records(scenario_sources)
        hit = _locate(records, 50)
        assert hit.index == 0
        assert hit.record.date == "2024-01-01"

    def test_right_margin_selects_last_record(self, scenario_sources):
        records = merge_chart_records(scenario_sources)
        hit = _locate(records, 450)
        assert hit.index == 2
        assert hit.record.date == "2024-01-08"

    def test_out_of_range_pointer_clamps(self, scenario_sources):
        records = merge_chart_records(scenario_sources)
        assert _locate(records, -500).index == 0
        assert _locate(records, 5000).index == 2

    def test_anchor_on_weight_point(self):
        records = (ChartRecord(date="2024-01-01", weight=70),)
        hit = _locate(records, 300)
        # weight domain [63, 77]; 70 sits in the vertical middle of the plot
        assert hit.anchor.x == 50
        assert hit.anchor.y == 140

    def test_anchor_without_weight_uses_viewport_centre(self, scenario_sources):
        records = merge_chart_records(scenario_sources)
        hit = _locate(records, 250)
        assert hit.record.weight is None
        assert hit.anchor.x == 250
        assert hit.anchor.y == 150

    def test_each_query_is_independent(self, scenario_sources):
        records = merge_chart_records(scenario_sources)
        first = _locate(records, 450)
        _locate(records, 50)
        assert _locate(records, 450) == first


class TestTooltip:
    """Tests for build_tooltip and format_day."""

    def test_format_day(self):
        assert format_day("2024-01-01") == "1 Jan"
        assert format_day("2024-01-01", weekday=True) == "Mon 1 Jan"
        assert format_day("2024-12-25", weekday=True) == "Wed 25 Dec"

    def test_lines_follow_registry_order_and_skip_absent(self):
        record = ChartRecord(date="2024-01-01", weight=80, bmi=26.1, sleep=7, intake=1850, target=1800)
        tooltip = build_tooltip(record)

        assert tooltip.title == "Mon 1 Jan"
        assert [(line.label, line.value) for line in tooltip.lines] == [
            ("Weight", "80 kg"),
            ("BMI", "26.1"),
            ("Sleep", "7 hrs"),
            ("Intake", "1850 kcal"),
            ("Target", "1800 kcal"),
        ]

    def test_line_colors_match_series(self):
        record = ChartRecord(date="2024-01-02", water=8, fasting_duration=16.5)
        tooltip = build_tooltip(record)
        assert [(line.label, line.value, line.color) for line in tooltip.lines] == [
            ("Fasting", "16.5 hrs", "#A855F7"),
            ("Water", "8 glasses", "#3B82F6"),
        ]

    def test_logged_zero_is_shown(self):
        tooltip = build_tooltip(ChartRecord(date="2024-01-02", water=0))
        assert [line.value for line in tooltip.lines] == ["0 glasses"]
