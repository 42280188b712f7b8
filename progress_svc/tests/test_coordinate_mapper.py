"""
Unit tests for CoordinateMapper and Viewport geometry.

Default viewport: 500x300 with margins 20/50/40/50, so the plot area spans
x 50..450 and y 20..260.
"""
import pytest

from progress_svc.core.exceptions import InvalidViewportError
from progress_svc.services.chart.coordinate_mapper import CoordinateMapper
from progress_svc.services.chart.models import ValueDomain, Viewport


class TestViewport:

    def test_defaults(self):
        vp = Viewport()
        assert vp.plot_width == 400
        assert vp.plot_height == 240
        assert vp.plot_right == 450
        assert vp.plot_bottom == 260

    def test_margins_leaving_no_plot_area_are_rejected(self):
        with pytest.raises(InvalidViewportError):
            Viewport(width=100)
        with pytest.raises(InvalidViewportError):
            Viewport(height=60)

    def test_invalid_viewport_maps_to_400(self):
        with pytest.raises(InvalidViewportError) as exc_info:
            Viewport(width=90, margin_left=50, margin_right=50)
        assert exc_info.value.status_code == 400
        assert exc_info.value.context["plot_width"] == -10


class TestX:

    def test_first_and_last_record_hit_the_margins(self):
        mapper = CoordinateMapper(Viewport(), record_count=5)
        assert mapper.x(0) == 50
        assert mapper.x(4) == 450

    def test_even_spacing_by_index(self):
        mapper = CoordinateMapper(Viewport(), record_count=3)
        assert [mapper.x(i) for i in range(3)] == [50, 250, 450]

    def test_single_record_sits_on_left_margin(self):
        mapper = CoordinateMapper(Viewport(), record_count=1)
        assert mapper.x(0) == 50

    def test_monotonic(self):
        mapper = CoordinateMapper(Viewport(), record_count=30)
        xs = [mapper.x(i) for i in range(30)]
        assert xs == sorted(xs)


class TestY:

    def test_domain_ends_hit_plot_edges(self):
        mapper = CoordinateMapper(Viewport(), record_count=2)
        domain = ValueDomain(63, 77)
        assert mapper.y(63, domain) == 260
        assert mapper.y(77, domain) == 20
        assert mapper.y(70, domain) == 140

    def test_larger_values_are_higher(self):
        mapper = CoordinateMapper(Viewport(), record_count=2)
        domain = ValueDomain(0, 1000)
        ys = [mapper.y(v, domain) for v in (0, 100, 500, 999, 1000)]
        assert ys == sorted(ys, reverse=True)


class TestIndexAt:

    def test_margins_map_to_first_and_last(self):
        mapper = CoordinateMapper(Viewport(), record_count=3)
        assert mapper.index_at(50) == 0
        assert mapper.index_at(450) == 2

    def test_rounds_half_up(self):
        mapper = CoordinateMapper(Viewport(), record_count=3)
        assert mapper.index_at(149) == 0
        assert mapper.index_at(150) == 1
        assert mapper.index_at(349) == 1
        assert mapper.index_at(350) == 2

    def test_clamps_outside_plot(self):
        mapper = CoordinateMapper(Viewport(), record_count=3)
        assert mapper.index_at(-1000) == 0
        assert mapper.index_at(0) == 0
        assert mapper.index_at(10_000) == 2

    def test_infinite_pointer_clamps(self):
        mapper = CoordinateMapper(Viewport(), record_count=3)
        assert mapper.index_at(float("inf")) == 2
        assert mapper.index_at(float("-inf")) == 0

    def test_huge_pointer_with_many_records(self):
        mapper = CoordinateMapper(Viewport(), record_count=1000)
        assert mapper.index_at(1e308) == 999
        assert mapper.index_at(-1e308) == 0

    def test_nan_pointer_is_rejected(self):
        mapper = CoordinateMapper(Viewport(), record_count=3)
        with pytest.raises(ValueError):
            mapper.index_at(float("nan"))

    def test_single_record(self):
        mapper = CoordinateMapper(Viewport(), record_count=1)
        assert mapper.index_at(0) == 0
        assert mapper.index_at(450) == 0

    def test_monotonic_in_pointer_x(self):
        mapper = CoordinateMapper(Viewport(), record_count=17)
        indices = [mapper.index_at(px) for px in range(0, 501, 5)]
        assert indices == sorted(indices)
        assert indices[0] == 0
        assert indices[-1] == 16

    def test_inverts_x(self):
        mapper = CoordinateMapper(Viewport(), record_count=9)
        for i in range(9):
            assert mapper.index_at(mapper.x(i)) == i

    def test_no_records(self):
        mapper = CoordinateMapper(Viewport(), record_count=0)
        with pytest.raises(ValueError):
            mapper.index_at(100)
