"""Caster calculator tests.

Strand count (formula 8.2), metallurgical length (8.5), radius (8.7) and
the minimum radius floor (8.9).
"""

import math

import pytest

from metcalc.core.caster_calculator import CasterCalculator, minimum_radius
from metcalc.core.errors import InvalidInput
from metcalc.core.grade_classifier import SteelGradeClassifier
from metcalc.core.material_database import GradeReference
from metcalc.models.results import CasterRequest


@pytest.fixture(scope="module")
def calc() -> CasterCalculator:
    return CasterCalculator(SteelGradeClassifier(GradeReference.from_file()))


def _throughput(r) -> float:
    """Mass one strand casts in one cycle [kg]."""
    return r.width_m * r.thickness_m * r.density * r.speed_m_min * r.cycle_time_min


# -----------------------------------------------------------------------
# Reference slab caster: 140 t heat, 1300 × 160 mm, 1.3 m/min, 60 min
# -----------------------------------------------------------------------

class TestSlabCaster:
    @pytest.fixture(scope="class")
    def result(self, calc: CasterCalculator):
        return calc.compute_caster("Ст3сп", 140.0, 1.3, 0.16, 1.3, 60.0)

    def test_constants_from_default_bucket(self, result):
        assert result.density == 7300.0
        assert result.kz == 240.0

    def test_streams(self, result):
        assert result.streams == 2

    def test_metallurgical_length(self, result):
        expected = 240.0 * 0.16 * 140_000.0 / (0.9 * 2 * 1.3 * 60.0 * 7300.0)
        assert result.metallurgical_length_m == pytest.approx(expected)
        assert result.metallurgical_length_m == pytest.approx(5.24, abs=0.01)

    def test_raw_radius(self, result):
        assert result.radius_raw_m == pytest.approx(3.34, abs=0.01)
        assert result.radius_raw_m == pytest.approx(
            2.0 * result.metallurgical_length_m / math.pi
        )

    def test_floor_applied(self, result):
        assert result.min_radius_m == pytest.approx(6.72)
        assert result.radius_m == pytest.approx(6.72)
        assert result.radius_floor_applied

    def test_height_equals_radius(self, result):
        assert result.height_m == result.radius_m

    def test_inputs_echoed(self, result):
        assert result.grade_label == "Ст3сп"
        assert result.heat_mass_t == 140.0
        assert result.width_m == 1.3
        assert result.thickness_m == 0.16
        assert result.speed_m_min == 1.3
        assert result.cycle_time_min == 60.0


class TestRadius:
    def test_raw_radius_above_floor(self, calc: CasterCalculator):
        # n = 1, L = 240 × 0.25 × 200000 / (0.9 × 1.5 × 50 × 7300) ≈ 24.35 m
        r = calc.compute_caster("45", 200.0, 1.5, 0.25, 1.5, 50.0)
        assert r.streams == 1
        assert r.metallurgical_length_m == pytest.approx(24.353, abs=0.01)
        assert r.radius_m == pytest.approx(r.radius_raw_m)
        assert r.radius_m > r.min_radius_m
        assert not r.radius_floor_applied

    def test_minimum_radius(self):
        assert minimum_radius(0.2) == pytest.approx(8.4)

    @pytest.mark.parametrize("grade, heat, width, thickness, speed, cycle", [
        ("Ст3сп", 140.0, 1.3, 0.16, 1.3, 60.0),
        ("12Х18Н10Т", 60.0, 0.15, 0.15, 3.0, 45.0),
        ("35ГС", 300.0, 2.0, 0.3, 0.8, 70.0),
        ("У8", 5.0, 0.1, 0.1, 4.0, 30.0),
        ("45", 200.0, 1.5, 0.25, 1.5, 50.0),
    ])
    def test_radius_never_below_floor(self, calc, grade, heat, width, thickness, speed, cycle):
        r = calc.compute_caster(grade, heat, width, thickness, speed, cycle)
        assert r.radius_m >= 42.0 * thickness
        assert r.radius_m >= r.radius_raw_m
        assert r.height_m == r.radius_m


class TestStreams:
    @pytest.mark.parametrize("grade, heat, width, thickness, speed, cycle", [
        ("Ст3сп", 140.0, 1.3, 0.16, 1.3, 60.0),
        ("12Х18Н10Т", 60.0, 0.15, 0.15, 3.0, 45.0),
        ("35ГС", 300.0, 2.0, 0.3, 0.8, 70.0),
        ("У8", 5.0, 0.1, 0.1, 4.0, 30.0),
        ("70", 350.0, 0.2, 0.2, 2.5, 50.0),
    ])
    def test_ceiling_semantics(self, calc, grade, heat, width, thickness, speed, cycle):
        r = calc.compute_caster(grade, heat, width, thickness, speed, cycle)
        assert isinstance(r.streams, int)
        assert r.streams >= 1
        assert r.streams * _throughput(r) >= heat * 1000.0
        assert (r.streams - 1) * _throughput(r) < heat * 1000.0

    def test_small_heat_single_stream(self, calc: CasterCalculator):
        assert calc.compute_caster("45", 1.0, 1.3, 0.16, 1.3, 60.0).streams == 1

    def test_grade_changes_constants(self, calc: CasterCalculator):
        alloyed = calc.compute_caster("12Х18Н10Т", 140.0, 1.3, 0.16, 1.3, 60.0)
        assert alloyed.density == 7200.0
        assert alloyed.kz == 290.0


class TestRequestAndSweeps:
    def test_request_object(self, calc: CasterCalculator):
        request = CasterRequest(
            grade_label="Ст3сп",
            heat_mass_t=140.0,
            width_m=1.3,
            thickness_m=0.16,
            speed_m_min=1.3,
            cycle_time_min=60.0,
        )
        assert calc.calculate(request).streams == 2

    def test_speed_sweep(self, calc: CasterCalculator):
        results = calc.speed_sweep("Ст3сп", 140.0, 1.3, 0.16, 60.0, 0.5, 2.0, 7)
        assert len(results) == 7
        assert results[0].speed_m_min == pytest.approx(0.5)
        assert results[-1].speed_m_min == pytest.approx(2.0)
        streams = [r.streams for r in results]
        assert all(b <= a for a, b in zip(streams, streams[1:]))

    def test_thickness_sweep_floor_grows(self, calc: CasterCalculator):
        results = calc.thickness_sweep("Ст3сп", 140.0, 1.3, 1.3, 60.0, 0.1, 0.3, 5)
        assert [r.thickness_m for r in results] == pytest.approx([0.1, 0.15, 0.2, 0.25, 0.3])
        for r in results:
            assert r.min_radius_m == pytest.approx(42.0 * r.thickness_m)

    def test_sweep_rejects_reversed_bounds(self, calc: CasterCalculator):
        with pytest.raises(InvalidInput, match="below lower bound"):
            calc.speed_sweep("45", 140.0, 1.3, 0.16, 60.0, 2.0, 1.0, 5)

    def test_sweep_rejects_zero_steps(self, calc: CasterCalculator):
        with pytest.raises(InvalidInput) as exc_info:
            calc.thickness_sweep("45", 140.0, 1.3, 1.3, 60.0, 0.1, 0.3, 0)
        assert exc_info.value.field == "steps"


class TestInvalidInput:
    BASE = dict(
        grade_label="45",
        heat_mass_t=140.0,
        width_m=1.3,
        thickness_m=0.16,
        speed_m_per_min=1.3,
        cycle_time_min=60.0,
    )

    @pytest.mark.parametrize("arg, field", [
        ("heat_mass_t", "heat_mass_t"),
        ("width_m", "width_m"),
        ("thickness_m", "thickness_m"),
        ("speed_m_per_min", "speed_m_min"),
        ("cycle_time_min", "cycle_time_min"),
    ])
    @pytest.mark.parametrize("value", [0.0, -1.0, float("nan")])
    def test_non_positive_rejected(self, calc: CasterCalculator, arg, field, value):
        kwargs = dict(self.BASE)
        kwargs[arg] = value
        with pytest.raises(InvalidInput) as exc_info:
            calc.compute_caster(**kwargs)
        assert exc_info.value.field == field
