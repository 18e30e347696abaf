"""Tests for adaptive timestep selection."""

import math

import pytest

from bodyevolve import (
    Body,
    EvolveConfig,
    EvolveState,
    PolarReference,
    System,
    TimestepSelector,
    UpdateMatrix,
    VarType,
    assign_dt,
    next_output_time,
)


def _const(value):
    def rule(bodies, system, body_ids):
        return value
    return rule


def _select(bodies, matrix, first_step=False, **cfg_kw):
    cfg_kw.setdefault("verbose", 0)
    cfg = EvolveConfig(**cfg_kw)
    state = EvolveState(cfg)
    state.first_step = first_step
    selector = TimestepSelector(cfg)
    return selector.select_timestep(bodies, System(), matrix, state), selector


class TestHelpers:

    def test_next_output_time(self):
        assert next_output_time(0.0, 10.0) == 10.0
        assert next_output_time(10.0, 10.0) == 20.0
        assert next_output_time(15.0, 10.0) == 20.0

    def test_next_output_time_on_inexact_boundary(self):
        time = 3 * 0.7
        assert next_output_time(time, 0.7) == pytest.approx(2.8)
        assert next_output_time(time, 0.7) > time

    def test_mark_output_always_moves_forward(self):
        state = EvolveState(EvolveConfig(output_time=0.7, verbose=0))
        for k in range(1, 30):
            state.time = k * 0.7
            state.mark_output()
            assert state.next_output > state.time
            assert state.next_output == pytest.approx((k + 1) * 0.7)

    def test_assign_dt_clamps_to_output(self):
        assert assign_dt(5.0, 2.0) == 2.0
        assert assign_dt(1.0, 2.0) == 1.0
        assert assign_dt(math.inf, 3.0) == 3.0


class TestFirstStep:
    """The very first step uses the base timestep."""

    def test_base_timestep_regardless_of_rates(self):
        bodies = [Body("b", 1.0)]
        matrix = UpdateMatrix(1)
        matrix.add_equation(0, "mass", _const(-1e6), "fast")
        dt, _ = _select(bodies, matrix, first_step=True, time_step=1.0, eta=0.01)
        assert dt == 1.0

    def test_first_step_still_evaluates_matrix(self):
        bodies = [Body("b", 1.0)]
        matrix = UpdateMatrix(1)
        matrix.add_equation(0, "mass", _const(-2.0), "loss")
        _select(bodies, matrix, first_step=True)
        assert matrix.variable(0, "mass").total() == -2.0


class TestDerivativeRule:
    """Ordinary derivatives bound the step by value over rate."""

    def test_value_over_rate(self):
        bodies = [Body("b", 10.0)]
        matrix = UpdateMatrix(1)
        matrix.add_equation(0, "mass", _const(-2.0), "loss")
        dt, selector = _select(bodies, matrix, eta=0.1)
        assert dt == pytest.approx(0.5)
        assert selector.last_limiter == (0, "mass")

    def test_each_equation_bounds_separately(self):
        bodies = [Body("b", 10.0)]
        matrix = UpdateMatrix(1)
        matrix.add_equation(0, "mass", _const(-2.0), "slow")
        matrix.add_equation(0, "mass", _const(8.0), "fast")
        dt, _ = _select(bodies, matrix, eta=1.0)
        assert dt == pytest.approx(1.25)

    def test_zero_rate_and_zero_value_do_not_constrain(self):
        bodies = [Body("b", 10.0, radius=0.0)]
        matrix = UpdateMatrix(1)
        matrix.add_equation(0, "mass", _const(0.0), "idle")
        matrix.add_equation(0, "radius", _const(1.0), "grow")
        dt, selector = _select(bodies, matrix)
        assert math.isinf(dt)
        assert selector.last_limiter is None

    def test_disabled_equation_does_not_constrain(self):
        bodies = [Body("b", 10.0)]
        matrix = UpdateMatrix(1)
        matrix.add_equation(0, "mass", _const(-1.0), "slow")
        matrix.add_equation(0, "mass", _const(-100.0), "fast")
        matrix.disable(0, "mass", "fast")
        dt, _ = _select(bodies, matrix, eta=1.0)
        assert dt == pytest.approx(10.0)

    def test_faster_rate_never_lengthens_step(self):
        bodies = [Body("b", 10.0)]
        previous = math.inf
        for rate in (0.5, 1.0, 2.0, 4.0, 8.0):
            matrix = UpdateMatrix(1)
            matrix.add_equation(0, "mass", _const(-rate), "loss")
            dt, _ = _select(bodies, matrix)
            assert dt <= previous
            previous = dt


class TestPolarRule:
    """Angles and angle-like components."""

    def test_own_angle_zero_does_not_constrain(self):
        bodies = [Body("b", 1.0, obliquity=0.0)]
        matrix = UpdateMatrix(1)
        matrix.add_variable(0, "obliquity", VarType.POLAR)
        matrix.add_equation(0, "obliquity", _const(1e3), "spin")
        matrix.add_equation(0, "mass", _const(-1.0), "loss")
        dt, selector = _select(bodies, matrix, eta=1.0)
        assert dt == pytest.approx(1.0)
        assert selector.last_limiter == (0, "mass")

    def test_sine_of_reference_angle(self):
        bodies = [Body("b", 1.0, obliquity=math.pi / 2, xobl=0.3)]
        matrix = UpdateMatrix(1)
        matrix.add_variable(0, "xobl", VarType.POLAR, reference=PolarReference("obliquity"))
        matrix.add_equation(0, "xobl", _const(0.2), "spin")
        dt, _ = _select(bodies, matrix, eta=1.0)
        assert dt == pytest.approx(5.0)

    def test_reference_magnitude(self):
        bodies = [Body("b", 1.0, ecc=0.5, hecc=0.3)]
        matrix = UpdateMatrix(1)
        ref = PolarReference("ecc", is_angle=False)
        matrix.add_variable(0, "hecc", VarType.POLAR, reference=ref)
        matrix.add_equation(0, "hecc", _const(-0.1), "tides")
        dt, _ = _select(bodies, matrix, eta=1.0)
        assert dt == pytest.approx(5.0)

    def test_unit_amplitude(self):
        bodies = [Body("b", 1.0, pprec=0.0)]
        matrix = UpdateMatrix(1)
        matrix.add_variable(0, "pprec", VarType.POLAR, reference=PolarReference(None))
        matrix.add_equation(0, "pprec", _const(4.0), "precession")
        dt, _ = _select(bodies, matrix, eta=1.0)
        assert dt == pytest.approx(0.25)

    def test_zero_reference_does_not_constrain(self):
        bodies = [Body("b", 1.0, ecc=0.0, hecc=0.0)]
        matrix = UpdateMatrix(1)
        ref = PolarReference("ecc", is_angle=False)
        matrix.add_variable(0, "hecc", VarType.POLAR, reference=ref)
        matrix.add_equation(0, "hecc", _const(1.0), "tides")
        dt, _ = _select(bodies, matrix)
        assert math.isinf(dt)


class TestExplicitRules:
    """Explicit values infer a rate from the base timestep."""

    def test_explicit_age_ratio(self):
        bodies = [Body("b", 1.0, radius=2.0)]
        matrix = UpdateMatrix(1)
        matrix.add_variable(0, "radius", VarType.EXPLICIT_AGE)
        matrix.add_equation(0, "radius", _const(2.5), "track")
        dt, _ = _select(bodies, matrix, eta=1.0, time_step=1.0)
        assert dt == pytest.approx(4.0)

    def test_sinusoidal_ratio(self):
        bodies = [Body("b", 1.0, phase=2.0)]
        matrix = UpdateMatrix(1)
        matrix.add_variable(0, "phase", VarType.SINUSOIDAL)
        matrix.add_equation(0, "phase", _const(2.5), "cycle")
        dt, _ = _select(bodies, matrix, eta=1.0, time_step=1.0)
        assert dt == pytest.approx(2.0)

    def test_unchanged_value_does_not_constrain(self):
        bodies = [Body("b", 1.0, radius=2.0)]
        matrix = UpdateMatrix(1)
        matrix.add_variable(0, "radius", VarType.EXPLICIT_AGE)
        matrix.add_equation(0, "radius", _const(2.0), "track")
        dt, _ = _select(bodies, matrix)
        assert math.isinf(dt)

    def test_explicit_time_uses_next_output(self):
        bodies = [Body("b", 1.0, flux=1.0)]
        matrix = UpdateMatrix(1)
        matrix.add_variable(0, "flux", VarType.EXPLICIT_TIME)
        matrix.add_equation(0, "flux", _const(7.0), "flare")
        dt, _ = _select(bodies, matrix, eta=0.5, output_time=10.0)
        assert dt == pytest.approx(5.0)

    def test_derived_never_constrains(self):
        bodies = [Body("b", 1.0, lum=1.0)]
        matrix = UpdateMatrix(1)
        matrix.add_variable(0, "lum", VarType.DERIVED)
        matrix.add_equation(0, "lum", _const(-1e9), "aux")
        dt, _ = _select(bodies, matrix)
        assert math.isinf(dt)


class TestFloorRule:
    """Ice-sheet style variables are floored at a number of orbits."""

    def _matrix(self, min_ice_dt=None):
        matrix = UpdateMatrix(1)
        matrix.add_variable(0, "ice_mass", VarType.FLOOR, min_ice_dt=min_ice_dt)
        matrix.add_equation(0, "ice_mass", _const(-1.0), "ice")
        return matrix

    def test_floor_holds_several_orbits(self):
        bodies = [Body("p", 1.0, mean_motion=2.0 * math.pi, ice_mass=1.0)]
        dt, _ = _select(bodies, self._matrix(), eta=0.01, min_ice_dt=5)
        assert dt == pytest.approx(5.0 * bodies[0].orbital_period)

    def test_per_variable_override(self):
        bodies = [Body("p", 1.0, mean_motion=2.0 * math.pi, ice_mass=1.0)]
        dt, _ = _select(bodies, self._matrix(min_ice_dt=2), eta=0.01, min_ice_dt=5)
        assert dt == pytest.approx(2.0)

    def test_no_orbit_no_floor(self):
        bodies = [Body("p", 1.0, mean_motion=0.0, ice_mass=1.0)]
        dt, _ = _select(bodies, self._matrix(), eta=0.01)
        assert dt == pytest.approx(0.01)


class TestNBodyRule:
    """Direct integration bounds by distance over speed."""

    def _setup(self):
        bodies = [Body("p", 1.0, position=(3.0, 4.0, 0.0), velocity=(0.0, 0.5, 0.0))]
        matrix = UpdateMatrix(1)
        matrix.add_variable(0, "position_x", VarType.NBODY)
        matrix.add_equation(0, "position_x", _const(0.0), "gravity")
        return bodies, matrix

    def test_enabled(self):
        bodies, matrix = self._setup()
        dt, _ = _select(bodies, matrix, eta=1.0, direct_integration=True)
        assert dt == pytest.approx(10.0)

    def test_disabled_without_direct_integration(self):
        bodies, matrix = self._setup()
        dt, _ = _select(bodies, matrix, eta=1.0)
        assert math.isinf(dt)


class TestLimiterDiagnostics:
    """The limiting slot is reported through the rate-limited channel."""

    def test_limiter_reported_once_within_limit(self, capsys):
        bodies = [Body("b", 10.0)]
        matrix = UpdateMatrix(1)
        matrix.add_equation(0, "mass", _const(-2.0), "loss")
        cfg = EvolveConfig(verbose=2, diag_print_limit=1, diag_print_interval=1000)
        state = EvolveState(cfg)
        state.first_step = False
        selector = TimestepSelector(cfg)

        for _ in range(3):
            selector.select_timestep(bodies, System(), matrix, state)

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("[diag:dt_limiter#1] dt=")
        assert "limited by body 0 'mass'" in lines[0]

    def test_quiet_run_prints_nothing(self, capsys):
        bodies = [Body("b", 10.0)]
        matrix = UpdateMatrix(1)
        matrix.add_equation(0, "mass", _const(-2.0), "loss")
        dt, _ = _select(bodies, matrix)
        assert capsys.readouterr().out == ""
