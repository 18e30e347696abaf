"""Tests for the reference physics modules and the engine's own physics helpers."""

import math

import pytest

from bodyevolve import (
    Body,
    ConstantRateModule,
    EnvelopeLossModule,
    EvolveConfig,
    ExplicitTrackModule,
    ExponentialDecayModule,
    PolarReference,
    Simulation,
    UpdateMatrix,
    VarType,
    props_aux_general,
    semi_to_mean_motion,
)


class TestRateModules:

    def test_constant_rate_registration(self):
        bodies = [Body("star", 1.0), Body("p", 1.0, obliquity=0.4, xobl=0.1)]
        matrix = UpdateMatrix(2)
        module = ConstantRateModule(
            "xobl", 0.01,
            var_type=VarType.POLAR,
            reference=PolarReference("obliquity"),
            coupled=(0,),
        )
        module.initialize_update(matrix, bodies, 1)

        var = matrix.variable(1, "xobl")
        assert var.var_type is VarType.POLAR
        assert var.reference.attribute == "obliquity"
        assert var.equations[0].bodies == (1, 0)
        assert var.equations[0].module == "constant_rate"

    def test_exponential_decay_run(self):
        bodies = [Body("b", 1.0, y=1.0)]
        cfg = EvolveConfig(time_step=0.01, var_dt=False, stop_time=1.0, output_time=0.5, verbose=0)
        sim = Simulation(bodies, cfg)
        sim.add_module(0, ExponentialDecayModule("y", tau=1.0))
        result = sim.run()

        assert result.time == 1.0
        assert bodies[0].y == pytest.approx(math.exp(-1.0), rel=1e-8)

    def test_explicit_track_needs_value_type(self):
        with pytest.raises(ValueError):
            ExplicitTrackModule("radius", lambda age: 1.0, var_type=VarType.DERIVATIVE)


class TestEnvelopeLoss:
    """Envelope removal snaps to zero and switches the loss off."""

    def _sim(self, **cfg_kw):
        bodies = [Body("star", 2.0e30), Body("planet", 1.0, envelope_mass=0.01)]
        cfg_kw.setdefault("verbose", 0)
        cfg = EvolveConfig(**cfg_kw)
        return Simulation(bodies, cfg)

    def test_envelope_removed_and_mass_frozen(self):
        sim = self._sim(
            integration_method="euler", var_dt=False, time_step=1.0,
            stop_time=20.0, output_time=1.0,
        )
        sim.add_module(1, EnvelopeLossModule(rate=1e-3, min_envelope_mass=0.005))
        result = sim.run()

        planet = sim.bodies[1]
        assert not result.halted
        assert planet.envelope_mass == 0.0
        assert planet.envelope_lost
        assert 0.994 - 1e-9 <= planet.mass <= 0.995 + 1e-9
        assert sim.matrix.variable(1, "mass").n_enabled == 0
        assert sim.matrix.variable(1, "envelope_mass").n_enabled == 0

    def test_other_mass_equations_keep_running(self):
        sim = self._sim(
            integration_method="euler", var_dt=False, time_step=1.0,
            stop_time=20.0, output_time=1.0,
        )
        sim.add_module(1, EnvelopeLossModule(rate=1e-3, min_envelope_mass=0.005))
        sim.add_module(1, ConstantRateModule("mass", 1e-4, name="accretion"))
        sim.run()
        assert sim.matrix.variable(1, "mass").n_enabled == 1

    def test_envelope_gone_halt(self):
        sim = self._sim(stop_time=100.0, output_time=10.0)
        sim.add_module(1, EnvelopeLossModule(rate=1e-3, min_envelope_mass=0.005, halt_on_gone=True))
        result = sim.run()

        assert result.halted
        assert result.halt_reason == "envelope_gone"
        assert sim.bodies[1].envelope_mass == 0.0
        assert result.time < 100.0

    def test_scratch_bodies_carry_module_fields(self):
        sim = self._sim(stop_time=1.0, output_time=1.0)
        sim.add_module(1, EnvelopeLossModule(rate=1e-3, min_envelope_mass=0.005))
        sim.run()
        scratch = sim.integrator.scheme.scratch_bodies
        assert scratch[1].min_envelope_mass == 0.005
        assert scratch[1].envelope_lost is False


class TestPhysicsUtils:

    def test_earth_mean_motion(self):
        n = semi_to_mean_motion(1.496e11, 1.989e30)
        year = 2.0 * math.pi / n
        assert year == pytest.approx(3.156e7, rel=0.01)

    def test_degenerate_inputs(self):
        assert semi_to_mean_motion(0.0, 1.0) == 0.0
        assert semi_to_mean_motion(1.0, 0.0) == 0.0

    def test_props_aux_general(self):
        bodies = [
            Body("star", 1.989e30),
            Body("earth", 5.97e24, semi=1.496e11),
            Body("companion", 1.0e30, semi=1.0e11, binary=True, mean_motion=7.0),
            Body("rogue", 1.0, semi=0.0, mean_motion=3.0),
        ]
        props_aux_general(bodies)
        assert bodies[1].mean_motion == pytest.approx(semi_to_mean_motion(1.496e11, 1.989e30 + 5.97e24))
        assert bodies[2].mean_motion == 7.0
        assert bodies[3].mean_motion == 3.0
        assert bodies[0].mean_motion == 0.0
