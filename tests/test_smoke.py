"""
CI-friendly smoke tests.

These tests are designed to:
1. Run fast (small systems, few steps)
2. Touch every public runner and the command line
3. Be deterministic (seeded RNG)

Use for continuous integration to catch regressions quickly.
"""

import numpy as np
import pytest

import simcore
from simcore import HeatIC2D, simulate
from simcore.__main__ import main, parse_args


# =============================================================================
# Runners
# =============================================================================


class TestRunners:
    """Smoke tests for the high-level runners."""

    def test_argon_gas_small(self):
        result = simulate.argon_gas(n_side=4, box_length=4e-9, n_steps=20)
        assert result.ok
        assert result.n_atoms == 64
        assert result.n_steps == 20
        # Initial state plus one record per step
        assert len(result.time) == 21
        assert np.all(np.isfinite(result.total_energy))
        assert np.all(result.positions >= 0.0)
        assert np.all(result.positions < 4e-9)

    def test_argon_gas_brute_force(self):
        result = simulate.argon_gas(
            n_side=3, box_length=3e-9, n_steps=10, use_neighbor_list=False
        )
        assert result.ok
        assert result.n_atoms == 27

    def test_argon_invalid(self):
        result = simulate.argon_gas(timestep=-1.0)
        assert not result.ok
        assert "dt" in result.error_message

    def test_lj_cluster(self):
        result = simulate.lj_cluster(n_steps=50)
        assert result.ok
        assert result.n_atoms == 27
        assert result.energy_fluctuation < 1e-3

    def test_heat_rod(self):
        result = simulate.heat_rod(n_cells=20, end_time=5.0)
        assert result.ok
        field = result.temperature_field
        assert field.shape == (20,)
        assert field[0] == 0.0
        assert 0.0 < field.max() < 300.0
        assert result.final_time >= 5.0

    def test_heat_rod_unstable(self):
        result = simulate.heat_rod(timestep=1.0)
        assert not result.ok
        assert "stability" in result.error_message

    @pytest.mark.parametrize("ic", list(HeatIC2D))
    def test_heat_plate(self, ic):
        result = simulate.heat_plate(nx=12, ny=10, ic=ic, n_steps=20)
        assert result.ok
        assert result.temperature_field.shape == (10, 12)
        assert result.n_steps == 20
        assert result.temperature_field.max() <= 1200.0


# =============================================================================
# Command line
# =============================================================================


class TestCommandLine:
    """Smoke tests for the ``simcore`` entry point."""

    def test_parse_defaults(self):
        args = parse_args([])
        assert args.config is None
        assert args.example is None
        assert args.log_level == "INFO"

    def test_rejects_unknown_example(self):
        with pytest.raises(SystemExit):
            parse_args(["--example", "nbody"])

    @pytest.mark.parametrize("example", ["lattice", "heat", "heat2d"])
    def test_examples(self, example):
        assert main(["--example", example, "--log-level", "WARNING"]) == 0

    def test_default_run(self):
        assert main(["--log-level", "WARNING"]) == 0

    def test_config_run(self, tmp_path):
        path = tmp_path / "run.cfg"
        path.write_text("dt = 1e-15\nmax_steps = 5\n")
        assert main(["--config", str(path), "--log-level", "WARNING"]) == 0

    def test_bad_config(self, tmp_path):
        path = tmp_path / "bad.cfg"
        path.write_text("dt = not_a_number\n")
        assert main(["--config", str(path)]) == 1

    def test_missing_config(self, tmp_path):
        assert main(["--config", str(tmp_path / "missing.cfg")]) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "run.log"
        assert main(["--example", "lattice", "--log-file", str(log_file)]) == 0
        assert "Lattice volume" in log_file.read_text()


def test_version():
    assert simcore.__version__ == "0.1.0"
