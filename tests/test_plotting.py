"""Tests for plotting helpers (skipped without matplotlib)."""

import numpy as np
import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from simcore import plotting  # noqa: E402
from simcore.simulate import SimulationResult  # noqa: E402


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def md_result():
    time = np.arange(5) * 1e-15
    ke = np.array([1.0, 1.1, 1.2, 1.1, 1.0]) * 1e-20
    pe = -ke - 5e-20
    return SimulationResult(
        time=time,
        kinetic_energy=ke,
        potential_energy=pe,
        total_energy=ke + pe,
        temperature=np.array([300.0, 310.0, 305.0, 295.0, 300.0]),
        mean_temperature=302.0,
    )


def test_energy(md_result):
    plotting.energy(md_result, show=False)
    assert len(plt.gcf().axes) == 2


def test_temperature(md_result):
    plotting.temperature(md_result, show=False)
    assert plt.gca().get_ylabel() == "Temperature (K)"


def test_heat_profile():
    result = SimulationResult(temperature_field=np.linspace(0.0, 300.0, 10), dx=1e-3)
    plotting.heat_profile(result, show=False)


def test_heat_profile_rejects_2d():
    result = SimulationResult(temperature_field=np.zeros((3, 3)))
    with pytest.raises(ValueError):
        plotting.heat_profile(result, show=False)


def test_heat_map_and_save(tmp_path):
    result = SimulationResult(temperature_field=np.full((4, 6), 300.0), dx=1e-3)
    plotting.heat_map(result, vmin=300.0, vmax=1200.0, show=False)
    output = tmp_path / "field.png"
    plotting.save(output)
    assert output.exists()


def test_heat_map_rejects_1d():
    with pytest.raises(ValueError):
        plotting.heat_map(SimulationResult(temperature_field=np.zeros(4)), show=False)
