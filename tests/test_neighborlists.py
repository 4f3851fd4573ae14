"""Tests for the Verlet neighbor list and pair search."""

import numpy as np
import pytest

from simcore.neighborlists import NeighborList, displacement, find_pairs
from simcore.system import Lattice, ParticleSystem


@pytest.fixture
def line_system():
    """Four particles on the x axis, 1 unit apart."""
    positions = np.array(
        [[1.0, 5.0, 5.0], [2.0, 5.0, 5.0], [3.0, 5.0, 5.0], [4.0, 5.0, 5.0]]
    )
    return ParticleSystem.from_arrays(positions, 1.0)


class TestFindPairs:
    """Test brute-force pair search."""

    def test_pairs_within_cutoff(self, line_system):
        i, j = find_pairs(line_system.positions, None, 1.5**2)
        assert list(zip(i, j)) == [(0, 1), (1, 2), (2, 3)]

    def test_pairs_sorted_and_ordered(self, line_system):
        i, j = find_pairs(line_system.positions, None, 2.5**2)
        assert np.all(i < j)
        assert list(zip(i, j)) == [(0, 1), (0, 2), (1, 2), (1, 3), (2, 3)]

    def test_periodic_pair(self):
        positions = np.array([[0.5, 0.0, 0.0], [9.5, 0.0, 0.0]])
        i, _ = find_pairs(positions, None, 1.5**2)
        assert len(i) == 0
        i, j = find_pairs(positions, Lattice.cubic(10.0), 1.5**2)
        assert list(zip(i, j)) == [(0, 1)]

    def test_empty_and_single(self):
        i, j = find_pairs(np.empty((0, 3)), None, 1.0)
        assert len(i) == len(j) == 0
        i, _ = find_pairs(np.zeros((1, 3)), None, 1.0)
        assert len(i) == 0

    def test_displacement_open_and_periodic(self):
        r1 = np.array([1.0, 0.0, 0.0])
        r2 = np.array([9.0, 0.0, 0.0])
        assert np.allclose(displacement(r1, r2, None), [8.0, 0.0, 0.0])
        assert np.allclose(displacement(r1, r2, Lattice.cubic(10.0)), [-2.0, 0.0, 0.0])


class TestNeighborListBuild:
    """Test neighbor list construction."""

    def test_list_cutoff_includes_skin(self):
        nlist = NeighborList(cutoff=1.0, skin=0.3)
        assert nlist.cutoff == 1.0
        assert nlist.skin == 0.3
        assert nlist.list_cutoff == pytest.approx(1.3)

    def test_build_counts_pairs(self, line_system):
        nlist = NeighborList(cutoff=1.2, skin=0.3)
        n_pairs = nlist.build(line_system)
        assert n_pairs == 3
        assert nlist.n_pairs == 3
        assert nlist.size == 4

    def test_skin_extends_list(self, line_system):
        nlist = NeighborList(cutoff=1.9, skin=0.3)
        nlist.build(line_system)
        # 2.0 apart pairs fall inside cutoff + skin
        assert nlist.n_pairs == 5

    def test_neighbors_only_higher_indices(self, line_system):
        nlist = NeighborList(cutoff=1.9, skin=0.3)
        nlist.build(line_system)
        assert list(nlist.neighbors(0)) == [1, 2]
        assert list(nlist.neighbors(2)) == [3]
        assert len(nlist.neighbors(3)) == 0

    def test_get_pairs(self, line_system):
        nlist = NeighborList(cutoff=1.2, skin=0.0)
        nlist.build(line_system)
        i, j = nlist.get_pairs()
        assert list(i) == [0, 1, 2]
        assert list(j) == [1, 2, 3]

    def test_clear(self, line_system):
        nlist = NeighborList(cutoff=1.2, skin=0.3)
        nlist.build(line_system)
        nlist.clear()
        assert not nlist.is_built
        assert nlist.n_pairs == 0
        assert nlist.needs_rebuild(line_system)

    def test_set_cutoff_invalidates(self, line_system):
        nlist = NeighborList(cutoff=1.2, skin=0.3)
        nlist.build(line_system)
        nlist.set_cutoff(2.0, 0.1)
        assert nlist.cutoff == 2.0
        assert nlist.needs_rebuild(line_system)

    @pytest.mark.parametrize("cutoff,skin", [(0.0, 0.1), (-1.0, 0.1), (1.0, -0.1)])
    def test_invalid_cutoff(self, cutoff, skin):
        with pytest.raises(ValueError):
            NeighborList(cutoff=cutoff, skin=skin)


class TestNeighborListRebuild:
    """Test the lazy rebuild criterion."""

    def test_needs_build_initially(self, line_system):
        nlist = NeighborList(cutoff=1.2, skin=0.4)
        assert nlist.needs_rebuild(line_system)

    def test_valid_after_build(self, line_system):
        nlist = NeighborList(cutoff=1.2, skin=0.4)
        nlist.build(line_system)
        assert not nlist.needs_rebuild(line_system)

    def test_small_move_keeps_list(self, line_system):
        nlist = NeighborList(cutoff=1.2, skin=0.4)
        nlist.build(line_system)
        line_system.positions[1, 1] += 0.15
        assert not nlist.needs_rebuild(line_system)

    def test_move_beyond_half_skin_triggers_rebuild(self, line_system):
        nlist = NeighborList(cutoff=1.2, skin=0.4)
        nlist.build(line_system)
        line_system.positions[2, 2] += 0.25
        assert nlist.needs_rebuild(line_system)

    def test_particle_count_change_triggers_rebuild(self, line_system):
        nlist = NeighborList(cutoff=1.2, skin=0.4)
        nlist.build(line_system)
        line_system.add_particles([[7.0, 5.0, 5.0]], 1.0)
        assert nlist.needs_rebuild(line_system)

    def test_wrap_across_boundary_is_small_move(self):
        """A particle wrapped through a face has only moved a little."""
        lattice = Lattice.cubic(10.0)
        system = ParticleSystem.from_arrays([[9.95, 5.0, 5.0], [5.0, 5.0, 5.0]], 1.0)
        nlist = NeighborList(cutoff=1.2, skin=0.4)
        nlist.build(system, lattice)

        system.positions[0, 0] += 0.1
        system.apply_pbc(lattice)
        assert system.positions[0, 0] == pytest.approx(0.05)

        assert not nlist.needs_rebuild(system, lattice)
        assert nlist.needs_rebuild(system, None)
