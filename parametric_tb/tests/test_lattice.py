"""
Test Lattices and Hamiltonian Builder
=====================================
"""

import numpy as np
import pytest


class TestLattice:
    """Test lattice geometry and sublattices."""

    def test_honeycomb(self):
        from parametric_tb import create_honeycomb

        lat = create_honeycomb()
        assert lat.n_sites == 2
        assert lat.dim == 2
        assert lat.lattice_dim == 2
        assert lat.sublat_names == ('A', 'B')
        assert lat.sublat_index('B') == 1
        assert lat.zero_cell() == (0, 0)
        d = np.linalg.norm(lat.sites[1] - lat.sites[0])
        assert np.isclose(d, 1.0)

    def test_finite_chain(self):
        from parametric_tb import create_chain

        lat = create_chain(5, a=2.0)
        assert lat.lattice_dim == 0
        assert lat.zero_cell() == ()
        assert np.allclose(lat.position(3), [6.0])
        assert lat.sublat_names == ('A',)

    def test_position_defaults_to_home_cell(self):
        from parametric_tb import create_honeycomb, create_chain

        lat = create_honeycomb()
        assert np.allclose(lat.position(1), lat.sites[1])
        assert np.allclose(lat.position(1, ()), lat.sites[1])
        assert np.allclose(create_chain(4, periodic=True).position(2), [2.0])

    def test_position_in_cell(self):
        from parametric_tb import create_honeycomb

        lat = create_honeycomb()
        r = lat.position(0, (1, 0))
        assert np.allclose(r, lat.sites[0] + lat.bravais[:, 0])

    def test_unknown_sublattice(self):
        from parametric_tb import create_honeycomb

        lat = create_honeycomb()
        with pytest.raises(KeyError, match="Unknown sublattice"):
            lat.sublat_index('C')

    def test_supercell(self):
        from parametric_tb import create_honeycomb

        lat = create_honeycomb()
        sc = lat.supercell(2, 3)
        assert sc.n_sites == 12
        assert np.allclose(sc.bravais[:, 0], 2 * lat.bravais[:, 0])
        assert np.allclose(sc.bravais[:, 1], 3 * lat.bravais[:, 1])
        assert len(sc.sublat_sites('A')) == 6
        assert sc.sublat_names == ('A', 'B')

    def test_supercell_of_finite_lattice_fails(self):
        from parametric_tb import create_chain

        with pytest.raises(ValueError):
            create_chain(4).supercell(2)

    def test_square_lattice_ordering(self):
        from parametric_tb import create_square_lattice

        lat = create_square_lattice(3, 2, periodic_x=True)
        assert lat.n_sites == 6
        assert lat.lattice_dim == 1
        assert np.allclose(lat.sites[4], [1.0, 1.0])

    def test_bad_bravais_dimension(self):
        from parametric_tb import Lattice

        with pytest.raises(ValueError):
            Lattice([[1.0], [0.0], [0.0]], [[0.0, 0.0]])


class TestBuilder:
    """Test the KD-tree Hamiltonian builder."""

    def test_chain(self, chain10):
        assert chain10.size == (10, 10)
        assert len(chain10.harmonics) == 1
        assert chain10.count_onsites() == 0
        assert chain10.count_hoppings() == 18

    def test_periodic_chain(self, periodic_chain):
        dns = [har.dn for har in periodic_chain.harmonics]
        assert dns[0] == (0,)
        assert sorted(dns) == [(-1,), (0,), (1,)]
        assert periodic_chain.count_hoppings() == 12
        assert np.isclose(periodic_chain.coordination(), 2.0)
        # Wrap-around hop: site 5 (cell 0) to site 0 (cell +1)
        assert periodic_chain.harmonic((1,)).pointer(0, 5) is not None

    def test_honeycomb_coordination(self, honeycomb):
        assert honeycomb.size == (8, 8)
        assert np.isclose(honeycomb.coordination(), 3.0)
        assert honeycomb.is_structurally_hermitian()

    def test_callable_terms(self):
        from parametric_tb import create_chain, build_hamiltonian

        h = build_hamiltonian(create_chain(3),
                              onsite=lambda r: r[0],
                              hopping=lambda r, dr: dr[0])
        m = np.asarray(h.matrix().todense())
        assert np.allclose(np.diag(m), [0, 1, 2])
        assert np.isclose(m[1, 0], 1.0)
        assert np.isclose(m[0, 1], -1.0)
        # Zero onsite at site 0 is not stored by the builder
        assert h.count_onsites() == 2

    def test_summary(self, honeycomb):
        text = str(honeycomb)
        assert text.startswith("Hamiltonian on a 2D Lattice in 2D space")
        assert "Harmonic size    : 8 × 8" in text
        assert "Coordination     : 3" in text


class TestOptimize:
    """Test sparsity normalization."""

    def test_structural_diagonal(self, chain10):
        chain10.optimize()
        assert chain10.count_onsites() == 10
        assert chain10.harmonics[0].nnz == 28
        # Values unchanged
        assert np.allclose(chain10.matrix().diagonal(), 0)

    def test_creates_zero_harmonic(self):
        from parametric_tb import Hamiltonian, Harmonic, linear_chain
        import scipy.sparse as sp

        lat = linear_chain()
        h = Hamiltonian(lat, [Harmonic((1,), sp.csc_matrix(np.ones((1, 1), dtype=complex))),
                              Harmonic((-1,), sp.csc_matrix(np.ones((1, 1), dtype=complex)))])
        assert h.harmonic((0,)) is None
        h.optimize()
        assert h.harmonics[0].dn == (0,)
        assert h.harmonics[0].nnz == 1


class TestBloch:
    """Test Bloch sums over harmonics."""

    def test_ring_spectrum(self, periodic_chain):
        m = periodic_chain.bloch().toarray()
        expected = 2 * np.cos(2 * np.pi * np.arange(6) / 6)
        assert np.allclose(np.linalg.eigvalsh(m), np.sort(expected))

    def test_twisted_ring_is_hermitian(self, periodic_chain):
        m = periodic_chain.bloch([0.3]).toarray()
        assert np.allclose(m, m.conj().T)
        expected = 2 * np.cos((2 * np.pi * np.arange(6) + 0.3) / 6)
        assert np.allclose(np.linalg.eigvalsh(m), np.sort(expected))

    def test_wrong_phase_count(self, honeycomb):
        with pytest.raises(ValueError):
            honeycomb.bloch([0.1])

    def test_finite_lattice(self, chain10):
        assert np.allclose(chain10.bloch().toarray(), chain10.matrix().toarray())
