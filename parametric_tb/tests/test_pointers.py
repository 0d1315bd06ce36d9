"""
Test Pointer-Data Compiler
==========================
"""

import numpy as np
import pytest


def _asymmetric_chain():
    """3-site chain storing only the hop 0 -> 1 (no partner 1 -> 0)."""
    from parametric_tb import create_chain, Hamiltonian, Harmonic
    from parametric_tb.core import csc_from_triplets

    lat = create_chain(3)
    h0 = csc_from_triplets([1], [0], [1.0], (3, 3))
    return Hamiltonian(lat, [Harmonic((), h0)])


class TestPointer:
    """Test pointer read/write."""

    def test_adjoint_read_write(self):
        from parametric_tb.core import Pointer

        values = np.array([1 + 2j, 3 - 1j])
        p = Pointer(1, True)
        assert p.read(values) == 3 + 1j
        p.write(values, 5 + 5j)
        assert values[1] == 5 - 5j

    def test_plain_pointer(self):
        from parametric_tb.core import Pointer

        values = np.array([1 + 2j])
        p = Pointer(0)
        assert not p.is_adjoint
        assert p.read(values) == 1 + 2j


class TestCompile:
    """Test pointer data compilation."""

    def test_onsite_data(self, chain10):
        from parametric_tb import onsite_modifier
        from parametric_tb.core import compile_pointer_data, OnsiteDatum

        chain10.optimize()
        m = onsite_modifier(lambda o, r: o).resolve(chain10.lattice)
        data = compile_pointer_data(chain10, m)
        assert len(data) == 1
        assert len(data[0]) == 10
        assert all(isinstance(d, OnsiteDatum) for d in data[0])
        assert np.allclose(data[0][3].r, [3.0])

    def test_hopping_mirror_doubles_data(self, chain10):
        from parametric_tb import hopping_modifier
        from parametric_tb.core import compile_pointer_data

        chain10.optimize()
        lat = chain10.lattice
        both = compile_pointer_data(chain10, hopping_modifier(lambda t: t).resolve(lat))
        single = compile_pointer_data(
            chain10, hopping_modifier(lambda t: t, forcehermitian=False).resolve(lat))
        assert len(both[0]) == 36
        assert len(single[0]) == 18
        assert sum(d.pointer.is_adjoint for d in both[0]) == 18

    def test_one_directional_selection(self):
        from parametric_tb import create_chain, build_hamiltonian, hopping_modifier
        from parametric_tb.core import compile_pointer_data, HoppingDatum

        h = build_hamiltonian(create_chain(2)).optimize()
        m = hopping_modifier(lambda t, r, dr: t, region=lambda r, dr: dr[0] > 0)
        data = compile_pointer_data(h, m.resolve(h.lattice))[0]
        assert len(data) == 2
        primary = [d for d in data if not d.pointer.is_adjoint]
        adjoint = [d for d in data if d.pointer.is_adjoint]
        assert len(primary) == len(adjoint) == 1
        har = h.harmonics[0]
        assert primary[0].pointer.location == har.pointer(1, 0)
        assert adjoint[0].pointer.location == har.pointer(0, 1)
        # Adjoint slot carries the geometry of the selected hop
        assert isinstance(adjoint[0], HoppingDatum)
        assert np.allclose(adjoint[0].dr, [1.0])

    def test_uniform_data(self, periodic_chain):
        from parametric_tb import hopping_modifier
        from parametric_tb.core import compile_pointer_data, UniformDatum

        periodic_chain.optimize()
        m = hopping_modifier(lambda t: t, dns=[(1,)], forcehermitian=False)
        data = compile_pointer_data(periodic_chain, m.resolve(periodic_chain.lattice))
        counts = {har.dn: len(d) for har, d in zip(periodic_chain.harmonics, data)}
        assert counts == {(0,): 0, (1,): 1, (-1,): 0}
        k = [har.dn for har in periodic_chain.harmonics].index((1,))
        assert isinstance(data[k][0], UniformDatum)
        assert data[k][0].pointer.location == periodic_chain.harmonics[k].pointer(0, 5)

    def test_unresolved_modifier(self, chain10):
        from parametric_tb import onsite_modifier
        from parametric_tb.core import compile_pointer_data

        with pytest.raises(ValueError, match="resolved"):
            compile_pointer_data(chain10, onsite_modifier(lambda o: o))


class TestHermitianPartners:
    """Test missing hermitian partner detection."""

    def test_missing_partner(self):
        from parametric_tb import hopping_modifier, MissingStoredEntryError
        from parametric_tb.core import compile_pointer_data

        h = _asymmetric_chain().optimize()
        m = hopping_modifier(lambda t: t).resolve(h.lattice)
        with pytest.raises(MissingStoredEntryError, match="Hermitian partner"):
            compile_pointer_data(h, m)

    def test_without_forcehermitian(self):
        from parametric_tb import hopping_modifier
        from parametric_tb.core import compile_pointer_data

        h = _asymmetric_chain().optimize()
        m = hopping_modifier(lambda t: t, forcehermitian=False).resolve(h.lattice)
        assert len(compile_pointer_data(h, m)[0]) == 1

    def test_check_disabled(self):
        from parametric_tb import hopping_modifier
        from parametric_tb.core import compile_pointer_data

        h = _asymmetric_chain().optimize()
        m = hopping_modifier(lambda t: t).resolve(h.lattice)
        data = compile_pointer_data(h, m, check_hermitian_partners=False)
        # Primary and adjoint entries both land on the stored slot (1, 0)
        assert len(data[0]) == 2
