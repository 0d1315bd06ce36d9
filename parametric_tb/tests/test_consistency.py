"""
Test Consistency Guard
======================
"""

import numpy as np
import pytest


def _shift():
    from parametric_tb import onsite_modifier
    return onsite_modifier(lambda o, *, mu: o - mu)


class TestConsistency:
    """Structural drift detection."""

    def test_consistent_after_evaluation(self, periodic_chain):
        from parametric_tb import parametric

        ph = parametric(periodic_chain, _shift())
        ph(mu=1.0)
        ph.check_consistency()
        assert ph.is_consistent

    def test_harmonic_removed(self, periodic_chain):
        from parametric_tb import parametric, StructuralConsistencyError

        ph = parametric(periodic_chain, _shift())
        ph.h.harmonics.pop()
        with pytest.raises(StructuralConsistencyError, match="not internally consistent"):
            ph(mu=1.0)
        assert not ph.is_consistent

    def test_failure_is_permanent(self, periodic_chain):
        from parametric_tb import parametric, StructuralConsistencyError

        ph = parametric(periodic_chain, _shift())
        removed = ph.h.harmonics.pop()
        with pytest.raises(StructuralConsistencyError):
            ph(mu=1.0)
        ph.h.harmonics.append(removed)
        with pytest.raises(StructuralConsistencyError):
            ph(mu=1.0)

    def test_full_check_detects_sparsity_change(self, periodic_chain):
        from parametric_tb import parametric, ParametricConfig, StructuralConsistencyError

        ph = parametric(periodic_chain, _shift(), config=ParametricConfig(full_check=True))
        ph(mu=1.0)
        har = ph.h.harmonics[0]
        har.h = har.h.copy()
        har.h.data[0] = 0.0
        har.h.eliminate_zeros()
        with pytest.raises(StructuralConsistencyError):
            ph(mu=1.0)

    def test_cheap_check_misses_sparsity_change(self, periodic_chain):
        from parametric_tb import parametric, StructuralConsistencyError

        ph = parametric(periodic_chain, _shift())
        har = ph.h.harmonics[0]
        har.h = har.h.copy()
        har.h.data[:] = 1.0
        har.h.data[0] = 0.0
        har.h.eliminate_zeros()
        # Cheap mode compares harmonic counts only
        ph.check_consistency(full=False)
        with pytest.raises(StructuralConsistencyError):
            ph.check_consistency(full=True)

    def test_is_consistent(self, chain10):
        from parametric_tb.core import is_consistent

        other = chain10.copy()
        assert is_consistent(chain10, other)
        other.optimize()
        assert is_consistent(chain10, other, full=False)
        assert not is_consistent(chain10, other, full=True)

    def test_copy_of_inconsistent_object(self, periodic_chain):
        from parametric_tb import parametric, StructuralConsistencyError

        ph = parametric(periodic_chain, _shift())
        har = ph.h.harmonics[0]
        har.h = har.h.copy()
        har.h.data[:] = 1.0
        har.h.data[0] = 0.0
        har.h.eliminate_zeros()
        with pytest.raises(StructuralConsistencyError):
            ph.check_consistency(full=True)
        assert not ph.is_consistent
        with pytest.raises(StructuralConsistencyError):
            ph.copy()

    def test_copy_detects_unflagged_drift(self, periodic_chain):
        from parametric_tb import parametric, StructuralConsistencyError

        ph = parametric(periodic_chain, _shift())
        har = ph.h.harmonics[0]
        har.h = har.h.copy()
        har.h.data[:] = 1.0
        har.h.data[0] = 0.0
        har.h.eliminate_zeros()
        with pytest.raises(StructuralConsistencyError):
            ph.copy()
        assert not ph.is_consistent
