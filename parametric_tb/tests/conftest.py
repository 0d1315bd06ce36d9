"""
parametric-tb Test Configuration
"""

import pytest
import numpy as np


@pytest.fixture
def chain10():
    """Finite 10-site chain, zero onsites, unit hoppings"""
    from parametric_tb import create_chain, build_hamiltonian
    return build_hamiltonian(create_chain(10), onsite=0.0, hopping=1.0)


@pytest.fixture
def periodic_chain():
    """Periodic 6-site chain (three harmonics)"""
    from parametric_tb import create_chain, build_hamiltonian
    return build_hamiltonian(create_chain(6, periodic=True), onsite=0.0, hopping=1.0)


@pytest.fixture
def honeycomb():
    """2x2 honeycomb supercell, nearest-neighbour hoppings"""
    from parametric_tb import create_honeycomb, build_hamiltonian
    return build_hamiltonian(create_honeycomb().supercell(2), onsite=0.0, hopping=1.0)


@pytest.fixture
def dense():
    """Dense matrix of a harmonic"""
    def _dense(h, dn=None):
        return np.asarray(h.matrix(dn).todense())
    return _dense


def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "cli: marks command line tests"
    )
