"""
parametric-tb
=============

Parametric tight-binding Hamiltonians on lattices.

A sparse Hamiltonian is compiled once against a set of element modifiers
(functions of external parameters such as a chemical potential, a flux or
a strain). Every later evaluation rewrites only the stored entries the
modifiers touch, in time proportional to their number.

    >>> from parametric_tb import *
    >>> h = build_hamiltonian(create_chain(10), onsite=0.0, hopping=1.0)
    >>> ph = parametric(h, onsite_modifier(lambda o, *, mu: o - mu))
    >>> h_mu = ph(mu=1.0)

Structure:
  parametric_tb/
  ├── core/
  │   ├── lattice.py        # Bravais lattices and presets
  │   ├── harmonics.py      # CSC harmonic store
  │   ├── hamiltonian.py    # Hamiltonian + builder
  │   ├── selectors.py      # Site / hopping selectors
  │   ├── modifiers.py      # Element modifiers
  │   ├── pointers.py       # Pointer-data compiler
  │   ├── parametric.py     # ParametricHamiltonian, evaluate
  │   ├── consistency.py    # Consistency guard
  │   └── errors.py         # Error kinds
  ├── cli/                  # parametric-tb command line (typer)
  ├── examples/             # Example scripts
  └── tests/                # Test suites
"""

__version__ = "0.1.0"

# =============================================================================
# Core Components
# =============================================================================

from .core.lattice import (
    Lattice,
    linear_chain,
    create_chain,
    create_square_lattice,
    create_honeycomb,
)

from .core.harmonics import Harmonic

from .core.hamiltonian import (
    Hamiltonian,
    HamiltonianBuilder,
    BuilderConfig,
    build_hamiltonian,
)

from .core.selectors import (
    SiteSelector,
    HopSelector,
    siteselector,
    hopselector,
)

from .core.modifiers import (
    ElementModifier,
    ModifierKind,
    onsite_modifier,
    hopping_modifier,
)

from .core.parametric import (
    ParametricHamiltonian,
    ParametricConfig,
    parametric,
    evaluate,
    parameter_names,
)

from .core.consistency import check_consistency

from .core.errors import (
    ParametricError,
    StructuralConsistencyError,
    SelectorResolutionError,
    MissingParameterError,
    MissingStoredEntryError,
)


# =============================================================================
# __all__
# =============================================================================

__all__ = [
    # Version
    '__version__',

    # Lattice
    'Lattice',
    'linear_chain',
    'create_chain',
    'create_square_lattice',
    'create_honeycomb',

    # Hamiltonian
    'Harmonic',
    'Hamiltonian',
    'HamiltonianBuilder',
    'BuilderConfig',
    'build_hamiltonian',

    # Selectors and modifiers
    'SiteSelector',
    'HopSelector',
    'siteselector',
    'hopselector',
    'ElementModifier',
    'ModifierKind',
    'onsite_modifier',
    'hopping_modifier',

    # Parametric
    'ParametricHamiltonian',
    'ParametricConfig',
    'parametric',
    'evaluate',
    'parameter_names',
    'check_consistency',

    # Errors
    'ParametricError',
    'StructuralConsistencyError',
    'SelectorResolutionError',
    'MissingParameterError',
    'MissingStoredEntryError',
]
