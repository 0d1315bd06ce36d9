"""
parametric-tb Core Components
=============================

Foundation modules for parametric tight-binding Hamiltonians.

Pipeline:
  1. Sparse Harmonic Store: one CSC block per lattice translation
  2. Selector: which (row, col, dn) entries a modifier may touch
  3. Element Modifier: f(v[, r][, dr]; params...) -> new value
  4. Pointer-Data Compiler: one-time index of affected slots
  5. Parametric Evaluator: replay pointer data for new parameters
  6. Consistency Guard: sparsity drift detection

Modules:
  - lattice: Bravais lattices and presets
  - harmonics: CSC harmonic blocks
  - hamiltonian: Hamiltonian and builder
  - selectors: Site and hopping selectors
  - modifiers: Element modifiers
  - pointers: Pointer data and compiler
  - parametric: ParametricHamiltonian and evaluation
  - consistency: Structural checks
  - errors: Error kinds
"""

# Lattice Geometry
from .lattice import (
    Lattice,
    linear_chain,
    create_chain,
    create_square_lattice,
    create_honeycomb,
)

# Harmonic Store
from .harmonics import (
    Harmonic,
    csc_from_triplets,
    structurally_equal,
)

# Hamiltonians
from .hamiltonian import (
    Hamiltonian,
    HamiltonianBuilder,
    BuilderConfig,
    build_hamiltonian,
)

# Selectors
from .selectors import (
    SiteSelector,
    HopSelector,
    ResolvedSiteSelector,
    ResolvedHopSelector,
    siteselector,
    hopselector,
    pair_geometry,
)

# Modifiers
from .modifiers import (
    ElementModifier,
    ModifierKind,
    onsite_modifier,
    hopping_modifier,
    merge_parameters,
)

# Pointer Data
from .pointers import (
    Pointer,
    UniformDatum,
    OnsiteDatum,
    HoppingDatum,
    compile_pointer_data,
)

# Parametric Hamiltonians
from .parametric import (
    ParametricHamiltonian,
    ParametricConfig,
    parametric,
    evaluate,
    apply_modifier,
    parameter_names,
)

# Consistency Guard
from .consistency import (
    check_consistency,
    is_consistent,
)

# Errors
from .errors import (
    ParametricError,
    StructuralConsistencyError,
    SelectorResolutionError,
    MissingParameterError,
    MissingStoredEntryError,
)


__all__ = [
    # Lattice
    'Lattice',
    'linear_chain',
    'create_chain',
    'create_square_lattice',
    'create_honeycomb',

    # Harmonics
    'Harmonic',
    'csc_from_triplets',
    'structurally_equal',

    # Hamiltonian
    'Hamiltonian',
    'HamiltonianBuilder',
    'BuilderConfig',
    'build_hamiltonian',

    # Selectors
    'SiteSelector',
    'HopSelector',
    'ResolvedSiteSelector',
    'ResolvedHopSelector',
    'siteselector',
    'hopselector',
    'pair_geometry',

    # Modifiers
    'ElementModifier',
    'ModifierKind',
    'onsite_modifier',
    'hopping_modifier',
    'merge_parameters',

    # Pointer data
    'Pointer',
    'UniformDatum',
    'OnsiteDatum',
    'HoppingDatum',
    'compile_pointer_data',

    # Parametric
    'ParametricHamiltonian',
    'ParametricConfig',
    'parametric',
    'evaluate',
    'apply_modifier',
    'parameter_names',

    # Consistency
    'check_consistency',
    'is_consistent',

    # Errors
    'ParametricError',
    'StructuralConsistencyError',
    'SelectorResolutionError',
    'MissingParameterError',
    'MissingStoredEntryError',
]
