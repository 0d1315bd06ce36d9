"""
Parametric Hamiltonians
=======================

Efficient re-evaluation of a sparse Hamiltonian under element modifiers.

    ph = parametric(h, onsite_modifier(lambda o, *, mu: o - mu),
                       hopping_modifier(lambda t, *, t0=1.0: t0 * t))
    h1 = ph(mu=0.5)
    h2 = ph(mu=1.0, t0=2.0)   # same object as h1, values overwritten

Construction (once):
  1. resolve every modifier against the lattice
  2. normalize sparsity (Hamiltonian.optimize)
  3. compile pointer data, one list per harmonic per modifier
  4. keep the base Hamiltonian frozen and a structural clone to work on

Evaluation (every call):
  1. cheap consistency check
  2. for every datum: read the ORIGINAL value, call the modifier, write the
     result (conjugated for adjoint slots) into the working copy

Reading from the original makes evaluations non-cumulative: any call
depends only on its own parameters. Overlapping targets follow
last-write-wins in modifier order, then harmonic and scan order.

Not thread safe: the working Hamiltonian is shared mutable state. Use
ph.copy() for independent evaluations.
"""

import time
from typing import List, Tuple, Optional, Dict, Any, Sequence
from dataclasses import dataclass

from .hamiltonian import Hamiltonian
from .modifiers import ElementModifier, merge_parameters
from .pointers import compile_pointer_data, count_pointer_data, PointerDatum
from .consistency import check_consistency


@dataclass
class ParametricConfig:
    """Settings for ParametricHamiltonian"""
    full_check: bool = False  # full consistency check before every evaluation
    check_hermitian_partners: bool = True
    verbose: bool = False


class ParametricHamiltonian:
    """
    Base Hamiltonian, working copy, modifiers and their pointer data.

    Attributes:
        originalh: Frozen base Hamiltonian (never written after construction)
        h: Working Hamiltonian, overwritten by every evaluation
        modifiers: Tuple of N resolved ElementModifiers
        ptrdata: Tuple of N lists, each with one list of data per harmonic
        config: ParametricConfig

    Example:
        >>> h = build_hamiltonian(create_chain(10), onsite=0.0, hopping=1.0)
        >>> ph = parametric(h, onsite_modifier(lambda o, *, mu: o - mu))
        >>> ph.parameter_names
        ('mu',)
        >>> ph(mu=1).matrix().diagonal()[0]
        (-1+0j)
    """

    def __init__(self,
                 originalh: Hamiltonian,
                 h: Hamiltonian,
                 modifiers: Sequence[ElementModifier],
                 ptrdata: Sequence[List[List[PointerDatum]]],
                 config: Optional[ParametricConfig] = None):
        self.originalh = originalh
        self.h = h
        self.modifiers = tuple(modifiers)
        self.ptrdata = tuple(ptrdata)
        self.config = config or ParametricConfig()
        self._consistent = True

        if len(self.modifiers) != len(self.ptrdata):
            raise ValueError(
                f"Got {len(self.modifiers)} modifiers but {len(self.ptrdata)} pointer data sets"
            )
        for data in self.ptrdata:
            if len(data) != len(originalh.harmonics):
                raise ValueError(
                    f"Pointer data cover {len(data)} harmonics, "
                    f"Hamiltonian has {len(originalh.harmonics)}"
                )

    # =========================================================================
    # Evaluation
    # =========================================================================

    def __call__(self, **params) -> Hamiltonian:
        return evaluate(self, **params)

    @property
    def is_consistent(self) -> bool:
        return self._consistent

    def _mark_inconsistent(self):
        self._consistent = False

    def check_consistency(self, full: bool = True):
        """Run the consistency guard (full mode by default)."""
        check_consistency(self, full=full)

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        """Union of the modifiers' declared parameters, duplicates merged"""
        return merge_parameters(self.modifiers)

    @property
    def lattice(self):
        return self.h.lattice

    @property
    def harmonics(self):
        return self.h.harmonics

    @property
    def size(self) -> Tuple[int, int]:
        return self.h.size

    @property
    def eltype(self):
        return self.h.eltype

    @property
    def bravais(self):
        return self.h.lattice.bravais

    def n_pointer_data(self) -> int:
        return sum(count_pointer_data(data) for data in self.ptrdata)

    def copy(self) -> 'ParametricHamiltonian':
        """
        Independent copy for separate evaluations.

        Base and working Hamiltonians and pointer data are copied; modifiers
        are stateless and shared.

        Runs the full consistency check first.

        Raises:
            StructuralConsistencyError: If this object is or becomes flagged
                inconsistent
        """
        check_consistency(self, full=True)
        ptrdata = [[list(data) for data in per_modifier] for per_modifier in self.ptrdata]
        return ParametricHamiltonian(self.originalh.copy(), self.h.copy(),
                                     self.modifiers, ptrdata, self.config)

    def summary(self) -> str:
        lines = self.h.summary_lines()
        lines[0] = "Parametric" + lines[0]
        lines.append(f"  Parameters       : {self.parameter_names}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()

    def __repr__(self) -> str:
        n = self.h.lattice.n_sites
        return (f"ParametricHamiltonian({n}×{n}, harmonics={len(self.h.harmonics)}, "
                f"modifiers={len(self.modifiers)}, params={self.parameter_names})")


# =============================================================================
# Construction
# =============================================================================

def parametric(h, *modifiers: ElementModifier, config: Optional[ParametricConfig] = None):
    """
    Build a ParametricHamiltonian applying `modifiers` to `h`.

    Only existing onsites and hoppings of `h` are modified; store explicit
    zero hoppings in `h` for any hop that must be modifiable. `h.optimize()`
    is called first, which stores explicit zero onsites.

    With a modifier as first argument, returns the curried form:
        parametric(m1, m2)(h) == parametric(h, m1, m2)

    Args:
        h: Base Hamiltonian; its sparsity must not change afterwards
        modifiers: Onsite/hopping modifiers
        config: ParametricConfig

    Returns:
        ParametricHamiltonian (or a function of h in the curried form)

    Raises:
        SelectorResolutionError: A modifier references missing sites/sublattices
        MissingStoredEntryError: A forcehermitian hop has no stored partner
    """
    if isinstance(h, ElementModifier):
        mods = (h,) + modifiers
        return lambda ham: parametric(ham, *mods, config=config)

    config = config or ParametricConfig()
    t0 = time.time()

    resolved = tuple(m.resolve(h.lattice) for m in modifiers)
    h.optimize()
    ptrdata = tuple(compile_pointer_data(h, m, config.check_hermitian_partners)
                    for m in resolved)
    ph = ParametricHamiltonian(h, h.copy(), resolved, ptrdata, config)

    if config.verbose:
        print(f"🔨 Compiled {len(resolved)} modifier(s): "
              f"{ph.n_pointer_data():,} pointer data in {time.time() - t0:.3f}s")
    return ph


# =============================================================================
# Evaluation
# =============================================================================

def apply_modifier(h: Hamiltonian, originalh: Hamiltonian, modifier: ElementModifier,
                   ptrdata: List[List[PointerDatum]], kwargs: Dict[str, Any]) -> Hamiltonian:
    """
    Replay one modifier's pointer data (in place on h).

    Args:
        h: Working Hamiltonian (written)
        originalh: Base Hamiltonian (read)
        modifier: Resolved modifier
        ptrdata: One list of data per harmonic
        kwargs: Parameter bindings already filtered by modifier.bind
    """
    f = modifier.function
    for ohar, har, data in zip(originalh.harmonics, h.harmonics, ptrdata):
        nz = har.nonzeros
        onz = ohar.nonzeros
        for datum in data:
            datum.pointer.write(nz, f(*datum.args(onz), **kwargs))
    return h


def evaluate(ph: ParametricHamiltonian, **params) -> Hamiltonian:
    """
    Evaluate a ParametricHamiltonian for a set of parameters.

    Every modifier receives the full parameter set filtered to the names it
    declares; unknown names are ignored.

    Returns:
        The working Hamiltonian ph.h (same object on every call)

    Raises:
        StructuralConsistencyError: The working copy drifted structurally
        MissingParameterError: A modifier's required parameter is missing
    """
    check_consistency(ph, full=ph.config.full_check)
    bound = [m.bind(params) for m in ph.modifiers]
    for modifier, data, kwargs in zip(ph.modifiers, ph.ptrdata, bound):
        apply_modifier(ph.h, ph.originalh, modifier, data, kwargs)
    return ph.h


def parameter_names(ph: ParametricHamiltonian) -> Tuple[str, ...]:
    """Names of the parameters a ParametricHamiltonian depends on."""
    return ph.parameter_names
