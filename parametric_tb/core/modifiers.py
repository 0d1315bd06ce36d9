"""
Element Modifiers
=================

User functions that rewrite stored onsite/hopping values as a function of
external parameters.

Variants (decided from the positional arity of the function):

    Uniform : f(v; params...)          -> new value
    Onsite  : f(v, r; params...)       -> new value
    Hopping : f(v, r, dr; params...)   -> new value

Parameters are the keyword-only arguments of f; those without a default
are required at evaluation time:

    >>> shift = onsite_modifier(lambda o, *, mu: o - mu)
    >>> shift.parameters
    ('mu',)
    >>> peierls = hopping_modifier(lambda t, r, dr, *, B=0.0: t * np.exp(1j * B * r[0] * dr[1]))
"""

import enum
import inspect
from typing import Callable, Dict, Any, Tuple, FrozenSet
from dataclasses import dataclass, replace

from .lattice import Lattice
from .selectors import siteselector, hopselector
from .errors import MissingParameterError


class ModifierKind(enum.Enum):
    """Geometric payload a modifier needs"""
    UNIFORM = 1
    ONSITE = 2
    HOPPING = 3


_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY,
               inspect.Parameter.POSITIONAL_OR_KEYWORD)


def inspect_modifier_function(f: Callable, allowed: Tuple[int, ...]):
    """
    Read arity and declared parameters from a modifier function.

    Args:
        f: User function
        allowed: Admissible numbers of positional slots

    Returns:
        (arity, parameters, required, takes_any)

    Raises:
        ValueError: If the positional arity is not allowed
    """
    sig = inspect.signature(f)
    params = list(sig.parameters.values())

    arity = sum(1 for p in params if p.kind in _POSITIONAL)
    if any(p.kind == inspect.Parameter.VAR_POSITIONAL for p in params):
        raise ValueError(f"Modifier function {f!r} must not take *args")
    if arity not in allowed:
        raise ValueError(
            f"Modifier function {f!r} takes {arity} positional argument(s); "
            f"expected one of {allowed}"
        )

    keyword = [p for p in params if p.kind == inspect.Parameter.KEYWORD_ONLY]
    parameters = tuple(p.name for p in keyword)
    required = frozenset(p.name for p in keyword if p.default is inspect.Parameter.empty)
    takes_any = any(p.kind == inspect.Parameter.VAR_KEYWORD for p in params)
    return arity, parameters, required, takes_any


@dataclass(frozen=True)
class ElementModifier:
    """
    A modifier function, its kind and its selector.

    Attributes:
        function: User function
        kind: ModifierKind (UNIFORM, ONSITE or HOPPING)
        selector: SiteSelector/HopSelector, or their resolved versions
        parameters: Declared parameter names
        required: Parameters without default
        takes_any: Function accepts **kwargs (receives every binding)
        onsite: True for onsite modifiers
    """
    function: Callable
    kind: ModifierKind
    selector: Any
    parameters: Tuple[str, ...]
    required: FrozenSet[str]
    takes_any: bool
    onsite: bool

    @property
    def is_resolved(self) -> bool:
        return hasattr(self.selector, 'matches')

    def resolve(self, lattice: Lattice) -> 'ElementModifier':
        """
        Bind the selector to a lattice.

        Raises:
            SelectorResolutionError: Unknown sublattices, sites or translations
        """
        if self.is_resolved:
            if self.selector.lattice is lattice:
                return self
            raise ValueError("Modifier is already resolved against a different lattice")
        return replace(self, selector=self.selector.resolve(lattice))

    def bind(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Keyword arguments for one evaluation.

        Raises:
            MissingParameterError: If a required parameter is absent
        """
        missing = self.required.difference(params)
        if missing:
            raise MissingParameterError(sorted(missing), self)
        if self.takes_any:
            return dict(params)
        return {name: params[name] for name in self.parameters if name in params}

    def __call__(self, *args, **params):
        return self.function(*args, **self.bind(params))

    def __repr__(self) -> str:
        name = getattr(self.function, '__name__', 'function')
        where = 'onsite' if self.onsite else 'hopping'
        return f"ElementModifier({where}, {self.kind.name.lower()}, {name}, params={self.parameters})"


def onsite_modifier(f: Callable, region=None, sublats=None, indices=None) -> ElementModifier:
    """
    Modifier of onsite energies.

    Args:
        f: f(o; params...) or f(o, r; params...)
        region, sublats, indices: Site selection (see SiteSelector)

    Returns:
        Unresolved ElementModifier
    """
    arity, parameters, required, takes_any = inspect_modifier_function(f, (1, 2))
    kind = ModifierKind.UNIFORM if arity == 1 else ModifierKind.ONSITE
    selector = siteselector(region=region, sublats=sublats, indices=indices)
    return ElementModifier(f, kind, selector, parameters, required, takes_any, True)


def hopping_modifier(f: Callable, region=None, sublats=None, dns=None, range=None,
                     forcehermitian: bool = True) -> ElementModifier:
    """
    Modifier of hopping amplitudes.

    With forcehermitian, H_dn == H_-dn^† holds for functions that are
    periodic in the lattice (depending on dr, or on r only up to a Bravais
    translation). Adjoint slots are evaluated at the canonical midpoint of
    the partner bond, which differs by A @ dn for intercell hops, so a
    non-periodic gauge such as exp(i B r_x dr_y) breaks it across harmonics.

    Args:
        f: f(t; params...) or f(t, r, dr; params...)
        region, sublats, dns, range: Hop selection (see HopSelector)
        forcehermitian: Also write the adjoint of every modified hop

    Returns:
        Unresolved ElementModifier
    """
    arity, parameters, required, takes_any = inspect_modifier_function(f, (1, 3))
    kind = ModifierKind.UNIFORM if arity == 1 else ModifierKind.HOPPING
    selector = hopselector(region=region, sublats=sublats, dns=dns, range=range,
                           forcehermitian=forcehermitian)
    return ElementModifier(f, kind, selector, parameters, required, takes_any, False)


def merge_parameters(modifiers) -> Tuple[str, ...]:
    """Union of declared parameter names, in first-appearance order."""
    names = []
    for modifier in modifiers:
        for name in modifier.parameters:
            if name not in names:
                names.append(name)
    return tuple(names)
