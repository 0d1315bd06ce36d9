"""
CLI Utilities
=============

Common utilities shared across CLI commands.
"""

import typer
import numpy as np
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .. import __version__


def print_banner():
    """Print welcome banner."""
    typer.echo(f"""
╔═══════════════════════════════════════════════════════════════╗
║            Parametric Tight-Binding Hamiltonians              ║
║                   parametric-tb v{__version__:<8}                     ║
║        ~ compile once, re-evaluate in O(affected nnz) ~       ║
╚═══════════════════════════════════════════════════════════════╝
    """)


def print_section(title: str, emoji: str = "📦"):
    """Print section header."""
    typer.echo(f"\n{emoji} {title}")
    typer.echo("─" * 50)


def print_key_value(key: str, value: Any, indent: int = 2):
    """Print key-value pair."""
    spaces = " " * indent
    typer.echo(f"{spaces}{key}: {value}")


def _json_default(x):
    if isinstance(x, np.integer):
        return int(x)
    if isinstance(x, np.floating):
        return float(x)
    if isinstance(x, (complex, np.complexfloating)):
        return [float(np.real(x)), float(np.imag(x))]
    if isinstance(x, np.ndarray):
        return x.tolist()
    return x


def save_json(data: dict, output: Path, default_serializer=None):
    """Save data to JSON file."""
    if default_serializer is None:
        default_serializer = _json_default
    output.write_text(json.dumps(data, indent=2, default=default_serializer))
    typer.echo(f"\n💾 Saved to {output}")


def error_exit(message: str, hint: Optional[str] = None):
    """Print error and exit."""
    typer.echo(f"❌ {message}", err=True)
    if hint:
        typer.echo(f"   {hint}", err=True)
    raise typer.Exit(1)


def parse_value(text: str):
    """Parse '1.5' as float and '1+2j' as complex."""
    text = text.strip()
    if 'j' in text:
        return complex(text)
    return float(text)


def parse_params(items: Optional[List[str]]) -> Dict[str, Any]:
    """
    Parse repeated name=value options.

    Raises:
        typer.BadParameter: On malformed items
    """
    params: Dict[str, Any] = {}
    for item in items or []:
        name, sep, value = item.partition('=')
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected name=value, got '{item}'")
        try:
            params[name.strip()] = parse_value(value)
        except ValueError:
            raise typer.BadParameter(f"Cannot parse value of '{item}'") from None
    return params


SUPPORTED_MODELS = ['chain', 'square', 'honeycomb']


def build_model(model: str, sites: int = 10, lx: int = 3, ly: int = 3,
                periodic: bool = False, supercell: int = 1):
    """
    Build a preset ParametricHamiltonian.

    Modifiers:
        onsite : o - mu             (parameter mu, required)
        hopping: t * v              (parameter t, default 1)

    Args:
        model: 'chain', 'square' or 'honeycomb'
        sites: Chain length
        lx, ly: Square patch size
        periodic: Periodic chain / square patch
        supercell: Honeycomb supercell factor

    Returns:
        ParametricHamiltonian
    """
    from ..core import (
        create_chain, create_square_lattice, create_honeycomb,
        build_hamiltonian, onsite_modifier, hopping_modifier, parametric,
    )

    model = model.lower()
    if model == 'chain':
        lat = create_chain(sites, periodic=periodic)
    elif model == 'square':
        lat = create_square_lattice(lx, ly, periodic_x=periodic, periodic_y=periodic)
    elif model == 'honeycomb':
        lat = create_honeycomb()
        if supercell > 1:
            lat = lat.supercell(supercell)
    else:
        raise ValueError(f"Unknown model: {model}. Use: {SUPPORTED_MODELS}")

    h = build_hamiltonian(lat, onsite=0.0, hopping=1.0)
    return parametric(
        h,
        onsite_modifier(lambda o, *, mu: o - mu),
        hopping_modifier(lambda v, *, t=1.0: t * v),
    )
