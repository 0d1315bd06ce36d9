"""
Show Command
============

Build a preset parametric model and print its summary.

Usage:
    parametric-tb show --model chain --sites 10
    parametric-tb show --model honeycomb --supercell 4
"""

import typer

from ..utils import (
    print_banner, print_section, print_key_value,
    build_model, error_exit, SUPPORTED_MODELS,
)


def show(
    model: str = typer.Option("chain", "--model", "-m",
                              help=f"Model: {', '.join(SUPPORTED_MODELS)}"),
    sites: int = typer.Option(10, "-L", "--sites", help="Chain length"),
    lx: int = typer.Option(3, "--Lx", help="Square patch size X"),
    ly: int = typer.Option(3, "--Ly", help="Square patch size Y"),
    periodic: bool = typer.Option(False, "--periodic/--open", help="Boundary conditions"),
    supercell: int = typer.Option(1, "--supercell", help="Honeycomb supercell factor"),
):
    """
    Build a preset model and print the parametric summary.
    """
    print_banner()

    try:
        ph = build_model(model, sites=sites, lx=lx, ly=ly,
                         periodic=periodic, supercell=supercell)
    except ValueError as e:
        error_exit(str(e), f"Supported models: {SUPPORTED_MODELS}")

    print_section("Parametric Hamiltonian", "🔲")
    typer.echo(ph.summary())

    print_section("Pointer Data", "📍")
    for modifier, data in zip(ph.modifiers, ph.ptrdata):
        print_key_value(repr(modifier), sum(len(d) for d in data))
