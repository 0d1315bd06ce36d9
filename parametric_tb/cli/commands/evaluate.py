"""
Evaluate Command
================

Evaluate a preset parametric model for a set of parameters.

Usage:
    parametric-tb evaluate --model chain --sites 10 -p mu=1
    parametric-tb evaluate --model square --Lx 4 --Ly 4 -p mu=0.5 -p t=2 -o h.json
"""

import typer
import numpy as np
from typing import Optional, List
from pathlib import Path

from ..utils import (
    print_banner, print_section, print_key_value,
    build_model, parse_params, save_json, error_exit, SUPPORTED_MODELS,
)


def evaluate(
    model: str = typer.Option("chain", "--model", "-m",
                              help=f"Model: {', '.join(SUPPORTED_MODELS)}"),
    sites: int = typer.Option(10, "-L", "--sites", help="Chain length"),
    lx: int = typer.Option(3, "--Lx", help="Square patch size X"),
    ly: int = typer.Option(3, "--Ly", help="Square patch size Y"),
    periodic: bool = typer.Option(False, "--periodic/--open", help="Boundary conditions"),
    supercell: int = typer.Option(1, "--supercell", help="Honeycomb supercell factor"),
    param: Optional[List[str]] = typer.Option(None, "-p", "--param",
                                              help="Parameter binding name=value (repeatable)"),
    full_check: bool = typer.Option(False, "--full-check",
                                    help="Run the full consistency check first"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Output JSON file"),
):
    """
    Evaluate a preset model and report the modified matrix elements.
    """
    from ...core import MissingParameterError, StructuralConsistencyError

    print_banner()
    params = parse_params(param)

    try:
        ph = build_model(model, sites=sites, lx=lx, ly=ly,
                         periodic=periodic, supercell=supercell)
    except ValueError as e:
        error_exit(str(e), f"Supported models: {SUPPORTED_MODELS}")

    print_section("Evaluation", "⚙️")
    print_key_value("Model", model)
    print_key_value("Parameters", params or "(none)")
    print_key_value("Declared", ph.parameter_names)

    try:
        if full_check:
            ph.check_consistency(full=True)
        h = ph(**params)
    except MissingParameterError as e:
        error_exit(str(e), f"Pass every required parameter with -p, e.g. -p {e.missing[0]}=0")
    except StructuralConsistencyError as e:
        error_exit(str(e))

    print_section("Harmonics", "🧱")
    harmonics = []
    for har in h.harmonics:
        diag = har.h.diagonal() if har.is_zero_cell() else np.zeros(0)
        print_key_value(f"dn={har.dn}", f"nnz={har.nnz}")
        if diag.size:
            print_key_value("diagonal", np.array2string(np.real_if_close(diag), precision=4),
                            indent=4)
        harmonics.append({
            'dn': list(har.dn),
            'colptr': har.colptr,
            'rowval': har.rowval,
            'nonzeros': [[float(v.real), float(v.imag)] for v in np.asarray(har.nonzeros, dtype=complex)],
        })

    if output:
        save_json({
            'model': model,
            'parameters': params,
            'size': list(h.size),
            'harmonics': harmonics,
        }, output)
