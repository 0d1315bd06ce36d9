"""
Sweep Command
=============

Repeated evaluation over a parameter range, with timing and an
idempotence check (same parameters -> identical values).

Usage:
    parametric-tb sweep --model square --Lx 20 --Ly 20 --param mu --start 0 --stop 2
"""

import time
import typer
import numpy as np
from typing import Optional, List
from pathlib import Path

from ..utils import (
    print_banner, print_section, print_key_value,
    build_model, parse_params, save_json, error_exit, SUPPORTED_MODELS,
)


def sweep(
    model: str = typer.Option("chain", "--model", "-m",
                              help=f"Model: {', '.join(SUPPORTED_MODELS)}"),
    sites: int = typer.Option(10, "-L", "--sites", help="Chain length"),
    lx: int = typer.Option(3, "--Lx", help="Square patch size X"),
    ly: int = typer.Option(3, "--Ly", help="Square patch size Y"),
    periodic: bool = typer.Option(False, "--periodic/--open", help="Boundary conditions"),
    supercell: int = typer.Option(1, "--supercell", help="Honeycomb supercell factor"),
    name: str = typer.Option("mu", "--param", help="Swept parameter"),
    start: float = typer.Option(0.0, "--start", help="First value"),
    stop: float = typer.Option(1.0, "--stop", help="Last value"),
    steps: int = typer.Option(11, "--steps", help="Number of values"),
    fixed: Optional[List[str]] = typer.Option(None, "-p", "--fixed",
                                              help="Other bindings name=value (repeatable)"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Output JSON file"),
):
    """
    Sweep one parameter and time each evaluation.
    """
    from ...core import MissingParameterError

    print_banner()
    params = parse_params(fixed)

    try:
        ph = build_model(model, sites=sites, lx=lx, ly=ly,
                         periodic=periodic, supercell=supercell)
    except ValueError as e:
        error_exit(str(e), f"Supported models: {SUPPORTED_MODELS}")

    print_section("Sweep", "🔁")
    print_key_value("Model", model)
    print_key_value("Size", f"{ph.size[0]}×{ph.size[1]}")
    print_key_value("Pointer data", ph.n_pointer_data())
    print_key_value(name, f"{start} → {stop} ({steps} steps)")

    values = np.linspace(start, stop, steps)
    times = []
    traces = []
    try:
        with typer.progressbar(values, label="Evaluating") as progress:
            for value in progress:
                t0 = time.perf_counter()
                h = ph(**{**params, name: float(value)})
                times.append(time.perf_counter() - t0)
                traces.append(complex(h.matrix().diagonal().sum()))
        first = ph(**{**params, name: float(values[0])}).matrix().data.copy()
        again = ph(**{**params, name: float(values[0])}).matrix().data
    except MissingParameterError as e:
        error_exit(str(e), f"Bind it with --fixed {e.missing[0]}=<value>")

    idempotent = bool(np.array_equal(first, again))

    print_section("Results", "📊")
    print_key_value("Mean evaluation time", f"{1e3 * np.mean(times):.3f} ms")
    print_key_value("Idempotent", "✅" if idempotent else "❌")
    for value, trace in zip(values, traces):
        print_key_value(f"{name}={value:.4g}", f"Tr h0 = {trace.real:.6g}", indent=4)

    if output:
        save_json({
            'model': model,
            'parameter': name,
            'values': values,
            'traces': [[t.real, t.imag] for t in traces],
            'times': times,
            'idempotent': idempotent,
        }, output)
