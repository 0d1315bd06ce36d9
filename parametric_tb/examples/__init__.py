"""
parametric-tb Examples
======================

Example scripts demonstrating parametric Hamiltonians.

Examples:
  - chain_sweep.py: Chemical potential sweep of a finite chain
  - honeycomb_flux.py: Vector potential on a honeycomb supercell

Usage:
    python -m parametric_tb.examples.chain_sweep
    python -m parametric_tb.examples.honeycomb_flux
"""

__all__ = [
    'run_chain_sweep_demo',
    'run_honeycomb_flux_demo',
]


# Lazy imports to avoid loading everything
def run_chain_sweep_demo(**kwargs):
    """Run the chain chemical potential sweep."""
    from .chain_sweep import main
    main(**kwargs)


def run_honeycomb_flux_demo(**kwargs):
    """Run the honeycomb vector potential demonstration."""
    from .honeycomb_flux import main
    main(**kwargs)
