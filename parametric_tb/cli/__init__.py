"""
parametric-tb CLI
=================

Command-line interface for parametric tight-binding Hamiltonians.

Usage:
    parametric-tb info
    parametric-tb show --model honeycomb --supercell 4
    parametric-tb evaluate --model chain --sites 10 -p mu=1 -o out.json
    parametric-tb sweep --model square --Lx 20 --Ly 20 --param mu --start 0 --stop 2

Architecture:
    cli/
    ├── __init__.py       # This file - app definition
    ├── commands/         # Individual command modules
    │   ├── info.py
    │   ├── show.py
    │   ├── evaluate.py
    │   └── sweep.py
    └── utils.py          # Shared utilities
"""

import typer

# Create CLI app
app = typer.Typer(
    name="parametric-tb",
    help="Parametric tight-binding Hamiltonians - compile once, evaluate fast",
    add_completion=False,
)


# =============================================================================
# Register Commands
# =============================================================================

from .commands import (
    info,
    show,
    evaluate,
    sweep,
)

app.command()(info)
app.command()(show)
app.command()(evaluate)
app.command()(sweep)


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
