"""
Test Example Scripts
====================
"""

import pytest


@pytest.mark.slow
class TestExamples:
    """Smoke tests for the example scripts."""

    def test_honeycomb_flux(self, capsys):
        from parametric_tb.examples.honeycomb_flux import main

        main(supercell=1)
        out = capsys.readouterr().out
        assert "ParametricHamiltonian on a 2D Lattice in 2D space" in out
        assert "✅ Done" in out

    def test_honeycomb_flux_demo_entry(self, capsys):
        from parametric_tb.examples import run_honeycomb_flux_demo

        run_honeycomb_flux_demo(supercell=1)
        assert "✅ Done" in capsys.readouterr().out

    def test_chain_sweep(self, capsys):
        from parametric_tb.examples.chain_sweep import main

        main(L=20, mus=[0.0, 1.0])
        assert "✅ Done" in capsys.readouterr().out
