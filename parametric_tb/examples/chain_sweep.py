"""
Chain Chemical Potential Sweep
==============================

A finite chain is compiled once against an onsite shift o - mu and then
re-evaluated for many values of mu. Only the diagonal slots are rewritten
per evaluation; the hopping slots are never touched.

Key insight:
  - Build + optimize + compile: once
  - Evaluate: O(number of sites) per mu
  - ph(mu=...) never accumulates: it always starts from the base values

Usage:
    python -m parametric_tb.examples.chain_sweep
"""

import time
import numpy as np
from scipy.sparse.linalg import eigsh

from parametric_tb import (
    create_chain,
    build_hamiltonian,
    onsite_modifier,
    parametric,
)


def lowest_levels(h, k: int = 4) -> np.ndarray:
    """Lowest k eigenvalues of the intra-cell block."""
    m = h.matrix()
    vals = eigsh(m, k=k, which='SA', return_eigenvectors=False)
    return np.sort(vals.real)


def main(L: int = 200, mus=None):
    mus = np.linspace(-1.0, 1.0, 11) if mus is None else np.asarray(mus)

    print("=" * 60)
    print("🔗 Chain Chemical Potential Sweep")
    print("=" * 60)

    t0 = time.time()
    h = build_hamiltonian(create_chain(L), onsite=0.0, hopping=-1.0)
    ph = parametric(h, onsite_modifier(lambda o, *, mu: o - mu))
    print(f"\n  Sites: {L}, pointer data: {ph.n_pointer_data()}")
    print(f"  Setup: {time.time() - t0:.3f}s")

    print(f"\n  {'mu':>8}  {'E0':>10}  {'eval [ms]':>10}")
    for mu in mus:
        t1 = time.perf_counter()
        hmu = ph(mu=float(mu))
        dt = 1e3 * (time.perf_counter() - t1)
        e0 = lowest_levels(hmu, k=1)[0]
        print(f"  {mu:8.3f}  {e0:10.5f}  {dt:10.3f}")

    # Band bottom of an open chain: -2 cos(pi / (L + 1)) - mu
    expected = -2 * np.cos(np.pi / (L + 1)) - mus[-1]
    print(f"\n  Exact E0 at mu={mus[-1]:.3f}: {expected:.5f}")
    print("✅ Done")


if __name__ == "__main__":
    main()
