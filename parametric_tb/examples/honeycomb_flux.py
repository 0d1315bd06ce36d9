"""
Honeycomb Vector Potential
==========================

Uniform vector potential A = (0, B) on a honeycomb supercell, applied as a
hopping modifier t -> t exp(i B dr_y). The adjoint slot of every hop is
rewritten with the conjugate, so every Bloch matrix stays Hermitian.

Usage:
    python -m parametric_tb.examples.honeycomb_flux
"""

import numpy as np

from parametric_tb import (
    create_honeycomb,
    build_hamiltonian,
    onsite_modifier,
    hopping_modifier,
    parametric,
)


def bands_at(ph, phi, **params) -> np.ndarray:
    """Eigenvalues of H(phi) for one parameter set."""
    m = ph(**params).bloch(phi).toarray()
    return np.linalg.eigvalsh(m)


def main(supercell: int = 3):
    print("=" * 60)
    print("⬡ Honeycomb Vector Potential")
    print("=" * 60)

    lat = create_honeycomb().supercell(supercell)
    h = build_hamiltonian(lat, onsite=0.0, hopping=-2.7, verbose=True)
    ph = parametric(
        h,
        onsite_modifier(lambda o, *, m=0.0: o + m, sublats='A'),
        onsite_modifier(lambda o, *, m=0.0: o - m, sublats='B'),
        hopping_modifier(lambda t, r, dr, *, B=0.0: t * np.exp(1j * B * dr[1])),
    )
    print()
    print(ph)

    print(f"\n  {'B':>6}  {'m':>6}  {'gap at Γ':>10}")
    for B in (0.0, 0.1, 0.2):
        for m in (0.0, 0.3):
            e = bands_at(ph, [0.0, 0.0], B=B, m=m)
            mid = len(e) // 2
            print(f"  {B:6.2f}  {m:6.2f}  {e[mid] - e[mid - 1]:10.5f}")

    print("✅ Done")


if __name__ == "__main__":
    main()
