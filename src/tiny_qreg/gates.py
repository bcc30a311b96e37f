"""
Gate definitions for tiny-qreg.

The engine applies gates with in-place pair kernels and never builds a
matrix. The dense matrices here are the reference definitions: the
listener advertises them through ``GATE_CATALOG`` and the test suite
checks every kernel against ``expand``.

Gate set:
    - Single-qubit: X, Y, Z, H, T
    - Two-qubit: CNOT (CX)
    - Non-unitary: measure, reset
"""

from __future__ import annotations

import numpy as np
from numpy import ndarray

# Type alias
Matrix = ndarray

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / np.sqrt(2.0)

# ---------------------------------------------------------------------------
# Single-qubit gates
# ---------------------------------------------------------------------------

X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
"""Pauli-X (NOT) gate."""

Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
"""Pauli-Y gate."""

Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)
"""Pauli-Z gate."""

H = np.array([[1, 1], [1, -1]], dtype=np.complex128) * _SQRT2_INV
"""Hadamard gate."""

T = np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128)
"""T gate: π/4 phase on |1⟩."""

# ---------------------------------------------------------------------------
# Two-qubit gates (4x4, first listed qubit is the high local bit)
# ---------------------------------------------------------------------------

CNOT = np.array(
    [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]],
    dtype=np.complex128,
)
"""Controlled-NOT (CX) gate, qubits ordered (control, target)."""
CX = CNOT  # alias


# ---------------------------------------------------------------------------
# Gate metadata
# ---------------------------------------------------------------------------

GATE_REGISTRY: dict[str, dict] = {
    "x": {"matrix": X, "n_qubits": 1, "method": "apply_x"},
    "y": {"matrix": Y, "n_qubits": 1, "method": "apply_y"},
    "z": {"matrix": Z, "n_qubits": 1, "method": "apply_z"},
    "h": {"matrix": H, "n_qubits": 1, "method": "apply_h"},
    "t": {"matrix": T, "n_qubits": 1, "method": "apply_t"},
    "cx": {"matrix": CNOT, "n_qubits": 2, "method": "apply_controlled_x"},
}

ALIASES = {
    "cnot": "cx",
    "m": "measure",
}

GATE_CATALOG = [
    {"name": "x", "label": "X", "category": "single", "n_qubits": 1,
     "description": "Pauli-X (NOT gate)"},
    {"name": "y", "label": "Y", "category": "single", "n_qubits": 1,
     "description": "Pauli-Y gate"},
    {"name": "z", "label": "Z", "category": "single", "n_qubits": 1,
     "description": "Pauli-Z (phase flip)"},
    {"name": "h", "label": "H", "category": "single", "n_qubits": 1,
     "description": "Hadamard: creates superposition"},
    {"name": "t", "label": "T", "category": "single", "n_qubits": 1,
     "description": "T gate (π/4 phase)"},
    {"name": "cx", "label": "CX", "category": "multi", "n_qubits": 2,
     "description": "CNOT (controlled-X), qubits: control, target"},
    {"name": "measure", "label": "M", "category": "measure", "n_qubits": 1,
     "description": "Measure qubit (collapses to the likelier outcome)"},
    {"name": "reset", "label": "R", "category": "reset", "n_qubits": 0,
     "description": "Reset register to |0...0⟩"},
]


def canonical_name(name: str) -> str:
    """Lower-case ``name`` and resolve aliases ("CNOT" -> "cx")."""
    key = name.strip().lower()
    return ALIASES.get(key, key)


def get_matrix(name: str) -> Matrix:
    """
    Look up a gate matrix by name (case-insensitive).

    Raises
    ------
    KeyError
        If the gate is not a unitary of this gate set.
    """
    key = canonical_name(name)
    if key not in GATE_REGISTRY:
        raise KeyError(f"Unknown gate: '{name}'. Available: {sorted(GATE_REGISTRY)}")
    return GATE_REGISTRY[key]["matrix"]


def expand(matrix: Matrix, qubits, num_qubits: int) -> Matrix:
    """
    Embed a k-qubit gate into the full 2^n x 2^n register operator.

    ``qubits[0]`` is the most significant bit of the gate's local
    index; register indices are little-endian (qubit q is bit q).

    Parameters
    ----------
    matrix : ndarray
        2^k x 2^k unitary.
    qubits : sequence of int
        Register qubits the gate acts on, in local-index order.
    num_qubits : int
        Register size.

    Returns
    -------
    ndarray
        Full operator, complex128.
    """
    qubits = list(qubits)
    k = len(qubits)
    if matrix.shape != (1 << k, 1 << k):
        raise ValueError(f"Matrix shape {matrix.shape} does not match {k} qubit(s)")
    if len(set(qubits)) != k:
        raise ValueError(f"Duplicate qubits: {qubits}")

    dim = 1 << num_qubits
    gate_mask = 0
    for q in qubits:
        gate_mask |= 1 << q

    def local(i: int) -> int:
        idx = 0
        for q in qubits:
            idx = (idx << 1) | ((i >> q) & 1)
        return idx

    full = np.zeros((dim, dim), dtype=np.complex128)
    for col in range(dim):
        for row in range(dim):
            if (row & ~gate_mask) != (col & ~gate_mask):
                continue
            full[row, col] = matrix[local(row), local(col)]
    return full


def is_unitary(m: Matrix, tol: float = 1e-9) -> bool:
    product = m @ m.conj().T
    return np.allclose(product, np.eye(len(m)), atol=tol)
