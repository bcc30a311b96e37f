"""Tests for gate definitions and kernel agreement with dense operators."""

import numpy as np
import pytest

from tiny_qreg import StatevectorEngine
from tiny_qreg import gates as g


# ---------------------------------------------------------------------------
# Unitarity tests: every gate must satisfy U†U = I
# ---------------------------------------------------------------------------

FIXED_GATES = [
    ("X", g.X), ("Y", g.Y), ("Z", g.Z), ("H", g.H), ("T", g.T), ("CNOT", g.CNOT),
]


@pytest.mark.parametrize("name,matrix", FIXED_GATES)
def test_fixed_gate_unitary(name, matrix):
    """Every gate must be unitary: U†U = I."""
    dim = matrix.shape[0]
    product = matrix.conj().T @ matrix
    np.testing.assert_allclose(product, np.eye(dim), atol=1e-12, err_msg=f"{name} is not unitary")
    assert g.is_unitary(matrix)


def test_non_unitary_detected():
    assert not g.is_unitary(np.array([[1, 1], [0, 1]], dtype=np.complex128))


def test_cx_alias():
    assert g.CX is g.CNOT


# ---------------------------------------------------------------------------
# Registry lookup
# ---------------------------------------------------------------------------

def test_get_matrix_case_insensitive():
    np.testing.assert_array_equal(g.get_matrix("H"), g.H)
    np.testing.assert_array_equal(g.get_matrix("cnot"), g.CNOT)


def test_get_matrix_unknown():
    with pytest.raises(KeyError, match="Unknown gate"):
        g.get_matrix("swap")


def test_canonical_name():
    assert g.canonical_name(" CNOT ") == "cx"
    assert g.canonical_name("M") == "measure"
    assert g.canonical_name("h") == "h"


def test_registry_methods_exist_on_engine():
    eng = StatevectorEngine(2)
    for name, info in g.GATE_REGISTRY.items():
        assert callable(getattr(eng, info["method"])), name


def test_catalog_names_are_known():
    names = {entry["name"] for entry in g.GATE_CATALOG}
    assert set(g.GATE_REGISTRY) <= names
    assert {"measure", "reset"} <= names


# ---------------------------------------------------------------------------
# expand
# ---------------------------------------------------------------------------

def test_expand_single_qubit_matches_kron():
    # Little-endian: qubit 0 is the rightmost Kronecker factor
    full = g.expand(g.X, [0], 2)
    np.testing.assert_array_equal(full, np.kron(np.eye(2), g.X))
    full = g.expand(g.X, [1], 2)
    np.testing.assert_array_equal(full, np.kron(g.X, np.eye(2)))


def test_expand_cnot_control_high_bit():
    # control = qubit 1 (high), target = qubit 0 matches the textbook matrix
    # once rows are read as |q1 q0⟩
    full = g.expand(g.CNOT, [1, 0], 2)
    np.testing.assert_array_equal(full, g.CNOT)


def test_expand_rejects_bad_shape():
    with pytest.raises(ValueError):
        g.expand(g.CNOT, [0], 2)
    with pytest.raises(ValueError):
        g.expand(g.CNOT, [1, 1], 2)


# ---------------------------------------------------------------------------
# Pair kernels vs dense reference
# ---------------------------------------------------------------------------

N_QUBITS = 3


def random_state(seed):
    rng = np.random.default_rng(seed)
    dim = 1 << N_QUBITS
    psi = rng.normal(size=dim) + 1j * rng.normal(size=dim)
    return psi / np.linalg.norm(psi)


SINGLE = [("x", g.X), ("y", g.Y), ("z", g.Z), ("h", g.H), ("t", g.T)]


@pytest.mark.parametrize("name,matrix", SINGLE)
@pytest.mark.parametrize("qubit", range(N_QUBITS))
def test_single_qubit_kernel_matches_reference(name, matrix, qubit):
    psi = random_state(seed=qubit + 10)
    eng = StatevectorEngine(N_QUBITS)
    eng.set_state(psi)
    getattr(eng, f"apply_{name}")(qubit)

    expected = g.expand(matrix, [qubit], N_QUBITS) @ psi
    np.testing.assert_allclose(eng.statevector(), expected, atol=1e-12)


@pytest.mark.parametrize("control,target", [(0, 1), (1, 0), (0, 2), (2, 0), (1, 2), (2, 1)])
def test_controlled_x_kernel_matches_reference(control, target):
    psi = random_state(seed=control * 3 + target)
    eng = StatevectorEngine(N_QUBITS)
    eng.set_state(psi)
    eng.apply_controlled_x(control, target)

    expected = g.expand(g.CNOT, [control, target], N_QUBITS) @ psi
    np.testing.assert_allclose(eng.statevector(), expected, atol=1e-12)


def test_circuit_matches_reference():
    """A short mixed circuit agrees with the product of dense operators."""
    eng = StatevectorEngine(N_QUBITS)
    psi = np.zeros(1 << N_QUBITS, dtype=np.complex128)
    psi[0] = 1.0

    steps = [
        ("h", [0]), ("t", [0]), ("cx", [0, 2]), ("y", [1]),
        ("h", [2]), ("z", [0]), ("cx", [2, 1]), ("x", [0]),
    ]
    for name, qubits in steps:
        if name == "cx":
            eng.apply_controlled_x(*qubits)
        else:
            getattr(eng, f"apply_{name}")(*qubits)
        psi = g.expand(g.get_matrix(name), qubits, N_QUBITS) @ psi

    np.testing.assert_allclose(eng.statevector(), psi, atol=1e-12)
