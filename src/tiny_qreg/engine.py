"""
Fixed-size statevector engine.

Holds the amplitudes of a Q-qubit register as two float64 arrays
(real and imaginary parts) allocated once at construction. Every gate
walks the index space in (i0, i1) pairs, where i0 has the target bit
clear and i1 = i0 | mask, and updates both members from scalar
temporaries. No auxiliary arrays are allocated while a gate runs.

Qubit k is bit k of the basis index (little-endian).

Memory: 16 bytes * 2^Q.
    3 qubits = 128 B, 10 qubits = 16 KB, 16 qubits = 1 MB.

Out-of-range qubits are a silent no-op for every gate and for
measurement. Use ``is_valid_qubit`` to check beforehand.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy import ndarray

from tiny_qreg.config import DEFAULT_CONFIG, MAX_QUBITS, EngineConfig
from tiny_qreg.logging_config import get_logger

logger = get_logger(__name__)

_SQRT2_INV = 1.0 / math.sqrt(2.0)
_COS_PI_4 = math.cos(math.pi / 4)
_SIN_PI_4 = math.sin(math.pi / 4)


@dataclass(frozen=True)
class MeasurementResult:
    """Outcome of the most recent single-qubit measurement."""

    outcome: int
    qubit: int


class StatevectorEngine:
    """
    In-place statevector simulator for a fixed register.

    Parameters
    ----------
    num_qubits : int, optional
        Register size Q. Defaults to ``config.num_qubits``.
    config : EngineConfig, optional
        Normalisation floor and renormalisation policy.

    Example
    -------
    >>> eng = StatevectorEngine(2)
    >>> eng.apply_h(0)
    >>> eng.apply_controlled_x(0, 1)
    >>> round(eng.probability_of(3), 3)
    0.5
    """

    def __init__(self, num_qubits: int | None = None,
                 config: EngineConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG
        if num_qubits is None:
            num_qubits = self.config.num_qubits
        if not 1 <= num_qubits <= MAX_QUBITS:
            raise ValueError(
                f"num_qubits must be in [1, {MAX_QUBITS}], got {num_qubits}"
            )
        self.num_qubits = num_qubits
        self.dim = 1 << num_qubits
        self._re = np.zeros(self.dim, dtype=np.float64)
        self._im = np.zeros(self.dim, dtype=np.float64)
        self._last: MeasurementResult | None = None
        self._gates_since_normalize = 0
        self.reset()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Reset to |00...0⟩ and forget the last measurement."""
        self._re.fill(0.0)
        self._im.fill(0.0)
        self._re[0] = 1.0
        self._last = None
        self._gates_since_normalize = 0

    def register_size(self) -> int:
        return self.num_qubits

    def last_measurement(self) -> MeasurementResult | None:
        return self._last

    def is_valid_qubit(self, qubit: int) -> bool:
        """True if ``qubit`` addresses a qubit of this register."""
        return 0 <= qubit < self.num_qubits

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def real(self) -> ndarray:
        return self._re.copy()

    @property
    def imag(self) -> ndarray:
        return self._im.copy()

    def statevector(self) -> ndarray:
        """Return the state as a complex128 copy."""
        return self._re + 1j * self._im

    def set_state(self, amplitudes) -> None:
        """
        Overwrite the amplitudes with ``amplitudes`` (length 2^Q).

        The input is copied into the existing buffers and is not
        normalised.
        """
        values = np.asarray(amplitudes, dtype=np.complex128)
        if values.shape != (self.dim,):
            raise ValueError(
                f"State shape {values.shape} != expected ({self.dim},)"
            )
        self._re[:] = values.real
        self._im[:] = values.imag

    # ------------------------------------------------------------------
    # Probability queries
    # ------------------------------------------------------------------

    def probability_of(self, index: int) -> float:
        """
        Probability of basis state ``index``.

        Indices outside [0, 2^Q) return 0.0.
        """
        if not 0 <= index < self.dim:
            return 0.0
        re = self._re[index]
        im = self._im[index]
        return float(re * re + im * im)

    def probabilities(self) -> ndarray:
        """Probabilities of all basis states."""
        return self._re * self._re + self._im * self._im

    def probability_qubit_is_one(self, qubit: int) -> float:
        """Total probability of basis states with bit ``qubit`` set."""
        if not self.is_valid_qubit(qubit):
            return 0.0
        mask = 1 << qubit
        probs = self.probabilities()
        return float(probs[(np.arange(self.dim) & mask) != 0].sum())

    def max_basis_state_probability(self) -> float:
        return float(self.probabilities().max())

    def total_probability(self) -> float:
        return float(self.probabilities().sum())

    # ------------------------------------------------------------------
    # Single-qubit gates
    # ------------------------------------------------------------------

    def _pairs(self, qubit: int):
        """Yield (i0, i1) with bit ``qubit`` clear in i0 and set in i1."""
        step = 1 << qubit
        block = step << 1
        for base in range(0, self.dim, block):
            for off in range(step):
                i0 = base + off
                yield i0, i0 + step

    def _skip(self, name: str, *qubits: int) -> bool:
        for q in qubits:
            if not self.is_valid_qubit(q):
                logger.debug("%s ignored: qubit %d out of range", name, q)
                return True
        return False

    def apply_x(self, qubit: int) -> None:
        """Pauli-X: swap each amplitude with its bit-flipped partner."""
        if self._skip("X", qubit):
            return
        re, im = self._re, self._im
        for i0, i1 in self._pairs(qubit):
            r0, m0 = re[i0], im[i0]
            re[i0], im[i0] = re[i1], im[i1]
            re[i1], im[i1] = r0, m0
        self._after_gate()

    def apply_y(self, qubit: int) -> None:
        """Pauli-Y: new(i0) = -i·old(i1), new(i1) = i·old(i0)."""
        if self._skip("Y", qubit):
            return
        re, im = self._re, self._im
        for i0, i1 in self._pairs(qubit):
            r0, m0 = re[i0], im[i0]
            r1, m1 = re[i1], im[i1]
            # -i * (r1 + i m1) = m1 - i r1
            re[i0], im[i0] = m1, -r1
            # i * (r0 + i m0) = -m0 + i r0
            re[i1], im[i1] = -m0, r0
        self._after_gate()

    def apply_z(self, qubit: int) -> None:
        """Pauli-Z: negate amplitudes with bit ``qubit`` set."""
        if self._skip("Z", qubit):
            return
        re, im = self._re, self._im
        for _, i1 in self._pairs(qubit):
            re[i1] = -re[i1]
            im[i1] = -im[i1]
        self._after_gate()

    def apply_h(self, qubit: int) -> None:
        """Hadamard on ``qubit``."""
        if self._skip("H", qubit):
            return
        re, im = self._re, self._im
        for i0, i1 in self._pairs(qubit):
            r0, m0 = re[i0], im[i0]
            r1, m1 = re[i1], im[i1]
            re[i0] = (r0 + r1) * _SQRT2_INV
            im[i0] = (m0 + m1) * _SQRT2_INV
            re[i1] = (r0 - r1) * _SQRT2_INV
            im[i1] = (m0 - m1) * _SQRT2_INV
        self._after_gate()

    def apply_t(self, qubit: int) -> None:
        """T gate: rotate the |1⟩ component by π/4."""
        if self._skip("T", qubit):
            return
        re, im = self._re, self._im
        for _, i1 in self._pairs(qubit):
            r, m = re[i1], im[i1]
            re[i1] = r * _COS_PI_4 - m * _SIN_PI_4
            im[i1] = r * _SIN_PI_4 + m * _COS_PI_4
        self._after_gate()

    # ------------------------------------------------------------------
    # Two-qubit gate
    # ------------------------------------------------------------------

    def apply_controlled_x(self, control: int, target: int) -> None:
        """
        CNOT: flip ``target`` on every basis state where ``control`` is 1.

        No-op when either index is out of range or they are equal.
        """
        if self._skip("CX", control, target):
            return
        if control == target:
            logger.debug("CX ignored: control == target == %d", control)
            return
        re, im = self._re, self._im
        cmask = 1 << control
        for i0, i1 in self._pairs(target):
            if not i0 & cmask:
                continue
            r0, m0 = re[i0], im[i0]
            re[i0], im[i0] = re[i1], im[i1]
            re[i1], im[i1] = r0, m0
        self._after_gate()

    # ------------------------------------------------------------------
    # Measurement & normalisation
    # ------------------------------------------------------------------

    def measure(self, qubit: int) -> MeasurementResult | None:
        """
        Measure ``qubit`` and collapse the state.

        The outcome is deterministic: 0 if P(0) > 0.5, else 1.
        Returns None (and changes nothing) for an out-of-range qubit.
        """
        if self._skip("MEASURE", qubit):
            return None
        # Summed over the 0-branch, not 1 - P(1), so drift in the
        # total mass does not leak into the comparison.
        prob0 = 0.0
        mask = 1 << qubit
        for i in range(self.dim):
            if not i & mask:
                prob0 += self.probability_of(i)
        outcome = 0 if prob0 > 0.5 else 1

        re, im = self._re, self._im
        for i in range(self.dim):
            if ((i >> qubit) & 1) != outcome:
                re[i] = 0.0
                im[i] = 0.0
        self.normalize()

        self._last = MeasurementResult(outcome=outcome, qubit=qubit)
        logger.debug("measured qubit %d -> %d (p0=%.6f)", qubit, outcome, prob0)
        return self._last

    def normalize(self) -> float:
        """
        Rescale the state to unit norm.

        States with total probability at or below ``config.epsilon``
        are left untouched. Returns the total probability before
        rescaling.
        """
        total = self.total_probability()
        self._gates_since_normalize = 0
        if total <= self.config.epsilon:
            logger.debug("normalize skipped: total probability %.3e", total)
            return total
        scale = 1.0 / math.sqrt(total)
        self._re *= scale
        self._im *= scale
        return total

    def _after_gate(self) -> None:
        every = self.config.renormalize_every
        if every <= 0:
            return
        self._gates_since_normalize += 1
        if self._gates_since_normalize >= every:
            self.normalize()

    def __repr__(self) -> str:
        return f"StatevectorEngine(qubits={self.num_qubits}, dim={self.dim})"
