"""
Text request parsing for tiny-qreg.

Maps text commands (HTTP query parameters or CLI programs) onto engine
calls. Qubits are named by letter (``a`` = qubit 0, ``b`` = qubit 1, ...)
or by decimal index.

Unlike the engine, which ignores out-of-range qubits, this layer
rejects them with ``RequestError`` so a client sees why nothing
happened.

Examples:
    gate=h&q=a            -> H on qubit 0
    gate=cx&c=a&t=b       -> CNOT, control 0, target 1
    "h a; cx a b; m b"    -> program of three commands
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from tiny_qreg.engine import MeasurementResult, StatevectorEngine
from tiny_qreg.gates import GATE_REGISTRY, canonical_name
from tiny_qreg.logging_config import get_logger

logger = get_logger(__name__)

QUBIT_LETTERS = string.ascii_lowercase[:16]

OPERATIONS = tuple(GATE_REGISTRY) + ("measure", "reset")


class RequestError(ValueError):
    """Raised for a malformed or out-of-range request."""


@dataclass(frozen=True)
class GateRequest:
    """One parsed command: operation name plus qubit operands."""

    op: str
    qubits: Tuple[int, ...] = ()

    def __str__(self) -> str:
        if not self.qubits:
            return self.op
        return f"{self.op} " + " ".join(qubit_label(q) for q in self.qubits)


def qubit_label(qubit: int) -> str:
    """Letter name of ``qubit`` (0 -> "a")."""
    if 0 <= qubit < len(QUBIT_LETTERS):
        return QUBIT_LETTERS[qubit]
    return str(qubit)


def parse_qubit(token: Optional[str], num_qubits: int) -> int:
    """
    Parse a qubit token ("a", "B", "2") and check it against the register.

    Raises
    ------
    RequestError
        If the token is missing, malformed, or not below ``num_qubits``.
    """
    if token is None:
        raise RequestError("Missing qubit")
    text = str(token).strip().lower()
    if len(text) == 1 and text in QUBIT_LETTERS:
        qubit = QUBIT_LETTERS.index(text)
    elif text.isdigit():
        qubit = int(text)
    else:
        raise RequestError(f"Invalid qubit: {token!r}")
    if qubit >= num_qubits:
        raise RequestError(
            f"Qubit {token!r} out of range for a {num_qubits}-qubit register"
        )
    return qubit


def _arity(op: str) -> int:
    if op == "reset":
        return 0
    if op == "measure":
        return 1
    return GATE_REGISTRY[op]["n_qubits"]


def _check_op(name: Optional[str]) -> str:
    if not name:
        raise RequestError("Missing gate")
    op = canonical_name(name)
    if op not in OPERATIONS:
        raise RequestError(f"Unknown gate: {name!r}. Available: {', '.join(OPERATIONS)}")
    return op


def parse_request(params: Mapping[str, str], num_qubits: int) -> GateRequest:
    """
    Parse query parameters into a ``GateRequest``.

    Keys: ``gate`` (or ``g``) names the operation; single-qubit
    operations read ``q``; ``cx`` reads ``c`` and ``t``.
    """
    op = _check_op(params.get("gate") or params.get("g"))
    arity = _arity(op)

    if arity == 0:
        return GateRequest(op)
    if arity == 1:
        return GateRequest(op, (parse_qubit(params.get("q"), num_qubits),))

    control = parse_qubit(params.get("c"), num_qubits)
    target = parse_qubit(params.get("t"), num_qubits)
    if control == target:
        raise RequestError("Control and target must differ")
    return GateRequest(op, (control, target))


_SEPARATORS = re.compile(r"[;\n]")


def parse_program(text: str, num_qubits: int) -> List[GateRequest]:
    """
    Parse a program of ``;``- or newline-separated commands.

    Each command is ``<gate> [qubit ...]``; commas are treated as
    whitespace and ``#`` starts a comment.
    """
    program = []
    for lineno, raw in enumerate(_SEPARATORS.split(text), start=1):
        line = raw.split('#')[0].replace(',', ' ').strip()
        if not line:
            continue
        parts = line.split()
        try:
            op = _check_op(parts[0])
            arity = _arity(op)
            operands = parts[1:]
            if len(operands) != arity:
                raise RequestError(
                    f"'{op}' takes {arity} qubit(s), got {len(operands)}"
                )
            qubits = tuple(parse_qubit(tok, num_qubits) for tok in operands)
            if len(set(qubits)) != len(qubits):
                raise RequestError("Control and target must differ")
        except RequestError as e:
            raise RequestError(f"Command {lineno} ({line!r}): {e}") from e
        program.append(GateRequest(op, qubits))
    return program


def execute(engine: StatevectorEngine, request: GateRequest) -> Optional[MeasurementResult]:
    """Apply ``request`` to ``engine``. Returns the result of a measurement."""
    logger.debug("execute %s", request)
    if request.op == "reset":
        engine.reset()
        return None
    if request.op == "measure":
        return engine.measure(request.qubits[0])
    getattr(engine, GATE_REGISTRY[request.op]["method"])(*request.qubits)
    return None


def run_program(engine: StatevectorEngine, program) -> List[MeasurementResult]:
    """Execute every request of ``program``; return the measurement results."""
    results = []
    for request in program:
        result = execute(engine, request)
        if result is not None:
            results.append(result)
    return results
