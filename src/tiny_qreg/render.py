"""
Text renderers for the register state.

Features:
- LED bar chart: one column per basis state, scaled to the most
  probable state
- Per-qubit probability lines for a small character display
- Page rotation for displays with fewer rows than qubits
- Terminal bar list (same layout as the dashboard's text view)

All renderers only read the engine through its query methods.
"""
from typing import List, Optional

from tiny_qreg.engine import StatevectorEngine

LIT = '█'
UNLIT = '·'


def bitstring(index: int, num_qubits: int) -> str:
    """Basis index as a bitstring, highest qubit first."""
    return format(index, f'0{num_qubits}b')


def bar_levels(engine: StatevectorEngine, led_count: int = 8) -> List[int]:
    """
    Number of lit LEDs for each basis state.

    The most probable basis state lights the whole column; the others
    are scaled relative to it. A state with no probability mass at all
    lights nothing.
    """
    peak = engine.max_basis_state_probability()
    if peak <= 0.0:
        return [0] * engine.dim
    return [
        int(round(engine.probability_of(i) / peak * led_count))
        for i in range(engine.dim)
    ]


def render_bar_chart(engine: StatevectorEngine, led_count: int = 8) -> str:
    """
    Draw the LED bar chart as text, top row first.

    Example (Bell pair, 2 qubits, 4 LEDs):
        █··█
        █··█
        █··█
        █··█
        0123
    """
    levels = bar_levels(engine, led_count)
    rows = []
    for height in range(led_count, 0, -1):
        rows.append(''.join(LIT if lvl >= height else UNLIT for lvl in levels))
    # Footer: basis index per column, in hex so each fits one character
    rows.append(''.join(format(i % 16, 'x') for i in range(engine.dim)))
    return '\n'.join(rows)


def qubit_lines(engine: StatevectorEngine, width: int = 16) -> List[str]:
    """One line per qubit: P(1) plus the last measured value, if any."""
    last = engine.last_measurement()
    lines = []
    for q in range(engine.num_qubits):
        line = f"q{q} P1={engine.probability_qubit_is_one(q):.3f}"
        if last is not None and last.qubit == q:
            line += f" M={last.outcome}"
        lines.append(line[:width])
    return lines


class DisplayRotator:
    """
    Paginate text lines onto a fixed-size character display.

    Each call to ``advance`` moves to the next page, wrapping back to
    the first one.
    """

    def __init__(self, lines: List[str], width: int = 16, height: int = 2):
        if width < 1 or height < 1:
            raise ValueError("Display must be at least 1x1")
        self.width = width
        self.height = height
        self.position = 0
        self.update(lines)

    def update(self, lines: List[str]) -> None:
        """Replace the content, keeping the current page if it still exists."""
        self.lines = [line[:self.width] for line in lines]
        if self.position >= self.page_count:
            self.position = 0

    @property
    def page_count(self) -> int:
        return max(1, -(-len(self.lines) // self.height))

    def page(self) -> List[str]:
        """Rows of the current page, each padded to the display width."""
        start = self.position * self.height
        rows = self.lines[start:start + self.height]
        rows += [''] * (self.height - len(rows))
        return [row.ljust(self.width) for row in rows]

    def advance(self) -> List[str]:
        self.position = (self.position + 1) % self.page_count
        return self.page()


def probabilities_ascii(engine: StatevectorEngine,
                        threshold: float = 0.01,
                        width: int = 40) -> str:
    """Display basis-state probabilities as horizontal bars."""
    lines = []
    lines.append("Probabilities:")
    lines.append("─" * 50)

    for i in range(engine.dim):
        prob = engine.probability_of(i)
        if prob < threshold:
            continue
        bar = LIT * int(prob * width)
        lines.append(f"|{bitstring(i, engine.num_qubits)}⟩: {bar:{width}s} {prob*100:5.1f}%")

    return '\n'.join(lines)


def status_text(engine: StatevectorEngine, led_count: Optional[int] = None) -> str:
    """Plain-text summary: register size, last measurement and bar chart."""
    last = engine.last_measurement()
    measured = "none" if last is None else f"q{last.qubit}={last.outcome}"
    parts = [
        f"Register: {engine.num_qubits} qubits ({engine.dim} basis states)",
        f"Last measurement: {measured}",
        "",
        render_bar_chart(engine, led_count or 8),
    ]
    return '\n'.join(parts)
