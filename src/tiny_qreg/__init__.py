"""
tiny-qreg: a fixed-size quantum register simulator.

Features:
- In-place statevector engine, no allocation while gates run
- Gates: X, Y, Z, H, T, CNOT
- Deterministic measurement (collapses to the likelier outcome)
- HTTP listener driven by query parameters
- LED bar chart and character display renderers

Quick Start:
    >>> from tiny_qreg import StatevectorEngine, render_bar_chart
    >>> eng = StatevectorEngine(2)
    >>> eng.apply_h(0)
    >>> eng.apply_controlled_x(0, 1)
    >>> print(render_bar_chart(eng, led_count=4))
"""
__version__ = "1.0.0"

from .config import EngineConfig, DEFAULT_CONFIG
from .engine import StatevectorEngine, MeasurementResult
from .commands import GateRequest, RequestError, parse_request, parse_program, execute, run_program
from .render import bar_levels, render_bar_chart, qubit_lines, DisplayRotator, probabilities_ascii
from .logging_config import setup_logging, get_logger
from . import gates

__all__ = [
    # Engine
    'StatevectorEngine',
    'MeasurementResult',
    'EngineConfig',
    'DEFAULT_CONFIG',
    # Commands
    'GateRequest',
    'RequestError',
    'parse_request',
    'parse_program',
    'execute',
    'run_program',
    # Rendering
    'bar_levels',
    'render_bar_chart',
    'qubit_lines',
    'DisplayRotator',
    'probabilities_ascii',
    # Logging
    'setup_logging',
    'get_logger',
    # Submodules
    'gates',
]
