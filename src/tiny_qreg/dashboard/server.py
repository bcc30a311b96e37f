"""
tiny-qreg Listener.

A Flask application that drives a single shared engine from HTTP
query parameters:
- GET /gate?gate=h&q=a          apply a gate
- GET /gate?gate=cx&c=a&t=b     apply CNOT
- GET /measure?q=a              measure and collapse
- GET /reset                    back to |0...0⟩
- GET /state                    probabilities as JSON
- GET /                         plain-text status with bar chart

Usage:
    from tiny_qreg.dashboard import launch
    launch()

    # Or via CLI:
    # tiny-qreg serve --port 8080
"""

from __future__ import annotations

import threading
from typing import Any

from tiny_qreg.commands import RequestError, execute, parse_request, qubit_label
from tiny_qreg.config import EngineConfig
from tiny_qreg.engine import StatevectorEngine
from tiny_qreg.gates import GATE_CATALOG
from tiny_qreg.logging_config import get_logger
from tiny_qreg.render import bar_levels, bitstring, qubit_lines, status_text

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# State snapshot
# ---------------------------------------------------------------------------

def _snapshot(engine: StatevectorEngine, config: EngineConfig) -> dict:
    """Collect everything a client renders after a call."""
    num_qubits = engine.num_qubits

    prob_dict = {}
    for i, p in enumerate(engine.probabilities()):
        if p > 1e-10:
            prob_dict[bitstring(i, num_qubits)] = float(p)

    last = engine.last_measurement()
    last_dict = None
    if last is not None:
        last_dict = {
            "qubit": last.qubit,
            "label": qubit_label(last.qubit),
            "outcome": last.outcome,
        }

    return {
        "num_qubits": num_qubits,
        "probabilities": prob_dict,
        "qubit_one": [engine.probability_qubit_is_one(q) for q in range(num_qubits)],
        "max_probability": engine.max_basis_state_probability(),
        "bar_levels": bar_levels(engine, config.led_count),
        "display": qubit_lines(engine, config.display_width),
        "last_measurement": last_dict,
    }


# ---------------------------------------------------------------------------
# Flask Application
# ---------------------------------------------------------------------------

def create_app(config: EngineConfig | None = None,
               engine: StatevectorEngine | None = None) -> Any:
    """
    Create and configure the Flask application.

    Parameters
    ----------
    config : EngineConfig, optional
        Defaults to ``EngineConfig.from_env()``.
    engine : StatevectorEngine, optional
        Engine to serve. A new one sized by ``config.num_qubits`` is
        created when omitted.
    """
    from flask import Flask, Response, jsonify, request

    if config is None:
        config = EngineConfig.from_env()
    if engine is None:
        engine = StatevectorEngine(config.num_qubits, config=config)

    app = Flask(__name__)
    app.json.sort_keys = False
    app.extensions['tiny_qreg'] = {"engine": engine, "config": config}

    # One call sequence (mutation + snapshot) at a time
    lock = threading.Lock()

    def _parse():
        return parse_request(request.args, engine.num_qubits)

    @app.errorhandler(RequestError)
    def handle_request_error(e):
        logger.warning("Rejected %s: %s", request.full_path, e)
        return jsonify({"error": str(e)}), 400

    # ---- Routes ----

    @app.route("/")
    def index():
        with lock:
            text = status_text(engine, config.led_count)
        return Response(text + "\n", mimetype="text/plain")

    @app.route("/api/gates")
    def api_gates():
        return jsonify(GATE_CATALOG)

    @app.route("/gate")
    def apply_gate():
        req = _parse()
        if req.op in ("measure", "reset"):
            raise RequestError(f"Use /{req.op} for '{req.op}'")
        with lock:
            execute(engine, req)
            state = _snapshot(engine, config)
        logger.info("Applied %s", req)
        return jsonify(state)

    @app.route("/measure")
    def measure():
        qubit = parse_request({"gate": "measure", "q": request.args.get("q")},
                              engine.num_qubits).qubits[0]
        with lock:
            result = engine.measure(qubit)
            state = _snapshot(engine, config)
        logger.info("Measured %s -> %d", qubit_label(qubit), result.outcome)
        state["outcome"] = result.outcome
        return jsonify(state)

    @app.route("/reset")
    def reset():
        with lock:
            engine.reset()
            state = _snapshot(engine, config)
        logger.info("Register reset")
        return jsonify(state)

    @app.route("/state")
    def state():
        with lock:
            snapshot = _snapshot(engine, config)
        return jsonify(snapshot)

    return app


def launch(config: EngineConfig | None = None, debug: bool = False):
    """
    Launch the tiny-qreg listener.

    Parameters
    ----------
    config : EngineConfig, optional
        Host, port and register size. Defaults to the environment.
    debug : bool
        Enable Flask debug mode.
    """
    if config is None:
        config = EngineConfig.from_env()
    app = create_app(config)

    url = f"http://{config.host}:{config.port}"
    logger.info("Serving a %d-qubit register on %s", config.num_qubits, url)
    app.run(host=config.host, port=config.port, debug=debug, use_reloader=False)
