"""
qtms Dashboard Server.

A Flask application providing:
- REST API for the hidden parameters and presets
- Message transmission (whole result, or the step-by-step event list)
- Single-qubit playground and repeated-trial experiments

Usage:
    from qtms.dashboard import launch
    launch(port=3000)

    # Or via CLI:
    # qtms serve --port 3000
"""

from __future__ import annotations

import logging
import time
from typing import Any

import numpy as np

from qtms import __version__
from qtms.core import GateMatrix, Qubit, QubitError, hadamard, pauli_x
from qtms.encoder import MessageEncoder
from qtms.parameters import PRESETS, ParametersManager
from qtms.trials import run_entanglement_trials, run_superposition_trials, summarize_pairs

logger = logging.getLogger(__name__)

MAX_TRIALS = 1_000_000


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------

SINGLE_QUBIT_GATES = {
    "h": hadamard,
    "hadamard": hadamard,
    "x": pauli_x,
    "not": pauli_x,
}


def _trial_count(data: dict, default: int) -> int:
    trials = data.get("trials", default)
    if isinstance(trials, bool) or not isinstance(trials, int):
        raise ValueError(f"'trials' must be an integer, got {trials!r}")
    if not 0 <= trials <= MAX_TRIALS:
        raise ValueError(f"'trials' must be between 0 and {MAX_TRIALS}, got {trials}")
    return trials


def _rng_from(data: dict) -> np.random.Generator:
    seed = data.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ValueError(f"'seed' must be an integer, got {seed!r}")
    return np.random.default_rng(seed)


def _run_qubit(data: dict) -> dict:
    """Build a qubit, apply the requested gates, optionally measure."""
    qubit = Qubit(data.get("alpha", 1), data.get("beta", 0), rng=_rng_from(data))

    for gate in data.get("gates", []):
        if isinstance(gate, str):
            name = gate.lower()
            if name not in SINGLE_QUBIT_GATES:
                raise ValueError(f"Unknown gate: '{gate}'. Available: {sorted(SINGLE_QUBIT_GATES)}")
            SINGLE_QUBIT_GATES[name](qubit)
        else:
            # explicit 2x2 matrix of {re, im} records
            qubit.apply_unitary(GateMatrix.from_array(gate))

    result = qubit.measure() if data.get("measure") else None
    x, y, z = qubit.bloch_vector()
    p0, p1 = qubit.probabilities()

    return {
        "state": qubit.get_state().to_dict(),
        "result": result,
        "probabilities": {"0": p0, "1": p1},
        "bloch": {"x": x, "y": y, "z": z},
    }


# ---------------------------------------------------------------------------
# Flask Application
# ---------------------------------------------------------------------------

def create_app(manager: ParametersManager | None = None,
               rng: np.random.Generator | None = None) -> Any:
    """
    Create and configure the Flask application.

    Parameters
    ----------
    manager : ParametersManager, optional
        Parameter store shared by every request. A fresh one by default.
    rng : numpy.random.Generator, optional
        Random source for message transmissions.
    """
    try:
        from flask import Flask, jsonify, request
    except ImportError:
        raise ImportError(
            "Flask is required for the dashboard. Install it with:\n"
            "  pip install flask"
        )

    app = Flask(__name__)
    app.json.sort_keys = False

    parameters = manager if manager is not None else ParametersManager()
    experiment_log: list[dict] = []
    state = {"encoder": MessageEncoder(parameters.get_parameters(), rng=rng)}

    def refresh_encoder() -> None:
        state["encoder"] = MessageEncoder(parameters.get_parameters(), rng=rng)

    def json_body() -> dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def log_transmission(message: str, decoded: str, accuracy: float) -> None:
        experiment_log.append({
            "timestamp": time.time(),
            "type": "message_transmission",
            "original_message": message,
            "decoded_message": decoded,
            "accuracy": accuracy,
            "success": decoded == message,
            "parameters": parameters.get_parameters(),
        })

    app.config["PARAMETERS"] = parameters
    app.config["EXPERIMENT_LOG"] = experiment_log

    # ---- Routes ----

    @app.route("/")
    def index():
        return jsonify({
            "name": "qtms",
            "version": __version__,
            "endpoints": sorted(
                str(rule) for rule in app.url_map.iter_rules() if str(rule).startswith("/api")
            ),
        })

    @app.route("/api/parameters", methods=["GET"])
    def api_get_parameters():
        return jsonify(parameters.get_parameters())

    @app.route("/api/parameters", methods=["POST"])
    def api_update_parameters():
        success = parameters.update_parameters(json_body())
        # valid entries are applied even when others are rejected
        refresh_encoder()
        if not success:
            return jsonify({"success": False, "message": "Invalid parameters"}), 400
        return jsonify({"success": True, "parameters": parameters.get_parameters()})

    @app.route("/api/parameters/preset/<name>", methods=["POST"])
    def api_apply_preset(name):
        try:
            values = parameters.apply_preset(name)
        except KeyError:
            return jsonify({"success": False,
                            "message": f"Unknown preset '{name}'",
                            "available": sorted(PRESETS)}), 404
        refresh_encoder()
        return jsonify({"success": True, "parameters": values})

    @app.route("/api/transmit", methods=["POST"])
    def api_transmit():
        message = json_body().get("message")
        if not message or not isinstance(message, str):
            return jsonify({"success": False, "message": "Message is required"}), 400

        result = state["encoder"].simulate_transmission(message)
        log_transmission(message, result.decoded_message, result.accuracy)
        return jsonify({"success": True, "result": result.to_dict()})

    @app.route("/api/transmit/steps", methods=["POST"])
    def api_transmit_steps():
        message = json_body().get("message")
        if not message or not isinstance(message, str):
            return jsonify({"success": False, "message": "Message is required"}), 400

        steps = list(state["encoder"].transmission_steps(message))
        final = steps[-1]
        log_transmission(message, final["decoded_message"], final["accuracy"])
        return jsonify({"success": True, "steps": steps})

    @app.route("/api/log")
    def api_log():
        return jsonify(experiment_log)

    @app.route("/api/metrics")
    def api_metrics():
        return jsonify(parameters.get_metrics())

    @app.route("/api/analysis")
    def api_analysis():
        return jsonify(parameters.analyze_parameter_impact(experiment_log))

    @app.route("/api/qubit", methods=["POST"])
    def api_qubit():
        try:
            return jsonify(_run_qubit(json_body()))
        except (QubitError, ValueError, TypeError) as e:
            return jsonify({"error": str(e)}), 400

    @app.route("/api/experiments/superposition", methods=["POST"])
    def api_superposition():
        data = json_body()
        try:
            counts = run_superposition_trials(_trial_count(data, 1000), rng=_rng_from(data))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify(counts.to_dict())

    @app.route("/api/experiments/entanglement", methods=["POST"])
    def api_entanglement():
        data = json_body()
        try:
            outcomes = run_entanglement_trials(
                _trial_count(data, 10),
                rng=_rng_from(data),
                joint=bool(data.get("joint", False)),
                measure_control_first=bool(data.get("measure_control_first", False)),
            )
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({
            "summary": summarize_pairs(outcomes),
            "outcomes": [o.to_dict() for o in outcomes],
        })

    return app


def launch(port: int = 3000, host: str = "0.0.0.0", debug: bool = False):
    """
    Launch the qtms API server.

    Parameters
    ----------
    port : int
        Port to serve on.
    host : str
        Host address.
    debug : bool
        Enable Flask debug mode.
    """
    app = create_app()
    logger.info("Server running on http://%s:%d", host, port)
    app.run(host=host, port=port, debug=debug)
