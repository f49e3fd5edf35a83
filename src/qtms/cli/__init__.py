"""
Command-line interface for qtms.

Usage:
    qtms superposition --trials 1000 100000 --seed 7
    qtms entangle --trials 10 --joint
    qtms transmit "hello" --preset high_accuracy
    qtms params --preset balanced
    qtms bloch h x
    qtms serve --port 3000
"""
import argparse
import json

import numpy as np

from .. import config


def _rng(args):
    seed = args.seed if args.seed is not None else config.SEED
    return np.random.default_rng(seed)


def cmd_superposition(args):
    """|0⟩ → H → measure, repeated."""
    from ..trials import run_superposition_trials

    rng = _rng(args)
    for n in args.trials:
        counts = run_superposition_trials(n, rng=rng)
        print(f"Results for n={n}:")
        print(f"  0: {counts.zeros} times ({100 * counts.fraction(0):.2f}%)")
        print(f"  1: {counts.ones} times ({100 * counts.fraction(1):.2f}%)")
        if args.histogram:
            from ..visualization import trial_histogram
            print(trial_histogram(counts))


def cmd_bloch(args):
    """Apply gates to |0⟩ and draw the state on the Bloch sphere."""
    from ..core import Qubit, hadamard, pauli_x
    from ..visualization import ascii_bloch

    gates = {'h': hadamard, 'x': pauli_x}
    qubit = Qubit()
    for name in args.gates:
        gates[name](qubit)

    p0, p1 = qubit.probabilities()
    print(f"Gates: {' '.join(args.gates) or '(none)'}")
    print(f"P(0) = {p0:.4f}, P(1) = {p1:.4f}")
    print(ascii_bloch(qubit))


def cmd_entangle(args):
    """H on q1, CNOT(q1, q2), measure both."""
    from ..trials import run_entanglement_trials, summarize_pairs

    outcomes = run_entanglement_trials(
        args.trials,
        rng=_rng(args),
        joint=args.joint,
        measure_control_first=args.measure_first,
    )
    for o in outcomes:
        print(f"q1: {o.first} -- q2: {o.second}")

    summary = summarize_pairs(outcomes)
    print(f"\nAgreement: {summary['agree']}/{summary['trials']} "
          f"({100 * summary['agreement_rate']:.1f}%)")


def cmd_transmit(args):
    """Send a message through the delayed-choice channel."""
    from ..encoder import MessageEncoder
    from ..parameters import ParametersManager

    manager = ParametersManager()
    if args.preset:
        manager.apply_preset(args.preset)

    encoder = MessageEncoder(manager.get_parameters(), rng=_rng(args))
    result = encoder.simulate_transmission(args.message)

    print(f"Original: {result.original_message!r}")
    print(f"Decoded:  {result.decoded_message!r}")
    print(f"Accuracy: {100 * result.accuracy:.2f}%")
    print(f"Experiments: {result.experiment_count}")


def cmd_params(args):
    """Show hidden parameters, optionally after applying a preset."""
    from ..parameters import ParametersManager

    manager = ParametersManager()
    if args.preset:
        manager.apply_preset(args.preset)
    print(json.dumps(manager.get_parameters(), indent=2))


def cmd_serve(args):
    """Run the REST API."""
    from ..dashboard import launch

    launch(port=args.port, host=args.host, debug=args.debug)


def cmd_info(args):
    """Show qtms information."""
    from .. import __version__

    print(f"""
qtms v{__version__}
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

Minimal qubit simulator with a toy message channel.

Core:
  • Qubit: complex amplitude pair, normalized to 1e-10
  • Gates: H, X, CNOT (classical control) and a joint two-qubit CNOT
  • Measurement: irreversible, seedable collapse

Usage:
  qtms superposition --trials 100000
  qtms entangle --joint
  qtms bloch h
  qtms transmit "hi"
  qtms serve
""")


def _gate_name(value):
    name = value.lower()
    if name not in ('h', 'x'):
        raise argparse.ArgumentTypeError(f"unknown gate '{value}' (choose from h, x)")
    return name


def build_parser():
    from ..parameters import PRESETS

    parser = argparse.ArgumentParser(
        prog='qtms',
        description='Minimal qubit simulator and message channel demo'
    )
    parser.add_argument('--log-level', default=None, help='Logging level (default from LOG_LEVEL)')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    sp_parser = subparsers.add_parser('superposition', help='Hadamard + measure statistics')
    sp_parser.add_argument('--trials', type=int, nargs='+',
                           default=[1, 10, 100, 1_000, 10_000, 100_000],
                           help='Trial counts to run')
    sp_parser.add_argument('--seed', type=int, help='Random seed')
    sp_parser.add_argument('--histogram', action='store_true', help='Draw a histogram per run')
    sp_parser.set_defaults(func=cmd_superposition)

    bloch_parser = subparsers.add_parser('bloch', help='Draw a gate sequence on the Bloch sphere')
    bloch_parser.add_argument('gates', nargs='*', type=_gate_name, help='Gates applied to |0⟩ (h, x)')
    bloch_parser.set_defaults(func=cmd_bloch)

    ent_parser = subparsers.add_parser('entangle', help='H + CNOT on two qubits')
    ent_parser.add_argument('--trials', type=int, default=10, help='Number of trials')
    ent_parser.add_argument('--joint', action='store_true',
                            help='Use the joint two-qubit state (true CNOT)')
    ent_parser.add_argument('--measure-first', action='store_true',
                            help='Measure the control before the classical-control CNOT')
    ent_parser.add_argument('--seed', type=int, help='Random seed')
    ent_parser.set_defaults(func=cmd_entangle)

    tx_parser = subparsers.add_parser('transmit', help='Transmit a text message')
    tx_parser.add_argument('message', help='Message text')
    tx_parser.add_argument('--preset', choices=sorted(PRESETS), help='Parameter preset')
    tx_parser.add_argument('--seed', type=int, help='Random seed')
    tx_parser.set_defaults(func=cmd_transmit)

    params_parser = subparsers.add_parser('params', help='Show hidden parameters')
    params_parser.add_argument('--preset', choices=sorted(PRESETS), help='Apply a preset first')
    params_parser.set_defaults(func=cmd_params)

    serve_parser = subparsers.add_parser('serve', help='Run the REST API')
    serve_parser.add_argument('--host', default=config.HOST)
    serve_parser.add_argument('--port', type=int, default=config.PORT)
    serve_parser.add_argument('--debug', action='store_true', default=config.DEBUG)
    serve_parser.set_defaults(func=cmd_serve)

    info_parser = subparsers.add_parser('info', help='Show qtms info')
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    from ..logging_config import setup_logging

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    setup_logging(level=args.log_level)
    args.func(args)


if __name__ == '__main__':
    main()
