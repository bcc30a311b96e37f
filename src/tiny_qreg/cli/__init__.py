"""
Command-line interface for tiny-qreg.

Usage:
    tiny-qreg run "h a; cx a b"
    tiny-qreg run bell.txt
    tiny-qreg --qubits 4 serve --port 8080
    tiny-qreg info
"""
import argparse
import os
import sys

from ..commands import RequestError, parse_program, run_program
from ..config import EngineConfig
from ..engine import StatevectorEngine
from ..logging_config import setup_logging
from ..render import DisplayRotator, probabilities_ascii, qubit_lines, render_bar_chart


def _load_config(args) -> EngineConfig:
    config = EngineConfig.from_env()
    return config.with_overrides(
        num_qubits=args.qubits,
        log_level=args.log_level,
        host=getattr(args, 'host', None),
        port=getattr(args, 'port', None),
    )


def cmd_run(args, config):
    """Apply a program to a fresh register and print the result."""
    source = args.program
    if os.path.isfile(source):
        with open(source, 'r') as f:
            source = f.read()

    try:
        program = parse_program(source, config.num_qubits)
    except RequestError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    engine = StatevectorEngine(config.num_qubits, config=config)
    results = run_program(engine, program)

    print(f"Applied {len(program)} command(s) to {config.num_qubits} qubits")
    for r in results:
        print(f"  measured q{r.qubit} -> {r.outcome}")

    print()
    print(probabilities_ascii(engine))
    print()
    print(render_bar_chart(engine, config.led_count))
    print()

    display = DisplayRotator(
        qubit_lines(engine, config.display_width),
        width=config.display_width,
        height=config.display_height,
    )
    for page in range(display.page_count):
        rows = display.page() if page == 0 else display.advance()
        for row in rows:
            print(f"  |{row}|")
        print()
    return 0


def cmd_serve(args, config):
    """Start the HTTP listener."""
    from ..dashboard import launch
    launch(config, debug=args.debug)
    return 0


def cmd_info(args, config):
    """Show tiny-qreg information."""
    from .. import __version__

    print(f"""
tiny-qreg v{__version__}
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

Fixed-size statevector engine.

Register: {config.num_qubits} qubits ({1 << config.num_qubits} basis states)
Gates:    x y z h t cx, measure, reset
Qubits:   letters a, b, c, ... or indices 0, 1, 2, ...

Usage:
  tiny-qreg run "h a; cx a b"
  tiny-qreg serve --port {config.port}
""")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='tiny-qreg',
        description='Fixed-size quantum register simulator'
    )
    parser.add_argument('--qubits', type=int, help='Register size (overrides TINY_QREG_QUBITS)')
    parser.add_argument('--log-level', help='Logging level, e.g. DEBUG')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Run a gate program')
    run_parser.add_argument('program', help='Program text like "h a; cx a b" or a file')
    run_parser.set_defaults(func=cmd_run)

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Start the HTTP listener')
    serve_parser.add_argument('--host', help='Bind address')
    serve_parser.add_argument('--port', type=int, help='Port')
    serve_parser.add_argument('--debug', action='store_true', help='Flask debug mode')
    serve_parser.set_defaults(func=cmd_serve)

    # Info command
    info_parser = subparsers.add_parser('info', help='Show tiny-qreg info')
    info_parser.set_defaults(func=cmd_info)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = _load_config(args)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)
    return args.func(args, config)


if __name__ == '__main__':
    sys.exit(main())
