from __future__ import annotations
import argparse
import logging
import sys

from ..config import SimConfig
from ..errors import ConfigurationError, ParseError
from ..runtime.simulator import run as run_sim, sweep as run_sweep
from ..utils.reporting import generate_report, generate_sweep_report


def _int_list(value: str):
    try:
        return [int(v) for v in value.split(",") if v.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a comma-separated list of integers, got '{value}'")


def _require_trace(config: SimConfig):
    if not config.trace_file:
        raise ConfigurationError("a trace file is required")


def cmd_run(args):
    """Handles the 'run' command."""
    if args.verbose_range is not None:
        args.verbose = True
        args.verbose_lo, args.verbose_hi = args.verbose_range

    config = SimConfig.from_args(args)
    _require_trace(config)
    args.trace_file = config.trace_file
    if args.config is None and None in (args.cache_size_kb, args.associativity):
        raise ConfigurationError("cache size and associativity are required")
    result = run_sim(config)
    generate_report(result, config)
    return 0


def cmd_sweep(args):
    """Handles the 'sweep' command."""
    config = SimConfig.from_args(args)
    _require_trace(config)
    args.trace_file = config.trace_file
    df = run_sweep(config)
    generate_sweep_report(df, config)
    return 0


def _add_common_args(p):
    p.add_argument("-c", "--config", type=str, default=None,
                   help="Path to YAML config file to override defaults")
    p.add_argument("--block-size", type=int, default=None, dest="block_size",
                   help="Cache block size in bytes (power of two, default 16)")
    p.add_argument("--miss-penalty", type=int, default=None, dest="miss_penalty",
                   help="Extra cycles charged per memory transfer on a miss (default 80)")
    p.add_argument("--report", type=str, default=None, dest="report_dir",
                   help="Directory to save report.json / report.html")


def build_parser():
    p = argparse.ArgumentParser(
        prog="cachesim",
        description="Trace-driven write-back cache simulator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging level")
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Simulate one cache configuration over a trace",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    pr.add_argument("trace_file", nargs='?', default=None,
                    help="Path to trace file (optional if specified in config)")
    pr.add_argument("cache_size_kb", nargs='?', type=int, default=None,
                    help="Cache size in KB")
    pr.add_argument("associativity", nargs='?', type=int, default=None,
                    help="Set associativity (1 = direct-mapped)")
    pr.add_argument("-v", "--verbose", nargs=2, type=int, default=None, dest="verbose_range",
                    metavar=("IC1", "IC2"),
                    help="Print per-access lines for orders IC1..IC2 inclusive")
    _add_common_args(pr)
    pr.set_defaults(func=cmd_run)

    # --- Sweep Command ---
    ps = sub.add_parser("sweep", help="Simulate every size x associativity pair over a trace",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    ps.add_argument("trace_file", nargs='?', default=None,
                    help="Path to trace file (optional if specified in config)")
    ps.add_argument("--sizes", type=_int_list, default=None, dest="sweep_sizes_kb",
                    help="Comma-separated cache sizes in KB")
    ps.add_argument("--assocs", type=_int_list, default=None, dest="sweep_associativities",
                    help="Comma-separated associativities")
    _add_common_args(ps)
    ps.set_defaults(func=cmd_sweep)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.getLogger().setLevel(args.log_level)

    try:
        return args.func(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        trace_file = getattr(args, "trace_file", None)
        if trace_file and e.filename is not None and str(e.filename) == str(trace_file):
            print(f"Error: failed to open: {trace_file}", file=sys.stderr)
        else:
            print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
