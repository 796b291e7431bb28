#!/usr/bin/env python3
"""
Command line interface for the tailrisk engine.

Usage:
    python main.py --help
    python main.py compute --data returns.csv --column SMI --model garch --params 0.02,0.1,0.85
    python main.py compute --synthetic 500 --model gaussian --params 0,1 --nahead 5 --cumulative
    python main.py validate-config
"""

import argparse
import sys

import numpy as np
import pandas as pd

from tailrisk import (
    ConfigurationError,
    RiskControl,
    RiskEngine,
    RiskSource,
    SystemConfig,
    TailRiskError,
    create_model,
    get_logger,
    setup_logging
)
from tailrisk.models import ModelKind


def parse_arguments(argv=None):
    """Parse command line arguments."""

    config = SystemConfig()

    parser = argparse.ArgumentParser(
        description="Value-at-Risk and Expected Shortfall for conditional-distribution models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # One-step-ahead risk of a CSV return series under a GARCH(1,1)
    python main.py compute --data returns.csv --column SMI --model garch --params 0.02,0.1,0.85

    # In-sample risk measures
    python main.py compute --data returns.csv --model garch --params 0.02,0.1,0.85 --in-sample

    # Five-day cumulative risk on synthetic normal returns
    python main.py compute --synthetic 500 --params 0,1 --nahead 5 --cumulative

    # Validate configuration
    python main.py validate-config
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    compute_parser = subparsers.add_parser(
        'compute',
        help='Compute VaR and ES for a return series'
    )

    source_group = compute_parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument(
        '--data',
        type=str,
        help='CSV file with the return series'
    )
    source_group.add_argument(
        '--synthetic',
        type=int,
        help='Generate this many standard normal returns instead of reading a file'
    )

    compute_parser.add_argument(
        '--column',
        type=str,
        help='Column holding the returns (defaults to the last numeric column)'
    )
    compute_parser.add_argument(
        '--date-column',
        type=str,
        help='Column used as a date index'
    )
    compute_parser.add_argument(
        '--model',
        choices=[kind.value for kind in ModelKind],
        default=ModelKind.GAUSSIAN.value,
        help='Conditional distribution model'
    )
    compute_parser.add_argument(
        '--params',
        type=str,
        required=True,
        help='Comma separated model parameters'
    )
    compute_parser.add_argument(
        '--alpha',
        type=str,
        default=','.join(str(a) for a in config.engine.alpha),
        help='Comma separated confidence levels'
    )
    compute_parser.add_argument(
        '--nahead',
        type=int,
        default=1,
        help='Forecast horizon'
    )
    compute_parser.add_argument(
        '--in-sample',
        action='store_true',
        help='Return in-sample risk measures'
    )
    compute_parser.add_argument(
        '--cumulative',
        action='store_true',
        help='Risk of the cumulated returns over the horizon'
    )
    compute_parser.add_argument(
        '--no-es',
        action='store_true',
        help='Skip Expected Shortfall'
    )
    compute_parser.add_argument(
        '--nmesh',
        type=int,
        default=config.engine.nmesh,
        help='Number of grid points for density evaluation'
    )
    compute_parser.add_argument(
        '--nsim',
        type=int,
        default=config.engine.nsim,
        help='Number of simulated paths for steps beyond the first'
    )
    compute_parser.add_argument(
        '--seed',
        type=int,
        default=config.engine.random_seed,
        help='Random seed for simulation'
    )
    compute_parser.add_argument(
        '--output',
        type=str,
        help='Write VaR/ES table to this CSV file'
    )

    subparsers.add_parser(
        'validate-config',
        help='Validate system configuration'
    )

    return parser.parse_args(argv)


def load_returns(args) -> pd.Series:
    """Load the return series from a CSV file or generate a synthetic one."""

    if args.synthetic is not None:
        rng = np.random.default_rng(args.seed)
        return pd.Series(rng.standard_normal(args.synthetic), name='synthetic')

    frame = pd.read_csv(args.data)
    if args.date_column:
        frame[args.date_column] = pd.to_datetime(frame[args.date_column])
        frame = frame.set_index(args.date_column)

    if args.column:
        return frame[args.column].astype(float)

    numeric = frame.select_dtypes(include='number')
    if numeric.empty:
        raise ValueError(f"No numeric column found in {args.data}")
    return numeric.iloc[:, -1].astype(float)


def parse_floats(raw: str, option: str):
    """Comma separated numbers from a command line option."""
    try:
        return [float(token) for token in raw.split(',') if token.strip()]
    except ValueError as e:
        raise ConfigurationError(f"Invalid {option} value {raw!r}: {e}") from e


def run_compute(args):
    """Compute and print risk measures."""

    logger = get_logger('tailrisk.cli')

    try:
        params = parse_floats(args.params, '--params')
        alpha = parse_floats(args.alpha, '--alpha')
        returns = load_returns(args)
        model = create_model(args.model, random_seed=args.seed)
        control = RiskControl(nmesh=args.nmesh, nsim=args.nsim)

        engine = RiskEngine(control)
        result = engine.compute(
            RiskSource.from_specification(model, params, returns),
            alpha=alpha,
            nahead=args.nahead,
            do_es=not args.no_es,
            in_sample=args.in_sample,
            cumulative=args.cumulative
        )

        print("\n" + "="*60)
        print(result.summary())
        print("="*60)

        if args.output:
            result.to_frame().to_csv(args.output)
            print(f"\nResults saved to: {args.output}")

        return 0

    except TailRiskError as e:
        logger.error(f"Risk computation failed: {e}")
        print(f"\nRisk computation failed: {e}")
        return 1

    except (OSError, KeyError, ValueError) as e:
        logger.error(f"Could not load returns: {e}")
        print(f"\nCould not load returns: {e}")
        return 1


def validate_configuration(args):
    """Validate system configuration."""

    config = SystemConfig()
    validation_result = config.validate_config()

    print("\n" + "="*50)
    print("CONFIGURATION VALIDATION")
    print("="*50)

    if validation_result['valid']:
        print("Configuration Status: ✓ VALID")
    else:
        print("Configuration Status: ✗ INVALID")

    if validation_result['issues']:
        print("\nIssues Found:")
        for issue in validation_result['issues']:
            print(f"  ✗ {issue}")

    if validation_result['warnings']:
        print("\nWarnings:")
        for warning in validation_result['warnings']:
            print(f"  ⚠ {warning}")

    if validation_result['valid'] and not validation_result['warnings']:
        print("\nConfiguration is valid and ready for use.")

    print("="*50)

    return 0 if validation_result['valid'] else 1


def main(argv=None):
    """Main entry point."""

    setup_logging()

    args = parse_arguments(argv)

    if not args.command:
        print("Error: No command specified. Use --help for available commands.")
        return 1

    if args.command == 'compute':
        return run_compute(args)
    elif args.command == 'validate-config':
        return validate_configuration(args)
    else:
        print(f"Error: Unknown command '{args.command}'")
        return 1


if __name__ == "__main__":
    sys.exit(main())
