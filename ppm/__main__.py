"""
PPM Portfolio Scheduling
========================

Command line entry point running the sample portfolio.
"""

import argparse
import logging
import sys

from .examples.sample_portfolio import create_sample_portfolio, print_report


def main(argv=None):
    parser = argparse.ArgumentParser(description="Project portfolio scheduling engine")
    parser.add_argument(
        "--example", action="store_true", help="Run the example portfolio"
    )
    parser.add_argument(
        "--strategy",
        choices=["smoothing", "leveling"],
        default="smoothing",
        help="Resource conflict strategy for the example project",
    )
    parser.add_argument(
        "--delay-project", type=str, default=None, help="Project to delay"
    )
    parser.add_argument(
        "--delay-days", type=int, default=5, help="Size of the simulated delay"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log scheduling detail"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if args.example:
        print("Running example portfolio...")
        scheduler = create_sample_portfolio(args.strategy)
        print_report(
            scheduler, delay_project=args.delay_project, delay_days=args.delay_days
        )
        return 0
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
