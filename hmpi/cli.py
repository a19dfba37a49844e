"""
Command-line HMPI calculator.

Reads a CSV/Excel site table (or the bundled sample), computes the index
for every site and prints or writes the results.
"""
import argparse
import sys
from typing import List, Optional

import pandas as pd

from hmpi.batch import (
    average_contributions,
    compute_table,
    hotspots,
    read_table,
    write_results,
)
from hmpi.config import get_settings
from hmpi.errors import HMPIError
from hmpi.sample import LAT_COLUMN, LON_COLUMN, SITE_COLUMN, load_sample_df
from hmpi.standards import available_standards, get_standard, load_standard_file
from hmpi.utils.logger import setup_logger

EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hmpi-calc",
        description="Heavy Metal Pollution Index calculator for water-quality site tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  hmpi-calc --sample
  hmpi-calc samples.csv --standard BIS --site-col Site -o results.csv
  hmpi-calc samples.xlsx --standards-file my_limits.json --errors record

Built-in standards: {", ".join(available_standards())}
        """,
    )
    parser.add_argument("input", nargs="?", help="CSV or Excel table, one row per site")
    parser.add_argument("--sample", action="store_true", help="Use the bundled sample dataset")
    parser.add_argument("--standard", help="Built-in standard (default: HMPI_DEFAULT_STANDARD or WHO)")
    parser.add_argument("--standards-file", help="JSON standards file with limits and optional risk bands")
    parser.add_argument("--unit", default="mg/L", help="Unit of the metal columns (mg/L, ppm, ppb)")
    parser.add_argument("--metals", nargs="+", help="Metal columns to use (default: all the standard knows)")
    parser.add_argument("--site-col", help="Site name column")
    parser.add_argument("--lat-col", help="Latitude column, enables the hotspot ranking")
    parser.add_argument("--lon-col", help="Longitude column, enables the hotspot ranking")
    parser.add_argument("--top", type=int, default=5, help="Number of hotspots to list")
    parser.add_argument("--errors", choices=["raise", "record"], default="raise",
                        help="Stop at the first invalid site, or record it and go on")
    parser.add_argument("-o", "--output", help="Write the results table to this CSV file")
    parser.add_argument("--log-level", help="Logging level (default: HMPI_LOG_LEVEL or INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    logger = setup_logger("hmpi", args.log_level or settings.log_level)

    if args.sample:
        df = load_sample_df()
        site_col = args.site_col or SITE_COLUMN
        lat_col = args.lat_col or LAT_COLUMN
        lon_col = args.lon_col or LON_COLUMN
    elif args.input:
        try:
            df = read_table(args.input)
        except (OSError, ValueError) as e:
            logger.error("Failed to read %s: %s", args.input, e)
            return EXIT_INVALID_INPUT
        site_col, lat_col, lon_col = args.site_col, args.lat_col, args.lon_col
    else:
        parser.error("give an input table or --sample")

    try:
        if args.standards_file:
            table = load_standard_file(args.standards_file)
        elif args.standard:
            table = get_standard(args.standard)
        else:
            table = settings.limit_table()
        thresholds = table.thresholds or settings.thresholds()

        missing = [c for c in (lat_col, lon_col) if c and c not in df.columns]
        if missing:
            raise KeyError(f"Coordinate columns not in table: {missing}")

        results = compute_table(
            df,
            table,
            metals=args.metals,
            unit=args.unit,
            site_col=site_col,
            thresholds=thresholds,
            weight_constant=settings.weight_constant,
            errors=args.errors,
        )
    except OSError as e:
        logger.error("Failed to read standards file: %s", e)
        return EXIT_INVALID_INPUT
    except (HMPIError, KeyError) as e:
        logger.error("Computation error: %s", e)
        return EXIT_INVALID_INPUT

    logger.info("HMPI computed under %s", table.name)
    with pd.option_context("display.max_columns", None, "display.width", 200):
        print(results.to_string(index=False))
        print()
        print("Average per-metal contribution to HPI:")
        print(average_contributions(results).round(3).to_string())
        if lat_col and lon_col:
            print()
            print("Hotspots:")
            print(hotspots(results, lat_col, lon_col, site_col, top=args.top).to_string(index=False))

    if args.output:
        write_results(results, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
