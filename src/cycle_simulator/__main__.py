"""
CLI entry point for cycle_simulator.
"""
import argparse
import logging
import sys

from .cycle_config import CycleType, create_default_parameters, parameters_from_dict
from .thermodynamics import calculate_cycle
from .utilities import DataExporter


def parse_overrides(pairs):
    """Turn ``["compressionRatio=10", ...]`` into a float mapping."""
    overrides = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"Expected NAME=VALUE, got '{pair}'")
        try:
            overrides[name.strip()] = float(value)
        except ValueError as exc:
            raise ValueError(f"Value for '{name}' is not a number: '{value}'") from exc
    return overrides


def run_cycle(cycle, overrides=None, json_path=None, csv_path=None, pdf_path=None):
    cycle_type = CycleType.parse(cycle)
    values = create_default_parameters(cycle_type).to_dict()
    for name in overrides or {}:
        if name not in values:
            raise ValueError(
                f"Unknown parameter '{name}' for {cycle_type.value} cycle; "
                f"expected one of: {', '.join(values)}"
            )
    values.update(overrides or {})
    params = parameters_from_dict(cycle_type, values)
    params.warn_out_of_range()

    result = calculate_cycle(cycle_type, params)

    exporter = DataExporter()
    print(exporter.create_performance_report(cycle_type, params, result))

    if not result.is_valid:
        print("Error: no valid cycle could be computed for these parameters.")
        return 1

    if json_path or csv_path or pdf_path:
        print("Results exported to:")
    if json_path:
        exporter.export_to_json(
            exporter.build_document(cycle_type, params, result), json_path
        )
        print(f" - {json_path}")
    if csv_path:
        exporter.export_to_csv(result, csv_path)
        print(f" - {csv_path}")
    if pdf_path:
        import matplotlib

        matplotlib.use("Agg")
        from .visualization import CyclePlotter

        CyclePlotter().export_pdf_report(cycle_type, params, result, pdf_path)
        print(f" - {pdf_path}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Thermodynamic Cycle Simulator CLI")
    parser.add_argument(
        "--cycle",
        choices=[c.value for c in CycleType],
        default="rankine",
        help="Cycle to simulate (default: rankine)",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        metavar="NAME=VALUE",
        help="Override a parameter, e.g. --set compressionRatio=10 (repeatable)",
    )
    parser.add_argument("--json", help="Write the JSON cycle document to this path")
    parser.add_argument("--csv", help="Write the state-point table to this path")
    parser.add_argument("--pdf", help="Write the PDF report to this path")
    parser.add_argument("--verbose", action="store_true", help="Enable info logging")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        overrides = parse_overrides(args.overrides)
        return run_cycle(args.cycle, overrides, args.json, args.csv, args.pdf)
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
