"""
Basic Cycle Simulation Example
Demonstrates simple usage of the cycle calculators, plots and exports.
"""

import os

import matplotlib

# Headless environment check for plot exports
if "DISPLAY" not in os.environ and os.name != "nt":
    matplotlib.use("Agg")
    print("Physical display not detected. Using 'Agg' backend for plot exports.")

from cycle_simulator.animation import cycle_stage, gauge_values
from cycle_simulator.cycle_config import (
    CycleType,
    DieselParameters,
    OttoParameters,
    create_default_parameters,
)
from cycle_simulator.thermodynamics import (
    calculate_cycle,
    calculate_diesel_cycle,
    calculate_otto_cycle,
)
from cycle_simulator.utilities import DataExporter
from cycle_simulator.visualization import CyclePlotter


def example_1_all_cycles():
    """Example 1: Default presets for all three cycles"""

    print("=" * 70)
    print("EXAMPLE 1: Default Presets")
    print("=" * 70)
    print()

    for cycle_type in CycleType:
        params = create_default_parameters(cycle_type)
        result = calculate_cycle(cycle_type, params)
        print(
            f"{cycle_type.title:<8} η = {result.efficiency * 100:6.2f}%   "
            f"w_net = {result.work_output:8.2f} kJ/kg"
        )
    print()


def example_2_compression_ratio_sweep():
    """Example 2: Otto vs Diesel efficiency over compression ratio"""

    print("=" * 70)
    print("EXAMPLE 2: Compression Ratio Sweep")
    print("=" * 70)
    print()

    print(f"{'CR':>6} {'Otto η':>10} {'Diesel η (rc=2)':>18}")
    for cr in [6, 8, 10, 12, 16, 20]:
        otto = calculate_otto_cycle(OttoParameters(compression_ratio=cr))
        diesel = calculate_diesel_cycle(DieselParameters(compression_ratio=cr))
        print(f"{cr:>6} {otto.efficiency * 100:>9.2f}% {diesel.efficiency * 100:>17.2f}%")
    print()


def example_3_animation_trace():
    """Example 3: Gauge readings along the Otto cycle"""

    print("=" * 70)
    print("EXAMPLE 3: Animation Trace")
    print("=" * 70)
    print()

    result = calculate_otto_cycle(OttoParameters())
    for progress in [0.0, 0.125, 0.25, 0.5, 0.625, 0.75, 0.9]:
        reading = gauge_values(result, progress)
        print(
            f"  {progress:5.3f}  {cycle_stage('otto', progress):<30} "
            f"p = {reading.pressure:7.3f} MPa   T = {reading.temperature:7.1f} K"
        )
    print()


def example_4_exports():
    """Example 4: Diagrams, PDF report and JSON document"""

    print("=" * 70)
    print("EXAMPLE 4: Exports")
    print("=" * 70)
    print()

    params = DieselParameters()
    result = calculate_diesel_cycle(params)

    plotter = CyclePlotter()
    plotter.plot_cycle_analysis(result, save_path="diesel_cycle_analysis.png")
    plotter.export_pdf_report("diesel", params, result, "diesel-cycle-analysis.pdf")

    exporter = DataExporter()
    exporter.export_to_json(
        exporter.build_document("diesel", params, result), "diesel-cycle-data.json"
    )
    print(exporter.create_performance_report("diesel", params, result))


if __name__ == "__main__":
    example_1_all_cycles()
    example_2_compression_ratio_sweep()
    example_3_animation_trace()
    example_4_exports()
