"""
Visualization Module
Creates P-v and T-s diagrams and the PDF cycle report.
"""

import logging
from datetime import date
from typing import Any, Mapping, Optional, Union

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.gridspec import GridSpec

from .cycle_config import CycleParameters, CycleType
from .thermodynamics import CycleResult
from .utilities import format_parameter_name, format_parameter_value, result_metrics

logger = logging.getLogger(__name__)

_STATE_LABELS = ("1", "2", "3", "4")


class CyclePlotter:
    """
    Creates publication-quality diagrams for cycle results.

    Supports:
    - P-v diagrams
    - T-s diagrams
    - Combined analysis figure
    - Two-page PDF report
    """

    def __init__(self, style: str = "default"):
        """
        Initialize plotter with specified style.

        Args:
            style: Matplotlib style ('default', 'seaborn', 'ggplot')
        """
        if style != "default":
            try:
                plt.style.use(style)
            except OSError as e:
                logger.warning("Style '%s' not found, using default: %s", style, e)

        self.fig_size = (12, 8)
        self.dpi = 100
        self.line_colour = "#3b82f6"

    def _draw_loop(self, ax, points, xlabel: str, ylabel: str, title: str, label: str):
        if not points:
            ax.text(
                0.5,
                0.5,
                "No valid cycle computed",
                transform=ax.transAxes,
                ha="center",
                va="center",
                fontsize=12,
            )
        else:
            xs = [p.x for p in points]
            ys = [p.y for p in points]
            ax.plot(xs, ys, "-o", color=self.line_colour, linewidth=2, label=label)
            ax.fill(xs, ys, color=self.line_colour, alpha=0.1)
            for name, x, y in zip(_STATE_LABELS, xs, ys):
                ax.annotate(
                    name,
                    (x, y),
                    textcoords="offset points",
                    xytext=(6, 6),
                    fontsize=10,
                    fontweight="bold",
                )
            ax.legend(fontsize=10)

        ax.set_xlabel(xlabel, fontsize=12, fontweight="bold")
        ax.set_ylabel(ylabel, fontsize=12, fontweight="bold")
        ax.set_title(title, fontsize=14, fontweight="bold")
        ax.grid(True, alpha=0.3)

    def _finish(self, fig, save_path: Optional[str], show: bool, what: str):
        fig.tight_layout()
        if save_path:
            fig.savefig(save_path, dpi=300, bbox_inches="tight")
            logger.info("%s saved to %s", what, save_path)
        if show:
            plt.show()
        return fig

    def plot_pv_diagram(
        self,
        result: CycleResult,
        save_path: Optional[str] = None,
        ax=None,
        show: bool = False,
    ):
        """
        Create P-v (Pressure-Volume) diagram.

        Args:
            result: Calculator output
            save_path: Optional path to save figure
            ax: Existing axes to draw into (no saving or showing then)
            show: Display the figure interactively
        """
        own_figure = ax is None
        if own_figure:
            fig, ax = plt.subplots(figsize=(10, 8))
        else:
            fig = ax.figure

        self._draw_loop(
            ax,
            result.pv_data,
            "Volume (m³/kg)",
            "Pressure (MPa)",
            "P-v Diagram",
            f"{result.cycle_type.title} Cycle",
        )

        if own_figure:
            return self._finish(fig, save_path, show, "P-v diagram")
        return fig

    def plot_ts_diagram(
        self,
        result: CycleResult,
        save_path: Optional[str] = None,
        ax=None,
        show: bool = False,
    ):
        """
        Create T-s (Temperature-Entropy) diagram.

        Args:
            result: Calculator output
            save_path: Optional path to save figure
            ax: Existing axes to draw into (no saving or showing then)
            show: Display the figure interactively
        """
        own_figure = ax is None
        if own_figure:
            fig, ax = plt.subplots(figsize=(10, 8))
        else:
            fig = ax.figure

        self._draw_loop(
            ax,
            result.ts_data,
            "Entropy (kJ/kg·K)",
            "Temperature (K)",
            "T-s Diagram",
            f"{result.cycle_type.title} Cycle",
        )

        if own_figure:
            return self._finish(fig, save_path, show, "T-s diagram")
        return fig

    def plot_cycle_analysis(
        self, result: CycleResult, save_path: Optional[str] = None, show: bool = False
    ):
        """
        Create side-by-side P-v and T-s diagrams with a metrics box.

        Args:
            result: Calculator output
            save_path: Optional path to save figure
        """
        fig = plt.figure(figsize=(16, 7))
        gs = GridSpec(1, 2, figure=fig, wspace=0.3)

        ax1 = fig.add_subplot(gs[0, 0])
        self.plot_pv_diagram(result, ax=ax1)

        ax2 = fig.add_subplot(gs[0, 1])
        self.plot_ts_diagram(result, ax=ax2)

        summary = "\n".join(f"{label}: {value}" for label, value in result_metrics(result))
        ax1.text(
            0.95,
            0.95,
            summary,
            transform=ax1.transAxes,
            fontsize=10,
            verticalalignment="top",
            horizontalalignment="right",
            bbox=dict(boxstyle="round", facecolor="wheat", alpha=0.5),
        )

        fig.suptitle(
            f"{result.cycle_type.title} Cycle Analysis", fontsize=16, fontweight="bold"
        )
        return self._finish(fig, save_path, show, "Cycle analysis")

    def export_pdf_report(
        self,
        cycle_type: Union[CycleType, str],
        parameters: Union[CycleParameters, Mapping[str, Any]],
        result: CycleResult,
        filepath: str,
        generated_on: Optional[date] = None,
    ):
        """
        Write a two-page A4 PDF report: parameters and results, then diagrams.

        Args:
            cycle_type: Cycle the result belongs to
            parameters: Parameter record or camelCase mapping
            result: Calculator output
            filepath: Output PDF path
            generated_on: Report date (defaults to today)
        """
        cycle_type = CycleType.parse(cycle_type)
        if hasattr(parameters, "to_dict"):
            params_dict = parameters.to_dict()
        else:
            params_dict = dict(parameters)
        generated_on = generated_on or date.today()
        a4 = (8.27, 11.69)

        with PdfPages(filepath) as pdf:
            # Page 1: text summary
            fig = plt.figure(figsize=a4)
            fig.text(
                0.5,
                0.95,
                f"{cycle_type.title} Cycle Analysis",
                ha="center",
                fontsize=20,
            )
            fig.text(
                0.5,
                0.92,
                f"Generated on {generated_on.isoformat()}",
                ha="center",
                fontsize=12,
            )

            y = 0.86
            fig.text(0.1, y, "Input Parameters", fontsize=16)
            y -= 0.03
            for key, value in params_dict.items():
                fig.text(
                    0.12,
                    y,
                    f"{format_parameter_name(key)}: {format_parameter_value(value)}",
                    fontsize=10,
                )
                y -= 0.022

            y -= 0.02
            fig.text(0.1, y, "Results", fontsize=16)
            y -= 0.03
            for label, value in result_metrics(result):
                fig.text(0.12, y, f"{label}: {value}", fontsize=10)
                y -= 0.022
            pdf.savefig(fig)
            plt.close(fig)

            # Page 2: diagrams
            fig, (ax1, ax2) = plt.subplots(2, 1, figsize=a4)
            self.plot_pv_diagram(result, ax=ax1)
            self.plot_ts_diagram(result, ax=ax2)
            fig.tight_layout()
            pdf.savefig(fig)
            plt.close(fig)

        logger.info("PDF report saved to %s", filepath)
