from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from index_explorer.analysis.metrics import MetricSnapshot
from index_explorer.viz.common import plot_placeholder, save_figure


def plot_metrics_chart(snapshot: dict[str, MetricSnapshot], output_path: Path) -> Path:
    if not snapshot:
        return plot_placeholder("No metrics data available for this company", output_path)

    labels = list(snapshot)
    positions = np.arange(len(labels))
    averages = [snapshot[label].average for label in labels]
    latest = [snapshot[label].latest for label in labels]

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.bar(positions - 0.2, averages, width=0.4, color="#3498db", alpha=0.6, label="Average")
    ax.bar(positions + 0.2, latest, width=0.4, color="#2ecc71", alpha=0.6, label="Latest")
    ax.set_xticks(positions)
    ax.set_xticklabels(labels)
    ax.set_ylim(bottom=min(0.0, *averages, *latest))
    ax.set_title("Valuation metrics")
    ax.legend(loc="upper right")
    return save_figure(output_path)
