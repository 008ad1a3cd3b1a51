from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt


def save_figure(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    return path


def plot_placeholder(message: str, output_path: Path) -> Path:
    """Blank figure carrying a message, used when a chart has nothing to draw."""
    fig, ax = plt.subplots(figsize=(12, 4))
    ax.text(0.5, 0.5, message, ha="center", va="center", fontsize=12, color="#475569")
    ax.set_axis_off()
    return save_figure(output_path)
