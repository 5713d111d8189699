"""Plots of evolution progress."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    import matplotlib.figure

    from imogen.session import GenerationRecord


def render_history(
    history: Sequence['GenerationRecord'],
    figsize: tuple[int, int] = (8, 5),
    title: str | None = None,
) -> "matplotlib.figure.Figure":
    """Plot best and mean fitness per generation.

    Args:
        history: Generation records in order.
        figsize: Figure size in inches (width, height).
        title: Optional title for the figure.

    Returns:
        Matplotlib Figure object.
    """
    import matplotlib.pyplot as plt

    generations = [r.generation for r in history]

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(generations, [r.best_fitness for r in history], label="best")
    ax.plot(generations, [r.mean_fitness for r in history], label="mean", alpha=0.6)
    ax.set_xlabel("generation")
    ax.set_ylabel("distance (lower is better)")
    ax.legend()

    if title:
        ax.set_title(title)

    fig.tight_layout()
    return fig


def save_history_plot(
    history: Sequence['GenerationRecord'],
    path: str | Path,
    dpi: int = 100,
    **kwargs,
) -> None:
    """Save the fitness history plot to an image file."""
    import matplotlib.pyplot as plt

    fig = render_history(history, **kwargs)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
