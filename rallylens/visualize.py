"""
Technique timeline plots.
"""

from typing import Optional, Sequence

import pandas as pd

from .constants import OVERALL_COMPONENTS


def plot_technique_timeline(timeline: pd.DataFrame, metrics: Optional[Sequence[str]] = None,
                            shot_frames: Sequence[int] = (), output_path=None, show: bool = False):
    """
    Plot technique scores over a clip.

    Args:
        timeline: DataFrame from technique_timeline()
        metrics: Metric columns to plot (default: the overall components)
        shot_frames: Frame indices to mark as shots
        output_path: Save the figure here (optional)
        show: Call plt.show()

    Returns:
        matplotlib Figure
    """
    import matplotlib.pyplot as plt

    metrics = list(metrics or OVERALL_COMPONENTS)
    fig, axes = plt.subplots(2, 1, figsize=(14, 8), sharex=True)

    # Overall technique
    axes[0].plot(timeline['frame'], timeline['overall_technique'], color='tab:blue', linewidth=2)
    axes[0].set_title('Overall Technique', fontsize=12, fontweight='bold')
    axes[0].set_ylabel('Score')
    axes[0].set_ylim([0, 100])
    axes[0].grid(True, alpha=0.3)

    # Component metrics
    for name in metrics:
        axes[1].plot(timeline['frame'], timeline[name], label=name.replace('_', ' ').title())
    axes[1].set_title('Technique Components', fontsize=12, fontweight='bold')
    axes[1].set_xlabel('Frame Index')
    axes[1].set_ylabel('Score')
    axes[1].set_ylim([0, 100])
    axes[1].grid(True, alpha=0.3)
    axes[1].legend(loc='lower right', fontsize=8)

    for ax in axes:
        for frame in shot_frames:
            ax.axvline(frame, color='red', linestyle='--', alpha=0.4)

    plt.tight_layout()
    if output_path:
        plt.savefig(output_path, dpi=150, bbox_inches='tight')
    if show:
        plt.show()
    return fig
