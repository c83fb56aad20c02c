"""
Static map of the min-max normalized generalized cost.

Each trip geometry is drawn coloured by `min_max_normalized_cost`
(viridis colour scale) and the figure is written to a PNG.
"""

import logging
from pathlib import Path
from typing import Union

import geopandas as gpd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)

def plot_cost_map(
    results: gpd.GeoDataFrame,
    output_file: Union[str, Path],
    column: str = "min_max_normalized_cost",
    title: str = "Normalized Generalized Cost"
) -> Path:
    """
    Plots trip geometries coloured by `column` and saves the figure.

    Args:
        results (GeoDataFrame): Trip cost records with geometry.
        output_file (str | Path): PNG path.
        column (str): Column used for colouring.
        title (str): Figure title.

    Returns:
        Path: The written image.
    """
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(10, 10))
    results.plot(
        column=column,
        cmap="viridis",
        linewidth=1.5,
        legend=True,
        legend_kwds={"label": column, "shrink": 0.6},
        ax=ax
    )
    ax.set_title(title)
    ax.set_axis_off()
    fig.tight_layout()
    fig.savefig(output_file, dpi=150)
    plt.close(fig)

    logger.info(f"Cost map saved to '{output_file}'.")
    return output_file
