"""Visualization utilities for sparse cellular automata."""

import re
from pathlib import Path
from typing import FrozenSet, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from .automaton import CellularAutomaton
from .cell import Coordinate
from .lattice import coordinates_to_array
from .rule import Rule


def render_grid(grid: np.ndarray, cell_size: int = 4) -> np.ndarray:
    """Fast vectorized grid rendering to an RGB image array."""
    h, w = grid.shape

    # Inactive cells: dark gray, active cells: white
    img = np.full((h * cell_size, w * cell_size, 3), 30, dtype=np.uint8)
    upscaled = np.repeat(np.repeat(grid, cell_size, axis=0), cell_size, axis=1)
    img[upscaled == 1] = 255

    return img


def history_bounds(history: Sequence[FrozenSet[Coordinate]], dimensions: int) -> Tuple[Coordinate, Coordinate]:
    """Component-wise bounding box of every active coordinate in the history."""
    points = [c for frame in history for c in frame]
    if not points:
        origin = (0,) * dimensions
        return origin, origin
    array = np.array(points, dtype=np.int64)
    return tuple(int(v) for v in array.min(axis=0)), tuple(int(v) for v in array.max(axis=0))


def history_frames(history: Sequence[FrozenSet[Coordinate]], dimensions: int) -> List[np.ndarray]:
    """Occupancy grids for every generation, all over the same bounding box."""
    bounds = history_bounds(history, dimensions)
    return [coordinates_to_array(frame, dimensions, bounds=bounds) for frame in history]


def space_time_diagram(history: Sequence[FrozenSet[Coordinate]]) -> np.ndarray:
    """Stack the rows of a 1-D history: one row per generation, time flowing down."""
    frames = history_frames(history, 1)
    return np.vstack(frames)


def save_image(grid: np.ndarray, filepath: str, cell_size: int = 4):
    """Save grid state as PNG image."""
    img = Image.fromarray(render_grid(grid, cell_size))
    img.save(filepath)


def save_animation(
    frames: List[np.ndarray],
    filepath: str,
    cell_size: int = 4,
    duration: int = 200,
    loop: int = 0,
):
    """Save a list of grids as animated GIF."""
    images = [Image.fromarray(render_grid(grid, cell_size)) for grid in frames]
    if images:
        images[0].save(
            filepath,
            save_all=True,
            append_images=images[1:],
            duration=duration,
            loop=loop,
        )


def visualize_rule(
    rule: Rule,
    steps: int = 10,
    permutation: Optional[Sequence[int]] = None,
    output_dir: str = "output",
    cell_size: int = 8,
) -> List[str]:
    """
    Grow the rule from a single seed cell and save pictures of it.

    1-D rules give one space-time PNG; higher dimensions give a GIF of the
    first two axes plus a PNG of the final generation.

    Returns:
        List of written file paths
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    ca = CellularAutomaton(rule.dimensions, rule, permutation)
    history = ca.run(steps, record_history=True)

    rule_name = f"{rule.dimensions}d_" + re.sub(r"[^0-9A-Za-z]+", "_", rule.to_string()).strip("_")
    rule_name = rule_name[:120]
    paths = []

    if rule.dimensions == 1:
        path = str(output_path / f"{rule_name}.png")
        save_image(space_time_diagram(history), path, cell_size=cell_size)
        paths.append(path)
        return paths

    frames = history_frames(history, rule.dimensions)
    gif_path = str(output_path / f"{rule_name}.gif")
    save_animation(frames, gif_path, cell_size=cell_size)
    paths.append(gif_path)

    final_path = str(output_path / f"{rule_name}_final.png")
    save_image(frames[-1], final_path, cell_size=cell_size)
    paths.append(final_path)

    return paths
