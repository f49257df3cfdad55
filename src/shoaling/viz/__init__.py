"""Visualization tools for the shoaling scene."""

from shoaling.viz.render import MatplotlibSurface, plot_wave_run, render_frame

__all__ = [
    "MatplotlibSurface",
    "plot_wave_run",
    "render_frame",
]
