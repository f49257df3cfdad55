"""Coastal Shoaling Hazard Visualizer.

An animated wave-shoaling simulator for exploring how seabed slope, tsunami
intensity, and offshore depth shape the wave that reaches a seawall.
"""

__version__ = "0.1.0"
