"""Model and drawing-surface constants.

The wave model is tuned for visual plausibility on a 600x300 drawing surface.
Canvas-unit constants scale proportionally with the surface size.
"""

# Input ranges
MIN_SLOPE = 1
MAX_SLOPE = 10
MIN_INTENSITY = 1
MAX_INTENSITY = 10
MIN_DEPTH_M = 10.0
MAX_DEPTH_M = 80.0
MIN_VISUAL_GAIN = 0.5
MAX_VISUAL_GAIN = 3.0

# Default inputs
DEFAULT_SLOPE = 5
DEFAULT_INTENSITY = 5
DEFAULT_DEPTH_M = 40.0
DEFAULT_VISUAL_GAIN = 1.0

# Seabed curve tension (slope 1 -> gentle, slope 10 -> abrupt)
MIN_TENSION = 0.2
MAX_TENSION = 0.9

# Propagation speeds (canvas units per time unit)
BASE_DEEP_SPEED = 0.6
REFERENCE_DEPTH_M = 40.0  # depth at which deep-water speed equals the base speed
SLOPE_SPEED = 0.2  # averaged speed on the slope (shoaling braking)

# Shoaling
GREEN_LAW_EXPONENT = 0.25  # H ~ d^(-1/4)
MIN_DEPTH_RATIO = 0.1
PROGRESS_POWER_PER_TENSION = 1.5
STEEP_SLOPE_THRESHOLD = 6
STEEP_REDUCTION_PER_STEP = 0.15  # 0.15, 0.30, 0.45, 0.60 for slopes 7-10

# Wave amplitude (canvas units per intensity step)
AMPLITUDE_PER_INTENSITY = 3.0

# Wave packet
PACKET_DURATION_S = 5.0
PACKET_BASE_HALF_WIDTH = 40.0
PACKET_HALF_WIDTH_PER_INTENSITY = 2.0
PACKET_CREST_SCALE = 2.0  # quadratic control point sits at twice the crest height

# Sea surface noise
SURFACE_BASE_AMPLITUDE = 1.5
SURFACE_AMPLITUDE_PER_INTENSITY = 0.85
SURFACE_BASE_FREQ = 0.015
SURFACE_CHOP_FREQ = 0.04
SURFACE_BASE_RATE = 0.0015  # rad per elapsed millisecond
SURFACE_CHOP_RATE = 0.003
SURFACE_BASE_WEIGHT = 0.6
SURFACE_CHOP_WEIGHT = 0.4
HIGHLIGHT_OFFSET_Y = -3.0
HIGHLIGHT_PHASE = 2.0

# Seawall overlay
SEAWALL_PX_PER_METER = 5.0
SEAWALL_DEFAULT_PX = 30.0
SEAWALL_WIDTH = 10.0

# Land shelf drawn beyond the shoreline
LAND_RUN = 50.0
LAND_RISE = 20.0

# Colors
SKY_COLOR = "#0f172a"
WATER_COLOR = "#0c4a6e"
HIGHLIGHT_COLOR = (56 / 255, 189 / 255, 248 / 255, 0.15)
SEABED_FILL = "#1e293b"
SEABED_EDGE = "#475569"
PACKET_FILL = (56 / 255, 189 / 255, 248 / 255, 0.6)
PACKET_EDGE = "#38bdf8"
SEAWALL_RECOMMENDED_COLOR = "#10b981"
SEAWALL_RECOMMENDED_EDGE = "#064e3b"
SEAWALL_DEFAULT_COLOR = "#64748b"
