"""
Default settings for the memory management simulator.

The Streamlit sidebar reads its initial values and bounds from here. Change
them to ship different classroom defaults.
"""

# PAGING #
DEFAULT_FRAMES = 3
MIN_FRAMES = 1
MAX_FRAMES = 10
DEFAULT_REFERENCE = "7 0 1 2 0 3 0 4 2 3 0 3 2 1 2 0 1 7 0 1"
BELADY_REFERENCE = "1 2 3 4 1 2 5 1 2 3 4 5"

# Frame counts plotted on the faults-vs-frames chart
CURVE_FRAME_RANGE = range(1, 8)

# ALLOCATION #
DEFAULT_HOLES = "100 500 200 300 600"
DEFAULT_PROCESS_SIZE = 212

# SEGMENTATION #
DEFAULT_SEGMENTS = "120 60 300 40"

# DISPLAY #
EVENT_LOG_LIMIT = 20   # most recent events shown, newest first
MIN_SPEED = 0.5        # playback speed bounds (ops/sec)
MAX_SPEED = 5.0
DEFAULT_SPEED = 1.0

HIT_COLOR = "lightgreen"
FAULT_COLOR = "salmon"
FREE_COLOR = "lightgray"
SELECTED_HOLE_COLOR = "lightgreen"
HOLE_COLOR = "lightblue"
