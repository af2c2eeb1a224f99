"""Global constants for the application."""

# Animation settings
DEFAULT_FPS = 24  # Default frames per second for animation
DEFAULT_BACKGROUND = "#ffffff"  # Opaque fill behind every frame
DEFAULT_COLOR_FROM = "#000000"
DEFAULT_COLOR_TO = "#ff0000"

# Speed control (speed is a multiplier, 1.0 = base duration)
SPEED_MIN = 0.25
SPEED_MAX = 50.0
SPEED_DEFAULT = 2.0
BASE_DURATION = 0.5  # Seconds per cycle at 1x speed
MIN_FRAMES = 3  # Fewest frames that still read as motion

# Glint overlay
GLINT_FRACTION_BASE = 0.02  # Fraction of path length before band width is added
GLINT_FRACTION_PER_BAND = 0.25
GLINT_FRACTION_MIN = 0.03
GLINT_FRACTION_MAX = 0.20
GLINT_MIN_LENGTH = 2.0  # User units
GLINT_GAP_LENGTH = 100_000.0  # Large enough that a glint never repeats on a path
GLINT_SPEED_MIN = 0.05  # Smallest glint speed multiplier (epsilon of the pacing lerp)
GLINT_PACE_SLOW = 3.0  # Pacing exponent at the smallest glint speed (ease-in)
GLINT_PACE_FAST = 0.5  # Pacing exponent at glint speed 1.0 (ease-out)

# Gradient sweep overlay
DEFAULT_WAVE_FREQUENCY = 4.0  # Gradient cycles across the scene width
DEFAULT_WAVE_BAND_WIDTH = 0.2  # Highlight band as a fraction of one cycle
WAVE_SPEED_FACTOR = 1.2  # Gradient travel relative to one cycle per animation
DEFAULT_GLINT_SPEED = 0.5

# Encoder defaults
DEFAULT_ENCODER_QUALITY = 10  # Pixel sampling interval for palette building (1 = every pixel)
DEFAULT_ENCODER_WORKERS = 2
GIF_PALETTE_SIZE = 256

# SVG
SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"
ANIMATED_PATH_ATTR = "data-dash-flow"  # Marks an animated path with its id
GLINT_PATH_ATTR = "data-dash-flow-glint"  # Marks a glint duplicate with its source id
WAVE_GRADIENT_ID = "dash-flow-wave"
