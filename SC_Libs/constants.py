"""
Constants and configuration values for Scene Canvas.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the library.
"""

# Preview constants
PREVIEW_MAX_DIM = 800

# Placement scale bounds (shared by pinch and slider paths)
MIN_PLACEMENT_SCALE = 0.1
MAX_PLACEMENT_SCALE = 5.0
DEFAULT_PLACEMENT_SCALE = 1.0

# Edit slider ranges
TONAL_EDIT_MIN = 0
TONAL_EDIT_MAX = 200
EFFECT_EDIT_MIN = 0
EFFECT_EDIT_MAX = 100

# Edit field names
FIELD_BRIGHTNESS = "brightness"
FIELD_CONTRAST = "contrast"
FIELD_SATURATION = "saturation"
FIELD_SHARPEN = "sharpen"
FIELD_VIGNETTE = "vignette"

# Sharpen convolution kernel
SHARPEN_KERNEL = (
    (0, -1, 0),
    (-1, 5, -1),
    (0, -1, 0),
)

# Vignette gradient stops: (offset, opacity factor)
VIGNETTE_STOPS = (
    (0.0, 0.0),
    (0.5, 0.2),
    (1.0, 0.7),
)

# Rec. 709 luma weights used by the saturate matrix
LUMA_RED = 0.2126
LUMA_GREEN = 0.7152
LUMA_BLUE = 0.0722

# Brush settings
DEFAULT_BRUSH_SIZE = 40
MIN_BRUSH_SIZE = 10
MAX_BRUSH_SIZE = 100
BRUSH_SIZE_STEP = 5
STROKE_COLOR = (239, 68, 68, 179)

# Mask colors
MASK_SELECTED = (255, 255, 255, 255)
MASK_UNSELECTED = (0, 0, 0, 255)

# Filter stage names
FILTER_SHARPEN = "Sharpen"
FILTER_COLOR_ADJUST = "Color Adjust"
FILTER_VIGNETTE = "Vignette"
EDIT_PIPELINE_ORDER = (FILTER_SHARPEN, FILTER_COLOR_ADJUST, FILTER_VIGNETTE)

# Supported file formats
SUPPORTED_UPLOAD_IMAGES = {".png", ".jpg", ".jpeg"}
SUPPORTED_UPLOAD_MIME_TYPES = {"image/png", "image/jpeg"}
UNSUPPORTED_FORMAT_MESSAGE = "For best results, please use PNG, JPG, or JPEG formats."

# File naming
EDITED_FILE_PREFIX = "edited-"
GENERATED_SCENE_PREFIX = "generated-scene-"
INPAINTED_SCENE_PREFIX = "inpainted-scene-"
BG_REMOVED_PREFIX = "bg-removed-"
DEFAULT_OUTPUT_FORMAT = "PNG"
