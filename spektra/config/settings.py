# Application settings

# --- Engine Parameters ---
ENGINE_DEFAULTS = {
    # Every adjustment slider runs over the same closed range
    "adjustment_min": -100.0,
    "adjustment_max": 100.0,

    # Spatial detail stage: "legacy" (scan-order, in-place) or "buffered"
    "spatial_mode": "legacy",

    # Tone region thresholds (HSL lightness of the source pixel)
    "whites_threshold": 0.7,
    "blacks_threshold": 0.3,
    "midpoint": 0.5,

    # Kernel shapes for the detail filters
    "clarity_radius": 2,
    "clarity_sigma_sq": 4.0,
    "texture_radius": 1,
}

# --- Preview Parameters ---
PREVIEW_DEFAULTS = {
    "max_preview_pixels": 4_000_000,
    "allow_upscale": False,
}

# --- Export Defaults ---
EXPORT_DEFAULTS = {
    "default_filename": "edited-image",
    "jpeg_quality": 92,
    "png_compression": 6,
}

# --- History / Scheduling ---
HISTORY_DEFAULTS = {
    "max_size": 100,
    "debounce_seconds": 0.5,
}

SCHEDULER_DEFAULTS = {
    "debounce_seconds": 0.016,  # ~60fps
    "max_workers": 1,
}

# --- Logging ---
LOGGING_LEVEL = "INFO" # Options: DEBUG, INFO, WARNING, ERROR
