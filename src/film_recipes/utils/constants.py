"""
Constants and reference data for the Film Recipes platform.

This module defines all system-wide constants including:
- Application metadata
- Export schema version
- Allowed values for constrained columns (difficulty, source type, tags, images)
- Seed data for setting categories, setting definitions and style categories
"""

from typing import Dict, List, Tuple

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Film Recipes"
APP_VERSION = "0.1.0"
DATABASE_FILENAME = "film_recipes.db"
DATABASE_VERSION = "1.0"

# Version stamped into the metadata block of batch exports
EXPORT_SCHEMA_VERSION = "1.0"

# ============================================================================
# Constrained Column Values
# ============================================================================

DIFFICULTY_LEVELS: List[str] = ["beginner", "intermediate", "advanced"]

SOURCE_TYPES: List[str] = ["original", "curated", "community"]

# Source type assigned to recipes ingested from community spreadsheets
IMPORT_SOURCE_TYPE = "community"

TAG_CATEGORIES: List[str] = ["subject", "mood", "technique", "season"]

IMAGE_TYPES: List[str] = ["primary", "secondary"]

SETTING_DATA_TYPES: List[str] = ["enum", "integer", "numeric", "text", "boolean"]

# Placeholder sensor type for sensors first seen in an import
UNKNOWN_SENSOR_TYPE = "Unknown"

# ============================================================================
# Style Categories
# ============================================================================

STYLE_COLOR = "Color"
STYLE_BW = "B&W"

STYLE_CATEGORIES: List[Dict[str, str]] = [
    {"name": STYLE_COLOR, "description": "Colour recipes"},
    {"name": STYLE_BW, "description": "Black and white recipes"},
]

# ============================================================================
# Setting Categories and Definitions
# ============================================================================

SETTING_CATEGORIES: List[Dict] = [
    {"name": "Tone", "slug": "tone", "sort_order": 1,
     "description": "Dynamic range and tone curve"},
    {"name": "Color", "slug": "color", "sort_order": 2,
     "description": "White balance and colour rendering"},
    {"name": "Detail", "slug": "detail", "sort_order": 3,
     "description": "Sharpness, clarity and noise reduction"},
    {"name": "Effects", "slug": "effects", "sort_order": 4,
     "description": "Grain and colour chrome effects"},
    {"name": "Exposure", "slug": "exposure", "sort_order": 5,
     "description": "ISO and exposure compensation"},
]

# (name, slug, category slug, data type, unit, sort order)
SETTING_DEFINITIONS: List[Tuple[str, str, str, str, str, int]] = [
    ("Dynamic Range", "dynamic_range", "tone", "enum", None, 1),
    ("D Range Priority", "d_range_priority", "tone", "enum", None, 2),
    ("Highlight Tone", "highlight_tone", "tone", "numeric", None, 3),
    ("Shadow Tone", "shadow_tone", "tone", "numeric", None, 4),
    ("White Balance", "white_balance", "color", "text", None, 1),
    ("WB Shift Red", "wb_shift_red", "color", "integer", None, 2),
    ("WB Shift Blue", "wb_shift_blue", "color", "integer", None, 3),
    ("Color", "color", "color", "integer", None, 4),
    ("Monochromatic Color WC", "monochromatic_color_wc", "color", "integer", None, 5),
    ("Monochromatic Color MG", "monochromatic_color_mg", "color", "integer", None, 6),
    ("Sharpness", "sharpness", "detail", "integer", None, 1),
    ("Clarity", "clarity", "detail", "integer", None, 2),
    ("High ISO NR", "high_iso_nr", "detail", "integer", None, 3),
    ("Grain Effect", "grain_effect", "effects", "enum", None, 1),
    ("Grain Effect Size", "grain_effect_size", "effects", "enum", None, 2),
    ("Color Chrome Effect", "color_chrome_effect", "effects", "enum", None, 3),
    ("Color Chrome FX Blue", "color_chrome_fx_blue", "effects", "enum", None, 4),
    ("ISO", "iso", "exposure", "integer", None, 1),
    ("ISO Min", "iso_min", "exposure", "integer", None, 2),
    ("ISO Max", "iso_max", "exposure", "integer", None, 3),
    ("Exposure Compensation", "exposure_compensation", "exposure", "numeric", "EV", 4),
    ("Exposure Compensation Min", "exposure_compensation_min", "exposure", "numeric", "EV", 5),
    ("Exposure Compensation Max", "exposure_compensation_max", "exposure", "numeric", "EV", 6),
]

# Range-capable definitions and the (min, max) scalar settings that feed them
RANGE_SETTINGS: Dict[str, Tuple[str, str]] = {
    "ISO": ("ISO Min", "ISO Max"),
    "Exposure Compensation": ("Exposure Compensation Min", "Exposure Compensation Max"),
}

# ============================================================================
# Spreadsheet Columns
# ============================================================================

RECIPE_CSV_COLUMNS: Dict[str, str] = {
    "creator": "Creator",
    "name": "Name",
    "system": "Type",
    "style": "Color /BW",
    "camera": "Camera",
    "sensor": "Sensor",
    "film_simulation": "Base",
    "settings": "Settings",
    "published": "Published",
    "source_url": "URL",
    "tags": "Tags",
    "images": "Images",
    "description": "Description",
}

AUTHOR_CSV_COLUMNS: Dict[str, str] = {
    "name": "Name",
    "profile": "Site or Profile",
    "url": "URL",
}
