"""
Setting Transformer - maps free-text spreadsheet settings onto canonical
setting definitions.

Community spreadsheets spell settings every way imaginable ("DR", "d-range",
"dnamic range"), merge several settings into one cell ("R:4 B:-5") and
mix units into values ("5600K"). This module turns one raw cell into zero or
more canonical ``(name, value)`` pairs.

Every function here is total over string input and never raises:
- Unknown names come back trimmed and unchanged so they surface downstream.
- Names mapped to ``IGNORE`` are deliberately outside the target schema.
- Names mapped to a ``*_SPECIAL`` token are composite cells that must be
  split with ``parse_special_settings``.
- A composite cell whose text matches none of its patterns yields an empty
  list; the caller treats that as a dropped setting, not an error.

Usage:
    from film_recipes.services.setting_transformer import resolve_setting_cell

    resolution = resolve_setting_cell("WB Shift", "R:4 B:-5")
    resolution.outcome   # SettingOutcome.SPLIT
    resolution.settings  # (CanonicalSetting('WB Shift Red', '4'), CanonicalSetting('WB Shift Blue', '-5'))
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple


# ============================================================================
# Tokens
# ============================================================================

IGNORE = "IGNORE"
SPECIAL_SUFFIX = "_SPECIAL"

EV_SUGGESTION_SPECIAL = "EV_SUGGESTION_SPECIAL"
WB_SHIFT_SPECIAL = "WB_SHIFT_SPECIAL"
ISO_RANGE_SPECIAL = "ISO_RANGE_SPECIAL"
TONE_CURVE_SPECIAL = "TONE_CURVE_SPECIAL"
CCR_CCB_SPECIAL = "CCR_CCB_SPECIAL"
MONO_COLOR_SPECIAL = "MONO_COLOR_SPECIAL"

GRAIN_EFFECT = "Grain Effect"
GRAIN_EFFECT_SIZE = "Grain Effect Size"
COLOR_CHROME_EFFECT = "Color Chrome Effect"


class CanonicalSetting(NamedTuple):
    """A setting expressed in the canonical vocabulary."""

    name: str
    value: str


# ============================================================================
# Name Aliases (lower-cased raw name -> canonical name or token)
# ============================================================================

SETTING_NAME_ALIASES: Dict[str, str] = {
    # Dynamic Range
    "dr": "Dynamic Range",
    "dynamic range": "Dynamic Range",
    "dynamic-range": "Dynamic Range",
    "d-range": "Dynamic Range",
    "d range": "Dynamic Range",
    "dnamic range": "Dynamic Range",
    "dynamic rage": "Dynamic Range",
    "dr100": "Dynamic Range",
    "dr200": "Dynamic Range",
    "dr 200": "Dynamic Range",
    # D Range Priority
    "priority": "D Range Priority",
    "d range priority": "D Range Priority",
    "d-range priority": "D Range Priority",
    "drange priority": "D Range Priority",
    "dr priority": "D Range Priority",
    "dr-p": "D Range Priority",
    # White Balance
    "white-balance": "White Balance",
    "white balance": "White Balance",
    "wb": "White Balance",
    "wb auto/daylight": "White Balance",
    # Highlight Tone
    "highlights": "Highlight Tone",
    "highlight": "Highlight Tone",
    "highlight tone": "Highlight Tone",
    "htone": "Highlight Tone",
    "h-tone": "Highlight Tone",
    "hightlight tone": "Highlight Tone",
    "highlights tone": "Highlight Tone",
    # Shadow Tone
    "shadows": "Shadow Tone",
    "shadow": "Shadow Tone",
    "shadow tone": "Shadow Tone",
    "stone": "Shadow Tone",
    "s-tone": "Shadow Tone",
    "shadows tone": "Shadow Tone",
    # High ISO NR
    "noise reduction": "High ISO NR",
    "nr": "High ISO NR",
    "noise": "High ISO NR",
    "iso noise reduction": "High ISO NR",
    "noise redution": "High ISO NR",
    "high iso nr": "High ISO NR",
    "high iso noise reduction": "High ISO NR",
    "iso nr": "High ISO NR",
    # Sharpness
    "sharpening": "Sharpness",
    "sharpness": "Sharpness",
    "sharp": "Sharpness",
    # Grain Effect
    "grain": "Grain Effect",
    "grain effect": "Grain Effect",
    "grain off": "Grain Effect",
    "grain size": "Grain Effect Size",
    "grain effect size": "Grain Effect Size",
    # Color Chrome Effect
    "colour chrome effect": "Color Chrome Effect",
    "color chrome effect": "Color Chrome Effect",
    "colorchrome effect": "Color Chrome Effect",
    "color chrome": "Color Chrome Effect",
    "colour chrome": "Color Chrome Effect",
    "cce": "Color Chrome Effect",
    # Color Chrome FX Blue
    "colour chrome blue": "Color Chrome FX Blue",
    "colour chrome fx blue": "Color Chrome FX Blue",
    "color chrome blue effect": "Color Chrome FX Blue",
    "color chrome effect blue": "Color Chrome FX Blue",
    "color chrome fx blue": "Color Chrome FX Blue",
    "color chrome blue": "Color Chrome FX Blue",
    "colorchrome fx blue": "Color Chrome FX Blue",
    "chrome fx blue": "Color Chrome FX Blue",
    "ccfxb": "Color Chrome FX Blue",
    # Color
    "colour": "Color",
    "color": "Color",
    "saturation": "Color",
    # Clarity
    "clarity": "Clarity",
    "amount": "Clarity",
    # Exposure compensation (composite)
    "exp comp": "EV_SUGGESTION_SPECIAL",
    "exp. comp": "EV_SUGGESTION_SPECIAL",
    "exposure comp": "EV_SUGGESTION_SPECIAL",
    "exposure comp.": "EV_SUGGESTION_SPECIAL",
    "exposure compensation": "EV_SUGGESTION_SPECIAL",
    "exposure": "EV_SUGGESTION_SPECIAL",
    "ev suggestion": "EV_SUGGESTION_SPECIAL",
    "ev comp": "EV_SUGGESTION_SPECIAL",
    "ev compensation": "EV_SUGGESTION_SPECIAL",
    "ev": "EV_SUGGESTION_SPECIAL",
    # WB shift (composite)
    "wb shift": "WB_SHIFT_SPECIAL",
    "shift": "WB_SHIFT_SPECIAL",
    "wb color shift": "WB_SHIFT_SPECIAL",
    "wb colour shift": "WB_SHIFT_SPECIAL",
    "white balance shift": "WB_SHIFT_SPECIAL",
    "wb offset": "WB_SHIFT_SPECIAL",
    # ISO (composite)
    "iso": "ISO_RANGE_SPECIAL",
    "iso range": "ISO_RANGE_SPECIAL",
    "auto iso": "ISO_RANGE_SPECIAL",
    "iso auto": "ISO_RANGE_SPECIAL",
    # Tone curve (composite)
    "tone curve": "TONE_CURVE_SPECIAL",
    "tone curves": "TONE_CURVE_SPECIAL",
    "tone": "TONE_CURVE_SPECIAL",
    # Color Chrome Effect + FX Blue in one cell (composite)
    "ccr/ccb": "CCR_CCB_SPECIAL",
    "ccr / ccb": "CCR_CCB_SPECIAL",
    "ccr & ccb": "CCR_CCB_SPECIAL",
    "ccr ccb": "CCR_CCB_SPECIAL",
    "ccr": "CCR_CCB_SPECIAL",
    "color chrome & fx blue": "CCR_CCB_SPECIAL",
    "colour chrome & fx blue": "CCR_CCB_SPECIAL",
    "color chrome effect & fx blue": "CCR_CCB_SPECIAL",
    # Monochromatic color (composite)
    "monochromatic color": "MONO_COLOR_SPECIAL",
    "monochromatic colour": "MONO_COLOR_SPECIAL",
    "monochrome color": "MONO_COLOR_SPECIAL",
    "mono color": "MONO_COLOR_SPECIAL",
    "mono colour": "MONO_COLOR_SPECIAL",
    "wc/mg": "MONO_COLOR_SPECIAL",
    "wc mg": "MONO_COLOR_SPECIAL",
    "toning": "MONO_COLOR_SPECIAL",
    # Outside the target schema
    "aperture": "IGNORE",
    "aspect ratio": "IGNORE",
    "shutter speed": "IGNORE",
    "shutter": "IGNORE",
    "lens": "IGNORE",
    "focal length": "IGNORE",
    "flash": "IGNORE",
    "metering": "IGNORE",
    "film simulation": "IGNORE",
    "film sim": "IGNORE",
    "grain effect added in lightroom in post": "IGNORE",
}


# ============================================================================
# Value Aliases (canonical name -> raw value -> canonical value)
# ============================================================================

_OFF_WEAK_STRONG: Dict[str, str] = {
    "Off": "Off",
    "Weak": "Weak",
    "Strong": "Strong",
    "off": "Off",
    "weak": "Weak",
    "strong": "Strong",
    "N/A": "Off",
    "NA": "Off",
}

SETTING_VALUE_ALIASES: Dict[str, Dict[str, str]] = {
    "Dynamic Range": {
        "100": "DR100",
        "200": "DR200",
        "400": "DR400",
        "DR100": "DR100",
        "DR200": "DR200",
        "DR400": "DR400",
        "DR-Auto": "Auto",
        "DRPAuto": "Auto",
        "DRAUTO": "Auto",
        "DR Auto": "Auto",
        "Auto": "Auto",
        "auto": "Auto",
        "100%": "DR100",
        "200%": "DR200",
        "400%": "DR400",
        "400% D-Range": "DR400",
    },
    "D Range Priority": {
        "Off": "Off",
        "On": "On",
        "Auto": "Auto",
        "Strong": "Strong",
        "Weak": "Weak",
        "off": "Off",
        "auto": "Auto",
        "strong": "Strong",
        "weak": "Weak",
    },
    "Grain Effect": {
        **_OFF_WEAK_STRONG,
        "Weak, Small": "Weak",
        "Weak, Large": "Weak",
        "Strong, Small": "Strong",
        "Strong, Large": "Strong",
        "None": "Off",
    },
    "Grain Effect Size": {
        "Small": "Small",
        "Large": "Large",
        "small": "Small",
        "large": "Large",
    },
    "Color Chrome Effect": dict(_OFF_WEAK_STRONG),
    "Color Chrome FX Blue": dict(_OFF_WEAK_STRONG),
    "White Balance": {
        "Auto": "Auto",
        "Auto WB": "Auto",
        "AWB": "Auto",
        "Auto White Priority": "Auto White Priority",
        "Auto Ambience Priority": "Auto Ambience Priority",
        "Daylight": "Daylight",
        "Daylight/Fine": "Daylight",
        "Fine": "Daylight",
        "Shade": "Shade",
        "Fluorescent 1": "Fluorescent 1",
        "Fluorescent 2": "Fluorescent 2",
        "Fluorescent 3": "Fluorescent 3",
        "Incandescent": "Incandescent",
        "Underwater": "Underwater",
        "Custom": "Custom",
        "Grey card": "Custom",
    },
}


# ============================================================================
# Value Patterns
# ============================================================================

NUMERIC_PATTERN = re.compile(r"^[+-]?\d+(\.\d+)?$")
TEMPERATURE_PATTERN = re.compile(r"^\d+K$", re.IGNORECASE)

_NUMBER = r"[+-]?\d+(?:[./]\d+)?"

_WB_PREFIX = {
    "WB Shift Red": re.compile(r"\b(?:red|r)\s*:?\s*([+-]?\d+)", re.IGNORECASE),
    "WB Shift Blue": re.compile(r"\b(?:blue|b)\s*:?\s*([+-]?\d+)", re.IGNORECASE),
}
_WB_SUFFIX = {
    "WB Shift Red": re.compile(r"([+-]?\d+)\s*(?:red|r)\b", re.IGNORECASE),
    "WB Shift Blue": re.compile(r"([+-]?\d+)\s*(?:blue|b)\b", re.IGNORECASE),
}

_ISO_RANGE = re.compile(r"(\d+)\s*[-–]\s*(?:ISO\s*)?(\d+)", re.IGNORECASE)
_ISO_UP_TO = re.compile(r"up\s+to\s*(?:ISO\s*)?(\d+)", re.IGNORECASE)
_ISO_AUTO_MAX = re.compile(r"\bauto\b\D*?ISO\s*(\d+)", re.IGNORECASE)
_ISO_MINIMUM = re.compile(r"(\d+)\s*(?:minimum|min)\b", re.IGNORECASE)
_ISO_SINGLE = re.compile(r"^(?:ISO\s*)?(\d+)$", re.IGNORECASE)

_EV_RANGE = re.compile(rf"({_NUMBER})\s*(?:to|~)\s*({_NUMBER})", re.IGNORECASE)
_EV_SINGLE = re.compile(rf"({_NUMBER})")

_TONE_HIGHLIGHT = re.compile(r"Highlights?:?\s*([+-]?\d+(?:\.\d+)?)", re.IGNORECASE)
_TONE_SHADOW = re.compile(r"Shadows?:?\s*([+-]?\d+(?:\.\d+)?)", re.IGNORECASE)

_MONO_PREFIX = {
    "Monochromatic Color WC": re.compile(r"\bWC\s*:?\s*([+-]?\d+)", re.IGNORECASE),
    "Monochromatic Color MG": re.compile(r"\bMG\s*:?\s*([+-]?\d+)", re.IGNORECASE),
}
_MONO_SUFFIX = {
    "Monochromatic Color WC": re.compile(r"([+-]?\d+)\s*WC\b", re.IGNORECASE),
    "Monochromatic Color MG": re.compile(r"([+-]?\d+)\s*MG\b", re.IGNORECASE),
}

_STRENGTH_TOKEN = re.compile(r"[A-Za-z]+")
_STRENGTHS = frozenset(_OFF_WEAK_STRONG.values())


# ============================================================================
# Scalar Transformations
# ============================================================================


def transform_name(raw_name: str) -> str:
    """
    Map a raw setting name onto its canonical name (case-insensitive).

    Args:
        raw_name: Name as written in the spreadsheet

    Returns:
        Canonical name, ``IGNORE``, a ``*_SPECIAL`` token, or the trimmed
        input when the name is unknown

    Examples:
        >>> transform_name("  D-Range ")
        'Dynamic Range'
        >>> transform_name("Aperture")
        'IGNORE'
        >>> transform_name("Film Sim Strength")
        'Film Sim Strength'
    """
    normalized = raw_name.strip().lower()
    return SETTING_NAME_ALIASES.get(normalized, raw_name.strip())


def transform_value(setting_name: str, raw_value: str) -> str:
    """
    Map a raw value onto the canonical value for a canonical setting.

    Lookup in the per-setting value table is case-sensitive on the trimmed
    value. Numbers pass through unchanged and ``<digits>K`` temperatures lose
    their ``K``.

    Examples:
        >>> transform_value("Dynamic Range", "100%")
        'DR100'
        >>> transform_value("White Balance", "5600K")
        '5600'
        >>> transform_value("Highlight Tone", " +1.5 ")
        '+1.5'
    """
    trimmed = raw_value.strip()

    value_map = SETTING_VALUE_ALIASES.get(setting_name)
    if value_map and trimmed in value_map:
        return value_map[trimmed]

    if NUMERIC_PATTERN.match(trimmed):
        return trimmed

    if TEMPERATURE_PATTERN.match(trimmed):
        return trimmed[:-1]

    return trimmed


def is_special_setting(raw_name: str) -> bool:
    """True iff the raw name maps to a ``*_SPECIAL`` composite token."""
    return transform_name(raw_name).endswith(SPECIAL_SUFFIX)


# ============================================================================
# Composite Parsers
# ============================================================================


def _match_components(
    value: str,
    prefix_patterns: Dict[str, "re.Pattern"],
    suffix_patterns: Dict[str, "re.Pattern"],
) -> List[CanonicalSetting]:
    # "R:4 B:-5" puts labels first, "+2 Red, -1 Blue" puts numbers first;
    # the leading character picks which family is tried first.
    text = value.strip()
    number_first = bool(text) and (text[0].isdigit() or text[0] in "+-")
    if number_first:
        families = (suffix_patterns, prefix_patterns)
    else:
        families = (prefix_patterns, suffix_patterns)

    for patterns in families:
        result = []
        for name, pattern in patterns.items():
            match = pattern.search(text)
            if match:
                result.append(CanonicalSetting(name, match.group(1)))
        if result:
            return result
    return []


def _parse_wb_shift(value: str) -> List[CanonicalSetting]:
    """Red/blue shift: "R:4 B:-5", "R+2 B-1", "+2 Red, -1 Blue"."""
    return _match_components(value, _WB_PREFIX, _WB_SUFFIX)


def _parse_iso_range(value: str) -> List[CanonicalSetting]:
    """ISO: "800-3200", "Auto, up to ISO 3200", "Auto ISO 6400", "400 minimum", "ISO 800"."""
    range_match = _ISO_RANGE.search(value)
    if range_match:
        return [
            CanonicalSetting("ISO Min", range_match.group(1)),
            CanonicalSetting("ISO Max", range_match.group(2)),
        ]

    result = []
    min_match = _ISO_MINIMUM.search(value)
    if min_match:
        result.append(CanonicalSetting("ISO Min", min_match.group(1)))
    max_match = _ISO_UP_TO.search(value) or _ISO_AUTO_MAX.search(value)
    if max_match:
        result.append(CanonicalSetting("ISO Max", max_match.group(1)))
    if result:
        return result

    single_match = _ISO_SINGLE.match(value.strip())
    if single_match:
        return [CanonicalSetting("ISO", single_match.group(1))]
    return []


def parse_fraction(text: str) -> float:
    """
    Evaluate a signed integer, decimal or ``a/b`` fraction.

    Unparseable text and zero denominators evaluate to 0.

    Examples:
        >>> parse_fraction("+1/3")
        0.3333333333333333
        >>> parse_fraction("-0.7")
        -0.7
        >>> parse_fraction("1/0")
        0.0
    """
    match = re.search(r"([+-]?\d+)(?:/(\d+)|(\.\d+))?", text or "")
    if not match:
        return 0.0

    if match.group(3):
        return float(match.group(1) + match.group(3))

    numerator = int(match.group(1))
    denominator = int(match.group(2)) if match.group(2) else 1
    if denominator == 0:
        return 0.0
    return numerator / denominator


def format_number(number: float) -> str:
    """Shortest decimal string: integral values lose their fraction."""
    if number == int(number):
        return str(int(number))
    return repr(number)


def _parse_exposure_compensation(value: str) -> List[CanonicalSetting]:
    """Exposure compensation: "+1/3 to +2/3", "0 to +1", "0EV", "-2/3"."""
    range_match = _EV_RANGE.search(value)
    if range_match:
        return [
            CanonicalSetting(
                "Exposure Compensation Min", format_number(parse_fraction(range_match.group(1)))
            ),
            CanonicalSetting(
                "Exposure Compensation Max", format_number(parse_fraction(range_match.group(2)))
            ),
        ]

    single_match = _EV_SINGLE.search(value)
    if single_match:
        return [
            CanonicalSetting("Exposure Compensation Min", "0"),
            CanonicalSetting(
                "Exposure Compensation Max", format_number(parse_fraction(single_match.group(1)))
            ),
        ]
    return []


def _parse_tone_curve(value: str) -> List[CanonicalSetting]:
    """Tone curve: "Highlights +2 Shadows -1", "Highlight: +1 Shadow: +2"."""
    result = []
    highlight_match = _TONE_HIGHLIGHT.search(value)
    if highlight_match:
        result.append(CanonicalSetting("Highlight Tone", highlight_match.group(1)))
    shadow_match = _TONE_SHADOW.search(value)
    if shadow_match:
        result.append(CanonicalSetting("Shadow Tone", shadow_match.group(1)))
    return result


def _parse_grain_effect(value: str) -> List[CanonicalSetting]:
    """Grain with size: "Weak, Small", "Strong, Large"."""
    parts = [part.strip() for part in value.split(",")]
    result = []
    if parts[0]:
        result.append(CanonicalSetting(GRAIN_EFFECT, transform_value(GRAIN_EFFECT, parts[0])))
    if len(parts) >= 2 and parts[1]:
        result.append(CanonicalSetting(GRAIN_EFFECT_SIZE, parts[1]))
    return result


def _parse_monochromatic_color(value: str) -> List[CanonicalSetting]:
    """Monochromatic color: "WC +2 MG -1", "WC: 3, MG: 0"."""
    return _match_components(value, _MONO_PREFIX, _MONO_SUFFIX)


def _parse_ccr_ccb(value: str) -> List[CanonicalSetting]:
    """One strength applied to both Color Chrome Effect and FX Blue."""
    strength = transform_value(COLOR_CHROME_EFFECT, value)
    if strength not in _STRENGTHS:
        match = _STRENGTH_TOKEN.search(value)
        if not match:
            return []
        strength = transform_value(COLOR_CHROME_EFFECT, match.group(0).capitalize())
    if strength not in _STRENGTHS:
        return []
    return [
        CanonicalSetting(COLOR_CHROME_EFFECT, strength),
        CanonicalSetting("Color Chrome FX Blue", strength),
    ]


SPECIAL_PARSERS: Dict[str, Callable[[str], List[CanonicalSetting]]] = {
    WB_SHIFT_SPECIAL: _parse_wb_shift,
    ISO_RANGE_SPECIAL: _parse_iso_range,
    EV_SUGGESTION_SPECIAL: _parse_exposure_compensation,
    TONE_CURVE_SPECIAL: _parse_tone_curve,
    CCR_CCB_SPECIAL: _parse_ccr_ccb,
    MONO_COLOR_SPECIAL: _parse_monochromatic_color,
}


def parse_special_settings(raw_name: str, raw_value: str) -> List[CanonicalSetting]:
    """
    Split a composite cell into canonical settings.

    Dispatches on the canonical token of the raw name, so every alias of a
    composite setting reaches its parser. A grain cell carrying a size
    ("Weak, Small") is split as well.

    Returns:
        Zero, one or two canonical settings. Non-composite names and
        unparseable text both return an empty list.

    Examples:
        >>> parse_special_settings("iso", "800-3200")
        [CanonicalSetting(name='ISO Min', value='800'), CanonicalSetting(name='ISO Max', value='3200')]
        >>> parse_special_settings("ev", "0EV")
        [CanonicalSetting(name='Exposure Compensation Min', value='0'), CanonicalSetting(name='Exposure Compensation Max', value='0')]
    """
    token = transform_name(raw_name)
    parser = SPECIAL_PARSERS.get(token)
    if parser is not None:
        return parser(raw_value)
    if token == GRAIN_EFFECT and "," in raw_value:
        return _parse_grain_effect(raw_value)
    return []


# ============================================================================
# Cell Resolution
# ============================================================================


class SettingOutcome(str, Enum):
    """How a raw cell was interpreted."""

    MAPPED = "mapped"  # known alias, one canonical setting
    PASSTHROUGH = "passthrough"  # unknown name, kept verbatim
    IGNORED = "ignored"  # deliberately outside the schema
    SPLIT = "split"  # composite cell, one or more canonical settings
    DROPPED = "dropped"  # composite cell that matched no pattern


@dataclass(frozen=True)
class SettingResolution:
    """Result of resolving one raw setting cell."""

    raw_name: str
    raw_value: str
    outcome: SettingOutcome
    settings: Tuple[CanonicalSetting, ...] = ()

    @property
    def canonical_name(self) -> Optional[str]:
        """Canonical name of a single-setting resolution."""
        if self.outcome in (SettingOutcome.MAPPED, SettingOutcome.PASSTHROUGH):
            return self.settings[0].name
        return None


def resolve_setting_cell(raw_name: str, raw_value: str) -> SettingResolution:
    """
    Resolve one ``(raw_name, raw_value)`` cell into canonical settings.

    Examples:
        >>> resolve_setting_cell("Aperture", "f/8").outcome
        <SettingOutcome.IGNORED: 'ignored'>
        >>> resolve_setting_cell("DR", "400%").settings
        (CanonicalSetting(name='Dynamic Range', value='DR400'),)
    """
    name = transform_name(raw_name)

    if name == IGNORE:
        return SettingResolution(raw_name, raw_value, SettingOutcome.IGNORED)

    if name.endswith(SPECIAL_SUFFIX) or (name == GRAIN_EFFECT and "," in raw_value):
        settings = parse_special_settings(raw_name, raw_value)
        outcome = SettingOutcome.SPLIT if settings else SettingOutcome.DROPPED
        return SettingResolution(raw_name, raw_value, outcome, tuple(settings))

    if raw_name.strip().lower() in SETTING_NAME_ALIASES:
        outcome = SettingOutcome.MAPPED
    else:
        outcome = SettingOutcome.PASSTHROUGH
    setting = CanonicalSetting(name, transform_value(name, raw_value))
    return SettingResolution(raw_name, raw_value, outcome, (setting,))
