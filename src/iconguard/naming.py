"""
--------------------------------------------------------------------------------
AUTHOR:         Nishar A Sunkesala / FixMyK8s
DATE:           2026-10-17
PURPOSE:        Name & Signature helpers: turns layer names and node shapes
                into comparable keys (convention sanitizer, copy/paste suffix
                stripper, structural signature) plus the import-side name
                helpers used when uploaded SVGs become components.
--------------------------------------------------------------------------------
"""
import math
import re

# Copy/paste suffixes, most specific first. Heuristic: a name whose trailing
# number is meaningful ("button-2" as a distinct button) is stripped as well.
DUPLICATE_SUFFIXES = [
    re.compile(r"^copy\s+of\s+", re.IGNORECASE),      # "copy of icon"
    re.compile(r"[-_]\d+[-_]copy\Z", re.IGNORECASE),  # "icon-2-copy"
    re.compile(r"[-_]copy(\s+\d+)?\Z", re.IGNORECASE),  # "icon-copy", "icon_copy 2"
    re.compile(r"\s+copy(\s+\d+)?\Z", re.IGNORECASE),   # "icon copy", "icon copy 2"
    re.compile(r"\s*\(\d+\)\Z"),                       # "icon (2)"
    re.compile(r"[-_]\d+\Z"),                          # "icon-2", "icon_3"
    re.compile(r"\s+\d+\Z"),                           # "icon 2"
]

VARIANT_PROPERTY = re.compile(r"(Style|Size)=[^,]+,?\s*")

NOISE_WORDS = {"icon", "ic", "ico", "svg", "img", "asset", "copy", "final", "v2", "v3", "new", "old"}


def sanitize_name(name):
    """Lower-case, [a-z0-9-] only, single dashes, no dash at either end."""
    cleaned = re.sub(r"[^a-z0-9-]", "-", name.lower())
    cleaned = re.sub(r"-+", "-", cleaned)
    return cleaned.strip("-")


def base_name(name):
    """Strips accidental duplication suffixes ("icon copy 2" -> "icon")."""
    result = name
    for pattern in DUPLICATE_SUFFIXES:
        result = pattern.sub("", result, count=1)
    return re.sub(r"[-_\s]+\Z", "", result).strip()


def strip_variant_properties(name):
    """'Style=outline, Size=24 star' -> 'star'; falls back to the raw name."""
    stripped = VARIANT_PROPERTY.sub("", name).strip()
    return stripped or name


def parse_variant_properties(name):
    """'Style=duotone, Size=16' -> {'Style': 'duotone', 'Size': '16'}"""
    props = {}
    for part in name.split(","):
        key, sep, value = part.partition("=")
        if sep and key.strip():
            props[key.strip()] = value.strip()
    return props


def display_base_name(node):
    """Icon-level name: the set's name for variants, property-free name otherwise."""
    if node.kind == "asset":
        if node.is_variant_member:
            return node.parent.name
        return strip_variant_properties(node.name)
    return node.name


def _js_round(value):
    # Half-up like the host's Math.round, not banker's rounding
    return int(math.floor(value + 0.5))


def structural_signature(node):
    """
    Composite key: base name, kind, rounded size, vector count and visible
    paint counts. Equal keys mean structurally identical assets.
    """
    parts = [
        display_base_name(node).lower(),
        node.kind,
        str(_js_round(node.width)),
        str(_js_round(node.height)),
        f"v{len(node.find_all('vector-shape'))}",
        f"f{len(node.visible_fills)}",
        f"s{len(node.visible_strokes)}",
    ]
    return "-".join(parts)


# ---------------------------------------------------------------------------
# Import-side helpers
# ---------------------------------------------------------------------------

def simplify_icon_name(full_name):
    """
    Shortens long exported names to their first meaningful words:
    "ad-advertisting-square-banner-interface" -> "ad-advertisting-square"
    """
    name = re.sub(r"\.\w+\Z", "", full_name)
    if "--" in name:
        name = name.split("--")[0]

    parts = [p for p in re.split(r"[-_\s,]+", name) if p]
    cleaned = [p for p in parts if p.lower() not in NOISE_WORDS]
    meaningful = cleaned or parts
    return "-".join(meaningful[:3])


def group_by_base_icon(variants):
    """Buckets StyleVariantInfo entries by base icon name, keeping upload order."""
    grouped = {}
    for variant in variants:
        grouped.setdefault(variant.base_icon_name, []).append(variant)
    return grouped


def detect_stroke_usage(svg_content):
    """True when an SVG draws with strokes rather than fills."""
    stroke_attrs = re.findall(r"stroke\s*=\s*[\"'][^\"']+[\"']", svg_content, re.IGNORECASE)
    fill_attrs = re.findall(r"fill\s*=\s*[\"'][^\"']+[\"']", svg_content, re.IGNORECASE)
    has_stroke_width = re.search(r"stroke-width\s*[:=]", svg_content, re.IGNORECASE)
    has_fill_none = re.search(r"fill\s*=\s*[\"']none[\"']", svg_content, re.IGNORECASE)

    if has_stroke_width and has_fill_none:
        return True
    return len(stroke_attrs) > len(fill_attrs)
