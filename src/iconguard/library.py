"""
--------------------------------------------------------------------------------
AUTHOR:         Nishar A Sunkesala / FixMyK8s
DATE:           2026-10-17
PURPOSE:        Library browsing: per-icon style + metadata listing and the
                bulk metadata autofill stored in each asset-set's plugin data.
--------------------------------------------------------------------------------
"""
import json

from .logger import get_logger
from .metadata import analyze_icon_geometry, generate_metadata_from_name, merge_metadata
from .naming import parse_variant_properties
from .scene import SceneMutationError
from .style import analyze_icon_style

log = get_logger(__name__)

METADATA_KEY = "icon-metadata"


def autofill_metadata(node):
    """Name-based metadata enriched with shape hints."""
    return merge_metadata(generate_metadata_from_name(node.name), analyze_icon_geometry(node))


def load_metadata(scene, node):
    raw = scene.get_plugin_data(node, METADATA_KEY)
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        log.warning(f"⚠️  Unreadable metadata on '{node.name}', ignoring it")
        return None


def autofill_library(scene, overwrite=False):
    """Fills metadata for every asset-set; returns (filled, skipped, failed)."""
    filled = skipped = failed = 0

    for icon in scene.component_sets():
        if not overwrite and scene.get_plugin_data(icon, METADATA_KEY):
            log.debug(f"⊘ Skipping {icon.name} (already has metadata)")
            skipped += 1
            continue

        metadata = autofill_metadata(icon)
        try:
            scene.set_plugin_data(icon, METADATA_KEY, json.dumps(metadata.to_dict(), ensure_ascii=False))
        except SceneMutationError as err:
            log.warning(f"⚠️  Could not store metadata on '{icon.name}': {err.reason}")
            failed += 1
            continue
        filled += 1
        log.debug(f"✅ Auto-filled {icon.name}: {metadata.category}")

    return filled, skipped, failed


def describe_library(scene):
    """One row per asset-set: default style/size, detected style, stored metadata."""
    rows = []
    for icon in scene.component_sets():
        if not icon.children:
            continue
        props = parse_variant_properties(icon.children[0].name)
        analysis = analyze_icon_style(icon)
        rows.append({
            "id": icon.id,
            "name": icon.name,
            "style": props.get("Style", ""),
            "size": props.get("Size", ""),
            "icon_type": analysis.type,
            "confidence": analysis.confidence,
            "metadata": load_metadata(scene, icon),
        })
    return rows
