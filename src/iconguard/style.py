"""
--------------------------------------------------------------------------------
AUTHOR:         Nishar A Sunkesala / FixMyK8s
DATE:           2026-10-17
PURPOSE:        The Style Engine: classifies an icon as outline, filled,
                duo-tone or mixed from its paint inventory.
--------------------------------------------------------------------------------
"""
import math

from .models import StyleAnalysis


def rgb_to_hex(color):
    """{'r': 1, 'g': 0.5, 'b': 0} -> '#ff8000'"""
    channels = [int(math.floor(color.get(c, 0) * 255 + 0.5)) for c in ("r", "g", "b")]
    return "#" + "".join(f"{max(0, min(255, v)):02x}" for v in channels)


def _visible_solid(paints):
    return [p for p in paints if p.is_solid and p.is_visible and p.opacity != 0]


def collect_paints(node):
    """Walks the subtree gathering fill/stroke colors and stroke weights."""
    fill_colors, stroke_colors, stroke_weights = [], [], []
    has_fills = has_strokes = False

    for n in node.walk():
        fills = _visible_solid(n.fills)
        if fills:
            has_fills = True
            for paint in fills:
                hex_color = rgb_to_hex(paint.color or {})
                if hex_color not in fill_colors:
                    fill_colors.append(hex_color)

        strokes = _visible_solid(n.strokes)
        if strokes:
            has_strokes = True
            for paint in strokes:
                hex_color = rgb_to_hex(paint.color or {})
                if hex_color not in stroke_colors:
                    stroke_colors.append(hex_color)
            if n.stroke_weight is not None and n.stroke_weight not in stroke_weights:
                stroke_weights.append(n.stroke_weight)

    return has_fills, has_strokes, fill_colors, stroke_colors, stroke_weights


def classify(has_fills, has_strokes, fill_colors, stroke_colors):
    """First matching rule wins."""
    if len(fill_colors) >= 2 or (fill_colors and stroke_colors):
        return "duo-tone"
    if has_fills and not has_strokes:
        return "filled"
    if has_strokes and not has_fills:
        return "outline"
    if has_fills and has_strokes and len(fill_colors) == 1 and len(stroke_colors) == 1:
        # Same color both ways reads as an outline sitting on its own background
        return "outline" if fill_colors[0] == stroke_colors[0] else "duo-tone"
    return "mixed"


def confidence_for(style, has_fills, has_strokes, fill_colors):
    if style == "outline" and has_strokes and not has_fills:
        return 1.0
    if style == "filled" and has_fills and not has_strokes:
        return 1.0
    if style == "duo-tone" and len(fill_colors) >= 2:
        return 0.9
    if style == "duo-tone" and has_fills and has_strokes:
        return 0.7
    return 0.5


def analyze_icon_style(node):
    """An asset-set is judged by its first member, a bare asset by itself."""
    target = node.children[0] if node.kind == "asset-set" and node.children else node

    if target.kind != "asset":
        return StyleAnalysis("mixed", False, False, [], [], [], 0.0)

    has_fills, has_strokes, fill_colors, stroke_colors, weights = collect_paints(target)
    style = classify(has_fills, has_strokes, fill_colors, stroke_colors)
    return StyleAnalysis(
        type=style,
        has_fills=has_fills,
        has_strokes=has_strokes,
        fill_colors=fill_colors,
        stroke_colors=stroke_colors,
        stroke_weights=weights,
        confidence=confidence_for(style, has_fills, has_strokes, fill_colors),
    )
