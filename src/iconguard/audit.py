"""
--------------------------------------------------------------------------------
AUTHOR:         Nishar A Sunkesala / FixMyK8s
DATE:           2026-10-17
PURPOSE:        The Audit Engine: runs the five icon-library detectors
                (duplicates, stroke weights, fill policy, stray geometry,
                naming) over a node set and assembles the AuditReport.
                Read-only: no node is ever modified here.
--------------------------------------------------------------------------------
"""
import time

from .logger import get_logger
from .models import (
    AuditIssue, AuditOptions, AuditReport, AuditTotals, CollisionDetails,
    DuplicateDetails, FillPolicyDetails, GeometryDetails, MixedWeightDetails,
    NamingDetails, ReportMetadata, StrokeWeightDetails,
)
from .naming import (
    base_name, display_base_name, parse_variant_properties, sanitize_name,
    structural_signature,
)
from .scene import COMPONENT_TYPES

log = get_logger(__name__)


def fmt_weight(weight):
    """1.0 -> '1', 1.5 -> '1.5'"""
    return f"{weight:g}"


def weight_key(weight):
    """Exact weight for issue ids: 2 -> '2', 1.2345671 -> '1.2345671'"""
    text = repr(float(weight))
    return text[:-2] if text.endswith(".0") else text


def run_audit(nodes, scope, options=None):
    """Runs every detector and returns a fresh, immutable report."""
    options = options or AuditOptions()
    live = [n for n in nodes if not n.removed]

    duplicate_issues = find_duplicates(live)
    issues = (
        duplicate_issues
        + check_stroke_thickness(live, options.allowed_stroke_weights)
        + check_fill_policy(live, options.outline_only_policy)
        + check_geometry(live)
        + check_naming(live)
    )

    duplicate_groups = len({i.group_id for i in duplicate_issues if i.group_id})
    now_ms = int(time.time() * 1000)

    log.debug(f"🔍 Audit '{scope}': {len(nodes)} nodes, {len(issues)} issues")
    return AuditReport(
        run_id=f"audit-{now_ms}",
        timestamp=now_ms,
        scope=scope,
        totals=AuditTotals(
            nodes_scanned=len(nodes),
            issues_found=len(issues),
            duplicate_groups=duplicate_groups,
        ),
        issues=tuple(issues),
        metadata=collect_report_metadata(live, options),
    )


def collect_report_metadata(nodes, options):
    """Which variant properties the audited asset-sets were built with."""
    styles = set()
    has_sizes = False
    for node in nodes:
        if node.kind != "asset-set":
            continue
        for member in node.children:
            props = parse_variant_properties(member.name)
            if "Style" in props:
                styles.add((node.id, props["Style"]))
            if "Size" in props:
                has_sizes = True

    per_set = {}
    for set_id, _style in styles:
        per_set[set_id] = per_set.get(set_id, 0) + 1
    used_styles = any(count > 1 for count in per_set.values())

    variant_properties = []
    if used_styles:
        variant_properties.append("Style")
    if has_sizes:
        variant_properties.append("Size")

    return ReportMetadata(
        import_used_sizes=bool(options.sizes) or has_sizes,
        import_used_styles=used_styles,
        variant_properties=variant_properties,
    )


# ---------------------------------------------------------------------------
# 1. Duplicates
# ---------------------------------------------------------------------------

def _duplicate_candidates(nodes):
    # Variant members are intentional style/size variants, never duplicates
    return [n for n in nodes if n.type in COMPONENT_TYPES and not n.is_variant_member]


def _group_by(nodes, key):
    groups = {}
    for node in nodes:
        groups.setdefault(key(node), []).append(node)
    return groups


def find_duplicates(nodes):
    candidates = _duplicate_candidates(nodes)
    return find_name_based_duplicates(candidates) + find_geometry_based_duplicates(candidates)


def find_name_based_duplicates(nodes):
    """"icon", "icon 2", "icon copy" -> one group keyed by base name."""
    issues = []
    for name, members in _group_by(nodes, lambda n: base_name(n.name)).items():
        if len(members) < 2:
            continue
        group_id = f"dup-name-{name}"
        for node in members:
            issues.append(AuditIssue(
                id=f"duplicate-name-{node.id}",
                type="duplicate",
                severity="warning",
                node_id=node.id,
                node_name=node.name,
                message=f'Duplicate name found ({len(members)} icons named "{name}" or similar)',
                details=DuplicateDetails(len(members), name, "name-pattern"),
                group_id=group_id,
            ))
    return issues


def find_geometry_based_duplicates(nodes):
    issues = []
    for signature, members in _group_by(nodes, structural_signature).items():
        if len(members) < 2:
            continue
        group_id = f"dup-geo-{signature}"
        shown = display_base_name(members[0]) or "Unknown"
        for node in members:
            issues.append(AuditIssue(
                id=f"duplicate-geo-{node.id}",
                type="duplicate",
                severity="warning",
                node_id=node.id,
                node_name=node.name,
                message=f'Exact duplicate found ({len(members)} identical "{shown}" icons)',
                details=DuplicateDetails(len(members), shown, "geometry"),
                group_id=group_id,
            ))
    return issues


# ---------------------------------------------------------------------------
# 2. Stroke thickness
# ---------------------------------------------------------------------------

def check_stroke_thickness(nodes, allowed_weights):
    issues = []
    if not allowed_weights:
        return issues

    allowed = list(allowed_weights)
    allowed_label = ", ".join(fmt_weight(w) for w in allowed)

    for node in nodes:
        vectors = node.find_all("vector-shape")
        if not vectors:
            continue

        weights = []
        stroke_count = 0
        fill_count = 0
        for vec in vectors:
            if vec.visible_strokes:
                stroke_count += 1
                if vec.stroke_weight and vec.stroke_weight not in weights:
                    weights.append(vec.stroke_weight)
            if vec.visible_fills:
                fill_count += 1

        # Filled-dominant icons are not outline icons; their weight is irrelevant
        if fill_count > stroke_count or stroke_count == 0:
            continue

        for weight in weights:
            if weight not in allowed:
                issues.append(AuditIssue(
                    id=f"stroke-{node.id}-{weight_key(weight)}",
                    type="stroke-thickness",
                    severity="warning",
                    node_id=node.id,
                    node_name=node.name,
                    message=(f"Stroke weight {fmt_weight(weight)}px not in allowed list "
                             f"(expected: {allowed_label}px)"),
                    details=StrokeWeightDetails(weight, allowed),
                ))

        if len(weights) > 1:
            issues.append(AuditIssue(
                id=f"stroke-mixed-{node.id}",
                type="stroke-thickness",
                severity="info",
                node_id=node.id,
                node_name=node.name,
                message=f"Mixed stroke weights: {', '.join(fmt_weight(w) for w in weights)}px",
                details=MixedWeightDetails(list(weights)),
            ))

    return issues


# ---------------------------------------------------------------------------
# 3. Fill policy
# ---------------------------------------------------------------------------

def check_fill_policy(nodes, outline_only):
    issues = []
    if not outline_only:
        return issues

    for node in nodes:
        for vec in node.find_all("vector-shape"):
            if vec.visible_fills and not vec.visible_strokes:
                issues.append(AuditIssue(
                    id=f"fill-policy-{node.id}-{vec.id}",
                    type="fill-policy",
                    severity="error",
                    node_id=node.id,
                    node_name=node.name,
                    message="Filled vector found (outline-only policy)",
                    details=FillPolicyDetails(vec.id, vec.name),
                ))
    return issues


# ---------------------------------------------------------------------------
# 4. Geometry
# ---------------------------------------------------------------------------

def check_geometry(nodes):
    issues = []
    for node in nodes:
        for desc in node.find_all():
            found = []
            if desc.visible is False:
                found.append(("hidden", "info", f"Hidden layer: {desc.name}"))
            if desc.opacity == 0:
                found.append(("zero-opacity", "info", f"Zero opacity layer: {desc.name}"))
            if desc.kind in ("group", "container") and not desc.children:
                found.append(("empty-group", "warning", f"Empty group: {desc.name}"))

            for problem, severity, message in found:
                prefix = {"hidden": "hidden", "zero-opacity": "opacity", "empty-group": "empty"}[problem]
                issues.append(AuditIssue(
                    id=f"{prefix}-{node.id}-{desc.id}",
                    type="geometry",
                    severity=severity,
                    node_id=node.id,
                    node_name=node.name,
                    message=message,
                    details=GeometryDetails(desc.id, desc.name, problem),
                ))
    return issues


# ---------------------------------------------------------------------------
# 5. Naming
# ---------------------------------------------------------------------------

def check_naming(nodes):
    issues = []
    by_name = {}

    for node in nodes:
        # Variant names like "Style=duotone, Size=16" are correct as they are
        if node.is_variant_member:
            continue

        suggested = sanitize_name(node.name)
        if node.name != suggested:
            issues.append(AuditIssue(
                id=f"naming-{node.id}",
                type="naming",
                severity="warning",
                node_id=node.id,
                node_name=node.name,
                message=f'Name doesn\'t follow convention: should be "{suggested}"',
                details=NamingDetails(node.name, suggested),
            ))
        by_name.setdefault(node.name, []).append(node)

    for name, members in by_name.items():
        if len(members) < 2:
            continue
        for node in members:
            issues.append(AuditIssue(
                id=f"collision-{node.id}",
                type="naming",
                severity="error",
                node_id=node.id,
                node_name=name,
                message=f"Name collision ({len(members)} nodes with same name)",
                details=CollisionDetails(len(members)),
            ))

    return issues
