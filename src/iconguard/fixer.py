"""
--------------------------------------------------------------------------------
AUTHOR:         Nishar A Sunkesala / FixMyK8s
DATE:           2026-10-17
PURPOSE:        The Fixer Engine: Auto-Remediator for audit findings.
                Best-effort batches: every node is re-resolved by id, a node
                that is gone counts as already handled, a node that refuses
                a write counts as failed, and the batch always runs to the end.
--------------------------------------------------------------------------------
"""
from .audit import run_audit
from .logger import get_logger
from .models import (
    ISSUE_TYPES, CollisionDetails, FillPolicyDetails, FixOutcome, GeometryDetails,
    MixedWeightDetails, NamingDetails, StrokeWeightDetails,
)
from .scene import Paint, SceneMutationError

log = get_logger(__name__)

CARD_PREFIX = "Card:"
CONVERTED_STROKE_WEIGHT = 1.5


def apply_fixes(scene, issues, selected_ids):
    """Applies the selected issues, kind by kind, duplicates first."""
    selected = set(selected_ids)
    chosen = [i for i in issues if i.id in selected]

    outcome = FixOutcome()
    for issue_type in ISSUE_TYPES:
        partition = [i for i in chosen if i.type == issue_type]
        if partition:
            outcome.merge(FIXERS[issue_type](scene, partition))

    log.debug(f"🩹 Fix batch: {outcome.applied} applied, {outcome.failed} failed")
    return outcome


def generate_fix_preview(issues, selected_ids):
    """One summary line per issue kind present in the selection. No mutation."""
    selected = set(selected_ids)
    chosen = [i for i in issues if i.id in selected]
    counts = {t: 0 for t in ISSUE_TYPES}
    for issue in chosen:
        counts[issue.type] += 1

    preview = []
    if counts["duplicate"]:
        groups = {i.group_id for i in chosen if i.type == "duplicate" and i.group_id}
        preview.append(f"Delete {counts['duplicate']} duplicate icons ({len(groups)} groups)")
    if counts["stroke-thickness"]:
        preview.append(f"Fix {counts['stroke-thickness']} stroke thickness issues")
    if counts["fill-policy"]:
        preview.append(f"Convert {counts['fill-policy']} fills to strokes")
    if counts["geometry"]:
        preview.append(f"Clean up {counts['geometry']} geometry issues")
    if counts["naming"]:
        preview.append(f"Fix {counts['naming']} naming issues")
    return preview


def _group(issues, key):
    groups = {}
    for issue in issues:
        groups.setdefault(key(issue), []).append(issue)
    return groups


def _failed(outcome, err):
    outcome.failed += 1
    log.warning(f"⚠️  Skipped {err.node_id}: {err.reason}")


# ---------------------------------------------------------------------------
# Per-kind remediation
# ---------------------------------------------------------------------------

def fix_duplicates(scene, issues):
    outcome = FixOutcome()
    groups = _group([i for i in issues if i.group_id], lambda i: i.group_id)

    for group_issues in groups.values():
        if len(group_issues) <= 1:
            continue

        keep, to_delete = group_issues[0], group_issues[1:]
        deleted = 0
        for issue in to_delete:
            node = scene.get_node(issue.node_id)
            if node is None:
                continue  # removed earlier in this batch or a previous run

            target = node
            # Imported icons sit in a "Card: <name>" wrapper; drop the whole card
            parent = node.parent
            if parent is not None and parent.type == "FRAME" and parent.name.startswith(CARD_PREFIX):
                target = parent
                log.debug(f"Deleting card '{parent.name}' containing duplicate '{node.name}'")

            try:
                scene.remove(target)
            except SceneMutationError as err:
                _failed(outcome, err)
                continue
            deleted += 1
            outcome.applied += 1

        if deleted:
            outcome.summary.append(f'Removed {deleted} duplicate(s) of "{keep.node_name}"')

    return outcome


def nearest_weight(current, allowed):
    """Closest allowed value; on a tie the first candidate in list order wins."""
    return min(allowed, key=lambda w: abs(w - current))


def fix_stroke_thickness(scene, issues):
    outcome = FixOutcome()

    for node_id, node_issues in _group(issues, lambda i: i.node_id).items():
        node = scene.get_node(node_id)
        if node is None:
            continue

        # Mixed-weight notices carry no allowed list and are not auto-fixable
        weight_issues = [i for i in node_issues if isinstance(i.details, StrokeWeightDetails)]
        if not weight_issues or not weight_issues[0].details.allowed_weights:
            continue
        allowed = weight_issues[0].details.allowed_weights

        fixed = 0
        for vec in node.find_all("vector-shape"):
            current = vec.stroke_weight
            if current is None or current in allowed:
                continue
            try:
                scene.set_stroke_weight(vec, nearest_weight(current, allowed))
            except SceneMutationError as err:
                _failed(outcome, err)
                continue
            fixed += 1
            outcome.applied += 1

        if fixed:
            outcome.summary.append(f'Fixed {fixed} stroke weight(s) in "{node.name}"')

    return outcome


def fix_fill_policy(scene, issues):
    outcome = FixOutcome()

    for node_id, node_issues in _group(issues, lambda i: i.node_id).items():
        node = scene.get_node(node_id)
        if node is None:
            continue

        converted = 0
        for issue in node_issues:
            if not isinstance(issue.details, FillPolicyDetails):
                continue
            vec = scene.get_node(issue.details.vector_id)
            if vec is None or vec.kind != "vector-shape":
                continue

            fills = vec.visible_fills
            if len(fills) != 1 or not fills[0].is_solid:
                continue  # gradients/images, layered fills, or already converted
            fill = fills[0]

            try:
                scene.set_strokes(vec, [Paint("SOLID", dict(fill.color or {}))])
                scene.set_stroke_weight(vec, CONVERTED_STROKE_WEIGHT)
                scene.set_fills(vec, [])
            except SceneMutationError as err:
                _failed(outcome, err)
                continue
            converted += 1
            outcome.applied += 1

        if converted:
            outcome.summary.append(f'Converted {converted} fill(s) to stroke in "{node.name}"')

    return outcome


def fix_geometry(scene, issues):
    outcome = FixOutcome()

    for issue in issues:
        if not isinstance(issue.details, GeometryDetails):
            continue
        # Target the flagged layer itself, never the icon that owns it
        layer = scene.get_node(issue.details.layer_id)
        if layer is None:
            continue
        try:
            scene.remove(layer)
        except SceneMutationError as err:
            _failed(outcome, err)
            continue
        outcome.applied += 1

    if outcome.applied:
        outcome.summary.append(f"Cleaned up {outcome.applied} geometry issue(s)")
    return outcome


def fix_naming(scene, issues):
    outcome = FixOutcome()

    # One final name per node, decided before any write
    suggested = {
        i.node_id: i.details.suggested for i in issues
        if isinstance(i.details, NamingDetails) and i.details.suggested
    }
    targets = {}
    for issue in issues:
        if isinstance(issue.details, NamingDetails) and issue.node_id in suggested:
            new_name = suggested[issue.node_id]
            targets[issue.node_id] = (new_name, f'Renamed "{issue.node_name}" to "{new_name}"')

    # Collisions: first member keeps the name, the rest get -2, -3, ...
    # The suffix overrides a convention rename and builds on the corrected name.
    collisions = [i for i in issues if isinstance(i.details, CollisionDetails)]
    for name, group in _group(collisions, lambda i: i.node_name).items():
        for ordinal, issue in enumerate(group[1:], start=2):
            new_name = f"{suggested.get(issue.node_id, name)}-{ordinal}"
            targets[issue.node_id] = (new_name, f'De-conflicted "{name}" to "{new_name}"')

    for node_id, (new_name, line) in targets.items():
        node = scene.get_node(node_id)
        if node is None or node.name == new_name:
            continue
        try:
            scene.rename(node, new_name)
        except SceneMutationError as err:
            _failed(outcome, err)
            continue
        outcome.applied += 1
        outcome.summary.append(line)

    return outcome


FIXERS = {
    "duplicate": fix_duplicates,
    "stroke-thickness": fix_stroke_thickness,
    "fill-policy": fix_fill_policy,
    "geometry": fix_geometry,
    "naming": fix_naming,
}


# ---------------------------------------------------------------------------
# Selection + re-audit loop
# ---------------------------------------------------------------------------

def is_auto_fixable(issue):
    return not isinstance(issue.details, MixedWeightDetails)


def select_issues(report, types=None, ids=None):
    """Ids of the report's auto-fixable issues, narrowed by kind and/or id."""
    wanted_ids = set(ids) if ids else None
    picked = []
    for issue in report.issues:
        if not is_auto_fixable(issue):
            continue
        if types and issue.type not in types:
            continue
        if wanted_ids is not None and issue.id not in wanted_ids:
            continue
        picked.append(issue.id)
    return picked


def remediate(scene, collect_nodes, scope, options, selector, max_passes=3):
    """
    Audit -> fix -> re-audit until nothing selectable is left, a pass changes
    nothing, or max_passes is hit. Returns (pass outcomes, final report).
    """
    passes = []
    report = run_audit(collect_nodes(), scope, options)

    for number in range(1, max_passes + 1):
        selected = selector(report)
        if not selected:
            break

        outcome = apply_fixes(scene, report.issues, selected)
        passes.append(outcome)
        log.info(f"🩹 Pass {number}: {outcome.applied} fixed, {outcome.failed} failed")

        report = run_audit(collect_nodes(), scope, options)
        if outcome.applied == 0:
            break

    return passes, report
