from conftest import component, filled, frame, group, make_scene, solid, stroked, vector
from iconguard.audit import run_audit
from iconguard.fixer import (
    apply_fixes, generate_fix_preview, is_auto_fixable, nearest_weight, remediate, select_issues,
)
from iconguard.models import AuditOptions
from iconguard.scene import Paint

STRICT = AuditOptions(allowed_stroke_weights=[1, 1.5], outline_only_policy=True)


def audit(scene, options=STRICT):
    return run_audit(scene.components(), "page", options)


def fix_all(scene, report):
    return apply_fixes(scene, report.issues, select_issues(report))


def test_nearest_weight_prefers_first_on_tie():
    assert nearest_weight(2, [1, 3]) == 1
    assert nearest_weight(2, [3, 1]) == 3
    assert nearest_weight(1.8, [1, 1.5, 2]) == 2


def test_duplicate_fix_keeps_first_and_drops_cards(library):
    report = audit(library, AuditOptions())
    outcome = apply_fixes(library, report.issues, [i.id for i in report.issues_of("duplicate")])
    assert outcome.applied == 1
    assert outcome.failed == 0
    # The copy's whole "Card:" wrapper goes, the original set stays
    assert library.get_node("card-copy") is None
    assert library.get_node("star-copy") is None
    assert library.get_node("star-set") is not None
    assert outcome.summary == ['Removed 1 duplicate(s) of "star"']


def test_duplicate_fix_without_card_deletes_node_only():
    scene = make_scene(frame("Icons", [component("star", id="a"), component("star copy", id="b")], id="f"))
    outcome = fix_all(scene, audit(scene, AuditOptions()))
    assert scene.get_node("b") is None
    assert scene.get_node("f") is not None
    assert outcome.applied >= 1


def test_stroke_fix_snaps_to_nearest_allowed():
    scene = make_scene(component("bolt", [stroked(2, id="v1"), stroked(1, id="v2")], id="bolt"))
    report = audit(scene, AuditOptions(allowed_stroke_weights=[1, 1.5]))
    outcome = fix_all(scene, report)
    assert outcome.applied == 1
    assert scene.get_node("v1").stroke_weight == 1.5
    assert scene.get_node("v2").stroke_weight == 1


def test_mixed_weight_notice_alone_changes_nothing():
    scene = make_scene(component("bolt", [stroked(1), stroked(1.5)], id="bolt"))
    report = audit(scene, AuditOptions(allowed_stroke_weights=[1, 1.5]))
    [mixed] = report.issues
    assert not is_auto_fixable(mixed)
    assert select_issues(report) == []
    outcome = apply_fixes(scene, report.issues, [mixed.id])
    assert outcome.applied == 0 and outcome.failed == 0


def test_fill_conversion():
    scene = make_scene(component("cup", [filled("#ff0000", id="v")], id="cup"))
    outcome = fix_all(scene, audit(scene))
    vec = scene.get_node("v")
    assert outcome.applied == 1
    assert vec.fills == []
    assert vec.stroke_weight == 1.5
    assert vec.strokes[0].color == {"r": 1.0, "g": 0.0, "b": 0.0}
    assert audit(scene).issues_of("fill-policy") == []


def test_geometry_fix_removes_the_layer_not_the_icon():
    scene = make_scene(component("junk", [stroked(1, id="ghost", visible=False), group("G", id="g"), stroked(1)], id="junk"))
    outcome = fix_all(scene, audit(scene))
    assert outcome.applied == 2
    assert scene.get_node("ghost") is None
    assert scene.get_node("g") is None
    assert scene.get_node("junk") is not None


def test_collisions_get_numbered_suffixes():
    scene = make_scene(component("icon", id="a"), component("icon", id="b"), component("icon", id="c"))
    report = audit(scene)
    outcome = apply_fixes(scene, report.issues, [i.id for i in report.issues_of("naming")])
    assert [scene.get_node(i).name for i in "abc"] == ["icon", "icon-2", "icon-3"]
    assert outcome.applied == 2


def test_rename_to_convention():
    scene = make_scene(component("Home Icon", id="h"))
    outcome = fix_all(scene, audit(scene))
    assert scene.get_node("h").name == "home-icon"
    assert outcome.summary == ['Renamed "Home Icon" to "home-icon"']


def test_reapplying_the_same_batch_is_a_no_op(library):
    report = audit(library)
    selected = select_issues(report)
    first = apply_fixes(library, report.issues, selected)
    snapshot = library.to_snapshot()
    second = apply_fixes(library, report.issues, selected)
    assert first.applied > 0
    assert second.applied == 0
    assert second.failed == 0
    assert library.to_snapshot() == snapshot


def test_unselected_issues_are_untouched(library):
    report = audit(library)
    naming = [i.id for i in report.issues_of("naming")]
    apply_fixes(library, report.issues, naming)
    assert library.get_node("star-copy") is not None
    assert library.get_node("v-home").stroke_weight == 1.5
    assert library.get_node("home").name == "home-icon"


def test_locked_nodes_fail_without_stopping_the_batch():
    scene = make_scene(
        component("Locked Icon", id="l", locked=True),
        component("Open Icon", id="o"),
    )
    outcome = fix_all(scene, audit(scene))
    assert outcome.failed == 1
    assert outcome.applied == 1
    assert scene.get_node("l").name == "Locked Icon"
    assert scene.get_node("o").name == "open-icon"


def test_preview_lines_follow_issue_order(library):
    report = audit(library)
    preview = generate_fix_preview(report.issues, select_issues(report))
    assert preview[0] == "Delete 2 duplicate icons (1 groups)"
    assert preview[1].startswith("Fix ") and "stroke thickness" in preview[1]
    assert preview[2].startswith("Convert ")
    assert preview[-1].startswith("Fix ") and "naming" in preview[-1]
    assert generate_fix_preview(report.issues, []) == []


def test_preview_does_not_mutate(library):
    before = library.to_snapshot()
    report = audit(library)
    generate_fix_preview(report.issues, select_issues(report))
    assert library.to_snapshot() == before


def test_select_issues_by_type_and_id(library):
    report = audit(library)
    assert all(i.startswith("naming-") or i.startswith("collision-")
               for i in select_issues(report, types=["naming"]))
    assert select_issues(report, ids=["naming-home"]) == ["naming-home"]
    assert select_issues(report, ids=["does-not-exist"]) == []


def test_remediate_loops_until_clean(library):
    passes, final = remediate(
        library, library.components, "page", STRICT, selector=select_issues, max_passes=3,
    )
    assert passes
    assert passes[0].applied > 0
    assert select_issues(final) == []
    assert library.get_node("home").name == "home-icon"


def test_remediate_stops_when_nothing_selectable():
    scene = make_scene(component("star", [stroked(1)]))
    passes, final = remediate(scene, scene.components, "page", STRICT, selector=select_issues)
    assert passes == []
    assert final.issues == ()


def test_remediate_respects_max_passes(library):
    passes, _ = remediate(library, library.components, "page", STRICT, selector=select_issues, max_passes=1)
    assert len(passes) == 1


def test_convention_and_collision_renames_settle_in_one_pass():
    scene = make_scene(component("Icon", id="a"), component("Icon", id="b"), component("Icon", id="c"))
    report = audit(scene)
    selected = [i.id for i in report.issues_of("naming")]

    first = apply_fixes(scene, report.issues, selected)
    names = [scene.get_node(i).name for i in "abc"]
    assert names == ["icon", "icon-2", "icon-3"]
    assert first.applied == 3
    assert audit(scene).issues_of("naming") == []

    second = apply_fixes(scene, report.issues, selected)
    assert second.applied == 0
    assert second.failed == 0
    assert [scene.get_node(i).name for i in "abc"] == names


def test_collision_only_selection_keeps_the_shared_name():
    scene = make_scene(component("Icon", id="a"), component("Icon", id="b"))
    report = audit(scene)
    collisions = [i.id for i in report.issues_of("naming") if i.id.startswith("collision-")]
    apply_fixes(scene, report.issues, collisions)
    assert [scene.get_node(i).name for i in "ab"] == ["Icon", "Icon-2"]


def test_layered_fills_are_not_converted():
    gradient = Paint("GRADIENT_LINEAR", None)
    scene = make_scene(component("cup", [vector(fills=[solid("#ff0000"), gradient], id="v")], id="cup"))
    report = audit(scene)
    assert report.issues_of("fill-policy")
    outcome = fix_all(scene, report)
    vec = scene.get_node("v")
    assert outcome.applied == 0 and outcome.failed == 0
    assert len(vec.fills) == 2
    assert vec.strokes == []


def test_converted_fill_is_snapped_on_the_next_pass():
    """A fill converted at 1.5px is re-audited against the allowed weights."""
    scene = make_scene(component("cup", [filled(id="v")], id="cup"))
    options = AuditOptions(allowed_stroke_weights=[1], outline_only_policy=True)
    passes, final = remediate(scene, scene.components, "page", options, selector=select_issues)
    assert [p.applied for p in passes] == [1, 1]
    assert scene.get_node("v").stroke_weight == 1
    assert final.issues == ()
