import json

import pytest

from conftest import component, frame, make_scene, solid, stroked
from iconguard.scene import (
    DocumentError, Paint, SceneGraph, SceneMutationError, SceneNode, dump_document,
    hex_to_rgb, load_document, render_document,
)

SNAPSHOT_YAML = """\
name: Icons
document:
  id: "0:1"
  type: PAGE
  name: Page 1
  children:
    - id: "1:1"
      type: COMPONENT
      name: Home Icon
      width: 24
      height: 24
      children:
        - id: "1:2"
          type: VECTOR
          name: Vector
          strokes:
            - type: SOLID
              color: "#333333"
          strokeWeight: 2
"""


def test_kind_tags():
    kinds = {t: SceneNode("x", t).kind for t in ("COMPONENT", "COMPONENT_SET", "VECTOR", "GROUP", "FRAME", "SECTION", "TEXT")}
    assert kinds == {
        "COMPONENT": "asset", "COMPONENT_SET": "asset-set", "VECTOR": "vector-shape",
        "GROUP": "group", "FRAME": "container", "SECTION": "container", "TEXT": "other",
    }


def test_hex_to_rgb():
    assert hex_to_rgb("#fff") == {"r": 1.0, "g": 1.0, "b": 1.0}
    with pytest.raises(DocumentError):
        hex_to_rgb("#12345")
    with pytest.raises(DocumentError):
        hex_to_rgb("#gggggg")


def test_get_node_never_raises(library):
    assert library.get_node("home").name == "Home Icon"
    assert library.get_node("nope") is None
    assert library.get_node(None) is None


def test_duplicate_ids_are_rejected():
    with pytest.raises(DocumentError):
        make_scene(component("a", id="same"), component("b", id="same"))


def test_remove_takes_the_subtree(library):
    library.remove(library.get_node("card-star"))
    for gone in ("card-star", "star-set", "star-o", "v-star-o"):
        assert library.get_node(gone) is None
    assert "star-set" not in [n.id for n in library.components()]


def test_writes_to_removed_nodes_fail(library):
    node = library.get_node("home")
    library.remove(node)
    with pytest.raises(SceneMutationError):
        library.rename(node, "home")


def test_locked_ancestor_blocks_writes():
    scene = make_scene(frame("Locked", [component("icon", id="i")], locked=True))
    with pytest.raises(SceneMutationError) as err:
        scene.rename(scene.get_node("i"), "icon-2")
    assert err.value.node_id == "i"
    assert scene.get_node("i").name == "icon"


def test_paint_writes_copy_values():
    scene = make_scene(component("c", [stroked(1, id="v")]))
    paint = solid("#ff0000")
    scene.set_fills(scene.get_node("v"), [paint])
    paint.color["r"] = 0.0
    assert scene.get_node("v").fills[0].color["r"] == 1.0


def test_scope_resolution(library):
    page = [n.id for n in library.nodes_for_scope("page")]
    assert page == ["star-set", "star-o", "star-f", "star-copy", "home"]
    assert library.nodes_for_scope("all-components") == library.nodes_for_scope("page")

    picked = library.nodes_for_scope("selection", ["home", "missing"])
    assert [n.id for n in picked] == ["home"]

    inside = library.nodes_for_scope("selection", ["card-copy"])
    assert [n.id for n in inside] == ["star-copy"]
    assert library.nodes_for_scope("selection", []) == []


def test_paint_from_dict_accepts_hex():
    paint = Paint.from_dict({"color": "#000000", "visible": False})
    assert paint.type == "SOLID"
    assert paint.color == {"r": 0.0, "g": 0.0, "b": 0.0}
    assert not paint.is_visible
    assert paint.to_dict() == {"type": "SOLID", "color": {"r": 0.0, "g": 0.0, "b": 0.0}, "visible": False}


def test_load_yaml_document(tmp_path):
    path = tmp_path / "icons.yaml"
    path.write_text(SNAPSHOT_YAML)
    scene = load_document(str(path))
    assert scene.name == "Icons"
    vec = scene.get_node("1:2")
    assert vec.parent.id == "1:1"
    assert vec.stroke_weight == 2
    assert vec.strokes[0].color == hex_to_rgb("#333333")


def test_bare_children_get_a_synthetic_page(tmp_path):
    path = tmp_path / "icons.json"
    path.write_text(json.dumps({"children": [{"id": "5", "type": "COMPONENT", "name": "a"}]}))
    scene = load_document(str(path))
    assert scene.root.id == "0:0"
    assert [n.id for n in scene.components()] == ["5"]


def test_bad_documents(tmp_path):
    with pytest.raises(DocumentError):
        load_document(str(tmp_path / "missing.yaml"))

    broken = tmp_path / "broken.yaml"
    broken.write_text("document: [unclosed\n")
    with pytest.raises(DocumentError):
        load_document(str(broken))

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n")
    with pytest.raises(DocumentError):
        load_document(str(listing))

    nameless = tmp_path / "nameless.yaml"
    nameless.write_text("document:\n  id: '1'\n  type: PAGE\n  children:\n    - name: no id\n")
    with pytest.raises(DocumentError):
        load_document(str(nameless))


def test_dump_and_reload(tmp_path, library):
    library.rename(library.get_node("home"), "home-icon")
    for suffix in ("yaml", "json"):
        path = str(tmp_path / f"out.{suffix}")
        dump_document(library, path)
        reloaded = load_document(path)
        assert reloaded.get_node("home").name == "home-icon"
        assert [n.id for n in reloaded.components()] == [n.id for n in library.components()]


def test_render_json_is_plain_json(library):
    text = render_document(library, "lib.json")
    assert json.loads(text)["document"]["id"] == "0:0"


def test_snapshot_roundtrip_keeps_graph():
    scene = SceneGraph.from_snapshot(make_scene(component("a", [stroked(1.5)], id="a")).to_snapshot())
    assert scene.get_node("a").children[0].stroke_weight == 1.5
