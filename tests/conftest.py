import pytest

from iconguard.scene import Paint, SceneGraph, SceneNode, hex_to_rgb

_ids = {"n": 0}


def _next_id():
    _ids["n"] += 1
    return f"t:{_ids['n']}"


def solid(hex_color="#000000", visible=True, opacity=1.0):
    return Paint("SOLID", hex_to_rgb(hex_color), visible, opacity)


def vector(name="Vector", fills=None, strokes=None, weight=None, width=20, height=20, id=None, **kw):
    return SceneNode(id or _next_id(), "VECTOR", name, width, height,
                     fills=fills, strokes=strokes, stroke_weight=weight, **kw)


def stroked(weight=2, color="#000000", **kw):
    return vector(strokes=[solid(color)], weight=weight, **kw)


def filled(color="#000000", **kw):
    return vector(fills=[solid(color)], **kw)


def component(name, children=(), width=24, height=24, id=None, **kw):
    return SceneNode(id or _next_id(), "COMPONENT", name, width, height, children=list(children), **kw)


def component_set(name, members, id=None, **kw):
    return SceneNode(id or _next_id(), "COMPONENT_SET", name, 80, 40, children=list(members), **kw)


def frame(name, children=(), id=None, **kw):
    return SceneNode(id or _next_id(), "FRAME", name, 100, 100, children=list(children), **kw)


def group(name="Group", children=(), id=None, **kw):
    return SceneNode(id or _next_id(), "GROUP", name, 10, 10, children=list(children), **kw)


def make_scene(*nodes):
    return SceneGraph(SceneNode("0:0", "PAGE", "Page", children=list(nodes)))


@pytest.fixture
def library():
    """A small imported library: a card-wrapped set, a copy and a stray icon."""
    star_set = component_set("star", [
        component("Style=outline", [stroked(2, id="v-star-o")], id="star-o"),
        component("Style=filled", [filled(id="v-star-f")], id="star-f"),
    ], id="star-set")
    scene = make_scene(
        frame("Icon Guardian / Imported", [
            frame("Card: star", [star_set], id="card-star"),
            frame("Card: star copy", [component("star copy", [stroked(2)], id="star-copy")], id="card-copy"),
        ], id="import-frame"),
        component("Home Icon", [stroked(1.5, id="v-home")], id="home"),
    )
    return scene
