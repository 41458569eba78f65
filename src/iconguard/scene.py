"""
--------------------------------------------------------------------------------
AUTHOR:         Nishar A Sunkesala / FixMyK8s
DATE:           2026-10-17
PURPOSE:        The Scene Engine: in-memory view of an exported design document.
                Resolves nodes by id, exposes geometry/paint state and applies
                the handful of writes the fixer needs (delete, rename, paints,
                stroke weight). Loads and saves snapshots via ruamel.yaml.
--------------------------------------------------------------------------------
"""
import json
import os
from io import StringIO

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .logger import get_logger

log = get_logger(__name__)

# Host node type -> kind tag used by the engines
KIND_BY_TYPE = {
    "COMPONENT": "asset",
    "COMPONENT_SET": "asset-set",
    "VECTOR": "vector-shape",
    "GROUP": "group",
    "FRAME": "container",
    "SECTION": "container",
}

COMPONENT_TYPES = ("COMPONENT", "COMPONENT_SET")


class DocumentError(Exception):
    """Raised when a snapshot or policy file cannot be read."""


class SceneMutationError(Exception):
    """Raised when the scene refuses a write (deleted or locked node)."""

    def __init__(self, node_id, reason):
        self.node_id = node_id
        self.reason = reason
        super().__init__(f"{node_id}: {reason}")


def hex_to_rgb(value):
    value = value.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        raise DocumentError(f"Invalid hex color '#{value}'")
    try:
        return {
            "r": int(value[0:2], 16) / 255,
            "g": int(value[2:4], 16) / 255,
            "b": int(value[4:6], 16) / 255,
        }
    except ValueError as e:
        raise DocumentError(f"Invalid hex color '#{value}'") from e


class Paint:
    """A single fill or stroke entry."""

    def __init__(self, type="SOLID", color=None, visible=True, opacity=1.0):
        self.type = type
        self.color = color
        self.visible = visible
        self.opacity = opacity

    @property
    def is_visible(self):
        return self.visible is not False

    @property
    def is_solid(self):
        return self.type == "SOLID"

    def copy(self):
        return Paint(self.type, dict(self.color) if self.color else None, self.visible, self.opacity)

    @classmethod
    def from_dict(cls, data):
        color = data.get("color")
        if isinstance(color, str):
            color = hex_to_rgb(color)
        elif color is not None:
            color = {k: float(color.get(k, 0)) for k in ("r", "g", "b")}
        return cls(
            type=data.get("type", "SOLID"),
            color=color,
            visible=data.get("visible", True),
            opacity=float(data.get("opacity", 1.0)),
        )

    def to_dict(self):
        data = {"type": self.type}
        if self.color is not None:
            data["color"] = dict(self.color)
        if self.visible is False:
            data["visible"] = False
        if self.opacity != 1.0:
            data["opacity"] = self.opacity
        return data

    def __repr__(self):
        return f"Paint({self.type}, {self.color}, visible={self.visible})"


class SceneNode:
    def __init__(self, id, type, name="", width=0.0, height=0.0, visible=True,
                 opacity=1.0, fills=None, strokes=None, stroke_weight=None,
                 locked=False, plugin_data=None, children=None):
        self.id = str(id)
        self.type = type
        self.name = name
        self.width = float(width)
        self.height = float(height)
        self.visible = visible
        self.opacity = float(opacity)
        self.fills = list(fills or [])
        self.strokes = list(strokes or [])
        self.stroke_weight = stroke_weight
        self.locked = locked
        self.plugin_data = dict(plugin_data or {})
        self.parent = None
        self.removed = False
        self.children = []
        for child in children or []:
            self.append_child(child)

    @property
    def kind(self):
        return KIND_BY_TYPE.get(self.type, "other")

    @property
    def is_variant_member(self):
        """Assets living inside an asset-set are intentional variants."""
        return self.kind == "asset" and self.parent is not None and self.parent.kind == "asset-set"

    @property
    def visible_fills(self):
        return [p for p in self.fills if p.is_visible]

    @property
    def visible_strokes(self):
        return [p for p in self.strokes if p.is_visible]

    def append_child(self, child):
        child.parent = self
        self.children.append(child)
        return child

    def find_all(self, kind=None):
        """All descendants in document order, optionally filtered by kind tag."""
        found = []
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if kind is None or node.kind == kind:
                found.append(node)
            stack.extend(reversed(node.children))
        return found

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()

    @classmethod
    def from_dict(cls, data):
        if "id" not in data or "type" not in data:
            raise DocumentError(f"Node is missing 'id' or 'type': {dict(data)}")
        return cls(
            id=data["id"],
            type=data["type"],
            name=data.get("name", ""),
            width=data.get("width", 0.0),
            height=data.get("height", 0.0),
            visible=data.get("visible", True),
            opacity=data.get("opacity", 1.0),
            fills=[Paint.from_dict(p) for p in data.get("fills") or []],
            strokes=[Paint.from_dict(p) for p in data.get("strokes") or []],
            stroke_weight=data.get("strokeWeight"),
            locked=data.get("locked", False),
            plugin_data=data.get("pluginData"),
            children=[cls.from_dict(c) for c in data.get("children") or []],
        )

    def to_dict(self):
        data = {"id": self.id, "type": self.type, "name": self.name}
        if self.width or self.height:
            data["width"] = self.width
            data["height"] = self.height
        if self.visible is False:
            data["visible"] = False
        if self.opacity != 1.0:
            data["opacity"] = self.opacity
        if self.fills:
            data["fills"] = [p.to_dict() for p in self.fills]
        if self.strokes:
            data["strokes"] = [p.to_dict() for p in self.strokes]
        if self.stroke_weight is not None:
            data["strokeWeight"] = self.stroke_weight
        if self.locked:
            data["locked"] = True
        if self.plugin_data:
            data["pluginData"] = dict(self.plugin_data)
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data

    def __repr__(self):
        return f"<{self.type} {self.id} '{self.name}'>"


class SceneGraph:
    """
    Id-addressed access to a node tree. Engines never keep node objects
    between calls; they keep ids and come back through get_node().
    """

    def __init__(self, root, name="Document"):
        self.root = root
        self.name = name
        self._index = {}
        for node in root.walk():
            if node.id in self._index:
                raise DocumentError(f"Duplicate node id '{node.id}'")
            self._index[node.id] = node

    # --- Lookup -------------------------------------------------------------

    def get_node(self, node_id):
        """Returns the live node or None. Never raises."""
        if node_id is None:
            return None
        return self._index.get(str(node_id))

    def __contains__(self, node_id):
        return self.get_node(node_id) is not None

    def find_all(self, predicate=None):
        return [n for n in self.root.find_all() if predicate is None or predicate(n)]

    def components(self):
        return self.find_all(lambda n: n.type in COMPONENT_TYPES)

    def component_sets(self):
        return self.find_all(lambda n: n.type == "COMPONENT_SET")

    def nodes_for_scope(self, scope, selection=None):
        """Resolves an audit scope to the list of nodes handed to run_audit."""
        if scope in ("page", "all-components"):
            return self.components()

        if scope == "selection":
            picked = [n for n in (self.get_node(i) for i in selection or []) if n is not None]
            # A single selected frame means "everything inside it"
            if len(picked) == 1 and picked[0].type == "FRAME":
                return [n for n in picked[0].find_all() if n.type in COMPONENT_TYPES]
            return picked

        return []

    # --- Writes -------------------------------------------------------------

    def _check_writable(self, node):
        if node is None or node.removed or self.get_node(node.id) is not node:
            raise SceneMutationError(getattr(node, "id", None), "node no longer exists")
        current = node
        while current is not None:
            if current.locked:
                raise SceneMutationError(node.id, f"locked by '{current.name}'")
            current = current.parent

    def remove(self, node):
        self._check_writable(node)
        if node is self.root:
            raise SceneMutationError(node.id, "cannot remove the document root")
        node.parent.children.remove(node)
        for gone in node.walk():
            gone.removed = True
            self._index.pop(gone.id, None)
        log.debug(f"🗑️  Removed {node!r}")

    def rename(self, node, name):
        self._check_writable(node)
        node.name = name

    def set_fills(self, node, paints):
        self._check_writable(node)
        node.fills = [p.copy() for p in paints]

    def set_strokes(self, node, paints):
        self._check_writable(node)
        node.strokes = [p.copy() for p in paints]

    def set_stroke_weight(self, node, weight):
        self._check_writable(node)
        node.stroke_weight = weight

    def get_plugin_data(self, node, key):
        return node.plugin_data.get(key, "")

    def set_plugin_data(self, node, key, value):
        self._check_writable(node)
        node.plugin_data[key] = value

    # --- Serialization ------------------------------------------------------

    @classmethod
    def from_snapshot(cls, data):
        if not isinstance(data, dict):
            raise DocumentError("Snapshot must be a mapping with a 'document' tree")
        tree = data.get("document", data)
        if not isinstance(tree, dict):
            raise DocumentError("'document' must be a node mapping")
        if "id" not in tree:
            # Bare list of top-level nodes: hang them off a synthetic page
            tree = {"id": "0:0", "type": "PAGE", "name": data.get("name", "Page"),
                    "children": tree.get("children") or []}
        return cls(SceneNode.from_dict(tree), name=data.get("name", "Document"))

    def to_snapshot(self):
        return {"name": self.name, "document": self.root.to_dict()}


def _yaml():
    yaml = YAML()
    yaml.indent(mapping=2, sequence=4, offset=2)
    yaml.preserve_quotes = True
    return yaml


def load_document(file_path):
    """Reads a YAML or JSON snapshot into a SceneGraph."""
    if not os.path.isfile(file_path):
        raise DocumentError(f"Document '{file_path}' not found.")
    try:
        with open(file_path, "r") as f:
            data = _yaml().load(f)
    except YAMLError as e:
        raise DocumentError(f"Cannot parse '{file_path}': {e}") from e
    return SceneGraph.from_snapshot(data)


def render_document(scene, file_path):
    """Serializes the scene in the format implied by the file extension."""
    snapshot = scene.to_snapshot()
    if file_path.endswith(".json"):
        return json.dumps(snapshot, indent=2, ensure_ascii=False) + "\n"
    buf = StringIO()
    _yaml().dump(snapshot, buf)
    return buf.getvalue()


def dump_document(scene, file_path):
    with open(file_path, "w") as f:
        f.write(render_document(scene, file_path))
