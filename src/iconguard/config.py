"""
--------------------------------------------------------------------------------
AUTHOR:         Nishar A Sunkesala / FixMyK8s
DATE:           2026-10-17
PURPOSE:        Policy loader: reads iconguard.yaml (stroke weights, outline
                policy, scope, pass limit) and merges command-line overrides.
--------------------------------------------------------------------------------
"""
import os

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .logger import get_logger
from .models import AuditOptions
from .scene import DocumentError

log = get_logger(__name__)

POLICY_FILENAME = "iconguard.yaml"
SCOPES = ("page", "selection", "all-components")

DEFAULTS = {
    "allowedStrokeWeights": [],
    "outlineOnlyPolicy": False,
    "sizes": [],
    "scope": "page",
    "maxPasses": 3,
}


def find_policy(document_path):
    """iconguard.yaml next to the document, if there is one."""
    candidate = os.path.join(os.path.dirname(os.path.abspath(document_path)), POLICY_FILENAME)
    return candidate if os.path.isfile(candidate) else None


def load_policy(path=None):
    policy = dict(DEFAULTS)
    if not path:
        return policy
    if not os.path.isfile(path):
        raise DocumentError(f"Policy file '{path}' not found.")

    try:
        with open(path, "r") as f:
            data = YAML(typ="safe").load(f) or {}
    except YAMLError as e:
        raise DocumentError(f"Cannot parse policy '{path}': {e}") from e
    if not isinstance(data, dict):
        raise DocumentError(f"Policy '{path}' must be a mapping")

    for key, value in data.items():
        if key not in DEFAULTS:
            log.warning(f"⚠️  Unknown policy key '{key}' ignored")
            continue
        policy[key] = value

    if policy["scope"] not in SCOPES:
        raise DocumentError(f"Unknown scope '{policy['scope']}' (expected one of {', '.join(SCOPES)})")
    return policy


def parse_weights(text):
    """'1, 1.5,2' -> [1.0, 1.5, 2.0]"""
    try:
        return [float(w) for w in text.split(",") if w.strip()]
    except ValueError as e:
        raise DocumentError(f"Invalid stroke weight list '{text}'") from e


def build_options(policy, weights=None, outline_only=None):
    """Command-line values win over the policy file."""
    allowed = weights if weights is not None else [float(w) for w in policy["allowedStrokeWeights"]]
    return AuditOptions(
        sizes=[float(s) for s in policy["sizes"]],
        allowed_stroke_weights=allowed,
        outline_only_policy=bool(policy["outlineOnlyPolicy"] if outline_only is None else outline_only),
    )
