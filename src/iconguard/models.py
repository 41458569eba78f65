"""
--------------------------------------------------------------------------------
AUTHOR:      Nishar A Sunkesala / FixMyK8s
PURPOSE:     Standardized Data Models for IconGuard audit, fix and library
             analysis results.
--------------------------------------------------------------------------------
"""
from dataclasses import dataclass, field, asdict
from typing import List, Literal, Optional, Union

IssueType = Literal["duplicate", "stroke-thickness", "fill-policy", "geometry", "naming"]
Severity = Literal["error", "warning", "info"]
IconStyle = Literal["outline", "filled", "duo-tone", "mixed"]

# Fixed presentation + remediation order for issue kinds
ISSUE_TYPES = ("duplicate", "stroke-thickness", "fill-policy", "geometry", "naming")


# ---------------------------------------------------------------------------
# Issue details: one variant per detector finding, discriminated by `kind`
# ---------------------------------------------------------------------------

@dataclass
class DuplicateDetails:
    total_in_group: int
    base_name: str
    reason: Literal["name-pattern", "geometry"]
    kind: Literal["duplicate"] = "duplicate"


@dataclass
class StrokeWeightDetails:
    weight: float
    allowed_weights: List[float]
    kind: Literal["stroke-weight"] = "stroke-weight"


@dataclass
class MixedWeightDetails:
    weights: List[float]
    kind: Literal["mixed-weights"] = "mixed-weights"


@dataclass
class FillPolicyDetails:
    vector_id: str
    vector_name: str
    kind: Literal["fill-policy"] = "fill-policy"


@dataclass
class GeometryDetails:
    layer_id: str
    layer_name: str
    problem: Literal["hidden", "zero-opacity", "empty-group"]
    kind: Literal["geometry"] = "geometry"


@dataclass
class NamingDetails:
    current: str
    suggested: str
    kind: Literal["naming"] = "naming"


@dataclass
class CollisionDetails:
    total_collisions: int
    kind: Literal["collision"] = "collision"


IssueDetails = Union[
    DuplicateDetails,
    StrokeWeightDetails,
    MixedWeightDetails,
    FillPolicyDetails,
    GeometryDetails,
    NamingDetails,
    CollisionDetails,
]


@dataclass
class AuditIssue:
    """
    Standardized object for all IconGuard findings.
    The id is derived from node id + issue type so that the same condition
    keeps the same id across re-audits (select/ignore lists depend on it).
    """
    id: str
    type: IssueType
    severity: Severity
    node_id: str
    node_name: str
    message: str
    details: IssueDetails
    group_id: Optional[str] = None

    def is_critical(self) -> bool:
        """Helper to identify blocking issues for CI/CD exit codes."""
        return self.severity == "error"

    def to_dict(self) -> dict:
        data = asdict(self)
        if self.group_id is None:
            data.pop("group_id")
        return data

    def __str__(self):
        return f"[{self.severity.upper()}] {self.node_name}: {self.message}"


@dataclass
class AuditTotals:
    nodes_scanned: int
    issues_found: int
    duplicate_groups: int


@dataclass
class ReportMetadata:
    import_used_sizes: bool
    import_used_styles: bool
    variant_properties: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AuditReport:
    """Immutable once produced; the next audit supersedes it wholesale."""
    run_id: str
    timestamp: int
    scope: str
    totals: AuditTotals
    issues: tuple
    metadata: Optional[ReportMetadata] = None

    def issues_of(self, issue_type):
        return [i for i in self.issues if i.type == issue_type]

    def to_dict(self) -> dict:
        return {
            "runId": self.run_id,
            "timestamp": self.timestamp,
            "scope": self.scope,
            "totals": asdict(self.totals),
            "issues": [i.to_dict() for i in self.issues],
            "metadata": asdict(self.metadata) if self.metadata else None,
        }


@dataclass
class AuditOptions:
    sizes: List[float] = field(default_factory=list)  # unused by the audit itself
    allowed_stroke_weights: List[float] = field(default_factory=list)
    outline_only_policy: bool = False


@dataclass
class FixOutcome:
    applied: int = 0
    failed: int = 0
    summary: List[str] = field(default_factory=list)

    def merge(self, other: "FixOutcome"):
        self.applied += other.applied
        self.failed += other.failed
        self.summary.extend(other.summary)
        return self


@dataclass
class StyleAnalysis:
    type: IconStyle
    has_fills: bool
    has_strokes: bool
    fill_colors: List[str]
    stroke_colors: List[str]
    stroke_weights: List[float]
    confidence: float


@dataclass
class IconMetadata:
    category: str
    tags: List[str]
    description: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class StyleVariantInfo:
    """One uploaded SVG, already split into base icon + style (import side)."""
    base_icon_name: str
    style: str
    original_filename: str
    svg_content: str
    folder_path: str
    is_stroke_based: Optional[bool] = None
