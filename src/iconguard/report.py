"""
--------------------------------------------------------------------------------
AUTHOR:         Nishar A Sunkesala / FixMyK8s
DATE:           2026-10-17
PURPOSE:        Terminal rendering for IconGuard: per-icon health table,
                remediation guide, library listing and document diffs.
--------------------------------------------------------------------------------
"""
import difflib

from tabulate import tabulate

from .models import ISSUE_TYPES

SEVERITY_LABELS = {"error": "🔴 ERROR", "warning": "🟠 WARN", "info": "🟡 INFO"}
SEVERITY_RANK = {"error": 3, "warning": 2, "info": 1}

# 🧠 Knowledge Base for the Table and Remediation Guide
ISSUE_INTEL = {
    "duplicate": "👉 [DUPLICATE]: Keep one icon per group; `fix --types duplicate` deletes the copies (and their cards).",
    "stroke-thickness": "👉 [STROKE]: Snap stroke weights to the allowed list; mixed weights need a manual pass.",
    "fill-policy": "👉 [FILL]: Outline-only library: flat fills are converted to 1.5px strokes.",
    "geometry": "👉 [GEOMETRY]: Delete hidden, zero-opacity and empty layers left over from editing.",
    "naming": "👉 [NAMING]: Use lower-case kebab-case names; colliding names get -2, -3 suffixes.",
}


def summary_rows(report):
    """Collapses issues into one row per audited node."""
    cards = {}
    for issue in report.issues:
        card = cards.setdefault(issue.node_id, {
            "name": issue.node_name, "sev": None, "types": [], "count": 0,
        })
        card["count"] += 1
        if issue.type not in card["types"]:
            card["types"].append(issue.type)
        if card["sev"] is None or SEVERITY_RANK[issue.severity] > SEVERITY_RANK[card["sev"]]:
            card["sev"] = issue.severity

    rows = []
    for card in sorted(cards.values(), key=lambda c: (-SEVERITY_RANK[c["sev"]], c["name"])):
        rows.append([
            card["name"],
            SEVERITY_LABELS[card["sev"]],
            ", ".join(sorted(card["types"], key=ISSUE_TYPES.index)),
            card["count"],
        ])
    return rows


def render_summary(report):
    totals = report.totals
    header = (f"📊 AUDIT SUMMARY ({report.scope}): {totals.nodes_scanned} nodes scanned, "
              f"{totals.issues_found} issues, {totals.duplicate_groups} duplicate groups")
    if not report.issues:
        return header + "\n✔ Library is healthy. No issues found!"
    table = tabulate(summary_rows(report), headers=["Icon", "Severity", "Issues Found", "Count"], tablefmt="grid")
    return f"{header}\n{table}"


def render_issues(report):
    rows = [[i.id, SEVERITY_LABELS[i.severity], i.type, i.message] for i in report.issues]
    return tabulate(rows, headers=["Issue Id", "Severity", "Type", "Message"], tablefmt="simple")


def render_guide(report):
    present = [t for t in ISSUE_TYPES if report.issues_of(t)]
    if not present:
        return ""
    lines = ["💡 SUGGESTED REMEDIATIONS:", "=" * 72]
    lines += [ISSUE_INTEL[t] for t in present]
    lines.append("=" * 72)
    return "\n".join(lines)


def render_library(rows):
    table = []
    for row in rows:
        meta = row["metadata"] or {}
        table.append([
            row["name"], row["style"] or "-", row["size"] or "-", row["icon_type"],
            f"{row['confidence']:.1f}", meta.get("category", "-"),
        ])
    return tabulate(table, headers=["Icon", "Style", "Size", "Type", "Confidence", "Category"], tablefmt="grid")


def colored_diff(before, after, label):
    """Unified diff lines of the document, green for added, red for removed."""
    diff = difflib.unified_diff(
        before.splitlines(), after.splitlines(),
        fromfile=f"{label} (current)", tofile=f"{label} (fixed)", lineterm="",
    )
    lines = []
    for line in diff:
        if line.startswith("+") and not line.startswith("+++"):
            lines.append(f"\033[92m{line}\033[0m")
        elif line.startswith("-") and not line.startswith("---"):
            lines.append(f"\033[91m{line}\033[0m")
    return lines
