"""
--------------------------------------------------------------------------------
AUTHOR:         Nishar A Sunkesala / FixMyK8s
DATE:           2026-10-17
PURPOSE:        The Main Entry Point for IconGuard. Orchestrates the Audit,
                Fixer, Style and Metadata engines over an exported design
                document and prints a Health Summary.
--------------------------------------------------------------------------------
"""
import json
import logging
import sys

from .audit import run_audit
from .config import SCOPES, build_options, find_policy, load_policy, parse_weights
from .fixer import generate_fix_preview, remediate, select_issues
from .library import autofill_library, describe_library
from .logger import get_logger
from .models import ISSUE_TYPES
from .report import colored_diff, render_guide, render_issues, render_library, render_summary
from .scene import DocumentError, dump_document, load_document, render_document

log = get_logger()

COMMANDS = ("scan", "preview", "fix", "styles", "metadata", "checklist")
VALUE_FLAGS = ("--scope", "--select", "--weights", "--types", "--ids", "--config", "--max-passes")
BOOL_FLAGS = ("--outline-only", "--json", "--dry-run", "--overwrite")


def print_help():
    print("""
✨ IconGuard: The Health Check for your Icon Library

Usage:
  iconguard <command> <document.yaml|json> [options]

Commands:
  scan        Audit the library and print the health summary
  preview     Show what a fix run would change (no writes)
  fix         Apply fixes, re-audit until clean, save the document
  styles      List icon sets with their detected style
  metadata    Auto-fill category/tags/description for every icon set
  checklist   Show the checks IconGuard runs

Options:
  --scope page|selection|all-components   Which nodes to audit (default: page)
  --select id1,id2      Node ids for --scope selection
  --weights 1,1.5       Allowed stroke weights
  --outline-only        Enforce the outline-only fill policy
  --types a,b           Only fix these issue types
  --ids a,b             Only fix these issue ids
  --max-passes N        Re-audit loop limit for fix (default: 3)
  --config FILE         Policy file (default: iconguard.yaml next to the document)
  --json                Print the audit report as JSON
  --dry-run             Do not write the document back
  --overwrite           Replace existing metadata
    """)


def print_checklist():
    print("""
📋 IconGuard Logic Checklist

  1. Duplicates     copy/paste names ("icon copy 2") and identical structure
  2. Stroke         outline icons use only allowed stroke weights
  3. Fill policy    outline-only libraries contain no filled vectors
  4. Geometry       hidden, zero-opacity and empty layers
  5. Naming         kebab-case names, no two icons with the same name
    """)


def parse_flags(args):
    flags = {}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in BOOL_FLAGS:
            flags[arg] = True
            i += 1
        elif arg in VALUE_FLAGS:
            if i + 1 >= len(args):
                raise DocumentError(f"Option '{arg}' needs a value")
            flags[arg] = args[i + 1]
            i += 2
        else:
            raise DocumentError(f"Unknown option '{arg}'")
    return flags


def _split(value):
    return [v.strip() for v in value.split(",") if v.strip()] if value else None


def run(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if not args or args[0] in ("--help", "-h"):
        print_help()
        return 0

    command = args[0]
    if command == "checklist":
        print_checklist()
        return 0
    if command not in COMMANDS:
        log.error(f"❌ Unknown command '{command}'. Try 'iconguard --help'.")
        return 1
    if len(args) < 2:
        log.error(f"❌ Usage: iconguard {command} <document.yaml|json>")
        return 1

    target = args[1]
    try:
        flags = parse_flags(args[2:])
        scene = load_document(target)
        policy = load_policy(flags.get("--config") or find_policy(target))
        weights = parse_weights(flags["--weights"]) if "--weights" in flags else None
        options = build_options(policy, weights, True if flags.get("--outline-only") else None)
        max_passes = int(flags.get("--max-passes", policy["maxPasses"]))
    except (DocumentError, ValueError) as e:
        log.error(f"❌ {e}")
        return 1

    scope = flags.get("--scope", policy["scope"])
    if scope not in SCOPES:
        log.error(f"❌ Unknown scope '{scope}'")
        return 1
    selection = _split(flags.get("--select"))
    types = _split(flags.get("--types"))
    ids = _split(flags.get("--ids"))
    if types and any(t not in ISSUE_TYPES for t in types):
        log.error(f"❌ Issue types must be among: {', '.join(ISSUE_TYPES)}")
        return 1

    if flags.get("--json"):
        # Keep stdout machine-readable
        log.setLevel(logging.WARNING)

    log.info(f"✨ IconGuard is diagnosing: {target}")

    if command == "styles":
        print(render_library(describe_library(scene)))
        return 0

    if command == "metadata":
        filled, skipped, failed = autofill_library(scene, overwrite=bool(flags.get("--overwrite")))
        log.info(f"🪄 Auto-filled metadata for {filled} icons ({skipped} skipped, {failed} failed)")
        if filled and not flags.get("--dry-run"):
            dump_document(scene, target)
        print(render_library(describe_library(scene)))
        return 1 if failed else 0

    def collect_nodes():
        return scene.nodes_for_scope(scope, selection)

    if not collect_nodes():
        log.error("❌ No nodes found to audit")
        return 1

    if command == "scan":
        report = run_audit(collect_nodes(), scope, options)
        if flags.get("--json"):
            print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        else:
            print(render_summary(report))
            if report.issues:
                print(render_issues(report))
                print(render_guide(report))
        log.info("✔ Diagnosis Complete.")
        return 1 if any(i.is_critical() for i in report.issues) else 0

    if command == "preview":
        report = run_audit(collect_nodes(), scope, options)
        lines = generate_fix_preview(report.issues, select_issues(report, types, ids))
        if not lines:
            log.info("✔ Nothing to fix.")
        for line in lines:
            print(f"  • {line}")
        return 0

    # --- fix -------------------------------------------------------------
    before = render_document(scene, target)
    first = run_audit(collect_nodes(), scope, options)
    if ids and not select_issues(first, types, ids):
        log.error("❌ None of the requested issue ids are in the current report")
        return 1

    passes, final = remediate(
        scene, collect_nodes, scope, options,
        selector=lambda report: select_issues(report, types, ids),
        max_passes=max_passes,
    )
    if not passes:
        log.info("✔ Nothing to fix.")

    for outcome in passes:
        for line in outcome.summary:
            print(f"  ✅ {line}")

    after = render_document(scene, target)
    changes = colored_diff(before, after, target)
    if changes:
        print("=" * 60)
        for line in changes:
            print(line)
        print("=" * 60)
        if flags.get("--dry-run"):
            log.info("🧪 Dry run: document left untouched.")
        else:
            dump_document(scene, target)
            log.info(f"SUCCESS: Document '{target}' has been healed.")

    print(render_summary(final))
    return 1 if any(i.is_critical() for i in final.issues) else 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
