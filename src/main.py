"""
Main entry point and pass orchestration.
"""

import sys
import os
import argparse
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file (if exists)
load_dotenv()

from core.utils import debug, error, info
from core.context import ProjectContext
from core.diagnostics import DiagnosticSink
from lints import LINT_REGISTRY, create_passes, get_lint
from pipeline import run_lints
from reporter import OutputMode, report_findings
from templates import render
from cli.helpers import collect_source_files, load_documents, resolve_levels
from cli.debug import dump_ir_impl, check_ir_impl


def main(
    input_path: str,
    dump_ir: bool = False,
    check_ir: bool = False,
    output_mode: OutputMode = OutputMode.SHORT,
    output_dir: Optional[str] = None,
    selected_lints: Optional[List[str]] = None,
    allow_lints: Optional[List[str]] = None,
    deny_lints: Optional[List[str]] = None,
) -> int:
    """Main entry point for analysis."""
    # Step 1: Collect IR documents
    source_files = collect_source_files(input_path)
    if not source_files:
        error(f"No IR documents found at: {input_path}")
        return 1

    if check_ir:
        return check_ir_impl(source_files)

    # Step 2: Select lints and resolve levels
    if selected_lints:
        not_found = set(selected_lints) - set(LINT_REGISTRY)
        if not_found:
            error(f"Lint(s) not found: {', '.join(sorted(not_found))}. Use --list-lints to see available lints.")
            return 1
    try:
        levels = resolve_levels(allow_lints, deny_lints)
    except ValueError as e:
        error(str(e))
        return 1

    passes = create_passes(selected_lints)
    if selected_lints:
        print(f"Running {len(passes)} selected lint pass(es): {', '.join(selected_lints)}")
    debug(f"Enabled passes: {', '.join(p.name for p in passes)}")

    # Step 3: Load documents
    ctx = ProjectContext(source_files)
    failed = load_documents(ctx)
    if failed == len(source_files):
        error("No IR document could be loaded")
        return 1
    if failed:
        info(f"Continuing with {len(source_files) - failed} of {len(source_files)} document(s)")

    if dump_ir:
        dump_ir_impl(ctx)

    # Step 4: Run lints
    sink = DiagnosticSink()
    result = run_lints(ctx, passes, sink, levels)
    if result.failures:
        info(f"{len(result.failures)} lint run(s) failed; see errors above")

    # Step 5: Report
    output_file = None
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
        project_name = os.path.splitext(os.path.basename(os.path.normpath(input_path)))[0]
        ext = ".json" if output_mode == OutputMode.JSON else ".txt"
        output_path = os.path.join(output_dir, f"OUT-{project_name}{ext}")
        output_file = open(output_path, "w", encoding="utf-8")
        print(f"Writing results to: {output_path}")

    try:
        num_findings = report_findings(sink.findings, output_mode, output_file)
    finally:
        if output_file:
            output_file.close()

    return 1 if num_findings > 0 or failed > 0 else 0


def list_lints() -> None:
    print(f"Available lints ({len(LINT_REGISTRY)}):\n")
    for lint in sorted(LINT_REGISTRY.values(), key=lambda l: l.name):
        print(f"  {lint.name} [{lint.level.value.upper()}]")
        print(f"    {lint.description}\n")


def explain_lint(name: str) -> int:
    lint = get_lint(name)
    if lint is None:
        error(f"Unknown lint: {name}. Use --list-lints to see available lints.")
        return 1
    print(render("explain.j2", lint=lint))
    return 0


def run() -> None:
    parser = argparse.ArgumentParser(description="Owner-check linter for Solana programs (typed IR input)")
    parser.add_argument("input_path", nargs="?", help="Input IR document (.json) or directory")
    parser.add_argument(
        "--lint",
        action="append",
        metavar="NAME",
        help="Run only the specified lint(s) (can be specified multiple times)",
    )
    parser.add_argument(
        "--allow",
        action="append",
        metavar="NAME",
        help="Suppress the specified lint (can be specified multiple times)",
    )
    parser.add_argument(
        "--deny",
        action="append",
        metavar="NAME",
        help="Report the specified lint at deny level (can be specified multiple times)",
    )
    parser.add_argument("--list-lints", action="store_true", help="List all lints with descriptions")
    parser.add_argument("--explain", metavar="NAME", help="Print the long explanation of a lint")
    parser.add_argument("--dump-ir", action="store_true", help="Dump the loaded IR")
    parser.add_argument("--check-ir", action="store_true", help="Check IR: validate all documents load")
    parser.add_argument(
        "-o", "--output", choices=["short", "full", "context", "json"], default="short", help="Output verbosity"
    )
    parser.add_argument("-O", "--output-dir", metavar="DIR", help="Save results to files in DIR")
    args = parser.parse_args()

    if args.list_lints:
        list_lints()
        sys.exit(0)

    if args.explain:
        sys.exit(explain_lint(args.explain))

    if not args.input_path:
        parser.error("input_path is required (or use --list-lints/--explain)")

    sys.exit(
        main(
            args.input_path,
            dump_ir=args.dump_ir,
            check_ir=args.check_ir,
            output_mode=OutputMode(args.output),
            output_dir=args.output_dir,
            selected_lints=args.lint,
            allow_lints=args.allow,
            deny_lints=args.deny,
        )
    )


if __name__ == "__main__":
    run()
