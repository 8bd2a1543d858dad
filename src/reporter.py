import json
import os
from enum import Enum
from typing import List, Optional, TextIO

from core.diagnostics import Finding, Level
from lints.base import get_lint
from templates import render


_USE_COLOR = not os.environ.get("SEALCHECK_NO_COLORS")


class _C:
    """ANSI color codes."""

    RESET = "\033[0m" if _USE_COLOR else ""
    BOLD = "\033[1m" if _USE_COLOR else ""
    DIM = "\033[2m" if _USE_COLOR else ""
    RED = "\033[31m" if _USE_COLOR else ""
    YELLOW = "\033[33m" if _USE_COLOR else ""
    BRIGHT_RED = "\033[91m" if _USE_COLOR else ""


def _level_color(level: Level) -> str:
    colors = {
        Level.FORBID: f"{_C.BOLD}{_C.BRIGHT_RED}",
        Level.DENY: _C.RED,
        Level.WARN: _C.YELLOW,
        Level.ALLOW: _C.DIM,
    }
    return colors.get(level, "")


class OutputMode(Enum):
    """Finding output verbosity modes."""

    SHORT = "short"  # location, lint, message, function
    FULL = "full"  # + source snippet and lint description
    CONTEXT = "context"  # + the lint's full explanation
    JSON = "json"  # Machine-readable JSON output


def report_findings(
    findings: List[Finding],
    output_mode: OutputMode = OutputMode.SHORT,
    output_file: Optional[TextIO] = None,
) -> int:
    """
    Report findings with configurable verbosity.

    Args:
        findings: Findings in emission order
        output_mode: SHORT (default), FULL, CONTEXT, or JSON
        output_file: Optional file handle to write output to (in addition to stdout)

    Returns: Number of findings reported
    """
    if output_mode == OutputMode.JSON:
        return report_findings_json(findings, output_file)

    def _print(msg: str = ""):
        print(msg)
        if output_file:
            print(msg, file=output_file)

    if not findings:
        _print("No findings")
        return 0

    _print(f"\nFound {len(findings)} finding(s):\n")

    explained = set()
    for finding in findings:
        _report_single_finding(finding, output_mode, _print)
        if output_mode == OutputMode.CONTEXT and finding.lint not in explained:
            lint = get_lint(finding.lint)
            if lint:
                for line in render("explain.j2", lint=lint).splitlines():
                    _print(f"  {_C.DIM}{line}{_C.RESET}" if line else "")
                _print()
            explained.add(finding.lint)

    return len(findings)


def _report_single_finding(finding: Finding, output_mode: OutputMode, _print) -> None:
    level_tag = f"{_level_color(finding.level)}{finding.level.value.upper()}{_C.RESET}"
    lint_tag = f"{_C.BOLD}{finding.lint}{_C.RESET}"
    in_function = f" (in function '{finding.function}')" if finding.function else ""
    _print(f"{finding.span}: {level_tag}[{lint_tag}] {finding.message}{in_function}")

    if output_mode in (OutputMode.FULL, OutputMode.CONTEXT):
        lint = get_lint(finding.lint)
        _print(
            render(
                "finding_full.j2",
                finding=finding,
                description=lint.description if lint else "",
                dim=_C.DIM,
                reset=_C.RESET,
            )
        )
        _print()


def report_findings_json(findings: List[Finding], output_file: Optional[TextIO] = None) -> int:
    """Report findings in JSON format."""
    output = {
        "findings": [f.to_dict() for f in findings],
        "total": len(findings),
    }

    json_str = json.dumps(output, indent=2)
    print(json_str)
    if output_file:
        print(json_str, file=output_file)

    return len(findings)
