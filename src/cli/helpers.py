"""
CLI helper functions: file collection, document loading, lint level resolution.
"""

from pathlib import Path
from typing import Dict, List, Optional

from core.context import ProjectContext
from core.diagnostics import Level
from core.utils import debug, error, warn
from hir.loader import IRLoadError, load_crate
from lints.base import LINT_REGISTRY


# Directories that never hold IR documents of the project under analysis
_SKIP_DIRS = {"target", "node_modules", ".git", ".anchor"}


def collect_source_files(input_path: str) -> List[str]:
    """Collect .json IR documents from a path (file or directory)."""
    path = Path(input_path)
    if not path.exists():
        return []
    if path.is_file():
        return [str(path)]
    if path.is_dir():
        source_files = []
        for file_path in path.rglob("*.json"):
            rel_parts = file_path.relative_to(path).parts[:-1]
            if any(part in _SKIP_DIRS or part.startswith(".") for part in rel_parts):
                continue
            source_files.append(str(file_path))
        return sorted(source_files)
    return []


def load_documents(ctx: ProjectContext) -> int:
    """
    Load every document of `ctx` into its SourceFileContext.

    A document that fails to load is reported and left without a crate; the
    others are still loaded. Returns the number of documents that failed.
    """
    failed = 0
    for path, file_ctx in ctx.source_files.items():
        try:
            file_ctx.crate = load_crate(path)
        except IRLoadError as e:
            error(str(e))
            file_ctx.load_error = str(e)
            failed += 1
            continue
        if not file_ctx.crate.functions:
            warn(f"{path}: document has no functions")
        debug(f"Loaded {path}: crate '{file_ctx.crate.name}'")
    return failed


def resolve_levels(
    allow: Optional[List[str]] = None,
    deny: Optional[List[str]] = None,
) -> Dict[str, Level]:
    """
    Build command-line level overrides.

    Raises ValueError for lint names that are not declared, or for a lint
    that is both allowed and denied.
    """
    allow = allow or []
    deny = deny or []
    unknown = sorted({name for name in allow + deny if name not in LINT_REGISTRY})
    if unknown:
        raise ValueError(f"Unknown lint(s): {', '.join(unknown)}. Use --list-lints to see available lints.")
    both = sorted(set(allow) & set(deny))
    if both:
        raise ValueError(f"Lint(s) both allowed and denied: {', '.join(both)}")

    levels: Dict[str, Level] = {}
    for name in allow:
        if LINT_REGISTRY[name].level == Level.FORBID:
            raise ValueError(f"Lint '{name}' is forbid-level and cannot be allowed")
        levels[name] = Level.ALLOW
    for name in deny:
        levels[name] = Level.DENY
    return levels
