"""
CLI utilities: file collection, document loading, level resolution, debug commands.
"""

from cli.helpers import (
    collect_source_files,
    load_documents,
    resolve_levels,
)
from cli.debug import (
    dump_ir_tree,
    dump_ir_impl,
    check_ir_impl,
)

__all__ = [
    "collect_source_files",
    "load_documents",
    "resolve_levels",
    "dump_ir_tree",
    "dump_ir_impl",
    "check_ir_impl",
]
