"""
Describes the inputs under analysis: the IR documents and what was loaded from them.
"""

from typing import Dict, Iterator, List, Optional, Tuple
from dataclasses import dataclass

from hir.ir import Crate, Function


@dataclass
class SourceFileContext:
    path: str
    crate: Optional[Crate] = None
    load_error: Optional[str] = None  # set when the document could not be loaded


class ProjectContext:
    """
    All IR documents of one run, keyed by path.

    Documents are loaded once and never modified afterwards.
    """

    def __init__(self, source_files: List[str]):
        self.source_files: Dict[str, SourceFileContext] = {path: SourceFileContext(path) for path in source_files}

    def iter_functions(self) -> Iterator[Tuple[Crate, Function]]:
        """All (crate, function) pairs in document order."""
        for file_ctx in self.source_files.values():
            if file_ctx.crate is None:
                continue
            for function in file_ctx.crate.functions:
                yield file_ctx.crate, function
