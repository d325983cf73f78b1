"""Pipeline worker components.

- PathDispatcher: seeds the queues from the root paths
- DirectoryExpander / DirectoryExpanderPool: list directory batches
- FileScanner / FileScannerPool: search files and build results
- ResultStream: closable channel of results towards the caller
- ContextExtractor, SlidingBuffer, extract_contexts: per-file extraction
"""

from __future__ import annotations

from walkgrep.core.pipeline.components.dispatcher import PathDispatcher
from walkgrep.core.pipeline.components.expander import (
    DirectoryExpander,
    DirectoryExpanderPool,
    list_directory,
)
from walkgrep.core.pipeline.components.extractor import (
    ContextExtractor,
    SlidingBuffer,
    extract_contexts,
    extract_from_lines,
    iter_lines,
)
from walkgrep.core.pipeline.components.result_stream import ResultStream
from walkgrep.core.pipeline.components.scanner import FileScanner, FileScannerPool

__all__ = [
    "ContextExtractor",
    "DirectoryExpander",
    "DirectoryExpanderPool",
    "FileScanner",
    "FileScannerPool",
    "PathDispatcher",
    "ResultStream",
    "SlidingBuffer",
    "extract_contexts",
    "extract_from_lines",
    "iter_lines",
    "list_directory",
]
