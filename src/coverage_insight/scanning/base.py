"""Base extractor: root traversal with per-file error isolation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, Iterable, Optional, TypeVar

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import FileAccessError, ParsingError
from ..logging_config import get_logger
from .files import iter_source_files
from .treesitter_parser import TreeSitterParser

logger = get_logger(__name__)

T = TypeVar("T")


class BaseExtractor(ABC, Generic[T]):
    """Walks source roots and turns each parseable file into a model object.

    A file that cannot be read or parsed is skipped and recorded in
    ``warnings``; it never aborts the batch.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        parser: Optional[TreeSitterParser] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.parser = parser or TreeSitterParser()
        self.warnings: list[str] = []

    def extract_all(self, roots: Iterable[Path]) -> list[T]:
        """Extract every file under ``roots`` (in root order)."""
        results: list[T] = []
        files_parsed = 0
        files_errored = 0

        for root in roots:
            for filepath in iter_source_files(
                root, self.config.source_extension, self.config.skip_dirs
            ):
                try:
                    item = self.extract_file(filepath)
                except FileAccessError as e:
                    files_errored += 1
                    self._warn(f"Access error for {filepath}: {e.reason}")
                    continue
                except ParsingError as e:
                    files_errored += 1
                    self._warn(f"Parse error for {filepath}: {e.reason}")
                    continue
                files_parsed += 1
                if item is not None:
                    results.append(item)

        logger.info(
            "%s: %d parsed, %d kept, %d errors",
            self.__class__.__name__,
            files_parsed,
            len(results),
            files_errored,
        )
        return results

    def read_tree(self, filepath: Path):
        """Read and parse a file.

        Raises:
            FileAccessError: If the file cannot be read
            ParsingError: If the source does not parse cleanly
        """
        try:
            code = filepath.read_bytes()
        except OSError as e:
            raise FileAccessError(filepath, str(e))

        tree = self.parser.parse(code)
        if tree is None:
            raise ParsingError(filepath, "parser returned no tree")
        if tree.root_node.has_error:
            raise ParsingError(filepath, "syntax error")
        return tree

    @abstractmethod
    def extract_file(self, filepath: Path) -> Optional[T]:
        """Extract one file; return None to exclude it silently."""

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning(message)
