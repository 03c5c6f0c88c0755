"""Tree-sitter parser wrapper for Java source.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes)
    if tree is None or tree.root_node.has_error:
        ...  # treat as a parse failure
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Iterator

import tree_sitter
import tree_sitter_java

if TYPE_CHECKING:
    # Structural view of the tree-sitter node API used in this package
    class Node:
        text: bytes | None
        type: str
        start_point: tuple[int, int]
        end_point: tuple[int, int]
        children: list[Node]
        named_children: list[Node]
        parent: Node | None
        has_error: bool

        def child_by_field_name(self, name: str) -> Node | None: ...

    class Tree:
        root_node: Node


JAVA_LANGUAGE = tree_sitter.Language(tree_sitter_java.language())


class TreeSitterParser:
    """Wrapper around a tree-sitter Java parser.

    ``tree_sitter.Parser`` objects are not safe to share between threads,
    so each thread lazily gets its own.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def _parser(self) -> Any:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = tree_sitter.Parser(JAVA_LANGUAGE)
            self._local.parser = parser
        return parser

    def parse(self, code: bytes) -> Tree | None:
        """Parse Java source and return the syntax tree (None on failure)."""
        try:
            result: Tree | None = self._parser().parse(code)
            return result
        except (ValueError, TypeError):
            return None


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of ``node`` and every descendant."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def node_text(node: Node | None) -> str:
    """Decoded source text of a node ('' for None)."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def start_line(node: Node) -> int:
    """1-based first line of a node."""
    return node.start_point[0] + 1


def end_line(node: Node) -> int:
    """1-based last line of a node."""
    return node.end_point[0] + 1
