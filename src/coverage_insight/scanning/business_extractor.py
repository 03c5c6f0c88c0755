"""Structural extractor: Java source files -> BusinessClass models."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..logging_config import get_logger
from . import java_syntax as js
from .base import BaseExtractor
from .models import BusinessClass, BusinessMethod, ClassKind, qualify
from .treesitter_parser import end_line, start_line

logger = get_logger(__name__)


class BusinessExtractor(BaseExtractor[BusinessClass]):
    """Builds one BusinessClass per parseable source file.

    The class name is the file stem; methods of every type declared in the
    file (nested types included) are collected in source order.
    """

    def extract_file(self, filepath: Path) -> Optional[BusinessClass]:
        tree = self.read_tree(filepath)
        root = tree.root_node

        class_name = filepath.stem
        package = js.package_name(root)

        business_class = BusinessClass(
            fully_qualified_name=qualify(package, class_name),
            class_name=class_name,
            package_name=package,
            file_path=str(filepath),
            kind=ClassKind.from_class_name(class_name),
        )
        business_class.methods = self._extract_methods(root, class_name)
        logger.debug(
            "Extracted %s with %d public methods",
            business_class.fully_qualified_name,
            len(business_class.methods),
        )
        return business_class

    def _extract_methods(self, root, class_name: str) -> list[BusinessMethod]:
        methods: list[BusinessMethod] = []
        for node in js.method_declarations(root):
            if not js.is_public_method(node):
                continue
            methods.append(
                BusinessMethod(
                    class_name=class_name,
                    name=js.method_name(node),
                    parameter_types=js.parameter_types(node),
                    return_type=js.return_type(node),
                    start_line=start_line(node),
                    end_line=end_line(node),
                    complexity=js.cyclomatic_complexity(node),
                )
            )
        return methods
