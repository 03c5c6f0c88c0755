"""Test extractor: Java test files -> TestClass models.

A file is a test file iff it imports a recognized framework namespace;
anything else is excluded without a warning.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from ..logging_config import get_logger
from . import java_syntax as js
from .base import BaseExtractor
from .models import TestClass, TestFramework, TestMethod, qualify
from .treesitter_parser import end_line, start_line

logger = get_logger(__name__)

# (import prefix, framework); first import matching any prefix decides
FRAMEWORK_IMPORTS: tuple[tuple[str, TestFramework], ...] = (
    ("org.junit.jupiter.", TestFramework.JUNIT5),
    ("org.junit.", TestFramework.JUNIT4),
    ("org.testng.", TestFramework.TESTNG),
)

TEST_ANNOTATIONS = frozenset(
    {
        "Test",
        "org.junit.Test",
        "org.junit.jupiter.api.Test",
        "org.testng.annotations.Test",
        "ParameterizedTest",
        "RepeatedTest",
    }
)
EXPECTED_EXCEPTION_ANNOTATION = "ExpectedException"
EXPECTED_EXCEPTION_ELEMENTS = frozenset({"expected", "expectedExceptions"})
MOCK_ANNOTATIONS = frozenset({"Mock", "MockBean", "InjectMocks"})
MOCK_VERBS = frozenset({"mock", "when", "given", "doReturn", "doThrow"})
ASSERTION_PREFIXES = ("assert", "verify")

BOUNDARY_KEYWORDS = ("boundary", "edge", "limit")
EXCEPTION_KEYWORDS = ("exception", "error")
UNRELIABLE_KEYWORDS = ("should", "when")

_TEST_CLASS_SUFFIX = re.compile(r"Tests?$")


def detect_framework(import_names: list[str]) -> TestFramework:
    """First framework whose namespace is imported, UNKNOWN otherwise."""
    for name in import_names:
        for prefix, framework in FRAMEWORK_IMPORTS:
            if name.startswith(prefix):
                return framework
    return TestFramework.UNKNOWN


def infer_tested_method(test_method_name: str) -> str:
    """Guess the business method a test exercises from its name.

    ``testCalculate_Success`` -> ``calculate``. Returns '' when the name
    follows a should/when style that does not name a method.
    """
    name = test_method_name
    if name.startswith("test"):
        name = name[4:]

    underscore = name.find("_")
    if underscore > 0:
        name = name[:underscore]

    lowered = name.lower()
    if any(keyword in lowered for keyword in UNRELIABLE_KEYWORDS):
        return ""

    if name:
        name = name[0].lower() + name[1:]
    return name


def corresponding_business_name(test_class_name: str) -> str:
    """``OrderServiceTest`` / ``OrderServiceTests`` -> ``OrderService``."""
    return _TEST_CLASS_SUFFIX.sub("", test_class_name)


def is_boundary_name(name: str) -> bool:
    lowered = name.lower()
    return any(keyword in lowered for keyword in BOUNDARY_KEYWORDS)


def is_exception_name(name: str) -> bool:
    lowered = name.lower()
    return any(keyword in lowered for keyword in EXCEPTION_KEYWORDS)


def is_assertion_call(name: str) -> bool:
    return name.startswith(ASSERTION_PREFIXES)


class TestExtractor(BaseExtractor[TestClass]):
    """Builds a TestClass for each file that imports a test framework."""

    __test__ = False

    def extract_file(self, filepath: Path) -> Optional[TestClass]:
        tree = self.read_tree(filepath)
        root = tree.root_node

        framework = detect_framework(js.imports(root))
        if framework is TestFramework.UNKNOWN:
            logger.debug("No test framework import in %s, skipping", filepath)
            return None

        class_name = filepath.stem
        package = js.package_name(root)

        test_class = TestClass(
            fully_qualified_name=qualify(package, class_name),
            class_name=class_name,
            package_name=package,
            file_path=str(filepath),
            framework=framework,
            corresponding_business_class=qualify(
                package, corresponding_business_name(class_name)
            ),
        )
        test_class.test_methods = [
            self._build_test_method(node, class_name)
            for node in js.method_declarations(root)
            if _is_test_method(node)
        ]
        return test_class

    def _build_test_method(self, node, class_name: str) -> TestMethod:
        name = js.method_name(node)
        annotations = js.annotations(node)
        calls = list(js.invoked_method_names(node))

        expects_exception = any(
            a.simple_name == EXPECTED_EXCEPTION_ANNOTATION
            or (a.name in TEST_ANNOTATIONS and EXPECTED_EXCEPTION_ELEMENTS & set(a.arguments))
            for a in annotations
        )
        mock_marker = any(a.simple_name in MOCK_ANNOTATIONS for a in annotations)

        first, last = start_line(node), end_line(node)
        return TestMethod(
            test_class=class_name,
            name=name,
            tested_method=infer_tested_method(name),
            assertion_count=sum(1 for call in calls if is_assertion_call(call)),
            is_boundary_test=is_boundary_name(name),
            is_exception_test=is_exception_name(name) or expects_exception,
            uses_mocks=mock_marker or any(call in MOCK_VERBS for call in calls),
            lines_of_code=last - first + 1,
            start_line=first,
            end_line=last,
        )


def _is_test_method(node) -> bool:
    return any(a.name in TEST_ANNOTATIONS for a in js.annotations(node))
