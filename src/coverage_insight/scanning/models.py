"""Structural model of business and test code.

BusinessClass / BusinessMethod come from the structural extractor,
TestClass / TestMethod from the test extractor. The coverage matcher is
the only component that writes to a BusinessMethod after extraction
(covered flag, granularity, covering tests).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..coverage.granularity import GranularityLevel


class ClassKind(str, Enum):
    """Role of a business class, inferred from its simple name."""

    SERVICE = "service"
    CONTROLLER = "controller"
    REPOSITORY = "repository"
    COMPONENT = "component"
    UTILITY = "utility"
    MODEL = "model"
    UNKNOWN = "unknown"

    @classmethod
    def from_class_name(cls, class_name: str) -> ClassKind:
        """Classify by name substring, first match in priority order wins."""
        upper = class_name.upper()
        for kind, markers in _KIND_MARKERS:
            if any(marker in upper for marker in markers):
                return kind
        return cls.UNKNOWN


_KIND_MARKERS: tuple[tuple[ClassKind, tuple[str, ...]], ...] = (
    (ClassKind.SERVICE, ("SERVICE",)),
    (ClassKind.CONTROLLER, ("CONTROLLER",)),
    (ClassKind.REPOSITORY, ("REPOSITORY", "DAO")),
    (ClassKind.COMPONENT, ("COMPONENT",)),
    (ClassKind.UTILITY, ("UTIL", "HELPER")),
    (ClassKind.MODEL, ("ENTITY", "MODEL", "DTO", "VO")),
)


class TestFramework(str, Enum):
    """Test framework detected from a test file's imports."""

    __test__ = False

    JUNIT4 = "junit4"
    JUNIT5 = "junit5"
    TESTNG = "testng"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return _FRAMEWORK_NAMES[self]


_FRAMEWORK_NAMES = {
    TestFramework.JUNIT4: "JUnit 4",
    TestFramework.JUNIT5: "JUnit 5",
    TestFramework.TESTNG: "TestNG",
    TestFramework.UNKNOWN: "Unknown",
}


def build_signature(name: str, parameter_types: list[str] | tuple[str, ...]) -> str:
    """``name(type1, type2)`` -- overload-sensitive, return-type-insensitive."""
    return f"{name}({', '.join(parameter_types)})"


@dataclass
class TestMethod:
    """A single test method.

    Attributes:
        test_class: Simple name of the owning test class
        name: Method name
        tested_method: Business method name inferred from ``name``
            ('' when the inference is unreliable)
        assertion_count: assert*/verify* invocations in the body
        is_boundary_test: Name mentions boundary/edge/limit
        is_exception_test: Name mentions exception/error, or an
            exception-expectation marker is present
        uses_mocks: Mock-injection marker or mock verb in the body
        lines_of_code: Source lines spanned by the declaration
    """

    __test__ = False  # keep pytest from collecting this class

    test_class: str
    name: str
    tested_method: str = ""
    assertion_count: int = 0
    is_boundary_test: bool = False
    is_exception_test: bool = False
    uses_mocks: bool = False
    lines_of_code: int = 0
    start_line: int = 0
    end_line: int = 0


@dataclass
class TestClass:
    """A parsed test file."""

    __test__ = False

    fully_qualified_name: str
    class_name: str
    package_name: str
    file_path: str
    framework: TestFramework
    corresponding_business_class: str
    test_methods: list[TestMethod] = field(default_factory=list)


@dataclass
class BusinessMethod:
    """A publicly visible method of production code.

    Line numbers are 1-based and inclusive. ``end_line < start_line`` is a
    data error and is rejected at construction.
    """

    class_name: str
    name: str
    parameter_types: list[str] = field(default_factory=list)
    return_type: str = "void"
    start_line: int = 1
    end_line: int = 1
    complexity: int = 1
    signature: str = ""
    covered: bool = False
    granularity: GranularityLevel | None = None
    granularity_score: int = 0
    covering_tests: list[TestMethod] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.end_line < self.start_line:
            raise ValueError(
                f"Malformed line span for {self.name}: "
                f"start={self.start_line} > end={self.end_line}"
            )
        if self.complexity < 1:
            raise ValueError(f"Complexity must be >= 1, got {self.complexity}")
        if not self.signature:
            self.signature = build_signature(self.name, self.parameter_types)

    @property
    def lines_of_code(self) -> int:
        return self.end_line - self.start_line + 1

    @property
    def full_signature(self) -> str:
        return f"{self.return_type} {self.signature}"

    def contains_line(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


@dataclass
class BusinessClass:
    """A parsed production source file.

    ``coverage_rate`` is derived by the coverage matcher and is 0.0 for a
    class without methods.
    """

    fully_qualified_name: str
    class_name: str
    package_name: str
    file_path: str
    kind: ClassKind = ClassKind.UNKNOWN
    methods: list[BusinessMethod] = field(default_factory=list)
    corresponding_test_class: str = ""
    coverage_rate: float = 0.0

    def __post_init__(self) -> None:
        if not self.corresponding_test_class:
            self.corresponding_test_class = qualify(self.package_name, f"{self.class_name}Test")


def qualify(package_name: str, simple_name: str) -> str:
    """Join a package and a simple name; the default package adds nothing."""
    return f"{package_name}.{simple_name}" if package_name else simple_name
