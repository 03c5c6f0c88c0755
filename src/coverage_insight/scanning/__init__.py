"""Structural and test extraction for Java sources."""

from .business_extractor import BusinessExtractor
from .models import BusinessClass, BusinessMethod, ClassKind, TestClass, TestFramework, TestMethod
from .project_scanner import ProjectScanner, ProjectStructure, ProjectType
from .test_extractor import TestExtractor

__all__ = [
    "BusinessExtractor",
    "TestExtractor",
    "ProjectScanner",
    "ProjectStructure",
    "ProjectType",
    "BusinessClass",
    "BusinessMethod",
    "ClassKind",
    "TestClass",
    "TestFramework",
    "TestMethod",
]
