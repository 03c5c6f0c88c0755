"""Setup script for Coverage Insight"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
this_directory = Path(__file__).parent
long_description = ""
readme_path = this_directory / "README.md"
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

setup(
    name="coverage-insight",
    version="0.1.0",
    author="Naman Agarwal",
    author_email="",
    description="Heuristic method-level test coverage and test granularity analysis for Java projects",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Quality Assurance",
        "Topic :: Software Development :: Testing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.11",
    install_requires=[
        "tree-sitter>=0.22.0",
        "tree-sitter-java>=0.21.0",
        "typer>=0.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "serve": [
            "starlette>=0.27.0",
            "uvicorn>=0.23.0",
        ],
        "test": [
            "pytest>=7.0.0",
            "httpx>=0.24.0",
            "starlette>=0.27.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "coverage-insight=coverage_insight.cli:app",
        ],
    },
    keywords="test-coverage java junit testng static-analysis git code-quality",
)
