"""Shared test fixtures: small Java projects written into tmp_path."""

import shutil
import subprocess
import textwrap
from pathlib import Path

import pytest

from coverage_insight.config import AnalysisConfig

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not found")


CALCULATOR = """\
package com.example;

public class Calculator {
    public int add(int a, int b) {
        return a + b;
    }

    public int divide(int a, int b) {
        if (b == 0) {
            throw new IllegalArgumentException("b");
        }
        return a / b;
    }

    private int helper() {
        return 1;
    }

    public String classify(int n) {
        switch (n) {
            case 0:
                return "zero";
            case 1:
                return "one";
            default:
                return n > 0 ? "many" : "negative";
        }
    }
}
"""

CALCULATOR_TEST = """\
package com.example;

import org.junit.jupiter.api.Test;
import static org.junit.jupiter.api.Assertions.*;

class CalculatorTest {
    @Test
    void testAdd() {
        Calculator c = new Calculator();
        assertEquals(3, c.add(1, 2));
        assertEquals(0, c.add(0, 0));
        assertEquals(-1, c.add(0, -1));
    }

    @Test
    void testDivide_byZeroThrowsException() {
        assertThrows(IllegalArgumentException.class, () -> new Calculator().divide(1, 0));
    }

    void notATest() {
    }
}
"""

ORDER_SERVICE = """\
package com.example.service;

import java.util.List;

public class OrderService {
    public double total(List<Double> prices, double discount) {
        double sum = 0;
        for (double p : prices) {
            sum += p;
        }
        try {
            return sum * (1 - discount);
        } catch (ArithmeticException e) {
            return 0;
        }
    }
}
"""

TEST_UTILS = """\
package com.example;

public class TestUtils {
    public static int one() {
        return 1;
    }
}
"""


def write_file(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path):
    """Config with reports under tmp_path."""
    return AnalysisConfig(report_dir=str(tmp_path / "reports"))


@pytest.fixture
def java_project(tmp_path):
    """Maven-style project: Calculator (tested), OrderService (untested)."""
    root = tmp_path / "shop"
    write_file(root, "pom.xml", "<project/>\n")
    write_file(root, "src/main/java/com/example/Calculator.java", CALCULATOR)
    write_file(root, "src/main/java/com/example/service/OrderService.java", ORDER_SERVICE)
    write_file(root, "src/test/java/com/example/CalculatorTest.java", CALCULATOR_TEST)
    write_file(root, "src/test/java/com/example/TestUtils.java", TEST_UTILS)
    write_file(root, "target/classes/Generated.java", "public class Generated { }\n")
    return root


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-C", str(repo), *args],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def init_repo(repo: Path) -> None:
    git(repo, "init", "-q")
    git(repo, "config", "user.email", "dev@example.com")
    git(repo, "config", "user.name", "Dev")
    git(repo, "config", "commit.gpgsign", "false")


def commit_all(repo: Path, message: str) -> str:
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", message)
    return git(repo, "rev-parse", "HEAD").strip()


@pytest.fixture
def git_project(java_project):
    """``java_project`` as a repository with two commits.

    The second commit edits the body of ``Calculator.divide`` and inserts
    a one-line ``count`` method at the top of OrderService.
    """
    init_repo(java_project)
    first = commit_all(java_project, "Initial import")

    calculator = java_project / "src/main/java/com/example/Calculator.java"
    calculator.write_text(
        CALCULATOR.replace('throw new IllegalArgumentException("b");',
                           'throw new ArithmeticException("b");'),
        encoding="utf-8",
    )
    service = java_project / "src/main/java/com/example/service/OrderService.java"
    service.write_text(
        ORDER_SERVICE.replace(
            "public class OrderService {\n",
            "public class OrderService {\n"
            "    public int count(List<Double> prices) { return prices.size(); }\n",
        ),
        encoding="utf-8",
    )
    second = commit_all(java_project, "Tighten divide, add count")
    return java_project, first, second
