"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from testgen.paths import PathResolver
from testgen.service import create_app


CALCULATOR = """package com.example;

public class Calculator {
    public int add(int a, int b) {
        return a + b;
    }
}
"""


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_scan_endpoint_returns_unit(client: TestClient) -> None:
    response = client.post("/scan", json={"content": CALCULATOR})

    assert response.status_code == 200
    payload = response.json()
    assert payload["found"] is True
    assert payload["unit"]["namespace"] == "com.example"
    assert payload["unit"]["name"] == "Calculator"
    assert [member["name"] for member in payload["unit"]["members"]] == ["add"]


def test_scan_endpoint_without_class(client: TestClient) -> None:
    response = client.post("/scan", json={"content": "package com.example;\n"})

    assert response.json() == {"found": False, "unit": None}


def test_resolve_endpoint(client: TestClient) -> None:
    response = client.post(
        "/resolve", json={"path": "src/main/java/com/example/Calculator.java"}
    )

    assert response.status_code == 200
    assert response.json() == {
        "test_path": "src/test/java/com/example/CalculatorTest.java",
        "namespace": "com.example",
        "name": "Calculator",
        "is_counterpart": False,
    }


def test_resolve_endpoint_uses_injected_resolver() -> None:
    client = TestClient(create_app(PathResolver(test_suffix="Spec")))

    response = client.post(
        "/resolve", json={"path": "src/main/java/com/example/Calculator.java"}
    )

    assert response.json()["test_path"] == "src/test/java/com/example/CalculatorSpec.java"


def test_merge_endpoint_reports_added_imports(client: TestClient) -> None:
    existing = (
        "package com.example;\n"
        "\n"
        "import org.junit.jupiter.api.Test;\n"
        "\n"
        "class CalculatorTest {\n"
        "    @Test\n"
        "    void adds() {}\n"
        "}\n"
    )
    fragment = (
        "package com.example;\n"
        "\n"
        "import org.junit.jupiter.api.Test;\n"
        "import static org.junit.jupiter.api.Assertions.assertEquals;\n"
        "\n"
        "class CalculatorTest {\n"
        "    @Test\n"
        "    void subtracts() {\n"
        "        assertEquals(1, 2 - 1);\n"
        "    }\n"
        "}\n"
    )

    response = client.post("/merge", json={"existing": existing, "fragment": fragment})

    assert response.status_code == 200
    payload = response.json()
    assert payload["added_imports"] == ["static org.junit.jupiter.api.Assertions.assertEquals"]
    assert "void adds()" in payload["content"]
    assert "void subtracts()" in payload["content"]
    assert payload["content"].count("import org.junit.jupiter.api.Test;") == 1


def test_classify_endpoint(client: TestClient) -> None:
    response = client.post(
        "/classify", json={"output": "[INFO] BUILD SUCCESS\n", "tool": "maven"}
    )

    assert response.json() == {
        "passed": True,
        "summary": "[INFO] BUILD SUCCESS",
        "tool": "maven",
    }


def test_classify_endpoint_defaults_to_unknown_tool(client: TestClient) -> None:
    response = client.post("/classify", json={"output": "compilation error"})

    payload = response.json()
    assert payload["passed"] is False
    assert payload["tool"] == "unknown"
