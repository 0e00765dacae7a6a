"""Tests for import directive extraction and merging."""

from __future__ import annotations

import textwrap
from pathlib import Path

from tests._fixtures.workspace_builder import WorkspaceBuilder
from testgen.config import DEFAULT_STANDARD_PREFIXES
from testgen.merge import (
    dependency_directives,
    extract_directives,
    find_dependency_units,
    merge_directives,
    missing_directives,
)


def _source(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


EXISTING = _source(
    """
    package com.example;

    import org.junit.jupiter.api.Test;
    import static org.junit.jupiter.api.Assertions.assertEquals;

    class CalculatorTest {
        @Test
        void adds() {
            assertEquals(2, new Calculator().add(1, 1));
        }
    }
    """
)

FRAGMENT = _source(
    """
    package com.example;

    import org.junit.jupiter.api.Test;
    import org.junit.jupiter.api.BeforeEach;
    import static org.junit.jupiter.api.Assertions.*;
    import org.junit.jupiter.api.BeforeEach;

    class CalculatorTest {
        @Test
        void subtracts() {
        }
    }
    """
)


def test_extract_directives_keeps_file_order_and_duplicates() -> None:
    assert extract_directives(FRAGMENT) == [
        "org.junit.jupiter.api.Test",
        "org.junit.jupiter.api.BeforeEach",
        "static org.junit.jupiter.api.Assertions.*",
        "org.junit.jupiter.api.BeforeEach",
    ]


def test_missing_directives_is_ordered_difference() -> None:
    missing = missing_directives(EXISTING, FRAGMENT)

    assert list(missing) == [
        "org.junit.jupiter.api.BeforeEach",
        "static org.junit.jupiter.api.Assertions.*",
    ]


def test_merge_directives_inserts_after_last_import() -> None:
    merged = merge_directives(EXISTING, FRAGMENT)
    lines = merged.split("\n")

    assert lines[2:6] == [
        "import org.junit.jupiter.api.Test;",
        "import static org.junit.jupiter.api.Assertions.assertEquals;",
        "import org.junit.jupiter.api.BeforeEach;",
        "import static org.junit.jupiter.api.Assertions.*;",
    ]
    assert merged.count("import org.junit.jupiter.api.BeforeEach;") == 1


def test_merge_directives_is_idempotent() -> None:
    once = merge_directives(EXISTING, FRAGMENT)
    twice = merge_directives(once, FRAGMENT)

    assert twice == once
    assert extract_directives(twice) == extract_directives(once)


def test_merge_directives_without_new_imports_returns_input() -> None:
    assert merge_directives(EXISTING, EXISTING) is EXISTING


def test_merge_directives_without_existing_imports_goes_before_class() -> None:
    existing = _source(
        """
        package com.example;

        @ExtendWith(MockitoExtension.class)
        class ServiceTest {
        }
        """
    )
    fragment = "import org.mockito.Mock;\nclass ServiceTest {}\n"

    merged = merge_directives(existing, fragment)

    assert merged.split("\n")[:5] == [
        "package com.example;",
        "",
        "import org.mockito.Mock;",
        "",
        "@ExtendWith(MockitoExtension.class)",
    ]


def test_dependency_directives_filters_standard_libraries() -> None:
    source = _source(
        """
        import java.util.List;
        import javax.inject.Inject;
        import org.mockito.Mockito;
        import com.example.repo.OrderRepository;
        import com.example.model.*;
        import static com.example.util.Strings.isBlank;
        import com.example.repo.OrderRepository;
        """
    )

    assert dependency_directives(source, DEFAULT_STANDARD_PREFIXES) == [
        "com.example.repo.OrderRepository",
        "com.example.model",
        "com.example.util.Strings",
    ]


def test_dependency_directives_without_prefixes_keeps_everything() -> None:
    assert dependency_directives("import java.util.List;\n", []) == ["java.util.List"]


def test_find_dependency_units_skips_test_sources(
    workspace_builder: WorkspaceBuilder,
) -> None:
    workspace_builder.write(
        {
            "src/main/java/com/example/repo/OrderRepository.java": "class OrderRepository {}\n",
            "src/test/java/com/example/util/Strings.java": "class Strings {}\n",
            "target/classes/com/example/util/Strings.java": "class Strings {}\n",
        }
    )
    root = workspace_builder.path()

    found = find_dependency_units(
        root, ["com.example.repo.OrderRepository", "com.example.util.Strings"]
    )

    assert found == {
        "com.example.repo.OrderRepository": root
        / Path("src/main/java/com/example/repo/OrderRepository.java"),
    }
