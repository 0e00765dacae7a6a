"""Tests for the structural scanner."""

from __future__ import annotations

import textwrap

from testgen.parsing.scanner import (
    INITIAL_STATE,
    EventKind,
    Phase,
    extract_members,
    scan,
    transition,
)


def _source(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


SERVICE = _source(
    """
    package com.example.service;

    import java.util.List;

    @Service
    public class OrderService {
        private final OrderRepository repository;

        public OrderService(OrderRepository repository) {
            this.repository = repository;
        }

        @Transactional
        public Order place(Order order) throws ValidationException {
            if (order == null) {
                throw new IllegalArgumentException("order");
            }
            return repository.save(order);
        }

        public int count() { return repository.count(); }

        protected static List<Order> recent(int limit)
        {
            return repository.findRecent(limit);
        }

        private void audit(String message) {
            Runnable task = new Runnable() {
                public void run() {
                    System.out.println(message);
                }
            };
            task.run();
        }
    }
    """
)


def test_scanner_returns_members_in_declaration_order() -> None:
    members = extract_members(SERVICE)

    assert [member.name for member in members] == ["place", "count", "recent", "audit"]


def test_scanner_records_line_ranges() -> None:
    members = {member.name: member for member in extract_members(SERVICE)}

    assert (members["place"].start_line, members["place"].end_line) == (14, 19)
    assert (members["count"].start_line, members["count"].end_line) == (21, 21)
    assert (members["recent"].start_line, members["recent"].end_line) == (23, 26)
    assert (members["audit"].start_line, members["audit"].end_line) == (28, 35)


def test_scanner_ranges_are_ordered_and_disjoint() -> None:
    members = extract_members(SERVICE)

    for member in members:
        assert member.start_line <= member.end_line
    for previous, current in zip(members, members[1:]):
        assert previous.end_line < current.start_line


def test_scanner_captures_modifiers_types_and_parameters() -> None:
    members = {member.name: member for member in extract_members(SERVICE)}

    recent = members["recent"]
    assert recent.modifiers == ("protected", "static")
    assert recent.result_type == "List<Order>"
    assert recent.parameters == "int limit"
    assert recent.signature == "protected static List<Order> recent(int limit)"
    assert members["place"].parameters == "Order order"


def test_scanner_skips_constructors() -> None:
    names = [member.name for member in extract_members(SERVICE)]

    assert "OrderService" not in names


def test_scanner_drops_method_whose_return_type_matches_its_name() -> None:
    source = _source(
        """
        public class Node {
            public Node Node(int value) {
                return null;
            }

            public Node next() {
                return null;
            }
        }
        """
    )

    assert [member.name for member in extract_members(source)] == ["next"]


def test_scanner_emits_bodiless_interface_methods() -> None:
    source = _source(
        """
        public interface Repository {
            Order findById(long id);

            List<Order> findAll();
        }
        """
    )

    members = extract_members(source)

    assert [(m.name, m.start_line, m.end_line) for m in members] == [
        ("findById", 2, 2),
        ("findAll", 4, 4),
    ]


def test_scanner_ignores_lines_before_class_declaration() -> None:
    source = _source(
        """
        package com.example;

        import static org.junit.Assert.assertTrue;

        public class Util {
            public static boolean check(int value) {
                return value > 0;
            }
        }
        """
    )

    assert [member.name for member in extract_members(source)] == ["check"]


def test_scanner_counts_braces_inside_string_literals() -> None:
    # Braces in strings are not special; the method appears to close late.
    source = _source(
        """
        public class Printer {
            public String open() {
                return "{";
            }

            public void close() {
            }
        }
        """
    )

    members = extract_members(source)

    assert [member.name for member in members] == ["open"]
    assert members[0].end_line == 8


def test_scanner_tolerates_malformed_input() -> None:
    assert extract_members("") == []
    assert extract_members("not java at all {{{") == []
    unterminated = "public class Broken {\n    public void run() {\n        work();\n"
    assert extract_members(unterminated) == []


def test_scan_yields_start_and_end_events() -> None:
    source = _source(
        """
        public class Calculator {
            public int add(int a, int b) {
                return a + b;
            }
        }
        """
    )

    events = [event for event in scan(source) if event.kind is not EventKind.SKIP]

    assert [(event.kind, event.line) for event in events] == [
        (EventKind.MEMBER_START, 2),
        (EventKind.MEMBER_END, 4),
    ]
    assert events[1].member is not None
    assert events[1].member.end_line == 4


def test_transition_moves_through_phases() -> None:
    state, event = transition(INITIAL_STATE, "public class A {", 1)
    assert state.phase is Phase.SEEKING_MEMBER
    assert event is not None and event.kind is EventKind.SKIP

    state, event = transition(state, "    void run() {", 2)
    assert state.phase is Phase.IN_BODY
    assert state.depth == 1
    assert event is not None and event.kind is EventKind.MEMBER_START

    state, event = transition(state, "    }", 3)
    assert state.phase is Phase.SEEKING_MEMBER
    assert event is not None and event.kind is EventKind.MEMBER_END


def test_scanner_recognises_generic_qualified_and_annotated_declarations() -> None:
    source = _source(
        """
        public class Repository {
            @Override public String toString() {
                return "repo";
            }

            public static <T> T first(List<T> items) {
                Comparator<T> order = new Comparator<T>() {
                    public int compare(T a, T b) {
                        return 0;
                    }
                };
                return items.get(0);
            }

            java.util.List<String> names() {
                return java.util.List.of();
            }
        }
        """
    )

    members = extract_members(source)

    assert [(m.name, m.result_type, m.modifiers) for m in members] == [
        ("toString", "String", ("public",)),
        ("first", "T", ("public", "static")),
        ("names", "java.util.List<String>", ()),
    ]
    assert [(m.start_line, m.end_line) for m in members] == [(2, 4), (6, 13), (15, 17)]
    assert members[1].parameters == "List<T> items"


def test_transition_finds_annotated_class_on_one_line() -> None:
    state, _ = transition(INITIAL_STATE, "@Component public class Registry {", 1)

    assert state.phase is Phase.SEEKING_MEMBER
