"""Tests for the tree-sitter declaration scanner."""

import pytest

from c_layout_analyzer.config import Config
from c_layout_analyzer.cpp_analyzer import (
    DeclarationScanner,
    build_aggregate_map,
    known_type_names,
)
from c_layout_analyzer.cpp_analyzer.queries import QUERY_PATTERNS
from c_layout_analyzer.layout import AggregateInfo

SOURCE = """\
struct Point {
    int x;
    int y;
};

typedef struct Node {
    int value;
    struct Node *next;
} Node_t;

typedef struct {
    float r, g, b;
} Color;

union Value {
    int i;
    float f;
};

class Widget {
public:
    int id;
};

struct Forward;

typedef unsigned long ulong;
"""


@pytest.fixture
def scanner() -> DeclarationScanner:
    return DeclarationScanner(Config())


@pytest.fixture
def declarations(scanner):
    return {d.name: d for d in scanner.scan(SOURCE)}


class TestDeclarationScan:
    """Test aggregate declaration discovery."""

    def test_finds_defined_aggregates(self, declarations):
        assert set(declarations) == {"Point", "Node", "Color", "Value", "Widget"}

    def test_kinds(self, declarations):
        assert declarations["Point"].kind == "struct"
        assert declarations["Value"].kind == "union"
        assert declarations["Widget"].kind == "class"

    def test_line_numbers(self, declarations):
        assert declarations["Point"].line == 1
        assert declarations["Value"].line == 15

    def test_typedef_alias_is_attached_to_tag(self, declarations):
        assert declarations["Node"].aliases == ["Node_t"]

    def test_anonymous_typedef_is_declared_by_alias(self, declarations):
        assert declarations["Color"].kind == "struct"
        assert declarations["Color"].aliases == []

    def test_forward_declaration_and_scalar_typedef_are_skipped(self, declarations):
        assert "Forward" not in declarations
        assert "ulong" not in declarations

    def test_known_type_names(self, scanner):
        names = known_type_names(scanner.scan(SOURCE))
        assert names == {"Point", "Node", "Node_t", "Color", "Value", "Widget"}

    def test_to_dict(self, declarations):
        assert declarations["Node"].to_dict() == {
            "name": "Node",
            "kind": "struct",
            "line": 6,
            "aliases": ["Node_t"],
        }

    def test_empty_source(self, scanner):
        assert scanner.scan("") == []


class TestAggregateMap:
    """Test joining declarations with supplied sizes."""

    def test_alias_shares_tag_size(self, scanner):
        aggregates = build_aggregate_map(scanner.scan(SOURCE), {"Node_t": 16, "Point": 8})
        assert aggregates["Node"] == AggregateInfo(total_size=16)
        assert aggregates["Node_t"] == AggregateInfo(total_size=16)
        assert aggregates["Point"] == AggregateInfo(total_size=8)
        assert "Color" not in aggregates

    def test_undeclared_sizes_are_kept(self):
        assert build_aggregate_map([], {"Extern": 4}) == {"Extern": AggregateInfo(total_size=4)}


class TestFileScan:
    """Test file scanning and its cache."""

    def test_missing_file(self, scanner, tmp_path):
        with pytest.raises(FileNotFoundError):
            scanner.scan_file(str(tmp_path / "missing.h"))

    def test_scan_is_cached_until_cleared(self, scanner, tmp_path):
        header = tmp_path / "types.h"
        header.write_text(SOURCE)

        first = scanner.scan_file(str(header))
        assert scanner.scan_file(str(header)) is first

        scanner.clear_cache()
        assert scanner.scan_file(str(header)) is not first

    def test_cache_disabled(self, tmp_path):
        scanner = DeclarationScanner(Config(cache_enabled=False))
        header = tmp_path / "types.h"
        header.write_text(SOURCE)

        assert scanner.scan_file(str(header)) is not scanner.scan_file(str(header))

    def test_fifo_eviction(self, tmp_path):
        scanner = DeclarationScanner(Config(cache_max_size=1))
        first_file = tmp_path / "a.h"
        second_file = tmp_path / "b.h"
        first_file.write_text("struct A { int a; };")
        second_file.write_text("struct B { int b; };")

        first = scanner.scan_file(str(first_file))
        scanner.scan_file(str(second_file))
        assert scanner.scan_file(str(first_file)) is not first

    def test_rewritten_file_is_rescanned(self, scanner, tmp_path):
        header = tmp_path / "point.h"
        header.write_text("struct P { int x; };\n")
        assert [d.names for d in scanner.scan_file(str(header))] == [["P"]]

        header.write_text("typedef struct P { int x; } PT;\nPT t;\n")
        assert [d.names for d in scanner.scan_file(str(header))] == [["P", "PT"]]


class TestQueryCompilation:
    """Test handling of queries that fail to compile."""

    def test_warning_goes_to_stderr(self, monkeypatch, capsys):
        monkeypatch.setitem(QUERY_PATTERNS, "BROKEN", "(no_such_node) @x (")

        scanner = DeclarationScanner(Config())

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Failed to compile query 'BROKEN'" in captured.err
        assert scanner.scan("struct A { int a; };")[0].name == "A"
