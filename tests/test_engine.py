"""Tests for the layout engine."""

import pytest

from c_layout_analyzer.config import Config
from c_layout_analyzer.layout import (
    AggregateInfo,
    ArchitectureResolver,
    TypeLayoutEngine,
    TypeSpan,
)


@pytest.fixture
def make_engine(host64):
    def factory(**config) -> TypeLayoutEngine:
        return TypeLayoutEngine(ArchitectureResolver(config=Config(**config), host=host64))
    return factory


@pytest.fixture
def x64(make_engine) -> TypeLayoutEngine:
    return make_engine(architecture="x64")


@pytest.fixture
def x32(make_engine) -> TypeLayoutEngine:
    return make_engine(architecture="x32")


NODE_AGGREGATES = {"Node": AggregateInfo(total_size=24)}


class TestBuiltinResolution:
    """Test built-in type resolution through a source line."""

    def test_composite_token_law(self, x32, x64):
        for engine in (x32, x64):
            result = engine.resolve("unsigned long long x;", 10)
            assert result.text == "unsigned long long"
            assert result.size == 8

    @pytest.mark.parametrize("cursor", [0, 2, 4])
    def test_long_varies_with_bit_width(self, x32, x64, cursor):
        assert x32.resolve("long x;", cursor).size == 4
        assert x64.resolve("long x;", cursor).size == 8

    def test_long_long_is_fixed(self, x32, x64):
        assert x32.resolve("long long y;", 6).size == 8
        assert x64.resolve("long long y;", 6).size == 8

    def test_alignment_and_description(self, x64):
        result = x64.resolve("double ratio;", 1)
        assert result.alignment == 8
        assert result.description == "Double precision floating point (IEEE 754)"
        assert result.is_pointer is False
        assert result.is_aggregate is False

    def test_span_is_reported(self, x64):
        result = x64.resolve("    int count;", 5)
        assert result.span == TypeSpan(4, 8)

    def test_c99_bool(self, x64):
        assert x64.resolve("_Bool flag;", 1).size == 1

    def test_unknown_identifier_law(self, x64):
        assert x64.resolve("Foo x;", 1, set()) is None

    def test_qualified_type_is_unknown(self, x64):
        """Qualifiers are part of the key; the table has no 'const int'."""
        assert x64.resolve("const int limit = 3;", 8) is None


class TestPointerResolution:
    """Test pointer-adjusted resolution."""

    def test_pointer_to_builtin(self, x32, x64):
        for engine, size in ((x32, 4), (x64, 8)):
            result = engine.resolve("int *p;", 1)
            assert result.is_pointer is True
            assert result.size == size
            assert result.alignment == size
            assert result.description == "Pointer to int"
            assert result.pointee_description == "Standard integer, typically 32-bit"

    def test_pointer_to_unknown_base(self, x64):
        result = x64.layout_of("Widget *")
        assert result.size == 8
        assert result.description == "Pointer type"
        assert result.pointee_description is None

    def test_pointer_size_ignores_pointee_size(self, x32):
        result = x32.resolve("struct Node *next;", 0, aggregates=NODE_AGGREGATES)
        assert result.text == "struct Node *"
        assert result.size == 4
        assert result.description == "Pointer to struct Node"
        assert result.pointee_description == "User-defined type"

    def test_double_pointer(self, x64):
        result = x64.layout_of("char **")
        assert result.size == 8
        assert result.description == "Pointer to char"


class TestAggregateResolution:
    """Test lookups against the aggregate mapping."""

    def test_cursor_on_struct_name(self, x64):
        result = x64.resolve("struct Node *next;", 8, aggregates=NODE_AGGREGATES)
        assert result.text == "Node"
        assert result.size == 24
        assert result.alignment is None
        assert result.is_aggregate is True
        assert result.description == "User-defined type"

    def test_keyword_prefix_is_stripped(self, x64):
        result = x64.resolve("struct Node n;", 0, aggregates=NODE_AGGREGATES)
        assert result.text == "struct Node"
        assert result.size == 24

    def test_known_types_default_to_aggregate_names(self, x64):
        assert x64.resolve("Node n;", 1, aggregates=NODE_AGGREGATES).size == 24

    def test_known_but_unsized_is_unknown(self, x64):
        assert x64.resolve("Handle h;", 1, {"Handle"}, {}) is None

    @pytest.mark.parametrize("name", ["Value", "union Value", "class Value", "struct Value"])
    def test_lookup_aggregate(self, x64, name):
        aggregates = {"Value": AggregateInfo(total_size=8)}
        assert x64.lookup_aggregate(name, aggregates) == AggregateInfo(total_size=8)

    def test_lookup_aggregate_missing(self, x64):
        assert x64.lookup_aggregate("enum Value", {"Value": AggregateInfo(8)}) is None


class TestConfigurationChanges:
    """Test refresh and cache invalidation on configuration changes."""

    def test_architecture_change_refreshes(self, host64):
        config = Config(architecture="x32")
        engine = TypeLayoutEngine(ArchitectureResolver(config=config, host=host64))
        invalidations = []
        engine.add_invalidation_listener(lambda: invalidations.append(True))

        engine.on_configuration_changed(config.update(architecture="x64"))

        assert engine.resolver.is_64bit() is True
        assert engine.current_architecture_label() == "x64 (manual)"
        assert invalidations == [True]

    def test_rendering_change_only_invalidates(self, host64):
        config = Config(architecture="x32")
        engine = TypeLayoutEngine(ArchitectureResolver(config=config, host=host64))
        invalidations = []
        engine.add_invalidation_listener(lambda: invalidations.append(True))

        engine.on_configuration_changed(config.update(show_architecture=False))

        assert invalidations == [True]
        assert engine.resolver.is_64bit() is False

    def test_unrelated_change_is_ignored(self, x64):
        invalidations = []
        x64.add_invalidation_listener(lambda: invalidations.append(True))
        x64.on_configuration_changed({"cache_max_size"})
        assert invalidations == []


class TestLayoutResult:
    """Test result serialization."""

    def test_to_dict(self, x64):
        data = x64.resolve("size_t n;", 2).to_dict()
        assert data == {
            "text": "size_t",
            "span": {"start": 0, "end": 7},
            "size": 8,
            "alignment": 8,
            "description": "Size type for array indexing",
            "is_pointer": False,
            "pointee_description": None,
            "is_aggregate": False,
        }
