"""Tests for catalog normalization."""

from mcpsync.catalog.client import decode_catalog
from mcpsync.catalog.normalize import normalize
from mcpsync.plugins.models import ToolDescriptor


class TestNormalize:
    """Tests for normalize."""

    def test_flattens_in_order(self):
        """Test sources and tools keep catalog order."""
        catalog = {
            "web": [ToolDescriptor("fetch"), ToolDescriptor("search")],
            "calc": [ToolDescriptor("add")],
        }
        pairs, categories = normalize(catalog)

        assert [(s, t.name) for s, t in pairs] == [
            ("web", "fetch"),
            ("web", "search"),
            ("calc", "add"),
        ]
        assert categories == {"web", "calc"}

    def test_null_tools_contributes_nothing(self):
        """Test a source with tools: null adds no tools and no category."""
        catalog = decode_catalog({
            "calc": {"tools": [{"name": "add"}]},
            "broken": {"tools": None},
        })
        pairs, categories = normalize(catalog)

        assert [t.name for _, t in pairs] == ["add"]
        assert categories == {"calc"}

    def test_empty_tools_list_is_not_a_category(self):
        """Test only sources with at least one tool count as categories."""
        pairs, categories = normalize({"idle": [], "calc": [ToolDescriptor("add")]})
        assert categories == {"calc"}
        assert len(pairs) == 1

    def test_no_dedup_across_sources(self):
        """Test same-named tools from different sources are all emitted."""
        catalog = {
            "a": [ToolDescriptor("lookup", "from a")],
            "b": [ToolDescriptor("lookup", "from b")],
        }
        pairs, categories = normalize(catalog)

        assert [(s, t.description) for s, t in pairs] == [("a", "from a"), ("b", "from b")]
        assert categories == {"a", "b"}

    def test_empty_catalog(self):
        """Test an empty catalog."""
        assert normalize({}) == ([], set())
