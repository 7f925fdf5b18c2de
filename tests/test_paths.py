"""Tests for path resolution, the dependency index and the property locator."""

from dotstore._locate import MISSING, locate, materialize, read
from dotstore._paths import PathResolver


class TestPathResolver:
    def test_parse_components(self):
        r = PathResolver()
        parsed = r.resolve("a.b.c")
        assert parsed.parent_keys == ("a", "b")
        assert parsed.parent_paths == ("a", "a.b")
        assert parsed.current_key == "c"
        assert parsed.map_key is None

    def test_top_level_path(self):
        parsed = PathResolver().resolve("a")
        assert parsed.parent_keys == ()
        assert parsed.parent_paths == ()
        assert parsed.current_key == "a"

    def test_cached(self):
        r = PathResolver()
        first = r.resolve("user.profile.age")
        assert r.resolve("user.profile.age") is first
        assert len(r) == 1

    def test_flush_reparses(self):
        r = PathResolver()
        first = r.resolve("a.b")
        fresh = r.resolve("a.b", flush=True)
        assert fresh == first
        assert fresh is not first

    def test_dependency_index(self):
        r = PathResolver()
        r.resolve("a.b.c")
        assert r.dependents("a") == ("a.b.c",)
        assert r.dependents("a.b") == ("a.b.c",)
        assert r.dependents("a.b.c") == ()

        r.resolve("a.x")
        assert set(r.dependents("a")) == {"a.b.c", "a.x"}

    def test_dependency_index_not_touched_by_cache_hits(self):
        r = PathResolver()
        r.resolve("a.b")
        r.resolve("a.b")
        assert r.dependents("a") == ("a.b",)

    def test_keyed_bare_key(self):
        parsed = PathResolver(keyed=True).resolve("k1")
        assert parsed.map_key == "k1"
        assert parsed.current_key == ""
        assert parsed.parent_keys == ()
        assert parsed.parent_paths == ()

    def test_keyed_sub_path(self):
        parsed = PathResolver(keyed=True).resolve("k1.a.b")
        assert parsed.map_key == "k1"
        assert parsed.parent_keys == ("a",)
        assert parsed.parent_paths == ("k1", "k1.a")
        assert parsed.current_key == "b"

    def test_instances_do_not_share_caches(self):
        r1 = PathResolver()
        r2 = PathResolver()
        r1.resolve("a.b")
        assert "a.b" in r1
        assert "a.b" not in r2
        assert r2.dependents("a") == ()


class TestLocate:
    def test_returns_live_container(self):
        state = {"a": {"b": 1}}
        located = locate(("a",), state, {}, {})
        assert located.parent is state["a"]

    def test_missing_ancestor(self):
        located = locate(("a", "b"), {"a": {}}, {"a": {"b": {"c": 1}}}, {})
        assert located.parent is MISSING
        assert located.fallback == {"c": 1}
        assert located.initial is MISSING

    def test_walks_are_independent(self):
        located = locate(("a",), {}, {"a": {"x": 1}}, {"a": {"x": 2}})
        assert located.parent is MISSING
        assert located.fallback == {"x": 1}
        assert located.initial == {"x": 2}

    def test_non_mapping_intermediate_is_missing(self):
        assert locate(("a", "b"), {"a": 3}, {}, {}).parent is MISSING
        assert locate(("a",), {"a": None}, {}, {}).parent is MISSING

    def test_read_distinguishes_none_from_missing(self):
        assert read({"a": None}, "a") is None
        assert read({}, "a") is MISSING
        assert read(MISSING, "a") is MISSING
        assert read("text", "a") is MISSING

    def test_materialize(self):
        state = {"a": 3}
        container = materialize(state, ("a", "b"))
        container["c"] = 1
        assert state == {"a": {"b": {"c": 1}}}

    def test_materialize_reuses_existing(self):
        inner = {"keep": True}
        state = {"a": inner}
        assert materialize(state, ("a",)) is inner

    def test_missing_repr(self):
        assert repr(MISSING) == "MISSING"
        assert not MISSING
