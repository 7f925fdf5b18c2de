"""Tests for scoped stores."""

import pytest

from dotstore import (
    MapStore,
    ScopedStore,
    Store,
    StoreUsageError,
    create_scoped_map_store,
    create_scoped_store,
)


class TestScopedStore:
    def test_use_outside_scope_raises(self):
        scoped = create_scoped_store({"x": 1})
        with pytest.raises(StoreUsageError, match="provide"):
            scoped.use()

    def test_usage_error_is_runtime_error(self):
        scoped = create_scoped_store()
        with pytest.raises(RuntimeError):
            scoped.use()

    def test_provide_and_use(self):
        scoped = create_scoped_store({"x": 1})
        with scoped.provide() as store:
            assert isinstance(store, Store)
            assert scoped.use() is store
            assert scoped.use().get("x") == 1
        with pytest.raises(StoreUsageError):
            scoped.use()

    def test_each_mount_is_fresh(self):
        scoped = create_scoped_store({"x": 1})
        with scoped.provide() as first:
            first.set("x", 99)
        with scoped.provide() as second:
            assert second is not first
            assert second.get("x") == 1

    def test_construction_data_fixed_at_creation(self):
        data = {"x": 1, "nested": {"y": 1}}
        fallback = {"z": 1}
        scoped = create_scoped_store(data, fallback)
        data["x"] = 2
        data["nested"]["y"] = 2
        fallback["z"] = 2
        with scoped.provide() as store:
            assert store.get("x") == 1
            assert store.get("nested.y") == 1
            assert store.get("z") == 1

    def test_map_construction_data_fixed_at_creation(self):
        data = {"k": {"v": 1}}
        fallback = {"status": "idle"}
        scoped = create_scoped_map_store(data, fallback)
        data["k"]["v"] = 2
        data["extra"] = {}
        fallback["status"] = "busy"
        with scoped.provide() as store:
            assert store.get_keys() == ["k"]
            assert store.get("k.v") == 1
            assert store.get("k.status") == "idle"

    def test_nested_provide_shadows(self):
        scoped = create_scoped_store({"x": 1})
        with scoped.provide() as outer:
            with scoped.provide() as inner:
                assert scoped.use() is inner
            assert scoped.use() is outer

    def test_scope_restored_on_exception(self):
        scoped = create_scoped_store()
        with pytest.raises(ValueError):
            with scoped.provide():
                assert scoped.active
                raise ValueError("oops")
        assert not scoped.active

    def test_independent_scoped_stores(self):
        a = create_scoped_store({"name": "a"})
        b = create_scoped_store({"name": "b"})
        with a.provide():
            assert a.use().get("name") == "a"
            with pytest.raises(StoreUsageError):
                b.use()

    def test_scoped_map_store(self):
        scoped = create_scoped_map_store({"k": {"v": 1}})
        with scoped.provide() as store:
            assert isinstance(store, MapStore)
            assert scoped.use().key("k").get("v") == 1

    def test_custom_factory(self):
        scoped = ScopedStore(lambda: Store({"custom": True}), name="custom")
        with scoped.provide():
            assert scoped.use().get("custom") is True
        with pytest.raises(StoreUsageError, match="custom.use"):
            scoped.use()

    def test_repr(self):
        scoped = create_scoped_store(name="settings")
        assert repr(scoped) == "ScopedStore('settings', inactive)"
        with scoped.provide():
            assert repr(scoped) == "ScopedStore('settings', active)"
