"""Tests for the override store."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from statsig_client.overrides import OverrideStore


@pytest.fixture
def store():
    return OverrideStore()


class TestGateOverrides:
    """Tests for gate overrides."""

    def test_missing_gate(self, store):
        """Should report not found for unknown gates."""
        assert store.get_gate_override("any_gate") == (False, False)

    def test_set_and_get(self, store):
        """Should return the stored value."""
        store.set_gate_override("any_gate", True)
        assert store.get_gate_override("any_gate") == (True, True)

    def test_last_write_wins(self, store):
        """A later override should replace an earlier one."""
        store.set_gate_override("any_gate", True)
        store.set_gate_override("any_gate", False)
        assert store.get_gate_override("any_gate") == (False, True)

    def test_remove(self, store):
        """Removing an override should make the gate unknown again."""
        store.set_gate_override("any_gate", True)
        store.remove_gate_override("any_gate")
        assert store.get_gate_override("any_gate") == (False, False)


class TestConfigOverrides:
    """Tests for config overrides."""

    def test_missing_config(self, store):
        """Should report not found for unknown configs."""
        assert store.get_config_override("any_config") == (None, False)

    def test_replaces_wholesale(self, store):
        """A new map should replace the old one, not merge into it."""
        store.set_config_override("any_config", {"test": 123, "old": True})
        store.set_config_override("any_config", {"test": 456, "test2": "hello"})

        value, found = store.get_config_override("any_config")
        assert found
        assert value == {"test": 456, "test2": "hello"}

    def test_caller_mutation_does_not_leak_in(self, store):
        """Mutating the map after setting it should not change the override."""
        config = {"nested": {"a": 1}}
        store.set_config_override("any_config", config)
        config["nested"]["a"] = 2

        value, _ = store.get_config_override("any_config")
        assert value == {"nested": {"a": 1}}

    def test_returned_value_is_a_copy(self, store):
        """Mutating a returned map should not change the override."""
        store.set_config_override("any_config", {"list": [1, 2]})
        value, _ = store.get_config_override("any_config")
        value["list"].append(3)

        again, _ = store.get_config_override("any_config")
        assert again == {"list": [1, 2]}

    def test_empty_map_is_an_override(self, store):
        """An empty map is still a set override."""
        store.set_config_override("any_config", {})
        assert store.get_config_override("any_config") == ({}, True)

    def test_stored_none_is_found(self, store):
        """Presence decides found, the same way as for gates."""
        store.set_config_override("any_config", None)
        assert store.get_config_override("any_config") == (None, True)

    def test_clear(self, store):
        """clear() should drop gate and config overrides."""
        store.set_gate_override("g", True)
        store.set_config_override("c", {"a": 1})
        store.clear()

        assert store.get_gate_override("g") == (False, False)
        assert store.get_config_override("c") == (None, False)


class TestConcurrency:
    """Tests for concurrent access."""

    def test_readers_never_see_partial_maps(self, store):
        """Concurrent readers should only observe complete maps."""
        versions = [{f"key{i}": n for i in range(50)} for n in range(20)]
        store.set_config_override("c", versions[0])
        stop = threading.Event()
        bad = []

        def reader():
            while not stop.is_set():
                value, found = store.get_config_override("c")
                if not found or value not in versions:
                    bad.append(value)

        def writer():
            for version in versions:
                store.set_config_override("c", version)

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for thread in readers:
            thread.start()
        with ThreadPoolExecutor(max_workers=4) as pool:
            for _ in range(4):
                pool.submit(writer)
        stop.set()
        for thread in readers:
            thread.join()

        assert bad == []

    def test_concurrent_gate_writes(self, store):
        """Concurrent writes to distinct gates should all land."""
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: store.set_gate_override(f"gate{i}", i % 2 == 0), range(200)))

        for i in range(200):
            assert store.get_gate_override(f"gate{i}") == (i % 2 == 0, True)
