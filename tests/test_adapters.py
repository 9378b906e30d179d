import threading

import pytest

from pageguard import ConfigurationError, ProtectionRule, StorageConflict
from pageguard.adapters import JsonFileSettingsStore, MemorySettingsStore


def test_memory_store_put_rule_and_remove():
    store = MemorySettingsStore({"protectHidden": 1})
    store.put_rule(5, ProtectionRule(roles={"editor"}))
    snapshot = store.load()
    assert snapshot.config.protect_hidden
    assert snapshot.rules[5].roles == frozenset({"editor"})
    assert snapshot.version == 1

    store.put_rule(5, None)
    assert store.load().rules == {}
    assert store.load().version == 2


def test_memory_store_snapshot_is_isolated_from_later_writes():
    store = MemorySettingsStore()
    store.put_rule(5, ProtectionRule())
    before = store.load()
    store.put_rule(6, ProtectionRule())
    assert set(before.rules) == {5}
    assert set(store.load().rules) == {5, 6}


def test_concurrent_edits_to_different_nodes_are_kept():
    store = MemorySettingsStore()

    def edit(node_id):
        store.put_rule(node_id, ProtectionRule(protect_children=True))

    threads = [threading.Thread(target=edit, args=(node_id,)) for node_id in range(10, 30)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = store.load()
    assert set(snapshot.rules) == set(range(10, 30))
    assert snapshot.version == 20


def test_json_store_persists_flat_document(tmp_path):
    path = tmp_path / "settings.json"
    store = JsonFileSettingsStore(path)
    assert store.load().rules == {}

    store.put_rule(5, ProtectionRule(protect_children=True, roles={"editor"}))
    reopened = JsonFileSettingsStore(path)
    assert reopened.load().rules[5].protect_children
    assert '"protectedPages"' in path.read_text(encoding="utf-8")
    assert sorted(p.name for p in tmp_path.iterdir()) == [".settings.json.lock", "settings.json"]


def test_json_store_save_replaces_document(tmp_path):
    store = JsonFileSettingsStore(tmp_path / "settings.json")
    snapshot = store.load().with_rule(3, ProtectionRule())
    saved = store.save(snapshot)
    assert saved.version == 1
    assert store.load() == saved


def test_json_store_rejects_corrupt_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        JsonFileSettingsStore(path).load()


def test_json_stores_sharing_a_file_keep_every_node(tmp_path):
    path = tmp_path / "settings.json"
    stores = [JsonFileSettingsStore(path), JsonFileSettingsStore(path)]

    def edit(node_id):
        stores[node_id % 2].put_rule(node_id, ProtectionRule(protect_children=True))

    threads = [threading.Thread(target=edit, args=(node_id,)) for node_id in range(100, 140)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = JsonFileSettingsStore(path).load()
    assert set(snapshot.rules) == set(range(100, 140))
    assert snapshot.version == 40


def test_saving_a_stale_snapshot_conflicts(tmp_path):
    path = tmp_path / "settings.json"
    first = JsonFileSettingsStore(path)
    second = JsonFileSettingsStore(path)
    stale = first.load()
    second.put_rule(5, ProtectionRule())

    with pytest.raises(StorageConflict):
        first.save(stale.with_rule(6, ProtectionRule()))

    assert set(first.load().rules) == {5}


def test_memory_store_rejects_stale_snapshot():
    store = MemorySettingsStore()
    stale = store.load()
    store.put_rule(5, ProtectionRule())
    with pytest.raises(StorageConflict):
        store.save(stale)
