# tests/test_store.py
import json
import threading

from link2app.models import AppFeature, ProjectCustomizations, ProjectStatus, Provider
from link2app.store import ProjectStore


def test_create_and_reload(tmp_path):
    path = tmp_path / "data" / "projects.json"
    store = ProjectStore(path)
    p = store.create(name="Shop", website_url="https://shop.example", provider=Provider.OLLAMA)

    assert p.status is ProjectStatus.DRAFT
    assert p.customizations.minimum_ios_version == "15.0"
    assert path.exists()
    assert isinstance(json.loads(path.read_text(encoding="utf-8")), list)

    again = ProjectStore(path).get(p.id)
    assert again == p
    assert again.provider is Provider.OLLAMA


def test_empty_or_missing_file(tmp_path):
    path = tmp_path / "projects.json"
    store = ProjectStore(path)
    assert store.list() == []
    path.write_text("  \n", encoding="utf-8")
    assert store.list() == []
    assert store.get("nope") is None


def test_update_touches_last_modified(tmp_path):
    store = ProjectStore(tmp_path / "projects.json")
    p = store.create(name="Blog")
    p.customizations = ProjectCustomizations(app_name="My Blog", include_features=[AppFeature.WEBVIEW])

    updated = store.update(p)
    assert updated.last_modified >= p.last_modified
    stored = store.get(p.id)
    assert stored.customizations.app_name == "My Blog"
    assert stored.customizations.include_features == [AppFeature.WEBVIEW]


def test_update_missing_project(tmp_path):
    store = ProjectStore(tmp_path / "projects.json")
    other = ProjectStore(tmp_path / "other.json").create(name="elsewhere")
    assert store.update(other) is None
    assert store.list() == []


def test_recent_orders_by_last_modified(tmp_path):
    store = ProjectStore(tmp_path / "projects.json")
    first = store.create(name="first")
    second = store.create(name="second")
    store.update(first)

    assert [p.id for p in store.recent()] == [first.id, second.id]
    assert [p.id for p in store.recent(limit=1)] == [first.id]


def test_set_status_keeps_error_message_only_for_errors(tmp_path):
    store = ProjectStore(tmp_path / "projects.json")
    p = store.create(name="x", website_url="https://x.example")

    failed = store.set_status(p.id, ProjectStatus.ERROR, error_message="boom")
    assert failed.status is ProjectStatus.ERROR
    assert failed.error_message == "boom"

    done = store.set_status(p.id, ProjectStatus.COMPLETED, error_message="ignored")
    assert done.status is ProjectStatus.COMPLETED
    assert done.error_message is None

    assert store.set_status("missing", ProjectStatus.ERROR) is None


def test_delete(tmp_path):
    store = ProjectStore(tmp_path / "projects.json")
    a = store.create(name="a")
    b = store.create(name="b")
    assert store.delete(a.id) is True
    assert store.delete(a.id) is False
    assert [p.id for p in store.list()] == [b.id]


def test_recent_without_limit_returns_all(tmp_path):
    store = ProjectStore(tmp_path / "projects.json")
    for name in ("a", "b", "c"):
        store.create(name=name)
    assert len(store.recent(limit=None)) == 3
    assert store.recent(limit=0) == []


def test_stores_on_one_file_share_a_lock(tmp_path):
    path = tmp_path / "projects.json"
    assert ProjectStore(path)._lock is ProjectStore(tmp_path / "." / "projects.json")._lock
    assert ProjectStore(path)._lock is not ProjectStore(tmp_path / "other.json")._lock


def _run_together(n, target):
    barrier = threading.Barrier(n)
    errors = []

    def worker(i):
        barrier.wait()
        try:
            target(i)
        except Exception as e:  # collected and asserted below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return errors


def test_concurrent_creates_from_separate_stores(tmp_path):
    path = tmp_path / "projects.json"
    # a fresh store per call, the way the API builds one per request
    errors = _run_together(40, lambda i: ProjectStore(path).create(name=f"p{i}"))

    assert errors == []
    assert sorted(p.name for p in ProjectStore(path).list()) == sorted(f"p{i}" for i in range(40))
    assert list(tmp_path.glob("*.tmp")) == []


def test_concurrent_status_changes_are_not_lost(tmp_path):
    path = tmp_path / "projects.json"
    ids = [ProjectStore(path).create(name=f"p{i}").id for i in range(20)]

    errors = _run_together(20, lambda i: ProjectStore(path).set_status(ids[i], ProjectStatus.COMPLETED))

    assert errors == []
    assert {p.status for p in ProjectStore(path).list()} == {ProjectStatus.COMPLETED}
