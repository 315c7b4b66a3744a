from accessedu.client.session_cache import SessionCache, TabSessionStorage


def test_empty_cache() -> None:
    cache = SessionCache()

    assert cache.get_session_id() is None
    assert cache.get_user_id() is None
    assert not cache.has_session()


def test_remember_and_clear() -> None:
    cache = SessionCache()

    cache.remember("abc", 7)

    assert cache.get_session_id() == "abc"
    assert cache.get_user_id() == 7
    assert cache.has_session()

    cache.clear()
    assert not cache.has_session()


def test_shared_storage_survives_reload() -> None:
    storage = TabSessionStorage()
    SessionCache(storage).remember("abc", 7)

    reloaded = SessionCache(storage)

    assert reloaded.get_session_id() == "abc"


def test_new_tab_starts_empty() -> None:
    SessionCache(TabSessionStorage()).remember("abc", 7)
    assert SessionCache(TabSessionStorage()).get_session_id() is None


def test_corrupt_user_id_reads_as_missing() -> None:
    storage = TabSessionStorage()
    storage.set_item("learning_session_id", "abc")
    storage.set_item("user_id", "not-a-number")

    cache = SessionCache(storage)

    assert cache.get_user_id() is None
    assert not cache.has_session()
