import pytest

from client.api import ApiRequestError
from client.auth_store import STORAGE_KEY, AuthStore
from client.storage import LocalStorage


class FakeApi:

    def __init__(self, me=None, error=None):
        self.token = None
        self.me = me
        self.error = error
        self.calls = 0

    def get_me(self):
        self.calls += 1
        if self.error:
            raise self.error
        return dict(self.me)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "local-storage.json"))


def test_login_replaces_state_and_persists(storage):
    api = FakeApi()
    store = AuthStore(storage, api)

    store.login({"id": "1", "name": "Ann"}, "tok-1")

    assert store.is_authenticated
    assert store.user == {"id": "1", "name": "Ann"}
    assert api.token == "tok-1"
    assert storage.get_item(STORAGE_KEY) == {
        "user": {"id": "1", "name": "Ann"}, "token": "tok-1", "is_authenticated": True,
    }

    store.login({"id": "2"}, "tok-2")
    assert store.user == {"id": "2"}


def test_state_is_rehydrated_from_storage(storage):
    AuthStore(storage, FakeApi()).login({"id": "1"}, "tok-1")

    api = FakeApi()
    restored = AuthStore(storage, api)

    assert restored.is_authenticated
    assert restored.user == {"id": "1"}
    assert api.token == "tok-1"


def test_logout_clears_everything(storage):
    api = FakeApi()
    store = AuthStore(storage, api)
    store.login({"id": "1"}, "tok-1")

    store.logout()

    assert store.state == {"user": None, "token": None, "is_authenticated": False}
    assert api.token is None
    assert storage.get_item(STORAGE_KEY) is None


def test_update_user_is_shallow_merge(storage):
    store = AuthStore(storage, FakeApi())
    store.login({"id": "1", "name": "Ann", "prefs": {"a": 1}}, "tok")

    store.update_user({"name": "Anne", "prefs": {"b": 2}})

    assert store.user == {"id": "1", "name": "Anne", "prefs": {"b": 2}}
    assert store.token == "tok"


def test_refresh_user_merges_server_copy(storage):
    api = FakeApi(me={"id": "1", "profilePicture": "/uploads/profiles/p.png"})
    store = AuthStore(storage, api)
    store.login({"id": "1", "name": "Ann"}, "tok")

    fetched = store.refresh_user()

    assert fetched == {"id": "1", "profilePicture": "/uploads/profiles/p.png"}
    assert store.user == {"id": "1", "name": "Ann", "profilePicture": "/uploads/profiles/p.png"}


def test_refresh_failure_keeps_previous_user(storage):
    api = FakeApi(error=ApiRequestError("Not authorized", 401))
    store = AuthStore(storage, api)
    store.login({"id": "1", "name": "Ann"}, "tok")
    before = storage.get_item(STORAGE_KEY)

    with pytest.raises(ApiRequestError):
        store.refresh_user()

    assert store.user == {"id": "1", "name": "Ann"}
    assert store.is_authenticated
    assert storage.get_item(STORAGE_KEY) == before


def test_subscribers_see_each_snapshot(storage):
    store = AuthStore(storage, FakeApi())
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.login({"id": "1"}, "tok")
    store.update_user({"name": "Ann"})
    unsubscribe()
    store.logout()

    assert [s["user"] for s in seen] == [{"id": "1"}, {"id": "1", "name": "Ann"}]
