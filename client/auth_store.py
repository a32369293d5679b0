"""
client/auth_store.py
--------------------
Session state shared by the client pages: current user snapshot, API token
and authenticated flag, persisted under one local-storage key.

The store is an explicit object handed to each page. Every transition
replaces the state with a new snapshot, persists it, then notifies
subscribers.
"""

import logging

logger = logging.getLogger(__name__)

STORAGE_KEY = "auth-storage"

EMPTY_STATE = {"user": None, "token": None, "is_authenticated": False}


class AuthStore:

    def __init__(self, storage, api=None, key=STORAGE_KEY):
        self.storage = storage
        self.api = api
        self.key = key
        self._listeners = []
        self._state = dict(EMPTY_STATE)

        persisted = storage.get_item(key)
        if isinstance(persisted, dict):
            self._state.update({k: persisted.get(k, v) for k, v in EMPTY_STATE.items()})
        if self.api is not None and self._state["token"]:
            self.api.token = self._state["token"]

    @property
    def state(self):
        return dict(self._state)

    @property
    def user(self):
        return self._state["user"]

    @property
    def token(self):
        return self._state["token"]

    @property
    def is_authenticated(self):
        return self._state["is_authenticated"]

    def subscribe(self, listener):
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _set(self, **changes):
        self._state = {**self._state, **changes}
        self.storage.set_item(self.key, self._state)
        for listener in list(self._listeners):
            listener(self.state)

    def login(self, user, token):
        if self.api is not None:
            self.api.token = token
        self._set(user=user, token=token, is_authenticated=True)

    def logout(self):
        if self.api is not None:
            self.api.token = None
        self._state = dict(EMPTY_STATE)
        self.storage.remove_item(self.key)
        for listener in list(self._listeners):
            listener(self.state)

    def update_user(self, fields):
        """Shallow-merge ``fields`` into the current user."""
        self._set(user={**(self._state["user"] or {}), **(fields or {})})

    def refresh_user(self):
        """Fetch the authoritative user and merge it. State is untouched on failure."""
        try:
            fetched = self.api.get_me()
        except Exception as e:
            logger.error(f"Failed to refresh user: {e}")
            raise

        merged = {**(self._state["user"] or {}), **fetched}
        self._set(user=merged)
        return fetched
