"""HTTP client for the helpdesk API."""

import requests


class ApiRequestError(Exception):

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiClient:

    def __init__(self, base_url="http://localhost:5001", token=None, session=None, timeout=30):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, **kwargs):
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            resp = self.session.request(
                method, f"{self.base_url}/api{path}",
                headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise ApiRequestError(f"Network error: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = {}

        if not resp.ok:
            message = body.get("message") if isinstance(body, dict) else None
            raise ApiRequestError(message or f"Request failed ({resp.status_code})", resp.status_code)
        return body

    def asset_url(self, path):
        return f"{self.base_url}{path}"

    # Auth
    def login(self, email, password):
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def get_me(self):
        body = self._request("GET", "/auth/me")
        return body.get("user", body)

    # Profile
    def get_profile(self):
        body = self._request("GET", "/users/profile")
        return body.get("user", body)

    def update_profile(self, data):
        return self._request("PUT", "/users/profile", json=data)

    def upload_profile_picture(self, filename, content, mimetype):
        files = {"profilePicture": (filename, content, mimetype)}
        return self._request("POST", "/users/profile/picture", files=files)

    def delete_profile_picture(self):
        return self._request("DELETE", "/users/profile/picture")
