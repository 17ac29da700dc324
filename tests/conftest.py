import base64

import pytest
import requests

from reporetriever import GitHubClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Routes GET requests by URL suffix to canned responses (or exceptions)."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, suffix, response):
        self.routes[suffix] = response

    def add_file(self, owner, repo, path, text):
        encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
        # GitHub wraps base64 content at 60 columns
        wrapped = "\n".join(encoded[i:i + 60] for i in range(0, len(encoded), 60))
        self.add(
            f"/repos/{owner}/{repo}/contents/{path}",
            FakeResponse(payload={"content": wrapped, "encoding": "base64"}),
        )

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        for suffix, response in self.routes.items():
            if url.endswith(suffix):
                if isinstance(response, Exception):
                    raise response
                return response
        return FakeResponse(404, {"message": "Not Found"}, reason="Not Found")


def tree_payload(items, truncated=False):
    return {"sha": "abc", "tree": items, "truncated": truncated}


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def client(fake_session):
    return GitHubClient(session=fake_session)


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
