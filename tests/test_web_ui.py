import json
import threading

import pytest

from config_manager import MemorySettingsStore
from web_ui import create_app


class StubBridge:
    def __init__(self) -> None:
        self.path = "/data/adb/modules/mora_perf_deamon/config/config.json"
        self.posted = []
        self.release = threading.Event()
        self.release.set()

    def test_root(self) -> bool:
        return True

    def get_api_base_url(self) -> str:
        return "http://127.0.0.1:1004"

    def get_api_token(self) -> str:
        return "tok"

    def read_config(self) -> str:
        return '{"api_token": "tok"}'

    def get_config_path(self) -> str:
        return self.path

    def set_config_path(self, path: str) -> None:
        self.path = path

    def proxy_get(self, path: str) -> str:
        self.release.wait(5)
        return json.dumps({"code": 200, "body": f"GET {path}"})

    def proxy_post(self, path: str, body: str) -> str:
        self.posted.append((path, body))
        return json.dumps({"code": 201, "body": body})


@pytest.fixture()
def bridge() -> StubBridge:
    return StubBridge()


@pytest.fixture()
def client(bridge):
    app = create_app(bridge, settings=MemorySettingsStore({"proxy_timeout_seconds": 2}))
    return app.test_client()


def test_root_and_base_url(client) -> None:
    assert client.get("/api/bridge/root").get_json() == {"status": "success", "root": True}
    assert client.get("/api/bridge/base_url").get_json()["base_url"] == "http://127.0.0.1:1004"


def test_token_route(client) -> None:
    data = client.get("/api/bridge/token").get_json()

    assert data["token"] == "tok"
    assert data["available"] is True


def test_config_routes(client, bridge) -> None:
    assert client.get("/api/bridge/config").get_json()["config"] == '{"api_token": "tok"}'

    resp = client.post("/api/bridge/config_path", json={"path": " /data/adb/modules/mora/config.json "})
    assert resp.get_json()["path"] == "/data/adb/modules/mora/config.json"
    assert bridge.path == "/data/adb/modules/mora/config.json"

    assert client.post("/api/bridge/config_path", json={"path": ""}).status_code == 400


def test_proxy_get_passes_response_through(client) -> None:
    resp = client.get("/api/bridge/proxy?path=/api/status")

    assert resp.status_code == 200
    assert json.loads(resp.data) == {"code": 200, "body": "GET /api/status"}


def test_proxy_post_serializes_object_body(client, bridge) -> None:
    resp = client.post("/api/bridge/proxy", json={"path": "/api/profile", "body": {"mode": "x"}})

    assert json.loads(resp.data)["code"] == 201
    assert bridge.posted == [("/api/profile", '{"mode": "x"}')]


def test_proxy_rejects_relative_path(client) -> None:
    assert client.get("/api/bridge/proxy?path=api/status").status_code == 400
    assert client.post("/api/bridge/proxy", json={"path": "x"}).status_code == 400


def test_proxy_timeout_maps_to_504(bridge) -> None:
    bridge.release.clear()
    app = create_app(bridge, timeout=0.05)

    resp = app.test_client().get("/api/bridge/proxy?path=/api/slow")
    bridge.release.set()

    assert resp.status_code == 504
    assert json.loads(resp.data) == {"code": 0, "body": "", "error": "timeout"}


def test_unexpected_error_is_500(bridge) -> None:
    def broken():
        raise RuntimeError("shell vanished")

    bridge.test_root = broken
    resp = create_app(bridge, timeout=1).test_client().get("/api/bridge/root")

    assert resp.status_code == 500
    assert resp.get_json()["status"] == "error"


def test_unknown_route_stays_404(client) -> None:
    assert client.get("/api/bridge/nope").status_code == 404


def test_version(client) -> None:
    data = client.get("/api/version").get_json()

    assert data["status"] == "success"
    assert data["app_name"] == "MoraPanel"


def test_json_bodies_that_are_not_objects_are_rejected(client, bridge) -> None:
    assert client.post("/api/bridge/config_path", json=["x"]).status_code == 400
    assert client.post("/api/bridge/proxy", json=["x"]).status_code == 400
    assert client.post("/api/bridge/proxy", json="/api/profile").status_code == 400
    assert bridge.posted == []


def test_version_keys_keep_insertion_order(client) -> None:
    resp = client.get("/api/version")

    assert list(json.loads(resp.data)) == [
        "status", "version", "app_name", "description", "license", "python_version",
    ]
