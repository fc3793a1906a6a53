# plugins/resource_override/tests/test_override_api.py

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.e2e


class TestResolveAndAssets:
    """【E2E测试】资源浏览与解析预览。"""

    def test_list_assets(self, client: TestClient):
        response = client.get("/api/assets", params={"directory": "res://ui"})
        assert response.status_code == 200
        assert response.json() == {"directory": "res://ui", "files": ["medal.png", "medal.silver.png"]}

    def test_list_assets_rejects_escaping_paths(self, client: TestClient):
        response = client.get("/api/assets", params={"directory": "res://../"})
        assert response.status_code == 400

    def test_files_outside_the_resource_root_are_not_exposed(self, client: TestClient, tmp_path):
        outside = tmp_path.parent / f"{tmp_path.name}-outside"
        outside.mkdir(exist_ok=True)
        (outside / "secret.png").write_bytes(b"x")

        listing = client.get("/api/assets", params={"directory": f"res://{outside}"})
        assert listing.status_code == 400

        data = client.get("/api/resolve", params={"path": f"res://{outside}/secret.png", "suffix": ""}).json()
        assert data["default_exists"] is False
        assert data["override_exists"] is False

    def test_resolve_with_existing_override(self, client: TestClient):
        response = client.get("/api/resolve", params={"path": "res://ui/medal.png", "suffix": "silver"})
        assert response.status_code == 200
        data = response.json()
        assert data["override_path"] == "res://ui/medal.silver.png"
        assert data["override_exists"] is True
        assert data["default_exists"] is True
        assert data["resolved_path"] == "res://ui/medal.silver.png"

    def test_resolve_falls_back(self, client: TestClient):
        data = client.get("/api/resolve", params={"path": "res://ui/medal.silver.png", "suffix": "gold"}).json()
        assert data["override_exists"] is False
        assert data["resolved_path"] == "res://ui/medal.png"

    def test_resolve_unknown_resource_is_returned_as_is(self, client: TestClient):
        data = client.get("/api/resolve", params={"path": "res://nope/thing.png", "suffix": "x"}).json()
        assert data["resolved_path"] == "res://nope/thing.png"


class TestOverrideEndpoints:

    def test_scene_override_is_listed(self, client: TestClient):
        response = client.get("/api/overrides")
        assert response.status_code == 200
        [state] = response.json()
        assert state["name"] == "medal_skin"
        assert state["properties"] == ["sprite:texture"]
        assert state["active"] is True

    def test_unknown_override_is_404(self, client: TestClient):
        assert client.get("/api/overrides/ghost").status_code == 404

    def test_set_suffix_auto_applies(self, client: TestClient):
        response = client.put("/api/overrides/medal_skin/suffix", json={"suffix": "silver"})
        assert response.status_code == 200
        body = response.json()
        assert body["applied"] is True
        assert body["state"]["suffix"] == "silver"

        values = client.get("/api/overrides/medal_skin/values").json()
        assert values == {"target_found": True, "values": {"sprite:texture": "res://ui/medal.silver.png"}}

        again = client.put("/api/overrides/medal_skin/suffix", json={"suffix": "silver"}).json()
        assert again["applied"] is False

    def test_invalid_suffix_is_rejected(self, client: TestClient):
        response = client.put("/api/overrides/medal_skin/suffix", json={"suffix": "a/b"})
        assert response.status_code == 422

    def test_manual_apply_with_auto_apply_disabled(self, client: TestClient):
        state = client.patch("/api/overrides/medal_skin/flags", json={"auto_apply": False}).json()
        assert state["auto_apply"] is False

        body = client.put("/api/overrides/medal_skin/suffix", json={"suffix": "silver"}).json()
        assert body["applied"] is False

        applied = client.post("/api/overrides/medal_skin/apply").json()
        assert applied == {"changed": 1, "skipped": []}

    def test_preview_apply_requires_opt_in(self, client: TestClient):
        client.patch("/api/overrides/medal_skin/flags", json={"auto_apply": False})
        client.put("/api/overrides/medal_skin/suffix", json={"suffix": "silver"})

        assert client.post("/api/overrides/medal_skin/apply", params={"preview": True}).json()["changed"] == 0

        client.patch("/api/overrides/medal_skin/flags", json={"apply_in_editor": True})
        assert client.post("/api/overrides/medal_skin/apply", params={"preview": True}).json()["changed"] == 1

    def test_property_management(self, client: TestClient):
        response = client.post("/api/overrides/medal_skin/properties", json={"path": "sprite:normal_map"})
        assert response.status_code == 201
        assert response.json()["properties"] == ["sprite:texture", "sprite:normal_map"]

        duplicate = client.post("/api/overrides/medal_skin/properties", json={"path": "sprite.normal_map"})
        assert duplicate.json()["properties"] == ["sprite:texture", "sprite:normal_map"]

        applied = client.post("/api/overrides/medal_skin/apply").json()
        assert applied["skipped"] == ["sprite:normal_map"]

        removed = client.delete("/api/overrides/medal_skin/properties", params={"path": "sprite:normal_map"})
        assert removed.status_code == 200
        assert removed.json()["properties"] == ["sprite:texture"]

        assert client.delete("/api/overrides/medal_skin/properties", params={"path": "sprite:normal_map"}).status_code == 404

    def test_malformed_property_path_is_rejected(self, client: TestClient):
        response = client.post("/api/overrides/medal_skin/properties", json={"path": "sprite::texture"})
        assert response.status_code == 422
