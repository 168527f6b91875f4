"""API endpoint tests using FastAPI TestClient."""

import base64
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from api.server import app
from fitting_room.errors import GenerationFailure


@pytest.fixture
def client(studio):
    with patch("api.server.get_studio", return_value=studio):
        yield TestClient(app)


class TestHealthEndpoints:
    """Tests for health and state endpoints."""
    
    def test_root_endpoint(self, client):
        """Root endpoint returns OK status."""
        response = client.get("/")
        
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "service" in data
        assert "version" in data
    
    def test_state_endpoint(self, client):
        response = client.get("/api/state")
        
        assert response.status_code == 200
        data = response.json()
        assert data["position"] == 0
        assert data["displayed_image"] == "M0"
        assert len(data["poses"]) == 6
        assert data["busy"] is False


class TestCompositionEndpoints:
    """Tests for garment and pose endpoints."""
    
    def test_load_model(self, client):
        response = client.post("/api/model", json={"image": "data:image/png;base64,AAAA"})
        
        data = response.json()
        assert data["success"] is True
        assert data["state"]["displayed_image"] == "data:image/png;base64,AAAA"
    
    def test_add_remove_and_redo(self, client, generator):
        first = client.post("/api/garments/jacket").json()
        assert first["success"] is True
        assert first["outcome"] == "generated"
        assert first["state"]["active_garment_ids"] == ["jacket"]
        
        removed = client.delete("/api/layers/last").json()
        assert removed["success"] is True
        assert removed["state"]["position"] == 0
        
        again = client.post("/api/garments/jacket").json()
        assert again["outcome"] == "redo"
        assert generator.apply_garment.await_count == 1
    
    def test_remove_while_busy_reports_failure(self, client, studio):
        client.post("/api/garments/jacket")
        studio._busy = True

        data = client.delete("/api/layers/last").json()

        assert data["success"] is False
        assert data["state"]["position"] == 1
        studio._busy = False

    def test_unknown_garment(self, client):
        data = client.post("/api/garments/ghost").json()
        
        assert data["success"] is False
        assert data["error"].startswith("Failed to apply garment.")
    
    def test_generation_error_response(self, client, generator):
        generator.apply_garment.side_effect = GenerationFailure("quota exceeded")
        
        data = client.post("/api/garments/jacket").json()
        
        assert data["success"] is False
        assert data["error"] == "Failed to apply garment. quota exceeded"
        assert data["state"]["position"] == 0
    
    def test_upload_garment(self, client, png_bytes):
        payload = {
            "image_base64": base64.b64encode(png_bytes).decode(),
            "filename": "shirt.png",
        }
        
        data = client.post("/api/garments", json=payload).json()
        
        assert data["success"] is True
        assert data["state"]["layers"][1]["garment"]["brand"] == "Custom Upload"
    
    def test_upload_non_image(self, client):
        payload = {"image_base64": base64.b64encode(b"plain text").decode()}
        
        data = client.post("/api/garments", json=payload).json()
        
        assert data["success"] is False
        assert "image file" in data["error"]
    
    def test_select_pose(self, client):
        client.post("/api/garments/jacket")
        
        data = client.post("/api/pose", json={"pose": 2}).json()
        
        assert data["success"] is True
        assert data["state"]["current_pose"] == "Side profile view"
        assert len(data["state"]["available_poses"]) == 2
    
    def test_select_invalid_pose(self, client):
        data = client.post("/api/pose", json={"pose": 42}).json()
        
        assert data["success"] is False
        assert data["error"].startswith("Failed to change pose.")
    
    def test_start_over(self, client):
        data = client.post("/api/reset").json()
        
        assert data["success"] is True
        assert data["state"]["layers"] == []
        assert data["state"]["displayed_image"] is None


class TestOutfitEndpoints:
    """Tests for saved outfit endpoints."""
    
    def test_save_requires_garment(self, client):
        data = client.post("/api/outfits", json={"name": "Nothing"}).json()
        
        assert data["success"] is False
        assert "at least one garment" in data["error"]
    
    def test_save_list_apply_delete(self, client):
        client.post("/api/garments/jacket")
        client.post("/api/garments/tee")
        saved = client.post("/api/outfits", json={"name": "Layered"}).json()
        assert saved["success"] is True
        outfit_id = saved["outfit"]["id"]
        
        listed = client.get("/api/outfits").json()
        assert [o["id"] for o in listed] == [outfit_id]
        
        client.post("/api/reset")
        client.post("/api/model", json={"image": "M0"})
        applied = client.post(f"/api/outfits/{outfit_id}/apply").json()
        assert applied["success"] is True
        assert applied["state"]["active_garment_ids"] == ["jacket", "tee"]
        
        deleted = client.delete(f"/api/outfits/{outfit_id}").json()
        assert deleted["success"] is True
        assert client.get("/api/outfits").json() == []
    
    def test_apply_unknown_outfit(self, client):
        data = client.post("/api/outfits/outfit-missing/apply").json()
        
        assert data["success"] is False
        assert "not found" in data["error"]
    
    def test_delete_unknown_outfit(self, client):
        data = client.delete("/api/outfits/outfit-missing").json()
        
        assert data["success"] is False
