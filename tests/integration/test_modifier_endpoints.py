"""
End-to-end tests for the modifier extraction API.

Each test builds its own application so the lifespan initializes a fresh
service container; the default OCR backend is the mock sample menu.
"""
import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import ServiceContainer
from app.main import create_app
from app.services import MockOCRModel


def _client(ocr_model=None) -> TestClient:
    app = create_app()
    if ocr_model is not None:
        app.state.service_container = ServiceContainer(ocr_model=ocr_model)
    return TestClient(app)


@pytest.fixture
def client():
    with _client() as c:
        yield c


def _image(png, name="menu.png"):
    return (name, png, "image/png")


class TestExtract:

    def test_extract_sample_menu(self, client, png_bytes):
        r = client.post("/api/v1/modifiers/extract", files={"image": _image(png_bytes)})
        assert r.status_code == 200, r.text
        body = r.json()
        assert body["success"] is True
        assert [item["name"] for item in body["items"]] == ["MARGHERITA", "CAPRICCIOSA", "Garlic Prawns"]

        margherita = body["items"][0]
        assert margherita["description"] == "tomato sauce, mozzarella, basil"
        assert {g["category"]: g["items"] for g in margherita["modifiers"]} == {
            "Sauces": ["tomato sauce"],
            "Cheeses": ["mozzarella"],
        }
        assert "X-Request-ID" in r.headers

    def test_extract_without_image(self, client):
        r = client.post("/api/v1/modifiers/extract")
        assert r.status_code == 400
        body = r.json()
        assert body["error_code"] == "NO_IMAGES_PROVIDED"
        assert body["message"] == "No image file provided"

    def test_extract_rejects_non_image(self, client):
        r = client.post("/api/v1/modifiers/extract", files={"image": ("menu.txt", b"hello", "text/plain")})
        assert r.status_code == 400
        body = r.json()
        assert body["error_code"] == "INVALID_IMAGE_FORMAT"
        assert body["message"] == "Please upload an image file"

    def test_extract_no_text_detected(self, png_bytes):
        with _client(MockOCRModel(text="")) as c:
            r = c.post("/api/v1/modifiers/extract", files={"image": _image(png_bytes)})
        assert r.status_code == 422
        assert r.json()["error_code"] == "NO_TEXT_DETECTED"


class TestExtractBatch:

    def test_batch_consolidates_across_images(self, client, png_bytes):
        files = [
            ("images", _image(png_bytes, "a.png")),
            ("images", _image(png_bytes, "b.png")),
        ]
        r = client.post("/api/v1/modifiers/extract-batch", files=files)
        assert r.status_code == 200, r.text
        body = r.json()
        assert body["total_processed"] == 2
        assert body["successful_processed"] == 2
        assert [res["filename"] for res in body["results"]] == ["a.png", "b.png"]

        meats = [o["text"] for o in body["modifiers"]["modifiers"]["Meats"]]
        assert meats == ["ham", "prawns"]
        assert all(
            o["selected"] is False
            for options in body["modifiers"]["modifiers"].values()
            for o in options
        )

    def test_batch_all_failed(self, png_bytes):
        files = [("images", _image(png_bytes)), ("images", _image(png_bytes))]
        with _client(MockOCRModel(error=RuntimeError("down"))) as c:
            r = c.post("/api/v1/modifiers/extract-batch", files=files)
        assert r.status_code == 422
        body = r.json()
        assert body["error_code"] == "ALL_IMAGES_FAILED"
        assert len(body["details"]["failures"]) == 2

    def test_batch_without_images(self, client):
        r = client.post("/api/v1/modifiers/extract-batch")
        assert r.status_code == 400
        assert r.json()["error_code"] == "NO_IMAGES_PROVIDED"


MODIFIERS = {
    "modifiers": {
        "Meats": [
            {"text": "Bacon", "selected": True},
            {"text": "Ham", "selected": False},
        ]
    }
}


class TestCuration:

    def test_consolidate(self, client):
        items = [
            {"name": "A", "description": "", "modifiers": [{"category": "Cheeses", "items": ["Mozzarella"]}]},
            {"name": "B", "description": "", "modifiers": [{"category": "Cheeses", "items": ["mozzarella", "ricotta"]}]},
        ]
        r = client.post("/api/v1/modifiers/consolidate", json=items)
        assert r.status_code == 200, r.text
        assert r.json() == {"modifiers": {"Cheeses": [
            {"text": "Mozzarella", "selected": False},
            {"text": "ricotta", "selected": False},
        ]}}

    def test_consolidate_rejects_malformed_body(self, client):
        r = client.post("/api/v1/modifiers/consolidate", json={"not": "a list"})
        assert r.status_code == 422
        assert r.json()["error_code"] == "VALIDATION_ERROR"

    def test_select(self, client):
        r = client.post("/api/v1/modifiers/select", json={"modifiers": MODIFIERS, "category": "Meats", "text": "ham"})
        assert r.status_code == 200
        assert r.json()["modifiers"]["Meats"][1] == {"text": "Ham", "selected": True}

    def test_select_unknown_modifier(self, client):
        r = client.post("/api/v1/modifiers/select", json={"modifiers": MODIFIERS, "category": "Meats", "text": "Salami"})
        assert r.status_code == 404
        assert r.json()["error_code"] == "MODIFIER_NOT_FOUND"

    def test_select_rejects_flattened_modifiers(self, client):
        body = {"modifiers": MODIFIERS["modifiers"], "category": "Meats", "text": "Bacon"}
        r = client.post("/api/v1/modifiers/select", json=body)
        assert r.status_code == 422
        assert r.json()["error_code"] == "VALIDATION_ERROR"

    def test_export(self, client):
        r = client.post("/api/v1/modifiers/export", json=MODIFIERS)
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/csv")
        assert r.headers["content-disposition"] == 'attachment; filename="modifiers.csv"'
        assert r.text == "Category,Item\nMeats,Bacon\nMeats,HOLD Bacon\n"

    def test_export_rejects_bare_category_mapping(self, client):
        r = client.post("/api/v1/modifiers/export", json=MODIFIERS["modifiers"])
        assert r.status_code == 422
        assert r.json()["error_code"] == "VALIDATION_ERROR"


class TestServiceEndpoints:

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert r.json()["status"] == "running"

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "healthy"
        assert body["ocr_backend"] == "mock"
        assert body["ocr_healthy"] is True

    def test_health_counts_error_responses(self, client):
        before = client.get("/health").json()["error_statistics"]

        client.post("/api/v1/modifiers/select", json={"modifiers": MODIFIERS, "category": "Meats", "text": "Salami"})
        client.post("/api/v1/modifiers/export", json=MODIFIERS["modifiers"])

        after = client.get("/health").json()["error_statistics"]
        assert after["total_errors"] == before["total_errors"] + 2
        assert after["error_counts"]["MODIFIER_NOT_FOUND"] == before["error_counts"].get("MODIFIER_NOT_FOUND", 0) + 1
        assert after["error_counts"]["VALIDATION_ERROR"] == before["error_counts"].get("VALIDATION_ERROR", 0) + 1
        assert set(after) == {"error_counts", "total_errors"}
