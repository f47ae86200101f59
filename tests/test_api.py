"""API tests."""

import json
from unittest.mock import AsyncMock, MagicMock
from urllib.parse import unquote

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.routes import scenes
from core.config import SceneGenConfig
from core.export import SceneExporter
from core.llm import DEFAULT_MODEL_ID, ScriptGenerator
from core.llm.providers import LLMProvider
from core.pipeline import ScenePipeline
from core.scene_kit import SceneKit


SCRIPT = """scene = kit.Scene(name="red_cube")
scene.add(kit.Mesh(kit.box(1, 1, 1), kit.Material(color=0xff0000), name="red_cube"))
scene.add(kit.AmbientLight(intensity=0.5, name="ambient_light"))
return scene"""


@pytest.fixture
def provider():
    """Stub LLM provider returning a red cube envelope."""
    stub = MagicMock(spec=LLMProvider)
    stub.complete = AsyncMock(return_value=json.dumps({"script": SCRIPT, "filename": "Red Cube"}))
    return stub


@pytest.fixture
def client(provider, tmp_path):
    """Create test client with a stubbed pipeline and temp directory."""
    generator = ScriptGenerator(SceneGenConfig(anthropic_api_key="sk-ant-test"), providers={"anthropic": provider})
    pipeline = ScenePipeline(generator=generator, exporter=SceneExporter(), capability=SceneKit())
    app.dependency_overrides[scenes.get_pipeline] = lambda: pipeline
    app.dependency_overrides[scenes.get_temp_dir] = lambda: tmp_path
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_check(client):
    """Test health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_liveness(client):
    """Test liveness endpoint."""
    response = client.get("/healthz")
    assert response.status_code == 200


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "Scene Generator"


def test_list_models(client):
    """Test model listing."""
    response = client.get("/models")
    assert response.status_code == 200
    data = response.json()
    assert data["default"] == DEFAULT_MODEL_ID
    assert any(model["id"] == DEFAULT_MODEL_ID for model in data["models"])


def test_generate_scene(client, tmp_path):
    """Generated GLB is streamed back with scene headers, then deleted."""
    response = client.post("/generate-scene", json={"prompt": "a red cube"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "model/gltf-binary"
    assert response.content[:4] == b"glTF"
    assert response.headers["x-scene-filename"] == "red_cube"
    assert response.headers["x-scene-model"] == DEFAULT_MODEL_ID
    assert unquote(response.headers["x-scene-script"]) == SCRIPT
    assert list(tmp_path.iterdir()) == []


def test_generate_scene_with_model(client, provider):
    """Unknown modelId falls back to the default."""
    response = client.post("/generate-scene", json={"prompt": "a red cube", "modelId": "unknown-model"})
    assert response.status_code == 200
    assert provider.complete.await_args.args[0].model_id == DEFAULT_MODEL_ID


def test_generate_scene_missing_prompt(client, provider):
    """Missing prompt is a 400 and no LLM call is made."""
    response = client.post("/generate-scene", json={})
    assert response.status_code == 400
    assert response.json()["error"] == "Prompt is required"
    provider.complete.assert_not_called()


def test_generate_scene_null_prompt(client, provider):
    """An explicit null prompt is treated like a missing one."""
    response = client.post("/generate-scene", json={"prompt": None, "modelId": None})
    assert response.status_code == 400
    assert response.json()["error_type"] == "invalid_request"
    provider.complete.assert_not_called()


def test_generate_scene_malformed_reply(client, provider, tmp_path):
    """Pipeline failures map to 500 with the failing stage."""
    provider.complete.return_value = "Sorry, I can only describe scenes in words."
    response = client.post("/generate-scene", json={"prompt": "a red cube"})

    assert response.status_code == 500
    data = response.json()
    assert data["stage"] == "generating"
    assert data["error_type"] == "malformed_envelope"
    assert list(tmp_path.iterdir()) == []


def test_refine_scene(client, provider):
    """Refinement sends the prior script and returns the new asset."""
    response = client.post(
        "/refine-scene",
        json={"originalScript": SCRIPT, "refinementPrompt": "make it bigger"},
    )
    assert response.status_code == 200
    assert response.content[:4] == b"glTF"
    assert SCRIPT in provider.complete.await_args.args[0].user_content


def test_refine_scene_missing_fields(client):
    """Refinement needs both the script and the change."""
    response = client.post("/refine-scene", json={"originalScript": SCRIPT})
    assert response.status_code == 400
    assert response.json()["error_type"] == "invalid_request"


def test_refine_scene_null_fields(client, provider):
    """Null refinement fields are a 400, not a schema error."""
    response = client.post(
        "/refine-scene",
        json={"originalScript": None, "refinementPrompt": None},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Original script is required"
    provider.complete.assert_not_called()


def test_cors_exposes_scene_headers(client):
    """Browser clients can read the scene headers."""
    response = client.post(
        "/generate-scene",
        json={"prompt": "a red cube"},
        headers={"Origin": "http://localhost:3000"},
    )
    exposed = response.headers["access-control-expose-headers"].lower()
    assert "x-scene-script" in exposed
    assert "x-scene-filename" in exposed
