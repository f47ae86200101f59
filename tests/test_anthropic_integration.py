"""Live Anthropic integration tests."""

import pytest

from core.config import SceneGenConfig
from core.pipeline import GenerationRequest, build_pipeline


@pytest.fixture
def config():
    """Configuration from the environment."""
    return SceneGenConfig.from_env()


@pytest.mark.integration
class TestLiveGeneration:
    """Prompt-to-GLB against the real API."""

    @pytest.mark.asyncio
    async def test_red_cube_blue_sphere(self, config, tmp_path):
        """The reference prompt produces a GLB with both meshes."""
        if not config.is_anthropic_configured():
            pytest.skip("ANTHROPIC_API_KEY not configured")

        pipeline = build_pipeline(config)
        result = await pipeline.run(
            GenerationRequest.create("a red cube and a blue sphere"),
            lambda name: tmp_path / f"{name}.glb",
        )

        assert result.export.format == "glb"
        assert result.export.path.read_bytes()[:4] == b"glTF"
        assert "return scene" in result.envelope.script
