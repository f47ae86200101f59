"""Tests for the command-line interface."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from cli.main import main
from core.config import SceneGenConfig
from core.export import SceneExporter
from core.llm import ScriptGenerator
from core.llm.providers import LLMProvider
from core.pipeline import ScenePipeline
from core.scene_kit import SceneKit


SCRIPT = """scene = kit.Scene(name="torus")
scene.add(kit.Mesh(kit.torus(1, 0.3), kit.Material(color="#ffaa00"), name="gold_ring"))
return scene"""


@pytest.fixture
def provider():
    """Stub LLM provider."""
    stub = MagicMock(spec=LLMProvider)
    stub.complete = AsyncMock(return_value=json.dumps({"script": SCRIPT, "filename": "gold ring"}))
    return stub


@pytest.fixture
def pipeline(provider):
    """Pipeline backed by the stub provider."""
    generator = ScriptGenerator(SceneGenConfig(anthropic_api_key="sk-ant-test"), providers={"anthropic": provider})
    return ScenePipeline(generator=generator, exporter=SceneExporter(), capability=SceneKit())


def test_generate(pipeline, tmp_path, capsys):
    """Generate writes the GLB and prints its path."""
    code = main(["generate", "-p", "a gold ring", "--output-dir", str(tmp_path)], pipeline=pipeline)

    assert code == 0
    assert (tmp_path / "gold_ring.glb").read_bytes()[:4] == b"glTF"
    assert str(tmp_path / "gold_ring.glb") in capsys.readouterr().out


def test_generate_twice_keeps_both(pipeline, tmp_path):
    """Repeated runs pick a new name instead of overwriting."""
    args = ["generate", "--prompt", "a gold ring", "--output-dir", str(tmp_path)]
    assert main(args, pipeline=pipeline) == 0
    assert main(args, pipeline=pipeline) == 0
    assert sorted(p.name for p in tmp_path.iterdir()) == ["gold_ring.glb", "gold_ring_2.glb"]


def test_save_script(pipeline, tmp_path):
    """--save-script writes the script beside the model."""
    main(["generate", "-p", "ring", "--output-dir", str(tmp_path), "--save-script"], pipeline=pipeline)
    assert (tmp_path / "gold_ring.py").read_text(encoding="utf-8") == SCRIPT


def test_refine(pipeline, provider, tmp_path):
    """Refine reads the prior script from a file."""
    script_file = tmp_path / "prior.py"
    script_file.write_text("return kit.Scene()", encoding="utf-8")

    code = main(
        ["refine", "--script-file", str(script_file), "-p", "add a ring", "--output-dir", str(tmp_path / "out")],
        pipeline=pipeline,
    )

    assert code == 0
    assert "return kit.Scene()" in provider.complete.await_args.args[0].user_content
    assert (tmp_path / "out" / "gold_ring.glb").exists()


def test_refine_missing_script_file(pipeline, tmp_path, capsys):
    code = main(["refine", "--script-file", str(tmp_path / "missing.py"), "-p", "x"], pipeline=pipeline)
    assert code == 1
    assert "not found" in capsys.readouterr().err


def test_pipeline_failure_exit_code(pipeline, provider, tmp_path, capsys):
    """Failures exit 1 with the message on stderr."""
    provider.complete.return_value = json.dumps({"script": "return 42", "filename": "bad"})

    code = main(["generate", "-p", "x", "--output-dir", str(tmp_path)], pipeline=pipeline)

    assert code == 1
    assert "executing failed" in capsys.readouterr().err
    assert list(tmp_path.iterdir()) == []


def test_prompt_is_required(pipeline):
    with pytest.raises(SystemExit):
        main(["generate"], pipeline=pipeline)
