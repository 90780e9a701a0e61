import importlib.util
from pathlib import Path

import pytest

from storyweaver.common import JsonSyntaxError, SpeechSynthesisError

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "generate_story.py"


@pytest.fixture
def cli(monkeypatch):
    spec = importlib.util.spec_from_file_location("generate_story_cli", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    monkeypatch.setattr(module, "load_dotenv", lambda: None)
    monkeypatch.setattr(module, "configure_logging", lambda level: None)
    return module


@pytest.fixture
def request_file(tmp_path):
    path = tmp_path / "request.yaml"
    path.write_text("storyAbout: a lantern\n", encoding="utf-8")
    return path


def _failing_run(exc):
    def run_from_request_file(self, request_path, **kwargs):
        raise exc

    return run_from_request_file


@pytest.mark.parametrize(
    "exc",
    [
        SpeechSynthesisError("ElevenLabs request failed", status_code=401),
        ValueError("Replicate API token is required."),
        JsonSyntaxError("Expecting ',' delimiter", "{bad}", 1),
    ],
)
def test_pipeline_failures_exit_with_status_one(cli, request_file, tmp_path, monkeypatch, exc):
    monkeypatch.setattr(cli.StorybookOrchestrator, "run_from_request_file", _failing_run(exc))
    output = tmp_path / "package.yaml"

    status = cli.main(["--request", str(request_file), "--output", str(output), "--narrate"])

    assert status == 1
    assert not output.exists()
