"""
Tests for the command-line interface.
"""

import json

import pytest
from click.testing import CliRunner

from conftest import FakeDeckClient
from vocabart.cli import cli
from vocabart.gemini.image import ImageClient


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_TEXT_API_KEY", raising=False)
    monkeypatch.delenv("VOCABART_STYLE", raising=False)
    return CliRunner()


class TestCli:
    """Test commands that need no network."""

    def test_prompt(self, runner):
        result = runner.invoke(cli, ["prompt", "star", "--hint", "in the style of Van Gogh"])

        assert result.exit_code == 0
        assert "text-free image of star, in the style of Van Gogh." in result.output
        assert "clipart" not in result.output

    def test_generate_requires_key(self, runner, tmp_path):
        vocab = tmp_path / "vocab.txt"
        vocab.write_text("cat: a feline\n", encoding="utf-8")

        result = runner.invoke(cli, ["generate", str(vocab), "--out-dir", str(tmp_path / "out")])

        assert result.exit_code != 0
        assert "API key" in result.output
        assert not (tmp_path / "out").exists()

    def test_print_manifest(self, runner, tmp_path, png_data_uri):
        manifest = tmp_path / "flashcard-data.json"
        manifest.write_text(json.dumps([
            {"term": "cat", "definition": "feline", "imageSrc": png_data_uri},
            {"term": "dog", "definition": "canine", "imageSrc": "N/A"},
        ]), encoding="utf-8")

        result = runner.invoke(cli, ["print", str(manifest)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "flashcard-deck.pdf").exists()

    def test_print_empty_manifest(self, runner, tmp_path):
        manifest = tmp_path / "flashcard-data.json"
        manifest.write_text("[]", encoding="utf-8")

        result = runner.invoke(cli, ["print", str(manifest)])

        assert result.exit_code == 1
        assert "Cannot print" in result.output
        assert not (tmp_path / "flashcard-deck.pdf").exists()

    def test_bad_yaml_value_is_usage_error(self, runner, tmp_path):
        config = tmp_path / "deck.yml"
        config.write_text("max_attempts: lots\n", encoding="utf-8")
        vocab = tmp_path / "vocab.txt"
        vocab.write_text("cat: a feline\n", encoding="utf-8")

        result = runner.invoke(cli, ["generate", str(vocab), "--config", str(config), "--api-key", "k"])

        assert result.exit_code == 2
        assert "max_attempts" in result.output


class TestHints:
    """Test that per-card hints survive between generate and regenerate."""

    @pytest.fixture
    def client(self, monkeypatch):
        fake = FakeDeckClient()
        monkeypatch.setattr(ImageClient, "from_settings", lambda *args, **kwargs: fake)
        return fake

    def test_generate_writes_hint_file(self, runner, tmp_path, client):
        vocab = tmp_path / "vocab.txt"
        vocab.write_text("cat (orange tabby): feline\ndog: canine\n", encoding="utf-8")
        out = tmp_path / "out"

        result = runner.invoke(cli, ["generate", str(vocab), "--out-dir", str(out), "--api-key", "k", "--no-pdf"])

        assert result.exit_code == 0, result.output
        hints = json.loads((out / "flashcard-hints.json").read_text(encoding="utf-8"))
        assert hints == {"cat": "orange tabby"}
        records = json.loads((out / "flashcard-data.json").read_text(encoding="utf-8"))
        assert set(records[0]) == {"term", "definition", "imageSrc"}

    def test_regenerate_keeps_stored_hint(self, runner, tmp_path, client):
        manifest = tmp_path / "flashcard-data.json"
        manifest.write_text(json.dumps([
            {"term": "cat", "definition": "feline", "imageSrc": "N/A"},
            {"term": "dog", "definition": "canine", "imageSrc": "N/A"},
        ]), encoding="utf-8")
        (tmp_path / "flashcard-hints.json").write_text(json.dumps({"cat": "orange tabby"}), encoding="utf-8")

        result = runner.invoke(cli, ["regenerate", str(manifest), "cat", "--api-key", "k"])

        assert result.exit_code == 0, result.output
        assert [call[:2] for call in client.calls] == [("cat", "orange tabby")]
        records = json.loads(manifest.read_text(encoding="utf-8"))
        assert records[0]["imageSrc"].startswith("data:image/png;base64,")
        assert records[1]["imageSrc"] == "N/A"

    def test_regenerate_blank_hint_clears_it(self, runner, tmp_path, client):
        manifest = tmp_path / "flashcard-data.json"
        manifest.write_text(json.dumps([{"term": "cat", "definition": "feline", "imageSrc": "N/A"}]), encoding="utf-8")
        hints_file = tmp_path / "flashcard-hints.json"
        hints_file.write_text(json.dumps({"cat": "orange tabby"}), encoding="utf-8")

        result = runner.invoke(cli, ["regenerate", str(manifest), "cat", "--hint", "", "--api-key", "k"])

        assert result.exit_code == 0, result.output
        assert client.calls[0][1] is None
        assert json.loads(hints_file.read_text(encoding="utf-8")) == {}

    def test_generate_then_regenerate(self, runner, tmp_path, client):
        vocab = tmp_path / "vocab.txt"
        vocab.write_text("cat (orange tabby): feline\n", encoding="utf-8")
        out = tmp_path / "out"
        runner.invoke(cli, ["generate", str(vocab), "--out-dir", str(out), "--api-key", "k", "--no-pdf", "--no-zip"])
        client.calls.clear()

        result = runner.invoke(cli, ["regenerate", str(out / "flashcard-data.json"), "cat", "--api-key", "k"])

        assert result.exit_code == 0, result.output
        assert client.calls[0][1] == "orange tabby"
