"""Tests for the add_style command line entry point."""

import logging

import pytest

import add_style
from style_adder.errors import DownloadError, GenerationError

STYLE_ARGS = ["lifestyle", "With Supercar", "Luxury portrait with Lamborghini"]


class FakeGenerator:
    def __init__(self):
        self.calls = []
        self.error = None

    def generate(self, prompt, reference_image_url):
        self.calls.append(prompt)
        if self.error:
            raise self.error
        return "https://cdn.test/preview.jpg"


@pytest.fixture
def generator(monkeypatch):
    fake = FakeGenerator()
    monkeypatch.setattr(add_style, "GENERATORS", {"backend": lambda: fake, "replicate": lambda: fake})
    monkeypatch.setattr(add_style, "setup_logging", lambda verbose=False: None)
    return fake


@pytest.fixture
def fetched(monkeypatch):
    """Replaces the network download with a local write; records the URLs."""
    urls = []

    def fake_download(url, destination):
        urls.append(url)
        destination.write_bytes(b"jpeg-bytes")
        return destination

    monkeypatch.setattr("style_adder.workflow.download", fake_download)
    return urls


def test_missing_arguments_exit_1(generator, capsys):
    assert add_style.main([]) == 1
    assert add_style.main(["lifestyle", "With Supercar"]) == 1
    err = capsys.readouterr().err
    assert "usage:" in err
    assert generator.calls == []


@pytest.mark.parametrize("extra", [
    ["extra"],
    ["--bogus"],
    ["--generator", "nope"],
])
def test_malformed_arguments_exit_1(generator, capsys, extra):
    assert add_style.main(STYLE_ARGS + extra) == 1
    err = capsys.readouterr().err
    assert "usage:" in err
    assert "error:" in err
    assert generator.calls == []


def test_replicate_generator_is_selectable(project, generator, fetched, monkeypatch):
    replicate = FakeGenerator()
    monkeypatch.setattr(add_style, "GENERATORS", {"backend": lambda: generator, "replicate": lambda: replicate})

    code = add_style.main(STYLE_ARGS + ["--project-root", str(project.root), "--yes", "--generator", "replicate"])

    assert code == 0
    assert len(replicate.calls) == 1
    assert generator.calls == []


def test_success(project, generator, fetched, capsys):
    code = add_style.main(STYLE_ARGS + ["--project-root", str(project.root), "--yes"])

    assert code == 0
    assert fetched == ["https://cdn.test/preview.jpg"]
    assert (project.assets_dir / "WithSupercar" / "preview.jpg").exists()
    out = capsys.readouterr().out
    assert "Style added successfully!" in out
    assert "Updated mobile/src/constants/styles.ts" in out
    assert "Skipped mobile/src/screens/StyleSelectScreen.tsx (file_missing)" in out
    assert "PREVIEW LINK: https://cdn.test/preview.jpg" in out


def test_unknown_template_exit_1(project, generator, fetched, caplog):
    with caplog.at_level(logging.ERROR):
        code = add_style.main(["lifestyle", "With Spaceship", "desc", "--project-root", str(project.root), "--yes"])

    assert code == 1
    assert "with_spaceship" in caplog.text
    assert generator.calls == []
    assert fetched == []


def test_generation_failure_exit_1(project, generator, fetched, caplog):
    generator.error = GenerationError("No image URL in response")
    with caplog.at_level(logging.ERROR):
        code = add_style.main(STYLE_ARGS + ["--project-root", str(project.root), "--yes"])

    assert code == 1
    assert "No image URL in response" in caplog.text
    assert fetched == []


def test_download_failure_exit_1(project, generator, monkeypatch):
    def failing_download(url, destination):
        raise DownloadError("Failed to download")

    monkeypatch.setattr("style_adder.workflow.download", failing_download)
    assert add_style.main(STYLE_ARGS + ["--project-root", str(project.root), "--yes"]) == 1


def test_operator_cancel_exit_0(project, generator, fetched, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda *args: "n")

    code = add_style.main(STYLE_ARGS + ["--project-root", str(project.root)])

    assert code == 0
    assert fetched == []
    assert "Cancelled" in capsys.readouterr().out


def test_list_templates(generator, capsys):
    assert add_style.main(["--list-templates"]) == 0
    out = capsys.readouterr().out
    assert "with_supercar" in out
    assert "lifestyle - Social & Lifestyle" in out
