from __future__ import annotations

import io
from pathlib import Path

import pytest

from ChatFormatter import cli

SAMPLE_RESPONSE = "Here are two sofas:\\n1. **Aria Sofa**\\nAvailable in Blue\\n2. **Luna Sofa**\\nAvailable in Grey\\nMade of oak"


@pytest.fixture
def response_file(tmp_path: Path) -> Path:
    path = tmp_path / "response.txt"
    path.write_text(SAMPLE_RESPONSE, encoding="utf-8")
    return path


def test_parse_args_render_defaults():
    args = cli.parse_args(["render"])
    assert args.command == "render"
    assert args.input is None
    assert args.format == "html"
    assert args.enable_animations is None


def test_render_to_stdout(response_file: Path, capsys: pytest.CaptureFixture[str]):
    assert cli.main(["render", str(response_file), "--theme", "dark", "--no-animations"]) == 0
    out = capsys.readouterr().out
    assert out.startswith('<div class="chat-response')
    assert "animate-fade-in" not in out
    assert "#111827" in out
    assert "1. Aria Sofa" in out


def test_render_text_format(response_file: Path, capsys: pytest.CaptureFixture[str]):
    assert cli.main(["render", str(response_file), "--format", "text"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Here are two sofas:"
    assert "Available Sizes: Blue" in lines
    assert "Available Sizes: Grey" in lines
    assert "Made of oak" in lines


def test_render_standalone_to_file(response_file: Path, tmp_path: Path):
    output = tmp_path / "out" / "preview.html"
    assert cli.main(["render", str(response_file), "--standalone", "--output", str(output)]) == 0
    page = output.read_text(encoding="utf-8")
    assert page.startswith("<!DOCTYPE html>")
    assert "Aria Sofa" in page


def test_render_from_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.setattr(cli.sys, "stdin", io.StringIO("- First point\n- Second point"))
    assert cli.main(["render", "-"]) == 0
    assert "<li>First point</li><li>Second point</li>" in capsys.readouterr().out


def test_render_empty_input_prints_nothing(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.setattr(cli.sys, "stdin", io.StringIO(""))
    assert cli.main(["render"]) == 0
    assert capsys.readouterr().out == ""


def test_detect(response_file: Path, capsys: pytest.CaptureFixture[str]):
    assert cli.main(["detect", str(response_file)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[:4] == ["shape: numbered_list", "product_like: true", "strategy: general", "items: 2"]


def test_detect_plain_text_reports_warnings(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    path = tmp_path / "plain.txt"
    path.write_text("Thanks for **asking", encoding="utf-8")
    assert cli.main(["detect", str(path)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["shape: plain_text", "product_like: false", "warning: unbalanced bold markers"]


def test_missing_input_file(tmp_path: Path):
    assert cli.main(["render", str(tmp_path / "missing.txt")]) == 1
