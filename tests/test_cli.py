import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from pdf_hotspots.cli import cli
from pdf_hotspots.parser import parse_hotspots, parse_manifest


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def plain_pdf(tmp_path: Path, plain_pdf_bytes: bytes) -> Path:
    path = tmp_path / "plain.pdf"
    path.write_bytes(plain_pdf_bytes)
    return path


def test_info_reports_hotspots(runner: CliRunner, hotspot_pdf: Path) -> None:
    result = runner.invoke(cli, ["info", str(hotspot_pdf)])

    assert result.exit_code == 0, result.output
    assert "Number of Pages" in result.output
    assert "612 x 792 pt" in result.output
    assert "Yes" in result.output


def test_info_on_plain_pdf(runner: CliRunner, plain_pdf: Path) -> None:
    result = runner.invoke(cli, ["info", str(plain_pdf)])

    assert result.exit_code == 0, result.output
    assert "No" in result.output


def test_list_filters_by_page(runner: CliRunner, hotspot_pdf: Path) -> None:
    result = runner.invoke(cli, ["list", str(hotspot_pdf), "--page", "1"])

    assert result.exit_code == 0, result.output
    assert "h-custom" in result.output
    assert "1 hotspot(s)" in result.output


def test_list_without_manifest(runner: CliRunner, plain_pdf: Path) -> None:
    result = runner.invoke(cli, ["list", str(plain_pdf)])

    assert result.exit_code == 0
    assert "No hotspots embedded" in result.output


def test_embed_adds_hotspots_and_assets(runner: CliRunner, tmp_path: Path, plain_pdf: Path) -> None:
    (tmp_path / "logo.png").write_bytes(b"\x89PNGlogo")
    spec = {
        "hotspots": [
            {
                "id": "tip",
                "pageIndex": 0,
                "rect": {"left": 10, "bottom": 20, "width": 30, "height": 40},
                "type": "text",
                "content": {"text": "Look here"},
            },
            {
                "pageIndex": 2,
                "rect": {"left": 0, "bottom": 0, "width": 50, "height": 50},
                "type": "image",
                "content": {"assetKey": "logo"},
            },
        ],
        "assets": {"logo": "logo.png"},
    }
    spec_path = tmp_path / "hotspots.json"
    spec_path.write_text(json.dumps(spec), encoding="utf-8")
    output = tmp_path / "out" / "interactive.pdf"

    result = runner.invoke(cli, ["embed", str(plain_pdf), str(spec_path), "-o", str(output)])

    assert result.exit_code == 0, result.output
    manifest = parse_manifest(output.read_bytes())
    assert manifest.annotations[0].id == "tip"
    assert manifest.annotations[1].page_index == 2
    assert manifest.resolve_image(manifest.annotations[1].content) == b"\x89PNGlogo"


def test_embed_reports_bad_rect(runner: CliRunner, tmp_path: Path, plain_pdf: Path) -> None:
    spec_path = tmp_path / "bad.json"
    spec_path.write_text(
        json.dumps({"hotspots": [{"pageIndex": 0, "rect": {"left": 0, "bottom": 0, "width": -1, "height": 1}}]}),
        encoding="utf-8",
    )

    result = runner.invoke(cli, ["embed", str(plain_pdf), str(spec_path), "-o", str(tmp_path / "x.pdf")])

    assert result.exit_code == 1
    assert "Error" in result.output
    assert not (tmp_path / "x.pdf").exists()


def test_hit_finds_hotspot(runner: CliRunner, hotspot_pdf: Path) -> None:
    result = runner.invoke(
        cli,
        ["hit", str(hotspot_pdf), "--page", "0", "--x", "75", "--y", "60", "--width", "306", "--height", "396"],
    )

    assert result.exit_code == 0, result.output
    assert "Bird" in result.output


def test_hit_miss_and_bad_page(runner: CliRunner, hotspot_pdf: Path) -> None:
    miss = runner.invoke(cli, ["hit", str(hotspot_pdf), "--x", "1", "--y", "1"])
    bad = runner.invoke(cli, ["hit", str(hotspot_pdf), "--page", "9", "--x", "1", "--y", "1"])

    assert miss.exit_code == 0
    assert "No hotspot" in miss.output
    assert bad.exit_code == 1


def test_render_writes_png(runner: CliRunner, tmp_path: Path, hotspot_pdf: Path) -> None:
    pytest.importorskip("fitz")
    output = tmp_path / "page.png"

    result = runner.invoke(cli, ["render", str(hotspot_pdf), "--page", "0", "--dpi", "36", "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert output.read_bytes().startswith(b"\x89PNG")
    assert "306x396" in result.output


def test_embed_again_replaces_hotspots_by_id(runner: CliRunner, tmp_path: Path, plain_pdf: Path) -> None:
    spec_path = tmp_path / "hotspots.json"
    output = tmp_path / "interactive.pdf"

    def _embed(source: Path, text: str) -> None:
        spec = {
            "hotspots": [
                {
                    "id": "tip",
                    "pageIndex": 0,
                    "rect": {"left": 10, "bottom": 20, "width": 30, "height": 40},
                    "content": {"text": text},
                }
            ]
        }
        spec_path.write_text(json.dumps(spec), encoding="utf-8")
        result = runner.invoke(cli, ["embed", str(source), str(spec_path), "-o", str(output)])
        assert result.exit_code == 0, result.output

    _embed(plain_pdf, "first")
    _embed(output, "second")

    hotspots = parse_hotspots(output.read_bytes())
    assert [h.id for h in hotspots] == ["tip"]
    assert hotspots[0].content.text == "second"
