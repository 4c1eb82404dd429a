"""Command-line renderer paths that never need a browser."""

import json

from scripts.render_document import load_content, parse_args, run


class TestParseArgs:

    def test_defaults(self, tmp_path):
        args = parse_args(["charter", str(tmp_path / "in.json"), str(tmp_path / "out.pdf")])
        assert args.document_type == "charter"
        assert args.tier == "free"
        assert not args.html and not args.no_cache

    def test_flags(self, tmp_path):
        args = parse_args(["kanban", "in.json", "out.pdf", "--tier", "premium", "--draft", "--classification", "INTERNAL", "--no-charts"])
        assert args.tier == "premium"
        assert args.draft
        assert args.classification == "INTERNAL"
        assert args.no_charts


class TestLoadContent:

    def test_json(self, tmp_path):
        path = tmp_path / "in.json"
        path.write_text(json.dumps({"projectName": "Apollo"}))
        assert load_content(path) == {"projectName": "Apollo"}

    def test_plain_text(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("Just some notes")
        assert load_content(path) == "Just some notes"


class TestRun:

    async def test_unknown_type(self, tmp_path, capsys):
        args = parse_args(["memo", str(tmp_path / "in.json"), str(tmp_path / "out.pdf")])
        assert await run(args) == 2
        assert "Unknown document type 'memo'" in capsys.readouterr().err

    async def test_html_output(self, tmp_path):
        source = tmp_path / "in.json"
        source.write_text(json.dumps({"scope": "Build the thing"}))
        target = tmp_path / "out" / "charter.html"
        args = parse_args(["charter", str(source), str(target), "--html", "--project", "Apollo", "--draft"])

        assert await run(args) == 0
        html = target.read_text()
        assert html.startswith("<!DOCTYPE html>")
        assert "Apollo - Project Charter" in html
        assert "DRAFT v1.0" in html
