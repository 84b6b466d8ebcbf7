"""Tests for the CLI entry point (texdoc.cli).

Covers argument parsing, command dispatch, document loading and error
handling. The renderer is patched out so no LaTeX installation is needed.
"""

from unittest.mock import MagicMock, patch

import pytest
import yaml

from texdoc.cli import (
    _load_document,
    build_parser,
    cmd_build,
    cmd_inspect,
    cmd_preview,
    main,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def parser():
    return build_parser()


@pytest.fixture
def document(tmp_path):
    """A small YAML document description."""
    path = tmp_path / "doc.yaml"
    path.write_text(yaml.safe_dump({
        "executable": "pdflatex",
        "folder": str(tmp_path / "build"),
        "output_name": "report",
        "margins": {"top": 1},
        "body": [
            {"type": "page_title", "title": "Summary"},
            {"type": "paragraph", "heading": "Intro", "text": "Body text."},
            {"directive": "new_page"},
        ],
    }, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def zero_pie_document(tmp_path):
    """A document whose only element is a pie chart with a zero total."""
    path = tmp_path / "pie.yaml"
    path.write_text(yaml.safe_dump({
        "executable": "pdflatex",
        "folder": str(tmp_path / "build"),
        "body": [
            {"type": "pie_chart", "values": [{"label": "A", "value": 0}]},
        ],
    }, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def mock_renderer():
    """Patch the default ProcessRenderer used by the builder."""
    renderer = MagicMock()
    renderer.run.return_value = 0
    with patch("texdoc.generator.latex_builder.ProcessRenderer",
               return_value=renderer):
        yield renderer


# ===================================================================
# Parser tests
# ===================================================================

class TestParser:
    def test_build_minimal(self, parser):
        args = parser.parse_args(["build", "doc.yaml"])
        assert args.command == "build"
        assert args.document == "doc.yaml"
        assert args.output_name is None
        assert args.no_open is False
        assert args.func is cmd_build

    def test_build_options(self, parser):
        args = parser.parse_args(["build", "doc.yaml", "--output-name", "q1", "--no-open"])
        assert args.output_name == "q1"
        assert args.no_open is True

    def test_preview(self, parser):
        args = parser.parse_args(["preview", "doc.yaml", "-o", "out.tex"])
        assert args.output == "out.tex"
        assert args.func is cmd_preview

    def test_inspect(self, parser):
        args = parser.parse_args(["inspect", "doc.yaml", "-v"])
        assert args.verbose is True
        assert args.func is cmd_inspect

    def test_log_level_default(self, parser):
        assert parser.parse_args(["inspect", "d.yaml"]).log_level == "WARNING"

    def test_command_required(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args([])


# ===================================================================
# Document loading
# ===================================================================

class TestLoadDocument:
    def test_missing_file_exits(self, parser, tmp_path):
        args = parser.parse_args(["inspect", str(tmp_path / "nope.yaml")])
        with pytest.raises(SystemExit) as exc:
            _load_document(args)
        assert exc.value.code == 1

    def test_invalid_document_exits(self, parser, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("executable: pdflatex\nfolder: out\nbody:\n  - type: video\n",
                        encoding="utf-8")
        args = parser.parse_args(["inspect", str(path)])
        with pytest.raises(SystemExit):
            _load_document(args)
        assert "Invalid document" in capsys.readouterr().err

    def test_malformed_yaml_exits(self, parser, tmp_path, capsys):
        path = tmp_path / "broken.yaml"
        path.write_text("executable: pdflatex\nfolder: out\nbody: [\n", encoding="utf-8")
        args = parser.parse_args(["inspect", str(path)])
        with pytest.raises(SystemExit) as exc:
            _load_document(args)
        assert exc.value.code == 1
        assert "Invalid document" in capsys.readouterr().err

    def test_empty_sections_load(self, parser, tmp_path):
        path = tmp_path / "bare.yaml"
        path.write_text("executable: pdflatex\nfolder: out\nmargins:\nbody:\n",
                        encoding="utf-8")
        spec = _load_document(parser.parse_args(["inspect", str(path)]))
        assert spec.margins.top == 0
        assert spec.body == []


# ===================================================================
# Commands
# ===================================================================

class TestBuild:
    def test_success(self, document, tmp_path, mock_renderer):
        with pytest.raises(SystemExit) as exc:
            main(["build", str(document)])
        assert exc.value.code == 0
        assert (tmp_path / "build" / "report.tex").exists()
        mock_renderer.run.assert_called_once()
        mock_renderer.open_for_viewing.assert_called_once_with(
            tmp_path / "build" / "report.pdf")

    def test_output_name_and_no_open(self, document, tmp_path, mock_renderer):
        with pytest.raises(SystemExit):
            main(["build", str(document), "--output-name", "q1", "--no-open"])
        assert (tmp_path / "build" / "q1.tex").exists()
        mock_renderer.open_for_viewing.assert_not_called()

    def test_renderer_failure_exit_code(self, document, mock_renderer, capsys):
        mock_renderer.run.return_value = 1
        with pytest.raises(SystemExit) as exc:
            main(["build", str(document)])
        assert exc.value.code == 1
        assert "Renderer exited with code 1" in capsys.readouterr().err

    def test_folder_with_space(self, tmp_path, mock_renderer, capsys):
        path = tmp_path / "doc.yaml"
        path.write_text(yaml.safe_dump({
            "executable": "pdflatex",
            "folder": str(tmp_path / "with space"),
        }), encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["build", str(path)])
        assert exc.value.code == 1
        assert "spaces" in capsys.readouterr().err

    def test_zero_total_pie_exits(self, zero_pie_document, mock_renderer, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["build", str(zero_pie_document)])
        assert exc.value.code == 1
        assert "ERROR" in capsys.readouterr().err
        mock_renderer.run.assert_not_called()


class TestPreview:
    def test_prints_markup(self, document, capsys, mock_renderer):
        main(["preview", str(document)])
        out = capsys.readouterr().out
        assert out.startswith(r"\documentclass{article}")
        assert r"\paragraph{Intro}" in out
        assert out.rstrip().endswith(r"\end{document}")
        mock_renderer.run.assert_not_called()

    def test_writes_file(self, document, tmp_path, mock_renderer):
        output = tmp_path / "preview" / "doc.tex"
        main(["preview", str(document), "-o", str(output)])
        content = output.read_text(encoding="utf-8")
        assert r"\title{Summary}" in content
        assert r"tmargin=1in" in content

    def test_zero_total_pie_exits(self, zero_pie_document, mock_renderer, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["preview", str(zero_pie_document)])
        assert exc.value.code == 1
        captured = capsys.readouterr()
        assert "ERROR" in captured.err
        assert captured.out == ""


class TestInspect:
    def test_summary(self, document, capsys):
        main(["inspect", str(document)])
        out = capsys.readouterr().out
        assert "Executable:  pdflatex" in out
        assert "Body items:  3 (2 elements)" in out

    def test_empty_margins(self, tmp_path, capsys):
        path = tmp_path / "doc.yaml"
        path.write_text("executable: pdflatex\nfolder: out\nmargins:\n",
                        encoding="utf-8")
        main(["inspect", str(path)])
        out = capsys.readouterr().out
        assert "Margins:     top=0.0 bottom=0.0 left=0.0 right=0.0" in out
        assert "Body items:  0 (0 elements)" in out

    def test_verbose(self, document, capsys):
        main(["inspect", str(document), "-v"])
        out = capsys.readouterr().out
        assert "page_title" in out
        assert "directive new_page" in out
