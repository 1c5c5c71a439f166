"""Unit tests for the toolchain driver."""

import pytest

from gnuplatex.config import ToolchainConfig
from gnuplatex.contexts.rendering.assembler import assemble_document
from gnuplatex.contexts.rendering.compiler import (
    _parse_latex_log,
    compile_document,
    launch_viewer,
    rasterize_command,
    rasterize_targets,
)
from gnuplatex.contexts.rendering.patterns import extract_output_targets
from gnuplatex.utils.process_runner import ProcessResult


@pytest.fixture
def document(tmp_path):
    targets = extract_output_targets("set output 'a.tex'\nset output 'b.tex'\n")
    return assemble_document(targets, tmp_path / "Plot_figures.tex")


class TestParseLatexLog:
    """Tests for _parse_latex_log."""

    @pytest.mark.unit
    def test_file_line_errors(self):
        log = "./Plot_x.tex:21: LaTeX Error: File `a.tex' not found.\n"
        errors, warnings = _parse_latex_log(log)

        assert errors == ["./Plot_x.tex:21: LaTeX Error: File `a.tex' not found."]
        assert warnings == []

    @pytest.mark.unit
    def test_bang_errors_and_warnings(self):
        log = "! Undefined control sequence.\nLaTeX Warning: Reference `x' undefined.\n"
        errors, warnings = _parse_latex_log(log)

        assert errors == ["Undefined control sequence."]
        assert warnings == ["Reference `x' undefined."]


class TestCompileDocument:
    """Tests for compile_document."""

    @pytest.mark.unit
    def test_command_line_and_cwd(self, document, toolchain_runner):
        compile_document(document, toolchain_runner, ToolchainConfig())

        method, args, cwd = toolchain_runner.calls[0]
        assert method == "run"
        assert args == [
            "pdflatex",
            "-interaction",
            "nonstopmode",
            "-halt-on-error",
            "-file-line-error",
            "Plot_figures.tex",
        ]
        assert cwd == document.directory

    @pytest.mark.unit
    def test_success(self, document, toolchain_runner):
        result = compile_document(document, toolchain_runner, ToolchainConfig())

        assert result.success is True
        assert result.pdf_path == document.pdf_path
        assert result.errors == []

    @pytest.mark.unit
    def test_failure_reports_log_errors(self, document, make_runner):
        result = compile_document(document, make_runner(compiler_returncode=1), ToolchainConfig())

        assert result.success is False
        assert result.pdf_path is None
        assert any("missing.tex" in error for error in result.errors)

    @pytest.mark.unit
    def test_missing_compiler(self, document, fake_runner):
        def _missing(args, cwd):
            raise FileNotFoundError(2, "No such file or directory", args[0])

        fake_runner.responder = _missing
        result = compile_document(document, fake_runner, ToolchainConfig())

        assert result.success is False
        assert "Could not start pdflatex" in result.errors[0]

    @pytest.mark.unit
    def test_nonzero_exit_without_log(self, document, fake_runner):
        fake_runner.responder = lambda args, cwd: ProcessResult(args=args, returncode=3)
        result = compile_document(document, fake_runner, ToolchainConfig())

        assert result.success is False
        assert result.errors == ["pdflatex exited with status 3"]

    @pytest.mark.unit
    def test_stale_pdf_is_not_mistaken_for_output(self, document, fake_runner):
        document.pdf_path.write_bytes(b"%PDF old")
        result = compile_document(document, fake_runner, ToolchainConfig())

        assert result.success is False
        assert result.errors == ["PDF file was not generated"]


class TestViewer:
    """Tests for launch_viewer."""

    @pytest.mark.unit
    def test_reuses_instance(self, document, fake_runner):
        future = launch_viewer(document, fake_runner, ToolchainConfig())

        assert future is not None
        assert fake_runner.commands("launch") == [["SumatraPDF", "-reuse-instance", "Plot_figures.pdf"]]

    @pytest.mark.unit
    def test_disabled_viewer(self, document, fake_runner):
        assert launch_viewer(document, fake_runner, ToolchainConfig(viewer="")) is None
        assert fake_runner.calls == []

    @pytest.mark.unit
    def test_viewer_failure_is_contained(self, document, fake_runner):
        def _missing(args, cwd):
            raise FileNotFoundError(args[0])

        fake_runner.responder = _missing
        future = launch_viewer(document, fake_runner, ToolchainConfig())

        assert isinstance(future.exception(), FileNotFoundError)


class TestRasterize:
    """Tests for rasterize_targets."""

    @pytest.mark.unit
    def test_command_per_page(self, document):
        toolchain = ToolchainConfig()

        assert rasterize_command(document, document.targets[1], toolchain) == [
            "convert",
            "-density",
            "300",
            "Plot_figures.pdf[1]",
            "-quality",
            "100",
            "png_b.png",
        ]

    @pytest.mark.unit
    def test_one_image_per_target(self, document, toolchain_runner):
        futures = rasterize_targets(document, toolchain_runner, ToolchainConfig())

        assert list(futures) == ["a", "b"]
        assert all(future.result().ok for future in futures.values())
        assert (document.directory / "png_a.png").exists()
        assert (document.directory / "png_b.png").exists()

    @pytest.mark.unit
    def test_failure_is_isolated(self, document, make_runner):
        futures = rasterize_targets(document, make_runner(failing_pages={0}), ToolchainConfig())

        assert futures["a"].result().ok is False
        assert futures["b"].result().ok is True
        assert not (document.directory / "png_a.png").exists()
        assert (document.directory / "png_b.png").exists()

    @pytest.mark.unit
    def test_custom_density_and_quality(self, document, fake_runner):
        rasterize_targets(document, fake_runner, ToolchainConfig(density=150, quality=90))

        first = fake_runner.commands("spawn")[0]
        assert first[1:3] == ["-density", "150"]
        assert first[4:6] == ["-quality", "90"]
