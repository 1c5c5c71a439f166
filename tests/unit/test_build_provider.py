"""Unit tests for the build context: eligibility, dependencies, gnuplot runs."""

from pathlib import Path

import pytest

from gnuplatex.config import GnuplatexConfig
from gnuplatex.contexts.build import dependencies, provider
from gnuplatex.contexts.build.provider import (
    BuildError,
    grammar_scope_for,
    is_eligible,
    parse_build_errors,
    run_gnuplot,
)
from gnuplatex.utils.process_runner import ProcessResult


@pytest.fixture
def gnuplot_installed(monkeypatch):
    monkeypatch.setattr(provider.shutil, "which", lambda name: f"/usr/bin/{name}")


@pytest.fixture
def gnuplot_missing(monkeypatch):
    monkeypatch.setattr(provider.shutil, "which", lambda name: None)


class TestEligibility:
    """Tests for grammar_scope_for and is_eligible."""

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["plot.gp", "plot.gnuplot", "plot.plt", "PLOT.GPI", "plot.gnu"])
    def test_gnuplot_extensions(self, name):
        assert grammar_scope_for(Path(name)) == "source.gnuplot"

    @pytest.mark.unit
    def test_unknown_extension(self):
        assert grammar_scope_for(Path("notes.txt")) is None

    @pytest.mark.unit
    def test_eligible_scope(self, gnuplot_installed):
        assert is_eligible(GnuplatexConfig(), "source.gnuplot") is True

    @pytest.mark.unit
    def test_other_scope(self, gnuplot_installed):
        assert is_eligible(GnuplatexConfig(), "source.python") is False
        assert is_eligible(GnuplatexConfig(), None) is False

    @pytest.mark.unit
    def test_gnuplot_missing(self, gnuplot_missing):
        assert is_eligible(GnuplatexConfig(), "source.gnuplot") is False

    @pytest.mark.unit
    def test_always_eligible_override(self, gnuplot_missing):
        config = GnuplatexConfig(always_eligible=True)

        assert is_eligible(config, "source.python") is True


class TestDependencies:
    """Tests for check_dependencies."""

    @pytest.mark.unit
    def test_reports_missing_programs(self, monkeypatch):
        installed = {"gnuplot", "pdflatex"}
        monkeypatch.setattr(
            dependencies.shutil, "which", lambda name: f"/usr/bin/{name}" if name in installed else None
        )

        availability = dependencies.check_dependencies(GnuplatexConfig())

        assert availability == {
            "gnuplot": True,
            "pdflatex": True,
            "convert": False,
            "SumatraPDF": False,
        }

    @pytest.mark.unit
    def test_disabled_viewer_not_required(self):
        config = GnuplatexConfig()
        config.toolchain.viewer = ""

        assert "viewer" not in dependencies.required_programs(config)


class TestBuildErrors:
    """Tests for parse_build_errors."""

    @pytest.mark.unit
    def test_matches_gnuplot_errors(self):
        output = (
            'plot sin(y)\n'
            '         ^\n'
            '"figures.gp", line 3: undefined variable: y\n'
        )

        assert parse_build_errors(output) == [
            BuildError(file="figures.gp", line=3, message="undefined variable: y")
        ]

    @pytest.mark.unit
    def test_path_in_file_name(self):
        errors = parse_build_errors('"./plots/my-fig.gp", line 12: invalid command\n')

        assert errors[0].file == "./plots/my-fig.gp"
        assert str(errors[0]) == "./plots/my-fig.gp:12: invalid command"

    @pytest.mark.unit
    def test_no_errors(self):
        assert parse_build_errors("") == []


class TestRunGnuplot:
    """Tests for run_gnuplot."""

    @pytest.mark.unit
    def test_runs_in_script_directory(self, tmp_path, fake_runner):
        script = tmp_path / "figures.gp"
        script.write_text("plot x\n")

        outcome = run_gnuplot(script, fake_runner, GnuplatexConfig())

        assert outcome.success is True
        assert fake_runner.calls == [("run", ["gnuplot", "figures.gp"], tmp_path.resolve())]

    @pytest.mark.unit
    def test_failed_build(self, tmp_path, fake_runner):
        script = tmp_path / "figures.gp"
        script.write_text("plot y\n")
        fake_runner.responder = lambda args, cwd: ProcessResult(
            args=args, returncode=1, stderr='"figures.gp", line 1: undefined variable: y\n'
        )

        outcome = run_gnuplot(script, fake_runner, GnuplatexConfig())

        assert outcome.success is False
        assert outcome.errors == [BuildError("figures.gp", 1, "undefined variable: y")]

    @pytest.mark.unit
    def test_gnuplot_cannot_start(self, tmp_path, fake_runner):
        script = tmp_path / "figures.gp"
        script.write_text("plot x\n")

        def _missing(args, cwd):
            raise FileNotFoundError(args[0])

        fake_runner.responder = _missing
        outcome = run_gnuplot(script, fake_runner, GnuplatexConfig())

        assert outcome.success is False
        assert outcome.result is None
