#!/usr/bin/env python3
"""
Gnuplot Build CLI

Runs gnuplot on a cairolatex script and turns its output into a PDF and PNGs.

Commands:
    build       - Run gnuplot, then the post-build pipeline on success
    post-build  - Run only the post-build pipeline (gnuplot already ran)
    check       - Report eligibility and toolchain availability

Examples:\n

    gnuplot_build.py build plots/figures.gp                      # Build and render

    gnuplot_build.py build plots/figures.gp --project-root .     # Fix include paths

    gnuplot_build.py post-build plots/figures.gp --no-wait       # Do not wait for PNGs

    gnuplot_build.py check plots/figures.gp                      # Eligibility report
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from omegaconf.errors import OmegaConfBaseException
from typing_extensions import Annotated

from gnuplatex.config import GnuplatexConfig, load_config
from gnuplatex.contexts.build import (
    check_dependencies,
    grammar_scope_for,
    is_eligible,
    run_gnuplot,
)
from gnuplatex.contexts.build.logger import setup_build_logger
from gnuplatex.contexts.rendering import (
    PostBuildRun,
    RenderingError,
    SourceScript,
    on_build_complete,
)
from gnuplatex.contexts.rendering.logger import setup_rendering_logger
from gnuplatex.utils.process_runner import ProcessRunner

load_dotenv()
PROJECT_ROOT = os.getenv("PROJECT_ROOT")


app = typer.Typer(
    help="Build gnuplot cairolatex scripts into a PDF and per-plot PNGs",
    add_completion=False,
    invoke_without_command=True,
)

ScriptArgument = Annotated[
    Path,
    typer.Argument(help="Gnuplot script", exists=True, dir_okay=False, resolve_path=True),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="YAML config overriding the defaults", exists=True),
]
ProjectRootOption = Annotated[
    Optional[Path],
    typer.Option(
        "--project-root",
        "-r",
        help="Project root for include path rewriting (default: PROJECT_ROOT env)",
        file_okay=False,
    ),
]
VerboseOption = Annotated[
    bool, typer.Option("--verbose", "-v", help="Show debug output and raw compiler output")
]
WaitOption = Annotated[
    bool, typer.Option("--wait/--no-wait", help="Wait for rasterization before exiting")
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load(config_path: Optional[Path]) -> GnuplatexConfig:
    try:
        return load_config(config_path)
    except (FileNotFoundError, OmegaConfBaseException) as e:
        typer.secho(f"Error: invalid configuration: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)


def _resolve_project_root(project_root: Optional[Path]) -> Optional[Path]:
    if project_root is not None:
        return project_root
    if PROJECT_ROOT:
        return Path(PROJECT_ROOT)
    return None


def _report(run: Optional[PostBuildRun], wait: bool) -> int:
    """Print a summary of the run and return the exit code."""
    if run is None:
        return 1

    typer.secho(f"✓ {run.document.pdf_path.name}", fg=typer.colors.GREEN, bold=True)
    if not wait:
        typer.echo(f"  {len(run.targets)} rasterizations started")
        return 0

    run.wait()
    failed = run.failed_targets()
    for target in run.targets:
        if target.name in failed:
            typer.secho(f"  ✗ {target.image_file}", fg=typer.colors.RED)
        else:
            typer.echo(f"  ✓ {target.image_file}")
    return 1 if failed else 0


def _post_build(
    build_succeeded: bool,
    script: Path,
    config: GnuplatexConfig,
    runner: ProcessRunner,
    project_root: Optional[Path],
    verbose: bool,
    wait: bool,
) -> int:
    try:
        run = on_build_complete(
            build_succeeded,
            SourceScript.from_path(script),
            config,
            runner,
            project_root=_resolve_project_root(project_root),
            verbose=verbose,
        )
    except RenderingError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, bold=True, err=True)
        return 1
    return _report(run, wait)


@app.command("build")
def build_command(
    script: ScriptArgument,
    config_path: ConfigOption = None,
    project_root: ProjectRootOption = None,
    verbose: VerboseOption = False,
    wait: WaitOption = True,
):
    """
    Run gnuplot on a script, then compile, render and clean up on success.

    Examples:\n

        $ gnuplot_build.py build figures.gp

        $ gnuplot_build.py build figures.gp -r ~/thesis -v
    """
    config = _load(config_path)
    setup_build_logger(gnuplot=config.toolchain.gnuplot, verbose=verbose)

    if config.manage_dependencies:
        check_dependencies(config)

    if not is_eligible(config, grammar_scope_for(script)):
        typer.secho(
            f"✗ {script.name} is not eligible for the gnuplot provider",
            fg=typer.colors.YELLOW,
            err=True,
        )
        raise typer.Exit(code=1)

    with ProcessRunner(max_workers=config.toolchain.max_workers) as runner:
        outcome = run_gnuplot(script, runner, config)
        if not outcome.success:
            for error in outcome.errors:
                typer.secho(f"  {error}", fg=typer.colors.RED, err=True)
        code = _post_build(
            outcome.success, script, config, runner, project_root, verbose, wait
        )

    raise typer.Exit(code=code)


@app.command("post-build")
def post_build_command(
    script: ScriptArgument,
    config_path: ConfigOption = None,
    project_root: ProjectRootOption = None,
    verbose: VerboseOption = False,
    wait: WaitOption = True,
):
    """
    Run only the post-build pipeline for a script whose outputs already exist.
    """
    config = _load(config_path)
    setup_rendering_logger(latex_compiler=config.toolchain.latex_compiler, verbose=verbose)

    with ProcessRunner(max_workers=config.toolchain.max_workers) as runner:
        code = _post_build(True, script, config, runner, project_root, verbose, wait)

    raise typer.Exit(code=code)


@app.command("check")
def check_command(
    script: ScriptArgument,
    config_path: ConfigOption = None,
):
    """
    Report whether a script is eligible and which external programs are installed.
    """
    config = _load(config_path)
    scope = grammar_scope_for(script)

    eligible = is_eligible(config, scope)
    colour = typer.colors.GREEN if eligible else typer.colors.YELLOW
    typer.secho(f"Scope: {scope or 'unknown'}", bold=True)
    typer.secho(f"Eligible: {'yes' if eligible else 'no'}", fg=colour)

    for program, found in check_dependencies(config).items():
        mark = "✓" if found else "✗"
        typer.secho(
            f"  {mark} {program}", fg=typer.colors.GREEN if found else typer.colors.RED
        )

    raise typer.Exit(code=0 if eligible else 1)


if __name__ == "__main__":
    app()
