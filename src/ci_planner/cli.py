"""CLI commands for resolving the CI plan inside a workflow run."""

from __future__ import annotations

import io
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer

from .config import DEFAULT_CONFIG_PATH, ConfigError, load_config
from .directives import normalize_list, parse_directives
from .outputs import log_group, render_summary, write_outputs
from .resolver import resolve_plan
from .sources import GitHubClient, HarvestPolicy, Harvester, RunContext, build_sources

APP_HELP = "Resolve which CI jobs and platform targets to run from commit/PR directives."

app = typer.Typer(help=APP_HELP)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.command()
def plan(
    config_path: str = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config-path",
        "-c",
        envvar="INPUT_CONFIG-PATH",
        help="Path to the planner configuration (JSON or YAML).",
    ),
    message_override: str = typer.Option(
        "",
        "--message-override",
        "-m",
        envvar="INPUT_MESSAGE-OVERRIDE",
        help="Directive text that takes precedence over every other source.",
    ),
    labels_override: str = typer.Option(
        "",
        "--labels-override",
        "-l",
        envvar="INPUT_LABELS-OVERRIDE",
        help="Comma/space separated labels replacing the pull request's labels.",
    ),
    mode_input: str = typer.Option(
        "",
        "--mode-input",
        envvar="INPUT_MODE-INPUT",
        help="Force the build mode (e.g. full or components).",
    ),
    github_token: str = typer.Option(
        "",
        "--github-token",
        envvar=["INPUT_GITHUB-TOKEN", "GITHUB_TOKEN", "GH_TOKEN"],
        show_default=False,
        help="Token used to read head commit messages through the GitHub API.",
    ),
    policy: HarvestPolicy = typer.Option(
        HarvestPolicy.SWITCH,
        "--policy",
        envvar="INPUT_POLICY",
        case_sensitive=False,
        help="switch: first directive-bearing source wins; merge: PR description supplies defaults.",
    ),
    http_timeout: float = typer.Option(
        15.0,
        "--http-timeout",
        envvar="INPUT_HTTP-TIMEOUT",
        min=0.1,
        help="Seconds to wait for each GitHub API request.",
    ),
    output_file: Optional[Path] = typer.Option(
        None,
        "--output-file",
        envvar="GITHUB_OUTPUT",
        help="File receiving step outputs; stdout when unset.",
    ),
    strict_config: bool = typer.Option(
        False,
        "--strict-config",
        help="Fail instead of falling back to defaults when the config cannot be loaded.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Harvest directives, resolve the plan and emit step outputs."""
    _configure_logging(verbose)

    try:
        config = load_config(config_path, strict=strict_config)
    except ConfigError as error:
        typer.echo(f"Failed to load config: {error}", err=True)
        raise typer.Exit(code=1) from error

    context = RunContext.from_env(os.environ, token=github_token)
    labels = normalize_list(labels_override) or context.event.labels
    client = None
    if context.token:
        client = GitHubClient(token=context.token, timeout=http_timeout)

    harvester = Harvester(
        build_sources(context, override=message_override, client=client),
        policy=policy,
    )
    harvest = harvester.harvest()

    resolved = resolve_plan(
        config,
        harvest.text,
        labels,
        mode_input or None,
        source=harvest.source,
    )

    outputs = resolved.to_outputs()
    if output_file is not None:
        with output_file.open("a", encoding="utf-8") as handle:
            write_outputs(outputs, handle)
    else:
        buffer = io.StringIO()
        write_outputs(outputs, buffer)
        typer.echo(buffer.getvalue(), nl=False)

    with log_group("Planner sources", typer.echo):
        for name, outcome in harvest.attempts:
            typer.echo(f"{name}: {outcome}")
    typer.echo(render_summary(resolved))


@app.command()
def parse(
    text: str = typer.Argument(..., help="Text to scan for directives, or '-' to read stdin."),
) -> None:
    """Print the directives recognised in TEXT as JSON."""
    if text == "-":
        text = sys.stdin.read()
    typer.echo(json.dumps(parse_directives(text), indent=2, sort_keys=True))


@app.command()
def defaults(
    config_path: str = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config-path",
        "-c",
        help="Path to the planner configuration (JSON or YAML).",
    ),
) -> None:
    """Show the configuration with every omitted field resolved to its default."""
    config = load_config(config_path)
    typer.echo(json.dumps(config.describe(), indent=2))


if __name__ == "__main__":
    app()
