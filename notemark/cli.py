"""Click CLI interface for notemark."""

import asyncio
from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from notemark.config import NotemarkConfig
from notemark.exceptions import DiagramRenderError, HandledRenderError
from notemark.logger import set_level
from notemark.renderer import NoteRenderer

console = Console(stderr=True)


def _config_table(config: NotemarkConfig) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Setting", style="dim", width=25)
    table.add_column("Value", style="white")

    not_set = "[dim]Not set[/dim]"
    table.add_row("Config file:", str(config.config_file) if config.config_file else not_set)
    table.add_row("Attachments path:", str(config.attachments.path or not_set))
    table.add_row("Attachment token:", config.attachments.token)
    table.add_row("Notes path:", str(config.notes.path or not_set))
    table.add_row("Note token:", config.notes.token)
    table.add_row("Note pattern:", config.notes.pattern)
    table.add_row("Default extension:", config.notes.default_extension)
    table.add_row("Tag token:", config.tags.token)
    table.add_row(
        "Diagrams:",
        f"{config.diagrams.renderer}" if config.diagrams.enabled else "[red]disabled[/red]",
    )
    return table


class NotemarkGroup(click.Group):
    """Exit with a failure status once an error has been shown."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except HandledRenderError:
            ctx.exit(1)


@click.group(cls=NotemarkGroup)
@click.version_option(package_name="notemark")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML configuration file",
)
@click.option("--log-level", default=None, help="Override NOTEMARK_LOG_LEVEL")
@click.pass_context
def main(ctx: click.Context, config: Path | None, log_level: str | None) -> None:
    """notemark - render notes to HTML with attachment, note and tag links."""
    if log_level:
        set_level(log_level)

    try:
        ctx.obj = {"config": NotemarkConfig(config_file=config)}
    except (yaml.YAMLError, ValidationError) as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise HandledRenderError() from e


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--plain", is_flag=True, help="Strip formatting instead of rendering HTML")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the result to a file instead of stdout",
)
@click.pass_context
def render(ctx: click.Context, path: Path, plain: bool, output: Path | None) -> None:
    """Render a markdown note."""
    renderer = NoteRenderer(ctx.obj["config"])
    source = path.read_text(encoding="utf-8")

    try:
        if plain:
            result = asyncio.run(renderer.strip(source))
        else:
            result = renderer.render(source)
    except DiagramRenderError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise HandledRenderError() from e
    except yaml.YAMLError as e:
        console.print(f"[red]Error:[/red] Invalid front matter in {path}: {e}")
        raise HandledRenderError() from e

    if output is None:
        click.echo(result)
        return

    output.write_text(result, encoding="utf-8")
    console.print(f"[green]✓ Wrote[/green] [cyan]{output}[/cyan]")


@main.command(name="config")
@click.option("--yaml", "as_yaml", is_flag=True, help="Print the configuration as YAML")
@click.pass_context
def show_config(ctx: click.Context, as_yaml: bool) -> None:
    """Show the active configuration."""
    config: NotemarkConfig = ctx.obj["config"]
    if as_yaml:
        click.echo(config.dump_yaml())
        return

    console.print("\n[bold blue]Current Configuration:[/bold blue]")
    console.print(_config_table(config))
