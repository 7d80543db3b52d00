import logging
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from ferroapi.config import ApiConfig, get_config
from ferroapi.exceptions import ConfigurationError, FerroAPIError
from ferroapi.generator import Generator

console = Console(stderr=True)
app = typer.Typer(
    name='ferroapi',
    help='Generate Rust client code from OpenAPI specifications',
    no_args_is_help=True,
)


def _load_config(config: str | None, path: str | None) -> ApiConfig:
    if config:
        return get_config(config)
    try:
        return get_config()
    except ConfigurationError:
        if path is None:
            raise
        return ApiConfig()


@app.command()
def generate(
    path: Annotated[
        str | None,
        typer.Argument(help='Path or URL of the OpenAPI document'),
    ] = None,
    config: Annotated[
        str | None,
        typer.Option('--config', '-c', help='Path to configuration file (YAML or JSON)'),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option('--output', '-o', help='File to write the generated code to'),
    ] = None,
    module_name: Annotated[
        str | None,
        typer.Option('--module-name', '-m', help='Name of the generated Rust module'),
    ] = None,
    types: Annotated[
        bool | None,
        typer.Option('--types/--no-types', help='Only emit type definitions'),
    ] = None,
    traits: Annotated[
        bool | None,
        typer.Option('--traits/--no-traits', help='Also emit a trait for the client'),
    ] = None,
    format_code: Annotated[
        bool | None,
        typer.Option('--format/--no-format', help='Run rustfmt over the generated code'),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option('--verbose', '-v', help='Enable debug logging'),
    ] = False,
) -> None:
    """Generate Rust client code for an OpenAPI document.

    Options given on the command line override the configuration file,
    which is looked up the same way as without --config when omitted.

    Examples:
        ferroapi generate petstore.yaml
        ferroapi generate petstore.yaml -o src/api.rs --module-name petstore
        ferroapi generate --config ferroapi.yaml
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        settings = _load_config(config, path)
        overrides = {
            'path': path,
            'output': output,
            'module_name': module_name,
            'types': types,
            'traits': traits,
            'format': format_code,
        }
        overrides = {key: value for key, value in overrides.items() if value is not None}
        if overrides:
            settings = ApiConfig(**{**settings.model_dump(), **overrides})

        with Progress(
            SpinnerColumn(),
            TextColumn('[progress.description]{task.description}'),
            console=console,
            transient=settings.output is None,
        ) as progress:
            task = progress.add_task(f'Generating code for {settings.path}...', total=None)
            result = Generator(settings).generate()
            progress.update(task, description=f'Code generation completed for {settings.path}!')

    except FerroAPIError as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f'[red]Invalid option:[/red] {escape(str(e))}')
        raise typer.Exit(1)

    if settings.output:
        console.print(f'[dim]Generated file:[/dim] {result}')
    else:
        typer.echo(result, nl=False)


@app.command()
def version() -> None:
    """Show the version of ferroapi."""
    from ferroapi import __version__

    console.print(f'ferroapi version: {__version__}')


if __name__ == '__main__':
    app()
