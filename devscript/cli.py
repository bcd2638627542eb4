# devscript/cli.py
"""
CLI interface for devscript.

Thin presentation layer over the pipeline, watch and config modules.
"""

import asyncio
import json
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from devscript.config.loader import get_config_path, load_config, save_config
from devscript.config.schema import DevScriptConfig, OAuthTokens
from devscript.llm.base import ProviderError
from devscript.llm.factory import available_providers, create_generator
from devscript.logging_config import configure_logging
from devscript.pipeline.runner import PipelineResult, run_pipeline
from devscript.script.aggregator import ScriptLoadError, discover_scripts
from devscript.watch.loop import watch_directory

app = typer.Typer(
    name="devscript",
    help="Compile .dev prompt scripts, send them to an LLM and apply the files it returns.",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Manage providers and credentials.", no_args_is_help=True)
app.add_typer(config_app, name="config")

_KEY_PROVIDERS = ("gemini", "openai", "anthropic")

TEMPLATE = """\
@role Senior Software Engineer
@vibe Stoic, concise, professional
@tech Python
@rule Keep functions small and focused
@not Global mutable state
@use src
@task
Explain the logic of the files in src and suggest improvements.
"""


def _run(coro):
    """Run async function from sync CLI context."""
    return asyncio.run(coro)


def _setup(verbose: bool = False, quiet: bool = False) -> DevScriptConfig:
    """Load .env and config, then configure logging."""
    load_dotenv(Path.cwd() / ".env")
    config = load_config()
    verbosity = "verbose" if verbose else "quiet" if quiet else config.output.verbosity
    configure_logging(verbosity, json_output=config.output.json_logs)
    return config


def _save_refreshed_tokens(tokens: OAuthTokens) -> None:
    """Persist refreshed OAuth tokens into the stored config."""
    config = load_config()
    config.gemini_oauth.tokens = tokens
    save_config(config)


def _print_result(console: Console, result: PipelineResult) -> None:
    if result.error_response:
        console.print(f"[yellow]⚠ {escape(result.response)}[/yellow]")
    elif not result.results:
        console.print("[yellow]⚠ No <file> blocks found in the response.[/yellow]")

    for item in result.results:
        if item.success:
            console.print(f"  [green]✓[/green] {escape(item.path)}")
        else:
            console.print(f"  [red]✗[/red] {escape(item.path)}: {escape(item.error_message or '')}")

    if result.saved_to:
        console.print(f"[dim]Saved response:[/dim] {result.saved_to}")

    color = "red" if result.failed else "green"
    console.print(f"[{color}]{result.summary()}[/{color}]")


@app.command()
def run(
    paths: list[Path] = typer.Argument(None, help="Script files or directories (default: current directory)"),
    provider: str = typer.Option(None, "--provider", "-p", help="Override the active provider"),
    save: bool = typer.Option(False, "--save", "-s", help="Save the raw response as markdown"),
    cwd: Path = typer.Option(None, "--cwd", help="Working directory for @use references and writes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Warnings only"),
):
    """Compile the scripts, call the provider once and apply the returned files."""
    config = _setup(verbose, quiet)
    console = Console(stderr=True)
    base_dir = cwd or Path.cwd()

    scripts = discover_scripts(paths or [base_dir], config.watch.extension)
    if not scripts:
        console.print(f"[red]✗ No {config.watch.extension} scripts found.[/red]")
        raise typer.Exit(1)

    try:
        generator = create_generator(config, provider, on_tokens_refreshed=_save_refreshed_tokens)
        result = _run(
            run_pipeline(
                scripts,
                generator,
                base_dir,
                hydration=config.hydration,
                save=save or config.output.save_responses,
            )
        )
    except (ProviderError, ScriptLoadError) as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _print_result(console, result)
    if result.failed:
        raise typer.Exit(1)


@app.command()
def prompt(
    paths: list[Path] = typer.Argument(None, help="Script files or directories (default: current directory)"),
    cwd: Path = typer.Option(None, "--cwd", help="Working directory for @use references"),
):
    """Print the compiled prompt without calling a provider."""
    config = _setup(quiet=True)
    console = Console(stderr=True)
    base_dir = cwd or Path.cwd()

    scripts = discover_scripts(paths or [base_dir], config.watch.extension)
    if not scripts:
        console.print(f"[red]✗ No {config.watch.extension} scripts found.[/red]")
        raise typer.Exit(1)

    try:
        result = _run(
            run_pipeline(scripts, None, base_dir, hydration=config.hydration, dry_run=True)
        )
    except ScriptLoadError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)

    typer.echo(result.prompt)
    console.print(f"[dim]~{result.token_estimate:,} tokens[/dim]")


@app.command()
def watch(
    directory: Path = typer.Argument(Path("."), help="Directory containing the scripts"),
    provider: str = typer.Option(None, "--provider", "-p", help="Override the active provider"),
    debounce: float = typer.Option(None, "--debounce", help="Quiet period in seconds"),
    save: bool = typer.Option(False, "--save", "-s", help="Save each raw response as markdown"),
):
    """Re-run the pipeline whenever a script in DIRECTORY changes. Ctrl+C to stop."""
    config = _setup()
    console = Console(stderr=True)
    base_dir = directory.resolve()
    extension = config.watch.extension

    # Fail fast on a bad provider before watching anything
    try:
        create_generator(config, provider)
    except ProviderError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)

    async def _action() -> None:
        run_config = load_config()
        scripts = discover_scripts([base_dir], extension)
        generator = create_generator(
            run_config, provider, on_tokens_refreshed=_save_refreshed_tokens
        )
        console.print(f"[cyan]◈ Running {len(scripts)} script(s)...[/cyan]")
        result = await run_pipeline(
            scripts,
            generator,
            base_dir,
            hydration=run_config.hydration,
            save=save or run_config.output.save_responses,
        )
        _print_result(console, result)

    console.print(f"[cyan]◈ Watching {base_dir} for *{extension} changes (Ctrl+C to stop)[/cyan]")
    try:
        _run(
            watch_directory(
                base_dir,
                _action,
                extension=extension,
                debounce=debounce or config.watch.debounce_seconds,
            )
        )
    except KeyboardInterrupt:
        typer.echo("\nStopped watching.", err=True)


@app.command()
def init(force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing template.dev")):
    """Create a template.dev starter script in the current directory."""
    target = Path.cwd() / "template.dev"
    if target.exists() and not force:
        typer.echo(f"Error: {target.name} already exists (use --force to overwrite).", err=True)
        raise typer.Exit(1)

    target.write_text(TEMPLATE, encoding="utf-8")
    typer.echo(f"Created {target.name}. Edit it and run: devscript run {target.name}")


def _mask(secret: str | None) -> str | None:
    if not secret:
        return secret
    return f"***{secret[-4:]}" if len(secret) > 8 else "***"


@config_app.command("show")
def config_show():
    """Print the configuration with secrets masked."""
    config = load_config()
    data = config.model_dump(mode="json")
    for name in _KEY_PROVIDERS:
        data[name]["api_key"] = _mask(data[name]["api_key"])
    data["gemini_oauth"]["client_secret"] = _mask(data["gemini_oauth"]["client_secret"])
    if data["gemini_oauth"]["tokens"]:
        data["gemini_oauth"]["tokens"] = "<stored>"

    typer.echo(f"# {get_config_path()}")
    typer.echo(json.dumps(data, indent=2))


@config_app.command("set-provider")
def config_set_provider(name: str = typer.Argument(..., help="Provider name")):
    """Select the provider used for runs."""
    name = name.strip().lower()
    if name not in available_providers():
        typer.echo(
            f"Error: unknown provider '{name}'. Available: {', '.join(available_providers())}",
            err=True,
        )
        raise typer.Exit(1)

    config = load_config()
    config.active_provider = name
    save_config(config)
    typer.echo(f"Active provider set to {name}.")


@config_app.command("set-key")
def config_set_key(
    provider: str = typer.Argument(..., help=f"One of: {', '.join(_KEY_PROVIDERS)}"),
    key: str = typer.Argument(..., help="API key"),
):
    """Store an API key for a key-based provider."""
    provider = provider.strip().lower()
    if provider not in _KEY_PROVIDERS:
        typer.echo(f"Error: '{provider}' does not use an API key.", err=True)
        raise typer.Exit(1)

    config = load_config()
    getattr(config, provider).api_key = key
    save_config(config)
    typer.echo(f"API key for {provider} saved.")


@config_app.command("set-tokens")
def config_set_tokens(
    tokens_file: Path = typer.Argument(..., help="JSON file with access_token/refresh_token/expiry"),
):
    """Import an OAuth token set for the gemini_oauth provider."""
    try:
        tokens = OAuthTokens.model_validate_json(tokens_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        typer.echo(f"Error: cannot read tokens from {tokens_file}: {e}", err=True)
        raise typer.Exit(1)

    if not (tokens.access_token or tokens.refresh_token):
        typer.echo("Error: token file has neither access_token nor refresh_token.", err=True)
        raise typer.Exit(1)

    config = load_config()
    config.gemini_oauth.tokens = tokens
    save_config(config)
    typer.echo("OAuth tokens saved for gemini_oauth.")


if __name__ == "__main__":
    app()
