# credential_flatfile/main.py

import typer
import structlog
from credential_flatfile.cli.helper_protocol import HelperProtocolRunner
from credential_flatfile.config.loader import ConfigLoader
from credential_flatfile.logging.logger import setup_logging
from credential_flatfile.secrets.errors import CredentialStoreError
from credential_flatfile.secrets.flatfile_backend import FlatfileBackend

__version__ = "0.1.0"
HELPER_NAME = "docker-credential-flatfile"

app = typer.Typer(add_completion=False, no_args_is_help=True)
logger = structlog.get_logger(__name__)


@app.callback()
def main(
    ctx: typer.Context,
    config: str = typer.Option(None, help="Path to configuration YAML file"),
    verbose: bool = typer.Option(False, help="Enable verbose logging on stderr"),
):
    """Docker credential helper backed by a locked JSON file."""
    try:
        settings = ConfigLoader(config_path=config).load()
    except (ValueError, OSError) as e:
        _fail(f"invalid configuration: {e}")
    setup_logging(verbose=verbose, log_format=settings['logging']['format'], level=settings['logging']['level'])
    backend = FlatfileBackend(
        path=settings['store']['path'],
        lock_timeout=settings['lock']['timeout'],
        strict=settings['store']['strict'],
    )
    ctx.obj = HelperProtocolRunner(backend, typer.get_text_stream("stdin"), typer.get_text_stream("stdout"))


@app.command()
def store(ctx: typer.Context):
    """Save credentials read as JSON from stdin."""
    _run(ctx, "store")


@app.command()
def get(ctx: typer.Context):
    """Print the credentials for the server URL read from stdin."""
    _run(ctx, "get")


@app.command()
def erase(ctx: typer.Context):
    """Remove the credentials for the server URL read from stdin."""
    _run(ctx, "erase")


@app.command("list")
def list_credentials(ctx: typer.Context):
    """Print every stored server URL with its username."""
    _run(ctx, "list")


@app.command()
def version():
    """Print the helper version."""
    typer.echo(f"{HELPER_NAME} {__version__}")


def _run(ctx: typer.Context, action: str) -> None:
    runner: HelperProtocolRunner = ctx.obj
    try:
        getattr(runner, action)()
    except CredentialStoreError as e:
        logger.error("Credential helper command failed", command=action, error=str(e))
        _fail(str(e))


def _fail(message: str) -> None:
    # The helper protocol reports errors on stdout with a non-zero exit status.
    typer.echo(message)
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
