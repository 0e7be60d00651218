"""
Click command line for emd.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .assembler import Document
from .blueprint import BlueprintEngine
from .config import REGIONS, ProviderConfig, Settings
from .errors import EmdError, PersistenceError
from .i18n import Labeler, Language
from .logging_setup import configure_logging
from .navigation import NavigationStateMachine, Screen
from .orchestrator import Orchestrator
from .plan import LoadBlueprintResources
from .provider import AwsProvider
from .store import (
    default_document_name, load_blueprints, load_settings, save_blueprints, save_document,
)

EXPORT_TIMEOUT = 600


def _provider_config(settings: Settings, region: Optional[str], profile: Optional[str]) -> ProviderConfig:
    return ProviderConfig(region=region or settings.default_region().code, profile=profile)


@click.group(invoke_without_command=True)
@click.option("--profile", default=None, help="AWS profile name")
@click.option("--region", default=None, type=click.Choice([r.code for r in REGIONS]), help="Initial AWS region")
@click.option("--log-level", default=None, help="Log level (default: EMD_LOG_LEVEL or INFO)")
@click.pass_context
def main(ctx, profile, region, log_level):
    """
    emd - browse AWS resources and export them as Markdown documents.

    Without a subcommand the interactive terminal UI starts.
    """
    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["region"] = region
    configure_logging(log_level)

    if ctx.invoked_subcommand is None:
        from .app import App
        from .tui import run_tui

        settings = load_settings()
        app = App(
            AwsProvider(),
            settings=settings,
            blueprints=load_blueprints(),
            config=_provider_config(settings, region, profile),
        )
        run_tui(app)


@main.command()
def version():
    """Print the emd version."""
    click.echo(__version__)


@main.command("blueprints")
def blueprints_cmd():
    """List stored blueprints."""
    store = load_blueprints()
    if not store.blueprints:
        click.echo("No blueprints")
        return
    for blueprint in store.blueprints:
        click.echo(f"{blueprint.name}\t{len(blueprint.resources)} resource(s)")


def export_blueprint(name: str, provider, config: ProviderConfig, language: Language,
                     timeout: float = EXPORT_TIMEOUT) -> Optional[Document]:
    """
    Load every resource of a stored blueprint and assemble the document.

    Returns:
        The document, or None if no blueprint has that name
    """
    store = load_blueprints()
    index = store.find(name)
    if index is None:
        return None

    labeler = Labeler(language)
    machine = NavigationStateMachine(labeler, screen=Screen.BLUEPRINT_DETAIL)
    engine = BlueprintEngine(store, save_blueprints, labeler)
    engine.open(index)

    orchestrator = Orchestrator(machine, provider, config, engine)
    orchestrator.request(LoadBlueprintResources())
    if not orchestrator.wait_idle(timeout):
        raise EmdError(f"Timed out loading blueprint '{name}'")
    return orchestrator.document


@main.command()
@click.argument("name")
@click.option("--output", "-o", default=None, help="Output file (default: <export_dir>/<name>.md)")
@click.option("--language", type=click.Choice([lang.value for lang in Language]), default=None,
              help="Document language (default: from settings)")
@click.pass_context
def export(ctx, name, output, language):
    """Export blueprint NAME as a Markdown document."""
    settings = load_settings()
    doc_language = Language(language) if language else settings.language
    config = _provider_config(settings, ctx.obj.get("region"), ctx.obj.get("profile"))

    try:
        document = export_blueprint(name, AwsProvider(), config, doc_language)
    except EmdError as e:
        click.echo(f"Export failed: {e}", err=True)
        sys.exit(1)

    if document is None:
        click.echo(f"Blueprint not found: {name}", err=True)
        sys.exit(1)

    path = output or str(Path(settings.export_dir).expanduser() / default_document_name(name))
    try:
        written = save_document(path, document.text)
    except PersistenceError as e:
        click.echo(f"Export failed: {e}", err=True)
        sys.exit(1)

    for resource in document.skipped:
        click.echo(f"Skipped {resource.resource_type.value} {resource.display()}", err=True)
    click.echo(f"Wrote {written}")


if __name__ == "__main__":
    main()
