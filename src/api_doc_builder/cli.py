"""CLI entry point for api-doc-builder."""

import logging
from pathlib import Path

import click

from api_doc_builder.builder import BuildResult, TreeBuilder
from api_doc_builder.classify import CLASSIFIERS, get_classifier
from api_doc_builder.config import DocConfig, load_config
from api_doc_builder.errors import DocBuilderError, PipelineError
from api_doc_builder.handler.base import RenderEnvironment
from api_doc_builder.handler.registry import HANDLERS, get_handlers
from api_doc_builder.parser.detect import FORMATS, load_document
from api_doc_builder.parser.document import DescriptorDocument
from api_doc_builder.pipeline import PipelineReport, render

METADATA_FIELDS = ("title", "version", "description", "readme")


def _setup_logging(verbose: int) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )


def _resolve_config(config_path: Path | None, document: DescriptorDocument, **overrides) -> DocConfig:
    """Config file, then the source document's own metadata, then command-line flags."""
    config = load_config(config_path) if config_path else DocConfig()
    metadata = {field: getattr(document, field) for field in METADATA_FIELDS}
    return config.merged(**metadata).merged(**overrides)


def _echo_build(result: BuildResult) -> None:
    click.echo(f"Found {result.discovered} endpoints, {result.skipped} skipped.")
    for diagnostic in result.diagnostics:
        label = f" {diagnostic.name}" if diagnostic.name else ""
        kind = "" if diagnostic.kind == "endpoint" else f"{diagnostic.kind} "
        click.echo(f"  Skipped {kind}#{diagnostic.index}{label}: {diagnostic.reason}")


def _echo_render(report: PipelineReport) -> None:
    for handler_report in report.reports:
        if handler_report.ok:
            click.echo(f"  {handler_report.handler}: {len(handler_report.artifacts)} files")
            for path in handler_report.artifacts:
                click.echo(f"    Created {path}")
        else:
            click.echo(f"  {handler_report.handler}: failed ({handler_report.error})", err=True)


@click.group()
def main():
    """API Doc Builder — paginated API documentation from endpoint descriptors."""
    pass


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(file_okay=False, path_type=Path), default=None, help="Output directory.")
@click.option("--format", "fmt", default="auto", type=click.Choice(FORMATS), help="Input document format.")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="YAML config file.")
@click.option("--id", "doc_id", default=None, help="Name of the index file.")
@click.option("--title", default=None, help="Document title.")
@click.option("--doc-version", default=None, help="Documented API version.")
@click.option("--description", default=None, help="Document description.")
@click.option("--readme", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="File whose text becomes the readme chapter.")
@click.option("--classifier", default=None, type=click.Choice(list(CLASSIFIERS)), help="How endpoints are grouped.")
@click.option("--no-buckets", is_flag=True, default=False, help="Put every group in the default bucket.")
@click.option("--handler", "handlers", multiple=True, type=click.Choice(list(HANDLERS)), help="Output format, repeatable.")
@click.option("--ignore", multiple=True, help="Parameter type to leave out, repeatable.")
@click.option("--css", default=None, help="Stylesheet URL for HTML pages.")
@click.option("--base-url", default=None, help="Base URL for exported collections.")
@click.option("--parallel", is_flag=True, default=False, help="Run handlers concurrently.")
@click.option("-v", "--verbose", count=True, help="Log progress (-vv for debug).")
def build(
    source: Path,
    output: Path | None,
    fmt: str,
    config_path: Path | None,
    doc_id: str | None,
    title: str | None,
    doc_version: str | None,
    description: str | None,
    readme: Path | None,
    classifier: str | None,
    no_buckets: bool,
    handlers: tuple[str, ...],
    ignore: tuple[str, ...],
    css: str | None,
    base_url: str | None,
    parallel: bool,
    verbose: int,
):
    """Build documentation for the endpoints described in SOURCE."""
    _setup_logging(verbose)
    try:
        click.echo(f"Parsing {source} (format: {fmt})...")
        document = load_document(source, fmt)
        config = _resolve_config(
            config_path,
            document,
            id=doc_id,
            title=title,
            version=doc_version,
            description=description,
            readme=readme.read_text(encoding="utf-8") if readme else None,
            out=output,
            classifier=classifier,
            use_buckets=False if no_buckets else None,
            handlers=list(handlers),
            ignore=list(ignore),
            css=css,
            base_url=base_url,
            parallel=True if parallel else None,
        )

        builder = TreeBuilder(get_classifier(config.classifier, config.use_buckets), config.ignore)
        result = builder.build(
            document.endpoints,
            name=config.title,
            version=config.version,
            description=config.description,
            readme=config.readme,
            appendices=document.appendices,
        )
        _echo_build(result)

        click.echo(f"Rendering {', '.join(config.handlers)} into {config.out}...")
        env = RenderEnvironment(out=config.out, id=config.id, css=config.css, base_url=config.base_url)
        report = render(result.tree, get_handlers(config.handlers), env, parallel=config.parallel)
    except PipelineError as e:
        for handler_report in e.reports:
            click.echo(f"  {handler_report.handler}: failed ({handler_report.error})", err=True)
        raise click.ClickException(str(e)) from e
    except DocBuilderError as e:
        raise click.ClickException(str(e)) from e

    _echo_render(report)
    click.echo(f"Done! Wrote {len(report.written)} files, {len(report.failed)} handlers failed.")


@main.command("handlers")
def list_handlers():
    """List the available output handlers."""
    for name in HANDLERS:
        click.echo(name)
