"""CLI entry point for route-reader."""

import fnmatch
import logging
import sys
from pathlib import Path

import click

from route_reader.config import load_config
from route_reader.errors import ResourceLoadError
from route_reader.loader import load_resources
from route_reader.model import Document, PathItem
from route_reader.output.serialize import detect_format, dump
from route_reader.reader.reader import Reader


def _filter_paths(document: Document, patterns: tuple[str, ...]) -> Document:
    """Keep operations matching any "METHOD /path" or "/path-glob" pattern."""
    paths: dict[str, PathItem] = {}
    for path, item in document.paths.items():
        kept = PathItem()
        for verb, op in item.operations().items():
            for pattern in patterns:
                method, _, glob = pattern.strip().rpartition(" ")
                if method and method.lower() != verb:
                    continue
                if fnmatch.fnmatch(path, glob):
                    setattr(kept, verb, op)
                    break
        if kept.operations():
            paths[path] = kept
    return document.model_copy(update={"paths": paths})


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Route Reader: build OpenAPI documents from decorated resource classes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("targets", nargs=-1, required=True)
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file; stdout when omitted.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "yaml", "json"]), help="Output format.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="Reader settings YAML.")
@click.option("--app-dir", default=".", type=click.Path(path_type=Path), help="Directory added to the import path.")
@click.option("--only", multiple=True, help='Keep matching operations, e.g. "POST /pets" or "/pets/*".')
@click.option("--strict", is_flag=True, help="Exit with status 1 when any operation fails.")
@click.option("--workers", default=None, type=int, help="Read resource classes on a thread pool.")
def scan(
    targets: tuple[str, ...],
    output: Path | None,
    fmt: str,
    config_path: Path | None,
    app_dir: Path,
    only: tuple[str, ...],
    strict: bool,
    workers: int | None,
):
    """Scan resource classes given as module:Class references."""
    app_dir = str(app_dir.resolve())
    if app_dir not in sys.path:
        sys.path.insert(0, app_dir)

    try:
        resources = load_resources(list(targets))
    except ResourceLoadError as e:
        raise click.ClickException(str(e)) from e

    reader = Reader(config=load_config(config_path))
    result = reader.scan(resources, max_workers=workers)
    document = _filter_paths(result.document, only) if only else result.document

    for failure in result.failures:
        click.echo(f"error: {failure}", err=True)

    if fmt == "auto":
        fmt = detect_format(output)
    text = dump(document, fmt)
    if output is None:
        click.echo(text, nl=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        click.echo(f"Wrote {len(document.paths)} paths to {output}", err=True)

    if strict and result.failures:
        sys.exit(1)
