"""CLI entry point for openapi-request-factory."""

import json
from pathlib import Path

import click
import yaml

from openapi_request_factory.builder.request import RequestFactory
from openapi_request_factory.errors import RequestFactoryError
from openapi_request_factory.logging import configure_logging
from openapi_request_factory.parser.base import ExampleContext
from openapi_request_factory.parser.openapi import detect_format, find_operation, iter_operations, load_document


def _load_openapi(doc_path: Path) -> dict:
    doc = load_document(doc_path)
    if detect_format(doc) == "unknown":
        raise click.ClickException(f"'{doc_path}' is not an OpenAPI or Swagger document (no 'openapi' or 'swagger' key)")
    return doc


def _load_example(values_path: Path | None) -> ExampleContext:
    """Read params/headers/host for the example from a YAML file."""
    if values_path is None:
        return ExampleContext()
    data = yaml.safe_load(values_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise click.BadParameter("values file must contain a mapping", param_hint="--values")
    return ExampleContext(
        request_params=data.get("params"),
        request_headers=data.get("headers"),
        host=data.get("host"),
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Increase log verbosity for troubleshooting.")
def main(verbose: bool):
    """OpenAPI Request Factory: build concrete requests from OpenAPI operations."""
    configure_logging(verbose=verbose)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
def operations(doc_path: Path):
    """List the operations declared in an OpenAPI document."""
    try:
        doc = _load_openapi(doc_path)
        for metadata in iter_operations(doc):
            click.echo(f"{metadata.operation.verb.upper()} {metadata.path_item.template}")
    except RequestFactoryError as e:
        raise click.ClickException(e.message) from e


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("-m", "--method", required=True, help="HTTP verb of the operation, e.g. get.")
@click.option("-p", "--path", "template", required=True, help="Path template of the operation, e.g. /pets/{id}.")
@click.option("--values", "values_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML file with params, headers and host for the example.")
def build(doc_path: Path, method: str, template: str, values_path: Path | None):
    """Build the request for one operation and print it as JSON."""
    try:
        doc = _load_openapi(doc_path)
        metadata = find_operation(doc, method, template)
        example = _load_example(values_path)
        request = RequestFactory(metadata, example, document=doc).build_request()
    except RequestFactoryError as e:
        raise click.ClickException(e.message) from e

    click.echo(json.dumps(request.model_dump(), indent=2, ensure_ascii=False, default=str))
