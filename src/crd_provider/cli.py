"""Click CLI entry point for crd-provider."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler

from crd_provider.crd.discovery import discover_cluster_crds
from crd_provider.crd.extraction import extract_crds_from_paths
from crd_provider.errors import ProviderError
from crd_provider.openapi.resolver import SchemaResolver
from crd_provider.openapi.source import ClusterDocumentSource, DirectoryDocumentSource
from crd_provider.output.json_out import (
    render_attributes_json,
    render_resources_json,
    render_schema_json,
)
from crd_provider.output.terminal import render_attributes, render_resources, render_schema
from crd_provider.provider.provider import CrdProvider, provider_schema
from crd_provider.provider.registry import ResourceRegistry
from crd_provider.schema.mapper import AttributeMapper
from crd_provider.settings import load_settings


@dataclass
class CliOptions:
    kubeconfig: str | None
    kube_context: str | None
    crds: tuple[str, ...]
    openapi_dir: str | None
    settings: str | None
    output_format: str
    no_color: bool

    @property
    def kube_opts(self) -> dict[str, str | None]:
        return {"kubeconfig": self.kubeconfig, "kube_context": self.kube_context}


@click.group()
@click.version_option(package_name="crd-provider")
@click.option("--kubeconfig", default=None, help="Path to kubeconfig")
@click.option("--context", "kube_context", default=None, help="Kubernetes context to use")
@click.option(
    "--crds", multiple=True, type=click.Path(exists=True),
    help="Read CRDs from YAML file(s)/dir(s) instead of the cluster",
)
@click.option(
    "--openapi-dir", default=None, type=click.Path(exists=True, file_okay=False),
    help="Read OpenAPI v3 documents from <dir>/<group>/<version>.json",
)
@click.option("--settings", default=None, type=click.Path(), help="YAML settings file")
@click.option(
    "-o", "--output", "output_format",
    type=click.Choice(["terminal", "json"]),
    default="terminal",
    help="Output format",
)
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("-v", "--verbose", is_flag=True, help="Log dropped attributes and kubectl calls")
@click.pass_context
def main(
    ctx: click.Context,
    kubeconfig: str | None,
    kube_context: str | None,
    crds: tuple[str, ...],
    openapi_dir: str | None,
    settings: str | None,
    output_format: str,
    no_color: bool,
    verbose: bool,
) -> None:
    """crd-provider: typed resource schemas synthesized from cluster CRDs."""
    _configure_logging(verbose, no_color)
    ctx.obj = CliOptions(
        kubeconfig=kubeconfig,
        kube_context=kube_context,
        crds=crds,
        openapi_dir=openapi_dir,
        settings=settings,
        output_format=output_format,
        no_color=no_color,
    )


@main.command()
@click.option("--strict", is_flag=True, help="Exit non-zero if any resource failed to register")
@click.pass_obj
def resources(opts: CliOptions, strict: bool) -> None:
    """List the resource types derived from CRDs."""
    try:
        provider = _build_provider(opts)
        result = provider.resources()
    except ProviderError as e:
        _fail(e)

    if opts.output_format == "json":
        click.echo(render_resources_json(result, provider.provider_type_name))
    else:
        render_resources(result, provider.provider_type_name, no_color=opts.no_color)

    if strict and result.has_errors:
        sys.exit(1)


@main.command()
@click.argument("name")
@click.pass_obj
def schema(opts: CliOptions, name: str) -> None:
    """Print the attribute schema of resource type NAME."""
    try:
        provider = _build_provider(opts)
        descriptor = provider.find(name)
        resource_schema = descriptor.schema(provider.mapper)
    except ProviderError as e:
        _fail(e)

    type_name = provider.type_name(descriptor)
    if opts.output_format == "json":
        click.echo(render_schema_json(type_name, resource_schema))
    else:
        render_schema(type_name, resource_schema, no_color=opts.no_color)


@main.command("provider-schema")
@click.pass_obj
def provider_schema_cmd(opts: CliOptions) -> None:
    """Print the provider configuration schema."""
    attributes = provider_schema()
    if opts.output_format == "json":
        click.echo(render_attributes_json(attributes))
    else:
        render_attributes("provider", attributes, no_color=opts.no_color)


def _build_provider(opts: CliOptions) -> CrdProvider:
    """Wire sources, resolver, registry and mapper from CLI options."""
    settings = load_settings(opts.settings)

    if opts.crds:
        crds = extract_crds_from_paths(list(opts.crds))
    else:
        crds = discover_cluster_crds(**opts.kube_opts)

    if opts.openapi_dir:
        source = DirectoryDocumentSource(opts.openapi_dir)
    else:
        source = ClusterDocumentSource(**opts.kube_opts)

    resolver = SchemaResolver(source, settings.resolver_config)
    return CrdProvider(
        ResourceRegistry(crds, resolver),
        mapper=AttributeMapper(settings.mapper_config),
        provider_type_name=settings.provider_type_name,
    )


def _configure_logging(verbose: bool, no_color: bool) -> None:
    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=False,
        show_path=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _fail(error: ProviderError) -> NoReturn:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)
