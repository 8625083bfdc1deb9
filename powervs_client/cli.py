"""CLI for powervs-client.

This module provides a small command-line interface over the client facade
for inspecting a Power VS cloud instance.
"""
import click
from rich.console import Console
from rich.table import Table

from powervs_client.client import format_provider_id, new_client_minimal, new_validated_client
from powervs_client.config import ConfigError, load_config
from powervs_client.errors import InstanceNotFoundError, PowerVSError
from powervs_client.ibmcloud.secrets import SecretManager
from powervs_client.logging import configure_logging

console = Console()


def _fail(title: str, error: Exception) -> None:
    message = getattr(error, "message", None) or str(error)
    console.print(f"[red]{title}:[/red] {message}")
    raise SystemExit(1)


def _bound_client(ctx: click.Context):
    config = ctx.obj["config"]
    if not config.cloud_instance_id:
        _fail("Configuration error", ConfigError(
            "Cloud instance ID not configured. Use --cloud-instance-id or "
            "set POWERVS_CLOUD_INSTANCE_ID."
        ))
    try:
        return new_validated_client(
            config.credential_secret,
            config.credential_namespace,
            config.cloud_instance_id,
            debug=config.debug,
            config=config,
        )
    except (PowerVSError, ConfigError) as e:
        _fail("Bootstrap failed", e)


@click.group()
@click.version_option(version="0.1.0")
@click.option("--secret", "-s", help="Credentials secret name")
@click.option("--namespace", "-n", help="Credentials secret namespace")
@click.option("--cloud-instance-id", "-c", help="Power VS cloud instance ID")
@click.option("--debug", is_flag=True, default=None, help="Trace Power VS requests")
@click.pass_context
def cli(ctx, secret, namespace, cloud_instance_id, debug):
    """PowerVS - inspect and manage Power Virtual Server instances."""
    try:
        config = load_config(
            secret_override=secret,
            namespace_override=namespace,
            cloud_instance_id_override=cloud_instance_id,
            debug_override=debug,
        )
    except ConfigError as e:
        _fail("Configuration error", e)
    configure_logging(level="INFO" if config.debug else "WARNING", debug=config.debug)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.pass_context
def instances(ctx):
    """List PVM instances of the cloud instance."""
    client = _bound_client(ctx)
    try:
        result = client.list_instances()
    except PowerVSError as e:
        _fail("Listing failed", e)

    if not result.pvm_instances:
        console.print("No instances found.")
        return

    table = Table(title="PVM Instances")
    table.add_column("Name", style="cyan")
    table.add_column("Status")
    table.add_column("Provider ID")

    for instance in result.pvm_instances:
        status = instance.status or "unknown"
        status_style = {
            "ACTIVE": "green",
            "BUILD": "yellow",
            "SHUTOFF": "dim",
            "ERROR": "red",
        }.get(status, "white")
        table.add_row(
            instance.server_name or "",
            f"[{status_style}]{status}[/{status_style}]",
            format_provider_id(instance.pvm_instance_id or ""),
        )

    console.print(table)


@cli.command()
@click.argument("name")
@click.pass_context
def instance(ctx, name):
    """Show the PVM instance called NAME."""
    client = _bound_client(ctx)
    try:
        found = client.get_instance_by_name(name)
    except InstanceNotFoundError:
        console.print(f"[yellow]No instance named {name}[/yellow]")
        raise SystemExit(1)
    except PowerVSError as e:
        _fail("Lookup failed", e)

    console.print(f"[bold]Instance: {found.server_name}[/bold]")
    console.print(f"  ID: {found.pvm_instance_id}")
    console.print(f"  Status: {found.status}")
    console.print(f"  Provider ID: {format_provider_id(found.pvm_instance_id or '')}")
    for address in found.addresses:
        console.print(f"  Address: {address.get('ipAddress') or address.get('externalIP')}")


@cli.command()
@click.argument("instance_id")
@click.confirmation_option(prompt="Delete this instance?")
@click.pass_context
def delete(ctx, instance_id):
    """Delete the PVM instance INSTANCE_ID."""
    client = _bound_client(ctx)
    try:
        client.delete_instance(instance_id)
    except PowerVSError as e:
        _fail("Delete failed", e)
    console.print(f"[green]Instance {instance_id} deleted.[/green]")


@cli.command()
@click.pass_context
def networks(ctx):
    """List networks of the cloud instance."""
    client = _bound_client(ctx)
    try:
        result = client.list_networks()
    except PowerVSError as e:
        _fail("Listing failed", e)

    table = Table(title="Networks")
    table.add_column("Name", style="cyan")
    table.add_column("ID")
    table.add_column("Type")
    for network in result.networks:
        table.add_row(network.name or "", network.network_id or "", network.type or "")
    console.print(table)


@cli.command()
@click.pass_context
def images(ctx):
    """List boot images of the cloud instance."""
    client = _bound_client(ctx)
    try:
        result = client.list_images()
    except PowerVSError as e:
        _fail("Listing failed", e)

    table = Table(title="Images")
    table.add_column("Name", style="cyan")
    table.add_column("ID")
    table.add_column("State")
    for image in result.images:
        table.add_row(image.name or "", image.image_id or "", image.state or "")
    console.print(table)


@cli.command("service-instances")
@click.option("--api-key", envvar="IBMCLOUD_API_KEY", help="IBM Cloud API key (skips the secret)")
@click.pass_context
def service_instances(ctx, api_key):
    """List the account's Power VS service instances."""
    config = ctx.obj["config"]
    try:
        if not api_key:
            api_key = SecretManager().get_api_key(
                config.credential_secret, config.credential_namespace
            )
        client = new_client_minimal(api_key, config=config)
        result = client.list_service_instances()
    except (PowerVSError, ConfigError) as e:
        _fail("Listing failed", e)

    if not result:
        console.print("No Power VS service instances found.")
        return

    table = Table(title="Power VS Service Instances")
    table.add_column("Name", style="cyan")
    table.add_column("GUID")
    table.add_column("Zone")
    table.add_column("State")
    for svc in result:
        table.add_row(svc.name or "", svc.guid or "", svc.region_id or "", svc.state or "")
    console.print(table)


@cli.command("provider-id")
@click.argument("instance_id")
def provider_id(instance_id):
    """Print the node provider ID for INSTANCE_ID."""
    click.echo(format_provider_id(instance_id))


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
