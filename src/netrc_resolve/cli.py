from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

import click

from .core.errors import InvalidHostError, NetrcSourceError
from .core.model import Configuration, RawRecord, ValidatedEntry
from .core.resolver import NetrcResolver
from .core.util import default_netrc_path, insecure_permissions
from . import __version__

MASK = "********"

file_option = click.option(
    "--file",
    "netrc_file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="NETRC",
    help="netrc file to read (default: $NETRC or ~/.netrc)",
)


@click.group()
@click.version_option(__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log parser decisions to stderr")
def main(verbose: bool) -> None:
    """netrc-resolve: look up credentials in a netrc file like curl does."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load(netrc_file: Optional[Path]) -> NetrcResolver:
    return NetrcResolver.from_path(netrc_file or default_netrc_path())


def load_config(resolver: NetrcResolver) -> Configuration:
    try:
        return resolver.config
    except NetrcSourceError as exc:
        raise click.ClickException(str(exc))


def _record_dict(record: Union[RawRecord, ValidatedEntry], show_password: bool) -> dict:
    data = {"login": record.login, "password": record.password}
    if isinstance(record, RawRecord):
        data["account"] = record.account
    if data["password"] is not None and not show_password:
        data["password"] = MASK
    return data


@main.command()
@click.argument("host")
@file_option
@click.option("--raw", is_flag=True, help="Show the unvalidated record, account included")
@click.option("--json", "as_json", is_flag=True, help="Output JSON for scripting")
@click.option("--show-password", is_flag=True, help="Print the password instead of a mask")
def lookup(host: str, netrc_file: Optional[Path], raw: bool, as_json: bool, show_password: bool) -> None:
    """Show the credentials that apply to HOST."""
    resolver = load(netrc_file)
    load_config(resolver)
    try:
        if raw:
            record: RawRecord | ValidatedEntry | None = resolver.raw.lookup(host)
        else:
            record = resolver.lookup(host)
    except InvalidHostError as exc:
        raise click.BadParameter(str(exc), param_hint="HOST")

    if record is None:
        click.echo(f"No credentials for {host}", err=True)
        raise SystemExit(1)

    data = _record_dict(record, show_password)
    if as_json:
        click.echo(json.dumps({"host": str(resolver.raw.host(host)), **data}, indent=2))
        return

    click.echo(f"host: {resolver.raw.host(host)}")
    for key, value in data.items():
        if value is not None:
            click.echo(f"{key}: {value}")


@main.command()
@file_option
@click.option("--json", "as_json", is_flag=True, help="Output JSON for scripting")
def hosts(netrc_file: Optional[Path], as_json: bool) -> None:
    """List the machines defined in the netrc file."""
    config = load_config(load(netrc_file))
    names = [str(h) for h in config.hosts]
    if as_json:
        click.echo(json.dumps({"hosts": names, "default": config.default is not None}, indent=2))
        return
    for name in names:
        click.echo(name)
    if config.default is not None:
        click.echo("(default)")


@main.command()
@file_option
@click.option("--json", "as_json", is_flag=True, help="Output JSON for scripting")
def audit(netrc_file: Optional[Path], as_json: bool) -> None:
    """Report entries that can never be used and unsafe file permissions."""
    path = (netrc_file or default_netrc_path()).expanduser()
    config = load_config(NetrcResolver.from_path(path))

    incomplete = [str(h) for h, record in config.entries.items() if record.password is None]
    default_incomplete = config.default is not None and config.default.password is None
    mode = insecure_permissions(path)

    report = {
        "file": str(path),
        "host_count": len(config.entries),
        "has_default": config.default is not None,
        "hosts_without_password": incomplete,
        "default_without_password": default_incomplete,
        "insecure_permissions": oct(mode) if mode is not None else None,
    }
    if as_json:
        click.echo(json.dumps(report, indent=2))
        return

    click.echo(f"Hosts: {report['host_count']}")
    click.echo(f"Default entry: {'yes' if report['has_default'] else 'no'}")
    if incomplete:
        click.echo(f"Hosts without password: {', '.join(incomplete)}")
    if default_incomplete:
        click.echo("Default entry has no password")
    if mode is not None:
        click.echo(f"File is accessible by other users (mode {oct(mode)})")
    if not any([incomplete, default_incomplete, mode is not None]):
        click.echo("No issues detected")
