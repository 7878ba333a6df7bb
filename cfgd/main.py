"""
cfgd — CLI entrypoint.

Usage:
    cfgd                      run the daemon
    cfgd -x -l 10.0.0.5       run with debug logging and remote syslog
    cfgd apply snapshot.yml   one reconciliation pass
    cfgd render snapshot.yml  print the artifacts that would be written
    cfgd check snapshot.yml   validate a snapshot
"""

from __future__ import annotations

import asyncio
import ipaddress
import json
import logging
import os
import sys
from pathlib import Path

import click

from cfgd import __version__
from cfgd.core.observability.logging_config import parse_level, setup_logging

logger = logging.getLogger(__name__)


def _validate_log_host(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> str | None:
    if value is None:
        return None
    try:
        return str(ipaddress.IPv4Address(value))
    except ValueError:
        raise click.BadParameter(f"Invalid IP address: '{value}'") from None


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="cfgd")
@click.option(
    "--log",
    "-l",
    "log_host",
    metavar="IP",
    default=None,
    callback=_validate_log_host,
    help="Send logs to a remote syslog collector at this IPv4 address.",
)
@click.option("-x", "--debug", "debug", is_flag=True, help="Enable debug logging.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to cfgd.yml (default: /etc/cfgd/cfgd.yml or $CFGD_CONFIG).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    log_host: str | None,
    debug: bool,
    config_path: str | None,
) -> None:
    """cfgd — apply structured system configuration to this host."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    level = "DEBUG" if debug else os.environ.get("CFGD_LOG_LEVEL", "INFO")
    setup_logging(
        level=level,
        log_file=os.environ.get("CFGD_LOG_FILE"),
        log_file_level=os.environ.get("CFGD_LOG_FILE_LEVEL"),
        syslog_host=log_host,
    )
    ctx.obj["log_level"] = parse_level(level)

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


# ── Helpers ─────────────────────────────────────────────────────────


def _load_settings(ctx: click.Context):
    from cfgd.core.config.loader import ConfigError, load_settings

    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _load_snapshot(path: str):
    from cfgd.core.config.loader import ConfigError, load_snapshot

    try:
        return load_snapshot(Path(path))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _build_reconciler(settings, mock: bool):
    from cfgd.adapters import MockCommandRunner, ShellCommandRunner
    from cfgd.core.engine.reconciler import Reconciler
    from cfgd.core.persistence.audit import AuditWriter
    from cfgd.core.services.renderers import RenderContext

    if mock:
        runner = MockCommandRunner()
    else:
        runner = ShellCommandRunner(timeout=settings.command_timeout)

    render_ctx = RenderContext(
        runner=runner,
        paths=settings.paths,
        services=settings.services,
        hostname_enabled=settings.hostname_enabled,
    )
    audit = AuditWriter(Path(settings.audit_log)) if settings.audit_log else None
    return Reconciler(render_ctx, audit=audit)


# ── Commands ────────────────────────────────────────────────────────


@cli.command()
@click.option("--mock", is_flag=True, help="Record commands instead of running them.")
@click.pass_context
def run(ctx: click.Context, mock: bool = False) -> None:
    """Run the daemon until SIGHUP, SIGINT or SIGTERM."""
    from cfgd.core.context import DaemonContext
    from cfgd.core.engine.event_loop import Daemon
    from cfgd.core.services.change_source import FileChangeSource

    settings = _load_settings(ctx)
    reconciler = _build_reconciler(settings, mock)

    sources = []
    if settings.source:
        sources.append(FileChangeSource(Path(settings.source), settings.poll_interval))
    else:
        logger.warning("No snapshot source configured, waiting for signals only")

    context = DaemonContext(log_level=ctx.obj.get("log_level", logging.INFO))
    daemon = Daemon(reconciler, context, sources)
    asyncio.run(daemon.run())


@cli.command()
@click.argument("snapshot", type=click.Path(exists=False))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--mock", is_flag=True, help="Record commands instead of running them.")
@click.pass_context
def apply(ctx: click.Context, snapshot: str, as_json: bool, mock: bool) -> None:
    """Apply SNAPSHOT once and report the outcome."""
    settings = _load_settings(ctx)
    config = _load_snapshot(snapshot)
    reconciler = _build_reconciler(settings, mock)

    report = reconciler.deliver(config)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        status_color = {"ok": "green", "partial": "yellow", "failed": "red"}
        click.secho(f"\n⚙️  {report.operation_id}", fg="cyan", bold=True)
        for result in report.results:
            icon = {"ok": "✅", "partial": "⚠️", "failed": "❌"}[result.status]
            click.echo(f"   {icon} {result.domain}: ", nl=False)
            click.secho(result.status, fg=status_color[result.status])
            for error in result.errors:
                click.secho(f"      {error}", fg="red")
        click.echo()
        click.echo(f"   {report.succeeded}/{report.total} steps ok ({report.duration_ms}ms)")
        click.echo()

    if report.status != "ok":
        sys.exit(1)


@cli.command()
@click.argument("snapshot", type=click.Path(exists=False))
@click.pass_context
def render(ctx: click.Context, snapshot: str) -> None:
    """Print the artifacts SNAPSHOT would produce, without writing them."""
    settings = _load_settings(ctx)
    config = _load_snapshot(snapshot)
    reconciler = _build_reconciler(settings, mock=True)

    try:
        files = reconciler.render(config)
    except ValueError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    for generated in files:
        click.secho(f"─── {generated.path} ───", fg="cyan")
        click.echo(generated.content, nl=False)
        click.echo()


@cli.command()
@click.argument("snapshot", type=click.Path(exists=False))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def check(snapshot: str, as_json: bool) -> None:
    """Validate SNAPSHOT without applying it."""
    from cfgd.core.config.loader import ConfigError, load_snapshot

    try:
        config = load_snapshot(Path(snapshot))
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({"valid": True, "domains": config.domains}, indent=2))
        return

    click.secho(f"✅ {snapshot} is valid", fg="green")
    if config.ntp is not None:
        click.echo(f"   ntp: {len(config.ntp.servers)} server(s)")
    if config.dns is not None:
        click.echo(f"   dns: {len(config.dns.nameservers)} nameserver(s)")
    if config.interfaces is not None:
        click.echo(f"   interfaces: {', '.join(config.interfaces.names) or 'none'}")
    if config.authentication is not None:
        click.echo(f"   users: {len(config.authentication.users)}")
    for path in config.values:
        click.echo(f"   {path}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
