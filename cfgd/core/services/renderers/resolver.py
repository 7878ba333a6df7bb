"""
Resolver renderer — systemd-resolved configuration.
"""

from __future__ import annotations

import logging

from cfgd.core.models.action import ApplyResult
from cfgd.core.models.config import DnsConfig
from cfgd.core.models.settings import ServiceTarget
from cfgd.core.models.template import GeneratedFile
from cfgd.core.security.input_validation import check_token, first_error
from cfgd.core.services.renderers.base import RenderContext, rejected

logger = logging.getLogger(__name__)


def render_resolver(config: DnsConfig, ctx: RenderContext) -> GeneratedFile:
    """Render resolved.conf. Pure: no I/O."""
    servers = "".join(f" {s}" for s in config.nameservers)
    domains = "".join(f" {d}" for d in config.search_domains)
    content = f"{ctx.header}[Resolve]\nDNS ={servers}\nDomains ={domains}\n"
    return GeneratedFile(path=ctx.paths.resolved_conf, content=content, reason="dns")


def apply_resolver(config: DnsConfig, ctx: RenderContext) -> ApplyResult:
    """Write resolved.conf and reload-or-restart the resolver.

    reload-or-restart keeps a running resolver serving while it picks up
    the new servers and search domains.
    """
    result = ApplyResult(domain="dns")

    error = first_error(
        *(check_token(s, "nameserver") for s in config.nameservers),
        *(check_token(d, "search domain") for d in config.search_domains),
    )
    if error:
        rejected(result, ctx.paths.resolved_conf, error)
        return result

    logger.info(
        "DNS servers: %s, search: %s",
        " ".join(config.nameservers) or "(none)",
        " ".join(config.search_domains) or "(none)",
    )

    written = result.add(ctx.writer.write_file(render_resolver(config, ctx)))
    if written.failed:
        return result

    result.add(ctx.systemctl("reload-or-restart", ServiceTarget.NAME_RESOLUTION))
    return result
