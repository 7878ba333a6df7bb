"""
NTP renderer — systemd-timesyncd configuration.

The whole file is replaced on every pass so servers removed from the
configuration never linger. The time-sync unit is restarted only after
a successful write, and the administrative NTP toggle comes last
because it needs a manageable service.
"""

from __future__ import annotations

import logging

from cfgd.core.models.action import ApplyResult
from cfgd.core.models.config import NtpConfig
from cfgd.core.models.settings import ServiceTarget
from cfgd.core.models.template import GeneratedFile
from cfgd.core.security.input_validation import check_token, first_error
from cfgd.core.services.renderers.base import RenderContext, rejected

logger = logging.getLogger(__name__)


def render_ntp(config: NtpConfig, ctx: RenderContext) -> GeneratedFile:
    """Render timesyncd.conf. Pure: no I/O."""
    servers = "".join(f" {server}" for server in config.servers)
    content = f"{ctx.header}[Time]\nNTP ={servers}\n"
    return GeneratedFile(path=ctx.paths.timesyncd_conf, content=content, reason="ntp")


def apply_ntp(config: NtpConfig, ctx: RenderContext) -> ApplyResult:
    """Write timesyncd.conf, restart the unit, then set the NTP toggle."""
    result = ApplyResult(domain="ntp")

    error = first_error(*(check_token(s, "NTP server") for s in config.servers))
    if error:
        rejected(result, ctx.paths.timesyncd_conf, error)
        return result

    logger.info(
        "NTP %s, servers: %s",
        "enabled" if config.enabled else "disabled",
        ", ".join(config.servers) or "(none)",
    )

    written = result.add(ctx.writer.write_file(render_ntp(config, ctx)))
    if written.failed:
        return result

    result.add(ctx.systemctl("restart", ServiceTarget.TIME_SYNC))
    result.add(
        ctx.runner.run(["timedatectl", "set-ntp", "true" if config.enabled else "false"])
    )
    return result
