"""
Single-value apply — field-level changes keyed by dotted path.

Only ``system.hostname`` has a system effect. The name is validated
against RFC 1123 and handed to hostnamectl as its own argument.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from cfgd.core.models.action import ApplyResult, Receipt
from cfgd.core.security.input_validation import check_hostname
from cfgd.core.services.renderers.base import RenderContext, rejected

logger = logging.getLogger(__name__)

HOSTNAME_PATH = "system.hostname"


def apply_hostname(value: str, ctx: RenderContext) -> ApplyResult:
    result = ApplyResult(domain=HOSTNAME_PATH)

    if not ctx.hostname_enabled:
        result.add(Receipt.skip(step="command", target="hostnamectl", reason="hostname updates disabled"))
        return result

    error = check_hostname(value)
    if error:
        rejected(result, "hostnamectl set-hostname", error)
        return result

    result.add(ctx.runner.run(["hostnamectl", "set-hostname", value]))
    return result


_HANDLERS: dict[str, Callable[[str, RenderContext], ApplyResult]] = {
    HOSTNAME_PATH: apply_hostname,
}


def apply_value(path: str, value: str, ctx: RenderContext) -> ApplyResult:
    """Dispatch one dotted-path change to its handler, if any."""
    logger.debug('Parameter "%s" changed to "%s"', path, value)

    handler = _HANDLERS.get(path)
    if handler is None:
        result = ApplyResult(domain=path)
        result.add(Receipt.skip(step="dispatch", target=path, reason="no handler for this path"))
        return result

    return handler(value, ctx)
