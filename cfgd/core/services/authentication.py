"""
Authentication orchestration — apply every user's SSH keys in order.

Passwords are accepted but have no system effect; they are held as
SecretStr and never logged.
"""

from __future__ import annotations

import logging

from cfgd.core.models.action import ApplyResult
from cfgd.core.models.config import AuthConfig
from cfgd.core.services.renderers.base import RenderContext
from cfgd.core.services.renderers.ssh_keys import apply_ssh_keys

logger = logging.getLogger(__name__)


def apply_authentication(auth: AuthConfig, ctx: RenderContext) -> ApplyResult:
    result = ApplyResult(domain="authentication")

    logger.debug("Users: %d", len(auth.users))
    for user in auth.users:
        # TODO: set the password hash once product confirms the field is meant to be applied
        logger.info(
            "User: %s, password: %s, ssh: %d",
            user.name,
            "set" if user.password is not None else "unset",
            len(user.ssh_keys),
        )
        result.extend(apply_ssh_keys(user, ctx))

    return result
