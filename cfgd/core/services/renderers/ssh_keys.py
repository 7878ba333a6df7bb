"""
SSH authorized-keys renderer.

Two system identities have fixed key files: ``root`` (whose home lives
under /home/root on the target) and ``netconfd``. Every other identity
is looked up in the account database; a missing account, an account
without a home directory, or a user with no keys is a no-op rather than
an error.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cfgd.core.models.action import ApplyResult, Receipt
from cfgd.core.models.config import UserAuth
from cfgd.core.models.template import GeneratedFile
from cfgd.core.security.input_validation import check_ssh_key, first_error
from cfgd.core.services.renderers.base import RenderContext, rejected

logger = logging.getLogger(__name__)

AUTHORIZED_KEYS = ".ssh/authorized_keys"


def resolve_key_file(user: UserAuth, ctx: RenderContext) -> tuple[str | None, str]:
    """Find the authorized_keys path for ``user``.

    Returns:
        (path, reason). ``path`` is None when the render is a no-op and
        ``reason`` says why.
    """
    fixed = ctx.paths.fixed_identities()
    if user.name in fixed:
        return fixed[user.name], "fixed identity"

    account = ctx.account_lookup(user.name)
    if account is None:
        return None, f"no such account: {user.name}"
    if not account.pw_dir:
        return None, f"account {user.name} has no home directory"
    if not user.ssh_keys:
        return None, f"no SSH keys for {user.name}"

    return str(Path(account.pw_dir) / AUTHORIZED_KEYS), "account lookup"


def render_authorized_keys(user: UserAuth, path: str) -> GeneratedFile:
    """One ``algo data comment`` line per key, in input order."""
    content = "".join(f"{key.line}\n" for key in user.ssh_keys)
    return GeneratedFile(path=path, content=content, reason=f"ssh keys for {user.name}")


def apply_ssh_keys(user: UserAuth, ctx: RenderContext) -> ApplyResult:
    """Fully replace the user's authorized_keys file."""
    result = ApplyResult(domain=f"ssh-keys:{user.name}")

    path, reason = resolve_key_file(user, ctx)
    if path is None:
        logger.debug("Skipping SSH keys: %s", reason)
        result.add(Receipt.skip(step="lookup", target=user.name, reason=reason))
        return result

    error = first_error(*(check_ssh_key(k.algo, k.data, k.comment) for k in user.ssh_keys))
    if error:
        rejected(result, path, error)
        return result

    made = result.add(ctx.writer.ensure_dir(Path(path).parent))
    if made.failed:
        return result

    for key in user.ssh_keys:
        logger.info("  Key: %s %s %s", key.algo, key.data, key.comment)

    result.add(ctx.writer.write_file(render_authorized_keys(user, path)))
    return result
