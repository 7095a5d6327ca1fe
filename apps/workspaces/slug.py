"""Workspace slug derivation."""

import random
import re
from typing import Awaitable, Callable, Optional
from framework.config import settings
from framework.exceptions.handler import ConflictException

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
FALLBACK_SLUG = "workspace"


def slugify(name: str) -> str:
    """'Tesla Israel' -> 'tesla-israel'. Names with no usable characters become 'workspace'."""
    slug = _NON_ALNUM.sub("-", (name or "").lower()).strip("-")
    return slug or FALLBACK_SLUG


async def generate_unique_slug(
    name: str,
    exists: Callable[[str], Awaitable[bool]],
    rng: Optional[random.Random] = None,
    max_attempts: Optional[int] = None,
) -> str:
    """
    Return slugify(name) if unused, otherwise '<slug>-<0..9999>' until unused.

    The check and the later insert are not atomic; the unique index on
    workspaces.slug catches the losers of a race.
    """
    rng = rng or random
    base = slugify(name)
    if not await exists(base):
        return base

    attempts = max_attempts or settings.SLUG_MAX_ATTEMPTS
    for _ in range(attempts):
        candidate = f"{base}-{rng.randint(0, 9999)}"
        if not await exists(candidate):
            return candidate
    raise ConflictException("Could not allocate a unique workspace slug, try another name")
