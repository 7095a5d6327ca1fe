"""Workspace slug derivation."""
import random
import pytest
from framework.exceptions.handler import ConflictException
from apps.workspaces.slug import SLUG_PATTERN, generate_unique_slug, slugify


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Acme", "acme"),
        ("Tesla Israel", "tesla-israel"),
        ("  --Hello,   World!!  ", "hello-world"),
        ("R&D / Ops 2024", "r-d-ops-2024"),
        ("Café Déjà", "caf-d-j"),
        ("!!!", "workspace"),
        ("", "workspace"),
    ],
)
def test_slugify(name, expected):
    assert slugify(name) == expected
    assert SLUG_PATTERN.match(slugify(name))


def test_slugify_is_deterministic():
    assert slugify("Big Co") == slugify("Big Co")


class FakeSlugs:
    def __init__(self, taken):
        self.taken = set(taken)
        self.checked = []

    async def exists(self, slug):
        self.checked.append(slug)
        return slug in self.taken


@pytest.mark.asyncio
async def test_unique_slug_uses_base_when_free():
    slugs = FakeSlugs([])
    assert await generate_unique_slug("Acme Corp", slugs.exists) == "acme-corp"
    assert slugs.checked == ["acme-corp"]


@pytest.mark.asyncio
async def test_colliding_name_gets_numeric_suffix():
    slugs = FakeSlugs(["acme"])
    slug = await generate_unique_slug("ACME", slugs.exists, rng=random.Random(7))
    assert slug != "acme"
    assert slug.startswith("acme-")
    suffix = int(slug.rsplit("-", 1)[1])
    assert 0 <= suffix <= 9999
    assert SLUG_PATTERN.match(slug)


@pytest.mark.asyncio
async def test_suffix_collision_retries():
    rng = random.Random(1)
    first = f"acme-{random.Random(1).randint(0, 9999)}"
    slugs = FakeSlugs(["acme", first])
    slug = await generate_unique_slug("Acme", slugs.exists, rng=rng)
    assert slug not in ("acme", first)
    assert len(slugs.checked) == 3


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts():
    async def always_taken(slug):
        return True

    with pytest.raises(ConflictException):
        await generate_unique_slug("Acme", always_taken, max_attempts=3)
