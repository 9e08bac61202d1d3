# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit Tests for the Resolver

Tests cache-first resolution, priority-ordered remote search, overlay
rules between remotes and speculative prefetching.
"""

import pytest
from conftest import FakeRemote

from seed.core.errors import NotFoundError
from seed.install.descriptors import DescriptorCache, PackageDescriptor
from seed.install.preparer import Preparer
from seed.install.resolver import Resolver
from seed.models import Origin


def make_resolver(*remotes):
    cache = DescriptorCache()
    preparer = Preparer()
    return Resolver(cache, list(remotes), preparer), cache, preparer


class TestResolver:
    """Test suite for Resolver.resolve"""

    @pytest.mark.asyncio
    async def test_cache_hit_skips_remotes(self, remote):
        resolver, cache, _ = make_resolver(remote)
        cached = PackageDescriptor(name="foo", version="1.0.0", origin=Origin.LOCAL)
        cache.insert(cached)

        assert await resolver.resolve("foo") is cached
        assert remote.list_calls == []

    @pytest.mark.asyncio
    async def test_resolves_from_remote(self, remote):
        remote.add("foo", "1.2.0", {"bar": "^1.0"})
        resolver, cache, _ = make_resolver(remote)

        descriptor = await resolver.resolve("foo", "^1.0")

        assert descriptor.key == ("foo", "1.2.0")
        assert descriptor.is_remote
        assert descriptor.remote is remote
        assert ("foo", "1.2.0") in cache
        query = remote.list_calls[0]
        assert query.name == "foo"
        assert query.version == "^1.0"
        assert query.exact is False

    @pytest.mark.asyncio
    async def test_stops_at_first_satisfying_remote(self, staging_root):
        """Later remotes are never queried once one satisfies the request"""
        first = FakeRemote("first", staging_root)
        second = FakeRemote("second", staging_root)
        first.add("foo", "1.0.0")
        second.add("foo", "1.0.0")
        resolver, _, _ = make_resolver(first, second)

        descriptor = await resolver.resolve("foo")

        assert descriptor.remote is first
        assert second.list_calls == []

    @pytest.mark.asyncio
    async def test_continues_after_remote_without_match(self, staging_root):
        first = FakeRemote("first", staging_root)
        second = FakeRemote("second", staging_root)
        second.add("foo", "2.0.0")
        resolver, _, _ = make_resolver(first, second)

        descriptor = await resolver.resolve("foo")

        assert descriptor.remote is second
        assert len(first.list_calls) == 1

    @pytest.mark.asyncio
    async def test_failing_remote_is_skipped(self, staging_root, caplog):
        """A remote list error is a warning, not a failure"""
        broken = FakeRemote("broken", staging_root)
        broken.list_error = ConnectionError("unreachable")
        working = FakeRemote("working", staging_root)
        working.add("foo", "1.0.0")
        resolver, _, _ = make_resolver(broken, working)

        descriptor = await resolver.resolve("foo")

        assert descriptor.remote is working
        assert "unreachable" in caplog.text

    @pytest.mark.asyncio
    async def test_not_found(self, remote):
        resolver, _, _ = make_resolver(remote)

        with pytest.raises(NotFoundError, match="missing-pkg not found"):
            await resolver.resolve("missing-pkg")

    @pytest.mark.asyncio
    async def test_first_remote_wins_same_version(self, staging_root):
        """A later remote never overrides a version an earlier remote listed"""
        first = FakeRemote("first", staging_root)
        second = FakeRemote("second", staging_root)
        first.add("foo", "1.0.0")
        second.add("foo", "1.0.0")
        second.add("foo", "1.1.0")
        first.ignore_filters = second.ignore_filters = True
        resolver, cache, _ = make_resolver(first, second)

        # 1.1.0 forces the search past the first remote
        descriptor = await resolver.resolve("foo", "1.1.0", exact=True)

        assert descriptor.remote is second
        assert cache.select("foo", "1.0.0", exact=True).remote is first

    @pytest.mark.asyncio
    async def test_prefetches_listed_candidates(self, remote):
        """Every listed candidate starts staging in the background"""
        remote.add("foo", "1.0.0")
        remote.add("foo", "1.1.0")
        resolver, _, preparer = make_resolver(remote)

        await resolver.resolve("foo")
        await resolver.wait_for_prefetches()

        assert sorted(remote.fetched("foo")) == ["1.0.0", "1.1.0"]
        assert len(preparer.staged()) == 2

    @pytest.mark.asyncio
    async def test_prefetch_errors_are_discarded(self, remote):
        remote.add("foo", "1.0.0")
        remote.fetch_error = OSError("disk full")
        resolver, _, _ = make_resolver(remote)

        descriptor = await resolver.resolve("foo")
        await resolver.wait_for_prefetches()

        assert descriptor.version == "1.0.0"

    @pytest.mark.asyncio
    async def test_invalid_listing_version_skipped(self, remote, caplog):
        """A listing whose version does not parse is skipped, not fatal"""
        remote.add("foo", "1.0.0")
        remote.add("foo", "not-a-version")
        resolver, cache, _ = make_resolver(remote)

        descriptor = await resolver.resolve("foo")
        await resolver.wait_for_prefetches()

        assert descriptor.version == "1.0.0"
        assert cache.versions("foo") == ["1.0.0"]
        assert remote.fetched("foo") == ["1.0.0"]
        assert "not-a-version" in caplog.text
