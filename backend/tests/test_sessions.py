"""
Tests for the latest-request guard used by rapid re-uploads.
"""
import asyncio
import base64

import pytest

from image_fixtures import png_bytes, solid_rgba
from toolkit.config import config
from toolkit.services.colors.extract_api import handle_extract
from toolkit.services.sessions import RequestGuard, SessionRegistry
from toolkit.utils.metrics import get_metrics


class TestRequestGuard:
    """Test token ordering"""

    def test_tokens_increase(self):
        guard = RequestGuard()
        assert [guard.begin() for _ in range(3)] == [1, 2, 3]

    def test_latest_token_commits(self):
        guard = RequestGuard()
        token = guard.begin()

        assert guard.is_current(token)
        assert guard.commit(token, "result") is True
        assert guard.latest == "result"
        assert guard.committed_token == token

    def test_superseded_token_is_not_committed(self):
        guard = RequestGuard()
        old = guard.begin()
        new = guard.begin()

        assert guard.commit(new, "new") is True
        assert guard.commit(old, "old") is False
        assert guard.latest == "new"
        assert not guard.is_current(old)

    def test_nothing_committed_when_newer_still_running(self):
        guard = RequestGuard()
        old = guard.begin()
        guard.begin()

        assert guard.commit(old, "old") is False
        assert guard.latest is None
        assert guard.committed_token == 0


class TestSessionRegistry:
    """Test per-session isolation"""

    def test_sessions_independent(self):
        registry = SessionRegistry()
        a = registry.guard("a")
        b = registry.guard("b")

        a.commit(a.begin(), "from a")
        assert registry.latest("a") == "from a"
        assert registry.latest("b") is None
        assert b.begin() == 1

    def test_same_guard_returned(self):
        registry = SessionRegistry()
        assert registry.guard("x") is registry.guard("x")

    def test_unknown_session(self):
        assert SessionRegistry().latest("nope") is None

    def test_clear(self):
        registry = SessionRegistry()
        guard = registry.guard("x")
        guard.commit(guard.begin(), 1)
        registry.clear()
        assert registry.latest("x") is None

    def test_least_recently_used_session_evicted(self):
        registry = SessionRegistry(max_sessions=2)
        first = registry.guard("a")
        first.commit(first.begin(), "from a")
        registry.guard("b")
        registry.guard("c")

        assert len(registry) == 2
        assert registry.latest("a") is None
        assert registry.guard("a") is not first

    def test_recent_use_protects_from_eviction(self):
        registry = SessionRegistry(max_sessions=2)
        a = registry.guard("a")
        registry.guard("b")
        registry.guard("a")
        registry.guard("c")

        assert registry.guard("a") is a
        assert len(registry) == 2
        assert registry.latest("b") is None

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            SessionRegistry(max_sessions=0)


class TestConcurrentRequests:
    """Test that a slow older request never overwrites a newer one"""

    @pytest.mark.asyncio
    async def test_out_of_order_completion(self):
        guard = RequestGuard()

        async def request(delay, value):
            token = guard.begin()
            await asyncio.sleep(delay)
            return guard.commit(token, value)

        committed = await asyncio.gather(request(0.05, "old"), request(0, "new"))

        assert committed == [False, True]
        assert guard.latest == "new"

    @pytest.mark.asyncio
    async def test_superseded_extraction_is_stale(self):
        guard = RequestGuard()
        image_b64 = base64.b64encode(png_bytes(solid_rgba("#336699"))).decode("ascii")

        task = asyncio.create_task(handle_extract(image_b64=image_b64, guard=guard))
        # let the extraction take its token, then start a newer request
        await asyncio.sleep(0)
        guard.begin()
        response = await task

        assert response.stale is True
        assert response.request_token == 1
        assert guard.latest is None
        assert get_metrics().get_counters().get("color_extract_stale_total") == 1

    @pytest.mark.asyncio
    async def test_current_extraction_is_committed(self):
        guard = RequestGuard()
        image_b64 = base64.b64encode(png_bytes(solid_rgba("#336699"))).decode("ascii")

        response = await handle_extract(image_b64=image_b64, guard=guard)

        assert response.stale is False
        assert guard.latest is response
        assert response.dominant.hex == "#336699"

    @pytest.mark.asyncio
    async def test_requires_exactly_one_input(self):
        with pytest.raises(ValueError):
            await handle_extract()


class TestExtractDefaults:
    """Test that omitted extraction parameters come from config"""

    @pytest.mark.asyncio
    async def test_defaults_follow_config(self, monkeypatch):
        monkeypatch.setattr(config, "PALETTE_SIZE", 3)
        monkeypatch.setattr(config, "QUANTIZER_DEFAULT", "kmeans")
        image_b64 = base64.b64encode(png_bytes(solid_rgba("#336699"))).decode("ascii")

        response = await handle_extract(image_b64=image_b64)

        assert len(response.palette) == 3
        assert response.method == "kmeans"
