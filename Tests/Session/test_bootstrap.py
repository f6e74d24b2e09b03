"""
Tests for cold-start routing.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from passport_vault.navigation.navigation_serializer import TransitionMode
from passport_vault.Session.bootstrap import BootstrapResolver, BootstrapSettings


@pytest.fixture
def setup_check():
    return AsyncMock(return_value=True)


@pytest.fixture
def resolver(setup_check, navigator, fast_bootstrap_settings):
    return BootstrapResolver(setup_check, navigator, settings=fast_bootstrap_settings)


class TestRouting:

    @pytest.mark.asyncio
    async def test_not_set_up_routes_to_onboarding(self, resolver, setup_check, navigator, recording_router):
        setup_check.return_value = False

        destination = await resolver.resolve(is_authenticated=False)
        await navigator.join()

        assert destination == "onboarding"
        assert recording_router.calls == [("onboarding", TransitionMode.REPLACE)]

    @pytest.mark.asyncio
    async def test_not_set_up_wins_over_authenticated_flag(self, resolver, setup_check, navigator, recording_router):
        setup_check.return_value = False

        await resolver.resolve(is_authenticated=True)
        await navigator.join()

        assert recording_router.destinations == ["onboarding"]

    @pytest.mark.asyncio
    async def test_set_up_without_session_routes_to_authentication(self, resolver, navigator, recording_router):
        destination = await resolver.resolve(is_authenticated=False)
        await navigator.join()

        assert destination == "authentication"
        assert recording_router.destinations == ["authentication"]

    @pytest.mark.asyncio
    async def test_set_up_with_session_routes_to_vault(self, resolver, navigator, recording_router):
        destination = await resolver.resolve(is_authenticated=True)
        await navigator.join()

        assert destination == "vault"
        assert recording_router.destinations == ["vault"]

    @pytest.mark.asyncio
    async def test_failed_setup_check_routes_to_onboarding(self, resolver, setup_check, navigator, recording_router):
        setup_check.side_effect = OSError("storage unavailable")

        destination = await resolver.resolve(is_authenticated=True)
        await navigator.join()

        assert destination == "onboarding"
        assert recording_router.destinations == ["onboarding"]

    @pytest.mark.asyncio
    async def test_non_boolean_setup_result_routes_to_onboarding(self, resolver, setup_check, navigator, recording_router):
        setup_check.return_value = None

        await resolver.resolve(is_authenticated=False)
        await navigator.join()

        assert recording_router.destinations == ["onboarding"]


class TestOneShot:

    @pytest.mark.asyncio
    async def test_second_resolve_does_not_enqueue_again(self, resolver, setup_check, navigator, recording_router):
        first = await resolver.resolve(is_authenticated=False)
        setup_check.return_value = False
        second = await resolver.resolve(is_authenticated=True)
        await navigator.join()

        assert first == second == "authentication"
        assert setup_check.await_count == 1
        assert recording_router.destinations == ["authentication"]

    @pytest.mark.asyncio
    async def test_concurrent_resolves_enqueue_once(self, resolver, navigator, recording_router):
        await asyncio.gather(resolver.resolve(False), resolver.resolve(False), resolver.resolve(True))
        await navigator.join()

        assert recording_router.destinations == ["authentication"]
        assert resolver.resolved is True


class TestSessionClearing:

    @pytest.mark.asyncio
    async def test_onboarding_clears_stale_session(self, setup_check, navigator):
        setup_check.return_value = False
        clear_session = AsyncMock()
        resolver = BootstrapResolver(setup_check, navigator, clear_session=clear_session)

        await resolver.resolve(is_authenticated=True)

        clear_session.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_session_kept_when_set_up(self, setup_check, navigator):
        clear_session = AsyncMock()
        resolver = BootstrapResolver(setup_check, navigator, clear_session=clear_session)

        await resolver.resolve(is_authenticated=True)

        clear_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_clear_still_routes_to_onboarding(self, setup_check, navigator, recording_router):
        setup_check.return_value = False
        clear_session = AsyncMock(side_effect=RuntimeError("boom"))
        resolver = BootstrapResolver(setup_check, navigator, clear_session=clear_session)

        await resolver.resolve(is_authenticated=False)
        await navigator.join()

        assert recording_router.destinations == ["onboarding"]


@pytest.mark.asyncio
async def test_minimum_splash_time_is_respected(setup_check, navigator):
    resolver = BootstrapResolver(setup_check, navigator, settings=BootstrapSettings(min_splash=0.05))
    loop = asyncio.get_running_loop()

    start = loop.time()
    await resolver.resolve(is_authenticated=False)

    assert loop.time() - start >= 0.04
