"""Tests for folio.routing.router: page routing with browser side effects."""

import asyncio
import logging

import pytest

from folio.routing.browser import HeadlessBrowser
from folio.routing.router import ANNOUNCER_ID, Router


class Recorder:
    """A page handler that records every call."""

    def __init__(self) -> None:
        self.calls: list[dict[str, str]] = []

    def __call__(self, params: dict[str, str]) -> None:
        self.calls.append(params)


def _announcement(browser: HeadlessBrowser) -> str:
    region = browser.document.get_element_by_id(ANNOUNCER_ID)
    assert region is not None
    return region.text_content


@pytest.fixture
def browser() -> HeadlessBrowser:
    return HeadlessBrowser("/")


# =============================================================================
# Registration
# =============================================================================


class TestRegistration:
    def test_register_is_chainable(self, browser: HeadlessBrowser) -> None:
        router = Router(browser)
        assert router.register("/", Recorder()) is router
        assert router.set_not_found(Recorder()) is router

    def test_routes_keep_registration_order(self, browser: HeadlessBrowser) -> None:
        router = Router(browser).register("/b", Recorder()).register("/a", Recorder())
        assert [r.pattern for r in router.routes] == ["/b", "/a"]

    def test_current_route_starts_empty(self, browser: HeadlessBrowser) -> None:
        assert Router(browser).get_current_route() is None

    def test_set_not_found_replaces_previous(self, browser: HeadlessBrowser) -> None:
        first, second = Recorder(), Recorder()
        router = Router(browser).set_not_found(first).set_not_found(second)
        router.navigate("/missing")
        assert first.calls == []
        assert second.calls == [{}]


# =============================================================================
# Example scenarios
# =============================================================================


class TestScenarios:
    def test_initialize_at_apps(self) -> None:
        browser = HeadlessBrowser("/apps")
        home, apps = Recorder(), Recorder()
        router = Router(browser).register("/", home).register("/apps", apps)

        router.initialize()

        assert apps.calls == [{}]
        assert home.calls == []
        assert router.get_current_route() == "/apps"
        assert browser.scroll_resets == 0
        assert browser.pushed == []

    def test_navigate_to_parameterized_route(self, browser: HeadlessBrowser) -> None:
        post = Recorder()
        router = Router(browser).register("/blog/:slug", post)

        router.navigate("/blog/hello-world")

        assert [e.url for e in browser.pushed] == ["/blog/hello-world"]
        assert browser.pushed[0].state == {"path": "/blog/hello-world"}
        assert post.calls == [{"slug": "hello-world"}]
        assert browser.scroll_resets == 1

    def test_segment_count_mismatch_falls_to_not_found(self, browser: HeadlessBrowser) -> None:
        pair, missing = Recorder(), Recorder()
        router = Router(browser).register("/a/:x/:y", pair).set_not_found(missing)

        router.navigate("/a/1")

        assert pair.calls == []
        assert missing.calls == [{}]

    def test_no_match_without_not_found(
        self, browser: HeadlessBrowser, caplog: pytest.LogCaptureFixture
    ) -> None:
        home = Recorder()
        router = Router(browser).register("/", home)
        router.initialize()
        home.calls.clear()

        with caplog.at_level(logging.ERROR, logger="folio.router"):
            router.resolve("/nonexistent", True)

        assert home.calls == []
        assert "No route found for: /nonexistent" in caplog.text
        assert router.get_current_route() == "/"

    def test_duplicate_pattern_first_wins(self, browser: HeadlessBrowser) -> None:
        first, second = Recorder(), Recorder()
        router = Router(browser).register("/about", first).register("/about", second)

        router.navigate("/about")

        assert first.calls == [{}]
        assert second.calls == []


# =============================================================================
# Resolution rules
# =============================================================================


class TestResolution:
    def test_exact_beats_earlier_parameterized(self, browser: HeadlessBrowser) -> None:
        param, exact = Recorder(), Recorder()
        router = Router(browser).register("/blog/:slug", param).register("/blog/new", exact)

        router.navigate("/blog/new")

        assert exact.calls == [{}]
        assert param.calls == []

    def test_parameterized_in_registration_order(self, browser: HeadlessBrowser) -> None:
        first, second = Recorder(), Recorder()
        router = Router(browser).register("/:a/x", first).register("/y/:b", second)

        router.navigate("/y/x")

        assert first.calls == [{"a": "y"}]
        assert second.calls == []

    def test_trailing_slash_normalized(self, browser: HeadlessBrowser) -> None:
        about = Recorder()
        router = Router(browser).register("/about", about)

        router.navigate("/about/")

        assert about.calls == [{}]
        assert router.get_current_route() == "/about"

    def test_root_not_stripped(self, browser: HeadlessBrowser) -> None:
        home = Recorder()
        router = Router(browser).register("/", home)
        router.navigate("/")
        assert home.calls == [{}]
        assert router.get_current_route() == "/"

    def test_match_has_no_side_effects(self, browser: HeadlessBrowser) -> None:
        post = Recorder()
        router = Router(browser).register("/blog/:slug", post)

        found = router.match("/blog/x")

        assert found is not None
        assert found.params == {"slug": "x"}
        assert post.calls == []
        assert router.get_current_route() is None

    def test_not_found_updates_current_route(self, browser: HeadlessBrowser) -> None:
        router = Router(browser).set_not_found(Recorder())
        router.navigate("/nowhere/")
        assert router.get_current_route() == "/nowhere"

    def test_resolve_is_idempotent(self, browser: HeadlessBrowser) -> None:
        post = Recorder()
        router = Router(browser).register("/blog/:slug", post)
        router.resolve("/blog/a", False)
        router.resolve("/blog/a", False)
        assert post.calls == [{"slug": "a"}, {"slug": "a"}]
        assert router.get_current_route() == "/blog/a"

    def test_zero_argument_handler(self, browser: HeadlessBrowser) -> None:
        calls: list[str] = []
        router = Router(browser).register("/", lambda: calls.append("home"))
        router.initialize()
        assert calls == ["home"]

    def test_handler_exception_propagates(self, browser: HeadlessBrowser) -> None:
        def boom(_params: dict[str, str]) -> None:
            raise RuntimeError("render failed")

        router = Router(browser).register("/", boom)
        with pytest.raises(RuntimeError, match="render failed"):
            router.initialize()


# =============================================================================
# History and scroll
# =============================================================================


class TestHistory:
    def test_navigate_without_push(self, browser: HeadlessBrowser) -> None:
        router = Router(browser).register("/apps", Recorder())
        router.navigate("/apps", push_history=False)
        assert browser.pushed == []
        assert browser.scroll_resets == 1

    def test_back_re_resolves_without_scrolling(self) -> None:
        browser = HeadlessBrowser("/")
        home, apps = Recorder(), Recorder()
        router = Router(browser).register("/", home).register("/apps", apps)
        router.initialize()
        router.navigate("/apps")
        browser.scroll_to(500)

        browser.back()

        assert home.calls == [{}, {}]
        assert router.get_current_route() == "/"
        assert browser.scroll_y == 500
        assert browser.scroll_resets == 1
        assert len(browser.pushed) == 1

    def test_forward_after_back(self) -> None:
        browser = HeadlessBrowser("/")
        apps = Recorder()
        router = Router(browser).register("/", Recorder()).register("/apps", apps)
        router.initialize()
        router.navigate("/apps")
        browser.back()

        browser.forward()

        assert apps.calls == [{}, {}]
        assert router.get_current_route() == "/apps"

    def test_back_at_start_is_noop(self, browser: HeadlessBrowser) -> None:
        home = Recorder()
        Router(browser).register("/", home).initialize()
        browser.back()
        assert home.calls == [{}]


# =============================================================================
# Live region
# =============================================================================


class TestAnnouncements:
    def test_home_announcement(self, browser: HeadlessBrowser) -> None:
        Router(browser).register("/", Recorder()).initialize()
        assert _announcement(browser) == "Navigated to home page"

    def test_path_announcement(self, browser: HeadlessBrowser) -> None:
        router = Router(browser).register("/apps/:slug", Recorder())
        router.navigate("/apps/hotbox")
        assert _announcement(browser) == "Navigated to  apps hotbox"

    def test_region_attributes(self, browser: HeadlessBrowser) -> None:
        Router(browser).register("/", Recorder()).initialize()
        region = browser.document.get_element_by_id(ANNOUNCER_ID)
        assert region is not None
        assert region.class_name == "sr-only"
        assert region.get_attribute("role") == "status"
        assert region.get_attribute("aria-live") == "polite"
        assert region.get_attribute("aria-atomic") == "true"

    def test_region_created_once(self, browser: HeadlessBrowser) -> None:
        router = Router(browser).register("/", Recorder()).register("/apps", Recorder())
        router.initialize()
        router.navigate("/apps")
        router.navigate("/")
        regions = [e for e in browser.document.document_element.iter() if e.id == ANNOUNCER_ID]
        assert len(regions) == 1

    def test_not_found_announces_path(self, browser: HeadlessBrowser) -> None:
        router = Router(browser).set_not_found(Recorder())
        router.navigate("/missing/page/")
        assert _announcement(browser) == "Navigated to  missing page"

    def test_no_announcement_without_resolution(self, browser: HeadlessBrowser) -> None:
        Router(browser).resolve("/nowhere", True)
        assert browser.document.get_element_by_id(ANNOUNCER_ID) is None


# =============================================================================
# Async handlers
# =============================================================================


class TestAsyncHandlers:
    async def test_async_handler_is_not_awaited(self, browser: HeadlessBrowser) -> None:
        started = asyncio.Event()
        release = asyncio.Event()
        finished: list[str] = []

        async def slow(params: dict[str, str]) -> None:
            started.set()
            await release.wait()
            finished.append(params["slug"])

        router = Router(browser).register("/blog/:slug", slow)
        router.navigate("/blog/a")

        # navigate() returned before the handler finished
        assert finished == []
        await started.wait()
        release.set()
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert finished == ["a"]

    async def test_overlapping_navigations_both_run(self, browser: HeadlessBrowser) -> None:
        seen: list[str] = []

        async def page(params: dict[str, str]) -> None:
            await asyncio.sleep(0)
            seen.append(params["slug"])

        router = Router(browser).register("/p/:slug", page)
        router.navigate("/p/one")
        router.navigate("/p/two")
        await asyncio.sleep(0.01)

        assert sorted(seen) == ["one", "two"]
        assert router.get_current_route() == "/p/two"

    async def test_wait_pending_runs_handlers_to_completion(
        self, browser: HeadlessBrowser
    ) -> None:
        seen: list[str] = []

        async def page(params: dict[str, str]) -> None:
            await asyncio.sleep(0.01)
            seen.append(params["slug"])

        router = Router(browser).register("/p/:slug", page)
        router.navigate("/p/one")
        await router.wait_pending()

        assert seen == ["one"]

    async def test_wait_pending_reraises_handler_errors(self, browser: HeadlessBrowser) -> None:
        async def page() -> None:
            msg = "render failed"
            raise RuntimeError(msg)

        router = Router(browser).register("/", page)
        router.initialize()

        with pytest.raises(RuntimeError, match="render failed"):
            await router.wait_pending()

    async def test_wait_pending_with_nothing_scheduled(self, browser: HeadlessBrowser) -> None:
        router = Router(browser).register("/", lambda: None).initialize()
        await router.wait_pending()
        assert router.get_current_route() == "/"

    def test_async_handler_without_loop_is_dropped(
        self, browser: HeadlessBrowser, caplog: pytest.LogCaptureFixture
    ) -> None:
        async def page() -> None:
            raise AssertionError("should never run")

        router = Router(browser).register("/", page)
        with caplog.at_level(logging.WARNING, logger="folio.router"):
            router.initialize()

        assert router.get_current_route() == "/"
        assert "dropped" in caplog.text
