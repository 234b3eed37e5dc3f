"""Tests for folio.routing.links: delegated link interception."""

from folio.routing.browser import Element, HeadlessBrowser
from folio.routing.links import LinkInterceptor
from folio.routing.router import Router


def _setup(prefixes: tuple[str, ...] = ("/blog", "/admin")) -> tuple[HeadlessBrowser, Router, list[str]]:
    browser = HeadlessBrowser("/")
    visited: list[str] = []
    router = Router(browser)
    router.register("/apps", lambda: visited.append("/apps"))
    router.register("/apps/:slug", lambda params: visited.append(params["slug"]))
    LinkInterceptor(router, prefixes).attach(browser.document)
    return browser, router, visited


def _link(browser: HeadlessBrowser, href: str | None) -> Element:
    anchor = Element("a") if href is None else Element("a", href=href)
    browser.document.body.append_child(anchor)
    return anchor


class TestShouldIntercept:
    def test_root_relative(self) -> None:
        interceptor = LinkInterceptor(Router(HeadlessBrowser()), ("/blog",))
        assert interceptor.should_intercept("/apps") is True

    def test_external(self) -> None:
        interceptor = LinkInterceptor(Router(HeadlessBrowser()))
        assert interceptor.should_intercept("https://example.com/") is False

    def test_protocol_relative(self) -> None:
        interceptor = LinkInterceptor(Router(HeadlessBrowser()))
        assert interceptor.should_intercept("//cdn.example.com/x.js") is False

    def test_mailto_and_fragment(self) -> None:
        interceptor = LinkInterceptor(Router(HeadlessBrowser()))
        assert interceptor.should_intercept("mailto:hello@example.com") is False
        assert interceptor.should_intercept("#top") is False

    def test_missing_href(self) -> None:
        interceptor = LinkInterceptor(Router(HeadlessBrowser()))
        assert interceptor.should_intercept(None) is False
        assert interceptor.should_intercept("") is False

    def test_passthrough_prefixes(self) -> None:
        interceptor = LinkInterceptor(Router(HeadlessBrowser()), ("/blog", "/admin"))
        assert interceptor.should_intercept("/blog") is False
        assert interceptor.should_intercept("/blog/entry/3") is False
        assert interceptor.should_intercept("/admin/create") is False

    def test_prefixes_are_configurable(self) -> None:
        interceptor = LinkInterceptor(Router(HeadlessBrowser()), ())
        assert interceptor.should_intercept("/blog") is True
        assert interceptor.passthrough_prefixes == ()


class TestClicks:
    def test_click_navigates(self) -> None:
        browser, router, visited = _setup()
        event = browser.document.click(_link(browser, "/apps/hotbox"))

        assert event.default_prevented is True
        assert visited == ["hotbox"]
        assert router.get_current_route() == "/apps/hotbox"
        assert [e.url for e in browser.pushed] == ["/apps/hotbox"]

    def test_click_on_child_of_link(self) -> None:
        browser, _router, visited = _setup()
        anchor = _link(browser, "/apps")
        label = anchor.append_child(Element("span"))

        event = browser.document.click(label)

        assert event.default_prevented is True
        assert visited == ["/apps"]

    def test_passthrough_link_left_alone(self) -> None:
        browser, _router, visited = _setup()
        event = browser.document.click(_link(browser, "/blog"))

        assert event.default_prevented is False
        assert visited == []
        assert browser.pushed == []

    def test_external_link_left_alone(self) -> None:
        browser, _router, visited = _setup()
        event = browser.document.click(_link(browser, "https://github.com/"))
        assert event.default_prevented is False
        assert visited == []

    def test_click_outside_links(self) -> None:
        browser, _router, visited = _setup()
        button = browser.document.body.append_child(Element("button"))
        event = browser.document.click(button)
        assert event.default_prevented is False
        assert visited == []

    def test_anchor_without_href(self) -> None:
        browser, _router, visited = _setup()
        event = browser.document.click(_link(browser, None))
        assert event.default_prevented is False
        assert visited == []
