"""Tests for folio.routing.pattern: normalization and :param matching."""

from folio.routing.pattern import (
    describe_path,
    match_route,
    normalize_path,
    parse_pattern,
    split_path,
)


class TestNormalizePath:
    def test_strips_trailing_slash(self) -> None:
        assert normalize_path("/about/") == "/about"

    def test_root_unchanged(self) -> None:
        assert normalize_path("/") == "/"

    def test_no_trailing_slash_unchanged(self) -> None:
        assert normalize_path("/apps/hotbox") == "/apps/hotbox"

    def test_strips_only_one_slash(self) -> None:
        assert normalize_path("/about//") == "/about/"


class TestSplitPath:
    def test_drops_empty_segments(self) -> None:
        assert split_path("//a///b/") == ["a", "b"]

    def test_root(self) -> None:
        assert split_path("/") == []


class TestParsePattern:
    def test_literal(self) -> None:
        segments = parse_pattern("/blog")
        assert len(segments) == 1
        assert segments[0].value == "blog"
        assert segments[0].is_param is False

    def test_param(self) -> None:
        segments = parse_pattern("/blog/:slug")
        assert segments[1].is_param is True
        assert segments[1].param_name == "slug"

    def test_root(self) -> None:
        assert parse_pattern("/") == []


class TestMatchRoute:
    def test_literal_match(self) -> None:
        assert match_route("/apps", "/apps") == {}

    def test_literal_mismatch(self) -> None:
        assert match_route("/apps", "/ideas") is None

    def test_single_param(self) -> None:
        assert match_route("/blog/:slug", "/blog/hello-world") == {"slug": "hello-world"}

    def test_multiple_params(self) -> None:
        assert match_route("/a/:x/:y", "/a/1/2") == {"x": "1", "y": "2"}

    def test_segment_count_must_agree(self) -> None:
        assert match_route("/a/:x/:y", "/a/1") is None
        assert match_route("/a/:x", "/a/1/2") is None

    def test_mixed_literal_and_param(self) -> None:
        assert match_route("/users/:id/posts", "/users/7/posts") == {"id": "7"}
        assert match_route("/users/:id/posts", "/users/7/comments") is None

    def test_root_matches_root(self) -> None:
        assert match_route("/", "/") == {}

    def test_empty_segments_ignored(self) -> None:
        assert match_route("/blog/:slug", "/blog//post") == {"slug": "post"}

    def test_case_sensitive(self) -> None:
        assert match_route("/About", "/about") is None

    def test_malformed_pattern_never_matches(self) -> None:
        assert match_route("/blog/:slug", "/blog") is None

    def test_captures_are_strings(self) -> None:
        params = match_route("/entry/:id", "/entry/42")
        assert params == {"id": "42"}
        assert isinstance(params["id"], str)


class TestDescribePath:
    def test_root_is_home_page(self) -> None:
        assert describe_path("/") == "home page"

    def test_slashes_become_spaces(self) -> None:
        assert describe_path("/apps/hotbox") == " apps hotbox"
