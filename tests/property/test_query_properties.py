"""Property tests for query string and URL encoding."""

from __future__ import annotations

import string
from urllib.parse import parse_qsl, urlsplit

from hypothesis import assume, given, settings, strategies as st

from hsc_fetch.core.request_executor import build_url, encode_query

UNRESERVED = set(string.ascii_letters + string.digits + "-._~")

keys = st.text(min_size=1, max_size=20)
scalars = st.one_of(
    st.text(max_size=30),
    st.integers(min_value=-10_000, max_value=10_000),
)
queries = st.dictionaries(keys, st.one_of(scalars, st.lists(scalars, max_size=4)), max_size=6)


def expected_pairs(query: dict) -> list[tuple[str, str]]:
    pairs = []
    for key, value in query.items():
        for item in value if isinstance(value, list) else [value]:
            pairs.append((key, str(item)))
    return pairs


class TestQueryEncodingProperties:
    """Properties of encode_query."""

    @given(query=queries)
    @settings(max_examples=200)
    def test_decoding_restores_pairs(self, query: dict) -> None:
        """Decoding the encoded string yields the original pairs in order."""
        encoded = encode_query(query)

        assert parse_qsl(encoded, keep_blank_values=True) == expected_pairs(query)

    @given(query=queries)
    @settings(max_examples=200)
    def test_only_unreserved_characters_are_literal(self, query: dict) -> None:
        """Reserved characters such as ``*`` and space never appear unencoded."""
        encoded = encode_query(query)

        assert set(encoded) <= UNRESERVED | {"%", "=", "&"}

    @given(query=queries)
    def test_none_values_never_encoded(self, query: dict) -> None:
        assume("\x00missing" not in query)
        with_nones = {**query, "\x00missing": None}

        assert encode_query(with_nones) == encode_query(query)


class TestBuildUrlProperties:
    """Properties of build_url."""

    @given(
        path=st.lists(
            st.text(alphabet=string.ascii_lowercase + string.digits, min_size=1, max_size=8),
            min_size=1,
            max_size=4,
        ),
        leading_slash=st.booleans(),
    )
    def test_single_slash_between_base_and_path(self, path: list[str], leading_slash: bool) -> None:
        joined = "/".join(path)
        url = build_url("https://api.example.com", f"/{joined}" if leading_slash else joined)

        assert url == f"https://api.example.com/{joined}"

    @given(query=queries)
    def test_query_goes_after_path(self, query: dict) -> None:
        url = build_url("https://api.example.com", "/items", query)
        parts = urlsplit(url)

        assert parts.path == "/items"
        assert parts.query == encode_query(query)
