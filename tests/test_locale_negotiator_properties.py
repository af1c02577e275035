"""Property-based tests for Accept-Language negotiation.

**Feature: walletsync-sync-layer, Property 1: Highest-weight supported locale wins**
**Feature: walletsync-sync-layer, Property 2: Unmatched headers fall back to the default**
**Feature: walletsync-sync-layer, Property 3: Equal weights keep header order**
"""

import structlog
from hypothesis import given, settings
from hypothesis import strategies as st

from walletsync.locale.negotiator import LocaleNegotiator, negotiate, parse_accept_language
from walletsync.models.config import DEFAULT_SUPPORTED_LOCALES, LocaleConfig

log = structlog.stdlib.get_logger()

SUPPORTED = set(DEFAULT_SUPPORTED_LOCALES)
UNSUPPORTED_TAGS = ["zh", "ja", "ru", "ar", "nl", "sv", "pl", "ko"]
REGIONS = ["", "-US", "-GB", "-FR", "-BR", "-CA", "-CH"]


@st.composite
def weighted_entry_strategy(draw: st.DrawFn, tags: list[str]) -> tuple[str, float]:
    """Generate a (tag with region, weight) pair, weight on a 0.1 grid."""
    tag = draw(st.sampled_from(tags)) + draw(st.sampled_from(REGIONS))
    weight = draw(st.integers(min_value=0, max_value=10)) / 10
    return tag, weight


def render_header(entries: list[tuple[str, float]]) -> str:
    return ",".join(f"{tag};q={weight}" for tag, weight in entries)


class TestHighestWeightWins:
    """Property 1: the supported entry with the highest weight is chosen.

    **Feature: walletsync-sync-layer, Property 1: Highest-weight supported locale wins**
    """

    def test_example_from_weighted_header(self) -> None:
        assert negotiate("es;q=0.5,fr;q=0.9", "en", {"en", "fr", "es"}) == "fr"

    def test_regional_tags_match_on_primary_subtag(self) -> None:
        assert negotiate("fr-FR;q=0.9,en;q=0.8", "en", SUPPORTED) == "fr"

    def test_entry_without_weight_counts_as_one(self) -> None:
        assert negotiate("de;q=0.9,pt-BR", "en", SUPPORTED) == "pt"

    @given(
        entries=st.lists(
            weighted_entry_strategy(DEFAULT_SUPPORTED_LOCALES + UNSUPPORTED_TAGS),
            min_size=1,
            max_size=8,
        )
    )
    @settings(max_examples=200)
    def test_result_has_maximal_weight_among_supported(
        self, entries: list[tuple[str, float]]
    ) -> None:
        header = render_header(entries)
        result = negotiate(header, "en", SUPPORTED)

        supported_entries = [(tag[:2], weight) for tag, weight in entries if tag[:2] in SUPPORTED]
        if not supported_entries:
            assert result == "en"
            return

        best_weight = max(weight for _, weight in supported_entries)
        expected = next(tag for tag, weight in supported_entries if weight == best_weight)
        assert result == expected, f"header={header!r}"


class TestDefaultFallback:
    """Property 2: absent, empty or unmatched headers yield the default.

    **Feature: walletsync-sync-layer, Property 2: Unmatched headers fall back to the default**
    """

    def test_absent_header(self) -> None:
        assert negotiate(None, "en", SUPPORTED) == "en"

    def test_empty_header(self) -> None:
        assert negotiate("", "fr", SUPPORTED) == "fr"

    def test_unsupported_only(self) -> None:
        assert negotiate("zh-CN;q=1.0", "en", SUPPORTED) == "en"

    def test_matching_is_case_sensitive(self) -> None:
        assert negotiate("FR-fr", "en", SUPPORTED) == "en"

    @given(header=st.text(max_size=60))
    @settings(max_examples=300)
    def test_never_raises_and_returns_supported(self, header: str) -> None:
        result = negotiate(header, "en", SUPPORTED)
        assert result in SUPPORTED

    def test_garbage_weight_is_treated_as_one(self) -> None:
        entries = parse_accept_language("it;q=abc,de;q=0.4")
        assert [(entry.tag, entry.weight) for entry in entries] == [("it", 1.0), ("de", 0.4)]
        assert negotiate("de;q=0.4,it;q=abc", "en", SUPPORTED) == "it"

    def test_weights_are_clamped(self) -> None:
        entries = parse_accept_language("es;q=7,pt;q=-2")
        assert [entry.weight for entry in entries] == [1.0, 0.0]


class TestStableOrdering:
    """Property 3: entries sharing a weight keep their left-to-right order.

    **Feature: walletsync-sync-layer, Property 3: Equal weights keep header order**
    """

    def test_equal_weights_first_listed_wins(self) -> None:
        assert negotiate("es;q=0.8,de;q=0.8,fr;q=0.8", "en", SUPPORTED) == "es"
        assert negotiate("de;q=0.8,es;q=0.8", "en", SUPPORTED) == "de"

    def test_implicit_and_explicit_full_weight_tie(self) -> None:
        assert negotiate("pt,fr;q=1.0", "en", SUPPORTED) == "pt"
        assert negotiate("fr;q=1.0,pt", "en", SUPPORTED) == "fr"

    @given(
        entries=st.lists(
            weighted_entry_strategy(DEFAULT_SUPPORTED_LOCALES + UNSUPPORTED_TAGS),
            min_size=1,
            max_size=10,
        )
    )
    @settings(max_examples=200)
    def test_parse_is_stable_sort_by_weight(self, entries: list[tuple[str, float]]) -> None:
        parsed = parse_accept_language(render_header(entries))

        weights = [entry.weight for entry in parsed]
        assert weights == sorted(weights, reverse=True)

        for first, second in zip(parsed, parsed[1:]):
            if first.weight == second.weight:
                assert first.position < second.position


class TestLocaleNegotiator:
    """The configured negotiator binds the default and supported set."""

    def test_uses_configured_default(self) -> None:
        negotiator = LocaleNegotiator(LocaleConfig(default_locale="de"))
        assert negotiator.negotiate(None) == "de"
        assert negotiator.negotiate("ja") == "de"

    def test_restricted_support_set(self) -> None:
        negotiator = LocaleNegotiator(
            LocaleConfig(default_locale="en", supported_locales=["en", "fr"])
        )
        assert negotiator.negotiate("es;q=0.9,fr;q=0.5") == "fr"
        assert negotiator.supported_locales == frozenset({"en", "fr"})
