"""Tests for the dense destination lookup."""

from backend.app.scheduling.density import DENSE_DESTINATIONS, is_dense_destination


def test_known_destination_is_dense() -> None:
    assert is_dense_destination("Paris", "France") is True
    assert is_dense_destination("Tokyo", "Japan") is True


def test_matching_is_case_insensitive_and_trimmed() -> None:
    assert is_dense_destination("  LONDON ", "united KINGDOM") is True


def test_city_must_match_its_country() -> None:
    assert is_dense_destination("Paris", "United States") is False


def test_unknown_or_missing_destination_is_not_dense() -> None:
    assert is_dense_destination("Springfield", "United States") is False
    assert is_dense_destination(None, "France") is False
    assert is_dense_destination("Paris", None) is False
    assert is_dense_destination(None, None) is False


def test_reference_list_is_normalized() -> None:
    for city, country in DENSE_DESTINATIONS:
        assert city == city.strip().lower()
        assert country == country.strip().lower()
