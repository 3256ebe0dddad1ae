"""Static reference list of dense urban destinations (practical public transit)."""

# (city, country), lowercase. Matching is case-insensitive on trimmed input.
DENSE_DESTINATIONS: frozenset[tuple[str, str]] = frozenset(
    {
        # Europe
        ("amsterdam", "netherlands"),
        ("athens", "greece"),
        ("barcelona", "spain"),
        ("berlin", "germany"),
        ("brussels", "belgium"),
        ("budapest", "hungary"),
        ("copenhagen", "denmark"),
        ("dublin", "ireland"),
        ("hamburg", "germany"),
        ("istanbul", "turkey"),
        ("lisbon", "portugal"),
        ("london", "united kingdom"),
        ("madrid", "spain"),
        ("milan", "italy"),
        ("moscow", "russia"),
        ("munich", "germany"),
        ("oslo", "norway"),
        ("paris", "france"),
        ("porto", "portugal"),
        ("prague", "czech republic"),
        ("rome", "italy"),
        ("stockholm", "sweden"),
        ("vienna", "austria"),
        ("warsaw", "poland"),
        ("zurich", "switzerland"),
        # Americas
        ("boston", "united states"),
        ("buenos aires", "argentina"),
        ("chicago", "united states"),
        ("mexico city", "mexico"),
        ("montreal", "canada"),
        ("new york", "united states"),
        ("rio de janeiro", "brazil"),
        ("san francisco", "united states"),
        ("santiago", "chile"),
        ("são paulo", "brazil"),
        ("toronto", "canada"),
        ("washington", "united states"),
        # Asia / Oceania
        ("bangkok", "thailand"),
        ("beijing", "china"),
        ("delhi", "india"),
        ("hong kong", "china"),
        ("kyoto", "japan"),
        ("melbourne", "australia"),
        ("mumbai", "india"),
        ("osaka", "japan"),
        ("seoul", "south korea"),
        ("shanghai", "china"),
        ("singapore", "singapore"),
        ("sydney", "australia"),
        ("taipei", "taiwan"),
        ("tokyo", "japan"),
    }
)


def _normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def is_dense_destination(city: str | None, country: str | None) -> bool:
    """Check whether a city/country pair is a known dense urban destination.

    Unknown or missing destinations are treated as not dense.
    """
    return (_normalize(city), _normalize(country)) in DENSE_DESTINATIONS
