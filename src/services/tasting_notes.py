"""Catalog of recognised tasting-note keys.

Tasting notes are stored as an open key -> value mapping. These key sets
only drive form rendering and logging; unknown keys are always kept.
"""

from collections.abc import Mapping

WINE_NOTE_KEYS = frozenset(
    {
        "clarity",
        "intensityAppearance",
        "colour",
        "condition",
        "intensityNose",
        "aromaCharacteristics",
        "development",
        "sweetness",
        "acidity",
        "tannin",
        "alcohol",
        "body",
        "flavourIntensity",
        "flavourCharacteristics",
        "finish",
        "qualityLevel",
        "readiness",
    }
)

BEER_NOTE_KEYS = frozenset(
    {
        "beerColour",
        "beerClarity",
        "headRetention",
        "headColour",
        "maltAroma",
        "hopAroma",
        "fermentationAroma",
        "otherAroma",
        "maltFlavour",
        "hopFlavour",
        "bitterness",
        "fermentationFlavour",
        "balance",
        "finishAftertaste",
        "beerBody",
        "carbonation",
        "warmth",
        "creaminess",
        "overallImpression",
    }
)

CASUAL_NOTE_KEYS = frozenset(
    {
        "casualLooks",
        "casualSmell",
        "casualTaste",
        "casualDrinkability",
        "casualValue",
        "casualBuyAgain",
        "casualVibes",
    }
)

KNOWN_NOTE_KEYS = WINE_NOTE_KEYS | BEER_NOTE_KEYS | CASUAL_NOTE_KEYS

def unrecognized_note_keys(notes: Mapping[str, object] | None) -> list[str]:
    """Return keys of ``notes`` that are not in any known catalog, sorted."""
    if not notes:
        return []
    return sorted(key for key in notes if key not in KNOWN_NOTE_KEYS)
