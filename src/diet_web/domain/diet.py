"""Diet-suitability tags: normalisation, threshold evaluation and display."""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

SODIUM_LIMIT_MG = 200.0
OBESITY_ENERGY_LIMIT_KCAL = 200.0
OBESITY_GLYCEMIC_LIMIT = 70.0
DIABETES_GLYCEMIC_LIMIT = 55.0

DISPLAY_STOPWORDS = frozenset({"mentah", "masakan"})

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class NutrientLevels:
    """Per-100g nutrient values used by the threshold rules."""

    sodium_mg: float | None = None
    energy_kcal: float | None = None
    glycemic_index: float | None = None


@dataclass(frozen=True)
class DietSuitabilityPartition:
    """Diet tags split into safe ones and ones that need caution."""

    safe: tuple[str, ...]
    warning: tuple[str, ...]


def normalize_diet_tags(raw: object) -> list[str]:
    """Flatten a raw diet-suitability field into trimmed, non-empty tags.

    The API sends one of: a comma-separated string, a list of strings, or a
    single-key mapping wrapping such a list. Other shapes yield no tags.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        return _clean(raw.split(","))
    if isinstance(raw, Mapping):
        values = list(raw.values())
        if values and isinstance(values[0], list | tuple):
            return _clean(values[0])
        return []
    if isinstance(raw, list | tuple):
        return _clean(raw)
    return []


def evaluate_diet_suitability(
    tags: Sequence[str], levels: NutrientLevels
) -> DietSuitabilityPartition:
    """Partition tags by whether the food's nutrients trip a risk threshold.

    Relative order within each bucket follows the input order.
    """
    safe: list[str] = []
    warning: list[str] = []
    for tag in tags:
        if _is_risky(tag, levels):
            warning.append(tag)
        else:
            safe.append(tag)
    return DietSuitabilityPartition(safe=tuple(safe), warning=tuple(warning))


def clean_display_label(label: str) -> str:
    """Drop boilerplate words from a label before it is shown."""
    tokens = [
        token
        for token in _WHITESPACE.split(label.strip())
        if token and token.lower() not in DISPLAY_STOPWORDS
    ]
    return " ".join(tokens)


def display_tags(tags: Iterable[str], limit: int | None = None) -> list[str]:
    """Return display labels for tags, skipping ones left empty by cleaning."""
    labels: list[str] = []
    for tag in tags:
        label = clean_display_label(tag)
        if not label:
            continue
        labels.append(label)
        if limit is not None and len(labels) >= limit:
            break
    return labels


def _is_risky(tag: str, levels: NutrientLevels) -> bool:
    text = tag.lower()
    sodium = levels.sodium_mg or 0.0
    energy = levels.energy_kcal or 0.0
    glycemic = levels.glycemic_index or 0.0
    if ("hypertension" in text or "heart" in text) and sodium > SODIUM_LIMIT_MG:
        return True
    if "obesity" in text and (
        energy > OBESITY_ENERGY_LIMIT_KCAL or glycemic > OBESITY_GLYCEMIC_LIMIT
    ):
        return True
    return "diabetes" in text and glycemic > DIABETES_GLYCEMIC_LIMIT


def _clean(values: Iterable[object]) -> list[str]:
    tags: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        stripped = value.strip()
        if stripped:
            tags.append(stripped)
    return tags
