# triage.py
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from guidelines import CATEGORY_INFO, DEFAULT_GUIDELINE, GUIDELINES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Baseline:
    """Least severe category: both values must be within limits."""
    category: str
    systolic_max: Optional[int]
    diastolic_max: Optional[int]

    def matches(self, systolic: float, diastolic: float) -> bool:
        return _at_most(systolic, self.systolic_max) and _at_most(diastolic, self.diastolic_max)


@dataclass(frozen=True)
class AsymmetricBand:
    """Systolic inside its own band while diastolic stays at or below its max."""
    category: str
    systolic_min: int
    systolic_max: int
    diastolic_max: int

    def matches(self, systolic: float, diastolic: float) -> bool:
        return self.systolic_min <= systolic <= self.systolic_max and diastolic <= self.diastolic_max


@dataclass(frozen=True)
class MinTrigger:
    """Either value at or above its min is enough."""
    category: str
    systolic_min: Optional[int]
    diastolic_min: Optional[int]

    def matches(self, systolic: float, diastolic: float) -> bool:
        return _at_least(systolic, self.systolic_min) or _at_least(diastolic, self.diastolic_min)


Rule = Union[Baseline, AsymmetricBand, MinTrigger]


@dataclass(frozen=True)
class Guideline:
    key: str
    name: str
    description: str
    categories: Tuple[str, ...]
    thresholds: Dict[str, Dict[str, Dict[str, int]]]
    rules: Tuple[Rule, ...]
    reference_lines: Dict[str, List[Dict]]

    @property
    def baseline(self) -> str:
        return self.categories[0]


@dataclass(frozen=True)
class CategoryInfo:
    key: str
    label: str
    color: str
    chart_color: str
    severity: int
    description: str = ""
    short_label: Optional[str] = None

    @property
    def badge(self) -> str:
        return self.short_label or self.label


def _at_most(value: float, bound: Optional[int]) -> bool:
    return bound is None or value <= bound


def _at_least(value: float, bound: Optional[int]) -> bool:
    return bound is not None and value >= bound


def _build_rule(category: str, threshold: Dict, is_first: bool) -> Rule:
    sys_range = threshold.get("systolic", {})
    dia_range = threshold.get("diastolic", {})

    if is_first:
        if "min" in sys_range or "min" in dia_range:
            raise ValueError(f"Baseline category '{category}' must not have a lower bound")
        return Baseline(category, sys_range.get("max"), dia_range.get("max"))

    if "max" in dia_range and "min" not in dia_range and "min" in sys_range and "max" in sys_range:
        return AsymmetricBand(category, sys_range["min"], sys_range["max"], dia_range["max"])

    if "min" not in sys_range and "min" not in dia_range:
        raise ValueError(f"Category '{category}' has no lower bound to trigger on")
    return MinTrigger(category, sys_range.get("min"), dia_range.get("min"))


def compile_guideline(raw: Dict) -> Guideline:
    """Turn a raw guideline table into a Guideline with one match rule per category.

    Raises ValueError for an empty category list, a category with no threshold
    entry, or a baseline category that carries a lower bound.
    """
    categories = list(raw.get("categories") or [])
    thresholds = raw.get("thresholds") or {}
    if not categories:
        raise ValueError(f"Guideline '{raw.get('key')}' has no categories")

    missing = [c for c in categories if c not in thresholds]
    if missing:
        raise ValueError(f"Guideline '{raw.get('key')}' has no thresholds for: {', '.join(missing)}")

    rules = tuple(_build_rule(c, thresholds[c], i == 0) for i, c in enumerate(categories))
    return Guideline(
        key=raw["key"],
        name=raw.get("name", raw["key"]),
        description=raw.get("description", ""),
        categories=tuple(categories),
        thresholds=thresholds,
        rules=rules,
        reference_lines=raw.get("reference_lines", {"systolic": [], "diastolic": []}),
    )


_REGISTRY: Dict[str, Guideline] = {key: compile_guideline(raw) for key, raw in GUIDELINES.items()}

_CATEGORY_INFO: Dict[str, CategoryInfo] = {
    key: CategoryInfo(key=key, **info) for key, info in CATEGORY_INFO.items()
}


# -------------------------
# Registry
# -------------------------
def get_guideline(key: Optional[str]) -> Optional[Guideline]:
    if not key:
        return None
    return _REGISTRY.get(key)


def list_guidelines() -> List[Guideline]:
    return list(_REGISTRY.values())


def resolve_guideline_key(key: Optional[str], default: str = DEFAULT_GUIDELINE) -> Tuple[str, bool]:
    """
    Returns:
      key: a registered guideline key
      fell_back: True when the requested key was absent or unknown
    """
    if key and key in _REGISTRY:
        return key, False
    if default not in _REGISTRY:
        default = DEFAULT_GUIDELINE
    if key:
        logger.warning("Unknown BP guideline '%s', using '%s'", key, default)
    return default, True


# -------------------------
# Resolver
# -------------------------
def _usable(value) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        return value > 0
    except TypeError:
        return False


def get_bp_category(systolic, diastolic, guideline_key: str = DEFAULT_GUIDELINE) -> Optional[str]:
    """Most severe matching category for the reading, or None when it can't be classified."""
    if not _usable(systolic) or not _usable(diastolic):
        return None

    guideline = get_guideline(guideline_key)
    if guideline is None:
        return None

    for rule in reversed(guideline.rules):
        if rule.matches(systolic, diastolic):
            return rule.category

    return guideline.baseline


# -------------------------
# Metadata
# -------------------------
def get_category_info(category: Optional[str]) -> CategoryInfo:
    return _CATEGORY_INFO.get(category or "normal", _CATEGORY_INFO["normal"])


def get_guideline_categories(guideline_key: str) -> List[CategoryInfo]:
    guideline = get_guideline(guideline_key)
    if guideline is None:
        return []
    return [get_category_info(c) for c in guideline.categories]


def get_threshold_table(guideline_key: str) -> List[Dict]:
    """Ordered threshold rows for rendering reference tables and bands."""
    guideline = get_guideline(guideline_key)
    if guideline is None:
        return []

    rows = []
    for rule in guideline.rules:
        threshold = guideline.thresholds[rule.category]
        rows.append({
            "category": rule.category,
            "label": get_category_info(rule.category).label,
            "rule": type(rule).__name__,
            "systolic_min": threshold.get("systolic", {}).get("min"),
            "systolic_max": threshold.get("systolic", {}).get("max"),
            "diastolic_min": threshold.get("diastolic", {}).get("min"),
            "diastolic_max": threshold.get("diastolic", {}).get("max"),
        })
    return rows


def format_range(low: Optional[int], high: Optional[int]) -> str:
    if low is None and high is None:
        return "any"
    if low is None:
        return f"≤ {high}"
    if high is None:
        return f"≥ {low}"
    return f"{low}-{high}"


def get_reference_lines(guideline_key: str) -> Dict[str, List[Dict]]:
    guideline = get_guideline(guideline_key) or _REGISTRY[DEFAULT_GUIDELINE]
    return guideline.reference_lines


def get_reference_zones(
    guideline_key: str,
    systolic_range: Tuple[int, int] = (70, 200),
    diastolic_range: Tuple[int, int] = (40, 130),
) -> List[Dict]:
    """
    Rectangles for a diastolic (x) vs systolic (y) scatter chart.
    Each zone: {"x1", "x2", "y1", "y2", "category"}; upper edges are exclusive.
    """
    guideline = get_guideline(guideline_key)
    if guideline is None:
        return []

    y_min, y_max = systolic_range
    x_min, x_max = diastolic_range

    def clamp(v, lo, hi):
        return max(lo, min(hi, v))

    def edge(bound, lo, hi):
        return hi if bound is None else clamp(bound, lo, hi)

    zones: List[Dict] = []

    def add(x1, x2, y1, y2, category):
        if x2 > x1 and y2 > y1:
            zones.append({"x1": x1, "x2": x2, "y1": y1, "y2": y2, "category": category})

    triggers = [r for r in guideline.rules if isinstance(r, MinTrigger)]
    for rule in guideline.rules:
        if isinstance(rule, Baseline):
            add(x_min, edge(None if rule.diastolic_max is None else rule.diastolic_max + 1, x_min, x_max),
                y_min, edge(None if rule.systolic_max is None else rule.systolic_max + 1, y_min, y_max),
                rule.category)
        elif isinstance(rule, AsymmetricBand):
            add(x_min, edge(rule.diastolic_max + 1, x_min, x_max),
                edge(rule.systolic_min, y_min, y_max), edge(rule.systolic_max + 1, y_min, y_max),
                rule.category)
        else:
            idx = triggers.index(rule)
            nxt = triggers[idx + 1] if idx + 1 < len(triggers) else None
            s_lo = edge(rule.systolic_min, y_min, y_max)
            d_lo = edge(rule.diastolic_min, x_min, x_max)
            s_hi = y_max if nxt is None else edge(nxt.systolic_min, y_min, y_max)
            d_hi = x_max if nxt is None else edge(nxt.diastolic_min, x_min, x_max)
            add(x_min, d_lo, s_lo, s_hi, rule.category)
            add(d_lo, d_hi, y_min, s_hi, rule.category)

    return zones
