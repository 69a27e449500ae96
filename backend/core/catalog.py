"""
Inventory browsing logic: filtering, sorting and grouping of RV units.

Everything here is pure; the filtered list depends only on the fetched
inventory and the current FilterState.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from core.pricing import discounted_price
from schemas.inventory import RV, GroupedRV

SORT_OPTIONS = ("price-asc", "price-desc", "year-desc", "year-asc", "name", "distance")

Predicate = Callable[[RV], bool]


@dataclass
class FilterState:
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    types: List[str] = field(default_factory=list)
    location_ids: List[int] = field(default_factory=list)
    search: str = ""
    sort_by: Optional[str] = None
    discount_rate: Optional[float] = None


def price_predicate(min_price: Optional[float], max_price: Optional[float], rate: Optional[float] = None) -> Predicate:
    # prices are compared on what the employee pays
    def check(rv: RV) -> bool:
        price = discounted_price(rv.price, rate)
        if min_price is not None and price < min_price:
            return False
        if max_price is not None and price > max_price:
            return False
        return True
    return check


def type_predicate(types: Sequence[str]) -> Predicate:
    wanted = set(types)
    return lambda rv: rv.type in wanted


def location_predicate(location_ids: Sequence[int]) -> Predicate:
    wanted = set(location_ids)
    return lambda rv: rv.cmf_id in wanted


def search_predicate(text: str) -> Predicate:
    needle = text.strip().lower()

    def check(rv: RV) -> bool:
        haystack = " ".join([rv.name, rv.stock, rv.type, rv.location, str(rv.year)]).lower()
        return needle in haystack
    return check


def build_predicates(state: FilterState) -> List[Predicate]:
    predicates: List[Predicate] = []
    if state.min_price is not None or state.max_price is not None:
        predicates.append(price_predicate(state.min_price, state.max_price, state.discount_rate))
    if state.types:
        predicates.append(type_predicate(state.types))
    if state.location_ids:
        predicates.append(location_predicate(state.location_ids))
    if state.search and state.search.strip():
        predicates.append(search_predicate(state.search))
    return predicates


def filter_inventory(units: Iterable[RV], predicates: Sequence[Predicate]) -> List[RV]:
    return [rv for rv in units if all(p(rv) for p in predicates)]


def sort_inventory(units: Iterable[RV], sort_by: Optional[str], distances: Optional[Dict[int, int]] = None) -> List[RV]:
    items = list(units)
    if not sort_by:
        return items
    if sort_by not in SORT_OPTIONS:
        raise ValueError(f"Unknown sort option: {sort_by}")

    if sort_by == "price-asc":
        return sorted(items, key=lambda rv: rv.price)
    if sort_by == "price-desc":
        return sorted(items, key=lambda rv: rv.price, reverse=True)
    if sort_by == "year-desc":
        return sorted(items, key=lambda rv: rv.year, reverse=True)
    if sort_by == "year-asc":
        return sorted(items, key=lambda rv: rv.year)
    if sort_by == "name":
        return sorted(items, key=lambda rv: rv.name.lower())

    # distance: units whose location has no known distance go last
    distances = distances or {}

    def distance_key(rv: RV) -> Tuple[int, float]:
        miles = distances.get(rv.cmf_id)
        return (1, 0) if miles is None else (0, miles)
    return sorted(items, key=distance_key)


def apply_filters(units: Iterable[RV], state: FilterState, distances: Optional[Dict[int, int]] = None) -> List[RV]:
    return sort_inventory(filter_inventory(units, build_predicates(state)), state.sort_by, distances)


def model_slug(manufacturer: str, make: str, model: str, year: Union[int, str]) -> str:
    parts = [str(p) for p in (manufacturer, make, model, year) if p]
    slug = "-".join(parts).lower()
    slug = re.sub(r"[^a-z0-9-]", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def rv_slug(rv: RV) -> str:
    return model_slug(rv.manufacturer, rv.make, rv.model, rv.year)


def _group_key(rv: RV) -> Tuple[str, str, str, int]:
    return (rv.manufacturer, rv.make, rv.model, rv.year)


def _build_group(units: List[RV]) -> GroupedRV:
    first = units[0]
    location_ids: List[int] = []
    for rv in units:
        if rv.cmf_id is not None and rv.cmf_id not in location_ids:
            location_ids.append(rv.cmf_id)
    prices = [rv.price for rv in units]
    return GroupedRV(
        slug=rv_slug(first),
        manufacturer=first.manufacturer,
        make=first.make,
        model=first.model,
        year=first.year,
        name=first.name,
        type=first.type,
        image_url=first.image_url,
        quantity=len(units),
        min_price=min(prices),
        max_price=max(prices),
        location_ids=location_ids,
        multiple_locations=len(location_ids) > 1,
        units=units,
    )


def group_inventory(items: Iterable[Union[RV, GroupedRV]]) -> List[GroupedRV]:
    """Collapse units with identical manufacturer/make/model/year into one entry.

    Already grouped entries are expanded back into their units first, so
    grouping a grouped list returns the same groups.
    """
    buckets: Dict[Tuple[str, str, str, int], List[RV]] = {}
    for item in items:
        units = item.units if isinstance(item, GroupedRV) else [item]
        for rv in units:
            buckets.setdefault(_group_key(rv), []).append(rv)
    return [_build_group(units) for units in buckets.values()]


def units_for_slug(units: Iterable[RV], slug: str) -> List[RV]:
    return [rv for rv in units if rv_slug(rv) == slug]


def type_counts(units: Iterable[RV]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for rv in units:
        counts[rv.type] = counts.get(rv.type, 0) + 1
    return counts
