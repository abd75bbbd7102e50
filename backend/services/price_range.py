from __future__ import annotations
from typing import Optional
import logging

from schemas import PriceRange
from services.errors import PriceConflictWarning

log = logging.getLogger(__name__)


def _conflict(msg: str) -> None:
    log.warning(f"PRICE_CONFLICT | {PriceConflictWarning(msg)}")


def reconcile_price(current: Optional[PriceRange], extracted_min: Optional[int],
                    extracted_max: Optional[int], bounds: Optional[PriceRange]) -> Optional[PriceRange]:
    """
    Merge an explicit price extraction into the held range.

    Rules, first match wins:
      1. min and max both given with min > max: ignore both.
      2. only min given and above the held max: held max goes back to the catalog max.
      3. only max given and below the held min: held min goes back to the catalog min.
      4. otherwise the extracted values replace the held ones.
    min <= max holds on return. If an extraction lies outside the catalog
    itself, the opposite bound collapses onto it (an empty, honest range).
    """
    if extracted_min is None and extracted_max is None:
        return current
    if bounds is None:
        # empty catalog: no price filtering possible
        return current

    if current is None or current.min_price > current.max_price:
        if current is not None:
            _conflict(f"held range {current.min_price}-{current.max_price} is inverted; using catalog bounds")
        current = bounds

    lo, hi = current.min_price, current.max_price

    if extracted_min is not None and extracted_max is not None:
        if extracted_min > extracted_max:
            _conflict(f"extracted min {extracted_min} > extracted max {extracted_max}; keeping {lo}-{hi}")
            return current
        lo, hi = extracted_min, extracted_max
    elif extracted_min is not None:
        if extracted_min > hi:
            _conflict(f"min {extracted_min} above held max {hi}; max reset to {bounds.max_price}")
            hi = bounds.max_price
        lo = extracted_min
        if lo > hi:
            _conflict(f"min {lo} above catalog max {hi}; range collapsed to {lo}")
            hi = lo
    else:
        if extracted_max < lo:
            _conflict(f"max {extracted_max} below held min {lo}; min reset to {bounds.min_price}")
            lo = bounds.min_price
        hi = extracted_max
        if lo > hi:
            _conflict(f"max {hi} below catalog min {lo}; range collapsed to {hi}")
            lo = hi

    result = PriceRange(min_price=lo, max_price=hi)
    log.info(f"PRICE_RECONCILED | before={current.min_price}-{current.max_price} | after={lo}-{hi}")
    return result
