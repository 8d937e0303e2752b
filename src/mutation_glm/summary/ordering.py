"""Ordering and feature subsetting of posterior rows."""

from __future__ import annotations

import math
from collections.abc import Iterable

import structlog

from mutation_glm.summary.errors import FeatureLookupError, NumericError
from mutation_glm.summary.extract import PosteriorRow

__all__ = ["order_and_filter", "sort_by_mean"]

log = structlog.get_logger()


def sort_by_mean(rows: Iterable[PosteriorRow]) -> list[PosteriorRow]:
    """Stable ascending sort on posterior mean.

    Raises
    ------
    NumericError
        If any mean is NaN or infinite, or any sd is negative or not finite.
    """
    rows = list(rows)
    bad = [r.parameter_name for r in rows if not math.isfinite(r.mean)]
    if bad:
        raise NumericError(
            f"Non-finite posterior mean for: {', '.join(bad)}",
            parameters=bad,
            stage="order",
        )
    bad = [r.parameter_name for r in rows if not (math.isfinite(r.sd) and r.sd >= 0)]
    if bad:
        raise NumericError(
            f"Invalid posterior sd for: {', '.join(bad)}",
            parameters=bad,
            stage="order",
        )
    return sorted(rows, key=lambda r: r.mean)


def order_and_filter(
    rows: Iterable[PosteriorRow],
    features: Iterable[str] | None = None,
    strict_subset: bool = True,
) -> list[PosteriorRow]:
    """Sort rows by mean, then optionally keep only the requested features.

    Filtering happens after sorting, so the result is always a subsequence
    of the full sorted order.

    Parameters
    ----------
    rows : Iterable[PosteriorRow]
        Extracted posterior rows.
    features : Iterable[str], optional
        Parameter names to keep. None keeps everything; an empty collection
        keeps nothing.
    strict_subset : bool, default True
        If True, unknown feature names raise FeatureLookupError. If False,
        they are logged and ignored.

    Returns
    -------
    list[PosteriorRow]
        Rows sorted ascending by mean (ties keep input order).

    Raises
    ------
    FeatureLookupError
        If strict_subset is set and some requested names are not present.
    NumericError
        If a posterior mean or sd is not finite.
    """
    ordered = sort_by_mean(rows)
    if features is None:
        return ordered

    if isinstance(features, str):
        features = [features]
    # Keep request order for error messages, drop duplicates
    requested = list(dict.fromkeys(features))
    available = {r.parameter_name for r in ordered}
    missing = [name for name in requested if name not in available]
    if missing:
        if strict_subset:
            raise FeatureLookupError(missing)
        log.warning("unknown_features_dropped", missing=missing)

    wanted = set(requested)
    return [r for r in ordered if r.parameter_name in wanted]
