from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

import pandas as pd

from .cells import coerce_or_nan
from .dataset import Dataset

_CENTS = Decimal("0.01")


def round_half_away(value: float, places: int = 2) -> float:
    """
    Round to `places` decimals, ties away from zero.

    The tie is decided on the shortest decimal form of the float (its repr),
    which is what the user sees in a spreadsheet: 1.005 -> 1.01,
    -2.675 -> -2.68. Python's round() would give 1.0 and -2.67 because of
    binary representation and banker's rounding.
    """
    # beyond 2**53 a float carries no fractional digits to round
    if not math.isfinite(value) or abs(value) >= 2 ** 53:
        return value
    quantum = _CENTS if places == 2 else Decimal(1).scaleb(-places)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    # normalise -0.0
    return float(rounded) + 0.0


@dataclass(frozen=True)
class ColumnAggregate:
    column_name: str
    value: float


@dataclass(frozen=True)
class NumericAggregates:
    """Per-column sum and average of one dataset, in header order."""
    sum: List[ColumnAggregate] = field(default_factory=list)
    average: List[ColumnAggregate] = field(default_factory=list)

    def for_metric(self, metric: str) -> List[ColumnAggregate]:
        if metric == "sum":
            return self.sum
        if metric == "average":
            return self.average
        raise KeyError(f"Unknown metric '{metric}'")

    @property
    def numeric_columns(self) -> List[str]:
        return [agg.column_name for agg in self.sum]


def numeric_frame(dataset: Dataset) -> pd.DataFrame:
    """
    The dataset's cells coerced to floats, one column per header.

    Cells that do not parse as numbers are NaN. Header order is preserved,
    including headers that end up all-NaN.
    """
    frame = dataset.payload.to_frame() if dataset.payload is not None else pd.DataFrame()
    return pd.DataFrame(
        {header: frame[header].map(coerce_or_nan).astype(float) for header in frame.columns},
        columns=list(frame.columns),
    )


def compute_numeric_aggregates(dataset: Dataset) -> NumericAggregates:
    """
    Compute per-column sum and average for a dataset.

    - Headers are visited in their declared order.
    - A header with no numeric cell is not a numeric column and is left out
      of both lists.
    - sum and average are rounded independently from the unrounded total,
      so the average is never derived from an already-rounded sum.

    Pure: no caching, the result depends only on the dataset's payload.
    """
    if dataset.payload is None or not dataset.payload.headers:
        return NumericAggregates()

    values = numeric_frame(dataset)

    sums: List[ColumnAggregate] = []
    averages: List[ColumnAggregate] = []

    for header in dataset.payload.headers:
        numeric = values[header].dropna()
        n = len(numeric)
        if n == 0:
            continue

        # fsum keeps the total independent of row order
        total = math.fsum(numeric.tolist())
        sums.append(ColumnAggregate(header, round_half_away(total)))
        averages.append(ColumnAggregate(header, round_half_away(total / n)))

    return NumericAggregates(sum=sums, average=averages)


def compute_selection_aggregates(datasets: Iterable[Dataset]) -> Dict[str, NumericAggregates]:
    """
    Aggregates for every dataset of a selection snapshot, keyed by id.

    Dict order follows the selection order. Datasets whose payload is not
    resident yet get empty aggregates.
    """
    return {ds.id: compute_numeric_aggregates(ds) for ds in datasets}
