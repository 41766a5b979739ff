"""Outlier and duplicate detection over transaction amounts."""

from collections import defaultdict
from dataclasses import dataclass
from typing import Sequence

from analytics.domain import Transaction
from analytics.stats import mean, standard_deviation

MIN_SAMPLE = 3


@dataclass(frozen=True)
class AnomalyAlert:
    transaction: Transaction
    z_score: float
    severity: str  # "low" | "medium" | "high"
    reason: str


@dataclass(frozen=True)
class DuplicateGroup:
    indices: tuple[int, ...]
    transaction: Transaction


def _severity(abs_z: float) -> str:
    if abs_z > 3:
        return "high"
    if abs_z > 2.5:
        return "medium"
    return "low"


def detect_anomalies(transactions: Sequence[Transaction], threshold: float = 2.0) -> list[AnomalyAlert]:
    """Flag transactions whose amount lies more than ``threshold`` standard
    deviations from the mean, most anomalous first.

    Fewer than three transactions never produce alerts.
    """
    if len(transactions) < MIN_SAMPLE:
        return []

    amounts = [t.amount for t in transactions]
    avg = mean(amounts)
    std = standard_deviation(amounts)
    if std == 0:
        return []

    alerts = []
    for t in transactions:
        z = (t.amount - avg) / std
        abs_z = abs(z)
        if abs_z <= threshold:
            continue
        if z > 0:
            reason = f"Unusually high spending ({abs_z:.1f}σ above average)"
        else:
            reason = f"Unusually low spending ({abs_z:.1f}σ below average)"
        alerts.append(AnomalyAlert(transaction=t, z_score=z, severity=_severity(abs_z), reason=reason))

    return sorted(alerts, key=lambda a: abs(a.z_score), reverse=True)


def detect_duplicates(transactions: Sequence[Transaction]) -> list[DuplicateGroup]:
    """Group transactions sharing date, amount and description."""
    seen: dict[tuple, list[int]] = defaultdict(list)
    for idx, t in enumerate(transactions):
        seen[(t.date, t.amount, t.description)].append(idx)

    return [
        DuplicateGroup(indices=tuple(indices), transaction=transactions[indices[0]])
        for indices in seen.values()
        if len(indices) > 1
    ]
