"""Series behind the payment-schedule chart.

Bars stack yearly tax, interest and principal; the remaining balance is a
line rescaled onto the bar axis so both fit one y-axis.
"""

from __future__ import annotations

from typing import List, Tuple

import pandas as pd

from .models import AmortizationYear

CHART_COLUMNS = ["Year", "Tax", "Interest", "Principal", "Balance", "Scaled Balance"]


def axis_scale(max_value: float) -> Tuple[int, str]:
    if max_value >= 1_000_000:
        return 1_000_000, "m"
    if max_value >= 1_000:
        return 1_000, "k"
    return 1, ""


def format_axis_tick(value: float, scale: Tuple[int, str]) -> str:
    divisor, suffix = scale
    return f"{value / divisor:.1f}{suffix}"


def chart_frame(schedule: List[AmortizationYear]) -> pd.DataFrame:
    if not schedule:
        return pd.DataFrame(columns=CHART_COLUMNS)

    df = pd.DataFrame(
        {
            "Year": [row.year for row in schedule],
            "Tax": [row.tax for row in schedule],
            "Interest": [row.interest for row in schedule],
            "Principal": [row.principal for row in schedule],
            "Balance": [row.balance for row in schedule],
        }
    )

    max_bar = (df["Tax"] + df["Interest"] + df["Principal"]).max()
    max_balance = df["Balance"].max()
    if max_balance > 0:
        df["Scaled Balance"] = df["Balance"] / max_balance * max_bar
    else:
        df["Scaled Balance"] = 0.0
    return df[CHART_COLUMNS]


def chart_axis_scale(df: pd.DataFrame) -> Tuple[int, str]:
    """Scale for the y-axis labels, driven by the tallest stacked bar."""
    if df.empty:
        return axis_scale(0.0)
    return axis_scale(float((df["Tax"] + df["Interest"] + df["Principal"]).max()))
