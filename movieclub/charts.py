from __future__ import annotations

from typing import Any, Dict

import altair as alt

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def truncate_label(label: str, max_len: int, *, ellipsis: str = "") -> str:
    # Display only: groupings keep the full label.
    if len(label) <= max_len:
        return label
    return label[:max_len] + ellipsis
