# xls_browser/views/metric_chart_view.py

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from xls_browser.core.aggregation import compute_numeric_aggregates
from xls_browser.core.base_view import BaseView
from xls_browser.core.state import ComparisonState

BAR_COLOR = "#C69A47"
AXIS_COLOR = "#1D6B73"


class MetricChartView(BaseView):
    """
    Bar chart of one dataset's numeric columns for the selected metric.

    One of these is drawn per selected dataset, left to right in selection
    order, so the same column can be compared across files by eye.
    """

    id = "metric_chart"
    label = "Numeric columns"

    def compute_data(self, state: ComparisonState) -> pd.DataFrame:
        aggregates = compute_numeric_aggregates(self.dataset).for_metric(state.metric.value)
        return pd.DataFrame(
            {
                "column": [agg.column_name for agg in aggregates],
                "value": [agg.value for agg in aggregates],
            }
        )

    def render_figure(self, data: pd.DataFrame, state: ComparisonState) -> go.Figure:
        if data.empty:
            return self.empty_figure(f"{self.dataset.label}: no numeric columns")

        fig = go.Figure(
            go.Bar(
                x=data["column"],
                y=data["value"],
                name=state.metric.title,
                marker_color=BAR_COLOR,
                hovertemplate="%{x}<br>" + state.metric.title + ": %{y:,.2f}<extra></extra>",
            )
        )

        fig.update_xaxes(tickangle=-35, tickfont={"color": AXIS_COLOR, "size": 11})
        fig.update_yaxes(tickfont={"color": AXIS_COLOR, "size": 11}, gridcolor="#e5e7eb")

        fig.update_layout(
            title=f"{self.dataset.label} · {state.metric.title}",
            height=320,
            margin=dict(l=40, r=20, t=60, b=90),
            paper_bgcolor="#ffffff",
            plot_bgcolor="#ffffff",
            showlegend=False,
        )
        return fig
