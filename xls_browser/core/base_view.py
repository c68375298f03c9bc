from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import plotly.graph_objs as go

from .dataset import Dataset
from .state import ComparisonState


class BaseView(ABC):
    """
    Abstract base class for all chart views.

    Defines the contract that every view in the app must follow
    - expose an 'id' - used internally
    - expose a 'label' - used for UI/human-readable applications
    - implement 'compute_data' - derive the data to plot from the dataset and ComparisonState
    - implement 'render_figure' - render the figure using Plotly
    """

    id: str = None
    label: str = None

    def __init__(self, dataset: Dataset):
        self.dataset = dataset

    @abstractmethod
    def compute_data(self, state: ComparisonState) -> Any:
        raise NotImplementedError()

    @abstractmethod
    def render_figure(self, data: Any, state: ComparisonState) -> go.Figure:
        raise NotImplementedError()

    def figure(self, state: ComparisonState) -> go.Figure:
        return self.render_figure(self.compute_data(state), state)

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        """
        Standardised 'no data' figure used by all views.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
            paper_bgcolor="#ffffff",
            plot_bgcolor="#ffffff",
        )
        return fig
