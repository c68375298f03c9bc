from __future__ import annotations
from typing import Dict, List, Type

from .dataset import Dataset
from .base_view import BaseView


class ViewRegistry:
    """
    Registry for view classes so the UI and the snapshot service can build
    figures by id.

    - Stores the subclasses of BaseView, not instances, so each view is
      instantiated on demand for the dataset being drawn
    - Each view 'id' is unique across the registry
    """

    def __init__(self):
        self._views: Dict[str, Type[BaseView]] = {}

    def register(self, view_cls: Type[BaseView]) -> None:
        """
        Raises:
            TypeError: if view_cls is not a subclass of BaseView
            ValueError: if a view with same 'id' already exists
        """
        if not isinstance(view_cls, type) or not issubclass(view_cls, BaseView):
            raise TypeError(f"View '{getattr(view_cls, 'id', view_cls)}' must be a subclass of BaseView")

        if view_cls.id in self._views:
            raise ValueError(f"View '{view_cls.id}' already registered")

        self._views[view_cls.id] = view_cls

    def create(self, view_id: str, dataset: Dataset) -> BaseView:
        """
        Raises:
            KeyError: if no view with the given id exists in the registry
        """
        try:
            cls = self._views[view_id]
        except KeyError:
            raise KeyError(f"View '{view_id}' not found")
        return cls(dataset)

    def all_classes(self) -> List[Type[BaseView]]:
        return list(self._views.values())
