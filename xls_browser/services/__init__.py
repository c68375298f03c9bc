"""
Service layer: dataset store clients, the dataset registry, the selection
set and chart snapshotting.
"""
