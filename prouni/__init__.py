"""Aggregation pipeline and data loading for the ProUni scholarship dashboard."""
