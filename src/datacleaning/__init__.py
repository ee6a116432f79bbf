"""Cleaning pipelines for the cafe sales and data jobs datasets."""

__version__ = "1.0.0"
