"""Lottery factor and YOLO coder reports for GitHub repositories."""

__version__ = "0.1.0"
