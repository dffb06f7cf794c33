"""Reporting API for the terminology update pipeline."""

__version__ = "1.0.0"
