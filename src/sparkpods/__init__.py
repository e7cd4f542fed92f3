"""Executor capability composition for Spark on Kubernetes."""

__version__ = "0.3.0"
