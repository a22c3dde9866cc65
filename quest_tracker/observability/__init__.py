"""
Observability module for quest-tracker.

This module provides:
- Metrics collection with Prometheus
"""

__all__ = ["metrics"]
