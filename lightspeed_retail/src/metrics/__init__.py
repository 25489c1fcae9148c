"""
Metrics module for the Lightspeed Retail API client.

This module provides metrics functionality for tracking API call latency and failures.
"""

from .metrics import API_CALL_FAILURES, API_CALL_LATENCY, record_failure

__all__ = ["API_CALL_FAILURES", "API_CALL_LATENCY", "record_failure"]
