"""Logging utilities for the journey simulator."""

from journey_sim.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
