"""Packaged default resources for :mod:`journey_core`."""
