"""Operational command line utilities for the OpsEase backend."""
