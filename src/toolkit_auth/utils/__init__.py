"""Shared utilities for toolkit-auth (file loading, logging setup)."""
