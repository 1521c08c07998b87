"""
Shared type definitions for the retention sweeper.

This module contains dataclasses and types that are used across multiple services.
"""

from shared_types.sweep import SweepResult

__all__ = ["SweepResult"]
