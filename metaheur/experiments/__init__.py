"""Experiment utilities for comparing solvers across seeds."""

from .repeat import RepeatResult, repeat_solve

__all__ = ["RepeatResult", "repeat_solve"]
