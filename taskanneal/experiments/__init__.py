"""Batch experiment runner over directories of instance files."""

from taskanneal.experiments.runner import ExperimentRunner, RunConfig, RunResult  # noqa: F401
