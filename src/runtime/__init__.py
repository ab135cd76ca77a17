"""
Runtime support: the worker pool shared by the detection stages.
"""

from .parallel import ConcurrentSink, MaxReducer, WorkerPool, run_each

__all__ = ["ConcurrentSink", "MaxReducer", "WorkerPool", "run_each"]
