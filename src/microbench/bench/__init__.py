"""Benchmarking subsystem for microbench.

Provides the sampling engine that times named variants, the
statistics that summarize their samples, and the formatting used to
report and compare the results.
"""
