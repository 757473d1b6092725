"""
Shared utilities for the Cell Broadcast Alert Filter.

Structured logging and error tracking used by components and services.
"""
