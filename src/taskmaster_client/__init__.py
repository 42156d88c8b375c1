"""Async client and console front end for the TaskMaster task-management API."""

__version__ = "0.1.0"
