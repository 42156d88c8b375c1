"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskFilters, Pagination)
- collection.py: dashboard controller (filters, refetch-after-write, stale-response guard)
- debounce.py: quiet-period coalescing for search input
"""
