"""HTTP transport and typed wrappers for the TaskMaster REST endpoints."""
