"""Response-shape contract tests for the Task Hub JSON API."""
