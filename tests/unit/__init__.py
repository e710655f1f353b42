"""Unit tests for the Task Hub core components."""
