"""Shared test fixtures for jobsight tests."""
