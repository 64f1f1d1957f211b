"""Shared test fixtures for polaris_ddl."""
