"""Test doubles for cleanup handlers and host resources."""
