"""Tests for storage backends."""
