"""Tests for the detente engine."""
