"""Tests for the Buderus KM200 integration."""
