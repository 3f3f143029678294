"""Tests for the samsung_tv package."""
