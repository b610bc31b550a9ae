"""Batch services: directory orchestration, progress display, summary output."""
