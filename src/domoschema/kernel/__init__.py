"""Reflection and diff kernel: pure, in-memory schema transformations."""
