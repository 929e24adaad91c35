"""Core domain logic for blood pressure reading tracking.

This package contains the reading model, classification, the repository and
trend aggregation, isolated from any concrete storage backend.
"""
