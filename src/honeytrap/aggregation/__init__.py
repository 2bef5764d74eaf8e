"""Aggregation module for dashboard statistics.

- Reads records through the record store and produces summaries
  (headline counts, scam type distribution, daily detections)
- Forbidden: record mutation
"""
