"""
Application Layer for the Workout Analytics API.

This package contains:
- ports/: Abstract repository interfaces (what the analytics engine needs)
"""
