"""
Integration test harness for python-arango against a live ArangoDB deployment
"""

__version__ = "1.0.0"
