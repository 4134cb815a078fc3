"""
Bundle report pipeline: locate build-analysis output, normalize it into a
stored report, and serve the report catalog over HTTP.
"""

__version__ = "0.1.0"
