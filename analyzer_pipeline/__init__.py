"""
YouTube Channel Analyzer
"""

__version__ = "0.1.0"
