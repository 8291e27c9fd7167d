"""
Core services of the YouTube Channel Analyzer
"""
