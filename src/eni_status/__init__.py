"""
Summarize AWS Elastic Network Interfaces by status and reclaim the available ones.
"""

__version__ = "0.1.0"
