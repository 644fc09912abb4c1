"""
Parallel box (mean) filter for RGB images.
"""

__version__ = "1.0.0"
