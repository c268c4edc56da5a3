"""
PS2 -> PSP converter.

Scans an extracted PS2 game folder, asks the Perplexity API for a
conversion plan, and writes a PSP project skeleton around that plan.

See `main.py` for the entry point.
"""

__version__ = "0.1.0"
