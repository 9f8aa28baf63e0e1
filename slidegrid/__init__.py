"""
SlideGrid: grid, flex and responsive positioning for slide content.
"""
__version__ = "0.1.0"
