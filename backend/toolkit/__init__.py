"""
ToolKit Color Tools

Backend for the ToolKit color tools: dominant color and palette extraction from
images, harmonious palette generation, palette export, saved palettes and CSS
gradients.
"""

__version__ = "1.0.0"
