"""
ToolKit Colors Module

Color space conversion, palette extraction by quantization, harmonious palette
generation, export formatting, swatch rendering and gradient building.
"""
