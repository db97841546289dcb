"""
The VIEW layer: the raster surface, sprite loading and the Qt widgets that
display a world.
"""
