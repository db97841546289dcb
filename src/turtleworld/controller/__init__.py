"""
The CONTROLLER layer: turtles, input devices, the frame scheduler and the
world that ties them together. Drawing goes through `view.canvas`.
"""
