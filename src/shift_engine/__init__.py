"""Shift resolution & overtime engine.

The package is organized by feature modules (shifts, timeoff, overtime,
attendance) with thin Flask controllers on top of service/repository layers.
The core (resolver + calculator) is plain Python and can be used in-process
without the web layer.
"""
