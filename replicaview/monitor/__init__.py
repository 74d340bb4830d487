"""Terminal monitor for replica status.

Modules
-------
renderer
    ``MatrixRenderer`` turns an ``AlignedMatrix`` into Rich renderables
    for terminal display, including continuous ``Rich.Live`` mode.
"""
