"""Volleyball lineup management: rotations, bench queues and editable court zones."""

__version__ = "1.0.0"
