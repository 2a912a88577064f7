"""Line layout for generated VHDL."""

from .layout import COMMENT, Documented, LineFormatter

__all__ = ["COMMENT", "Documented", "LineFormatter"]
