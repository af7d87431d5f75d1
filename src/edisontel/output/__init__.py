from __future__ import annotations

from edisontel.output.formatter import OutputFormatter

__all__ = ["OutputFormatter"]
