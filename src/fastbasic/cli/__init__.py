"""
FastBasic Command-Line Interface
================================

- **fbc**: the build driver, installed as the ``fastbasic`` command
"""

__all__ = ["fbc"]
