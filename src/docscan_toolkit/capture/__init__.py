"""
Module: capture

Purpose:
    Holds photographs handed over by the capture collaborator until they
    are assembled into a document.

Key Classes:
    - ImageStore: Ordered, append-only, snapshot-on-read image collection

Used By:
    - cli: Collects command-line images before assembly
"""

from .store import ImageStore

__all__ = ["ImageStore"]
