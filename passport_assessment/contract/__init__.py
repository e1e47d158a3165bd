"""
passport_assessment.contract
============================

The contract itself: message shapes (``msg``), persistent state (``state``)
and the instantiate/execute/query handlers (``contract``).
"""

from __future__ import annotations

from . import contract, msg, state
from .contract import CONTRACT_NAME, CONTRACT_VERSION

__all__ = ["contract", "msg", "state", "CONTRACT_NAME", "CONTRACT_VERSION"]
