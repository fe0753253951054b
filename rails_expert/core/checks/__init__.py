"""
Content invariants for the marketplace tree.
"""

from rails_expert.core.checks.runner import CHECKS, run_check, run_checks, select_checks

__all__ = ["CHECKS", "run_check", "run_checks", "select_checks"]
