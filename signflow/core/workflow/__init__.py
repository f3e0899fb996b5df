"""
Signature workflow rules.

Exports: Caller plus the state machine and role policy modules.
"""

from signflow.core.workflow import policy, state_machine
from signflow.core.workflow.policy import Caller

__all__ = ["Caller", "policy", "state_machine"]
