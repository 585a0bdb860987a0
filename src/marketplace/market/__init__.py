"""Job lifecycle rules for the marketplace."""

from marketplace.market.job_state_machine import JobStateMachine

__all__ = ["JobStateMachine"]
