"""Solver exceptions."""


class SolverError(RuntimeError):
    """A solve call failed on an internal fault.

    Only the failing call is affected; the message is meant for the user.
    """
