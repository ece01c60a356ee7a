"""
Exception types shared by the simplification core and its collaborators.
"""


class PreconditionViolation(AssertionError):
    """Raised when the reduction core is driven outside its contract.

    Evicting an anchor, indexing past the working set, or calling engine
    operations in the wrong state are programming errors and abort the run.
    """


class DataFormatError(ValueError):
    """Raised when trajectory input cannot be turned into ordered points."""
