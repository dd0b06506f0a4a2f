class RecordkitError(Exception):
    """base class for every error raised by recordkit"""


class ValidationError(RecordkitError, ValueError):
    """malformed configuration: bad operator, empty field set, negative count..."""


class DuplicateKeyError(ValidationError):
    """two records produced the same key for a one-to-one mapping"""

    def __init__(self, key):
        super().__init__(f"duplicate key {key!r} in map_by (pass overwrite=True to keep the last record)")
        self.key = key


class StateError(RecordkitError, RuntimeError):
    """a dependent operation was invoked without the state it builds on"""


class ConversionError(RecordkitError, TypeError):
    """cast was given a value that does not fit the target type"""
