class SpiderError(Exception):
    """Base class of engine errors."""


class CorruptSaveData(SpiderError):
    """A saved game or deck failed validation and cannot be restored."""


class InvariantViolation(SpiderError):
    """The engine reached a state that its rules should make impossible."""
