class SpanrError(Exception):
    """
    base class for all errors raised while reading or operating on run lists
    """
    pass


class ParseError(SpanrError, ValueError):
    """
    raised when a run list token, size table line, range record or gff line is malformed
    """
    pass


class InvalidOperatorError(SpanrError, ValueError):
    """
    raised when an operator name is not a member of its operator family

    for example if the set operator was given as 'invalid' rather than one of
    union, intersect, diff or xor
    """
    pass


class SchemaError(SpanrError):
    """
    raised when a run list document is neither a flat nor a grouped mapping of run lists
    """
    pass
