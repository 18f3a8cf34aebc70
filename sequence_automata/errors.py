"""Exceptions raised by the rule enumerators and parsers."""


class EnumerationOverflow(RuntimeError):
    """generate_next() was called on an enumerator with nothing left to generate."""


class InvalidRuleString(ValueError):
    """Text could not be parsed into a formula or rule."""
