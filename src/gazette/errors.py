"""Failure types surfaced to the user.

Every message is a single line suitable for the error screen and for the
``gazette: <message>`` diagnostic printed on exit.
"""


class GazetteError(Exception):
    """Base class for failures that end interactivity."""


class NetworkFailure(GazetteError):
    """Connection problems, timeouts, bad statuses and empty responses."""


class DecodeFailure(GazetteError):
    """A feed document that is not the JSON we expect."""


class ConversionFailure(GazetteError):
    """Markup that could not be turned into display text."""
