"""Exceptions for hwtop."""


class HostError(Exception):
    """
    The host does not expose what hwtop requires.

    Raised for a missing cpuinfo stream or a malformed record in one of the
    pseudo-files whose format is assumed stable. Continuing would produce
    silently wrong statistics, so this is never handled inside the samplers.
    """
