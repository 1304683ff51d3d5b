class WhoisError(Exception):
    """
    Brief: Base class for whoiswalk errors.

    Inputs:
      - message: Error description.
    Outputs:
      - Exception instance.
    """

    pass


class ServerMismatchError(WhoisError):
    """
    Brief: Raised when no configured server zone matches a domain.

    Inputs:
      - message: Error description naming the domain.
    Outputs:
      - Exception instance.
    """

    pass


class WhoisConnectionError(WhoisError, ConnectionError):
    """
    Brief: WHOIS transport error (DNS, connect, read, reset or timeout).

    Inputs:
      - message: Error description.
    Outputs:
      - Exception instance.

    Notes:
      - Subclasses the builtin ConnectionError so callers can catch either.
    """

    pass
