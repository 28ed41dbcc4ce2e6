"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

import enum


# Request operations understood by the broker.

DISCOVER = "DISCOVER"
CONNECT = "CONNECT"

REP = "REP"


class StatusCode(enum.Enum):
    """ The closed set of status codes a broker attaches to a failed call.
        Anything the broker sends that is not one of the first three is
        folded into :attr:`OTHER`.
    """

    ABORTED = "Aborted"
    NOT_FOUND = "NotFound"
    ALREADY_EXISTS = "AlreadyExists"
    OTHER = "Other"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value

        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
