""" Exceptions surfaced by the init process. Every terminal condition is
    reported to the caller as exactly one of these; the command line entry
    point is the only place they are caught.
"""


class InitError(Exception):
    """Base class for all nsminit errors."""


class ConfigurationError(InitError):
    """The configuration, or the desired-service document, is not usable."""


class BrokerError(InitError):
    """ The broker answered a call with an error status. The *code* is a
        :class:`nsminit.protocol.fields.StatusCode`; *text* is whatever
        description the broker supplied with it.
    """

    def __init__(self, code, text=''):
        self.code = code
        self.text = text

        if text:
            message = "%s: %s" % (code_name(code), text)
        else:
            message = code_name(code)

        InitError.__init__(self, message)


class DiscoveryTimeout(InitError):
    """ No discovery request succeeded before the deadline. The last error
        returned by the broker, if any, is retained as *last_error*.
    """

    def __init__(self, deadline, last_error=None):
        self.deadline = deadline
        self.last_error = last_error

        message = "discovery did not succeed within %.1f seconds" % (deadline)
        if last_error is not None:
            message += ", last known error: %s" % (last_error)

        InitError.__init__(self, message)


class AdmissionError(InitError):
    """ Common base for the two terminal admission failures. The *service*
        is the name of the network service that could not be admitted.
    """

    def __init__(self, service, message, code=None, diagnostic=None):
        self.service = service
        self.code = code
        self.diagnostic = diagnostic
        InitError.__init__(self, message)


class AdmissionRejected(AdmissionError):
    """ The broker indicated the request can never succeed; no further
        attempts were made.
    """

    def __init__(self, service, code, text=None, diagnostic=None):

        message = "connection request for network service %s rejected: %s" % (service, code_name(code))
        if text:
            message += " (%s)" % (text)
        if diagnostic:
            message += ", admission error: %s" % (diagnostic)

        AdmissionError.__init__(self, service, message, code, diagnostic)
        self.text = text


class AdmissionTimeout(AdmissionError):
    """ Only retryable outcomes were observed until the deadline fired.
        *last_error* is the last :class:`BrokerError` seen, if any, and
        *diagnostic* the last admission error string returned by the broker.
    """

    def __init__(self, service, deadline, last_error=None, diagnostic=None):

        message = "connection request for network service %s timed out after %.1f seconds" % (service, deadline)
        if last_error is not None:
            message += ", last known error: %s" % (last_error)
        if diagnostic:
            message += ", admission error: %s" % (diagnostic)

        code = None
        if last_error is not None:
            code = getattr(last_error, 'code', None)

        AdmissionError.__init__(self, service, message, code, diagnostic)
        self.deadline = deadline
        self.last_error = last_error



def code_name(code):
    """ Return the wire name of a status *code*, tolerating plain strings.
    """

    try:
        return code.value
    except AttributeError:
        return str(code)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
