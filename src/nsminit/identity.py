""" Who is asking: the requester identity sent with each admission request,
    and the handle of the network namespace the broker should program.
"""

import os
import re

from .errors import InitError
from .protocol.message import Identity


netns_link = '/proc/self/ns/net'


def identity(configuration):
    """ Return the :class:`nsminit.protocol.Identity` described by a
        :class:`nsminit.config.Configuration`.
    """

    return Identity(configuration.name, configuration.namespace)


def current_netns(link=netns_link):
    """ Return the inode number of the current network namespace, as a
        string; the broker uses it to locate the namespace of this process.
    """

    try:
        target = os.readlink(link)
    except OSError as e:
        raise InitError(f"failed to get the network namespace: {e}") from e

    # The link target looks like net:[4026531993].

    match = re.search(r'\[(\d+)\]', target)
    if match is None:
        raise InitError('unrecognized network namespace link: ' + repr(target))

    return match.group(1)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
