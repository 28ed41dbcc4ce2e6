""" Python implementation of the client side of a service mesh init step: ask
    the local broker which network services exist, then request admission of
    a data-plane connection for each service this workload needs.
"""

# Utility components.

from . import clock
from . import errors

# Submodules used by multiple other components.

from . import protocol
from . import config
from . import transport

# Primary public-facing interfaces.

from . import admission
from . import discover
from . import identity
from . import begin

run = begin.run

from .admission import AdmissionState, Classification, classify, request_admission
from .clock import Clock, FakeClock, Ticker
from .config import Configuration, load_services

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
