""" Python client for the W.I.S.E. fire growth model. This includes the
    calculators that query the Builder over its control socket, such as
    fire behaviour and fire weather index calculations, and the
    :class:`JobManager` that reports the progress of running jobs from the
    job status broker.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Utility components.

from . import json
from . import log
from . import pending

# Submodules used by multiple other components.

from . import endpoint
from . import protocol
from . import transport
from . import config
home = config.directory
initialize = endpoint.initialize

# Primary public-facing interfaces.

from . import events
from .events import Category
from .manager import JobManager

from . import defaults
from . import fbp
from . import forecast
from . import fwi
from . import solar
from . import timezone
from . import weather

from .defaults import JobDefaults
from .fbp import FbpCalculations
from .forecast import ForecastCalculator
from .fwi import FwiCalculations
from .solar import SolarCalculator
from .weather import Province, WeatherCalculator

from .transport import (
    TransportError,
    TransportConnectionError,
    ConcurrentRequestError,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
