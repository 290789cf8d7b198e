from . import fields
from . import message
from . import request
from . import status

from .message import MessageDecodeError
from .request import ProtocolDecodeError


"""
W.I.S.E. Protocol Layer
=======================

This package defines what is said to the Builder, and what the Builder
says back, without saying anything about how the bytes are moved.

The protocol layer MUST NOT depend on any transport implementation
(e.g. the control socket, MQTT, AMQP).

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Calculators and JobManager
    High-level semantic API
    - SolarCalculator, FbpCalculations, FwiCalculations ...
    - JobManager.on() / start() / broadcast_rerun()

    │
    ▼
Request Model (request.py)
    One control socket exchange
    - Request: operation key, parameters, completion policy
    - Accumulator: when is a response complete
    - Response: lines, fields, records

    │
    ▼
Broker Message Model (message.py, status.py)
    Decoded broker messages
    - Message, Kind
    - StatusReport, Validation, Statistic
    - Status code table

    │
    ▼
Field Vocabulary (fields.py)
    Canonical tokens, operation keys and topic kinds

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Transport Layer (wiseapi.transport)
    Moves bytes
    - Session: the Builder control socket
    - mqtt / amqp: the job status broker

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
