""" The job defaults reported by the Builder. The Builder responds with
    alternating key and value lines; the job directory is reported under
    the ``JOBLOCATION`` key, and every other key is kept as reported.
"""

from .calculator import Calculator
from .protocol import fields
from .protocol.request import Request

JOB_LOCATION = 'JOBLOCATION'


class JobDefaults(Calculator):
    """ Retrieve the job defaults from the Builder. The decoded key/value
        pairs are available in :attr:`values`, in the order received, and
        the job directory in :attr:`job_directory`.
    """

    def __init__(self):

        Calculator.__init__(self)

        self.job_directory = None
        self.values = dict()


    def request(self):
        return Request(fields.GETDEFAULTS)


    def fetch(self, timeout=None):
        return self._fetch(self.request(), self.decode, timeout)


    def fetch_async(self, callback=None, error=None):
        return self._fetch_async(self.request(), self.decode, callback, error)


    def decode(self, response):

        lines = response.text.split(fields.NEWLINE)
        lines = [line.rstrip('\r') for line in lines]

        values = dict()

        for index in range(1, len(lines), 2):
            values[lines[index - 1]] = lines[index]

        self.values = values
        self.job_directory = values.get(JOB_LOCATION)


# end of class JobDefaults


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
