""" Sunrise, sunset and solar noon for a location and date, as calculated
    by the Builder.
"""

from .calculator import Calculator
from .protocol import fields
from .protocol.request import Request


class SolarCalculator(Calculator):
    """ Calculate the solar times for the given *latitude* and *longitude*
        on the given date. The *timezone* is an offset from UTC in hours,
        or an index retrieved with :func:`wiseapi.timezone.get_timezones`.
        The results are stored as the strings returned by the Builder in
        :attr:`sunrise`, :attr:`sunset` and :attr:`noon`.
    """

    def __init__(self, latitude=None, longitude=None, timezone=0, year=None, month=None, day=None):

        Calculator.__init__(self)

        self.latitude = latitude
        self.longitude = longitude
        self.timezone = timezone
        self.year = year
        self.month = month
        self.day = day

        self.sunrise = None
        self.sunset = None
        self.noon = None


    def request(self):

        parameters = (self.latitude, self.longitude,
                      round(self.timezone), round(self.year),
                      round(self.month), round(self.day))

        return Request(fields.SOLAR_CALCULATOR, parameters)


    def calculate(self, timeout=None):
        """ Calculate the solar times, blocking until the Builder responds.
            This instance is returned.
        """

        return self._fetch(self.request(), self.decode, timeout)


    def calculate_async(self, callback=None, error=None):
        return self._fetch_async(self.request(), self.decode, callback, error)


    def decode(self, response):

        values = response.expect(3, minimum=True)

        self.sunrise = values[0]
        self.sunset = values[1]
        self.noon = values[2]


# end of class SolarCalculator


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
