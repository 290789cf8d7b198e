""" Current weather conditions for the cities known to the Builder.
"""

import enum

from . import calculator
from .calculator import Calculator, number
from .protocol import fields
from .protocol.request import Request


class Province(enum.Enum):
    """ The provinces and territories of Canada, by the abbreviation the
        Builder expects. Either a :class:`Province` or the plain string can
        be passed wherever a province is required.
    """

    ALBERTA = 'ab'
    BRITISH_COLUMBIA = 'bc'
    MANITOBA = 'mb'
    NEW_BRUNSWICK = 'nb'
    NEWFOUNDLAND = 'nl'
    NORTHWEST_TERRITORIES = 'nt'
    NOVA_SCOTIA = 'ns'
    NUNAVUT = 'nu'
    ONTARIO = 'on'
    PRINCE_EDWARD_ISLAND = 'pe'
    QUEBEC = 'qc'
    SASKATCHEWAN = 'sk'
    YUKON_TERRITORY = 'yt'



class WeatherCalculator(Calculator):
    """ Retrieve the current conditions for a *city* in a *province*.
        Temperature is in degrees Celsius, relative humidity a percentage,
        wind speed in km/h and wind direction in degrees.
    """

    def __init__(self, province=None, city=None):

        Calculator.__init__(self)

        self.province = province
        self.city = city

        self.time = None
        self.temperature = None
        self.humidity = None
        self.wind_speed = None
        self.wind_direction = None


    def request(self):
        return Request(fields.WEATHER_GET, (self.province, self.city))


    def fetch(self, timeout=None):
        return self._fetch(self.request(), self.decode, timeout)


    def fetch_async(self, callback=None, error=None):
        return self._fetch_async(self.request(), self.decode, callback, error)


    def decode(self, response):

        values = response.expect(7, minimum=True)

        self.province = values[0]
        self.city = values[1]
        self.temperature = number(values[2])
        self.time = values[3]
        self.humidity = number(values[4])
        self.wind_speed = number(values[5])
        self.wind_direction = number(values[6])


# end of class WeatherCalculator



def _cities(response):
    return list(response.fields)



def get_cities(province, timeout=None):
    """ Return the names of the cities in *province* for which current
        conditions are available.
    """

    request = Request(fields.WEATHER_LIST_CITIES, (province,))
    return calculator.lookup(request, _cities, timeout)


def get_cities_async(province, callback=None, error=None):
    request = Request(fields.WEATHER_LIST_CITIES, (province,))
    return calculator.lookup_async(request, _cities, callback, error)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
