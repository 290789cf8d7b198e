""" Weather forecasts for the cities known to the Builder.
"""

from . import calculator
from .calculator import Calculator, number
from .protocol import fields
from .protocol.request import Policy, Request


class ForecastHour:

    def __init__(self, time, temperature, relative_humidity, precipitation, wind_speed, wind_direction):

        self.time = time
        self.temperature = temperature
        self.relative_humidity = relative_humidity
        self.precipitation = precipitation
        self.wind_speed = wind_speed
        self.wind_direction = wind_direction


    def __repr__(self):
        return 'ForecastHour(%r, %r)' % (self.time, self.temperature)


# end of class ForecastHour



class ForecastDay:

    def __init__(self, time, min_temperature, max_temperature, relative_humidity, precipitation, min_wind_speed, max_wind_speed, wind_direction):

        self.time = time
        self.min_temperature = min_temperature
        self.max_temperature = max_temperature
        self.relative_humidity = relative_humidity
        self.precipitation = precipitation
        self.min_wind_speed = min_wind_speed
        self.max_wind_speed = max_wind_speed
        self.wind_direction = wind_direction


    def __repr__(self):
        return 'ForecastDay(%r, %r, %r)' % (self.time, self.min_temperature, self.max_temperature)


# end of class ForecastDay



class ForecastCalculator(Calculator):
    """ Retrieve a forecast for a *city* in a *province*. The
        *forecast_type* is either ``hour``, for hourly values, or ``day``,
        for daily summaries; :attr:`results` is then a list of
        :class:`ForecastHour` or :class:`ForecastDay` instances.
    """

    def __init__(self, province=None, city=None, model=None, model_ids=(), date=None, timezone=0, time=None, percentile=50, forecast_type='hour'):

        Calculator.__init__(self)

        self.province = province
        self.city = city
        self.model = model
        self.model_ids = list(model_ids)
        self.date = date
        self.timezone = timezone
        self.time = time
        self.percentile = percentile
        self.forecast_type = forecast_type

        self.results = list()


    def request(self):

        ids = ','.join(str(model_id) for model_id in self.model_ids)

        parameters = (self.province, self.city, self.model, ids, self.date,
                      self.timezone, self.time, self.percentile,
                      self.forecast_type)

        return Request(fields.FORECAST_GET, parameters, Policy.MARKER)


    def fetch(self, timeout=None):
        """ Retrieve the forecast, blocking until the Builder responds. This
            instance is returned.
        """

        return self._fetch(self.request(), self.decode, timeout)


    def fetch_async(self, callback=None, error=None):
        return self._fetch_async(self.request(), self.decode, callback, error)


    def decode(self, response):

        results = list()

        if self.forecast_type == 'day':
            for record in response.records(8):
                values = [number(value) for value in record[1:]]
                results.append(ForecastDay(record[0], *values))
        else:
            for record in response.records(6):
                values = [number(value) for value in record[1:]]
                results.append(ForecastHour(record[0], *values))

        self.results = results


# end of class ForecastCalculator



def _cities(response):
    return list(response.fields)



def get_cities(province, timeout=None):
    """ Return the names of the cities in *province* for which forecasts
        are available.
    """

    request = Request(fields.FORECAST_LIST_CITIES, (province,))
    return calculator.lookup(request, _cities, timeout)


def get_cities_async(province, callback=None, error=None):
    request = Request(fields.FORECAST_LIST_CITIES, (province,))
    return calculator.lookup_async(request, _cities, callback, error)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
