""" Fire behaviour prediction (FBP) calculations and the fuel types known to
    the Builder.
"""

from . import calculator
from .calculator import Calculator, number
from .protocol import fields
from .protocol.request import ProtocolDecodeError, Request


class FuelTypeDefaults:
    """ The default fuel parameters for a fuel type. Each value has a
        matching flag indicating whether the fuel type uses it at all.
    """

    def __init__(self):

        self.crown_base = None
        self.use_crown_base = False
        self.percent_conifer = None
        self.use_percent_conifer = False
        self.percent_dead_fir = None
        self.use_percent_dead_fir = False
        self.grass_curing = None
        self.use_grass_curing = False
        self.grass_fuel_load = None
        self.use_grass_fuel_load = False


    def apply_flags(self, bits):

        bits = int(bits)

        self.use_crown_base = (bits & 1) > 0
        self.use_percent_conifer = (bits & 2) > 0
        self.use_percent_dead_fir = (bits & 4) > 0
        self.use_grass_curing = (bits & 8) > 0
        self.use_grass_fuel_load = (bits & 16) > 0


# end of class FuelTypeDefaults



class FuelType:

    def __init__(self, name, description, defaults=None):

        self.name = name
        self.description = description
        self.defaults = defaults


    def __str__(self):
        return self.name + ': ' + self.description


    def __repr__(self):
        return 'FuelType(%r, %r)' % (self.name, self.description)


# end of class FuelType



class FbpCalculations(Calculator):
    """ Calculate the fire behaviour for a single fuel type under the given
        conditions. The inputs are set as attributes before calling
        :func:`calculate`; the defaults are a C-1 fuel type near
        Yellowknife. The outputs are set as attributes once the Builder
        responds, and :attr:`calculated` indicates whether they are valid.
    """

    outputs = ('ros_t', 'ros_eq', 'fros', 'lb', 'bros', 'rso', 'hfi', 'ffi',
               'bfi', 'area', 'perimeter', 'distance_head', 'distance_back',
               'distance_flank', 'csi', 'cfb', 'sfc', 'tfc', 'cfc', 'isi',
               'fmc', 'wsv', 'raz')

    def __init__(self):

        Calculator.__init__(self)

        self.fuel_type = 'C-1'
        self.crown_base = 7
        self.percent_conifer = 50
        self.percent_dead_fir = 50
        self.grass_curing = 60
        self.grass_fuel_load = 0.35
        self.ffmc = 85
        self.dmc = 25
        self.dc = 200
        self.bui = 40
        self.use_bui = True
        self.wind_speed = 0
        self.wind_direction = 0
        self.elevation = 500
        self.slope_value = 0
        self.use_slope = True
        self.aspect = 0
        self.use_line = False
        self.start_time = '2019-01-01T12:00'
        self.elapsed_time = 60
        self.latitude = 62.454
        self.longitude = -114.3718

        for output in self.outputs:
            setattr(self, output, None)

        self.fire_description = None


    def request(self):

        parameters = (self.fuel_type, self.crown_base, self.percent_conifer,
                      self.percent_dead_fir, self.grass_curing,
                      self.grass_fuel_load, self.ffmc, self.dmc, self.dc,
                      self.bui, self.use_bui, self.wind_speed,
                      self.wind_direction, self.elevation, self.slope_value,
                      self.use_slope, self.aspect, self.use_line,
                      self.start_time, self.elapsed_time, self.latitude,
                      self.longitude)

        return Request(fields.FBP_CALCULATE, parameters)


    def calculate(self, timeout=None):
        """ Calculate the fire behaviour, blocking until the Builder
            responds. This instance is returned.
        """

        return self._fetch(self.request(), self.decode, timeout)


    def calculate_async(self, callback=None, error=None):
        return self._fetch_async(self.request(), self.decode, callback, error)


    def decode(self, response):

        values = response.expect(25)

        decoded = [number(value) for value in values[:23]]

        for output, value in zip(self.outputs, decoded):
            setattr(self, output, value)

        self.fire_description = values[23].replace('^', '\n')

        if self.use_bui == False:
            self.bui = number(values[24])


# end of class FbpCalculations



def _fuels(response):

    values = response.fields
    found = list()

    for index in range(0, len(values) - 1, 2):
        found.append(FuelType(values[index], values[index + 1]))

    return found



def _fuels_with_defaults(response):

    found = list()

    for record in response.records(8):
        defaults = FuelTypeDefaults()

        defaults.crown_base = number(record[2])
        defaults.percent_conifer = number(record[3])
        defaults.percent_dead_fir = number(record[4])
        defaults.grass_curing = number(record[5])
        defaults.grass_fuel_load = number(record[6])

        try:
            defaults.apply_flags(number(record[7]))
        except (ValueError, OverflowError):
            raise ProtocolDecodeError('invalid fuel flags: ' + repr(record[7]))

        found.append(FuelType(record[0], record[1], defaults))

    return found



def get_fuels(timeout=None):
    """ Return the list of :class:`FuelType` instances known to the Builder.
    """

    return calculator.lookup(Request(fields.FBP_GET_FUELS), _fuels, timeout)


def get_fuels_async(callback=None, error=None):
    return calculator.lookup_async(Request(fields.FBP_GET_FUELS), _fuels, callback, error)


def get_fuels_with_defaults(timeout=None):
    """ Return the list of :class:`FuelType` instances known to the Builder,
        each with its :class:`FuelTypeDefaults`.
    """

    return calculator.lookup(Request(fields.FBP_GET_FUELS_V2), _fuels_with_defaults, timeout)


def get_fuels_with_defaults_async(callback=None, error=None):
    return calculator.lookup_async(Request(fields.FBP_GET_FUELS_V2), _fuels_with_defaults, callback, error)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
