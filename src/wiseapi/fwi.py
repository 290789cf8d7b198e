""" Canadian Forest Fire Weather Index (FWI) System calculations, as
    implemented by the Builder.

    Each of the module-level functions asks the Builder for a single value
    over a new control socket session, and returns it as a float; the
    ``_async`` variants return a :class:`wiseapi.pending.Pending` that
    settles with the float instead. Relative humidity is always expressed as
    a fraction in [0, 1], and time spans as :class:`datetime.timedelta`.

    :class:`FwiCalculations` chains those values together to derive the
    daily and hourly codes for a single day.
"""

import datetime
import enum
import logging
import threading

from . import calculator
from .calculator import number
from .pending import Pending
from .protocol import fields
from .protocol.request import ProtocolDecodeError, Request
from .transport.base import ConcurrentRequestError

logger = logging.getLogger(__name__)


def _value(response):
    return number(response.expect(1, minimum=True)[0])


def _request(key, *parameters):
    return Request(key, parameters)


def value(key, *parameters, timeout=None):
    """ Request the single value identified by the operation *key*.
    """

    return calculator.lookup(_request(key, *parameters), _value, timeout)


def value_async(key, *parameters, callback=None, error=None):
    return calculator.lookup_async(_request(key, *parameters), _value, callback, error)



def hourly_ffmc_van_wagner(in_ffmc, rain, temperature, rh, ws, span, timeout=None):
    """ Hourly fine fuel moisture code using Van Wagner's model, from the
        FFMC observed *span* ago and the conditions since.
    """

    return value(fields.HOURLY_FFMC_VAN_WAGNER, in_ffmc, rain, temperature, rh, ws, span, timeout=timeout)


def hourly_ffmc_equilibrium(in_ffmc, rain, temperature, rh, ws, span, timeout=None):
    """ Hourly fine fuel moisture code using Van Wagner's equilibrium model.
    """

    return value(fields.HOURLY_FFMC_EQUILIBRIUM, in_ffmc, rain, temperature, rh, ws, span, timeout=timeout)


def hourly_ffmc_lawson(prev_ffmc, curr_ffmc, rh, span, timeout=None):
    """ Hourly fine fuel moisture code using Lawson's interpolation between
        yesterday's and today's daily FFMC; *span* is the time since noon.
    """

    return value(fields.HOURLY_FFMC_LAWSON, prev_ffmc, curr_ffmc, rh, span, timeout=timeout)


def hourly_ffmc_van_wagner_previous(curr_ffmc, rain, temperature, rh, ws, timeout=None):
    """ The previous hour's FFMC under Van Wagner's model, from the current
        hour's FFMC and conditions.
    """

    return value(fields.HOURLY_FFMC_VAN_WAGNER_PREVIOUS, curr_ffmc, rain, temperature, rh, ws, timeout=timeout)


def hourly_ffmc_equilibrium_previous(curr_ffmc, rain, temperature, rh, ws, timeout=None):
    return value(fields.HOURLY_FFMC_EQUILIBRIUM_PREVIOUS, curr_ffmc, rain, temperature, rh, ws, timeout=timeout)


def hourly_ffmc_lawson_contiguous(prev_ffmc, curr_ffmc, rh0, rh, rh1, seconds_into_day, timeout=None):
    """ Hourly FFMC using Lawson's contiguous method, which uses the
        relative humidity at the previous (*rh0*), current (*rh*) and next
        (*rh1*) hours.
    """

    return value(fields.HOURLY_FFMC_LAWSON_CONTIGUOUS, prev_ffmc, curr_ffmc, rh0, rh, rh1, seconds_into_day, timeout=timeout)


def daily_ffmc_van_wagner(in_ffmc, rain, temperature, rh, ws, timeout=None):
    """ Daily fine fuel moisture code from yesterday's FFMC and today's noon
        conditions.
    """

    return value(fields.DAILY_FFMC_VAN_WAGNER, in_ffmc, rain, temperature, rh, ws, timeout=timeout)


def dmc(in_dmc, rain, temperature, latitude, longitude, month, rh, timeout=None):
    """ Duff moisture code. The *month* is zero based.
    """

    return value(fields.DMC, in_dmc, rain, temperature, latitude, longitude, month, rh, timeout=timeout)


def dc(in_dc, rain, temperature, latitude, longitude, month, timeout=None):
    """ Drought code. The *month* is zero based.
    """

    return value(fields.DC, in_dc, rain, temperature, latitude, longitude, month, timeout=timeout)


def ff(ffmc, seconds, timeout=None):
    """ The fine fuel moisture function of the initial spread index.
    """

    return value(fields.FF, ffmc, seconds, timeout=timeout)


def isi_fwi(ffmc, ws, duration, timeout=None):
    """ Initial spread index as defined by the FWI system.
    """

    return value(fields.ISI_FWI, ffmc, ws, duration, timeout=timeout)


def isi_fbp(ffmc, ws, duration, timeout=None):
    """ Initial spread index as defined by the FBP system, which differs
        from the FWI system at high wind speeds.
    """

    return value(fields.ISI_FBP, ffmc, ws, duration, timeout=timeout)


def bui(dc, dmc, timeout=None):
    """ Buildup index.
    """

    return value(fields.BUI, dc, dmc, timeout=timeout)


def fwi(isi, bui, timeout=None):
    """ Fire weather index.
    """

    return value(fields.FWI, isi, bui, timeout=timeout)


def dsr(fwi, timeout=None):
    """ Daily severity rating.
    """

    return value(fields.DSR, fwi, timeout=timeout)



class Method(enum.Enum):
    """ How :class:`FwiCalculations` derives the hourly FFMC.
    """

    VAN_WAGNER = 0
    LAWSON = 1



class FwiCalculations:
    """ Derive the daily and hourly FWI codes for a single day. Set the
        inputs as attributes, then call :func:`daily_statistics`; the
        derived values are stored in the ``daily_*`` and ``hourly_*``
        attributes. Relative humidity inputs are percentages.

        The *date* is a :class:`datetime.datetime`; its month selects the
        day length factors for the DMC and DC, and its time of day selects
        the hourly values.
    """

    def __init__(self):

        self.date = None
        self.dst = 0
        self.latitude = None
        self.longitude = None

        self.noon_temp = None
        self.noon_rh = None
        self.noon_precip = None
        self.noon_wind_speed = None

        self.hourly_method = Method.VAN_WAGNER
        self.temp = None
        self.rh = None
        self.precip = None
        self.wind_speed = None
        self.prev_hour_ffmc = None

        self.yesterday_ffmc = None
        self.yesterday_dmc = None
        self.yesterday_dc = None

        self.daily_ffmc = None
        self.daily_dmc = None
        self.daily_dc = None
        self.daily_isi = None
        self.daily_bui = None
        self.daily_fwi = None
        self.daily_dsr = None
        self.hourly_ffmc = None
        self.hourly_isi = None
        self.hourly_fwi = None

        self.calculated = False
        self._lock = threading.Lock()
        self._running = False


    def daily_statistics(self, timeout=None):
        """ Calculate every daily and hourly value in sequence, each one a
            separate request to the Builder. The *timeout*, if given, applies
            to each request. This instance is returned.

            Only one calculation runs at a time on an instance;
            :class:`wiseapi.transport.ConcurrentRequestError` is raised if
            another is still in progress.
        """

        self._begin()

        try:
            return self._calculate(timeout)
        finally:
            self._end()


    def _begin(self):

        with self._lock:
            if self._running:
                raise ConcurrentRequestError('an FWI calculation is already in progress')
            self._running = True


    def _end(self):

        with self._lock:
            self._running = False


    def _calculate(self, timeout):

        date = self.date

        if isinstance(date, str):
            date = datetime.datetime.fromisoformat(date)

        month = date.month - 1
        noon_rh = self.noon_rh * 0.01
        rh = self.rh * 0.01

        self.calculated = False

        try:
            self.daily_ffmc = daily_ffmc_van_wagner(self.yesterday_ffmc, self.noon_precip, self.noon_temp, noon_rh, self.noon_wind_speed, timeout)
            self.daily_dc = dc(self.yesterday_dc, self.noon_precip, self.noon_temp, self.latitude, self.longitude, month, timeout)
            self.daily_dmc = dmc(self.yesterday_dmc, self.noon_precip, self.noon_temp, self.latitude, self.longitude, month, noon_rh, timeout)
            self.daily_bui = bui(self.daily_dc, self.daily_dmc, timeout)
            self.daily_isi = isi_fwi(self.daily_ffmc, self.noon_wind_speed, datetime.timedelta(hours=24), timeout)
            self.daily_fwi = fwi(self.daily_isi, self.daily_bui, timeout)
            self.daily_dsr = dsr(self.daily_fwi, timeout)

            if Method(self.hourly_method) == Method.LAWSON:
                span = datetime.timedelta(hours=date.hour - self.dst)
                self.hourly_ffmc = hourly_ffmc_lawson(self.yesterday_ffmc, self.daily_ffmc, rh, span, timeout)
            else:
                span = datetime.timedelta(hours=1)
                self.hourly_ffmc = hourly_ffmc_van_wagner(self.prev_hour_ffmc, self.precip, self.temp, rh, self.wind_speed, span, timeout)

            span = datetime.timedelta(minutes=date.minute, seconds=date.second)
            self.hourly_isi = isi_fwi(self.hourly_ffmc, self.wind_speed, span, timeout)
            self.hourly_fwi = fwi(self.hourly_isi, self.daily_bui, timeout)

        except ProtocolDecodeError as e:
            logger.error("FWI daily statistics: unable to interpret the response: %s", e)
        else:
            self.calculated = True

        return self


    def daily_statistics_async(self, callback=None, error=None):
        """ Run :func:`daily_statistics` on a background thread. The returned
            :class:`wiseapi.pending.Pending` settles with this instance.
            :class:`wiseapi.transport.ConcurrentRequestError` is raised
            immediately if a calculation is already in progress.
        """

        self._begin()

        pending = Pending()

        if callback is not None or error is not None:
            pending.add_callback(callback, error)

        def run():
            try:
                result = self._calculate(None)
            except Exception as e:
                self._end()
                pending._fail(e)
            else:
                self._end()
                pending._complete(result)

        calculator.background(run, 'wiseapi fwi')

        return pending


# end of class FwiCalculations


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
