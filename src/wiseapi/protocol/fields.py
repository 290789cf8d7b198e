"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Control socket tokens
STARTUP = "STARTUP"
SHUTDOWN = "SHUTDOWN"
NEWLINE = "\n"
SEPARATOR = "|"
COMPLETE = b"COMPLETE"
ENCODING = "utf-8"

# Operation keys
SOLAR_CALCULATOR = "SOLAR_CALCULATOR"
FBP_CALCULATE = "FBP_CALCULATE"
FBP_GET_FUELS = "FBP_GET_FUELS"
FBP_GET_FUELS_V2 = "FBP_GET_FUELS_V2"
FORECAST_GET = "FORECAST_GET"
FORECAST_LIST_CITIES = "FORECAST_LIST_CITIES"
WEATHER_GET = "WEATHER_GET"
WEATHER_LIST_CITIES = "WEATHER_LIST_CITIES"
GETDEFAULTS = "GETDEFAULTS"
LIST_TIMEZONES = "LIST_TIMEZONES"

HOURLY_FFMC_VAN_WAGNER = "HOURLY_FFMC_VAN_WAGNER"
HOURLY_FFMC_EQUILIBRIUM = "HOURLY_FFMC_EQUILIBRIUM"
HOURLY_FFMC_LAWSON = "HOURLY_FFMC_LAWSON"
HOURLY_FFMC_VAN_WAGNER_PREVIOUS = "HOURLY_FFMC_VAN_WAGNER_PREVIOUS"
HOURLY_FFMC_EQUILIBRIUM_PREVIOUS = "HOURLY_FFMC_EQUILIBRIUM_PREVIOUS"
HOURLY_FFMC_LAWSON_CONTIGUOUS = "HOURLY_FFMC_LAWSON_CONTIGUOUS"
DAILY_FFMC_VAN_WAGNER = "DAILY_FFMC_VAN_WAGNER"
DMC = "DMC"
DC = "DC"
FF = "FF"
ISI_FWI = "ISI_FWI"
ISI_FBP = "ISI_FBP"
BUI = "BUI"
FWI = "FWI"
DSR = "DSR"

# Broker topic kinds
STATUS = "status"
REPORTIN = "reportin"
VALIDATE = "validate"
MANAGE = "manage"
MANAGER = "manager"

# Exactly-once delivery
QOS = 2

# Message text sent with the final Complete status of a job
END_OF_RUN = "WISE.EXE operations"

# Scenario failure text handling
ERROR_MARKER = "Error:"
UNKNOWN_ERROR = "Unknown Error"

RERUN = "rerun"
