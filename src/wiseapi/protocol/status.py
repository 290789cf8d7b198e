""" The closed set of job status codes reported by the Builder on the
    broker. Codes outside the table map to :attr:`Status.UNRECOGNIZED`,
    whose label is the empty string.
"""

import enum


class Status(enum.Enum):

    SUBMITTED = (0, 'Submitted')
    STARTED = (1, 'Started')
    SCENARIO_STARTED = (2, 'Scenario Started')
    SCENARIO_COMPLETED = (3, 'Scenario Completed')
    SCENARIO_FAILED = (4, 'Scenario Failed')
    COMPLETE = (5, 'Complete')
    FAILED = (6, 'Failed')
    ERROR = (7, 'Error')
    INFORMATION = (8, 'Information')
    SHUTDOWN_REQUESTED = (9, 'Shutdown Requested')
    UNRECOGNIZED = (None, '')


    def __init__(self, code, label):
        self.code = code
        self.label = label


    def __str__(self):
        return self.label


    @classmethod
    def lookup(cls, code):
        """ Return the :class:`Status` for the integer *code*. Anything that
            is not an integer in the table, including booleans, returns
            :attr:`UNRECOGNIZED`.
        """

        if isinstance(code, bool):
            return cls.UNRECOGNIZED

        if isinstance(code, float):
            if code.is_integer():
                code = int(code)
            else:
                return cls.UNRECOGNIZED

        if isinstance(code, int):
            pass
        else:
            return cls.UNRECOGNIZED

        try:
            return _by_code[code]
        except KeyError:
            return cls.UNRECOGNIZED


# end of class Status


_by_code = dict()

for _status in Status:
    if _status.code is not None:
        _by_code[_status.code] = _status

del _status


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
