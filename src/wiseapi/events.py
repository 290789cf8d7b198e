""" The job lifecycle events emitted by :class:`wiseapi.manager.JobManager`.
    Every event carries the *manager* that emitted it and the *time* the
    event occurred, as an aware :class:`datetime.datetime`.
"""

import enum


class Category(enum.Enum):

    SIMULATION_COMPLETE = 'simulationComplete'
    SCENARIO_COMPLETE = 'scenarioComplete'
    STATISTICS_RECEIVED = 'statisticsReceived'
    VALIDATION_RECEIVED = 'validationReceived'



class Event:

    category = None

    def __init__(self, manager, time):
        self.manager = manager
        self.time = time


    def __repr__(self):
        return '<%s at %s>' % (self.__class__.__name__, self.time.isoformat())


# end of class Event



class SimulationComplete(Event):
    """ The job has finished running every scenario.
    """

    category = Category.SIMULATION_COMPLETE


# end of class SimulationComplete



class ScenarioComplete(Event):
    """ A single scenario finished. If *success* is False the
        *error_message* describes the failure; otherwise it is None.
    """

    category = Category.SCENARIO_COMPLETE

    def __init__(self, manager, time, success, error_message=None):
        Event.__init__(self, manager, time)
        self.success = success
        self.error_message = error_message


# end of class ScenarioComplete



class StatisticsReceived(Event):
    """ The Builder reported statistics for a running job, as an ordered
        list of :class:`wiseapi.protocol.message.Statistic` instances.
    """

    category = Category.STATISTICS_RECEIVED

    def __init__(self, manager, time, statistics):
        Event.__init__(self, manager, time)
        self.statistics = statistics


# end of class StatisticsReceived



class ValidationReceived(Event):

    category = Category.VALIDATION_RECEIVED

    def __init__(self, manager, time, validation):
        Event.__init__(self, manager, time)
        self.validation = validation


# end of class ValidationReceived


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
