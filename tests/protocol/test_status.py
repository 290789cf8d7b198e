from wiseapi.protocol.status import Status


def test_known_codes():

    labels = ('Submitted', 'Started', 'Scenario Started',
              'Scenario Completed', 'Scenario Failed', 'Complete', 'Failed',
              'Error', 'Information', 'Shutdown Requested')

    for code, label in enumerate(labels):
        status = Status.lookup(code)
        assert status.code == code
        assert status.label == label
        assert str(status) == label


def test_unrecognized_codes():

    for code in (-1, 10, 42, None, 'five', True, False, 5.5, [5]):
        status = Status.lookup(code)
        assert status is Status.UNRECOGNIZED
        assert status.label == ''


def test_integral_float():

    assert Status.lookup(5.0) is Status.COMPLETE


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
