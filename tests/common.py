import os
from contextlib import contextmanager
from unittest.mock import patch


class AlwaysEqual:
    def __eq__(self, _):
        return True


class NeverEqual:
    def __eq__(self, _):
        return False


class AlwaysLarger:
    def __lt__(self, _):
        return False

    def __le__(self, _):
        return False

    def __gt__(self, _):
        return True

    def __ge__(self, _):
        return True


class AlwaysSmaller:
    def __lt__(self, _):
        return True

    def __le__(self, _):
        return True

    def __gt__(self, _):
        return False

    def __ge__(self, _):
        return False


class RecordingSink:
    def __init__(self):
        self.notices = []

    def notice(self, message):
        self.notices.append(message)


@contextmanager
def system_tz(name):
    with patch.dict(os.environ, {"TZ": name}):
        yield


def system_tz_ams():
    return system_tz("Europe/Amsterdam")


def system_tz_nyc():
    return system_tz("America/New_York")
