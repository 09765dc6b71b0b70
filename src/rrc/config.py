""" Runtime settings for a robot endpoint. Values are resolved in order:
    built-in defaults, the JSON file ``robot.json`` in the rrc home
    directory (or an explicit path), ``RRC_<NAME>`` environment variables,
    and finally keyword arguments.

    The home directory is ``$RRC_HOME`` if set, otherwise ``~/.rrc``.
"""

import os

from . import json
from .protocol.types import LogLevel


defaults = dict()
defaults['command_address'] = 'tcp://*:7001'
defaults['telemetry_address'] = 'tcp://*:7002'
defaults['heartbeat_latency'] = 0.1
defaults['buffer_size'] = 10
defaults['map_buffer_size'] = 1
defaults['update_period'] = 0.01
defaults['statistics'] = False
defaults['permission_ttl'] = 60.0
defaults['log_level'] = int(LogLevel.CUSTOM) - 1


def _directory():

    try:
        home = os.environ['RRC_HOME']
    except KeyError:
        home = os.path.join('~', '.rrc')

    return os.path.expanduser(home)


directory = _directory()



def _coerce(key, value):
    """ Convert a string from the environment to the type of the default
        for *key*.
    """

    default = defaults[key]

    if isinstance(default, bool):
        lowered = value.strip().lower()
        if lowered in ('1', 'true', 'yes', 'on'):
            return True
        if lowered in ('0', 'false', 'no', 'off', ''):
            return False
        raise ValueError("invalid boolean for RRC_%s: %r" % (key.upper(), value))

    if key == 'permission_ttl' and value.strip().lower() in ('', 'none'):
        return None

    if isinstance(default, int):
        return int(value)

    if isinstance(default, float):
        return float(value)

    return value



class Settings:
    """ A convenience class to represent rrc settings. To first order an
        instance acts like a dictionary; each setting is also available as
        an attribute.
    """

    def __init__(self, path=None, environ=None, **overrides):

        self._values = dict(defaults)

        if path is None:
            candidate = os.path.join(directory, 'robot.json')
            if os.path.exists(candidate):
                path = candidate

        if path is not None:
            self.load(path)

        if environ is None:
            environ = os.environ

        for key in defaults.keys():
            try:
                value = environ['RRC_' + key.upper()]
            except KeyError:
                continue

            self._values[key] = _coerce(key, value)

        for key, value in overrides.items():
            self[key] = value


    def __contains__(self, key):
        return key in self._values


    def __getitem__(self, key):
        return self._values[key]


    def __setitem__(self, key, value):

        if key not in defaults:
            raise KeyError('unknown setting: ' + str(key))

        self._values[key] = value


    def __getattr__(self, name):

        if name.startswith('_'):
            raise AttributeError(name)

        try:
            return self._values[name]
        except KeyError:
            raise AttributeError('unknown setting: ' + name)


    def __repr__(self):
        return 'config.Settings: ' + repr(self._values)


    def load(self, path):
        """ Merge the settings in the JSON file at *path*. Unknown keys are
            an error, a typo should not silently fall back to a default.
        """

        with open(path, 'rb') as contents:
            loaded = json.loads(contents.read())

        if not isinstance(loaded, dict):
            raise ValueError("%s: expected a JSON object" % (path))

        for key, value in loaded.items():
            self[key] = value


    def save(self, path=None):
        """ Write the current settings as JSON, by default to ``robot.json``
            in the rrc home directory.
        """

        if path is None:
            os.makedirs(directory, exist_ok=True)
            path = os.path.join(directory, 'robot.json')

        with open(path, 'wb') as contents:
            contents.write(json.dumps(self._values))

        return path


    def items(self):
        return self._values.items()


# end of class Settings


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
