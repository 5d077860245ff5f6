#
# Copyright (c) 2019 - 2021  StorPool.
# All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
""" The sharefs client settings.

The settings are read from /etc/sharefs.conf and then from the *.conf
files in /etc/sharefs.conf.d/ in lexical order, each file overriding the
previous ones. Within a file, the unnamed section applies to all hosts and
the section named after the current host (or the one passed to SFConfig)
overrides it. The command-line tool also lets the SF_* environment
variables override the files.
"""

import os
import platform

import confget


DEFAULTS = {
    "SF_API_ENDPOINT": "http://127.0.0.1:8786/v2",
    "SF_AUTH_TOKEN": "",
    "SF_API_TIMEOUT": "300",
    "SF_API_MICROVERSION": "",
}


class SFConfigException(Exception):
    """ An error that occurred while reading the sharefs settings. """


class SFConfig(object):
    """ The sharefs settings, accessible as a read-only dictionary. """

    PATH_CONFIG = '/etc/sharefs.conf'
    PATH_CONFIG_DIR = '/etc/sharefs.conf.d'

    def __init__(self, section=None, missing_ok=False, environ=None):
        self.section = section if section is not None else platform.node()
        self._dict = dict(DEFAULTS)
        for fname in self.get_config_files(missing_ok=missing_ok):
            self._dict.update(self.read_file(fname))

        if environ is not None:
            self._dict.update(
                (name, environ[name]) for name in DEFAULTS if name in environ)

    @classmethod
    def get_config_files(cls, missing_ok=False):
        """ Return the paths of the configuration files to read.

        If missing_ok is set, the files that do not exist are skipped;
        otherwise reading them fails later. """
        files = [cls.PATH_CONFIG]
        if os.path.isdir(cls.PATH_CONFIG_DIR):
            files.extend(
                os.path.join(cls.PATH_CONFIG_DIR, fname)
                for fname in sorted(os.listdir(cls.PATH_CONFIG_DIR))
                if fname.endswith('.conf') and not fname.startswith('.'))

        if missing_ok:
            return [path for path in files if os.path.isfile(path)]
        return files

    def read_file(self, fname):
        """ Return the unnamed section of a file overridden by our own. """
        try:
            cfg = confget.Config([], filename=fname)
            data = confget.BACKENDS['ini'](cfg).read_file()
        except Exception as err:  # pylint: disable=broad-except
            raise SFConfigException(
                'Could not parse the {fname} sharefs configuration '
                'file: {err}'.format(fname=fname, err=err))

        res = dict(data.get('', {}))
        res.update(data.get(self.section, {}))
        return res

    def __getitem__(self, key):
        return self._dict[key]

    def get(self, key, defval=None):
        return self._dict.get(key, defval)

    def __iter__(self):
        return iter(self._dict)

    def items(self):
        return self._dict.items()

    def keys(self):
        return self._dict.keys()


def client_args(cfg):
    """ Convert the settings into sfapi.ServiceClient arguments.

    An empty SF_API_MICROVERSION means that no version header is sent. """
    try:
        timeout = int(cfg['SF_API_TIMEOUT'])
    except ValueError:
        raise SFConfigException(
            'Invalid SF_API_TIMEOUT value "{val}": must be a number of '
            'seconds'.format(val=cfg['SF_API_TIMEOUT']))

    return {
        'endpoint': cfg['SF_API_ENDPOINT'],
        'token': cfg['SF_AUTH_TOKEN'],
        'timeout': timeout,
        'microversion': cfg['SF_API_MICROVERSION'] or None,
    }
