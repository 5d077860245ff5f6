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
""" Validation errors that keep the partially-built value around.

Request options and decoded responses are built member by member.
A Collector runs the conversion of each member, remembers the first
failure along with the attribute name, list index or dictionary key
where it happened, and lets the rest of the members be built anyway.
When the container is complete, Collector.finish() raises the failure
with the container's name prepended, e.g.

    SnapshotCreateOpts: share_id: Invalid ShareId "". Must match ...

and with the partially-built container in the error's "partial" member,
so that callers may still inspect whatever did validate. """


class InvalidArgumentError(Exception):
    """ An exception object containing the partially-built value. """

    def __init__(self, fmt, partial=None, **kwargs):
        super(InvalidArgumentError, self).__init__()
        self.partial = partial
        self.__dict__.update(**kwargs)
        self.message = fmt.format(**kwargs)

    def __str__(self):
        return self.message


def error(fmt, partial=None, **kwargs):
    """ Raise an error with the specified partial value and message. """
    raise InvalidArgumentError(fmt, partial, **kwargs)


# Errors raised by plain converters such as int(), float() and dict().
CONVERSION_ERRORS = (AttributeError, TypeError, ValueError)


class Collector(object):
    """ Build a container member by member, keeping the first failure. """

    def __init__(self, name):
        self.name = name
        self.failure = None

    def run(self, handle, func, where=None):
        """ Pass the value returned by func() to handle().

        If func() fails with a partially-built value, that value is
        passed to handle() instead. """
        try:
            handle(func())
        except InvalidArgumentError as err:
            if err.partial is not None:
                handle(err.partial)
            self.remember(err, where)
        except CONVERSION_ERRORS as err:
            self.remember(InvalidArgumentError('{msg}', msg=str(err)), where)

    def remember(self, err, where=None):
        if self.failure is not None:
            return
        if where is not None:
            err.message = '{where}: {msg}'.format(where=where, msg=err.message)
        self.failure = err

    def finish(self, partial):
        """ Raise the first failure, if any, with the built container. """
        if self.failure is None:
            return
        err = self.failure
        err.message = '{name}: {msg}'.format(name=self.name, msg=err.message)
        err.partial = partial
        raise err
