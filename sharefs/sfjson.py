#
# Copyright (c) 2014 - 2021  StorPool.
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
""" Low-level helpers for the sharefs JsonObject implementation. """

import datetime

from urllib.parse import urlencode

import simplejson as js

from . import sfcatch


SORT_KEYS = False
INDENT = None
SEPARATORS = (',', ':')

load = js.load  # pylint: disable=invalid-name
loads = js.loads  # pylint: disable=invalid-name


def dump(obj, filep):
    """ Serialize an object with reasonable default settings. """
    return js.dump(obj, filep, cls=JsonEncoder, sort_keys=SORT_KEYS,
                   indent=INDENT, separators=SEPARATORS)


def dumps(obj):
    """ Serialize an object to a string with reasonable default settings. """
    return js.dumps(obj, cls=JsonEncoder, sort_keys=SORT_KEYS,
                    indent=INDENT, separators=SEPARATORS)


def clear_none(data):
    """ Recursively remove any NoneType values. """
    if getattr(data, 'to_json', None) is not None:
        data = data.to_json()

    if isinstance(data, dict):
        return dict([
            (item[0], clear_none(item[1]))
            for item in data.items()
            if item[1] is not None
        ])

    if isinstance(data, list) or isinstance(data, set):
        return [clear_none(item) for item in data if item is not None]

    return data


class JsonEncoder(js.JSONEncoder):
    """ Help serialize a JsonObject instance. """

    def default(self, o):
        """ Invoke a suitable serialization function. """
        # pylint: disable=method-hidden
        if isinstance(o, JsonObjectImpl):
            return o.to_json()
        if isinstance(o, set):
            return list(o)
        if isinstance(o, datetime.datetime):
            return o.isoformat()
        return super(JsonEncoder, self).default(o)


class JsonObjectImpl(object):
    """ Base class for a serializable value object; see sftype.JsonObject.

    The sftype.RequestOptions decorator sets the class attributes that
    control the rendering of request options:
      __envelope__: the key that wraps the attributes in a request body;
      __omitEmpty__: attributes left out of the request body when "";
      __queryKeys__: query-string parameter names that differ from
                     the attribute names;
      __strict__: reject attributes that are not declared.
    """

    __envelope__ = None
    __omitEmpty__ = ()
    __queryKeys__ = {}
    __strict__ = False

    def __new__(cls, json=None, **kwargs):
        """ Construct a value object as per its __jsonAttrDefs__. """

        if isinstance(json, cls):
            assert not kwargs, \
                "Unsupported update on already contructed object"
            return json

        if json is not None and not isinstance(json, dict):
            sfcatch.error('{cls}: expected an object, got {value!r}',
                          cls=cls.__name__, value=json)
        j = dict(json) if json is not None else {}
        j.update(kwargs)

        self = super(JsonObjectImpl, cls).__new__(cls)
        object.__setattr__(self, '__jsonAttrs__', {})

        coll = sfcatch.Collector(cls.__name__)
        for attr, attr_def in self.__jsonAttrDefs__.items():
            data = []
            # pylint: disable=cell-var-from-loop
            coll.run(
                data.append,
                lambda: attr_def.handleVal(j[attr]) if attr in j
                else attr_def.defaultVal(),
                attr)
            self.__jsonAttrs__[attr] = data[0] if data else None

        unknown = sorted(
            str(attr) for attr in j if attr not in self.__jsonAttrDefs__)
        if unknown and self.__strict__:
            coll.remember(sfcatch.InvalidArgumentError(
                'Unknown attributes {names}; accepted: {known}',
                names=', '.join(unknown),
                known=', '.join(sorted(self.__jsonAttrDefs__))))
        coll.finish(self)

        return self

    def __getattr__(self, attr):
        if attr not in self.__jsonAttrs__:
            error = "'{cls}' has no attribute '{attr}'".format(
                cls=self.__class__.__name__, attr=attr)
            raise AttributeError(error)

        return self.__jsonAttrs__[attr]

    def __setattr__(self, attr, value):
        if attr not in self.__jsonAttrDefs__:
            error = "'{cls}' has no attribute '{attr}'".format(
                cls=self.__class__.__name__, attr=attr)
            raise AttributeError(error)

        self.__jsonAttrs__[attr] = self.__jsonAttrDefs__[attr].handleVal(value)

    def __eq__(self, other):
        if not isinstance(other, JsonObjectImpl):
            return NotImplemented
        return type(self) is type(other) and self.to_json() == other.to_json()

    __hash__ = None

    def to_json(self):
        """ Store the member fields into a dictionary. """
        return dict(
            (attr, getattr(self, attr)) for attr in self.__jsonAttrDefs__)

    def validated(self):
        """ Run all the attribute validators again on a fresh copy.

        This catches partially-constructed objects, e.g. ones taken from
        an InvalidArgumentError's "partial" member. """
        return type(self)(self.to_json())

    def to_request_body(self):
        """ Build a request body: the set attributes under the envelope. """
        assert self.__envelope__ is not None, \
            '{cls} may not be sent as a request body'.format(
                cls=type(self).__name__)
        body = clear_none(self.validated())
        for attr in self.__omitEmpty__:
            if body.get(attr) == '':
                del body[attr]
        return {self.__envelope__: body}

    def to_query_parameters(self):
        """ Build a query string out of the attributes that are set.

        Attributes at their zero value (None, False, 0, "") are skipped;
        an empty string is returned if nothing is left. """
        params = []
        for attr, value in self.validated().to_json().items():
            if not value:
                continue
            if isinstance(value, bool):
                value = 'true'
            params.append((self.__queryKeys__.get(attr, attr), value))

        if not params:
            return ''
        return '?' + urlencode(sorted(params))

    def __iter__(self):
        return iter(self.to_json().items())

    _asdict = to_json
    __str__ = __repr__ = lambda self: str(self.to_json())
