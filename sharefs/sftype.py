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
""" Declarative attribute types for the sharefs request and response objects.

An attribute type is an SfType: a name for error messages and docstrings,
a function that validates and converts a value, and a function that
supplies the value of a missing attribute. sfType() accepts the short
forms used in the JsonObject and RequestOptions declarations:

    str, int, Link         the class itself converts; the value is required
    [tp]                   a list of tp values, [] if missing
    {ktp: vtp}             a dictionary, {} if missing
    maybe(tp)              a tp value or None, None if missing
    False, 0, ...          a value of that type, the given value if missing
"""

import collections
import inspect

from . import sfcatch
from . import sfjson as js


SfType = collections.namedtuple('SfType', [
    'name',
    'handleVal',
    'defaultVal',
])


def required(name):
    """ Return a default value function for a mandatory attribute. """
    def missing():
        sfcatch.error('Missing {name} value', name=name)

    return missing


def sfValidator(name, validator):
    """ Wrap a validating function into a mandatory attribute type. """
    return SfType(name, validator, required(name))


def sfList(lst):
    assert len(lst) == 1, "sfList :: [itemType]"
    item = sfType(lst[0])
    name = "[{0}]".format(item.name)

    def buildList(values):
        if not isinstance(values, (list, tuple)):
            sfcatch.error('Expected a list, got {value!r}', value=values)

        res = []
        coll = sfcatch.Collector(name)
        for idx, value in enumerate(values):
            # pylint: disable=cell-var-from-loop
            coll.run(res.append, lambda: item.handleVal(value), idx)
        coll.finish(res)
        return res

    return SfType(name, buildList, list)


def sfDict(dct):
    assert len(dct) == 1, "sfDict :: {keyType: valueType}"
    [(keyTp, valTp)] = dct.items()
    keyT, valT = sfType(keyTp), sfType(valTp)
    name = "{{{0}: {1}}}".format(keyT.name, valT.name)

    def buildDict(values):
        if not isinstance(values, dict):
            sfcatch.error('Expected an object, got {value!r}', value=values)

        res = {}
        coll = sfcatch.Collector(name)
        for key, value in values.items():
            # pylint: disable=cell-var-from-loop
            keys = []
            coll.run(keys.append, lambda: keyT.handleVal(key), repr(key))
            if keys:
                coll.run(lambda val: res.__setitem__(keys[0], val),
                         lambda: valT.handleVal(value), repr(key))
        coll.finish(res)
        return res

    return SfType(name, buildDict, dict)


def maybe(tp):
    subType = sfType(tp)

    def validate(val):
        if val is None:
            return None
        return subType.handleVal(val)

    return SfType("Optional({0})".format(subType.name), validate, lambda: None)


def defaulted(val):
    """ A value of the same type as val, val itself if missing. """
    subType = sfType(type(val))
    name = "{0}, default={1}".format(subType.name, js.dumps(val))
    return SfType(name, subType.handleVal, lambda: val)


def sfType(tp):
    if isinstance(tp, SfType):
        return tp
    if isinstance(tp, list):
        return sfList(tp)
    if isinstance(tp, dict):
        return sfDict(tp)
    if inspect.isclass(tp):
        return SfType(tp.__name__, tp, required(tp.__name__))
    return defaulted(tp)


class JsonObject(object):
    """ Class decorator: declare the attributes of a JSON object.

    The attributes of a parent JsonObject class are inherited. Unknown
    attributes in the data passed to the constructor are ignored, so that
    responses from newer API versions may still be decoded. """

    strict = False

    def __init__(self, **attrs):
        self.attrDefs = dict(
            (name, sfType(tp)) for name, tp in attrs.items())
        self.classAttrs = {}

    def __call__(self, cls):
        attrDefs = {}
        if issubclass(cls, js.JsonObjectImpl):
            attrDefs.update(cls.__jsonAttrDefs__)
        attrDefs.update(self.attrDefs)

        members = dict(self.classAttrs)
        members.update(
            __jsonAttrDefs__=attrDefs,
            __strict__=self.strict,
            __module__=cls.__module__,
            __doc__=self.document(cls, attrDefs),
        )
        return type(cls.__name__, (cls, js.JsonObjectImpl), members)

    @staticmethod
    def document(cls, attrDefs):
        """ Append the attribute names and types to the class docstring. """
        lines = [
            cls.__doc__ or "{0}.{1}".format(cls.__module__, cls.__name__),
            "",
            "    JSON attributes:",
        ]
        lines.extend(
            "        {0}: {1}".format(name, attrDefs[name].name)
            for name in sorted(attrDefs))
        return "\n".join(lines) + "\n"


class RequestOptions(JsonObject):
    """ Class decorator: declare the attributes of a request options object.

    envelope: the request body key that wraps the attributes
    omitEmpty: attributes left out of the request body when set to ""
    queryKeys: query string names that differ from the attribute names

    The arguments that are not given are inherited from the parent class.
    Unknown attributes are rejected: passing e.g. "name" to a snapshot
    update, which only knows "display_name", is an error instead of
    an empty request. """

    strict = True

    def __init__(self, envelope=None, omitEmpty=None, queryKeys=None,
                 **attrs):
        super(RequestOptions, self).__init__(**attrs)
        for member, value in (('__envelope__', envelope),
                              ('__omitEmpty__', omitEmpty),
                              ('__queryKeys__', queryKeys)):
            if value is not None:
                self.classAttrs[member] = value
