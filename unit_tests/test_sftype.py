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
"""
Test some basic functionality of the sharefs.sftype.sfType() class.

It is the base of all the conversions from Python objects to JSON and
vice versa that take place behind the scenes in the sharefs bindings.
"""

import datetime
import unittest

import ddt
import pytest

from sharefs import sfcatch, sfjson, sftype, sftypes


List = sftype.sfType([int])            # pylint: disable=invalid-name
ListList = sftype.sfType([List])       # pylint: disable=invalid-name
Dict = sftype.sfType({int: float})     # pylint: disable=invalid-name


TEST_SIMPLE = [
    (
        'list-ok',
        ListList,
        [[6, 5], [4, 3], [2, 1]],
        [[6, 5], [4, 3], [2, 1]],
        None,
    ),

    (
        'list-fail',
        ListList,
        [[1, 2], [3, 'meow', 4], [5, 6]],
        [[1, 2], [3, 4], [5, 6]],
        sfcatch.InvalidArgumentError,
    ),

    (
        'dict-ok',
        Dict,
        {1: 1.5, 2: 2.5, 3: 3.5, 4: 4.5, 5: 5.5},
        {2: 2.5, 5: 5.5, 3: 3.5, 1: 1.5, 4: 4.5},
        None,
    ),

    (
        'dict-fail',
        Dict,
        {1: 1.5, 2: 2.5, 'three': 3.5, 4: 'four point five', 5: 5.5},
        {2: 2.5, 5: 5.5, 1: 1.5},
        sfcatch.InvalidArgumentError,
    ),

    (
        'ip-version-list-ok',
        sftype.sfType([sftypes.IPVersion]),
        [4, 6, 4],
        [4, 6, 4],
        None,
    ),

    (
        'ip-version-list-fail',
        sftype.sfType([sftypes.IPVersion]),
        [4, 5, 6],
        [4, 6],
        sfcatch.InvalidArgumentError,
    ),

    (
        'share-id-list-fail',
        sftype.sfType([sftypes.ShareId]),
        ['6f5e', '', ' x', None],
        ['6f5e'],
        sfcatch.InvalidArgumentError,
    ),

    (
        'timestamp-list-ok',
        sftype.sfType([sftypes.Timestamp]),
        ['2015-09-18T10:25:24.000000', '2015-09-18T10:25:24',
         '2015-09-18T10:25:24Z'],
        [datetime.datetime(2015, 9, 18, 10, 25, 24)] * 3,
        None,
    ),

    (
        'timestamp-list-fail',
        sftype.sfType([sftypes.Timestamp]),
        ['2015-09-18T10:25:24.000000', 'yesterday'],
        [datetime.datetime(2015, 9, 18, 10, 25, 24)],
        sfcatch.InvalidArgumentError,
    ),
]


TEST_OBJECT = [
    (
        'link-list-ok',
        sftype.sfType([sftypes.Link]),
        [
            {'href': 'http://a/v2/snapshots/1', 'rel': 'self'},
            {'href': 'http://a/snapshots/1', 'rel': 'bookmark'},
        ],
        [
            {'href': 'http://a/v2/snapshots/1', 'rel': 'self'},
            {'href': 'http://a/snapshots/1', 'rel': 'bookmark'},
        ],
        None
    ),

    (
        'link-list-fail',
        sftype.sfType([sftypes.Link]),
        [
            {'rel': 'self'},
            {'href': 'http://a/snapshots/1', 'rel': 'bookmark'},
        ],
        [
            {'href': None, 'rel': 'self'},
            {'href': 'http://a/snapshots/1', 'rel': 'bookmark'},
        ],
        sfcatch.InvalidArgumentError,
    ),
]


@ddt.ddt
class TestSfType(unittest.TestCase):
    # pylint: disable=no-self-use
    """ Test that sfType.handleVal() converts data or raises errors. """

    @ddt.data(*TEST_SIMPLE)
    @ddt.unpack
    def test_simple(self, _name, dtype, args, exp, exp_error):
        """ Test with simple types: dictionaries, lists, etc. """
        if exp_error is None:
            assert dtype.handleVal(args) == exp
        else:
            with pytest.raises(exp_error) as err:
                dtype.handleVal(args)
            assert err.value.partial == exp

    @ddt.data(*TEST_OBJECT)
    @ddt.unpack
    def test_object(self, _name, dtype, args, exp, exp_error):
        """ Test with some object types defined in sharefs.sftypes. """
        if exp_error is None:
            res = [obj.to_json() for obj in dtype.handleVal(args)]
            assert res == exp
        else:
            with pytest.raises(exp_error) as err:
                dtype.handleVal(args)
            res = [obj.to_json() for obj in err.value.partial]
            assert res == exp

    def test_maybe_and_defaults(self):
        """ Optional values and default values. """
        opt = sftype.maybe(int)
        assert opt.handleVal(None) is None
        assert opt.handleVal('3') == 3
        assert opt.defaultVal() is None

        flag = sftype.sfType(False)
        assert flag.defaultVal() is False
        assert flag.handleVal(1) is True

        with pytest.raises(sfcatch.InvalidArgumentError):
            sftypes.ShareId.defaultVal()

    def test_error_location(self):
        """ The list index or the dictionary key is reported. """
        with pytest.raises(sfcatch.InvalidArgumentError) as err:
            sftype.sfType([sftypes.IPVersion]).handleVal([4, 6, 5])
        assert str(err.value).startswith('[IPVersion]: 2: Invalid IPVersion')

        with pytest.raises(sfcatch.InvalidArgumentError) as err:
            Dict.handleVal({1: 'one'})
        assert str(err.value).startswith('{int: float}: 1: ')

        with pytest.raises(sfcatch.InvalidArgumentError) as err:
            List.handleVal(5)
        assert str(err.value) == 'Expected a list, got 5'

    def test_request_options(self):
        """ The request options settings are inherited unless overridden. """
        assert sftypes.ShareNetworkCreateOpts.__envelope__ == 'share_network'
        assert sftypes.ShareNetworkCreateOpts.__omitEmpty__ == \
            sftypes.ShareNetworkIds.__omitEmpty__
        assert sftypes.ShareNetworkIds.__envelope__ is None
        assert sftypes.AddSecurityServiceOpts.__envelope__ == \
            'add_security_service'
        assert sftypes.SecurityServiceOpts.__envelope__ is None
        assert sftypes.SnapshotListOpts.__queryKeys__['name_pattern'] == \
            'name~'

        assert issubclass(sftypes.SnapshotUpdateOpts, sfjson.JsonObjectImpl)
        assert sftypes.SnapshotUpdateOpts.__strict__
        assert not sftypes.Snapshot.__strict__

        assert sorted(sftypes.ShareNetworkUpdateOpts.__jsonAttrDefs__) == [
            'description', 'name', 'neutron_net_id', 'neutron_subnet_id',
            'nova_net_id',
        ]
        assert 'security_service_id: SecurityServiceId' in \
            sftypes.RemoveSecurityServiceOpts.__doc__
