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
""" A non-interactive command-line interface to the sharefs API calls. """

import argparse
import collections
import datetime
import io
import json
import logging
import os
import sys

from sharefs import sfapi, sfconfig, sfpage, sharenetworks, snapshots


Operation = collections.namedtuple('Operation', [
    'func',
    'args',
    'json',
])

JSON_NONE = 'none'
JSON_OPTIONAL = 'optional'
JSON_REQUIRED = 'required'

OPERATIONS = {
    'share-networks.create':
        Operation(sharenetworks.create, [], JSON_REQUIRED),
    'share-networks.get':
        Operation(sharenetworks.get, ['id'], JSON_NONE),
    'share-networks.update':
        Operation(sharenetworks.update, ['id'], JSON_REQUIRED),
    'share-networks.delete':
        Operation(sharenetworks.delete, ['id'], JSON_NONE),
    'share-networks.list':
        Operation(sharenetworks.list_detail, [], JSON_OPTIONAL),
    'share-networks.add-security-service':
        Operation(sharenetworks.add_security_service, ['id'], JSON_REQUIRED),
    'share-networks.remove-security-service':
        Operation(sharenetworks.remove_security_service, ['id'],
                  JSON_REQUIRED),
    'snapshots.create':
        Operation(snapshots.create, [], JSON_REQUIRED),
    'snapshots.get':
        Operation(snapshots.get, ['id'], JSON_NONE),
    'snapshots.update':
        Operation(snapshots.update, ['id'], JSON_REQUIRED),
    'snapshots.delete':
        Operation(snapshots.delete, ['id'], JSON_NONE),
    'snapshots.list':
        Operation(snapshots.list_detail, [], JSON_OPTIONAL),
    'snapshots.reset-status':
        Operation(snapshots.reset_status, ['id'], JSON_REQUIRED),
    'snapshots.force-delete':
        Operation(snapshots.force_delete, ['id'], JSON_NONE),
}

def deep_to_json(data):
    """ Convert an API reply to serializable data. """
    if getattr(data, 'to_json', None) is not None:
        return deep_to_json(data.to_json())
    if isinstance(data, list):
        return [deep_to_json(obj) for obj in data]
    if isinstance(data, dict):
        return dict([(name, deep_to_json(value))
                     for name, value in data.items()])
    if isinstance(data, datetime.datetime):
        return data.isoformat()
    return data


def from_config_with_overrides(**kwargs):
    """ Create a client object with settings taken from the sharefs
    configuration files and overridden by environment variables. """
    cfg = sfconfig.SFConfig(missing_ok=True, environ=os.environ)
    return sfapi.ServiceClient.fromConfig(cfg, **kwargs)


def err_exit(name, descr, **args):
    """ Output an error in JSON form to the standard error stream and exit. """
    err = {
        'error': {
            'name': name,
            'descr': descr,
        },
    }
    err['error'].update(args)
    sys.exit(json.dumps(err, indent=2))


def parse_args():
    """ Parse the command-line arguments, going through some weird contortions
    to not allow the ArgumentParser to output anything to the standard error
    stream, since we want to report all errors in JSON form. """
    parser = argparse.ArgumentParser(
        prog='sharefs_req',
        description='Non-interactive Shared File Systems API client',
    )
    parser.add_argument('-N', '--noop', action='store_true',
                        help='No-operation mode')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log the HTTP requests to the standard error')
    parser.add_argument('--json', type=str,
                        help='JSON options to send to the API')
    parser.add_argument('operation', type=str,
                        help='The operation to perform, '
                             'e.g. "snapshots.get"')
    parser.add_argument('args', type=str, nargs='*',
                        help='Arguments to pass to the operation')

    # OK, so this is a bit weird...
    errbuf = io.StringIO()
    orig_stderr = sys.stderr
    sys.stderr = errbuf
    try:
        args = parser.parse_args()
    except SystemExit as ex_err:
        sys.stderr = orig_stderr
        if ex_err.code == 0:
            sys.exit(0)
        err_exit('cliParseArgs',
                 'Could not parse the command-line arguments',
                 parser_errors=errbuf.getvalue())
    except BaseException as err:  # pylint: disable=broad-except
        sys.stderr = orig_stderr
        err_exit('cliParseArgs', str(err),
                 parser_errors=errbuf.getvalue())

    sys.stderr = orig_stderr
    return args


def get_operation(args):
    """ Find the operation with the specified name.

    Validate the number of arguments and the presence of JSON options. """
    oper = OPERATIONS.get(args.operation)
    if oper is None:
        err_exit('cliUnknownOperation', 'Unknown operation',
                 operation=args.operation,
                 known=sorted(OPERATIONS.keys()))

    if len(oper.args) != len(args.args):
        err_exit('cliInvalidNumberOfArguments',
                 'Invalid number of arguments supplied',
                 supplied_count=len(args.args),
                 required_count=len(oper.args),
                 required_names=oper.args)

    if oper.json == JSON_REQUIRED and args.json is None:
        err_exit('cliJSONRequired',
                 'This operation requires JSON options')
    elif oper.json == JSON_NONE and args.json is not None:
        err_exit('cliNoJSONRequired',
                 'This operation does not accept any JSON options')

    return oper


def report(res):
    """ Decode a call's result; return the data to output. """
    if isinstance(res, sfpage.Pager):
        return deep_to_json(res.all())
    if res.err is not None:
        raise res.err
    if isinstance(res, sfapi.ExtractableResult):
        return deep_to_json(res.extract())
    return {'ok': True}


def main():
    """ Main function: parse the arguments, make the call, report. """
    args = parse_args()
    oper = get_operation(args)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    method_args = list(args.args)
    if args.json is not None:
        try:
            method_args.append(json.loads(args.json))
        except ValueError as err:
            err_exit('cliParseJSON', str(err))

    if args.noop:
        print('About to invoke {func} with {args}'
              .format(func=oper.func.__name__, args=repr(method_args)))
        return

    try:
        client = from_config_with_overrides()
    except KeyError as k_err:
        err_exit('cliMissingConfigVariable',
                 'Missing configuration variable',
                 missing=k_err.args[0])
    except (sfconfig.SFConfigException, ValueError) as err:
        err_exit('cliInitAPI', str(err))

    try:
        print(json.dumps(report(oper.func(client, *method_args)), indent=2))
    except sfapi.ApiError as err:
        print(json.dumps(err.json, indent=2), file=sys.stderr)
        sys.exit(3 if err.status == 404 else 2)
    except sfapi.BUILD_ERRORS + sfapi.TRANSPORT_ERRORS as err:
        err_exit('cliRequestFailed', str(err))


if __name__ == '__main__':
    main()
