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
""" Classes for accessing the Shared File Systems v2 API over HTTP.

The ServiceClient class holds the connection parameters for a single
API endpoint; it is passed as the first argument to each of the calls
in the sharenetworks and snapshots modules. The most common way to
initialize it is to use the ServiceClient.fromConfig() class method that
will parse the sharefs configuration files:

    >>> from sharefs import sfapi, snapshots
    >>> client = sfapi.ServiceClient.fromConfig()
    >>> res = snapshots.get(client, '2447cd3a-e28c-4cea-9bff-5a5e6a2a4a1a')
    >>> if res.ok:
    ...     print(res.extract().status)

Each call sends exactly one request and returns a result object instead
of raising an exception; validation, network and unexpected status
errors are all stored in the result's "err" member.
"""

import collections
import http.client as http
import logging

from urllib.parse import urlsplit

from . import sfjson as js

from .sfcatch import InvalidArgumentError, error
from .sfconfig import SFConfig, client_args


VERSION = '1.0.0'

MICROVERSION_HEADER = 'X-OpenStack-Manila-API-Version'

DEFAULT_OK_CODES = {
    'GET': (200,),
    'POST': (201, 202),
    'PUT': (201, 202),
    'DELETE': (200, 202, 204),
}

LOG = logging.getLogger(__name__)


Response = collections.namedtuple('Response', [
    'status',
    'headers',
    'body',
])


class ApiError(Exception):
    """ An error reply from the API server.

    The Shared File Systems API reports errors as a JSON object with
    a single member named after the error kind, e.g.
    {"itemNotFound": {"code": 404, "message": "..."}}. """

    def __init__(self, status, json):
        super(ApiError, self).__init__()
        self.status = status
        self.json = json
        self.name = "<Missing error name>"
        self.desc = "<Missing error description>"
        if isinstance(json, dict) and len(json) == 1:
            name, details = list(json.items())[0]
            self.name = name
            if isinstance(details, dict):
                self.desc = details.get('message', self.desc)

    def __str__(self):
        return "{0}: {1}".format(self.name, self.desc)


class UnexpectedStatusError(ApiError):
    """ The response status code is not one of the expected ones. """

    def __init__(self, method, url, status, expected, body, headers=None):
        try:
            json = js.loads(body) if body else None
        except ValueError:
            json = None
        super(UnexpectedStatusError, self).__init__(status, json)
        self.method = method
        self.url = url
        self.expected = tuple(expected)
        self.body = body
        self.headers = headers

    def __str__(self):
        return "Expected HTTP status {exp} for {method} {url}, " \
            "got {status}: {body}".format(
                exp=", ".join(str(code) for code in self.expected),
                method=self.method, url=self.url, status=self.status,
                body=self.body)


TRANSPORT_ERRORS = (OSError, http.HTTPException)
BUILD_ERRORS = (InvalidArgumentError, ValueError)
RESULT_ERRORS = (ApiError, ValueError) + TRANSPORT_ERRORS


class Result(object):
    """ The outcome of a single API call.

    body: The decoded JSON response body, if any.
    header: The response headers, if a response was received.
    err: The error that occurred, if any.
    """

    def __init__(self, body=None, header=None, err=None):
        self.body = body
        self.header = header
        self.err = err

    @property
    def ok(self):
        return self.err is None

    def extract_err(self):
        """ Return the error stored in the result, None if none. """
        return self.err

    def __repr__(self):
        return "{cls}(body={body!r}, header={header!r}, err={err!r})".format(
            cls=type(self).__name__, body=self.body, header=self.header,
            err=self.err)


class HeaderResult(Result):
    """ The outcome of an API call that returns no response body. """


class ExtractableResult(Result):
    """ The outcome of an API call that returns a single object.

    Subclasses set "envelope" to the response body key and "returns"
    to the JsonObject class to decode the object into. """

    envelope = None
    returns = None

    def extract(self):
        """ Decode the response body; raise the stored error if any. """
        if self.err is not None:
            raise self.err
        if not isinstance(self.body, dict) or self.envelope not in self.body:
            error('{cls}: no "{envelope}" object in the response body',
                  cls=type(self).__name__, envelope=self.envelope)
        return self.returns(self.body[self.envelope])


def build_body(optsClass, opts):
    """ Ask an options object for its request body.

    Any object with a to_request_body() method is accepted; a dict is
    first validated into an optsClass object. """
    if isinstance(opts, dict):
        opts = optsClass(opts)
    return opts.to_request_body()


def build_query(optsClass, opts):
    """ Ask an options object for its query string; see build_body(). """
    if opts is None:
        return ''
    if isinstance(opts, dict):
        opts = optsClass(opts)
    return opts.to_query_parameters()


class ServiceClient(object):
    '''Shared File Systems v2 API endpoint abstraction'''

    def __init__(self, endpoint, token='', timeout=300, microversion=None, source=None):
        parsed = urlsplit(endpoint)
        if parsed.scheme not in ('http', 'https') or not parsed.hostname:
            raise ValueError(
                "Invalid API endpoint {ep!r}: must be an absolute "
                "http:// or https:// URL".format(ep=endpoint))

        self._endpoint = endpoint
        self._https = parsed.scheme == 'https'
        self._host = parsed.hostname
        self._port = parsed.port
        self._prefix = parsed.path.rstrip('/')
        self._timeout = timeout
        self._microversion = microversion if microversion else None
        self._authHeader = {"X-Auth-Token": str(token)}

        if source is not None:
            self._source = {"source_address": (source, 0)}
        else:
            self._source = {}

    @classmethod
    def fromConfig(klass, cfg=None, **kwargs):
        """ Create a client from the sharefs configuration settings. """
        if cfg is None:
            cfg = SFConfig()
        args = client_args(cfg)
        args.update(kwargs)
        return klass(**args)

    @property
    def endpoint(self):
        return self._endpoint

    def service_url(self, *parts):
        """ Return the HTTP path of a resource under the API endpoint. """
        return "{pref}/{path}".format(
            pref=self._prefix, path="/".join(str(part) for part in parts))

    def _connect(self):
        if self._https:
            conn_class = http.HTTPSConnection
        else:
            conn_class = http.HTTPConnection
        return conn_class(self._host, self._port, timeout=self._timeout, **self._source)

    def _headers(self, json):
        headers = dict(self._authHeader)
        headers["Accept"] = "application/json"
        headers["User-Agent"] = "python-sharefs/" + VERSION
        if json is not None:
            headers["Content-Type"] = "application/json"
        if self._microversion is not None:
            headers[MICROVERSION_HEADER] = self._microversion
        return headers

    def request(self, method, url, json=None, okCodes=None):
        """ Send a single request; return the decoded Response.

        Raise UnexpectedStatusError if the response status is not one of
        okCodes (or the method's default ones); network errors are
        propagated unchanged. """
        if okCodes is None:
            okCodes = DEFAULT_OK_CODES[method]
        if json is not None:
            json = js.dumps(json)

        conn = None
        try:
            conn = self._connect()
            conn.request(method, url, json, self._headers(json))
            response = conn.getresponse()
            status, raw = response.status, response.read()
            headers = dict(response.getheaders())
        finally:
            if conn:
                conn.close()

        if isinstance(raw, bytes):
            raw = raw.decode('UTF-8')
        LOG.debug("%s %s: HTTP %d", method, url, status)

        if status not in okCodes:
            raise UnexpectedStatusError(method, url, status, okCodes, raw, headers)

        body = js.loads(raw) if raw.strip() else None
        return Response(status, headers, body)

    def perform(self, result, method, url, json=None, okCodes=None, decode=True):
        """ Send a single request and fill in the result object.

        Any validation, network or status error is stored in the result's
        "err" member instead of being raised. """
        try:
            response = self.request(method, url, json=json, okCodes=okCodes)
        except RESULT_ERRORS as err:
            LOG.debug("%s %s failed: %s", method, url, err)
            result.err = err
            result.header = getattr(err, "headers", None)
            return result

        result.header = response.headers
        if decode:
            result.body = response.body
        return result


def send(client, result, optsClass, opts, method, url, okCodes=None, decode=True):
    """ Build a request body out of opts, send it, fill in the result.

    A body that cannot be built is reported in the result's "err" member
    and no request is sent; see build_body() and ServiceClient.perform(). """
    try:
        body = build_body(optsClass, opts)
    except BUILD_ERRORS as err:
        result.err = err
        return result
    return client.perform(result, method, url, json=body, okCodes=okCodes, decode=decode)
