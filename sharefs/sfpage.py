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
""" Lazy, marker-driven walking of paginated list responses.

A list call returns a Pager right away without sending anything.
Each page is fetched with one GET request only when the caller advances
past the previous one. A page that embeds a "next" link in its
"<resource>_links" member continues the listing: the next request is
the same URL with the "marker" parameter set to the ID of the last item
of the page. A page without a "next" link, or with no items at all,
ends the listing.
"""

import logging

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .sftype import sfType


LOG = logging.getLogger(__name__)


def set_query_param(url, name, value):
    """ Return the URL with a single query parameter set or replaced. """
    parts = urlsplit(url)
    query = [(key, val) for key, val in parse_qsl(parts.query, keep_blank_values=True) if key != name]
    query.append((name, value))
    return urlunsplit(parts._replace(query=urlencode(sorted(query))))


class Page(object):
    """ A single page of a list response.

    Subclasses set "resource" to the response body key holding the items,
    "links" to the one holding the navigation links, and "returns" to
    the JsonObject class to decode each item into. """

    resource = None
    links = None
    returns = None

    def __init__(self, url, body, header=None):
        self.url = url
        self.body = body if body is not None else {}
        self.header = header

    def raw_items(self):
        return self.body.get(self.resource) or []

    def is_empty(self):
        return not self.raw_items()

    def extract(self):
        """ Decode the items on this page. """
        return sfType([self.returns]).handleVal(self.raw_items())

    def has_next(self):
        """ Check whether the page embeds a "next" continuation link. """
        return any(
            link.get('rel') == 'next' for link in self.body.get(self.links) or [])

    def last_marker(self):
        return self.raw_items()[-1]['id']

    def next_page_url(self):
        """ Return the URL of the next page, None if this is the last one. """
        if self.is_empty() or not self.has_next():
            return None
        return set_query_param(self.url, 'marker', self.last_marker())


class Pager(object):
    """ A restartable lazy sequence of the pages of a list response.

    Iterating over the pager itself yields the decoded items of all the
    pages in order; pages() yields the pages themselves. Nothing is
    requested until iteration starts, and each new iteration starts over
    from the first page. """

    def __init__(self, client, url, pageClass, err=None):
        self.client = client
        self.url = url
        self.pageClass = pageClass
        self.err = err

    def fetch(self, url):
        """ Request a single page; raise any error that occurred. """
        LOG.debug("Fetching page %s", url)
        response = self.client.request('GET', url, okCodes=(200,))
        return self.pageClass(url, response.body, response.headers)

    def pages(self):
        if self.err is not None:
            raise self.err

        url = self.url
        while url is not None:
            page = self.fetch(url)
            if page.is_empty():
                return
            yield page
            url = page.next_page_url()

    def __iter__(self):
        for page in self.pages():
            for item in page.extract():
                yield item

    def all(self):
        """ Fetch all the pages and return all their items as a list. """
        return list(self)
