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
""" Tests for the sharefs.sfpage lazy pagination. """

import mock
import pytest

from sharefs import sfapi
from sharefs import sfcatch
from sharefs import sfpage
from sharefs import sftypes


class LinkPage(sfpage.Page):
    """ A page of links, keyed like a real list response. """
    resource = 'links'
    links = 'links_links'
    returns = sftypes.Link


def link(name):
    """ Build a single raw item; the "id" is used as the marker. """
    return {'id': name, 'href': '/v2/links/' + name, 'rel': 'self'}


NEXT = [{'href': 'http://controller/v2/links?marker=x', 'rel': 'next'}]


def fake_client(*bodies):
    """ Return a client that replies to GET requests with the bodies. """
    client = mock.Mock(spec=['request'])
    client.request.side_effect = [
        sfapi.Response(200, {}, body) for body in bodies
    ]
    return client


def test_set_query_param():
    """ The marker replaces any previous one; the query stays sorted. """
    assert sfpage.set_query_param('/v2/links', 'marker', 'a') == \
        '/v2/links?marker=a'
    assert sfpage.set_query_param(
        '/v2/links?marker=a&limit=2', 'marker', 'b') == \
        '/v2/links?limit=2&marker=b'
    assert sfpage.set_query_param(
        '/v2/links?name%7E=x&sort_dir=asc', 'marker', 'c') == \
        '/v2/links?marker=c&name~=x&sort_dir=asc'


def test_page():
    """ Examine a single page. """
    page = LinkPage('/v2/links?limit=2', {
        'links': [link('a'), link('b')],
        'links_links': NEXT,
    })
    assert not page.is_empty()
    assert page.has_next()
    assert page.last_marker() == 'b'
    assert page.next_page_url() == '/v2/links?limit=2&marker=b'
    assert [item.href for item in page.extract()] == \
        ['/v2/links/a', '/v2/links/b']

    page = LinkPage('/v2/links', {'links': [link('a')]})
    assert not page.has_next()
    assert page.next_page_url() is None

    page = LinkPage('/v2/links', {'links': [], 'links_links': NEXT})
    assert page.is_empty()
    assert page.next_page_url() is None

    page = LinkPage('/v2/links', None)
    assert page.is_empty()
    assert page.extract() == []


def test_two_pages():
    """ Two pages are fetched with exactly two requests, in order. """
    client = fake_client(
        {'links': [link('a'), link('b')], 'links_links': NEXT},
        {'links': [link('c')]},
    )
    pager = sfpage.Pager(client, '/v2/links?limit=2', LinkPage)
    assert client.request.call_count == 0

    items = pager.all()
    assert [item.href for item in items] == \
        ['/v2/links/a', '/v2/links/b', '/v2/links/c']
    assert client.request.call_args_list == [
        mock.call('GET', '/v2/links?limit=2', okCodes=(200,)),
        mock.call('GET', '/v2/links?limit=2&marker=b', okCodes=(200,)),
    ]


def test_lazy():
    """ The next page is only requested when the caller gets to it. """
    client = fake_client(
        {'links': [link('a')], 'links_links': NEXT},
        {'links': [link('b')]},
    )
    pages = sfpage.Pager(client, '/v2/links', LinkPage).pages()
    assert client.request.call_count == 0

    first = next(pages)
    assert client.request.call_count == 1
    assert first.last_marker() == 'a'

    second = next(pages)
    assert client.request.call_count == 2
    assert second.last_marker() == 'b'

    with pytest.raises(StopIteration):
        next(pages)
    assert client.request.call_count == 2


def test_restartable():
    """ Each iteration starts over from the first page. """
    client = fake_client(
        {'links': [link('a')]},
        {'links': [link('a')]},
    )
    pager = sfpage.Pager(client, '/v2/links', LinkPage)
    assert len(pager.all()) == 1
    assert len(pager.all()) == 1
    assert client.request.call_args_list == [
        mock.call('GET', '/v2/links', okCodes=(200,)),
        mock.call('GET', '/v2/links', okCodes=(200,)),
    ]


def test_empty_page_stops():
    """ An empty page ends the listing even with a "next" link. """
    client = fake_client(
        {'links': [link('a')], 'links_links': NEXT},
        {'links': [], 'links_links': NEXT},
    )
    pager = sfpage.Pager(client, '/v2/links', LinkPage)
    assert len(list(pager.pages())) == 1
    assert client.request.call_count == 2


def test_errors():
    """ Errors are raised while iterating, not when creating the pager. """
    client = fake_client()
    err = sfcatch.InvalidArgumentError('Invalid {what}', what='limit')
    pager = sfpage.Pager(client, '/v2/links', LinkPage, err=err)
    with pytest.raises(sfcatch.InvalidArgumentError):
        pager.all()
    assert client.request.call_count == 0

    client = mock.Mock(spec=['request'])
    client.request.side_effect = sfapi.UnexpectedStatusError(
        'GET', '/v2/links', 403, (200,), '')
    pager = sfpage.Pager(client, '/v2/links', LinkPage)
    with pytest.raises(sfapi.UnexpectedStatusError):
        list(pager)
