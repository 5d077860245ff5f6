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
""" Share network calls of the Shared File Systems v2 API.

A share network holds the networking configuration (the Neutron network
and subnet or the nova network) that share servers are set up on.

The options arguments may be either dictionaries or objects of the
corresponding sftypes classes; more generally, any object with
a to_request_body() (or, for list_detail(), a to_query_parameters())
method is accepted.
"""

from . import sfapi
from . import sfpage
from . import sftypes as sf


RESOURCE = 'share-networks'


def create_url(client):
    return client.service_url(RESOURCE)


def resource_url(client, id):
    return client.service_url(RESOURCE, id)


def list_detail_url(client):
    return client.service_url(RESOURCE, 'detail')


def action_url(client, id):
    return client.service_url(RESOURCE, id, 'action')


class ShareNetworkResult(sfapi.ExtractableResult):
    """ A result that decodes into a ShareNetwork object. """
    envelope = 'share_network'
    returns = sf.ShareNetwork


class CreateResult(ShareNetworkResult):
    """ The result of create(); call extract() for the ShareNetwork. """


class GetResult(ShareNetworkResult):
    """ The result of get(); call extract() for the ShareNetwork. """


class UpdateResult(ShareNetworkResult):
    """ The result of update() and the security service calls. """


class DeleteResult(sfapi.HeaderResult):
    """ The result of delete(); only check extract_err(). """


class ShareNetworkPage(sfpage.Page):
    resource = 'share_networks'
    links = 'share_networks_links'
    returns = sf.ShareNetwork


def extract_share_networks(page):
    """ Return the ShareNetwork objects on a single page. """
    return page.extract()


def create(client, opts):
    """ Create a share network. """
    return sfapi.send(client, CreateResult(), sf.ShareNetworkCreateOpts, opts,
                      'POST', create_url(client), (200, 202))


def delete(client, id):
    """ Delete the share network with the given ID. """
    return client.perform(DeleteResult(), 'DELETE', resource_url(client, id),
                          decode=False)


def get(client, id):
    """ Retrieve the share network with the given ID. """
    return client.perform(GetResult(), 'GET', resource_url(client, id),
                          okCodes=(200,))


def update(client, id, opts):
    """ Change the name, description or networks of a share network.

    Only the attributes that are set are sent; an empty name or
    description clears it. """
    return sfapi.send(client, UpdateResult(), sf.ShareNetworkUpdateOpts, opts,
                      'PUT', resource_url(client, id), (200,))


def list_detail(client, opts=None):
    """ List the share networks with all their details.

    Return a Pager; nothing is requested until it is iterated over. """
    url = list_detail_url(client)
    try:
        url += sfapi.build_query(sf.ShareNetworkListOpts, opts)
    except sfapi.BUILD_ERRORS as err:
        return sfpage.Pager(client, url, ShareNetworkPage, err=err)
    return sfpage.Pager(client, url, ShareNetworkPage)


def add_security_service(client, id, opts):
    """ Associate a security service with a share network. """
    return sfapi.send(client, UpdateResult(), sf.AddSecurityServiceOpts, opts,
                      'POST', action_url(client, id), (200,))


def remove_security_service(client, id, opts):
    """ Dissociate a security service from a share network. """
    return sfapi.send(client, UpdateResult(), sf.RemoveSecurityServiceOpts, opts,
                      'POST', action_url(client, id), (200,))
