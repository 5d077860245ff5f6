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
""" Share snapshot calls of the Shared File Systems v2 API. """

from . import sfapi
from . import sfpage
from . import sftypes as sf


RESOURCE = 'snapshots'

FORCE_DELETE_BODY = {'force_delete': None}


def create_url(client):
    return client.service_url(RESOURCE)


def resource_url(client, id):
    return client.service_url(RESOURCE, id)


def list_detail_url(client):
    return client.service_url(RESOURCE, 'detail')


def action_url(client, id):
    return client.service_url(RESOURCE, id, 'action')


class SnapshotResult(sfapi.ExtractableResult):
    """ A result that decodes into a Snapshot object. """
    envelope = 'snapshot'
    returns = sf.Snapshot


class CreateResult(SnapshotResult):
    """ The result of create(); call extract() for the Snapshot. """


class GetResult(SnapshotResult):
    """ The result of get(); call extract() for the Snapshot. """


class UpdateResult(SnapshotResult):
    """ The result of update(); call extract() for the Snapshot. """


class DeleteResult(sfapi.HeaderResult):
    """ The result of delete(); only check extract_err(). """


class ResetStatusResult(sfapi.HeaderResult):
    """ The result of reset_status(); only check extract_err(). """


class ForceDeleteResult(sfapi.HeaderResult):
    """ The result of force_delete(); only check extract_err(). """


class SnapshotPage(sfpage.Page):
    resource = 'snapshots'
    links = 'snapshots_links'
    returns = sf.Snapshot


def extract_snapshots(page):
    """ Return the Snapshot objects on a single page. """
    return page.extract()


def create(client, opts):
    """ Create a snapshot of a share; opts must contain a share_id. """
    return sfapi.send(client, CreateResult(), sf.SnapshotCreateOpts, opts,
                      'POST', create_url(client), (200, 201, 202))


def delete(client, id):
    """ Delete the snapshot with the given ID. """
    return client.perform(DeleteResult(), 'DELETE', resource_url(client, id),
                          decode=False)


def get(client, id):
    """ Retrieve the snapshot with the given ID. """
    return client.perform(GetResult(), 'GET', resource_url(client, id),
                          okCodes=(200,))


def update(client, id, opts):
    """ Change the name or description of a snapshot.

    Only display_name and display_description are accepted here; the
    server's update call has no "name" and "description" aliases. """
    return sfapi.send(client, UpdateResult(), sf.SnapshotUpdateOpts, opts,
                      'PUT', resource_url(client, id), (200,))


def list_detail(client, opts=None):
    """ List the snapshots with all their details; return a lazy Pager. """
    url = list_detail_url(client)
    try:
        url += sfapi.build_query(sf.SnapshotListOpts, opts)
    except sfapi.BUILD_ERRORS as err:
        return sfpage.Pager(client, url, SnapshotPage, err=err)
    return sfpage.Pager(client, url, SnapshotPage)


def reset_status(client, id, opts):
    """ Administratively set the status of a snapshot. """
    return sfapi.send(client, ResetStatusResult(), sf.SnapshotResetStatusOpts,
                      opts, 'POST', action_url(client, id), (202,),
                      decode=False)


def force_delete(client, id):
    """ Delete a snapshot regardless of its status. """
    return client.perform(ForceDeleteResult(), 'POST', action_url(client, id),
                          json=dict(FORCE_DELETE_BODY), okCodes=(202,),
                          decode=False)
