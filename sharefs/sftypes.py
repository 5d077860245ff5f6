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
""" Request and response type definitions for the sharefs API bindings. """

import datetime
import re

from .sfcatch import error
from .sftype import JsonObject, RequestOptions, sfValidator, maybe


# Simple validator functions
def regex(argName, regex):
    _regex = re.compile(regex)

    def validator(string):
        if string is None:
            error('No {argName} specified', argName=argName)

        try:
            string = str(string)

            if not _regex.match(string):
                error('Invalid {argName} "{argVal}". Must match {regex}', argName=argName, argVal=string, regex=regex)

            return string
        except ValueError:
            error('Invalid {argName}. Must be string', argName=argName)

    return sfValidator(argName, validator)


def oneOf(argName, *accepted):
    accepted = list(accepted)
    _accepted = frozenset(accepted)

    def validator(value):
        if value not in _accepted:
            error("Invalid {argName}: {value}. Must be one of {accepted}", argName=argName, value=value, accepted=accepted)
        else:
            return value

    return sfValidator(argName, validator)


def intRange(argName, min, max):
    def validator(i):
        try:
            i = int(i)

            if i < min or i > max:
                error('Invalid {argName}. Must be between {min} and {max}', argName=argName, min=min, max=max)

            return i
        except (TypeError, ValueError):
            error('Invalid {argName}. Must be an integer', argName=argName)

    return sfValidator(argName, validator)


def timestamp(argName, *formats):
    def validator(value):
        if isinstance(value, datetime.datetime):
            return value

        for fmt in formats:
            try:
                return datetime.datetime.strptime(str(value), fmt)
            except ValueError:
                pass
        else:
            error('Invalid {argName} "{value}". Must be a timestamp', argName=argName, value=value)

    return sfValidator(argName, validator)


# Common constants
NONEMPTY_REGEX = r'^\S.*$'
TIMESTAMP_FORMATS = (
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M:%SZ',
)

SNAPSHOT_STATUSES = (
    'available',
    'error',
    'creating',
    'deleting',
    'manage_starting',
    'manage_error',
    'unmanage_starting',
    'unmanage_error',
    'error_deleting',
)

MAX_SEGMENTATION_ID = 2 ** 24 - 1

# Simple type validators
ResourceId = regex('ResourceId', NONEMPTY_REGEX)
ShareId = regex('ShareId', NONEMPTY_REGEX)
SecurityServiceId = regex('SecurityServiceId', NONEMPTY_REGEX)
IPVersion = oneOf('IPVersion', 4, 6)
SegmentationId = intRange('SegmentationId', 0, MAX_SEGMENTATION_ID)
PageSize = intRange('Limit', 0, 2 ** 31 - 1)
PageOffset = intRange('Offset', 0, 2 ** 31 - 1)
SortDir = oneOf('SortDir', 'asc', 'desc')
Timestamp = timestamp('Timestamp', *TIMESTAMP_FORMATS)
SnapshotStatus = regex('SnapshotStatus', NONEMPTY_REGEX)


@JsonObject(href=str, rel=str)
class Link(object):
    '''
    href: The URL of the linked resource.
    rel: The relationship, e.g. "self", "bookmark" or "next".
    '''


# SHARE NETWORKS
@RequestOptions(
    omitEmpty=('neutron_net_id', 'neutron_subnet_id', 'nova_net_id'),
    neutron_net_id=maybe(str),
    neutron_subnet_id=maybe(str),
    nova_net_id=maybe(str),
)
class ShareNetworkIds(object):
    '''
    neutron_net_id: The UUID of the Neutron network to set up for share servers.
    neutron_subnet_id: The UUID of the Neutron subnet to set up for share servers.
    nova_net_id: The UUID of the nova network to set up for share servers.
    '''


@RequestOptions(envelope='share_network', name=maybe(str), description=maybe(str))
class ShareNetworkCreateOpts(ShareNetworkIds):
    '''
    name: The share network name.
    description: The share network description.
    '''


@RequestOptions(envelope='share_network', name=maybe(str), description=maybe(str))
class ShareNetworkUpdateOpts(ShareNetworkIds):
    '''
    name: The share network name; "" clears it, None leaves it unchanged.
    description: The share network description; "" clears it, None leaves it unchanged.
    '''


@RequestOptions(
    all_tenants=False,
    project_id=maybe(str),
    neutron_net_id=maybe(str),
    neutron_subnet_id=maybe(str),
    nova_net_id=maybe(str),
    network_type=maybe(str),
    name=maybe(str),
    description=maybe(str),
    ip_version=maybe(IPVersion),
    segmentation_id=maybe(SegmentationId),
    created_since=maybe(str),
    created_before=maybe(str),
    limit=maybe(PageSize),
    offset=maybe(PageOffset),
)
class ShareNetworkListOpts(object):
    '''
    all_tenants: Admin-only; list the share networks of all the projects.
    network_type: The network type, e.g. VLAN, VXLAN, GRE or flat.
    created_since: Only list share networks created after this date.
    created_before: Only list share networks created before this date.
    limit: The page size.
    offset: The number of share networks to skip.
    '''


@RequestOptions(security_service_id=SecurityServiceId)
class SecurityServiceOpts(object):
    '''
    security_service_id: The UUID of the security service.
    '''


@RequestOptions(envelope='add_security_service')
class AddSecurityServiceOpts(SecurityServiceOpts):
    """ Associate a security service with a share network. """


@RequestOptions(envelope='remove_security_service')
class RemoveSecurityServiceOpts(SecurityServiceOpts):
    """ Dissociate a security service from a share network. """


@JsonObject(
    id=ResourceId,
    name=maybe(str),
    description=maybe(str),
    project_id=maybe(str),
    neutron_net_id=maybe(str),
    neutron_subnet_id=maybe(str),
    nova_net_id=maybe(str),
    network_type=maybe(str),
    segmentation_id=maybe(int),
    cidr=maybe(str),
    ip_version=maybe(int),
    gateway=maybe(str),
    mtu=maybe(int),
    created_at=maybe(Timestamp),
    updated_at=maybe(Timestamp),
)
class ShareNetwork(object):
    '''
    id: The UUID of the share network.
    project_id: The UUID of the project that owns the share network.
    network_type: The network type, e.g. VLAN, VXLAN, GRE or flat.
    segmentation_id: The segmentation ID of the network.
    cidr: The IP block of the network.
    ip_version: The IP version of the network, 4 or 6.
    created_at: When the share network was created.
    updated_at: When the share network was last updated.
    '''


# SNAPSHOTS
@RequestOptions(
    envelope='snapshot',
    omitEmpty=('name', 'description', 'display_name', 'display_description'),
    share_id=ShareId,
    name=maybe(str),
    description=maybe(str),
    display_name=maybe(str),
    display_description=maybe(str),
)
class SnapshotCreateOpts(object):
    '''
    share_id: The UUID of the share to snapshot.
    name: The snapshot name.
    description: The snapshot description.
    display_name: Same as name; kept from the block storage API lineage.
    display_description: Same as description; kept from the block storage API lineage.
    '''


@RequestOptions(envelope='snapshot', display_name=maybe(str), display_description=maybe(str))
class SnapshotUpdateOpts(object):
    '''
    display_name: The snapshot name; the update call has no "name" alias.
    display_description: The snapshot description; the update call has no "description" alias.
    '''


@RequestOptions(
    queryKeys={
        'name_pattern': 'name~',
        'description_pattern': 'description~',
    },
    all_tenants=False,
    name=maybe(str),
    description=maybe(str),
    share_id=maybe(str),
    size=maybe(int),
    status=maybe(str),
    limit=maybe(PageSize),
    offset=maybe(PageOffset),
    sort_key=maybe(str),
    sort_dir=maybe(SortDir),
    project_id=maybe(str),
    name_pattern=maybe(str),
    description_pattern=maybe(str),
)
class SnapshotListOpts(object):
    '''
    all_tenants: Admin-only; list the snapshots of all the projects.
    size: The snapshot size in GiB.
    sort_key: The attribute to sort the snapshots by.
    sort_dir: The sort direction, "asc" or "desc".
    name_pattern: A pattern that the snapshot name must match.
    description_pattern: A pattern that the snapshot description must match.
    '''


@RequestOptions(envelope='reset_status', status=SnapshotStatus)
class SnapshotResetStatusOpts(object):
    '''
    status: The status to set, one of SNAPSHOT_STATUSES; the server validates it.
    '''


@JsonObject(
    id=ResourceId,
    name=maybe(str),
    description=maybe(str),
    share_id=maybe(str),
    share_proto=maybe(str),
    share_size=maybe(int),
    size=maybe(int),
    status=maybe(str),
    project_id=maybe(str),
    user_id=maybe(str),
    metadata=maybe({str: str}),
    created_at=maybe(Timestamp),
    links=maybe([Link]),
)
class Snapshot(object):
    '''
    id: The UUID of the snapshot.
    share_id: The UUID of the share the snapshot was taken of.
    share_proto: The file system protocol of the share, e.g. NFS or CIFS.
    share_size: The size of the share in GiB.
    size: The size of the snapshot in GiB.
    status: The snapshot status.
    created_at: When the snapshot was created.
    '''
