# vultrapi

A Python client for part of the Vultr public HTTP REST API (v2). It covers
instances (with their IP addresses, VPCs, ISOs and backups), ISO images,
Kubernetes (VKE) clusters and node pools, and Serverless Inference
subscriptions.

## Installation

```
pip install vultrapi
```

The only runtime dependency is `requests`.

## Getting started

The client sends its requests through a `requests.Session`. It does not set
any credentials itself: put your API key in the session's `Authorization`
header and hand the session to the client.

```python
import requests

from vultrapi.client import Client
from vultrapi.instance import InstanceService
from vultrapi.pagination import ListOptions

session = requests.Session()
session.headers["Authorization"] = "Bearer token"

client = Client(session)
instances = InstanceService(client)

page, meta = instances.list(ListOptions(per_page=25))
for instance in page:
    print(instance.id, instance.label, instance.main_ip)

if meta is not None:
    print("total:", meta.total)
```

`Vultr` in `vultrapi.api` builds a `Client` and every service on top of it:

```python
from vultrapi.api import Vultr

vultr = Vultr(session)
vultr.instance.start("instance-id")
clusters, meta = vultr.kubernetes.list_clusters()
```

Its attributes are `client`, `instance`, `iso`, `kubernetes` and `inference`.
Without a session, `Client()` and `Vultr()` create a fresh
`requests.Session`.

## The client

`vultrapi.client.Client` has these settings:

- `base_url`: where request paths are resolved; `https://api.vultr.com` by
  default. Assigning a malformed URL raises `ValueError`.
- `user_agent`: sent in the `User-Agent` header (`vultrapi/3.23.0` by
  default). Every request also carries `Accept: application/json` and
  `Content-Type: application/json`.
- `retry_limit`: how many times a failed request is retried (3 by default).
- `rate_limit`: the longest wait between retries in seconds (0.5 by
  default); the shortest wait is two thirds of it.
- `timeout`: seconds allowed for each attempt (60 by default).
- `on_request_completed`: an optional callable, called with the prepared
  request and the final response (or `None` when no usable response was
  received) after every request.

`new_request(method, uri, body=None, params=None)` prepares a request with
`body` encoded as JSON (objects with a `to_dict()` method are converted
first) and `params` (a `ListOptions` or a mapping) as the query string.
`do(request)` sends it and returns the response; `request(...)` does both
and returns the decoded JSON body, or `None` when the body is empty.

## Services

- `vultrapi.instance.InstanceService`: `create`, `get`, `update`, `delete`,
  `list`; `start`, `halt`, `reboot`, `reinstall`; `mass_start`, `mass_halt`,
  `mass_reboot`; `restore`; `get_bandwidth`, `get_neighbors`;
  `list_vpc_info`, `attach_vpc`, `detach_vpc` (and the deprecated
  `list_vpc2_info`, `attach_vpc2`, `detach_vpc2`); `iso_status`,
  `attach_iso`, `detach_iso`; `get_backup_schedule`, `set_backup_schedule`;
  `create_ipv4`, `list_ipv4`, `delete_ipv4`, `list_ipv6`;
  `create_reverse_ipv4`, `default_reverse_ipv4`, `create_reverse_ipv6`,
  `list_reverse_ipv6`, `delete_reverse_ipv6`; `get_user_data`,
  `get_upgrades`. Its data types live in `vultrapi.instance_models`.
- `vultrapi.iso.ISOService`: `create`, `get`, `delete`, `list` and
  `list_public`.
- `vultrapi.kubernetes.KubernetesService`: `create_cluster`, `get_cluster`,
  `list_clusters`, `update_cluster`, `delete_cluster`,
  `delete_cluster_with_resources`; `create_node_pool`, `list_node_pools`,
  `get_node_pool`, `update_node_pool`, `delete_node_pool`;
  `delete_node_pool_instance`, `recycle_node_pool_instance`;
  `get_kube_config`, `get_versions`, `get_upgrades`, `upgrade`.
- `vultrapi.inference.InferenceService`: `list`, `create`, `get`, `update`,
  `delete` and `get_usage`.

Responses come back as dataclasses (`Instance`, `IPv4`, `ISO`, `Cluster`,
`NodePool`, `Inference`, ...). Request bodies are dataclasses too, such as
`InstanceCreateReq`, `NodePoolReq` or `ISOReq`; their `to_dict()` leaves most
fields out of the JSON while they hold their empty defaults, and always sends
the fields the API requires (for example `tags` on instance requests, or
`node_quantity`, `label`, `plan` and `tag` on `NodePoolReq`).

```python
from vultrapi.kubernetes import ClusterReq, KubernetesService, NodePoolReq

kubernetes = KubernetesService(client)
cluster = kubernetes.create_cluster(
    ClusterReq(
        label="vke",
        region="lax",
        version="v1.30.0+1",
        node_pools=[
            NodePoolReq(node_quantity=1, label="pool", plan="vc2-1c-2gb", tag="web"),
        ],
    )
)
print(cluster.id, cluster.status)
```

## Pagination

List calls take an optional `ListOptions` (`per_page`, `cursor`, `main_ip`,
`label`, `tag`, `region`, `description`; empty options are not sent) and
return the page together with a `Meta` object, or `None` when the response
has no metadata. Pass `meta.links.next` back as the cursor to fetch the next
page:

```python
options = ListOptions(per_page=100)
while True:
    page, meta = instances.list(options)
    for instance in page:
        ...
    if meta is None or meta.links is None or not meta.links.next:
        break
    options = ListOptions(per_page=100, cursor=meta.links.next)
```

## Errors and retries

A response with a status outside 200–204 raises `vultrapi.client.APIError`;
its message and `body` are the response body, and it also carries
`status_code` and `response`. A response body that is not valid JSON where
JSON is expected raises the `json` module's decoding error.

Connection errors (other than malformed URLs, SSL errors and the like),
`429` responses and `5xx` responses other than `501` are retried with
exponential backoff between the two waits set by `rate_limit`; for `429` and
`503` a `Retry-After` header is honoured. Once the retries are used up,
`vultrapi.client.RetryError` is raised with a message of the form
`gave up after N attempts, last error: ...`, and its `attempts` and
`last_error` attributes.

## What it does not cover

Only the instance, ISO, Kubernetes and Serverless Inference endpoints are
provided. There are no services for other parts of the API, such as the
account, billing, bare-metal servers, block or object storage, databases,
DNS domains, firewalls, load balancers, snapshots, SSH keys, startup scripts
or users. The package is a library only and installs no command.

## Running the tests

```
pip install -e ".[test]"
pytest
```