"""Entry point bundling the client with every API service."""

from __future__ import annotations

import requests

from .client import Client
from .inference import InferenceService
from .instance import InstanceService
from .iso import ISOService
from .kubernetes import KubernetesService


class Vultr:
    """A configured client together with the services that use it."""

    def __init__(self, session: requests.Session | None = None):
        self.client = Client(session)
        self.inference = InferenceService(self.client)
        self.instance = InstanceService(self.client)
        self.iso = ISOService(self.client)
        self.kubernetes = KubernetesService(self.client)