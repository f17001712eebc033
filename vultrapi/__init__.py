"""Client for the Vultr v2 API: instances, ISOs, Kubernetes clusters and Serverless Inference."""

__version__ = "3.23.0"