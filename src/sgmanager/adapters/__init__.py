"""Adapters binding the domain ports to AWS and Kubernetes."""
