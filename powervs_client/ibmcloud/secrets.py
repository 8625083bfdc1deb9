"""Kubernetes secret access for powervs-client.

This module reads the IBM Cloud API key out of a Kubernetes Secret.
"""
import base64
import binascii
from typing import Optional

from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.client.exceptions import ApiException

from powervs_client.config import API_KEY_SECRET_KEY, ConfigError
from powervs_client.errors import SecretInvalidError, SecretNotFoundError


class SecretManager:
    """Access secrets from the Kubernetes API."""

    def __init__(self, api: Optional[k8s_client.CoreV1Api] = None):
        """Initialize secret manager.

        Args:
            api: CoreV1Api to use; built from in-cluster or kubeconfig
                configuration when omitted
        """
        self._api = api

    @property
    def api(self) -> k8s_client.CoreV1Api:
        """Lazy-initialize Kubernetes core API client."""
        if self._api is None:
            try:
                k8s_config.load_incluster_config()
            except k8s_config.ConfigException:
                k8s_config.load_kube_config()
            self._api = k8s_client.CoreV1Api()
        return self._api

    def get(self, name: str, namespace: str) -> Optional[dict]:
        """Get the data of a secret.

        Args:
            name: Secret name
            namespace: Secret namespace

        Returns:
            Secret data (still base64-encoded), or None if not found
        """
        try:
            secret = self.api.read_namespaced_secret(name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                return None
            raise
        return secret.data or {}

    def get_api_key(self, name: str, namespace: str) -> str:
        """Read the IBM Cloud API key from a credentials secret.

        Args:
            name: Secret name
            namespace: Secret namespace

        Returns:
            The decoded API key

        Raises:
            ConfigError: If the secret name is empty
            SecretNotFoundError: If the secret does not exist
            SecretInvalidError: If the secret has no API key
        """
        if not name:
            raise ConfigError("empty secret name")

        data = self.get(name, namespace)
        if data is None:
            raise SecretNotFoundError.for_secret(namespace, name)

        encoded = data.get(API_KEY_SECRET_KEY)
        if not encoded:
            raise SecretInvalidError.missing_key(namespace, name, API_KEY_SECRET_KEY)
        try:
            api_key = base64.b64decode(encoded, validate=True).decode("utf-8").strip()
        except (binascii.Error, UnicodeDecodeError) as e:
            raise SecretInvalidError(
                f"invalid secret for powervs credentials: {namespace}/{name}: {e}"
            ) from e
        if not api_key:
            raise SecretInvalidError.missing_key(namespace, name, API_KEY_SECRET_KEY)
        return api_key
