"""Kubernetes custom-resource implementation of the key registry."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from .base import KeyRegistry
from .models import KeyRecord

logger = logging.getLogger(__name__)

GROUP = "jwtwallet.k8s.io"
VERSION = "v1"
PLURAL = "jwtkeys"
KIND = "JWTKey"


class KubernetesKeyRegistry(KeyRegistry):
    """Persist key records as namespaced ``JWTKey`` custom objects.

    The object name is the key id. ``spec.dateExpiresMicros`` holds the
    expiry as epoch milliseconds, matching records written by existing
    deployments of the ``jwtkeys`` resource.
    """

    def __init__(
        self,
        api: Optional[Any] = None,
        in_cluster: bool = False,
        request_timeout: float = 10,
    ) -> None:
        if api is None:
            if in_cluster:
                config.load_incluster_config()
            else:
                config.load_kube_config()
            api = client.CustomObjectsApi()
        self._api = api
        self._request_timeout = request_timeout

    @staticmethod
    def _to_body(record: KeyRecord) -> dict[str, Any]:
        return {
            "apiVersion": f"{GROUP}/{VERSION}",
            "kind": KIND,
            "metadata": {"name": record.key_id, "namespace": record.namespace},
            "spec": {
                "publicJwk": record.public_jwk,
                "issuer": record.issuer,
                "dateExpiresMicros": int(record.expires_on.timestamp() * 1000),
            },
        }

    @staticmethod
    def _to_record(namespace: str, key_id: str, obj: dict[str, Any]) -> KeyRecord:
        spec = obj.get("spec") or {}
        return KeyRecord(
            namespace=namespace,
            key_id=key_id,
            public_jwk=spec.get("publicJwk") or {},
            issuer=spec.get("issuer", ""),
            expires_on=datetime.fromtimestamp(
                spec.get("dateExpiresMicros", 0) / 1000, tz=timezone.utc
            ),
        )

    async def create(self, record: KeyRecord) -> None:
        await asyncio.to_thread(
            self._api.create_namespaced_custom_object,
            group=GROUP,
            version=VERSION,
            namespace=record.namespace,
            plural=PLURAL,
            body=self._to_body(record),
            _request_timeout=self._request_timeout,
        )

    async def fetch(self, namespace: str, key_id: str) -> KeyRecord | None:
        try:
            obj = await asyncio.to_thread(
                self._api.get_namespaced_custom_object,
                group=GROUP,
                version=VERSION,
                namespace=namespace,
                plural=PLURAL,
                name=key_id,
                _request_timeout=self._request_timeout,
            )
        except ApiException as exc:
            if exc.status == 404:
                logger.debug("No %s object for kid %s in namespace %s", KIND, key_id, namespace)
                return None
            raise
        if not obj:
            return None
        return self._to_record(namespace, key_id, obj)
