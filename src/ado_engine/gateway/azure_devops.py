"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Mapping, Optional
from urllib.parse import quote

import certifi
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ado_engine.errors import GatewayError
from ado_engine.gateway.base import PipelineGateway
from ado_engine.models import PipelineRef, RunHandle, RunStatus
from ado_engine.utils.redaction import redact_secret
from ado_engine.utils.time import parse_timestamp
from ado_engine.utils.url_guard import clip

logger = logging.getLogger(__name__)

ADO_URL = "https://dev.azure.com/{org}"
DEFAULT_API_VERSION = "7.1"
DEFAULT_HTTP_TIMEOUT_S = 30.0
CONTINUATION_HEADER = "x-ms-continuationtoken"
USER_AGENT = "runpipeline/0.1 (+azure-devops)"
_ERROR_BODY_LIMIT = 512


def default_base_url(org: str) -> str:
    return ADO_URL.format(org=quote(org.strip(), safe=""))


def _build_session(token: str) -> requests.Session:
    session = requests.Session()
    session.auth = ("", token)
    session.verify = certifi.where()
    session.headers.update(
        {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
    )
    # A failed call is fatal for the caller; never resend silently.
    adapter = HTTPAdapter(max_retries=Retry(total=0, read=False))
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


class AzureDevOpsGateway(PipelineGateway):
    """Azure DevOps Pipelines REST client (``/_apis/pipelines``)."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        api_version: str = DEFAULT_API_VERSION,
        timeout_s: float = DEFAULT_HTTP_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout_s = timeout_s
        self._token = token
        self._session = session or _build_session(token)

    def _url(self, project: str, *parts: object) -> str:
        segments = [quote(project, safe=""), "_apis", "pipelines"]
        segments.extend(quote(str(part), safe="") for part in parts)
        return f"{self.base_url}/{'/'.join(segments)}"

    def _error(self, message: str, *, status_code: Optional[int] = None) -> GatewayError:
        return GatewayError(clip(redact_secret(message, self._token), limit=_ERROR_BODY_LIMIT), status_code=status_code)

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        query = {"api-version": self.api_version}
        if params:
            query.update(params)
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(method, url, params=query, json=json_body, timeout=self.timeout_s)
        except requests.RequestException as exc:
            raise self._error(f"{method} {url} failed: {exc}") from exc
        if resp.status_code < 200 or resp.status_code >= 300:
            raise self._error(
                f"HTTP {resp.status_code} calling {method} {url}: {resp.text or resp.reason or ''}",
                status_code=resp.status_code,
            )
        return resp

    def _json(self, resp: requests.Response) -> Dict[str, Any]:
        try:
            payload = resp.json()
        except ValueError as exc:
            raise self._error(
                f"Non-JSON response from {resp.url}: {resp.text or ''}", status_code=resp.status_code
            ) from exc
        if not isinstance(payload, dict):
            raise self._error(f"Unexpected response shape from {resp.url}", status_code=resp.status_code)
        return payload

    def list_pipelines(self, project: str) -> Iterator[PipelineRef]:
        url = self._url(project)
        token: Optional[str] = None
        while True:
            params = {"continuationToken": token} if token else None
            resp = self._request("GET", url, params=params)
            payload = self._json(resp)
            items = payload.get("value")
            if not isinstance(items, list):
                raise self._error(f"Unexpected pipeline listing from {url}", status_code=resp.status_code)
            for item in items:
                if not isinstance(item, dict):
                    continue
                pipeline_id = _as_int(item.get("id"))
                name = item.get("name")
                if pipeline_id is None or not isinstance(name, str):
                    continue
                yield PipelineRef(name=name, id=pipeline_id)
            next_token = resp.headers.get(CONTINUATION_HEADER)
            if not next_token:
                return
            if next_token == token:
                raise self._error(
                    f"Pipeline listing from {url} repeated continuation token", status_code=resp.status_code
                )
            token = next_token

    def run_pipeline(
        self,
        project: str,
        pipeline_id: int,
        branch: str,
        template_parameters: Mapping[str, str],
    ) -> RunHandle:
        body = {
            "resources": {"repositories": {"self": {"refName": branch}}},
            "templateParameters": dict(template_parameters),
        }
        resp = self._request("POST", self._url(project, pipeline_id, "runs"), json_body=body)
        payload = self._json(resp)
        run_id = _as_int(payload.get("id"))
        if run_id is None:
            raise self._error("Run response did not contain a run id", status_code=resp.status_code)
        return RunHandle(id=run_id, pipeline_id=pipeline_id, state=str(payload.get("state") or "unknown"))

    def get_run(self, project: str, pipeline_id: int, run_id: int) -> RunStatus:
        resp = self._request("GET", self._url(project, pipeline_id, "runs", run_id))
        payload = self._json(resp)
        pipeline = payload.get("pipeline") if isinstance(payload.get("pipeline"), dict) else {}
        links = payload.get("_links") if isinstance(payload.get("_links"), dict) else {}
        web = links.get("web") if isinstance(links.get("web"), dict) else {}
        url = web.get("href") or payload.get("url") or ""
        result = payload.get("result")
        return RunStatus(
            state=str(payload.get("state") or "unknown"),
            result=str(result) if result else None,
            finished_at=parse_timestamp(payload.get("finishedDate")),
            url=str(url),
            pipeline_name=str(pipeline.get("name") or ""),
        )

    def close(self) -> None:
        self._session.close()
