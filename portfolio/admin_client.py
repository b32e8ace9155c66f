"""Client side of the admin dashboard.

``PortfolioClient`` talks to the REST API with ``requests``; ``AdminWorkflow``
holds one entity's form and list state and applies the dashboard rules on top
of it: required fields are checked before any request goes out, submissions
are multipart, every outcome becomes a ``Notice`` and deletes only happen after
the confirm callback agrees. Nothing is retried automatically.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed API call. ``message`` is the server's text, unchanged."""

    def __init__(self, message: str, status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload


def _is_upload(value) -> bool:
    return hasattr(value, "read") or (isinstance(value, tuple) and len(value) >= 2 and hasattr(value[1], "read"))


def encode_form(data: Dict[str, Any]) -> Tuple[Dict[str, str], Dict[str, Any]]:
    """Split form state into multipart ``(fields, files)``.

    Lists and dicts are JSON-encoded, booleans become ``"true"``/``"false"``
    and ``None`` is sent as an empty value. File objects (or requests-style
    ``(name, fileobj[, content_type])`` tuples) go to ``files``.
    """
    fields: Dict[str, str] = {}
    files: Dict[str, Any] = {}
    for key, value in data.items():
        if _is_upload(value):
            files[key] = value
        elif value is None:
            fields[key] = ""
        elif isinstance(value, bool):
            fields[key] = "true" if value else "false"
        elif isinstance(value, (list, dict)):
            fields[key] = json.dumps(value)
        else:
            fields[key] = str(value)
    return fields, files


class PortfolioClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None, token: Optional[str] = None, timeout: float = 10):
        self.base_url = base_url.rstrip("/") + "/"
        self.session = session or requests.Session()
        self.token = token
        self.timeout = timeout

    def _url(self, *parts) -> str:
        return self.base_url + "/".join(str(p).strip("/") for p in parts if p not in (None, ""))

    def request(self, method: str, *parts, params=None, json_body=None, form=None):
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        kwargs = {"params": params, "headers": headers, "timeout": self.timeout}
        if json_body is not None:
            kwargs["json"] = json_body
        elif form is not None:
            fields, files = encode_form(form)
            kwargs["data"] = fields
            kwargs["files"] = files or None
        url = self._url(*parts)
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise ApiError(f"Network error: {exc}") from exc

        payload = None
        if resp.content:
            try:
                payload = resp.json()
            except ValueError:
                payload = None
        if resp.status_code >= 400:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise ApiError(message or resp.reason or f"HTTP {resp.status_code}", resp.status_code, payload)
        return payload

    def login(self, username: str, password: str) -> str:
        tokens = self.request("POST", "auth/jwt/create", json_body={"username": username, "password": password})
        self.token = tokens["access"]
        return self.token

    def list(self, entity: str, **params) -> List[dict]:
        return self.request("GET", entity, params=params or None)

    def get(self, entity: str, pk) -> dict:
        return self.request("GET", entity, pk)

    def create(self, entity: str, data: Dict[str, Any]) -> dict:
        return self.request("POST", entity, form=data)

    def update(self, entity: str, pk, data: Dict[str, Any]) -> dict:
        return self.request("PUT", entity, pk, form=data)

    def delete(self, entity: str, pk) -> None:
        self.request("DELETE", entity, pk)

    def action(self, method: str, entity: str, pk, name: str, data=None):
        return self.request(method, entity, pk, name, json_body=data)


@dataclass
class Notice:
    level: str  # "success" or "error"
    text: str


class AdminWorkflow:
    """Create/edit/delete flow for one entity in the admin dashboard."""

    def __init__(
        self,
        client: PortfolioClient,
        entity: str,
        initial: Dict[str, Any],
        required_fields: Iterable[str] = (),
        file_fields: Iterable[str] = (),
        confirm: Optional[Callable[[str], bool]] = None,
        label: Optional[str] = None,
        list_params: Optional[Dict[str, Any]] = None,
    ):
        self.client = client
        self.entity = entity
        self.initial = dict(initial)
        self.required_fields = tuple(required_fields)
        self.file_fields = tuple(file_fields)
        self.confirm = confirm or (lambda text: False)
        self.label = label or entity.rstrip("s").replace("-", " ")
        self.list_params = list_params or {}
        self.form: Dict[str, Any] = dict(self.initial)
        self.editing_id = None
        self.items: List[dict] = []
        self.notices: List[Notice] = []

    def _notify(self, level: str, text: str) -> Notice:
        notice = Notice(level, text)
        self.notices.append(notice)
        return notice

    @property
    def last_notice(self) -> Optional[Notice]:
        return self.notices[-1] if self.notices else None

    def refresh(self) -> List[dict]:
        try:
            self.items = self.client.list(self.entity, **self.list_params)
        except ApiError as exc:
            logger.warning("Could not load %s: %s", self.entity, exc.message)
            self._notify("error", exc.message)
        return self.items

    def reset(self):
        self.form = dict(self.initial)
        self.editing_id = None

    def edit(self, item: dict):
        """Load an existing record into the form. File inputs start empty."""
        self.editing_id = item["id"]
        self.form = {key: item.get(key, default) for key, default in self.initial.items()}
        for key, value in self.form.items():
            # related records come back nested; the form holds their ids
            if isinstance(value, list) and value and all(isinstance(v, dict) and "id" in v for v in value):
                self.form[key] = [v["id"] for v in value]
        for key in self.file_fields:
            self.form[key] = None

    def missing_fields(self) -> List[str]:
        missing = []
        for name in self.required_fields:
            # stored files satisfy a required file input while editing
            if name in self.file_fields and self.editing_id is not None:
                continue
            if self.form.get(name) in (None, "", [], {}):
                missing.append(name)
        return missing

    def submit(self) -> Optional[dict]:
        missing = self.missing_fields()
        if missing:
            self._notify("error", f"Please fill in all required fields: {', '.join(missing)}")
            return None

        # an empty file input keeps the stored asset
        data = {key: value for key, value in self.form.items() if not (key in self.file_fields and value is None)}
        try:
            if self.editing_id is None:
                saved = self.client.create(self.entity, data)
                verb = "created"
            else:
                saved = self.client.update(self.entity, self.editing_id, data)
                verb = "updated"
        except ApiError as exc:
            self._notify("error", exc.message)
            return None

        self.reset()
        self.refresh()
        self._notify("success", f"{self.label.capitalize()} {verb} successfully")
        return saved

    def remove(self, item: dict, display_name: Optional[str] = None) -> bool:
        name = display_name or item.get("title") or item.get("name") or item.get("full_name") or f"#{item['id']}"
        if not self.confirm(f'Are you sure you want to delete the {self.label} "{name}"?'):
            return False
        try:
            self.client.delete(self.entity, item["id"])
        except ApiError as exc:
            self._notify("error", exc.message)
            return False
        self._notify("success", f"{self.label.capitalize()} deleted successfully")
        self.refresh()
        return True

    def toggle(self, item: dict, action: str, method: str = "PUT") -> Optional[dict]:
        """Flip a flag through ``<entity>/<id>/<action>``; banner toggles use PATCH."""
        try:
            updated = self.client.action(method, self.entity, item["id"], action)
        except ApiError as exc:
            self._notify("error", exc.message)
            return None
        self.refresh()
        self._notify("success", f"{self.label.capitalize()} updated")
        return updated
