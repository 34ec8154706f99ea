from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

BCD_NAMESPACE = "root\\wmi"


def connect() -> Any:
    """Connect to the BCD WMI provider.

    Opening store files requires the backup and restore privileges even for
    an administrator, so they are requested on the connection moniker.
    """

    import wmi  # type: ignore

    return wmi.WMI(namespace=BCD_NAMESPACE, privileges=["Backup", "Restore"])


def _wrap_wmi(value: Any) -> Any:
    """Wrap raw SWbemObject out parameters like the objects queries return.

    Relies on ``wmi._wmi_object``, which is private to the WMI package; the
    dependency is pinned below 2.0 in pyproject.toml for that reason.
    """

    import wmi  # type: ignore

    if isinstance(value, (list, tuple)):
        return [_wrap_wmi(v) for v in value]
    if value is None or isinstance(value, wmi._wmi_object):
        return value
    return wmi._wmi_object(value)


def _split_out(out: Any) -> Tuple[bool, Any]:
    """Split a method's out parameters into (ReturnValue, payload).

    BCD provider methods return a boolean ReturnValue plus at most one other
    out parameter; their order in the tuple is not guaranteed.
    """

    if not isinstance(out, tuple):
        out = (out,)
    ok = False
    payload = None
    for item in out:
        if isinstance(item, bool):
            ok = item
        else:
            payload = item
    return ok, payload


class BcdService:
    """Calls into the BcdStore/BcdObject classes of the WMI BCD provider."""

    def __init__(self, connection: Any = None, *, wrap: Optional[Callable[[Any], Any]] = None) -> None:
        if connection is None:
            connection = connect()
            wrap = wrap or _wrap_wmi
        self._conn = connection
        self._wrap = wrap or (lambda v: v)

    def call(self, target: Any, method: str, **params: Any) -> Tuple[bool, Any]:
        out = getattr(target, method)(**params)
        ok, payload = _split_out(out)
        logger.debug("%s(%s) -> %s", method, ", ".join(f"{k}={v!r}" for k, v in params.items()), ok)
        return ok, self._wrap(payload)

    def open_store(self, path: str) -> Tuple[bool, Any]:
        return self.call(self._conn.BcdStore, "OpenStore", File=path)

    def open_object(self, store: Any, object_id: str) -> Tuple[bool, Any]:
        return self.call(store, "OpenObject", Id=object_id)

    def enumerate_objects(self, store: Any, object_type: int) -> Tuple[bool, Sequence[Any]]:
        ok, objects = self.call(store, "EnumerateObjects", Type=object_type)
        return ok, list(objects or [])

    def copy_object(self, store: Any, source_store_path: str, source_id: str, flags: int) -> Tuple[bool, Any]:
        return self.call(store, "CopyObject", SourceStoreFile=source_store_path, SourceId=source_id, Flags=flags)

    def get_element(self, obj: Any, code: int) -> Tuple[bool, Any]:
        return self.call(obj, "GetElement", Type=code)

    def set_element(self, obj: Any, method: str, code: int, **params: Any) -> bool:
        ok, _ = self.call(obj, method, Type=code, **params)
        return ok
