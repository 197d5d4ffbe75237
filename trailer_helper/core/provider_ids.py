# Copyright (c) 2025 Trae AI. All rights reserved.

from typing import List, Optional
from urllib.parse import unquote
from pydantic import BaseModel, Field
from .exceptions import ProviderIdError
from .models import MediaItem


SEPARATOR = ":"


def _escape(value: str) -> str:
    return value.replace("%", "%25").replace(SEPARATOR, "%3A")


class ProviderIdModel(BaseModel):
    """
    Small per-item record kept in one provider id slot.

    Serialized form is "provider:id[:position[:update]]". Text fields are
    percent-escaped so they may contain the separator. The default model
    serializes to the empty string and any blank value decodes to it.
    """

    provider: str = ""
    id: str = ""
    position: Optional[float] = Field(default=None, allow_inf_nan=False)
    update: Optional[bool] = None

    @property
    def is_empty(self) -> bool:
        return self == ProviderIdModel()

    def serialize(self) -> str:
        if self.is_empty:
            return ""

        parts: List[str] = [_escape(self.provider), _escape(self.id)]
        if self.position is not None or self.update is not None:
            parts.append(repr(self.position) if self.position is not None else "")
        if self.update is not None:
            parts.append("true" if self.update else "false")
        return SEPARATOR.join(parts)

    @classmethod
    def deserialize(cls, value: Optional[str]) -> "ProviderIdModel":
        if value is None or not value.strip():
            return cls()

        parts = value.split(SEPARATOR)
        if len(parts) > 4:
            raise ProviderIdError(f"Too many segments in provider id: {value!r}")

        provider = unquote(parts[0])
        pid = unquote(parts[1]) if len(parts) > 1 else ""

        position = None
        if len(parts) > 2 and parts[2]:
            try:
                position = float(parts[2])
            except ValueError as e:
                raise ProviderIdError(f"Invalid position in provider id: {value!r}") from e

        update = None
        if len(parts) > 3 and parts[3]:
            flag = parts[3].lower()
            if flag not in ("true", "false"):
                raise ProviderIdError(f"Invalid update flag in provider id: {value!r}")
            update = flag == "true"

        try:
            return cls(provider=provider, id=pid, position=position, update=update)
        except ValueError as e:
            raise ProviderIdError(f"Invalid provider id: {value!r}: {e}") from e


def read_provider_id_model(item: MediaItem, key: str) -> ProviderIdModel:
    """
    Returns the model stored under key, or the default model.
    Items without any provider ids are not looked up at all.
    """
    if not item.provider_ids:
        return ProviderIdModel()
    return ProviderIdModel.deserialize(item.get_provider_id(key))


def write_provider_id_model(item: MediaItem, key: str, model: ProviderIdModel):
    # Only the in-memory map changes; callers persist the item themselves.
    item.set_provider_id(key, model.serialize())
