"""RegisterMap: load the embedded register catalogue via importlib.resources; read-only address lookup."""

import json
import logging
from functools import lru_cache
from importlib import resources
from types import MappingProxyType
from typing import Any, Iterator

from .errors import UnknownRegisterError
from .types import RegisterDescriptor

logger = logging.getLogger(__name__)

_PROFILE_RESOURCE: dict[str, str] = {
    "ermangizer": "pyermangizer_modbus.data.ermangizer_registers",
}


def _parse_address(value: Any) -> int:
    """Accept 16, "16" or "0x0010" as a register address."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid register address: {value!r}")
    if isinstance(value, int):
        return value
    return int(str(value).strip(), 0)


def _parse_entry(raw: dict[str, Any]) -> RegisterDescriptor:
    """Build RegisterDescriptor from a JSON entry (address, name, unit, description, read_only, scale)."""
    name = raw["name"]
    try:
        address = _parse_address(raw["address"])
    except ValueError:
        raise ValueError(f"Invalid address {raw['address']!r} for register {name!r}") from None
    scale = raw.get("scale")
    return RegisterDescriptor(
        address=address,
        name=name,
        unit=raw.get("unit", ""),
        description=raw.get("description", ""),
        read_only=bool(raw.get("read_only", False)),
        scale=float(scale) if scale is not None else None,
    )


class RegisterMap:
    """
    Immutable map of holding-register address to RegisterDescriptor. Loaded from packaged JSON.
    Supports profile selection (default ermangizer) and a list of override entries for tests
    and firmware variants.
    """

    def __init__(self, profile: str = "ermangizer", map_override: list[dict[str, Any]] | None = None) -> None:
        self._profile = profile.lower()

        if map_override is not None:
            entries = map_override
        else:
            entries = self._load_profile(self._profile)

        by_address: dict[int, RegisterDescriptor] = {}
        by_name: dict[str, RegisterDescriptor] = {}
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            desc = _parse_entry(entry)
            if desc.address in by_address:
                raise ValueError(f"Duplicate register address in map: 0x{desc.address:04X}")
            if desc.name in by_name:
                raise ValueError(f"Duplicate register name in map: {desc.name}")
            by_address[desc.address] = desc
            by_name[desc.name] = desc

        self._by_address = MappingProxyType(dict(sorted(by_address.items())))
        self._by_name = MappingProxyType(by_name)
        logger.debug("RegisterMap loaded for profile %s: %d entries", self._profile, len(self._by_address))

    @staticmethod
    def _load_profile(profile: str) -> list[Any]:
        resource_name = _PROFILE_RESOURCE.get(profile)
        if not resource_name:
            raise ValueError(f"Unknown profile: {profile!r}")

        # pyermangizer_modbus.data.ermangizer_registers -> data/ermangizer_registers.json
        pkg, name = resource_name.rsplit(".", 1)
        json_name = f"{name}.json"
        try:
            with resources.files(pkg).joinpath(json_name).open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Register map resource not found: {pkg}/{json_name}") from None

        if isinstance(data, list):
            return data
        if isinstance(data, dict) and "entries" in data:
            return list(data["entries"])
        return []

    def get(self, address: int) -> RegisterDescriptor | None:
        """Return the descriptor for address, or None when the catalogue has no such register."""
        return self._by_address.get(address)

    def lookup(self, address: int) -> RegisterDescriptor:
        """Return the descriptor for address; raise UnknownRegisterError if not in map."""
        desc = self._by_address.get(address)
        if desc is None:
            raise UnknownRegisterError(address)
        return desc

    def by_name(self, name: str) -> RegisterDescriptor:
        if name not in self._by_name:
            raise KeyError(name)
        return self._by_name[name]

    def __contains__(self, address: object) -> bool:
        return address in self._by_address

    def __iter__(self) -> Iterator[RegisterDescriptor]:
        return iter(self._by_address.values())

    def __len__(self) -> int:
        return len(self._by_address)

    @property
    def profile(self) -> str:
        return self._profile


@lru_cache(maxsize=None)
def get_default_register_map(profile: str = "ermangizer") -> RegisterMap:
    """Load the RegisterMap for the given profile once and share it (default ermangizer)."""
    return RegisterMap(profile=profile)
