from __future__ import annotations

import importlib
import logging
import pkgutil
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional, Sequence

from gf_checksum.checksum.scheme import ChecksumScheme
from gf_checksum.slots import Slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """
    Checksum stage config.

    redundancy: number of checksum symbols k (>= 1)
    scheme: scheme module name (e.g. "xor", "double", "vandermonde");
            None -> chosen from redundancy (1 -> xor, 2 -> double, >= 3 -> vandermonde)
    """
    redundancy: int = 2
    scheme: Optional[str] = None


def available_schemes() -> list[str]:
    """
    Enumerate scheme modules under gf_checksum.checksum.modules.
    """
    pkg = importlib.import_module(f"{__package__}.modules")
    names = [m.name for m in pkgutil.iter_modules(pkg.__path__)]
    return sorted([n for n in names if not n.startswith("_")])


def scheme_name_for(redundancy: int) -> str:
    _check_redundancy(redundancy)
    if redundancy == 1:
        return "xor"
    if redundancy == 2:
        return "double"
    return "vandermonde"


def _import_scheme_module(name: str):
    if not isinstance(name, str) or not name:
        raise ValueError("scheme must be a non-empty string")
    return importlib.import_module(f"{__package__}.modules.{name}")


def _check_redundancy(redundancy: Any) -> None:
    if not isinstance(redundancy, int) or isinstance(redundancy, bool):
        raise TypeError("redundancy must be int")
    if redundancy < 1:
        raise ValueError("redundancy must be >= 1")


@lru_cache(maxsize=None)
def _cached_scheme(name: str, redundancy: int) -> ChecksumScheme:
    mod = _import_scheme_module(name)
    if not hasattr(mod, "Config") or not hasattr(mod, "Scheme"):
        raise AttributeError(f"checksum module '{name}' missing Config/Scheme")

    module_cfg = mod.Config(redundancy=redundancy)
    scheme = mod.Scheme(module_cfg)
    if scheme.redundancy != redundancy:
        raise ValueError(
            f"checksum module '{name}' provides {scheme.redundancy} checksums, not {redundancy}"
        )
    logger.debug("built %r from module '%s'", scheme, name)
    return scheme


def build(redundancy: int) -> ChecksumScheme:
    """
    Scheme for `redundancy` checksum symbols, cached per k.
    """
    return _cached_scheme(scheme_name_for(redundancy), redundancy)


def resolve(cfg: Config) -> ChecksumScheme:
    _check_redundancy(cfg.redundancy)
    if cfg.scheme is None:
        return build(cfg.redundancy)
    return _cached_scheme(cfg.scheme, cfg.redundancy)


def encode(data: Sequence[int], *, cfg: Config) -> bytes:
    """
    Stage encode: data -> data || checksums.
    """
    return resolve(cfg).encode(data)


def decode(slots: Sequence[Slot], *, cfg: Config) -> bytes:
    """
    Stage decode: received slots (Present / Missing) -> original data.
    Raises ExcessMissingValuesError if more than k slots are missing.
    """
    return resolve(cfg).decode(slots)
