"""Named simulation fields owned by the engine."""

import logging
from dataclasses import dataclass
from typing import Iterator

import torch

from fluidsim.gpu import Fbo, SwapFbo, Texture, TextureFormat


@dataclass(frozen=True)
class FieldSpec:
    name: str
    internal_format: TextureFormat
    double_buffered: bool = True


class FieldSet:
    """Mapping of field name to render target.

    Double buffered fields are SwapFbo pairs, derived single pass results are Fbo.
    """

    def __init__(self, specs: list[FieldSpec]) -> None:
        self._specs: dict[str, FieldSpec] = {}
        for spec in specs:
            if spec.name in self._specs:
                raise ValueError(f"FieldSet: duplicate field '{spec.name}'")
            self._specs[spec.name] = spec
        self._fields: dict[str, Fbo | SwapFbo] = {}
        self._allocated: bool = False

    @property
    def allocated(self) -> bool:
        return self._allocated

    @property
    def specs(self) -> list[FieldSpec]:
        return list(self._specs.values())

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __getitem__(self, name: str) -> Fbo | SwapFbo:
        if name not in self._fields:
            raise KeyError(f"FieldSet: no allocated field '{name}'")
        return self._fields[name]

    def swap(self, name: str) -> SwapFbo:
        fbo = self[name]
        if not isinstance(fbo, SwapFbo):
            raise TypeError(f"FieldSet: field '{name}' is not double buffered")
        return fbo

    def single(self, name: str) -> Fbo:
        fbo = self[name]
        if not isinstance(fbo, Fbo):
            raise TypeError(f"FieldSet: field '{name}' is double buffered")
        return fbo

    def texture(self, name: str) -> Texture:
        """Authoritative texture of a field."""
        return self[name].texture

    def allocate(self, width: int, height: int, device: torch.device) -> None:
        """Allocate every field, releasing all of them if one fails."""
        try:
            for spec in self._specs.values():
                fbo: Fbo | SwapFbo = SwapFbo() if spec.double_buffered else Fbo()
                fbo.allocate(width, height, spec.internal_format, device)
                self._fields[spec.name] = fbo
        except RuntimeError:
            logging.error(f"FieldSet: allocation failed after {len(self._fields)} of {len(self._specs)} fields")
            self.deallocate()
            raise
        self._allocated = True

    def deallocate(self) -> None:
        for fbo in self._fields.values():
            fbo.deallocate()
        self._fields.clear()
        self._allocated = False

    def zero(self) -> None:
        for fbo in self._fields.values():
            if isinstance(fbo, SwapFbo):
                fbo.clear_all(0.0)
            else:
                fbo.clear(0.0)
