"""Parsing of scalability mode strings such as ``L1T3`` or ``L3T2_KEY``."""

from __future__ import annotations

import re
from dataclasses import dataclass

_SCALABILITY_MODE_RE = re.compile(r"^[LS]([1-9][0-9]?)T([1-9][0-9]?)(_KEY)?")


@dataclass(frozen=True)
class ScalabilityMode:
    """Number of spatial and temporal layers and whether K-SVC is used."""

    spatial_layers: int = 1
    temporal_layers: int = 1
    ksvc: bool = False

    def to_dict(self) -> dict:
        return {
            "spatialLayers": self.spatial_layers,
            "temporalLayers": self.temporal_layers,
            "ksvc": self.ksvc,
        }


def parse_scalability_mode(scalability_mode: str) -> ScalabilityMode:
    """Parse a scalability mode; unrecognised input yields one layer of each."""
    match = _SCALABILITY_MODE_RE.match(scalability_mode or "")
    if match is None:
        return ScalabilityMode()
    spatial, temporal, key = match.groups()
    return ScalabilityMode(
        spatial_layers=int(spatial),
        temporal_layers=int(temporal),
        ksvc=key is not None,
    )