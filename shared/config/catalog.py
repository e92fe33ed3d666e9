"""
Static candidate and region catalogs.

Votes reference these entries by id only. The catalogs are configuration
data and never change at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Candidate:
    id: str
    name: str
    party: str
    color: str


@dataclass(frozen=True)
class Region:
    id: str
    name: str


CANDIDATES: List[Candidate] = [
    Candidate(id="cand_1", name="Elena Torres", party="Futuro Progresista", color="#3b82f6"),
    Candidate(id="cand_2", name="Carlos Mendez", party="Alianza Nacional", color="#ef4444"),
    Candidate(id="cand_3", name="Sofia Ramirez", party="Movimiento Verde", color="#22c55e"),
]

REGIONS: List[Region] = [
    Region(id="norte", name="Zona Norte"),
    Region(id="centro", name="Zona Centro"),
    Region(id="sur", name="Zona Sur"),
    Region(id="este", name="Zona Este"),
    Region(id="oeste", name="Zona Oeste"),
    Region(id="capital", name="Distrito Capital"),
]

DEFAULT_REGION_ID = REGIONS[0].id


def get_candidate(candidate_id: str) -> Optional[Candidate]:
    for candidate in CANDIDATES:
        if candidate.id == candidate_id:
            return candidate
    return None


def get_region(region_id: str) -> Optional[Region]:
    for region in REGIONS:
        if region.id == region_id:
            return region
    return None
