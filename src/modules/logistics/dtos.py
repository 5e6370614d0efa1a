"""Logistics partner update commands."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, field_validator

from modules.logistics.models import normalize_pincodes


class UpdateCoverageDTO(BaseModel):
    """Replaces the whole serviceable pincode set."""

    model_config = ConfigDict(frozen=True)

    serviceable_pincodes: List[str]

    @field_validator("serviceable_pincodes")
    @classmethod
    def pincodes_must_be_six_digits(cls, v: List[str]) -> List[str]:
        pincodes = normalize_pincodes(v)
        invalid = [code for code in pincodes if not (code.isdigit() and len(code) == 6)]
        if invalid:
            raise ValueError(f"Invalid pincodes: {', '.join(invalid)}.")
        return pincodes
