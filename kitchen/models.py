from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from solders.pubkey import Pubkey


class Seed(BaseModel):
    mint: str
    amount_u64: int

    @field_validator("amount_u64", mode="before")
    @classmethod
    def reject_bool(cls, value):
        if isinstance(value, bool):
            raise ValueError("amount_u64 must be an integer, not a boolean")
        return value

    def mint_pubkey(self) -> Pubkey:
        return Pubkey.from_string(self.mint)


class RecipeRequest(BaseModel):
    """Data needed to create a recipe; ``pda`` is filled in by validation."""

    pda: Optional[str] = None
    seeds: List[Seed]
    salt: str
    metadata_cid: str = Field(alias="metadataCid")
    name: str
    symbol: str

    class Config:
        populate_by_name = True


class RecipeUsageRequest(BaseModel):
    """Data needed to cook into (deposit) or uncook from (withdraw) a recipe."""

    pda: Optional[str] = None
    seeds: List[Seed]
    seed_salt: str = Field(alias="seedSalt")
    qty_requested: Optional[str] = None

    class Config:
        populate_by_name = True
