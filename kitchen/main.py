from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel
from solders.instruction import Instruction

from kitchen.errors import KitchenError
from kitchen.layouts import RecipeOpcode
from kitchen.settings import ProgramConfig, Settings
from kitchen.tx_builder import (
    RecipeInstructionBuilder,
    instruction_to_dict,
    message_from_instructions,
    to_pubkey,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("kitchen")


@lru_cache()
def get_builder() -> RecipeInstructionBuilder:
    return RecipeInstructionBuilder(ProgramConfig.from_settings(Settings()))


class KeyMeta(BaseModel):
    pubkey: str
    is_signer: bool
    is_writable: bool


class InstructionMeta(BaseModel):
    program_id: str
    keys: List[KeyMeta]
    data: str


class RecipeCreateBuildRequest(BaseModel):
    payer: str
    recipe: Dict[str, Any]
    recent_blockhash: Optional[str] = None


class RecipeUseBuildRequest(BaseModel):
    payer: str
    recipe: Dict[str, Any]
    token_accounts: List[str]
    decimals: Optional[int] = None
    recent_blockhash: Optional[str] = None


class RecipeBuildResponse(BaseModel):
    pda: str
    instructions: List[InstructionMeta] = []
    message_b64: Optional[str] = None
    recent_blockhash: Optional[str] = None


def wrap_instruction_meta(meta: dict) -> InstructionMeta:
    return InstructionMeta(
        program_id=meta["program_id"],
        keys=[KeyMeta(**k) for k in meta["keys"]],
        data=meta["data"],
    )


def build_response(ix: Instruction, pda_index: int, payer: str, blockhash: Optional[str]) -> RecipeBuildResponse:
    message_b64 = None
    if blockhash:
        payer_pub = to_pubkey(payer, "payer")
        try:
            message_b64 = message_from_instructions([ix], payer_pub, blockhash)
        except Exception as exc:  # noqa: BLE001
            raise HTTPException(status_code=400, detail=f"Unable to compile message: {exc}") from exc
    return RecipeBuildResponse(
        pda=str(ix.accounts[pda_index].pubkey),
        instructions=[wrap_instruction_meta(instruction_to_dict(ix))],
        message_b64=message_b64,
        recent_blockhash=blockhash,
    )


app = FastAPI(title="Kitchen recipe builder")


@app.get("/health")
def health(builder: RecipeInstructionBuilder = Depends(get_builder)):
    return {"status": "ok", "program_id": str(builder.config.program_id)}


@app.post("/recipe/create/build", response_model=RecipeBuildResponse)
def recipe_create_build(req: RecipeCreateBuildRequest, builder: RecipeInstructionBuilder = Depends(get_builder)):
    try:
        ix = builder.build_create_recipe_ix(req.payer, req.recipe)
        return build_response(ix, 3, req.payer, req.recent_blockhash)
    except KitchenError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _use_build(req: RecipeUseBuildRequest, builder: RecipeInstructionBuilder, opcode: RecipeOpcode) -> RecipeBuildResponse:
    try:
        ix = builder.build_use_recipe_ix(req.payer, req.recipe, req.token_accounts, opcode, req.decimals)
        if ix is None:
            raise HTTPException(
                status_code=400,
                detail="Not enough token accounts: pass the PDA and user token accounts for each mint",
            )
        return build_response(ix, 3, req.payer, req.recent_blockhash)
    except KitchenError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/recipe/cook/build", response_model=RecipeBuildResponse)
def recipe_cook_build(req: RecipeUseBuildRequest, builder: RecipeInstructionBuilder = Depends(get_builder)):
    return _use_build(req, builder, RecipeOpcode.COOK)


@app.post("/recipe/uncook/build", response_model=RecipeBuildResponse)
def recipe_uncook_build(req: RecipeUseBuildRequest, builder: RecipeInstructionBuilder = Depends(get_builder)):
    return _use_build(req, builder, RecipeOpcode.UNCOOK)
