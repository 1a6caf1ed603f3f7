"""Boundary validation of loose recipe data.

Callers (HTTP bodies, scripts, other SDKs) hand over plain dicts. Validation
checks their shape, canonicalizes seed order and re-derives the recipe PDA, so
the address sent to the program always matches the seed order encoded in the
instruction data. The input is never mutated; a new model is returned.
"""
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Sequence, Tuple

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from solders.pubkey import Pubkey

from kitchen.errors import ValidationError
from kitchen.models import RecipeRequest, RecipeUsageRequest, Seed
from kitchen.pda import derive_recipe_address
from kitchen.seeds import sort_seeds

logger = logging.getLogger("kitchen")

ERROR_PREFIX = "Invalid recipe data: "

# Wire key -> accepted spellings. Older clients sent snake_case names.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "pda": ("pda", "derived_address"),
    "metadataCid": ("metadataCid", "metadata_cid"),
    "seedSalt": ("seedSalt", "seed_salt"),
    "qty_requested": ("qty_requested", "qtyRequested"),
}

CREATION_REQUIRED = ("seeds", "metadataCid", "name", "symbol")
USAGE_REQUIRED = ("pda", "seeds")


def _invalid(message: str) -> ValidationError:
    return ValidationError(ERROR_PREFIX + message)


def _as_mapping(data: Any) -> Mapping:
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True)
    if isinstance(data, Mapping):
        return data
    raise _invalid("Input must be an object.")


def _lookup(data: Mapping, field: str) -> Tuple[bool, Any]:
    for key in FIELD_ALIASES.get(field, (field,)):
        if key in data:
            return True, data[key]
    return False, None


def _require(data: Mapping, truthy: Sequence[str], present: str) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for field in truthy:
        _, value = _lookup(data, field)
        if not value:
            raise _invalid(f"Missing required field '{field}'.")
        values[field] = value
    found, value = _lookup(data, present)
    if not found:
        raise _invalid(f"Missing required field '{present}'.")
    values[present] = value
    return values


def _parse_seeds(raw_seeds: Any) -> List[Seed]:
    if not isinstance(raw_seeds, (list, tuple)):
        raise _invalid("'seeds' must be an array.")
    items = [s.model_dump() if isinstance(s, Seed) else s for s in raw_seeds]
    if not all(isinstance(s, Mapping) and s.get("mint") and s.get("amount_u64") is not None for s in items):
        raise _invalid("Each seed must have 'mint' and 'amount_u64'.")

    seeds: List[Seed] = []
    for item in items:
        mint = str(item["mint"])
        try:
            Pubkey.from_string(mint)
        except Exception as exc:  # noqa: BLE001
            raise _invalid(f"Seed mint '{mint}' is not a valid pubkey.") from exc
        try:
            seeds.append(Seed(mint=mint, amount_u64=item["amount_u64"]))
        except PydanticValidationError as exc:
            raise _invalid(f"Seed amount_u64 for '{mint}' must be an integer.") from exc
    return seeds


def _build(model, **fields):
    try:
        return model(**fields)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        loc = ".".join(str(part) for part in first["loc"])
        raise _invalid(f"'{loc}' {first['msg']}.") from exc


def validate_for_creation(data: Any, program_id: Pubkey) -> RecipeRequest:
    """Validate create-recipe data and return it with sorted seeds and the derived ``pda``."""
    data = _as_mapping(data)
    values = _require(data, CREATION_REQUIRED, "salt")
    seeds = sort_seeds(_parse_seeds(values["seeds"]))
    request = _build(
        RecipeRequest,
        seeds=seeds,
        salt=values["salt"],
        metadata_cid=values["metadataCid"],
        name=values["name"],
        symbol=values["symbol"],
    )
    derived = derive_recipe_address(request.seeds, request.salt, program_id)
    logger.info("recipe_create_validated pda=%s seeds=%s", derived.address, len(seeds))
    return request.model_copy(update={"pda": str(derived.address)})


def validate_for_usage(data: Any, program_id: Pubkey) -> RecipeUsageRequest:
    """Validate cook/uncook data; the caller's ``pda`` is replaced by the re-derived one."""
    data = _as_mapping(data)
    values = _require(data, USAGE_REQUIRED, "seedSalt")
    seeds = sort_seeds(_parse_seeds(values["seeds"]))
    _, qty = _lookup(data, "qty_requested")
    request = _build(
        RecipeUsageRequest,
        seeds=seeds,
        seed_salt=values["seedSalt"],
        qty_requested=None if qty is None else str(qty),
    )
    derived = derive_recipe_address(request.seeds, request.seed_salt, program_id)
    if str(derived.address) != str(values["pda"]):
        logger.warning("recipe_pda_mismatch supplied=%s derived=%s", values["pda"], derived.address)
    return request.model_copy(update={"pda": str(derived.address)})
