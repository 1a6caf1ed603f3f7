import base64
import logging
from decimal import Decimal, DecimalException
from fractions import Fraction
from typing import Any, List, Optional, Sequence, Union

from solders.hash import Hash
from solders.instruction import AccountMeta, Instruction
from solders.message import MessageV0
from solders.pubkey import Pubkey

from kitchen.encoding import MAX_TOKEN_DECIMALS, U64_MAX, encode_fixed_salt, encode_string, encode_u32, encode_u64
from kitchen.errors import EncodingError, ValidationError
from kitchen.layouts import RecipeOpcode
from kitchen.models import RecipeRequest, RecipeUsageRequest, Seed
from kitchen.pda import metadata_address
from kitchen.settings import ProgramConfig
from kitchen.validation import validate_for_creation, validate_for_usage

logger = logging.getLogger("kitchen")

SYS_PROGRAM_ID = Pubkey.from_string("11111111111111111111111111111111")
TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
SYSVAR_RENT_PUBKEY = Pubkey.from_string("SysvarRent111111111111111111111111111111111")

USE_OPCODES = (RecipeOpcode.COOK, RecipeOpcode.UNCOOK)

PubkeyLike = Union[Pubkey, str]


def to_pubkey(value: PubkeyLike, label: str = "pubkey") -> Pubkey:
    if isinstance(value, Pubkey):
        return value
    try:
        return Pubkey.from_string(str(value))
    except Exception as exc:  # noqa: BLE001
        raise ValidationError(f"Invalid {label}: {value}") from exc


def check_decimals(decimals: Any) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= MAX_TOKEN_DECIMALS:
        raise ValidationError(f"decimals must be an integer between 0 and {MAX_TOKEN_DECIMALS}, got {decimals!r}")
    return decimals


def to_base_units(amount: Any, decimals: int) -> int:
    """Scale a decimal amount to base units, truncating fractional units.

    Scaling is exact (``Fraction``), so no digit of the input is rounded
    before the fractional base units are dropped.
    """
    decimals = check_decimals(decimals)
    try:
        value = Decimal(str(amount).strip())
    except DecimalException as exc:
        raise ValidationError("Invalid number in qty_requested") from exc
    if not value.is_finite():
        raise ValidationError("Invalid number in qty_requested")
    if value < 0:
        raise EncodingError(f"u64 value out of range: {amount}")
    if not value:
        return 0
    # value * 10**decimals lies in [10**magnitude, 10**(magnitude + 1)).
    magnitude = value.adjusted() + decimals
    if magnitude >= 20:
        raise EncodingError(f"u64 value out of range: {amount}")
    if magnitude < 0:
        return 0
    scaled = int(Fraction(value) * 10**decimals)
    if scaled > U64_MAX:
        raise EncodingError(f"u64 value out of range: {amount}")
    return scaled


def encode_recipe_header(opcode: int, seeds: Sequence[Seed], salt: str) -> bytes:
    return (
        bytes([opcode])
        + encode_u32(len(seeds))
        + b"".join(encode_u64(seed.amount_u64) for seed in seeds)
        + encode_fixed_salt(salt)
    )


def encode_create_recipe(seeds: Sequence[Seed], salt: str, name: str, symbol: str, uri: str) -> bytes:
    return (
        encode_recipe_header(RecipeOpcode.CREATE, seeds, salt)
        + encode_string(name)
        + encode_string(symbol)
        + encode_string(uri)
    )


def encode_use_recipe(opcode: int, seeds: Sequence[Seed], salt: str, quantity: int) -> bytes:
    return encode_recipe_header(opcode, seeds, salt) + encode_u64(quantity)


class RecipeInstructionBuilder:
    """Builds create/cook/uncook instructions for one program deployment."""

    def __init__(self, config: ProgramConfig):
        self.config = config

    def _leading_accounts(self, payer: Pubkey, pda: Pubkey) -> List[AccountMeta]:
        return [
            AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
            AccountMeta(pubkey=self.config.fee_account, is_signer=False, is_writable=True),
            AccountMeta(pubkey=self.config.config_account, is_signer=False, is_writable=False),
            AccountMeta(pubkey=pda, is_signer=False, is_writable=True),
        ]

    @staticmethod
    def _mint_accounts(seeds: Sequence[Seed]) -> List[AccountMeta]:
        return [AccountMeta(pubkey=seed.mint_pubkey(), is_signer=False, is_writable=False) for seed in seeds]

    def build_create_recipe_ix(self, payer: PubkeyLike, data: Any) -> Instruction:
        recipe: RecipeRequest = validate_for_creation(data, self.config.program_id)
        payer_pub = to_pubkey(payer, "payer")
        pda = Pubkey.from_string(recipe.pda)
        metadata_pda = metadata_address(pda, self.config.metadata_program_id)
        uri = f"{self.config.ipfs_gateway}{recipe.metadata_cid}"

        accounts = self._leading_accounts(payer_pub, pda)
        accounts.extend(
            [
                AccountMeta(pubkey=metadata_pda, is_signer=False, is_writable=True),
                AccountMeta(pubkey=SYS_PROGRAM_ID, is_signer=False, is_writable=False),
                AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
                AccountMeta(pubkey=SYSVAR_RENT_PUBKEY, is_signer=False, is_writable=False),
                AccountMeta(pubkey=self.config.metadata_program_id, is_signer=False, is_writable=False),
            ]
        )
        accounts.extend(self._mint_accounts(recipe.seeds))
        data_bytes = encode_create_recipe(recipe.seeds, recipe.salt, recipe.name, recipe.symbol, uri)
        logger.info("recipe_create_built pda=%s metadata=%s seeds=%s", pda, metadata_pda, len(recipe.seeds))
        return Instruction(program_id=self.config.program_id, data=data_bytes, accounts=accounts)

    def build_use_recipe_ix(
        self,
        payer: PubkeyLike,
        data: Any,
        token_accounts: Sequence[PubkeyLike],
        option: int,
        decimals: Optional[int] = None,
    ) -> Optional[Instruction]:
        """Build a cook (0x02) or uncook (0x03) instruction.

        ``token_accounts`` must hold the PDA and user token account of every
        seed mint plus the two recipe mint accounts, i.e. ``2 * seeds + 2``
        entries. When the count is off this returns ``None`` instead of
        raising; callers must check for it.
        """
        if option not in USE_OPCODES:
            raise ValidationError("Invalid option. Must be 0x02 (cook) or 0x03 (uncook).")
        opcode = RecipeOpcode(option)
        recipe: RecipeUsageRequest = validate_for_usage(data, self.config.program_id)

        expected = 2 * len(recipe.seeds) + 2
        if len(token_accounts) != expected:
            logger.warning(
                "recipe_token_accounts_mismatch op=%s expected=%s got=%s "
                "hint=pass the PDA and user token accounts for each mint",
                opcode.name.lower(),
                expected,
                len(token_accounts),
            )
            return None

        if recipe.qty_requested is None:
            raise ValidationError("Invalid recipe data: Missing required field 'qty_requested'.")
        scale = self.config.token_decimals if decimals is None else decimals
        quantity = to_base_units(recipe.qty_requested, scale)

        payer_pub = to_pubkey(payer, "payer")
        pda = Pubkey.from_string(recipe.pda)
        accounts = self._leading_accounts(payer_pub, pda)
        accounts.extend(
            [
                AccountMeta(pubkey=SYS_PROGRAM_ID, is_signer=False, is_writable=False),
                AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
                AccountMeta(pubkey=SYSVAR_RENT_PUBKEY, is_signer=False, is_writable=False),
            ]
        )
        accounts.extend(self._mint_accounts(recipe.seeds))
        accounts.extend(
            [
                AccountMeta(pubkey=to_pubkey(ta, "token account"), is_signer=False, is_writable=True)
                for ta in token_accounts
            ]
        )
        data_bytes = encode_use_recipe(opcode, recipe.seeds, recipe.seed_salt, quantity)
        logger.info("recipe_%s_built pda=%s quantity=%s", opcode.name.lower(), pda, quantity)
        return Instruction(program_id=self.config.program_id, data=data_bytes, accounts=accounts)

    def build_cook_ix(self, payer: PubkeyLike, data: Any, token_accounts: Sequence[PubkeyLike], decimals: Optional[int] = None) -> Optional[Instruction]:
        return self.build_use_recipe_ix(payer, data, token_accounts, RecipeOpcode.COOK, decimals)

    def build_uncook_ix(self, payer: PubkeyLike, data: Any, token_accounts: Sequence[PubkeyLike], decimals: Optional[int] = None) -> Optional[Instruction]:
        return self.build_use_recipe_ix(payer, data, token_accounts, RecipeOpcode.UNCOOK, decimals)


def instruction_to_dict(ix: Instruction) -> dict:
    return {
        "program_id": str(ix.program_id),
        "keys": [
            {
                "pubkey": str(k.pubkey),
                "is_signer": k.is_signer,
                "is_writable": k.is_writable,
            }
            for k in ix.accounts
        ],
        "data": base64.b64encode(ix.data).decode(),
    }


def message_from_instructions(ixs: List[Instruction], payer: Pubkey, blockhash: str) -> str:
    message = MessageV0.try_compile(payer, ixs, [], Hash.from_string(blockhash))
    return base64.b64encode(bytes(message)).decode()
