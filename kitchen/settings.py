from dataclasses import dataclass
from typing import Optional

from pydantic_settings import BaseSettings
from solders.pubkey import Pubkey

from kitchen.encoding import MAX_TOKEN_DECIMALS
from kitchen.pda import config_address

DEFAULT_PROGRAM_ID = "CooKTkMQ4V1zfr3faLVxgRwSYM86AWXsEbUC3aeDvXTe"
DEFAULT_METADATA_PROGRAM_ID = "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"
DEFAULT_FEE_ACCOUNT = "9Hp3RaH2Ve5hG9sBY7shMUSEYy5JcDDRWood8umBgUNm"
DEFAULT_IPFS_GATEWAY = "https://ipfs.io/ipfs/"


class Settings(BaseSettings):
    program_id: str = DEFAULT_PROGRAM_ID
    metadata_program_id: str = DEFAULT_METADATA_PROGRAM_ID
    fee_account: str = DEFAULT_FEE_ACCOUNT
    config_account: Optional[str] = None  # derived from program_id when unset
    ipfs_gateway: str = DEFAULT_IPFS_GATEWAY
    token_decimals: int = 6

    class Config:
        env_prefix = "KITCHEN_"
        env_file = ".env"
        env_file_encoding = "utf-8"


def load_pubkey(env_name: str, value: Optional[str]) -> Pubkey:
    if not value:
        raise RuntimeError(f"{env_name} must be set to a valid pubkey")
    try:
        return Pubkey.from_string(value)
    except Exception as exc:  # noqa: BLE001
        raise RuntimeError(f"{env_name} is not a valid pubkey: {exc}") from exc


@dataclass(frozen=True)
class ProgramConfig:
    """Fixed identifiers of the recipe program deployment.

    Kept immutable and passed to the builder explicitly so a devnet or
    localnet deployment can be targeted without touching module state.
    """

    program_id: Pubkey
    metadata_program_id: Pubkey
    fee_account: Pubkey
    config_account: Pubkey
    ipfs_gateway: str = DEFAULT_IPFS_GATEWAY
    token_decimals: int = 6

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ProgramConfig":
        settings = settings or Settings()
        program_id = load_pubkey("KITCHEN_PROGRAM_ID", settings.program_id)
        if settings.config_account:
            config_account = load_pubkey("KITCHEN_CONFIG_ACCOUNT", settings.config_account)
        else:
            config_account = config_address(program_id)
        if not 0 <= settings.token_decimals <= MAX_TOKEN_DECIMALS:
            raise RuntimeError(f"KITCHEN_TOKEN_DECIMALS must be between 0 and {MAX_TOKEN_DECIMALS}")
        return cls(
            program_id=program_id,
            metadata_program_id=load_pubkey("KITCHEN_METADATA_PROGRAM_ID", settings.metadata_program_id),
            fee_account=load_pubkey("KITCHEN_FEE_ACCOUNT", settings.fee_account),
            config_account=config_account,
            ipfs_gateway=settings.ipfs_gateway,
            token_decimals=settings.token_decimals,
        )
