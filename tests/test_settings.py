import pytest

from kitchen.settings import ProgramConfig, Settings


class TestProgramConfig:
    def test_defaults(self, config):
        assert str(config.program_id) == "CooKTkMQ4V1zfr3faLVxgRwSYM86AWXsEbUC3aeDvXTe"
        assert config.token_decimals == 6

    @pytest.mark.parametrize("decimals", [-1, 256])
    def test_token_decimals_bounded(self, decimals):
        with pytest.raises(RuntimeError, match="KITCHEN_TOKEN_DECIMALS"):
            ProgramConfig.from_settings(Settings(_env_file=None, token_decimals=decimals))

    def test_invalid_pubkey(self):
        with pytest.raises(RuntimeError, match="KITCHEN_FEE_ACCOUNT is not a valid pubkey"):
            ProgramConfig.from_settings(Settings(_env_file=None, fee_account="not-a-key"))
