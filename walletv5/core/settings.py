from pydantic_settings import BaseSettings

from walletv5.core.sources import WALLET_V5R1_CODE_BOC


class Settings(BaseSettings):
    network_global_id: int = -239
    workchain: int = 0
    subwallet_id: int = 0
    timeout: int = 60
    code_boc: str = WALLET_V5R1_CODE_BOC

    class Config:
        env_prefix = 'ton_wallet_v5_'


settings = Settings()
