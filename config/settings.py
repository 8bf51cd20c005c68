from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Tatum (smart-contract invocation for ERC-20 metadata)
    tatum_api_key: str = ""
    tatum_base_url: str = "https://api.tatum.io/v3"
    tatum_chain: str = "ethereum"

    # CoinGecko (market data; demo key optional)
    coingecko_api_key: str = ""
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coingecko_platform: str = "ethereum"

    # Etherscan V2 (source verification, holders, creator)
    etherscan_api_key: str = ""
    etherscan_base_url: str = "https://api.etherscan.io/v2/api"
    etherscan_chain_id: int = 1
    etherscan_max_rps: float = 4.0  # free tier = 5 RPS, keep headroom
    holder_page_size: int = 100

    # Per-request timeout for every provider call (no retries)
    request_timeout_sec: float = 10.0

    # Extra allowlisted token addresses (comma-separated)
    allowlist_extra: str = ""

    # HTTP API
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_rate_limit: str = "30/minute"

    # Logging (file sink disabled unless LOG_FILE is set)
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: str = ""


settings = Settings()
