"""NFT Marketplace client - on-chain state sync and transaction orchestration."""

__version__ = "0.1.0"
