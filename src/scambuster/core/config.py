# src/scambuster/core/config.py

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from scambuster.normalize.transformer import DEFAULT_BLOCKED_IDENTIFIERS

logger = logging.getLogger(__name__)


class EvidenceConfig(BaseModel):
    evidence_url_points: int = 20
    transaction_id_points: int = 15
    long_description_points: int = 10
    medium_description_points: int = 5
    verified_reporter_points: int = 15
    amount_lost_points: int = 10
    long_description_length: int = 100
    medium_description_length: int = 50


class VerificationConfig(BaseModel):
    evidence_threshold: int = 30
    corroboration_count: int = 2
    verified_count: int = 5


class ExpirationConfig(BaseModel):
    expiration_days: int = Field(default=90, gt=0)


class CorrelationConfig(BaseModel):
    timing_window_minutes: int = 30
    similarity_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    min_word_length: int = 3
    rapid_window_minutes: int = 60
    rapid_min_reports: int = 3
    same_phone_penalty: float = 0.4
    same_ip_penalty: float = 0.3
    timing_penalty: float = 0.2
    similarity_penalty: float = 0.3
    rapid_targeting_penalty: float = 0.25


class DuplicatesConfig(BaseModel):
    threshold: float = Field(default=0.8, ge=0.0, le=1.0)


class HashingConfig(BaseModel):
    salt: SecretStr = Field(default=SecretStr(""))
    environment: str = "development"


class IngestionConfig(BaseModel):
    blocked_identifiers: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BLOCKED_IDENTIFIERS)
    )
    min_description_length: int = 20


class ScambusterConfig(BaseModel):
    """
    Main configuration model for ScamBuster.
    """

    model_config = ConfigDict(populate_by_name=True)

    evidence: EvidenceConfig = Field(default_factory=EvidenceConfig)
    verification: VerificationConfig = Field(default_factory=VerificationConfig)
    expiration: ExpirationConfig = Field(default_factory=ExpirationConfig)
    correlation: CorrelationConfig = Field(default_factory=CorrelationConfig)
    duplicates: DuplicatesConfig = Field(default_factory=DuplicatesConfig)
    hashing: HashingConfig = Field(default_factory=HashingConfig, validate_default=True)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)

    @field_validator("hashing", mode="before")
    @classmethod
    def load_secrets_from_env(cls, v: Any) -> Any:
        """Override hashing values with environment variables if present."""
        if isinstance(v, HashingConfig):
            v = v.model_dump()
            v["salt"] = v["salt"].get_secret_value()
        if not isinstance(v, dict):
            v = {}

        if "HASH_SALT" in os.environ:
            v["salt"] = os.environ["HASH_SALT"]
        if "SCAMBUSTER_ENV" in os.environ:
            v["environment"] = os.environ["SCAMBUSTER_ENV"]

        return v


def load_config(config_path: Optional[Union[str, Path]] = None) -> ScambusterConfig:
    """
    Load ScamBuster configuration from YAML file.

    Args:
        config_path: Path to config.yaml (default: ./config/config.yaml)

    Returns:
        Validated ScambusterConfig instance.
    """
    if config_path is None:
        config_path = Path("config") / "config.yaml"
    else:
        config_path = Path(config_path)

    config_data: Dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
            logger.info(f"Loaded configuration from {config_path}")
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config file {config_path}: {e}")
    else:
        logger.info(f"Config file not found at {config_path}, using defaults")

    # Create config instance (env vars override file)
    config = ScambusterConfig(**config_data)

    # Log non-secret settings for debugging
    logger.debug("ScamBuster configuration loaded with settings:")
    logger.debug(f"  Environment: {config.hashing.environment}")
    logger.debug(f"  Hash salt configured: {bool(config.hashing.salt.get_secret_value())}")
    logger.debug(f"  Expiration days: {config.expiration.expiration_days}")
    logger.debug(
        f"  Verification: evidence>={config.verification.evidence_threshold}, "
        f"corroborated>={config.verification.corroboration_count}, "
        f"verified>={config.verification.verified_count}"
    )

    return config
