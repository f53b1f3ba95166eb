"""
Configuration Management for Touchline

Loads configuration from ~/.touchline/config.json and environment variables.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field

logger = logging.getLogger("touchline.common.config")

# Default config paths
CONFIG_DIR = Path.home() / ".touchline"
CONFIG_PATH = CONFIG_DIR / "config.json"

# Bundled keyword lists (relative to this file)
LEXICON_DIR = Path(__file__).parent / "lexicons"
DEFAULT_LEXICON_PATH = LEXICON_DIR / "football.json"

DEPLOYMENTS = ("match", "club")
CLASSIFIERS = ("keyword", "llm")


@dataclass
class EmbeddingConfig:
    """Query embedding configuration (must match the index dimension)"""
    model: str = "text-embedding-3-small"
    dimension: int = 1024
    openai_api_key: str = ""


@dataclass
class PineconeConfig:
    """Pinecone vector store configuration"""
    api_key: str = ""
    index_name: str = "touchline"
    top_k: int = 5


@dataclass
class ExaConfig:
    """Exa web search configuration"""
    api_key: str = ""
    num_results: int = 5
    snippet_chars: int = 500
    content_chars: int = 1000


@dataclass
class LLMConfig:
    """LLM provider configuration for model-assisted classification"""
    provider: str = "openai"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-haiku-4-5-20251001"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    google_api_key: str = ""
    google_model: str = "gemini-2.0-flash"
    temperature: float = 0.1
    timeout: float = 15.0


@dataclass
class RouterConfig:
    """Routing configuration"""
    deployment: str = "match"  # "match" or "club"
    classifier: str = "keyword"  # "keyword" or "llm"
    minute_window: int = 5
    lexicon_path: str = str(DEFAULT_LEXICON_PATH)


@dataclass
class TouchlineConfig:
    """Main Touchline configuration"""
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    pinecone: PineconeConfig = field(default_factory=PineconeConfig)
    exa: ExaConfig = field(default_factory=ExaConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    router: RouterConfig = field(default_factory=RouterConfig)
    _env_sourced_keys: set = field(default_factory=set, repr=False)

    @property
    def model_name(self) -> str:
        """Model name for the configured LLM provider"""
        return {
            "anthropic": self.llm.anthropic_model,
            "openai": self.llm.openai_model,
            "google": self.llm.google_model,
        }.get(self.llm.provider, "")


def _parse_embedding_config(data: dict) -> EmbeddingConfig:
    """Parse embedding section from config dict"""
    embedding_data = data.get("embedding", {})
    return EmbeddingConfig(
        model=embedding_data.get("model", "text-embedding-3-small"),
        dimension=int(embedding_data.get("dimension", 1024)),
        openai_api_key=embedding_data.get("openai_api_key", ""),
    )


def _parse_pinecone_config(data: dict) -> PineconeConfig:
    """Parse pinecone section from config dict"""
    pinecone_data = data.get("pinecone", {})
    return PineconeConfig(
        api_key=pinecone_data.get("api_key", ""),
        index_name=pinecone_data.get("index_name", "touchline"),
        top_k=int(pinecone_data.get("top_k", 5)),
    )


def _parse_exa_config(data: dict) -> ExaConfig:
    """Parse exa section from config dict"""
    exa_data = data.get("exa", {})
    return ExaConfig(
        api_key=exa_data.get("api_key", ""),
        num_results=int(exa_data.get("num_results", 5)),
        snippet_chars=int(exa_data.get("snippet_chars", 500)),
        content_chars=int(exa_data.get("content_chars", 1000)),
    )


def _parse_llm_config(data: dict) -> LLMConfig:
    """Parse llm section from config dict"""
    llm_data = data.get("llm", {})
    return LLMConfig(
        provider=llm_data.get("provider", "openai"),
        anthropic_api_key=llm_data.get("anthropic_api_key", ""),
        anthropic_model=llm_data.get("anthropic_model", "claude-haiku-4-5-20251001"),
        openai_api_key=llm_data.get("openai_api_key", ""),
        openai_model=llm_data.get("openai_model", "gpt-4o-mini"),
        google_api_key=llm_data.get("google_api_key", ""),
        google_model=llm_data.get("google_model", "gemini-2.0-flash"),
        temperature=float(llm_data.get("temperature", 0.1)),
        timeout=float(llm_data.get("timeout", 15.0)),
    )


def _parse_router_config(data: dict) -> RouterConfig:
    """Parse router section from config dict"""
    router_data = data.get("router", {})
    deployment = router_data.get("deployment", "match")
    if deployment not in DEPLOYMENTS:
        logger.warning("Unknown deployment %r, using 'match'", deployment)
        deployment = "match"
    classifier = router_data.get("classifier", "keyword")
    if classifier not in CLASSIFIERS:
        logger.warning("Unknown classifier %r, using 'keyword'", classifier)
        classifier = "keyword"
    return RouterConfig(
        deployment=deployment,
        classifier=classifier,
        minute_window=int(router_data.get("minute_window", 5)),
        lexicon_path=router_data.get("lexicon_path", str(DEFAULT_LEXICON_PATH)),
    )


def load_config() -> TouchlineConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (~/.touchline/config.json)
    3. Default values
    """
    config = TouchlineConfig()

    if CONFIG_PATH.exists():
        try:
            with open(CONFIG_PATH) as f:
                data = json.load(f)

            config.embedding = _parse_embedding_config(data)
            config.pinecone = _parse_pinecone_config(data)
            config.exa = _parse_exa_config(data)
            config.llm = _parse_llm_config(data)
            config.router = _parse_router_config(data)
        except (json.JSONDecodeError, IOError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Failed to load config file %s: %s", CONFIG_PATH, e)

    # API keys (track env-sourced keys so save_config never persists them)
    _env_key_map = {
        "OPENAI_API_KEY": [("embedding", "openai_api_key"), ("llm", "openai_api_key")],
        "PINECONE_API_KEY": [("pinecone", "api_key")],
        "EXA_API_KEY": [("exa", "api_key")],
        "ANTHROPIC_API_KEY": [("llm", "anthropic_api_key")],
        "GOOGLE_API_KEY": [("llm", "google_api_key")],
        "GEMINI_API_KEY": [("llm", "google_api_key")],
    }
    for env_var, targets in _env_key_map.items():
        val = os.getenv(env_var)
        if val:
            for section, attr in targets:
                setattr(getattr(config, section), attr, val)
                config._env_sourced_keys.add(f"{section}.{attr}")

    if os.getenv("PINECONE_INDEX_NAME"):
        config.pinecone.index_name = os.getenv("PINECONE_INDEX_NAME")
    if os.getenv("EMBEDDING_MODEL"):
        config.embedding.model = os.getenv("EMBEDDING_MODEL")
    if os.getenv("TOUCHLINE_LLM_PROVIDER"):
        config.llm.provider = os.getenv("TOUCHLINE_LLM_PROVIDER").lower()
    if os.getenv("TOUCHLINE_DEPLOYMENT") in DEPLOYMENTS:
        config.router.deployment = os.getenv("TOUCHLINE_DEPLOYMENT")
    if os.getenv("TOUCHLINE_CLASSIFIER") in CLASSIFIERS:
        config.router.classifier = os.getenv("TOUCHLINE_CLASSIFIER")
    if os.getenv("TOUCHLINE_LEXICON_PATH"):
        config.router.lexicon_path = os.getenv("TOUCHLINE_LEXICON_PATH")

    return config


def save_config(config: TouchlineConfig) -> None:
    """Save configuration to file.

    API key fields that were sourced from environment variables are written
    as empty strings so that secrets are not persisted to disk.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    env_sourced = getattr(config, "_env_sourced_keys", set())

    data = {
        "embedding": {
            "model": config.embedding.model,
            "dimension": config.embedding.dimension,
            "openai_api_key": config.embedding.openai_api_key,
        },
        "pinecone": {
            "api_key": config.pinecone.api_key,
            "index_name": config.pinecone.index_name,
            "top_k": config.pinecone.top_k,
        },
        "exa": {
            "api_key": config.exa.api_key,
            "num_results": config.exa.num_results,
            "snippet_chars": config.exa.snippet_chars,
            "content_chars": config.exa.content_chars,
        },
        "llm": {
            "provider": config.llm.provider,
            "anthropic_api_key": config.llm.anthropic_api_key,
            "anthropic_model": config.llm.anthropic_model,
            "openai_api_key": config.llm.openai_api_key,
            "openai_model": config.llm.openai_model,
            "google_api_key": config.llm.google_api_key,
            "google_model": config.llm.google_model,
            "temperature": config.llm.temperature,
            "timeout": config.llm.timeout,
        },
        "router": {
            "deployment": config.router.deployment,
            "classifier": config.router.classifier,
            "minute_window": config.router.minute_window,
            "lexicon_path": config.router.lexicon_path,
        },
    }

    for key in env_sourced:
        section, attr = key.split(".", 1)
        data[section][attr] = ""

    with open(CONFIG_PATH, "w") as f:
        json.dump(data, f, indent=2)

    # Set secure permissions
    CONFIG_PATH.chmod(0o600)
