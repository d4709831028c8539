"""
Configuration management using Pydantic Settings.

Automatically loads configuration from the packaged statement.yaml (or a
config/statement.yaml override in the working directory) and environment variables.
Provides type-safe access to:
- Statement vocabulary (section markers, header labels, currency symbols)
- Import limits (maximum document size, accepted content types)
- Runtime settings (encoding override, log level, output directory)
"""

from pathlib import Path
from typing import Dict, List, Optional
import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SectionMarkers(BaseModel):
    """Literal texts that delimit sections of a statement."""

    closed_transactions: str = "Closed Transactions:"
    open_trades: str = "Open Trades:"
    no_transactions: str = "No transactions"

    model_config = {"frozen": True}


def _find_config_file(name: str) -> Path:
    """
    Resolve a vocabulary file.

    A config/ directory in the current working directory overrides the
    default copy shipped inside the package (mt_statement/data/).
    """
    override_path = Path('config') / name
    if override_path.exists():
        return override_path

    return Path(__file__).parent / 'data' / name


class StatementVocabulary(BaseSettings):
    """
    Statement vocabulary automatically loaded from statement.yaml.

    The vocabulary holds every literal the parser matches against, so that
    reports exported in another language can be supported by editing the
    YAML file only.

    Attributes:
        markers: Section marker texts (closed transactions, open trades, ...)
        header_bgcolor: Background color marking the column header row
        max_label_length: Longest accepted type / item cell text
        header_labels: Field tag -> accepted lower-cased header labels
        currency_symbols: Symbols stripped from numeric cells
        empty_datetime_values: Cell values meaning "no timestamp"

    Example:
        >>> vocab = StatementVocabulary()
        >>> vocab.markers.closed_transactions
        'Closed Transactions:'
        >>> vocab.labels_for('profit')
        ('profit', '損益', '利益')
    """

    markers: SectionMarkers = Field(
        default_factory=SectionMarkers,
        description="Literal section marker texts"
    )
    header_bgcolor: str = Field(
        default="C0C0C0",
        description="bgcolor value (or substring) of the header row"
    )
    max_label_length: int = Field(
        default=20,
        gt=0,
        description="Maximum characters in type / item cells"
    )
    header_labels: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Accepted header labels per field tag"
    )
    currency_symbols: List[str] = Field(
        default_factory=list,
        description="Currency symbols removed before numeric parsing"
    )
    empty_datetime_values: List[str] = Field(
        default_factory=list,
        description="Cell values treated as an absent timestamp"
    )

    model_config = SettingsConfigDict(
        env_prefix='MT_STATEMENT_',
        extra='ignore',
        frozen=True
    )

    @model_validator(mode='before')
    @classmethod
    def load_yaml_config(cls, data: dict) -> dict:
        """
        Load configuration from statement.yaml (see _find_config_file).

        Values passed explicitly (e.g., from tests) take precedence over
        the file. The file is only mandatory when nothing was passed.
        """
        config_path = _find_config_file('statement.yaml')

        if not config_path.exists():
            if data:
                return data
            raise FileNotFoundError(
                f"Config file not found at {config_path}. "
                "Ensure the package data file mt_statement/data/statement.yaml is installed."
            )

        with open(config_path, 'r', encoding='utf-8') as f:
            yaml_data = yaml.safe_load(f) or {}

        merged = {
            'markers': yaml_data.get('markers', {}),
            'header_bgcolor': yaml_data.get('header_bgcolor', 'C0C0C0'),
            'max_label_length': yaml_data.get('max_label_length', 20),
            'header_labels': yaml_data.get('header_labels', {}),
            'currency_symbols': yaml_data.get('currency_symbols', []),
            'empty_datetime_values': yaml_data.get('empty_datetime_values', []),
        }
        merged.update(data or {})
        return merged

    def labels_for(self, tag: str) -> tuple:
        """
        Get accepted header labels for a field tag.

        Args:
            tag: Field tag (e.g., 'ticket', 'open_time')

        Returns:
            Tuple of lower-cased labels (empty if tag is unknown)
        """
        return tuple(label.lower() for label in self.header_labels.get(tag, []))


# Singleton pattern - loaded once, cached forever
_vocabulary: Optional[StatementVocabulary] = None


def get_vocabulary() -> StatementVocabulary:
    """
    Get global vocabulary instance (lazy-loaded singleton).

    The vocabulary is immutable, so sharing it between threads is safe.

    Returns:
        Singleton StatementVocabulary instance

    Example:
        >>> vocab = get_vocabulary()
        >>> vocab is get_vocabulary()
        True
    """
    global _vocabulary
    if _vocabulary is None:
        _vocabulary = StatementVocabulary()
    return _vocabulary


class AppConfig(BaseSettings):
    """
    Application configuration loaded from environment variables.

    Environment Variables (from .env):
        MT_STATEMENT_MAX_DOCUMENT_BYTES: Largest accepted statement (bytes)
        MT_STATEMENT_ALLOWED_CONTENT_TYPES: JSON list of accepted MIME types
        MT_STATEMENT_ENCODING: Force a document encoding (default: auto-detect)
        MT_STATEMENT_LOG_LEVEL: Log level used by scripts
        MT_STATEMENT_OUTPUT_DIR: Directory for converted statements

    Example:
        >>> config = get_app_config()
        >>> config.max_document_bytes
        10485760
    """

    max_document_bytes: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Upper bound on statement size in bytes"
    )

    allowed_content_types: List[str] = Field(
        default_factory=lambda: ['text/html', 'application/html'],
        description="Accepted MIME types for uploaded statements"
    )

    encoding: Optional[str] = Field(
        default=None,
        description="Document encoding override; None lets lxml detect it"
    )

    log_level: str = Field(
        default="INFO",
        description="Log level for command line scripts"
    )

    output_dir: str = Field(
        default="data/output",
        description="Directory path for converted statement files"
    )

    model_config = SettingsConfigDict(
        env_prefix='MT_STATEMENT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )


# Singleton pattern - loaded once, cached forever
_app_config: Optional[AppConfig] = None


def get_app_config() -> AppConfig:
    """
    Get global application config instance (lazy-loaded singleton).

    Configuration is loaded from environment variables and .env file.

    Returns:
        Singleton AppConfig instance
    """
    global _app_config
    if _app_config is None:
        _app_config = AppConfig()
    return _app_config
