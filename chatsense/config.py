"""chatsense Configuration.

Includes:
- AppConfig: Application settings with environment variable support

Environment Variables:
    CHATSENSE_VOCABULARY_PATH: YAML file replacing the built-in vocabulary
    CHATSENSE_CATEGORIES_PATH: YAML category index used by `resolve`
    CHATSENSE_HISTORY_WINDOW: Recent turns considered for context
    CHATSENSE_FOLLOWUP_MAX_LENGTH: Sentences shorter than this can be follow-ups
    CHATSENSE_CLARIFICATION_THRESHOLD: Similarity above which a turn is restated
    CHATSENSE_MATCH_THRESHOLD: Minimum fuzzy keyword match score
    CHATSENSE_CANONICALIZE: Rewrite synonyms before intent analysis
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.vocabulary import DEFAULT_VOCABULARY, Vocabulary, load_category_index

CONFIG_DIR = ".chatsense"
CONFIG_FILE = "config.yaml"


class AppConfig(BaseSettings):
    """Application configuration with environment variable support.

    Configuration is loaded from environment variables with CHATSENSE_
    prefix. For example, CHATSENSE_HISTORY_WINDOW sets history_window.

    Precedence (highest to lowest):
        1. Environment variables (CHATSENSE_*)
        2. Config file (.chatsense/config.yaml)
        3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="CHATSENSE_",
        extra="ignore",
    )

    project_path: Path = Field(default_factory=Path.cwd)

    # Static table files - None means built-in tables
    vocabulary_path: Optional[Path] = None
    categories_path: Optional[Path] = None

    # Context refinement
    history_window: int = Field(default=3, ge=0)
    followup_max_length: int = Field(default=15, ge=0)
    clarification_threshold: float = Field(default=0.5, ge=0.0, le=1.0)

    # Keyword matching
    match_threshold: float = Field(default=0.6, ge=0.0, le=1.0)

    canonicalize: bool = False

    @classmethod
    def load(cls, path: Path) -> "AppConfig":
        """Load configuration from .chatsense/config.yaml if it exists.

        Values from the environment override values from the file.

        Args:
            path: Project path to load configuration for

        Returns:
            AppConfig with file values applied (or defaults if no config exists)
        """
        from ruamel.yaml import YAML

        config = cls(project_path=path)
        config_file = path / CONFIG_DIR / CONFIG_FILE

        if config_file.exists():
            yaml = YAML()
            with config_file.open() as f:
                data = yaml.load(f)

            if data:
                # Fields set from the environment keep their values
                file_values = {
                    key: value
                    for key, value in data.items()
                    if key in cls.model_fields
                    and key != "project_path"
                    and key not in config.model_fields_set
                }
                config = cls(project_path=path, **file_values)

        return config

    def save(self) -> None:
        """Save configuration to .chatsense/config.yaml in the project path."""
        from ruamel.yaml import YAML

        config_dir = self.project_path / CONFIG_DIR
        config_dir.mkdir(parents=True, exist_ok=True)
        config_file = config_dir / CONFIG_FILE

        yaml = YAML()
        yaml.default_flow_style = False

        data = {
            "vocabulary_path": str(self.vocabulary_path) if self.vocabulary_path else None,
            "categories_path": str(self.categories_path) if self.categories_path else None,
            "history_window": self.history_window,
            "followup_max_length": self.followup_max_length,
            "clarification_threshold": self.clarification_threshold,
            "match_threshold": self.match_threshold,
            "canonicalize": self.canonicalize,
        }

        with config_file.open("w") as f:
            yaml.dump(data, f)

    def resolve_path(self, path: Path) -> Path:
        """Resolve a configured path relative to the project path."""
        path = Path(path).expanduser()
        return path if path.is_absolute() else self.project_path / path

    def load_vocabulary(self) -> Vocabulary:
        """Load the configured vocabulary, or the built-in one."""
        if self.vocabulary_path is None:
            return DEFAULT_VOCABULARY
        return Vocabulary.load(self.resolve_path(self.vocabulary_path))

    def load_categories(self) -> dict[str, dict[str, list[str]]]:
        """Load the configured category index, empty if none is configured."""
        if self.categories_path is None:
            return {}
        return load_category_index(self.resolve_path(self.categories_path))


__all__ = ["AppConfig"]
