from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import List
import yaml
from pathlib import Path

from .cache.cache_config import CacheGeometry, DEFAULT_BLOCK_SIZE
from .cache.cache import MISS_PENALTY
from .errors import ConfigurationError
from .utils.logging import get_logger

logger = get_logger(__name__)

INT_FIELDS = ("cache_size_kb", "block_size", "associativity", "miss_penalty",
              "verbose_lo", "verbose_hi", "timeline_interval")
LIST_FIELDS = ("sweep_sizes_kb", "sweep_associativities")
STR_FIELDS = ("trace_file", "config_file", "report_dir")


@dataclass
class SimConfig:
    """Trace-driven cache simulator configuration."""
    # Input
    trace_file: str = ""

    # Cache geometry
    cache_size_kb: int = 1
    block_size: int = DEFAULT_BLOCK_SIZE
    associativity: int = 1
    miss_penalty: int = MISS_PENALTY

    # Verbose per-access output, inclusive order range
    verbose: bool = False
    verbose_lo: int = 0
    verbose_hi: int = 0

    # Config file
    config_file: str = ""

    # Reporting
    report_dir: str = ""
    timeline_interval: int = 1000

    # Sweep parameters
    sweep_sizes_kb: List[int] = field(default_factory=lambda: [1, 2, 4, 8, 16, 32])
    sweep_associativities: List[int] = field(default_factory=lambda: [1, 2, 4, 8])

    def __post_init__(self):
        self.validate()

    def validate(self):
        self._check_types()
        if self.verbose and self.verbose_lo > self.verbose_hi:
            raise ConfigurationError(
                f"Verbose range is empty: ic1={self.verbose_lo} > ic2={self.verbose_hi}.")
        if self.miss_penalty < 0:
            raise ConfigurationError("Miss penalty must not be negative.")
        if self.timeline_interval <= 0:
            raise ConfigurationError("Timeline interval must be positive.")

    def _check_types(self):
        for name in INT_FIELDS:
            value = getattr(self, name)
            # bool is an int subclass but never a valid size or count
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}.")
        for name in LIST_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, list) or not all(
                    isinstance(v, int) and not isinstance(v, bool) for v in value):
                raise ConfigurationError(f"{name} must be a list of integers, got {value!r}.")
        for name in STR_FIELDS:
            if not isinstance(getattr(self, name), str):
                raise ConfigurationError(f"{name} must be a string, got {getattr(self, name)!r}.")
        if not isinstance(self.verbose, bool):
            raise ConfigurationError(f"verbose must be true or false, got {self.verbose!r}.")

    def geometry(self) -> CacheGeometry:
        """Builds the validated cache geometry for this run."""
        return CacheGeometry(self.cache_size_kb, self.block_size, self.associativity)

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        with open(yaml_path, 'r') as f:
            yaml_config = yaml.safe_load(f) or {}
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(f"Config file {yaml_path} must contain a mapping.")
        known = {f.name for f in fields(self)}
        for key, value in yaml_config.items():
            if key in known:
                setattr(self, key, value)
            else:
                logger.warning("Ignoring unknown config key '%s' in %s", key, yaml_path)

    @classmethod
    def from_args(cls, args) -> SimConfig:
        """Factory method to create a SimConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if getattr(args, 'config', None):
            config.config_file = args.config
            if not Path(config.config_file).exists():
                raise ConfigurationError(f"Config file {config.config_file} not found.")
            config.update_from_yaml(config.config_file)

        # 2. Override with command-line arguments
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if value is not None and hasattr(config, key):
                setattr(config, key, value)

        config.validate()
        return config
