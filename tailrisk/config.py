"""
Configuration management for the tailrisk engine.

This module provides centralized configuration for the risk computation,
including grid resolution, simulation settings, default confidence levels
and logging.
"""

import os
import numbers
import logging
from typing import Dict, Any, List, Optional, Sequence
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ConfigurationError


DEFAULT_NMESH = 1000
DEFAULT_NSIM = 10000
DEFAULT_ALPHA = (0.01, 0.05)


@dataclass(frozen=True)
class RiskControl:
    """Control settings for a single risk computation.

    ``nsim=None`` means "use the default for the parameter input": 10000
    paths for a single parameter vector, one path per draw for a posterior
    ensemble.
    """

    nmesh: int = DEFAULT_NMESH
    nsim: Optional[int] = None

    def validate(self) -> 'RiskControl':
        """Check the settings and return self."""
        if not _is_integral(self.nmesh) or self.nmesh < 2:
            raise ConfigurationError(f"nmesh must be an integer of at least 2, got {self.nmesh!r}")
        if self.nsim is not None and (not _is_integral(self.nsim) or self.nsim < 1):
            raise ConfigurationError(f"nsim must be a positive integer, got {self.nsim!r}")
        return self

    def resolve_nsim(self, n_draws: int) -> int:
        """Simulation count per parameter row."""
        if self.nsim is not None:
            return int(self.nsim)
        return DEFAULT_NSIM if n_draws == 1 else 1


@dataclass
class EngineConfig:
    """Configuration for risk engine defaults."""

    nmesh: int
    nsim: int
    alpha: List[float]
    do_es: bool
    random_seed: Optional[int] = None
    density_tolerance: float = 0.05


@dataclass
class OutputConfig:
    """Configuration for files written by the command line."""

    log_dir: Path
    output_dir: Path
    log_file: str = 'tailrisk.log'


class SystemConfig:
    """Centralized configuration management for the engine."""

    def __init__(self):
        """Initialize configuration from environment variables and defaults."""
        self.project_root = Path(__file__).parent.parent

        self._setup_engine_config()
        self._setup_output_config()
        self._setup_logging()

    def _setup_engine_config(self) -> None:
        """Configure engine defaults."""
        seed = os.getenv('TAILRISK_SEED', '')
        self.engine = EngineConfig(
            nmesh=int(os.getenv('TAILRISK_NMESH', str(DEFAULT_NMESH))),
            nsim=int(os.getenv('TAILRISK_NSIM', str(DEFAULT_NSIM))),
            alpha=_parse_alpha(os.getenv('TAILRISK_ALPHA', '')),
            do_es=os.getenv('TAILRISK_DO_ES', 'True').lower() == 'true',
            random_seed=int(seed) if seed else None,
            density_tolerance=float(os.getenv('TAILRISK_DENSITY_TOLERANCE', '0.05'))
        )

    def _setup_output_config(self) -> None:
        """Configure output locations."""
        self.output = OutputConfig(
            log_dir=Path(os.getenv('TAILRISK_LOG_DIR', str(self.project_root / 'logs'))),
            output_dir=Path(os.getenv('TAILRISK_OUTPUT_DIR', str(self.project_root / 'outputs')))
        )

    def _setup_logging(self) -> None:
        """Configure logging settings."""
        self.logging_config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'standard': {
                    'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                },
                'detailed': {
                    'format': '%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s',
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': 'INFO',
                    'formatter': 'standard',
                    'stream': 'ext://sys.stderr'
                },
                'file': {
                    'class': 'logging.FileHandler',
                    'level': 'DEBUG',
                    'formatter': 'detailed',
                    'filename': str(self.output.log_dir / self.output.log_file),
                    'mode': 'a',
                    'delay': True
                }
            },
            'loggers': {
                'tailrisk': {
                    'handlers': ['console', 'file'],
                    'level': 'DEBUG',
                    'propagate': False
                }
            }
        }

    def risk_control(self) -> RiskControl:
        """Control settings built from the configured defaults."""
        return RiskControl(nmesh=self.engine.nmesh, nsim=self.engine.nsim)

    def validate_config(self) -> Dict[str, Any]:
        """Validate configuration and return any issues."""
        issues = []
        warnings = []

        if self.engine.nmesh < 2:
            issues.append("Grid resolution (nmesh) must be at least 2")
        elif self.engine.nmesh < 100:
            warnings.append("Grid resolution is very low, VaR resolution will be coarse")

        if self.engine.nsim < 1:
            issues.append("Simulation count (nsim) must be at least 1")
        elif self.engine.nsim < 1000:
            warnings.append("Simulation count is low, multi-step estimates may be noisy")

        if not self.engine.alpha:
            issues.append("At least one confidence level is required")
        for level in self.engine.alpha:
            if level <= 0 or level >= 1:
                issues.append(f"Confidence level {level} must be between 0 and 1")

        if len(set(self.engine.alpha)) != len(self.engine.alpha):
            warnings.append("Duplicate confidence levels produce duplicate columns")

        if self.engine.density_tolerance <= 0:
            issues.append("Density tolerance must be positive")

        return {
            'valid': len(issues) == 0,
            'issues': issues,
            'warnings': warnings
        }

    def export_config(self) -> Dict[str, Any]:
        """Export current configuration as dictionary."""
        return {
            'engine': {
                'nmesh': self.engine.nmesh,
                'nsim': self.engine.nsim,
                'alpha': list(self.engine.alpha),
                'do_es': self.engine.do_es,
                'random_seed': self.engine.random_seed,
                'density_tolerance': self.engine.density_tolerance
            },
            'output': {
                'log_dir': str(self.output.log_dir),
                'output_dir': str(self.output.output_dir)
            }
        }


def _is_integral(value) -> bool:
    return (isinstance(value, numbers.Real) and not isinstance(value, bool)
            and float(value).is_integer())


def _parse_alpha(raw: str) -> List[float]:
    """Parse a comma separated list of confidence levels."""
    if not raw.strip():
        return list(DEFAULT_ALPHA)
    return [float(token) for token in raw.split(',') if token.strip()]


def validate_alpha(alpha: Sequence[float]) -> List[float]:
    """Return alpha as a list of floats, rejecting empty or out-of-range levels."""
    if alpha is None:
        raise ConfigurationError("Confidence levels must be provided")
    if isinstance(alpha, numbers.Real):
        alpha = [alpha]
    try:
        levels = [float(level) for level in alpha]
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Confidence levels must be numeric: {e}") from e
    if not levels:
        raise ConfigurationError("At least one confidence level is required")
    for level in levels:
        if not 0 < level < 1:
            raise ConfigurationError(f"Confidence level {level} must be in (0, 1)")
    return levels


# Global configuration instance
config = SystemConfig()


def setup_logging(system_config: Optional[SystemConfig] = None) -> None:
    """Setup logging configuration."""
    import logging.config
    active = system_config or config
    active.output.log_dir.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(active.logging_config)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name."""
    return logging.getLogger(name)


# Export commonly used items
__all__ = [
    'RiskControl',
    'EngineConfig',
    'OutputConfig',
    'SystemConfig',
    'DEFAULT_NMESH',
    'DEFAULT_NSIM',
    'DEFAULT_ALPHA',
    'config',
    'validate_alpha',
    'setup_logging',
    'get_logger'
]
