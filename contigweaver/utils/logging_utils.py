"""
ContigWeaver v0.1.0

Logging setup for command-line runs.

Library modules only create module-level loggers; handlers are attached here,
once, by the CLI.
"""

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(
    level: Union[str, int] = 'INFO',
    log_file: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """
    Configure root logging with a console handler and an optional file handler.
    
    Args:
        level: Level name ('DEBUG', 'INFO', ...) or numeric level
        log_file: Optional path for a persistent log
    
    Returns:
        The package logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    
    handlers = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))
    
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    
    return logging.getLogger('contigweaver')

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
