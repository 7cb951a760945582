"""
ContigWeaver v0.1.0

Configuration schema for ContigWeaver.

Defines all available configuration parameters with defaults and validation.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

from typing import Dict, Any, Optional, List
from pathlib import Path
import copy
import logging

import yaml

logger = logging.getLogger(__name__)

TEMPLATES = ('default', 'short_read', 'long_read')
VALID_METHODS = ('olc', 'dbg')
VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Assembly
    # ========================================================================
    'assembly': {
        'method': 'olc',  # 'olc' or 'dbg'
        'min_overlap': 20,
        'min_identity': 0.9,
        'kmer_size': 31,
        'min_contig_length': 100,
    },
    
    # ========================================================================
    # Overlap Detection
    # ========================================================================
    'overlap': {
        'threads': 1,
        'check_interval': 100,  # Read pairs between cancellation checks
    },
    
    # ========================================================================
    # Read Preprocessing
    # ========================================================================
    'preprocessing': {
        'trim': {
            'enabled': False,
            'min_quality': 20,  # Phred
            'min_length': 50,
        },
        'correction': {
            'enabled': False,
            'kmer_size': 21,
            'min_kmer_frequency': 3,
        },
    },
    
    # ========================================================================
    # Scaffolding
    # ========================================================================
    'scaffolding': {
        'gap_character': 'N',
    },
    
    # ========================================================================
    # Coverage
    # ========================================================================
    'coverage': {
        'min_overlap': 20,
    },
    
    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'contigs_file': 'contigs.fasta',
        'stats_file': 'assembly_stats.yaml',
        'line_width': 80,
        
        # Logging
        'logging': {
            'level': 'INFO',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
            'log_file': None,
        },
    },
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.
    
    Args:
        config_path: Path to YAML config file (None = use defaults)
    
    Returns:
        Configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    
    if config_path:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                user_config = yaml.safe_load(f) or {}
            
            # Deep merge user config into defaults
            config = _deep_merge(config, user_config)
        else:
            logger.warning(f"Config file not found: {config_path}; using defaults")
    
    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.
    
    Args:
        base: Base dictionary
        override: Override dictionary
    
    Returns:
        Merged dictionary
    """
    result = base.copy()
    
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    
    return result


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.
    
    Args:
        output_path: Output file path
        template: Template type ('default', 'short_read', 'long_read')
    """
    if template not in TEMPLATES:
        raise ValueError(f"Unknown template '{template}'. Supported: {', '.join(TEMPLATES)}")
    
    config = copy.deepcopy(DEFAULT_CONFIG)
    
    # Customize for specific templates
    if template == 'short_read':
        config['assembly']['method'] = 'dbg'
        config['assembly']['kmer_size'] = 31
        config['preprocessing']['trim']['enabled'] = True
        config['preprocessing']['correction']['enabled'] = True
        
    elif template == 'long_read':
        config['assembly']['method'] = 'olc'
        config['assembly']['min_overlap'] = 500
        config['assembly']['min_identity'] = 0.85
        config['assembly']['min_contig_length'] = 1000
        config['overlap']['threads'] = 4
    
    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.
    
    Args:
        config: Configuration to validate
    
    Returns:
        List of validation errors (empty if valid)
    """
    errors = []
    
    # Validate assembly parameters
    assembly = config.get('assembly', {})
    method = assembly.get('method', 'olc')
    if method not in VALID_METHODS:
        errors.append(f"Invalid assembly method: {method} (expected one of {', '.join(VALID_METHODS)})")
    
    min_overlap = assembly.get('min_overlap', 20)
    if not isinstance(min_overlap, int) or min_overlap < 1:
        errors.append(f"assembly.min_overlap must be an integer >= 1, got {min_overlap}")
    
    min_identity = assembly.get('min_identity', 0.9)
    if not isinstance(min_identity, (int, float)) or not 0.0 <= min_identity <= 1.0:
        errors.append(f"assembly.min_identity must be within [0.0, 1.0], got {min_identity}")
    
    kmer_size = assembly.get('kmer_size', 31)
    if not isinstance(kmer_size, int) or kmer_size < 2:
        errors.append(f"assembly.kmer_size must be an integer >= 2, got {kmer_size}")
    
    min_contig_length = assembly.get('min_contig_length', 100)
    if not isinstance(min_contig_length, int) or min_contig_length < 0:
        errors.append(f"assembly.min_contig_length must be an integer >= 0, got {min_contig_length}")
    
    # Validate overlap settings
    overlap = config.get('overlap', {})
    threads = overlap.get('threads', 1)
    if not isinstance(threads, int) or threads < 1:
        errors.append(f"overlap.threads must be an integer >= 1, got {threads}")
    
    check_interval = overlap.get('check_interval', 100)
    if not isinstance(check_interval, int) or check_interval < 1:
        errors.append(f"overlap.check_interval must be an integer >= 1, got {check_interval!r}")
    
    # Validate preprocessing
    preprocessing = config.get('preprocessing', {})
    trim = preprocessing.get('trim', {})
    for key, default, minimum in (('min_quality', 20, 0), ('min_length', 50, 0)):
        value = trim.get(key, default)
        if not isinstance(value, int) or value < minimum:
            errors.append(f"preprocessing.trim.{key} must be an integer >= {minimum}, got {value!r}")
    
    correction = preprocessing.get('correction', {})
    for key, default in (('kmer_size', 21), ('min_kmer_frequency', 3)):
        value = correction.get(key, default)
        if not isinstance(value, int) or value < 1:
            errors.append(f"preprocessing.correction.{key} must be an integer >= 1, got {value!r}")
    
    # Validate scaffolding
    gap_character = config.get('scaffolding', {}).get('gap_character', 'N')
    if not isinstance(gap_character, str) or len(gap_character) != 1:
        errors.append(f"scaffolding.gap_character must be a single character, got {gap_character!r}")
    
    # Validate coverage
    coverage_overlap = config.get('coverage', {}).get('min_overlap', 20)
    if not isinstance(coverage_overlap, int) or coverage_overlap < 0:
        errors.append(f"coverage.min_overlap must be an integer >= 0, got {coverage_overlap!r}")
    
    # Validate logging
    level = config.get('output', {}).get('logging', {}).get('level', 'INFO')
    if str(level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Invalid logging level: {level}")
    
    return errors
