# -*- coding: utf-8 -*-
"""
Utility Functions

This module contains utility functions used across the spatial network
pipeline: logging setup, JSON helpers and time formatting.
"""

import os
import json
import logging

import numpy as np

from .config import LOG_FORMAT, LOG_LEVEL


def setup_logging(log_file=None, level=LOG_LEVEL):
    """
    Set up logging configuration.

    Args:
        log_file: Path to log file, or None for console only
        level: Logging level

    Returns:
        Logger object
    """
    logger = logging.getLogger('spatial_network')

    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logger.setLevel(numeric_level)

    # Calling twice must not duplicate every message
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def _serialize(obj):
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def save_json(data, file_path):
    """
    Save data as JSON file.

    Args:
        data: Data to save
        file_path: Path to save JSON file

    Returns:
        Path to saved file
    """
    os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)

    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, default=_serialize, indent=2, ensure_ascii=False)

    return file_path


def convert_time_format(seconds):
    """
    Convert seconds to a human-readable time format.

    Args:
        seconds: Number of seconds

    Returns:
        Formatted time string
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    elif minutes > 0:
        return f"{minutes}m {secs}s"
    else:
        return f"{secs}s"
