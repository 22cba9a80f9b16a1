# -*- coding: utf-8 -*-
"""
Reporting

This module writes a summary of a street network analysis run as JSON,
plain text and markdown files.
"""

import os
import logging
from datetime import datetime

from .utils import save_json

logger = logging.getLogger('spatial_network.reporting')


def _format_value(value):
    if isinstance(value, float):
        return f"{value:.6f}"
    return str(value)


def generate_network_report(metrics, output_dir, extra=None):
    """
    Generate a report for a street network.

    Args:
        metrics: Dictionary of network metrics (see calculate_network_metrics)
        output_dir: Directory to save reports
        extra: Optional dictionary of additional sections, each a dict or a value

    Returns:
        Dictionary with report paths
    """
    os.makedirs(output_dir, exist_ok=True)

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    generated = datetime.now().strftime('%Y-%m-%d %H:%M:%S')

    sections = {'network_statistics': metrics}
    if extra:
        sections.update(extra)

    report_files = {}

    json_path = os.path.join(output_dir, f"network_report_{timestamp}.json")
    save_json({'timestamp': timestamp, **sections}, json_path)
    report_files['json'] = json_path

    txt_path = os.path.join(output_dir, f"network_report_{timestamp}.txt")
    with open(txt_path, 'w', encoding='utf-8') as f:
        f.write("=" * 80 + "\n")
        f.write("SPATIAL NETWORK REPORT\n")
        f.write(f"Generated: {generated}\n")
        f.write("=" * 80 + "\n\n")

        for section, data in sections.items():
            f.write(f"{section.replace('_', ' ').upper()}\n")
            f.write("-" * 80 + "\n")
            if isinstance(data, dict):
                for key, value in data.items():
                    f.write(f"{str(key).replace('_', ' ').title()}: {_format_value(value)}\n")
            else:
                f.write(f"{_format_value(data)}\n")
            f.write("\n")
    report_files['text'] = txt_path

    md_path = os.path.join(output_dir, f"network_report_{timestamp}.md")
    with open(md_path, 'w', encoding='utf-8') as f:
        f.write("# Spatial Network Report\n\n")
        f.write(f"*Generated: {generated}*\n\n")

        for section, data in sections.items():
            f.write(f"## {section.replace('_', ' ').title()}\n\n")
            if isinstance(data, dict):
                for key, value in data.items():
                    f.write(f"- **{str(key).replace('_', ' ').title()}:** {_format_value(value)}\n")
            else:
                f.write(f"{_format_value(data)}\n")
            f.write("\n")
    report_files['markdown'] = md_path

    logger.info(f"Reports saved to {output_dir}")

    return report_files
