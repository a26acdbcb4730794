"""
Configuration management for MeasureLabel
"""
import os
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('true', '1', 'yes', 'on')


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from .env file

    Args:
        config_path: Optional path to config file

    Returns:
        Dictionary of configuration values
    """
    if config_path:
        load_dotenv(config_path)
    else:
        load_dotenv()

    log_file = os.getenv('LOG_FILE')

    return {
        # Debug settings
        'debug': _env_bool('DEBUG', 'false'),
        'log_level': os.getenv('LOG_LEVEL', 'INFO'),
        'log_file': Path(log_file) if log_file else None,

        # GUI settings
        'theme': os.getenv('THEME', 'dark'),
        'window_size': os.getenv('DEFAULT_WINDOW_SIZE', '1200x800'),
        'ctk_theme': os.getenv('CUSTOMTKINTER_THEME', 'blue'),

        # Export
        'export_dir': Path(os.getenv('EXPORT_DIR', './exports')),
        'export_dpi': int(os.getenv('EXPORT_DPI', '150')),

        # Default label/line style
        'smart_sizing': _env_bool('SMART_DEFAULT_SIZE', 'true'),
        'scale_line_width': float(os.getenv('SCALE_LINE_WIDTH', '200')),
        'scale_font': float(os.getenv('SCALE_FONT', '35')),
        'line_width': float(os.getenv('DEFAULT_LINE_WIDTH', '3')),
        'font_size': float(os.getenv('DEFAULT_FONT_SIZE', '72')),
        'line_color': os.getenv('DEFAULT_LINE_COLOR', 'white'),
        'text_color': os.getenv('DEFAULT_TEXT_COLOR', 'white'),
        'text_location': os.getenv('DEFAULT_TEXT_LOCATION', 'center'),
        'length_digits': int(os.getenv('LENGTH_DIGITS', '1')),
        'save_to_overlay': _env_bool('SAVE_TO_OVERLAY', 'true'),
        'font_family': os.getenv('LABEL_FONT_FAMILY', 'Serif'),
    }


def ensure_directories(config: Dict[str, Any]) -> None:
    """Create necessary directories if they don't exist"""
    for key in ['export_dir']:
        path = config[key]
        path.mkdir(parents=True, exist_ok=True)
