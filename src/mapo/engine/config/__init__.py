from .loader import load_config_file, load_run_config, parse_run_config

__all__ = ["load_config_file", "load_run_config", "parse_run_config"]
