"""Shared helpers for settings components."""

from pathlib import Path

from decouple import AutoConfig

# Repository root: quickfile/settings/components/__init__.py -> ../../../
BASE_DIR = Path(__file__).parent.parent.parent.parent

# Values are looked up in config/.env first, then in the environment
config = AutoConfig(search_path=BASE_DIR.joinpath('config'))
