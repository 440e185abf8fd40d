# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Project configuration loading."""

from entdef.workspace.config import CONFIG_FILE_NAME, ConfigError, EntdefConfig, load_config

__all__ = ["CONFIG_FILE_NAME", "ConfigError", "EntdefConfig", "load_config"]
