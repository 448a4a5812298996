# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Runtime configuration for the pgxn_meta command line tools."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .utils.logging_utils import configure_logging, to_level


@dataclass
class MetaConfig:
    """Configuration read from ``PGXN_META_*`` environment variables."""
    log_level: str = "WARNING"
    print_level: str = "WARNING"

    # paths
    schema_dir: Optional[str] = None
    bundle_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'MetaConfig':
        """Create configuration from environment variables."""
        return cls(
            log_level=os.getenv('PGXN_META_LOG_LEVEL', 'WARNING'),
            print_level=os.getenv('PGXN_META_PRINT_LEVEL', 'WARNING'),
            schema_dir=os.getenv('PGXN_META_SCHEMA_DIR') or None,
            bundle_dir=os.getenv('PGXN_META_BUNDLE_DIR') or None,
        )

    def set_logging(self, reserve_stdout: bool = False) -> logging.Logger:
        """Setup logging based on configuration.

        ``reserve_stdout`` sends every record to stderr, for tools whose
        stdout carries machine-readable output.
        """
        return configure_logging(
            level=to_level(self.log_level),
            stderr_level=to_level(self.print_level),
            reserve_stdout=reserve_stdout,
        )
