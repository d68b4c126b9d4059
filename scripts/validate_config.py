#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import Optional

from renewal_app.config.loader import ConfigLoader
from renewal_app.config.validation import ConfigValidator


def main(config_dir: Optional[str] = None) -> int:
    """Validate renewal.yaml merged over the defaults."""
    loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
    print(f"🔍 Validating renewal configuration in {loader.config_dir}...")

    config = loader.merge_config()
    errors = ConfigValidator.validate_config(config)

    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        return 1

    print("✅ Configuration is valid")
    for section, values in config.items():
        print(f"  {section}: {values}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else None))
