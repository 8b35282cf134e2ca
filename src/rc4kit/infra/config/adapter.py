from __future__ import annotations

from typing import Any

from rc4kit.libs.crypto.text import ENCODINGS, OUTPUT_FORMATS
from rc4kit.schemas import CipherConfig


class ConfigAdapter:
    """High-level accessor for general and profile-specific configuration.

    All configuration resolution follows the order:

    **general -> profile -> built-in defaults**

    Args:
        config (dict[str, Any]): Fully loaded configuration mapping containing
            a ``general`` block and optionally a ``profiles`` block.
    """

    def __init__(self, config: dict[str, Any]) -> None:
        self._config: dict[str, Any] = dict(config)

    def get_config(self) -> dict[str, Any]:
        """Return the full raw configuration mapping."""
        return self._config

    def list_profiles(self) -> list[str]:
        """Return the names of the profiles defined in the configuration."""
        profiles = self._config.get("profiles") or {}
        return sorted(profiles)

    def get_cipher_config(self, profile: str | None = None) -> CipherConfig:
        """Build a CipherConfig by merging general and profile overrides.

        Args:
            profile (str | None): Profile name, or None for general settings.

        Returns:
            CipherConfig: Resolved cipher configuration.

        Raises:
            KeyError: If ``profile`` is not defined.
            ValueError: If a resolved value is invalid.
        """
        general_cipher = self._gen_cfg().get("cipher") or {}
        profile_cipher = self._profile_cfg(profile).get("cipher") or {}
        cfg: dict[str, Any] = {**general_cipher, **profile_cipher}

        text_encoding = str(cfg.get("text_encoding", "utf-8")).lower()
        if text_encoding not in ENCODINGS:
            raise ValueError(f"Unknown text_encoding: {text_encoding!r}")

        output_format = str(cfg.get("output_format", "hex")).lower()
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output_format: {output_format!r}")

        if text_encoding == "legacy" and output_format != "raw":
            raise ValueError("text_encoding 'legacy' requires output_format 'raw'")

        drop = int(cfg.get("drop", 0))
        if drop < 0:
            raise ValueError(f"drop must be non-negative, got {drop}")

        max_key_length = cfg.get("max_key_length")
        if max_key_length is not None:
            max_key_length = int(max_key_length)
            if max_key_length < 1:
                raise ValueError(
                    f"max_key_length must be positive, got {max_key_length}"
                )

        return CipherConfig(
            text_encoding=text_encoding,
            output_format=output_format,
            drop=drop,
            max_key_length=max_key_length,
        )

    def _gen_cfg(self) -> dict[str, Any]:
        """Return the ``general`` configuration block."""
        return self._config.get("general") or {}

    def _profile_cfg(self, profile: str | None) -> dict[str, Any]:
        """Return the block for ``profile``, or an empty mapping."""
        if profile is None:
            return {}
        profiles = self._config.get("profiles") or {}
        if profile not in profiles:
            raise KeyError(f"Unknown profile: {profile!r}")
        return profiles[profile] or {}
