from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tsdoc.models import Variant


class ExtractorSettings(BaseSettings):
    """Settings for a single extraction run."""

    model_config = SettingsConfigDict(env_prefix="TSDOC_")

    variant: Variant = Field(
        default=Variant.PUBLIC,
        description='Visibility variant to extract: "public" or "internal".',
    )
    sources_root: str = Field(
        default="src",
        description=(
            "Directory name that marks the sources root. Path segments after the "
            "last occurrence of it form the dotted module name."
        ),
    )
    initializer_preview_limit: int = Field(
        default=50,
        description=(
            "Constant initializers shorter than this many characters are shown "
            "in the constant's signature."
        ),
    )
    fallback_signature_limit: int = Field(
        default=100,
        description="Number of source characters used as the signature of unknown declarations.",
    )
    interface_preview_members: int = Field(
        default=3,
        description="Number of interface members shown inline in an interface signature.",
    )
    debug: bool = Field(
        default=False,
        description="If True, extraction failures print a full traceback to stderr.",
    )


def load_settings(
    env_prefix: Optional[str] = None,
    env_file: Optional[str] = None,
    **kwargs,
) -> ExtractorSettings:
    config_dict = SettingsConfigDict(
        env_prefix=env_prefix if env_prefix is not None else "TSDOC_",
        env_file=env_file,
    )

    class Settings(ExtractorSettings):
        model_config = config_dict

    return Settings(**kwargs)
