"""
Atlas configuration.

All values are validated before any packing starts.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from atlaspack.packing.packer import DEFAULT_UTILIZATION

DEFAULT_ATLAS_SIZE = 4096
DEMO_ATLAS_SIZE = 960


class AtlasConfig(BaseModel):
    """Settings for one atlas build."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    atlas_size: int = Field(DEFAULT_ATLAS_SIZE, gt=0, description="Side length of the square atlas in pixels.")
    expand: int = Field(0, ge=0, description="Edge pixels repeated around each texture.")
    border: int = Field(0, ge=0, description="Empty space between textures.")
    utilization: float = Field(
        DEFAULT_UTILIZATION, gt=0.0, le=1.0,
        description="Fraction of atlas area the padded textures may claim before packing is refused."
    )
    min_images: int = Field(3, ge=0, description="Fewest usable images a run accepts.")
    unique: bool = Field(False, description="Deduplicate identical textures (not implemented, ignored).")

    @property
    def padding(self) -> int:
        """Total margin added to each texture dimension."""
        return self.expand * 2 + self.border

    @model_validator(mode='after')
    def validate_padding(self):
        if self.padding >= self.atlas_size:
            raise ValueError(
                f"padding ({self.padding}px) leaves no room in a {self.atlas_size}px atlas"
            )
        return self
